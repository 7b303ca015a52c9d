"""Testing utilities for code built on odata_simple_client.

Modules:
    factories: OData response bodies and a route-table mock client

Example:
    ```python
    import httpx

    from odata_simple_client import DataSource, ListRequest
    from odata_simple_client.testing import mock_client, odata_collection


    async def test_lists_documents():
        client = mock_client(
            {"https://oda.ft.dk/api/Dokument": httpx.Response(200, json=odata_collection([{"id": 1}]))}
        )
        datasource = DataSource(client, "oda.ft.dk", "/api")
        assert await datasource.fetch_paged(ListRequest("Dokument")) == [{"id": 1}]
    ```
"""

from odata_simple_client.testing.factories import mock_client, odata_collection, odata_entity

__all__ = ["mock_client", "odata_collection", "odata_entity"]

"""OData Simple Client - async client for OData 3.0 services.

Build a request, hand it to a DataSource, get decoded objects back:
- ListRequest / GetRequest with $filter, $expand, $select, $orderby, $top, $skip
- Transparent walking of paged collections via next-links
- A closed error taxonomy rooted at ODataError
- Optional client-side token-bucket rate limiting

Example:
    ```python
    from odata_simple_client import DataSource, GetRequest
    from odata_simple_client.transport import create_client

    async with create_client() as client:
        datasource = DataSource(client, "oda.ft.dk", "/api")
        dokument = await datasource.fetch(GetRequest("Dokument", 24))
        print(dokument["titel"])
    ```
"""

from odata_simple_client.config import DataSourceConfig, SettingsResolver
from odata_simple_client.datasource import DataSource
from odata_simple_client.errors import (
    ConstructionError,
    DecodeError,
    HttpStatusError,
    ODataError,
    PaginationError,
    TransportError,
    UrlConstructionError,
)
from odata_simple_client.pagination import Page
from odata_simple_client.query import (
    Comparison,
    Direction,
    Format,
    InlineCount,
    QueryClause,
    QueryOption,
    format_literal,
)
from odata_simple_client.ratelimit import RateLimiter, TokenBucketRateLimiter
from odata_simple_client.request import GetRequest, ListRequest, Request

__version__ = "0.1.0"

__all__ = [
    "Comparison",
    "ConstructionError",
    "DataSource",
    "DataSourceConfig",
    "DecodeError",
    "Direction",
    "Format",
    "GetRequest",
    "HttpStatusError",
    "InlineCount",
    "ListRequest",
    "ODataError",
    "Page",
    "PaginationError",
    "QueryClause",
    "QueryOption",
    "RateLimiter",
    "Request",
    "SettingsResolver",
    "TokenBucketRateLimiter",
    "TransportError",
    "UrlConstructionError",
    "__version__",
    "format_literal",
]

"""Factory for HTTP clients suited to OData services."""

import logging

import httpx

from odata_simple_client.transport.error_logging import ErrorLoggingTransport

logger = logging.getLogger(__name__)

# Headers sent with every request. OData 3.0 services negotiate the
# protocol version through the DataServiceVersion pair.
ODATA_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "DataServiceVersion": "3.0",
    "MaxDataServiceVersion": "3.0",
}


def create_client(
    *,
    timeout: float = 30.0,
    log_errors: bool = True,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` for talking to an OData service.

    The caller owns the returned client and is responsible for closing it.

    Args:
        timeout: Request timeout in seconds (default: 30)
        log_errors: Wrap the transport in :class:`ErrorLoggingTransport`
        headers: Extra headers merged over :data:`ODATA_HEADERS`
        transport: Base transport (default: ``httpx.AsyncHTTPTransport()``)

    Example:
        ```python
        async with create_client(timeout=10) as client:
            datasource = DataSource(client, "oda.ft.dk", "/api")
        ```
    """
    base_transport = transport or httpx.AsyncHTTPTransport()
    if log_errors:
        base_transport = ErrorLoggingTransport(wrapped_transport=base_transport)

    merged_headers = {**ODATA_HEADERS, **(headers or {})}
    logger.debug(f"Creating OData client (timeout={timeout}s, log_errors={log_errors})")
    return httpx.AsyncClient(
        transport=base_transport,
        timeout=timeout,
        headers=merged_headers,
    )

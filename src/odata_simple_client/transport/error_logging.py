"""Transport wrapper that logs failed OData requests.

```python
from odata_simple_client.transport.error_logging import ErrorLoggingTransport
import httpx

transport = ErrorLoggingTransport(wrapped_transport=httpx.AsyncHTTPTransport())

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://oda.ft.dk/api/Dokument(24)")
```

Responses and exceptions pass through unchanged; classification into the
error taxonomy happens in the DataSource.
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class ErrorLoggingTransport(httpx.AsyncBaseTransport):
    """Log non-2xx responses and transport failures of a wrapped transport.

    Non-2xx responses are logged at WARNING with method, URL and status.
    The body is not touched here: it belongs to the client, which reads and
    closes the stream. The OData error message is carried by the
    :class:`~odata_simple_client.errors.HttpStatusError` the DataSource raises.
    Transport exceptions are logged at ERROR and re-raised.

    Args:
        wrapped_transport: The underlying transport to wrap
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request and log the outcome if it failed."""
        try:
            response = await self._wrapped_transport.handle_async_request(request)
        except httpx.TransportError as e:
            logger.error(f"Request {request.method} {request.url} failed: {e!r}")
            raise

        if response.status_code >= 400:
            logger.warning(f"Request {request.method} {request.url} failed with {response.status_code}")

        return response

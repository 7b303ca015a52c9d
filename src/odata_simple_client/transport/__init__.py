"""Transport layer helpers.

Modules:
    error_logging: Transport wrapper that logs failed requests
    factory: Factory function for an OData-ready ``httpx.AsyncClient``

Example:
    ```python
    from odata_simple_client.transport import create_client

    async with create_client(timeout=10) as client:
        ...
    ```
"""

from odata_simple_client.transport.error_logging import ErrorLoggingTransport
from odata_simple_client.transport.factory import ODATA_HEADERS, create_client

__all__ = ["ODATA_HEADERS", "ErrorLoggingTransport", "create_client"]

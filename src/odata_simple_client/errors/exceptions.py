"""Structured exceptions for OData client errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from odata_simple_client.errors.models import ODataErrorDetail


class ODataError(Exception):
    """Base exception for every error raised by this library."""

    pass


class ConstructionError(ODataError):
    """Invalid host, base path, request or configuration.

    Raised synchronously, before any network activity.
    """

    pass


class SettingNotFoundError(ConstructionError):
    """Raised when a required configuration setting cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class UrlConstructionError(ODataError):
    """The assembled URL failed syntactic validation."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class TransportError(ODataError):
    """The underlying HTTP call failed (DNS, connection, TLS, timeout).

    The transport's own exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class HttpStatusError(ODataError):
    """Response status outside the 2xx range.

    The body is kept as diagnostic context and is not parsed further
    beyond the OData error detail.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        response: "httpx.Response | None" = None,
        body: str = "",
        error_detail: "ODataErrorDetail | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.body = body
        self.error_detail = error_detail


class ClientError(HttpStatusError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(HttpStatusError):
    """5xx server errors."""

    pass


class DecodeError(ODataError):
    """Body is not valid JSON, lacks the expected envelope, or does not fit the target type."""

    def __init__(self, message: str, body: str | None = None):
        super().__init__(message)
        self.body = body


class PaginationError(ODataError):
    """A next-link is present but cannot be followed."""

    def __init__(self, message: str, next_link: object = None):
        super().__init__(message)
        self.next_link = next_link

"""Error handling utilities for HTTP responses."""

import httpx

from odata_simple_client.errors.exceptions import (
    BadRequestError,
    ClientError,
    ForbiddenError,
    HttpStatusError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)
from odata_simple_client.errors.models import ODataErrorDetail


def raise_for_status(response: httpx.Response) -> None:
    """Raise appropriate exception for non-2xx responses.

    Parses the OData error object if present, otherwise uses the
    response text as the message.

    Args:
        response: HTTP response object

    Raises:
        HttpStatusError subclass based on status code
    """
    if response.is_success:
        return

    error_detail = ODataErrorDetail.from_response(response)

    status_code = response.status_code

    exception_map = {
        400: BadRequestError,
        401: UnauthorizedError,
        403: ForbiddenError,
        404: NotFoundError,
        429: RateLimitError,
    }

    if status_code in exception_map:
        exc_class = exception_map[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = HttpStatusError

    body = response.text

    if error_detail:
        message = f"HTTP {status_code}: {error_detail.to_exception_message()}"
    else:
        snippet = body[:200]
        message = f"HTTP {status_code}: {snippet}" if snippet else f"HTTP {status_code}"

    if exc_class == RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                # HTTP-date form or garbage, leave as None
                retry_after = None
        raise exc_class(
            message=message,
            retry_after=retry_after,
            status_code=status_code,
            response=response,
            body=body,
            error_detail=error_detail,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        body=body,
        error_detail=error_detail,
    )

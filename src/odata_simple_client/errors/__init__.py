"""Error taxonomy and OData error body parsing."""

from odata_simple_client.errors.exceptions import (
    BadRequestError,
    ClientError,
    ConstructionError,
    DecodeError,
    ForbiddenError,
    HttpStatusError,
    NotFoundError,
    ODataError,
    PaginationError,
    RateLimitError,
    ServerError,
    SettingNotFoundError,
    TransportError,
    UnauthorizedError,
    UrlConstructionError,
)
from odata_simple_client.errors.handler import raise_for_status
from odata_simple_client.errors.models import ODataErrorDetail

__all__ = [
    "BadRequestError",
    "ClientError",
    "ConstructionError",
    "DecodeError",
    "ForbiddenError",
    "HttpStatusError",
    "NotFoundError",
    "ODataError",
    "ODataErrorDetail",
    "PaginationError",
    "RateLimitError",
    "ServerError",
    "SettingNotFoundError",
    "TransportError",
    "UnauthorizedError",
    "UrlConstructionError",
    "raise_for_status",
]

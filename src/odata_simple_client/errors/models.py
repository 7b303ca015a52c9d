"""OData error body models."""

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class ODataErrorDetail:
    """Error object returned by an OData 3.0 service.

    JSON light services answer with ``{"odata.error": {...}}``, verbose
    services with ``{"error": {...}}``. Both carry the same members.
    """

    code: str | None = None  # Service-defined error code
    message: str | None = None  # Human-readable message
    lang: str | None = None  # Language of the message
    inner_error: dict[str, Any] | None = None  # Service-specific debugging detail

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ODataErrorDetail | None":
        """Parse the OData error object from an HTTP response.

        Args:
            response: HTTP response object

        Returns:
            ODataErrorDetail object or None if the body is not an OData error
        """
        try:
            data = response.json()
        except (ValueError, TypeError, AttributeError):
            # JSON decode errors, non-text bodies, or missing .json() method
            return None

        if not isinstance(data, dict):
            return None

        error = data.get("odata.error", data.get("error"))
        if not isinstance(error, dict):
            return None

        code = error.get("code")
        message = error.get("message")
        lang = None

        # OData nests the text as {"lang": ..., "value": ...}
        if isinstance(message, dict):
            lang = message.get("lang")
            message = message.get("value")

        inner_error = error.get("innererror")

        return cls(
            code=str(code) if code not in (None, "") else None,
            message=str(message) if message not in (None, "") else None,
            lang=lang,
            inner_error=inner_error if isinstance(inner_error, dict) else None,
        )

    def to_exception_message(self) -> str:
        """Convert the error detail to an exception message."""
        if self.code and self.message:
            return f"{self.code}: {self.message}"
        return self.message or self.code or "Unknown OData error"

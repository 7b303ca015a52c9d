"""Paged collection envelopes and next-link handling.

OData 3.0 services return collections in one of two JSON dialects:

- verbose: ``{"d": {"results": [...], "__next": "...", "__count": "42"}}``,
  sometimes without the ``d`` wrapper
- JSON light: ``{"odata.metadata": "...", "value": [...],
  "odata.nextLink": "...", "odata.count": "42"}``

:func:`parse_page` accepts both and returns an undecoded :class:`Page`.
:func:`resolve_next_link` turns the link into the absolute URL of the
following page.

A service whose next-links form a cycle makes an unbounded walk run
forever; pass ``max_pages`` to cap it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import httpx

from odata_simple_client.errors.exceptions import DecodeError, PaginationError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class Page(Generic[T]):
    """One page of a collection response."""

    value: list[T] = field(default_factory=list)
    next_link: str | None = None
    count: int | None = None
    metadata: str | None = None

    def map(self, decode: Callable[[T], U]) -> "Page[U]":
        """Return a page with every element passed through ``decode``."""
        return Page(
            value=[decode(item) for item in self.value],
            next_link=self.next_link,
            count=self.count,
            metadata=self.metadata,
        )


def unwrap_envelope(payload: Any) -> Any:
    """Strip the verbose ``{"d": ...}`` wrapper if present."""
    if isinstance(payload, dict) and len(payload) == 1 and "d" in payload:
        return payload["d"]
    return payload


def _parse_count(raw: Any, body: str | None) -> int | None:
    if raw is None:
        return None
    # verbose JSON sends the count as a string
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise DecodeError(f"Invalid inline count: {raw!r}", body=body) from None


def parse_page(payload: Any, body: str | None = None) -> Page[Any]:
    """Extract results and paging metadata from a decoded JSON body.

    Args:
        payload: The parsed JSON document
        body: Raw body text, attached to errors for diagnostics

    Returns:
        Page whose ``value`` holds the raw JSON elements

    Raises:
        DecodeError: If the payload is not a recognized collection envelope
    """
    data = unwrap_envelope(payload)

    # OData 1.0 verbose: {"d": [...]}
    if isinstance(data, list):
        return Page(value=data)

    if not isinstance(data, dict):
        raise DecodeError(f"Expected a collection envelope, got {type(data).__name__}", body=body)

    if "results" in data:
        results = data["results"]
        next_link = data.get("__next")
        count = _parse_count(data.get("__count"), body)
        metadata = None
    elif "value" in data:
        results = data["value"]
        next_link = data.get("odata.nextLink")
        count = _parse_count(data.get("odata.count"), body)
        metadata = data.get("odata.metadata")
    else:
        raise DecodeError("Collection envelope has neither 'results' nor 'value'", body=body)

    if not isinstance(results, list):
        raise DecodeError(f"Collection results must be an array, got {type(results).__name__}", body=body)

    if next_link is not None and not isinstance(next_link, str):
        raise PaginationError(f"Next link must be a string, got {type(next_link).__name__}", next_link=next_link)

    return Page(value=results, next_link=next_link, count=count, metadata=metadata)


_DEFAULT_PORTS = {"http": 80, "https": 443}


def _authority(url: httpx.URL) -> tuple[str, int | None]:
    # httpx normalizes default ports to None
    return url.host, url.port or _DEFAULT_PORTS.get(url.scheme)


def resolve_next_link(current_url: httpx.URL, next_link: str, host: str) -> httpx.URL:
    """Resolve a next-link against the URL of the page that carried it.

    The link is followed exactly as given; it is never re-derived from the
    original request. It must stay on the service's authority: same host
    and same port, where an omitted port means the scheme's default.

    Raises:
        PaginationError: If the link is blank, unparseable, not http(s), or
            points at a different host or port than the service.
    """
    if not next_link.strip():
        raise PaginationError("Next link is blank", next_link=next_link)

    try:
        url = current_url.join(next_link)
    except httpx.InvalidURL as e:
        raise PaginationError(f"Invalid next link {next_link!r}: {e}", next_link=next_link) from e

    if url.scheme not in ("http", "https"):
        raise PaginationError(f"Next link {next_link!r} is not an http(s) URL", next_link=next_link)

    expected = httpx.URL(f"{current_url.scheme}://{host}")
    if _authority(url) != _authority(expected):
        raise PaginationError(
            f"Next link {next_link!r} points at {url.netloc.decode('ascii')!r}, "
            f"outside the service on {expected.netloc.decode('ascii')!r}",
            next_link=next_link,
        )

    logger.debug(f"Resolved next link {next_link} -> {url}")
    return url

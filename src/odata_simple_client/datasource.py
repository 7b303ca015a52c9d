"""DataSource: the connection to one OData service.

Example, fetching a single ``Dokument`` from the Danish Parliament's API:

```python
from dataclasses import dataclass

from odata_simple_client import DataSource, GetRequest, ListRequest
from odata_simple_client.transport import create_client


@dataclass
class Dokument:
    id: int
    titel: str

    @classmethod
    def from_json(cls, data):
        return cls(id=data["id"], titel=data["titel"])


async with create_client() as client:
    datasource = DataSource(client, "oda.ft.dk", "/api")

    dokument = await datasource.fetch(GetRequest("Dokument", 24), Dokument.from_json)

    # walks every page
    dokumenter = await datasource.fetch_paged(ListRequest("Dokument").top(100), Dokument.from_json)
```
"""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

import httpx

from odata_simple_client.config import DataSourceConfig
from odata_simple_client.errors.exceptions import (
    ConstructionError,
    DecodeError,
    TransportError,
)
from odata_simple_client.errors.handler import raise_for_status
from odata_simple_client.pagination import Page, parse_page, resolve_next_link, unwrap_envelope
from odata_simple_client.ratelimit import RateLimiter, TokenBucketRateLimiter
from odata_simple_client.request import Request
from odata_simple_client.transport.factory import ODATA_HEADERS, create_client
from odata_simple_client.url import SUPPORTED_SCHEMES, build_url, normalize_base_path, validate_host

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[Any], T]

# Exceptions a decoder may raise for input of the wrong shape.
DECODE_EXCEPTIONS = (TypeError, ValueError, KeyError, AttributeError)


def _identity(value: Any) -> Any:
    return value


class DataSource:
    """A target OData service.

    The HTTP client is shared, not owned: the DataSource never closes it,
    and one DataSource may serve many concurrent tasks as long as the client
    and rate limiter are safe for concurrent use (``httpx.AsyncClient`` and
    :class:`TokenBucketRateLimiter` are).

    Args:
        client: ``httpx.AsyncClient`` (or compatible) used for every request
        host: Service authority, e.g. ``"oda.ft.dk"``
        base_path: Path of the service root, e.g. ``"/api"``
        rate_limiter: Optional limiter awaited before every request
        scheme: ``"https"`` (default) or ``"http"``

    Raises:
        ConstructionError: If host, base path or scheme is invalid
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        host: str,
        base_path: str | None = None,
        *,
        rate_limiter: RateLimiter | None = None,
        scheme: str = "https",
    ) -> None:
        if scheme not in SUPPORTED_SCHEMES:
            raise ConstructionError(f"Unsupported scheme: {scheme!r}")

        self.client = client
        self.scheme = scheme
        self.host = validate_host(host)
        self.base_path = normalize_base_path(base_path)
        self.rate_limiter = rate_limiter

        root = f"{self.scheme}://{self.host}{self.base_path or '/'}"
        try:
            self.root_url = httpx.URL(root)
        except httpx.InvalidURL as e:
            raise ConstructionError(f"Host and base path do not form a valid URL: {root!r}") from e

    @classmethod
    def from_config(cls, config: DataSourceConfig, client: httpx.AsyncClient | None = None) -> "DataSource":
        """Build a DataSource from a :class:`DataSourceConfig`.

        When no client is given one is created with :func:`create_client`;
        the caller is still responsible for closing ``datasource.client``.
        """
        rate_limiter = TokenBucketRateLimiter(config.rate_limit) if config.rate_limit else None
        return cls(
            client if client is not None else create_client(timeout=config.timeout),
            config.host,
            config.base_path,
            rate_limiter=rate_limiter,
            scheme=config.scheme,
        )

    def __repr__(self) -> str:
        return f"DataSource({str(self.root_url)!r})"

    def url_for(self, request: Request) -> httpx.URL:
        """The absolute URL ``request`` resolves to on this service."""
        return build_url(self.scheme, self.host, self.base_path, request)

    async def _get(self, url: httpx.URL) -> httpx.Response:
        if self.rate_limiter is not None:
            await self.rate_limiter.until_ready()

        logger.debug(f"Fetching {url}")
        try:
            response = await self.client.get(url, headers=ODATA_HEADERS)
        except httpx.RequestError as e:
            raise TransportError(f"Request to {url} failed: {e!r}", url=str(url)) from e

        raise_for_status(response)
        return response

    def _parse_json(self, response: httpx.Response, url: httpx.URL) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not valid JSON: {e}", body=response.text) from e

    def _decode(self, decode: Decoder[T], value: Any, body: str) -> T:
        try:
            return decode(value)
        except DECODE_EXCEPTIONS as e:
            raise DecodeError(f"Could not decode response: {e!r}", body=body) from e

    async def fetch(self, request: Request, decode: Decoder[T] | None = None) -> T:
        """Fetch a single JSON object, typically with a :class:`GetRequest`.

        A verbose ``{"d": {...}}`` wrapper is removed before decoding, so
        wrapped and unwrapped bodies decode identically.

        Args:
            request: The request to send
            decode: Turns the JSON object into the caller's type
                (default: return the ``dict`` as is)

        Raises:
            UrlConstructionError: If the URL cannot be assembled
            TransportError: If the HTTP call fails
            HttpStatusError: If the status is not 2xx
            DecodeError: If the body is not a JSON object or ``decode`` rejects it
        """
        url = self.url_for(request)
        response = await self._get(url)
        payload = unwrap_envelope(self._parse_json(response, url))

        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON object, got {type(payload).__name__}", body=response.text)

        return self._decode(decode or _identity, payload, response.text)

    async def _fetch_page_at(self, url: httpx.URL, decode: Decoder[T]) -> Page[T]:
        response = await self._get(url)
        page = parse_page(self._parse_json(response, url), body=response.text)
        try:
            return page.map(decode)
        except DECODE_EXCEPTIONS as e:
            raise DecodeError(f"Could not decode collection element: {e!r}", body=response.text) from e

    async def fetch_page(self, request: Request, decode: Decoder[T] | None = None) -> Page[T]:
        """Fetch one page of a collection without following the next-link.

        The returned :class:`Page` carries ``next_link`` and, when requested
        with ``inline_count``, the total ``count``.
        """
        return await self._fetch_page_at(self.url_for(request), decode or _identity)

    async def iter_pages(
        self,
        request: Request,
        decode: Decoder[T] | None = None,
        *,
        max_pages: int | None = None,
    ) -> AsyncIterator[Page[T]]:
        """Yield decoded pages, following next-links until there are none.

        Pages are fetched strictly one after another. Every next-link is
        followed exactly as the service sent it.

        Args:
            request: The request for the first page
            decode: Applied to every element of every page
            max_pages: Stop after this many pages (default: no limit)
        """
        if max_pages is not None and max_pages < 1:
            raise ConstructionError(f"max_pages must be at least 1, got {max_pages}")

        decode = decode or _identity
        url = self.url_for(request)
        fetched = 0

        while True:
            page = await self._fetch_page_at(url, decode)
            fetched += 1
            yield page

            if page.next_link is None:
                return
            if max_pages is not None and fetched >= max_pages:
                logger.debug(f"Stopping after {fetched} pages, next link {page.next_link} not followed")
                return

            url = resolve_next_link(url, page.next_link, self.host)

    async def fetch_paged(
        self,
        request: Request,
        decode: Decoder[T] | None = None,
        *,
        max_pages: int | None = None,
    ) -> list[T]:
        """Fetch every page of a collection and concatenate the elements.

        Elements keep their order within a page and pages keep their order.
        Any error aborts the whole walk; no partial list is returned.

        Without ``max_pages`` the walk ends only when a page has no
        next-link, so a service that cycles its links never terminates.

        Raises:
            UrlConstructionError: If the URL cannot be assembled
            TransportError: If any HTTP call fails
            HttpStatusError: If any page has a non-2xx status
            DecodeError: If any page or element cannot be decoded
            PaginationError: If a next-link cannot be followed
        """
        items: list[T] = []
        pages = 0
        async for page in self.iter_pages(request, decode, max_pages=max_pages):
            items.extend(page.value)
            pages += 1

        logger.debug(f"Fetched {len(items)} entities of {request.entity_set} across {pages} pages")
        return items

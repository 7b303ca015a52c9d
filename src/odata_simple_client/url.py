"""URL assembly for OData requests."""

import re
from typing import TYPE_CHECKING

import httpx

from odata_simple_client.errors.exceptions import ConstructionError, UrlConstructionError
from odata_simple_client.query import to_query_string

if TYPE_CHECKING:
    from odata_simple_client.request import Request

SUPPORTED_SCHEMES = frozenset({"http", "https"})

_LABEL = r"[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?"
_HOST_RE = re.compile(rf"^(?:{_LABEL})(?:\.{_LABEL})*\.?$")
_PORT_RE = re.compile(r"^[0-9]{1,5}$")
_AUTHORITY_FORBIDDEN = re.compile(r"[/?#@\s\\]")
_PATH_FORBIDDEN = re.compile(r"[?#\s\\]")


def validate_host(host: str) -> str:
    """Check a ``host[:port]`` authority and return it unchanged.

    Hostnames may contain underscores. Internationalized names such as
    ``bücher.example`` are accepted when they have a valid IDNA form, and
    bracketed IPv6 literals are checked by httpx.

    Raises:
        ConstructionError: If the host is empty, carries a scheme, path or
            userinfo, or is not a syntactically valid hostname.
    """
    if not isinstance(host, str) or not host:
        raise ConstructionError("Host must be a non-empty string")
    if _AUTHORITY_FORBIDDEN.search(host):
        raise ConstructionError(f"Invalid host: {host!r}")

    hostname, port = host, None
    if not host.endswith("]") and host.count(":") == 1:
        hostname, port = host.split(":")
    elif host.startswith("[") and "]:" in host:
        hostname, port = host.rsplit(":", 1)

    if port is not None and (not _PORT_RE.match(port) or not 0 < int(port) < 65536):
        raise ConstructionError(f"Invalid port in host: {host!r}")

    try:
        # raw_host is the IDNA-encoded ASCII form
        raw_host = httpx.URL(f"http://{hostname}").raw_host.decode("ascii")
    except httpx.InvalidURL as e:
        raise ConstructionError(f"Invalid host: {host!r}: {e}") from e

    is_ipv6 = hostname.startswith("[") and hostname.endswith("]")
    if not is_ipv6 and not _HOST_RE.match(raw_host):
        raise ConstructionError(f"Invalid host: {host!r}")
    return host


def normalize_base_path(base_path: str | None) -> str:
    """Normalize a base path to ``""`` or ``/segment[/segment...]``.

    ``None``, ``""`` and ``"/"`` all mean the service lives at the root.
    Leading and trailing slashes are normalized so that joining with a
    resource path never produces ``//``.

    Raises:
        ConstructionError: If the path contains a query, fragment,
            backslash or whitespace.
    """
    if base_path is None:
        return ""
    if not isinstance(base_path, str):
        raise ConstructionError(f"Base path must be a string, got {type(base_path).__name__}")
    if _PATH_FORBIDDEN.search(base_path):
        raise ConstructionError(f"Invalid base path: {base_path!r}")
    stripped = base_path.strip("/")
    if not stripped:
        return ""
    if "//" in stripped:
        raise ConstructionError(f"Base path contains an empty segment: {base_path!r}")
    return "/" + stripped


def join_path(base_path: str, resource_path: str) -> str:
    """Join with exactly one ``/`` between base and resource path."""
    return base_path.rstrip("/") + "/" + resource_path.lstrip("/")


def build_url(scheme: str, host: str, base_path: str, request: "Request") -> httpx.URL:
    """Assemble the absolute URL for ``request``.

    Query clauses appear in the order the caller added them; the ``?`` is
    omitted when there are none.

    Raises:
        UrlConstructionError: If the assembled string does not parse as an
            absolute URL on the expected host.
    """
    url = f"{scheme}://{host}{join_path(base_path, request.resource_path())}"
    query = to_query_string(request.clauses())
    if query:
        url = f"{url}?{query}"

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise UrlConstructionError(f"Invalid URL {url!r}: {e}", url=url) from e

    if parsed.scheme not in SUPPORTED_SCHEMES or not parsed.host:
        raise UrlConstructionError(f"Invalid URL {url!r}: not an absolute http(s) URL", url=url)
    return parsed

"""Tests for URL assembly."""

import pytest

from odata_simple_client.errors.exceptions import ConstructionError, UrlConstructionError
from odata_simple_client.request import GetRequest, ListRequest
from odata_simple_client.url import build_url, join_path, normalize_base_path, validate_host


@pytest.mark.unit
@pytest.mark.parametrize("base_path", [None, "", "/"])
def test_empty_base_path_has_no_double_slash(base_path):
    url = build_url("https", "oda.ft.dk", normalize_base_path(base_path), ListRequest("Dokument"))

    assert str(url) == "https://oda.ft.dk/Dokument"
    assert url.path == "/Dokument"


@pytest.mark.unit
@pytest.mark.parametrize("base_path", ["/api", "/api/", "api", "api/", "//api//"])
def test_base_path_joins_with_exactly_one_slash(base_path):
    url = build_url("https", "oda.ft.dk", normalize_base_path(base_path), ListRequest("Dokument"))

    assert url.path == "/api/Dokument"


@pytest.mark.unit
def test_nested_base_path():
    url = build_url("https", "example.com", normalize_base_path("/odata/v3/"), ListRequest("Orders"))

    assert url.path == "/odata/v3/Orders"


@pytest.mark.unit
def test_get_request_url():
    url = build_url("https", "oda.ft.dk", "/api", GetRequest("Dokument", 24))

    assert str(url) == "https://oda.ft.dk/api/Dokument(24)"


@pytest.mark.unit
def test_query_clauses_follow_caller_order():
    request = ListRequest("Dokument").filter("titel eq 'X'").top(2).skip(3)

    url = build_url("https", "oda.ft.dk", "/api", request)

    assert str(url) == "https://oda.ft.dk/api/Dokument?$filter=titel%20eq%20%27X%27&$top=2&$skip=3"


@pytest.mark.unit
def test_http_scheme_and_port():
    url = build_url("http", "localhost:8080", "", GetRequest("Items", "a"))

    assert str(url) == "http://localhost:8080/Items('a')"


@pytest.mark.unit
def test_corrupted_host_is_reported_as_url_error():
    """Hosts are validated on construction; a corrupted one still fails loudly."""
    with pytest.raises(UrlConstructionError) as exc_info:
        build_url("https", "oda.ft.dk:abc", "", ListRequest("Dokument"))

    assert exc_info.value.url is not None


@pytest.mark.unit
def test_join_path():
    assert join_path("", "/Dokument") == "/Dokument"
    assert join_path("/api/", "/Dokument") == "/api/Dokument"
    assert join_path("/api", "Dokument") == "/api/Dokument"


@pytest.mark.unit
@pytest.mark.parametrize(
    "host",
    [
        "oda.ft.dk",
        "localhost",
        "localhost:8080",
        "127.0.0.1",
        "[::1]",
        "[::1]:8443",
        "odata_service.internal",
        "bücher.example",
        "bücher.example:8080",
    ],
)
def test_valid_hosts(host):
    assert validate_host(host) == host


@pytest.mark.unit
@pytest.mark.parametrize(
    "host",
    [
        "",
        "https://oda.ft.dk",
        "oda.ft.dk/api",
        "oda ft.dk",
        "user@oda.ft.dk",
        "oda.ft.dk:",
        "oda.ft.dk:99999",
        "oda.ft.dk?x=1",
        "-bad.example.com",
        "[::1",
        "[zz]",
        ":8080",
    ],
)
def test_invalid_hosts(host):
    with pytest.raises(ConstructionError):
        validate_host(host)


@pytest.mark.unit
@pytest.mark.parametrize("base_path", ["/api?x=1", "/api#frag", "/my api", "/a//b", "\\api"])
def test_invalid_base_paths(base_path):
    with pytest.raises(ConstructionError):
        normalize_base_path(base_path)

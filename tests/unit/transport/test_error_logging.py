"""Tests for the error logging transport."""

import logging

import httpx
import pytest

from odata_simple_client.transport.error_logging import ErrorLoggingTransport


class StreamedBody(httpx.AsyncByteStream):
    """A body that is only read when the client consumes the stream."""

    def __init__(self, body: bytes):
        self._body = body
        self.closed = False

    async def __aiter__(self):
        yield self._body

    async def aclose(self) -> None:
        self.closed = True


class TestErrorLoggingTransport:
    """Responses pass through unchanged; failures are logged."""

    @pytest.mark.unit
    async def test_success_is_not_logged(self, caplog):
        mock_transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"d": {"id": 1}}))
        transport = ErrorLoggingTransport(wrapped_transport=mock_transport)

        with caplog.at_level(logging.WARNING, logger="odata_simple_client"):
            async with httpx.AsyncClient(transport=transport) as client:
                response = await client.get("https://oda.ft.dk/api/Dokument(1)")

        assert response.status_code == 200
        assert response.json() == {"d": {"id": 1}}
        assert caplog.records == []

    @pytest.mark.unit
    async def test_error_status_is_logged(self, caplog):
        transport = ErrorLoggingTransport(
            wrapped_transport=httpx.MockTransport(lambda request: httpx.Response(503, text="Service Unavailable"))
        )

        with caplog.at_level(logging.WARNING, logger="odata_simple_client"):
            async with httpx.AsyncClient(transport=transport) as client:
                response = await client.get("https://oda.ft.dk/api/Dokument")

        assert response.status_code == 503
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING
        assert "GET https://oda.ft.dk/api/Dokument failed with 503" in caplog.records[0].getMessage()

    @pytest.mark.unit
    async def test_error_body_is_left_to_the_client(self):
        body = StreamedBody(b'{"odata.error": {"code": "", "message": {"lang": "en-US", "value": "No such Dokument"}}}')

        def mock_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, headers={"Content-Type": "application/json"}, stream=body)

        transport = ErrorLoggingTransport(wrapped_transport=httpx.MockTransport(mock_handler))

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://oda.ft.dk/api/Dokument(999)")

        assert response.json()["odata.error"]["message"]["value"] == "No such Dokument"
        assert body.closed
        # only set once the client itself has closed the stream
        assert response.elapsed.total_seconds() >= 0

    @pytest.mark.unit
    async def test_transport_errors_are_logged_and_reraised(self, caplog):
        def mock_handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        transport = ErrorLoggingTransport(wrapped_transport=httpx.MockTransport(mock_handler))

        with caplog.at_level(logging.ERROR, logger="odata_simple_client"):
            async with httpx.AsyncClient(transport=transport) as client:
                with pytest.raises(httpx.ConnectError):
                    await client.get("https://oda.ft.dk/api/Dokument")

        assert caplog.records[0].levelno == logging.ERROR
        assert "Connection refused" in caplog.records[0].getMessage()

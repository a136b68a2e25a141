"""Unit tests for the comparison backend client."""

import asyncio

import httpx
import pytest

from clause_compare.backend.client import BackendClient, decode_body
from clause_compare.models.enums import ChangeType
from clause_compare.models.upload import ParsedUpload, UploadedDocument
from clause_compare.parsers.exceptions import BackendUnavailableError, ComparisonRequestError


def _parsed_upload(compare_count: int = 1) -> ParsedUpload:
    return ParsedUpload(
        baseline=UploadedDocument("baselineFile", b"base text", "base.txt", "text/plain"),
        compares=[
            UploadedDocument("compareFiles", f"cmp {i}".encode(), f"cmp{i}.txt", "text/plain")
            for i in range(compare_count)
        ],
    )


def _run(client: BackendClient, coro):
    async def runner():
        try:
            return await coro
        finally:
            await client.aclose()
    return asyncio.run(runner())


class RecordingHandler:
    """MockTransport handler that records requests and replies with a fixed response."""

    def __init__(self, status_code=200, json=None, text=None):
        self.status_code = status_code
        self.json = json
        self.text = text
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json)
        return httpx.Response(self.status_code, text=self.text or "")


class TestDecodeBody:
    """Test response body decoding."""

    def test_json_body(self):
        assert decode_body('{"a": 1}') == ({"a": 1}, True)

    def test_non_json_body(self):
        assert decode_body("Bad Gateway") == ({"raw": "Bad Gateway"}, False)
        assert decode_body("") == ({"raw": ""}, False)

    def test_non_finite_constants_are_raw(self):
        """Test that NaN and Infinity are not accepted as JSON."""
        assert decode_body('{"score": NaN}') == ({"raw": '{"score": NaN}'}, False)
        assert decode_body("[Infinity]") == ({"raw": "[Infinity]"}, False)


class TestForwardUpload:
    """Test the proxy path of the backend client."""

    def test_forwards_multipart_to_backend(self, settings):
        """Test URL, field names and file names of the relayed request."""
        handler = RecordingHandler(json={"ok": True})
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        upstream = _run(client, client.forward_upload(_parsed_upload(compare_count=2)))

        assert upstream.status_code == 200
        assert upstream.data == {"ok": True}
        request = handler.requests[0]
        assert str(request.url) == "http://backend.test/api/ai/compareDocuments"
        assert request.method == "POST"
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert "authorization" not in request.headers
        body = request.content
        assert body.count(b'name="baselineFile"') == 1
        assert body.count(b'name="compareFiles"') == 2
        assert b'filename="base.txt"' in body
        assert b"cmp 1" in body

    def test_drops_third_compare_file(self, settings):
        """Test that at most two compareFiles are forwarded."""
        handler = RecordingHandler(json={})
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        _run(client, client.forward_upload(_parsed_upload(compare_count=3)))

        assert handler.requests[0].content.count(b'name="compareFiles"') == 2

    def test_preserves_error_status(self, settings):
        """Test that backend error statuses are passed through."""
        handler = RecordingHandler(status_code=422, json={"error": "Unsupported file type"})
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        upstream = _run(client, client.forward_upload(_parsed_upload()))

        assert upstream.status_code == 422
        assert upstream.data == {"error": "Unsupported file type"}
        assert not upstream.ok

    def test_non_json_body_wrapped(self, settings):
        """Test that a non-JSON body comes back under "raw"."""
        handler = RecordingHandler(status_code=502, text="Bad Gateway")
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        upstream = _run(client, client.forward_upload(_parsed_upload()))

        assert upstream.status_code == 502
        assert upstream.data == {"raw": "Bad Gateway"}
        assert not upstream.is_json

    def test_unreachable_backend(self, settings):
        """Test that connection failures raise BackendUnavailableError."""
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = BackendClient(settings, transport=httpx.MockTransport(refuse))

        with pytest.raises(BackendUnavailableError) as exc_info:
            _run(client, client.forward_upload(_parsed_upload()))

        assert exc_info.value.url == "http://backend.test/api/ai/compareDocuments"


class TestCompareDocuments:
    """Test the viewer path of the backend client."""

    def test_sends_bearer_token_and_parses(self, settings, comparison_payload):
        """Test the authenticated request and the parsed response."""
        handler = RecordingHandler(json=comparison_payload)
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        response = _run(client, client.compare_documents(_parsed_upload(), "token-123"))

        request = handler.requests[0]
        assert str(request.url) == "http://api.test/api/ai/compareDocuments"
        assert request.headers["authorization"] == "Bearer token-123"
        assert response.results[0].primary_diff.change_type == ChangeType.MODIFIED

    def test_backend_error_message(self, settings):
        """Test that the backend's error message is surfaced."""
        handler = RecordingHandler(status_code=401, json={"error": "Invalid token"})
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ComparisonRequestError) as exc_info:
            _run(client, client.compare_documents(_parsed_upload(), "expired"))

        assert exc_info.value.message == "Invalid token"
        assert exc_info.value.status_code == 401

    def test_backend_error_without_message(self, settings):
        """Test the fallback message for errors without a body."""
        handler = RecordingHandler(status_code=500, text="")
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ComparisonRequestError) as exc_info:
            _run(client, client.compare_documents(_parsed_upload(), "tok"))

        assert exc_info.value.message == "Comparison failed (500)"

    def test_non_json_success_rejected(self, settings):
        """Test that a 200 with a non-JSON body is an error for the viewer."""
        handler = RecordingHandler(status_code=200, text="<html>login</html>")
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ComparisonRequestError):
            _run(client, client.compare_documents(_parsed_upload(), "tok"))

    def test_non_object_success_rejected(self, settings):
        """Test that a JSON array is rejected."""
        handler = RecordingHandler(status_code=200, json=[1, 2])
        client = BackendClient(settings, transport=httpx.MockTransport(handler))

        with pytest.raises(ComparisonRequestError) as exc_info:
            _run(client, client.compare_documents(_parsed_upload(), "tok"))

        assert exc_info.value.details["error_type"] == "ResponseFormatError"

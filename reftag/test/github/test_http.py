"""Tests for github/http.py - HTTP client abstraction."""

from __future__ import annotations

import io
import json
import urllib.error
import urllib.request
from email.message import Message

import pytest

from reftag.core.result import Err, Ok
from reftag.github.http import HttpClient, HttpError, MockHttpClient, RealHttpClient


# =============================================================================
# HttpError tests
# =============================================================================


class TestHttpError:
    """Tests for HttpError dataclass."""

    def test_str_with_status(self) -> None:
        error = HttpError(url="https://api.github.com/x", status=422, message="Reference already exists")
        assert str(error) == "HTTP 422: Reference already exists (https://api.github.com/x)"

    def test_str_without_status(self) -> None:
        """Network errors carry status 0."""
        error = HttpError(url="https://api.github.com/x", status=0, message="Timeout")
        assert str(error) == "Timeout (https://api.github.com/x)"

    def test_is_frozen(self) -> None:
        error = HttpError(url="u", status=404, message="Not Found")
        with pytest.raises(AttributeError):
            error.status = 500  # type: ignore[misc]


# =============================================================================
# MockHttpClient tests
# =============================================================================


class TestMockHttpClient:
    """Tests for MockHttpClient."""

    def test_is_http_client(self) -> None:
        assert isinstance(MockHttpClient(), HttpClient)

    def test_configured_response(self) -> None:
        client = MockHttpClient()
        client.set_response("GET", "https://api.example.com/refs", [{"ref": "refs/tags/v1"}])
        result = client.request_json("GET", "https://api.example.com/refs")
        assert result == Ok([{"ref": "refs/tags/v1"}])

    def test_configured_error(self) -> None:
        client = MockHttpClient()
        error = HttpError(url="u", status=500, message="boom")
        client.set_response("POST", "u", error)
        assert client.request_json("POST", "u", {"a": 1}) == Err(error)

    def test_unknown_url_is_404(self) -> None:
        result = MockHttpClient().request_json("GET", "https://nowhere")
        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_records_calls(self) -> None:
        client = MockHttpClient()
        client.request_json("PATCH", "u", {"sha": "abc"})
        assert client.calls == [("PATCH", "u", {"sha": "abc"})]


# =============================================================================
# RealHttpClient tests (urlopen patched)
# =============================================================================


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


class TestRealHttpClient:
    def test_is_http_client(self) -> None:
        assert isinstance(RealHttpClient("t"), HttpClient)

    def test_sends_token_and_json_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        seen: list[urllib.request.Request] = []

        def fake_urlopen(req: urllib.request.Request, **kwargs: object) -> _FakeResponse:
            seen.append(req)
            return _FakeResponse(b'{"ref": "refs/tags/v3"}')

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

        result = RealHttpClient("s3cret").request_json(
            "POST", "https://api.github.com/repos/o/r/git/refs", {"ref": "refs/tags/v3", "sha": "abc"}
        )

        assert result == Ok({"ref": "refs/tags/v3"})
        req = seen[0]
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer s3cret"
        assert req.get_header("Content-type") == "application/json"
        assert req.data is not None
        assert json.loads(req.data) == {"ref": "refs/tags/v3", "sha": "abc"}

    def test_empty_body_is_none(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: _FakeResponse(b""))
        assert RealHttpClient("t").request_json("DELETE", "https://x") == Ok(None)

    def test_http_error_uses_github_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: object) -> _FakeResponse:
            raise urllib.error.HTTPError(
                req.full_url,
                422,
                "Unprocessable Entity",
                Message(),
                io.BytesIO(b'{"message": "Reference already exists"}'),
            )

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        result = RealHttpClient("t").request_json("POST", "https://x", {})
        assert result == Err(HttpError(url="https://x", status=422, message="Reference already exists"))

    def test_network_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fake_urlopen(req: urllib.request.Request, **kwargs: object) -> _FakeResponse:
            raise urllib.error.URLError("connection refused")

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        result = RealHttpClient("t").request_json("GET", "https://x")
        assert result == Err(HttpError(url="https://x", status=0, message="connection refused"))

    def test_invalid_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(urllib.request, "urlopen", lambda req, **kw: _FakeResponse(b"<html>"))
        result = RealHttpClient("t").request_json("GET", "https://x")
        assert isinstance(result, Err)
        assert "JSON parse error" in result.error.message

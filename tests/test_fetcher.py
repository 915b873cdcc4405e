"""Tests for the default urllib transport."""

from __future__ import annotations

import gzip
import io
import urllib.error
from email.message import Message
from unittest.mock import MagicMock, patch

import pytest

from urlmd.fetcher import _NoRedirectHandler, _build_opener, _retry_delay, fetch_url
from urlmd.items import FetchedResponse

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _headers(**values: str) -> Message:
    msg = Message()
    for key, value in values.items():
        msg[key.replace("_", "-")] = value
    return msg


class _FakeHTTPResponse:
    def __init__(self, url: str, status: int, headers: Message, body: bytes) -> None:
        self._url = url
        self.status = status
        self.headers = headers
        self._body = body

    def geturl(self) -> str:
        return self._url

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _http_error(url: str, code: int, body: bytes = b"", **headers: str) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(url, code, "error", _headers(**headers), io.BytesIO(body))


def _opener(*outcomes):
    opener = MagicMock()
    opener.open.side_effect = list(outcomes)
    return opener


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestFetchUrl:
    def test_success(self):
        resp = _FakeHTTPResponse(
            "https://example.com/final", 200, _headers(Content_Type="text/html"), b"<p>hi</p>",
        )
        with patch("urlmd.fetcher._build_opener", return_value=_opener(resp)):
            result = fetch_url("https://example.com/")
        assert isinstance(result, FetchedResponse)
        assert result.status == 200
        assert result.url == "https://example.com/final"
        assert result.headers.get("content-type") == "text/html"
        assert result.read() == b"<p>hi</p>"

    def test_request_headers(self):
        resp = _FakeHTTPResponse("https://example.com/", 200, _headers(), b"")
        opener = _opener(resp)
        with patch("urlmd.fetcher._build_opener", return_value=opener):
            fetch_url("https://example.com/", headers={"User-Agent": "curl/7.68.0"})
        request = opener.open.call_args.args[0]
        assert request.get_header("User-agent") == "curl/7.68.0"
        assert request.get_header("Accept-encoding") == "gzip, deflate"

    def test_gzip_body_decompressed(self):
        body = gzip.compress(b"<p>zipped</p>")
        resp = _FakeHTTPResponse(
            "https://example.com/", 200, _headers(Content_Encoding="gzip"), body,
        )
        with patch("urlmd.fetcher._build_opener", return_value=_opener(resp)):
            assert fetch_url("https://example.com/").read() == b"<p>zipped</p>"

    def test_client_error_returned_as_response(self):
        err = _http_error("https://example.com/x", 404, b"missing", Content_Type="text/html")
        with patch("urlmd.fetcher._build_opener", return_value=_opener(err)):
            result = fetch_url("https://example.com/x")
        assert result.status == 404
        assert result.read() == b"missing"

    def test_redirect_returned_in_manual_mode(self):
        err = _http_error("https://fxtwitter.com/a", 302, Location="https://elsewhere.example/")
        with patch("urlmd.fetcher._build_opener", return_value=_opener(err)) as build:
            result = fetch_url("https://fxtwitter.com/a", redirect="manual")
        build.assert_called_once_with("manual")
        assert result.status == 302
        assert result.headers.get("Location") == "https://elsewhere.example/"

    def test_retries_on_server_error(self):
        ok = _FakeHTTPResponse("https://example.com/", 200, _headers(), b"ok")
        opener = _opener(_http_error("https://example.com/", 503), ok)
        with patch("urlmd.fetcher._build_opener", return_value=opener), \
             patch("urlmd.fetcher.time.sleep") as sleep:
            result = fetch_url("https://example.com/", max_retries=2)
        assert result.status == 200
        assert opener.open.call_count == 2
        sleep.assert_called_once()

    def test_server_error_returned_after_retries(self):
        opener = _opener(*(_http_error("https://example.com/", 500) for _ in range(3)))
        with patch("urlmd.fetcher._build_opener", return_value=opener), \
             patch("urlmd.fetcher.time.sleep"):
            result = fetch_url("https://example.com/", max_retries=2)
        assert result.status == 500
        assert opener.open.call_count == 3

    def test_network_error_raises_after_retries(self):
        opener = _opener(*(urllib.error.URLError("refused") for _ in range(2)))
        with patch("urlmd.fetcher._build_opener", return_value=opener), \
             patch("urlmd.fetcher.time.sleep"):
            with pytest.raises(urllib.error.URLError):
                fetch_url("https://example.com/", max_retries=1)
        assert opener.open.call_count == 2

    def test_no_retries(self):
        opener = _opener(OSError("reset"))
        with patch("urlmd.fetcher._build_opener", return_value=opener), \
             patch("urlmd.fetcher.time.sleep") as sleep:
            with pytest.raises(OSError):
                fetch_url("https://example.com/", max_retries=0)
        sleep.assert_not_called()


class TestHelpers:
    def test_manual_opener_refuses_redirects(self):
        opener = _build_opener("manual")
        assert any(isinstance(h, _NoRedirectHandler) for h in opener.handlers)

    def test_follow_opener_uses_default_redirects(self):
        opener = _build_opener("follow")
        assert not any(isinstance(h, _NoRedirectHandler) for h in opener.handlers)

    def test_no_redirect_handler_returns_none(self):
        handler = _NoRedirectHandler()
        assert handler.redirect_request(None, None, 302, "Found", {}, "https://x.example/") is None

    def test_retry_after_honoured(self):
        with patch("urlmd.fetcher.random.uniform", return_value=0.0):
            assert _retry_delay(0, _headers(Retry_After="7")) == 7
            assert _retry_delay(3) == 8

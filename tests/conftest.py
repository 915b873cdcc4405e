"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from urlmd.items import SocialMetadata

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class FakeResponse:
    """Minimal response object: ``status``, ``headers.get`` and ``read()``."""

    def __init__(self, status: int = 200, content_type: str | None = "text/html", body: bytes = b"") -> None:
        self.status = status
        self.headers = {"Content-Type": content_type} if content_type is not None else {}
        self._body = body
        self.read_calls = 0

    def read(self) -> bytes:
        self.read_calls += 1
        return self._body


class RecordingFetch:
    """Fetch collaborator that records its calls and returns a canned response."""

    def __init__(self, response: object | None) -> None:
        self.response = response
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    def __call__(self, url: str, *, redirect: str, headers: dict[str, str]) -> object | None:
        self.calls.append((url, redirect, headers))
        return self.response


@pytest.fixture
def article_html() -> str:
    return _read_fixture("article.html")


@pytest.fixture
def comment_thread_html() -> str:
    return _read_fixture("comment_thread.html")


@pytest.fixture
def video_page_html() -> str:
    return _read_fixture("video_page.html")


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_fetch():
    return RecordingFetch


@pytest.fixture
def html_response():
    def _make(html: str, status: int = 200, content_type: str = "text/html; charset=utf-8") -> FakeResponse:
        return FakeResponse(status=status, content_type=content_type, body=html.encode("utf-8"))
    return _make


@pytest.fixture
def empty_metadata():
    return lambda markup, timeout: SocialMetadata()

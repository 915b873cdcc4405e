"""Pydantic models passed between pipeline stages."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

RedirectPolicy = Literal["follow", "manual"]


class FetchPlan(BaseModel):
    """Where and how to fetch one input URL."""

    model_config = {"frozen": True}

    destination_url: str
    redirect: RedirectPolicy = "follow"
    headers: dict[str, str] = Field(default_factory=dict)


class ResponseHeaders(dict):
    """Header mapping with case-insensitive ``get``."""

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        super().__init__()
        for key, value in (items or {}).items():
            self[str(key).lower()] = str(value)

    def get(self, key: str, default: Any = None) -> Any:  # type: ignore[override]
        return super().get(key.lower(), default)

    def __getitem__(self, key: str) -> str:
        return super().__getitem__(key.lower())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and super().__contains__(key.lower())


@dataclass(frozen=True)
class FetchedResponse:
    """Response produced by :func:`urlmd.fetcher.fetch_url`.

    Mirrors the surface of :class:`http.client.HTTPResponse` that the
    pipeline relies on: ``status``, ``headers.get(name)`` and ``read()``.
    """

    status: int
    headers: ResponseHeaders = field(default_factory=ResponseHeaders)
    body: bytes = b""
    url: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, ResponseHeaders):
            object.__setattr__(self, "headers", ResponseHeaders(dict(self.headers or {})))

    def read(self) -> bytes:
        return self.body


class SocialMetadata(BaseModel):
    """Open Graph-like summary of a page.  Every field may be absent."""

    title: str | None = None
    description: str | None = None
    published_date: str | None = None
    image_url: str | None = None

    @field_validator("title", "description", "published_date", "image_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

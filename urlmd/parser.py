"""urlmd.parser — High-level MarkdownFetcher class.

Bundles settings, rewrite rules, a transport and the conversion
collaborators into one reusable object.

Usage::

    from urlmd import MarkdownFetcher

    # Defaults (urllib transport, settings from URLMD_* env vars)
    fetcher = MarkdownFetcher()
    markdown = fetcher.convert("https://example.com/blog/post")

    # Custom user agent and transport
    fetcher = MarkdownFetcher(user_agent="my-bot/1.0", fetch=my_fetch)

    # Convert pre-fetched HTML (no network)
    markdown = fetcher.convert_html("<html>...</html>", url="https://example.com")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from urlmd.protocols import Collaborators
from urlmd.query import convert_batch as _convert_batch
from urlmd.query import convert_html as _convert_html
from urlmd.query import fetch_and_convert_to_markdown as _fetch_and_convert
from urlmd.settings import Settings

if TYPE_CHECKING:
    from urllib.parse import SplitResult

    from urlmd.protocols import FetchFunc
    from urlmd.rewrite import RewriteRule


class MarkdownFetcher:
    """Reusable URL → Markdown converter.

    Args:
        fetch:          Transport callable; defaults to the urllib fetcher.
        settings:       Base settings; defaults to :meth:`Settings.from_env`.
        collaborators:  Conversion collaborators; defaults derive from
                        *settings*.
        rules:          Extra host rewrite rules (after the built-in ones).
        **overrides:    Individual :class:`Settings` fields, e.g.
                        ``user_agent="my-bot/1.0"``.
    """

    def __init__(
        self,
        fetch: FetchFunc | None = None,
        settings: Settings | None = None,
        collaborators: Collaborators | None = None,
        rules: Iterable[RewriteRule] = (),
        **overrides: Any,
    ) -> None:
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if settings is None:
            settings = Settings.from_env(**overrides)
        elif overrides:
            settings = Settings(**{**settings.model_dump(), **overrides})
        self._settings = settings
        self._fetch = fetch
        self._collaborators = collaborators or Collaborators.from_settings(settings)
        self._rules = tuple(rules)

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def convert(self, url: str | SplitResult) -> str:
        """Fetch *url* and return its Markdown.

        Raises:
            :class:`~urlmd.query.FetchError` subclasses on fetch or
            dispatch failures.
        """
        return _fetch_and_convert(
            url,
            self._fetch,
            settings=self._settings,
            collaborators=self._collaborators,
            rules=self._rules,
        )

    def convert_html(self, html: str, url: str) -> str:
        """Convert pre-fetched HTML — no network calls except captions."""
        return _convert_html(
            html, url, settings=self._settings, collaborators=self._collaborators,
        )

    def convert_batch(self, urls: list[str], **kwargs: Any) -> list[str | None]:
        """Convert *urls* concurrently; see :func:`urlmd.query.convert_batch`."""
        kwargs.setdefault("settings", self._settings)
        kwargs.setdefault("collaborators", self._collaborators)
        kwargs.setdefault("rules", self._rules)
        return _convert_batch(urls, self._fetch, **kwargs)

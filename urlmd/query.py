"""urlmd.query - fetch one URL and convert it to Markdown.

Basic usage::

    from urlmd.query import fetch_and_convert_to_markdown

    markdown = fetch_and_convert_to_markdown("https://example.com/blog/post")

Bring your own transport (anything with ``status``, ``headers.get`` and
``read()``)::

    def my_fetch(url, *, redirect, headers):
        return urllib.request.urlopen(urllib.request.Request(url, headers=headers))

    markdown = fetch_and_convert_to_markdown(url, my_fetch)

Low-level access::

    from urlmd.query import convert_html

    markdown = convert_html(html, "https://example.com/blog/post")
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING
from urllib.parse import SplitResult

from bs4 import BeautifulSoup

from urlmd.extractors.absolutize import absolutize_urls
from urlmd.extractors.classifier import Readable, classify
from urlmd.extractors.fallback import summarize
from urlmd.extractors.main_content import extract_article
from urlmd.extractors.urlnorm import to_url_string
from urlmd.fetcher import fetch_url
from urlmd.protocols import Collaborators
from urlmd.rewrite import RewriteRule, build_fetch_plan
from urlmd.settings import Settings

if TYPE_CHECKING:
    from urlmd.protocols import FetchFunc, ResponseLike

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
HTML_CONTENT_TYPE = "text/html"


# ---------------------------------------------------------------------------
# Public exceptions
# ---------------------------------------------------------------------------

class FetchError(RuntimeError):
    """Raised when a URL cannot be fetched or converted.

    Attributes:
        url    -- the URL that was requested (after rewriting)
        status -- HTTP status code (0 if no response was received)
    """

    def __init__(self, message: str, url: str = "", status: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class TransportError(FetchError):
    """No response object could be obtained."""


class UpstreamError(FetchError):
    """The server answered with a status >= 400."""


class UnsupportedContentTypeError(FetchError):
    """The declared content type is neither PDF nor HTML."""

    def __init__(self, content_type: str | None, url: str = "", status: int = 0) -> None:
        super().__init__(f"Unsupported content type: {content_type}", url=url, status=status)
        self.content_type = content_type


class DecodeError(FetchError):
    """The HTML body could not be decoded as text."""


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _header(response: ResponseLike, name: str) -> str | None:
    headers = response.headers
    value = headers.get(name)
    if value is None and hasattr(headers, "items"):
        for key, val in headers.items():
            if str(key).lower() == name.lower():
                return val
    return value


def _charset(content_type: str) -> str:
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip("\"'")
    return "utf-8"


def decode_html(body: bytes, content_type: str, url: str = "") -> str:
    """Decode *body* using the charset in *content_type* (default UTF-8).

    Raises:
        DecodeError: If the bytes are not valid in that encoding.
    """
    charset = _charset(content_type)
    try:
        text = body.decode(charset)
    except (LookupError, UnicodeDecodeError) as exc:
        raise DecodeError(f"Cannot decode body of {url} as {charset}: {exc}", url=url) from exc
    return text.removeprefix("\ufeff")


def dispatch_response(
    response: ResponseLike | None,
    *,
    url: str,
    source_url: str | None = None,
    settings: Settings | None = None,
    collaborators: Collaborators | None = None,
) -> str:
    """Turn a fetched *response* for *url* into Markdown.

    *source_url* is the URL originally requested, before host rewriting;
    it defaults to *url*.

    Raises:
        TransportError:               *response* is None.
        UpstreamError:                status >= 400.
        UnsupportedContentTypeError:  content type is not PDF or HTML.
        DecodeError:                  HTML body is not decodable.
    """
    settings = settings or Settings()
    collaborators = collaborators or Collaborators.from_settings(settings)

    if response is None:
        raise TransportError("No response received.", url=url)

    status = int(response.status)
    if status >= 400:
        raise UpstreamError(
            f"Response status indicates an error: {status} when fetching {url}",
            url=url,
            status=status,
        )

    content_type = _header(response, "content-type")
    lowered = (content_type or "").lower()
    if PDF_CONTENT_TYPE in lowered:
        logger.debug("PDF file detected: %s", url)
        md = collaborators.convert_pdf(response.read())
        logger.debug("PDF file extracted: %d chars", len(md))
        return md
    if HTML_CONTENT_TYPE in lowered:
        html = decode_html(response.read(), lowered, url)
        return convert_html(
            html,
            url,
            source_url=source_url,
            settings=settings,
            collaborators=collaborators,
        )
    raise UnsupportedContentTypeError(content_type, url=url, status=status)


# ---------------------------------------------------------------------------
# HTML path (pure HTML → Markdown, no transport)
# ---------------------------------------------------------------------------

def convert_html(
    html: str,
    url: str,
    *,
    source_url: str | None = None,
    settings: Settings | None = None,
    collaborators: Collaborators | None = None,
) -> str:
    """Convert an HTML page fetched from *url* to Markdown.

    Relative references are made absolute against *url*, then the page is
    either reduced to its main article (readable pages) or summarised from
    its metadata, full text and captions (everything else).
    """
    settings = settings or Settings()
    collaborators = collaborators or Collaborators.from_settings(settings)

    soup = BeautifulSoup(html, "lxml")
    absolutize_urls(soup, url)

    decision = classify(soup, settings.min_readable_score)
    if isinstance(decision, Readable):
        logger.debug("%s is readable (score %.1f)", url, decision.score)
        content = extract_article(str(decision.document), url)
        return collaborators.render_markdown(content) if content else ""

    logger.debug("%s is not readable (%s); using fallback summary", url, decision.reason)
    return summarize(
        decision.document,
        source_url or url,
        collaborators,
        settings.metadata_timeout,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def fetch_and_convert_to_markdown(
    url: str | SplitResult,
    fetch: FetchFunc | None = None,
    *,
    settings: Settings | None = None,
    collaborators: Collaborators | None = None,
    rules: Iterable[RewriteRule] = (),
) -> str:
    """Fetch *url* and convert the response to Markdown.

    Args:
        url:           Absolute URL string or ``urllib.parse`` result.
        fetch:         Transport callable ``fetch(url, *, redirect, headers)``;
                       defaults to :func:`urlmd.fetcher.fetch_url`.
        settings:      Configuration; defaults to :meth:`Settings.from_env`.
        collaborators: PDF / Markdown / metadata / caption implementations.
        rules:         Extra host rewrite rules, tried after the built-in ones.

    Returns:
        The Markdown string (possibly empty for pages with no content).

    Raises:
        :class:`FetchError` subclasses for transport, status, content-type
        and decoding failures.  ``ValueError`` for URLs without scheme/host.
    """
    settings = settings or Settings.from_env()
    if fetch is None:
        fetch = functools.partial(
            fetch_url,
            timeout=settings.fetch_timeout,
            max_retries=settings.max_retries,
        )

    source_url = to_url_string(url)
    plan = build_fetch_plan(source_url, settings, rules)
    logger.info("fetch: %s (redirect=%s)", plan.destination_url, plan.redirect)

    try:
        response = fetch(plan.destination_url, redirect=plan.redirect, headers=dict(plan.headers))
    except Exception as exc:
        logger.error("Fetch error for %s: %s", plan.destination_url, exc)
        raise TransportError("Failed to fetch content.", url=plan.destination_url) from exc

    return dispatch_response(
        response,
        url=plan.destination_url,
        source_url=source_url,
        settings=settings,
        collaborators=collaborators,
    )


# ---------------------------------------------------------------------------
# Batch API
# ---------------------------------------------------------------------------

def convert_batch(
    urls: list[str],
    fetch: FetchFunc | None = None,
    *,
    max_workers: int = 8,
    on_error: str = "skip",
    settings: Settings | None = None,
    collaborators: Collaborators | None = None,
    rules: Iterable[RewriteRule] = (),
) -> list[str | None]:
    """Convert multiple URLs concurrently.

    Each URL is an independent invocation run on a
    :class:`~concurrent.futures.ThreadPoolExecutor`.  Results come back in
    the order of *urls*.

    Args:
        on_error: ``"skip"`` (default) omits failed URLs; ``"raise"``
                  re-raises the first failure; ``"include"`` keeps a
                  ``None`` slot for each failure.

    Raises:
        :class:`FetchError`: Only when ``on_error="raise"`` and any URL fails.
        :class:`ValueError`: For unknown *on_error* values.
    """
    from concurrent.futures import ThreadPoolExecutor, as_completed

    if on_error not in ("skip", "raise", "include"):
        raise ValueError(f"on_error must be 'skip', 'raise', or 'include'; got {on_error!r}")

    settings = settings or Settings.from_env()
    rules = tuple(rules)
    results: list[str | None] = [None] * len(urls)

    def _convert_one(idx: int, url: str) -> tuple[int, str | None]:
        try:
            return idx, fetch_and_convert_to_markdown(
                url, fetch, settings=settings, collaborators=collaborators, rules=rules,
            )
        except Exception as exc:
            if on_error == "raise":
                raise
            logger.warning("convert_batch: failed to convert %s: %s", url, exc)
            return idx, None

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_convert_one, i, url) for i, url in enumerate(urls)]
        for future in as_completed(futures):
            idx, markdown = future.result()
            results[idx] = markdown

    if on_error == "include":
        return results
    return [r for r in results if r is not None]

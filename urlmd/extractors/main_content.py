"""Isolate the main article block of a readable page with readability-lxml."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup
from readability import Document

logger = logging.getLogger(__name__)


def _count_words(html: str) -> int:
    soup = BeautifulSoup(html, "lxml")
    return len(soup.get_text(separator=" ").split())


def extract_article(html: str, url: str = "") -> str:
    """Return the main content of *html* as an HTML fragment.

    Navigation, ads and sidebars are dropped by readability's scoring.
    Returns an empty string when nothing usable is found; extraction
    problems are logged, never raised.
    """
    if not html or not html.strip():
        return ""
    try:
        doc = Document(html, url=url or None)
        content = doc.summary(html_partial=True)
    except Exception as exc:
        logger.warning("readability failed for %s: %s", url, exc)
        return ""

    if not content or _count_words(content) == 0:
        logger.debug("readability returned no content for %s", url)
        return ""
    return content

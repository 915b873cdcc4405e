"""Decide whether a page is "probably readable".

The candidate walk follows Mozilla Readability's ``isProbablyReaderable``:
``<p>``, ``<pre>`` and ``<article>`` elements plus ``<div>`` elements that
directly contain a ``<br>`` are scored, skipping hidden nodes, nodes whose
class/id look like page furniture, and paragraphs inside list items.

The minimum content length is page relative: one third of the body's
visible text.  A single block that reaches it (inclusive) marks the page as
readable; comment threads and aggregators, where no block dominates, fall
through to the metadata fallback.
"""

from __future__ import annotations

import logging
import math
import re
from typing import NamedTuple

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

_UNLIKELY_CANDIDATES_RE = re.compile(
    r"-ad-|ai2html|banner|breadcrumbs|combx|comment|community|cover-wrap|disqus|"
    r"extra|footer|gdpr|header|legends|menu|related|remark|replies|rss|shoutbox|"
    r"sidebar|skyscraper|social|sponsor|supplemental|ad-break|agegate|pagination|"
    r"pager|popup|yom-remote",
    re.IGNORECASE,
)
_MAYBE_CANDIDATE_RE = re.compile(r"and|article|body|column|content|main|shadow", re.IGNORECASE)
_DISPLAY_NONE_RE = re.compile(r"display\s*:\s*none", re.IGNORECASE)


class Readable(NamedTuple):
    document: BeautifulSoup
    score: float
    threshold: float


class NotReadable(NamedTuple):
    document: BeautifulSoup
    reason: str
    threshold: float


ReadabilityDecision = Readable | NotReadable


def body_text_length(soup: BeautifulSoup) -> int:
    """Length of the visible text under ``<body>`` (or the whole document).

    ``get_text()`` already skips script, style and template strings;
    ``<noscript>`` fallbacks are subtracted here.
    """
    root = soup.body or soup
    total = len(root.get_text())
    for el in root.find_all("noscript"):
        if el.find_parent("noscript") is None:
            total -= len(el.get_text())
    return max(total, 0)


def _is_visible(node: Tag) -> bool:
    style = node.get("style")
    if isinstance(style, str) and _DISPLAY_NONE_RE.search(style):
        return False
    if node.has_attr("hidden"):
        return False
    aria_hidden = node.get("aria-hidden")
    if aria_hidden == "true":
        classes = node.get("class") or []
        return "fallback-image" in classes
    return True


def _match_string(node: Tag) -> str:
    classes = node.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return " ".join(classes) + " " + str(node.get("id") or "")


def _inside_list_item(node: Tag) -> bool:
    return node.name == "p" and node.find_parent("li") is not None


def _candidates(soup: BeautifulSoup) -> list[Tag]:
    nodes: list[Tag] = [n for n in soup.find_all(["p", "pre", "article"]) if isinstance(n, Tag)]
    seen = {id(n) for n in nodes}
    for br in soup.find_all("br"):
        parent = br.parent
        if isinstance(parent, Tag) and parent.name == "div" and id(parent) not in seen:
            seen.add(id(parent))
            nodes.append(parent)
    return nodes


def classify(soup: BeautifulSoup, min_score: float = 0.0) -> ReadabilityDecision:
    """Classify *soup* as :class:`Readable` or :class:`NotReadable`.

    A block qualifies when ``3 * len(text) >= total body text``; each
    qualifying block adds ``sqrt(len - threshold)`` to the score and the page
    is readable once the score reaches *min_score*.  Blank pages are never
    readable.
    """
    total = body_text_length(soup)
    threshold = total / 3
    if total == 0:
        return NotReadable(soup, "empty body", threshold)

    score = 0.0
    qualified = 0
    for node in _candidates(soup):
        if not _is_visible(node):
            continue
        match_string = _match_string(node)
        if _UNLIKELY_CANDIDATES_RE.search(match_string) and not _MAYBE_CANDIDATE_RE.search(
            match_string,
        ):
            continue
        if _inside_list_item(node):
            continue
        length = len(node.get_text().strip())
        if length == 0 or length * 3 < total:
            continue
        qualified += 1
        score += math.sqrt(max(length - threshold, 0.0))
        if score >= min_score:
            logger.debug(
                "readable: %d-char block vs %d total (score %.1f)", length, total, score,
            )
            return Readable(soup, score, threshold)

    reason = "no dominant block" if qualified == 0 else f"score {score:.1f} < {min_score}"
    logger.debug("not readable: %s (%d chars total)", reason, total)
    return NotReadable(soup, reason, threshold)


def is_probably_readable(soup: BeautifulSoup, min_score: float = 0.0) -> bool:
    return isinstance(classify(soup, min_score), Readable)

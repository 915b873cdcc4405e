"""Social metadata (Open Graph-like) extraction from raw markup.

Priority chain per field (highest → lowest):
    Open Graph → Twitter Card → JSON-LD → microdata / plain HTML <meta>

The document ``<title>`` is deliberately not consulted: the caller decides
whether to fall back to it.
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from bs4 import BeautifulSoup, Tag

from urlmd.items import SocialMetadata

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _safe_str(val: Any, default: str = "") -> str:
    """Safely convert a BeautifulSoup attribute value (str | list | None) to str."""
    if val is None:
        return default
    if isinstance(val, list):
        return " ".join(str(v) for v in val)
    return str(val)


def _first(*values: Any) -> Any:
    """Return the first non-empty, non-None value."""
    for v in values:
        if v:
            return v
    return None


# ---------------------------------------------------------------------------
# Open Graph / Twitter Card
# ---------------------------------------------------------------------------

def _extract_og_twitter(soup: BeautifulSoup) -> tuple[dict, dict]:
    og: dict = {}
    twitter: dict = {}

    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        prop = _safe_str(tag.get("property") or tag.get("name"), "")
        content = _safe_str(tag.get("content"), "").strip()
        if not content:
            continue
        prop_lower = prop.lower()
        # First occurrence wins (og:image may repeat for alternates)
        if prop_lower.startswith(("og:", "article:")):
            og.setdefault(prop_lower, content)
        elif prop_lower.startswith("twitter:"):
            twitter.setdefault(prop_lower, content)

    return og, twitter


# ---------------------------------------------------------------------------
# JSON-LD
# ---------------------------------------------------------------------------

def _extract_jsonld(soup: BeautifulSoup) -> dict:
    """Return the first JSON-LD node carrying a headline, name or date."""
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            raw = json.loads(script.string or "")
        except (json.JSONDecodeError, TypeError):
            continue

        nodes: list = []
        if isinstance(raw, list):
            nodes = raw
        elif isinstance(raw, dict):
            nodes = raw.get("@graph", [raw])

        for node in nodes:
            if isinstance(node, dict) and any(
                k in node for k in ("headline", "datePublished", "uploadDate")
            ):
                return node
    return {}


def _jsonld_image(node: dict) -> str | None:
    image = node.get("image") or node.get("thumbnailUrl")
    if isinstance(image, list) and image:
        image = image[0]
    if isinstance(image, dict):
        image = image.get("url")
    return image if isinstance(image, str) else None


def _meta_content(soup: BeautifulSoup, name: str) -> str | None:
    tag = soup.find("meta", attrs={"name": name})
    if tag and isinstance(tag, Tag):
        return _safe_str(tag.get("content"), "").strip() or None
    return None


def _itemprop_content(soup: BeautifulSoup, prop: str) -> str | None:
    tag = soup.find("meta", attrs={"itemprop": prop})
    if tag and isinstance(tag, Tag):
        return _safe_str(tag.get("content"), "").strip() or None
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_social_metadata(markup: str) -> SocialMetadata:
    """Parse *markup* and return its :class:`SocialMetadata`.

    A page without any metadata yields an empty record, not an error.
    """
    if not markup or not markup.strip():
        return SocialMetadata()

    soup = BeautifulSoup(markup, "lxml")
    og, twitter = _extract_og_twitter(soup)
    jsonld = _extract_jsonld(soup)

    return SocialMetadata(
        title=_first(
            og.get("og:title"),
            twitter.get("twitter:title"),
            jsonld.get("headline"),
        ),
        description=_first(
            og.get("og:description"),
            twitter.get("twitter:description"),
            jsonld.get("description"),
            _meta_content(soup, "description"),
        ),
        published_date=_first(
            og.get("og:date"),
            og.get("article:published_time"),
            jsonld.get("datePublished"),
            jsonld.get("uploadDate"),
            _itemprop_content(soup, "datePublished"),
            _itemprop_content(soup, "uploadDate"),
            _meta_content(soup, "pubdate"),
        ),
        image_url=_first(
            og.get("og:image"),
            og.get("og:image:secure_url"),
            og.get("og:image:url"),
            twitter.get("twitter:image"),
            twitter.get("twitter:image:src"),
            _jsonld_image(jsonld),
        ),
    )


def parse_social_metadata(markup: str, timeout: float = 10.0) -> SocialMetadata:
    """Run :func:`extract_social_metadata` bounded by *timeout* seconds.

    Parsing happens on a private copy of the markup in a worker thread.  On
    timeout or any parse failure an empty :class:`SocialMetadata` is
    returned and a warning logged.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="urlmd-meta")
    try:
        future = executor.submit(extract_social_metadata, markup)
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        logger.warning("Metadata parsing timed out after %.1fs", timeout)
    except Exception as exc:
        logger.warning("Failed to get social metadata: %s", exc)
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return SocialMetadata()

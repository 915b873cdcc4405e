"""Fallback summary for pages that are not readable.

Merges three partial signals into one Markdown summary:

1. social metadata parsed from the full markup,
2. a Markdown rendering of the cleaned page body,
3. generated captions when the URL points at a YouTube video.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bs4 import BeautifulSoup

from urlmd.extractors.captions import format_transcript
from urlmd.extractors.markdown import format_summary
from urlmd.extractors.urlnorm import youtube_video_id
from urlmd.items import SocialMetadata

if TYPE_CHECKING:
    from urlmd.protocols import Collaborators

logger = logging.getLogger(__name__)

# Removed before the full-text rendering
_NOISE_TAGS: tuple[str, ...] = ("script", "style", "link")


def strip_noise(soup: BeautifulSoup) -> int:
    """Remove script, style and link elements from *soup* in place."""
    removed = 0
    for el in soup.find_all(_NOISE_TAGS):
        el.decompose()
        removed += 1
    return removed


def choose_description(meta_description: str | None, full_text: str) -> str:
    """Prefer the full text only when it is strictly longer."""
    description = meta_description or ""
    if len(full_text) > len(description):
        return full_text
    return description


def document_title(soup: BeautifulSoup) -> str | None:
    if soup.title is None:
        return None
    return soup.title.get_text().strip() or None


def summarize(
    soup: BeautifulSoup,
    source_url: str,
    collaborators: Collaborators,
    metadata_timeout: float,
) -> str:
    """Build the fallback Markdown summary for *soup*.

    *source_url* is the URL the caller asked for (before any host rewrite);
    it decides whether a caption transcript replaces the description.
    """
    try:
        meta = collaborators.parse_metadata(str(soup), metadata_timeout)
    except Exception as exc:
        logger.warning("Failed to get social metadata for %s: %s", source_url, exc)
        meta = None
    if meta is None:
        meta = SocialMetadata()

    strip_noise(soup)
    body = soup.body or soup
    full_text = collaborators.render_markdown(body.decode_contents())

    description = choose_description(meta.description, full_text)
    title = meta.title or document_title(soup)

    video_id = youtube_video_id(source_url)
    if video_id:
        try:
            lines = collaborators.fetch_captions(video_id)
        except Exception as exc:
            logger.warning("Caption fetch failed for video %s: %s", video_id, exc)
        else:
            description = format_transcript(lines)

    return format_summary(title, description, meta.published_date, meta.image_url)

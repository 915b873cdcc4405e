"""Convert HTML to Markdown and render the fallback page summary."""

from __future__ import annotations

import logging
import re
from datetime import UTC

import dateparser
from bs4 import BeautifulSoup
from markdownify import markdownify

logger = logging.getLogger(__name__)

_EXCESSIVE_BLANK_LINES_RE = re.compile(r"\n{3,}")
_TRAILING_WHITESPACE_RE = re.compile(r"[ \t]+$", re.MULTILINE)

# Fixed English names: output must not depend on the process locale
_MONTHS: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)


def html_to_markdown(html: str) -> str:
    """Convert *html* to clean Markdown.

    Uses markdownify with ATX heading style.  Post-processes to:
    - Remove excessive blank lines (>2 consecutive)
    - Strip trailing whitespace from lines
    """
    if not html or not html.strip():
        return ""

    try:
        md = markdownify(
            html,
            heading_style="ATX",
            bullets="-",
            code_language_callback=_detect_lang,
        )
    except Exception as exc:
        # Graceful fallback: strip tags and return plain text
        logger.debug("markdownify failed, falling back to plain text: %s", exc)
        soup = BeautifulSoup(html, "lxml")
        md = soup.get_text(separator="\n")

    md = _TRAILING_WHITESPACE_RE.sub("", md)
    md = _EXCESSIVE_BLANK_LINES_RE.sub("\n\n", md)
    return md.strip()


def _detect_lang(el: object) -> str:
    """Extract language hint from an element's class list for markdownify."""
    getter = getattr(el, "get", None)
    classes = (getter("class") if getter else None) or []
    for cls in classes:
        if isinstance(cls, str) and cls.startswith("language-"):
            return cls[len("language-"):]
    return ""


def format_long_date(raw: str | None) -> str | None:
    """Format *raw* as ``Month D, YYYY`` in UTC, or None if unparseable."""
    if not raw:
        return None
    try:
        parsed = dateparser.parse(
            raw.strip(),
            settings={
                "TIMEZONE": "UTC",
                "TO_TIMEZONE": "UTC",
                "RETURN_AS_TIMEZONE_AWARE": True,
                "PREFER_DAY_OF_MONTH": "first",
            },
        )
    except Exception as exc:
        logger.debug("Date parse failed for %r: %s", raw, exc)
        return None
    if parsed is None:
        logger.debug("Unrecognised date %r", raw)
        return None
    parsed = parsed.astimezone(UTC)
    return f"{_MONTHS[parsed.month - 1]} {parsed.day}, {parsed.year}"


def format_summary(
    title: str | None,
    description: str | None,
    published_date: str | None,
    image_url: str | None,
) -> str:
    """Render the fallback summary: title, description, date, thumbnail.

    Absent fields are left out entirely.  Every present block is followed
    by a blank line.
    """
    parts: list[str] = []
    if title:
        parts.append(f"# {title}")
    if description:
        parts.append(description)
    date = format_long_date(published_date)
    if date:
        parts.append(f"*{date}*")
    if image_url:
        parts.append(f"![Thumbnail]({image_url})")
    return "".join(f"{part}\n\n" for part in parts)

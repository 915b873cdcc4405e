"""Rewrite relative resource and link references to absolute URLs."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup, Tag

from urlmd.extractors.urlnorm import resolve_url

logger = logging.getLogger(__name__)

# (CSS selector, attribute) pairs rewritten in place
_TARGETS: tuple[tuple[str, str], ...] = (
    ("img[src]", "src"),
    ("[href]", "href"),
    (
        'meta[property="og:image"][content], '
        'meta[property="og:image:secure_url"][content]',
        "content",
    ),
)


def absolutize_urls(soup: BeautifulSoup, base_url: str) -> int:
    """Resolve URL attributes in *soup* against *base_url*, in place.

    Values that cannot be resolved are left untouched.  Running the pass on
    an already absolute document changes nothing.

    Returns the number of attributes whose value changed.
    """
    changed = 0
    for selector, attr in _TARGETS:
        for el in soup.select(selector):
            if not isinstance(el, Tag):
                continue
            value = el.get(attr)
            if not isinstance(value, str):
                continue
            resolved = resolve_url(value, base_url)
            if resolved is None:
                logger.debug("Leaving unresolvable %s=%r", attr, value)
                continue
            if resolved != value:
                el[attr] = resolved
                changed += 1
    logger.debug("absolutized %d attributes against %s", changed, base_url)
    return changed

"""URL helpers: host matching, best-effort resolution, video id detection."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urljoin, urlsplit

# YouTube watch / short / embed / v / nested-path URLs with an 11-char id
_YOUTUBE_ID_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)"
    r"([^\"&?/\s]{11})",
    re.IGNORECASE,
)

# Schemes urljoin should leave alone (no hierarchical resolution)
_OPAQUE_PREFIXES: tuple[str, ...] = ("data:", "javascript:", "mailto:", "tel:", "about:")


def to_url_string(url: str | SplitResult | object) -> str:
    """Return *url* as a string; accepts ``str`` or a ``urllib.parse`` result."""
    if isinstance(url, str):
        return url.strip()
    geturl = getattr(url, "geturl", None)
    if callable(geturl):
        return str(geturl())
    raise TypeError(f"Expected a URL string or parsed URL, got {type(url).__name__}")


def extract_domain(url: str) -> str:
    """Return the hostname of *url* lowercased, without port."""
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def host_matches(host: str, domains: tuple[str, ...]) -> bool:
    """Return True if *host* equals one of *domains* or is a subdomain of one."""
    host = host.lower().rstrip(".")
    return any(host == d or host.endswith("." + d) for d in domains)


def resolve_url(value: str, base_url: str) -> str | None:
    """Resolve *value* against *base_url*.

    Returns None when *value* cannot be parsed as a URL reference, in which
    case callers keep the original value.
    """
    stripped = value.strip()
    if stripped.lower().startswith(_OPAQUE_PREFIXES):
        return value
    try:
        resolved = urljoin(base_url, stripped)
        # urljoin does not validate; force a parse of the result
        parts = urlsplit(resolved)
        _ = parts.port
    except ValueError:
        return None
    return resolved


def youtube_video_id(url: str) -> str | None:
    """Return the YouTube video id embedded in *url*, or None."""
    match = _YOUTUBE_ID_RE.search(url)
    return match.group(1) if match else None

"""Extraction sub-package: classification, article isolation and fallback summaries."""

from .absolutize import absolutize_urls
from .classifier import NotReadable, Readable, classify, is_probably_readable
from .main_content import extract_article
from .markdown import format_summary, html_to_markdown
from .metadata import extract_social_metadata, parse_social_metadata
from .urlnorm import youtube_video_id

__all__ = [
    "NotReadable",
    "Readable",
    "absolutize_urls",
    "classify",
    "extract_article",
    "extract_social_metadata",
    "format_summary",
    "html_to_markdown",
    "is_probably_readable",
    "parse_social_metadata",
    "youtube_video_id",
]

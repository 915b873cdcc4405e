"""urlmd - fetch a URL and turn its readable content into Markdown.

Quick single-URL usage::

    from urlmd import fetch_and_convert_to_markdown

    print(fetch_and_convert_to_markdown("https://example.com/blog/some-post"))

Articles are reduced to their main content; comment threads, social posts
and video pages are summarised from their metadata, page text and (for
YouTube) generated captions; PDFs are converted directly.
"""

from urlmd.parser import MarkdownFetcher
from urlmd.protocols import Collaborators
from urlmd.query import (
    DecodeError,
    FetchError,
    TransportError,
    UnsupportedContentTypeError,
    UpstreamError,
    convert_batch,
    convert_html,
    fetch_and_convert_to_markdown,
)
from urlmd.rewrite import RewriteRule, build_fetch_plan
from urlmd.settings import Settings

__version__ = "0.1.0"
__all__ = [
    "Collaborators",
    "DecodeError",
    "FetchError",
    "MarkdownFetcher",
    "RewriteRule",
    "Settings",
    "TransportError",
    "UnsupportedContentTypeError",
    "UpstreamError",
    "build_fetch_plan",
    "convert_batch",
    "convert_html",
    "fetch_and_convert_to_markdown",
]

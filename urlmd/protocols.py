"""urlmd.protocols — contracts for the pipeline's external collaborators.

Every collaborator is a plain callable; the ``Protocol`` classes document
the expected signature and let tests use ``isinstance()`` checks without
inheriting from a base class.  :class:`Collaborators` bundles one
implementation of each and defaults to the ones shipped with urlmd::

    from urlmd.protocols import Collaborators

    collaborators = Collaborators(render_markdown=my_renderer)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from urlmd.items import SocialMetadata
    from urlmd.settings import Settings

# ---------------------------------------------------------------------------
# Protocol definitions
# ---------------------------------------------------------------------------

@runtime_checkable
class ResponseLike(Protocol):
    """What the dispatcher needs from a fetched response."""

    status: int
    headers: Any  # must provide ``get(name) -> str | None``

    def read(self) -> bytes:
        """Return the raw body bytes."""
        ...


@runtime_checkable
class FetchFunc(Protocol):
    def __call__(
        self, url: str, *, redirect: str, headers: dict[str, str],
    ) -> ResponseLike | None:
        """Fetch *url*; ``redirect`` is ``"follow"`` or ``"manual"``."""
        ...


@runtime_checkable
class PdfConverter(Protocol):
    def __call__(self, data: bytes) -> str:
        """Convert raw PDF bytes to Markdown."""
        ...


@runtime_checkable
class MarkdownRenderer(Protocol):
    def __call__(self, html: str) -> str:
        """Convert an HTML fragment to Markdown."""
        ...


@runtime_checkable
class MetadataParser(Protocol):
    def __call__(self, markup: str, timeout: float) -> SocialMetadata:
        """Parse social metadata from *markup*; never raises for "nothing found"."""
        ...


@runtime_checkable
class CaptionFetcher(Protocol):
    def __call__(self, video_id: str) -> list[str]:
        """Return caption lines for *video_id* in playback order."""
        ...


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------

def _default_pdf(data: bytes) -> str:
    from urlmd.extractors.pdf import pdf_to_markdown
    return pdf_to_markdown(data)


def _default_renderer(html: str) -> str:
    from urlmd.extractors.markdown import html_to_markdown
    return html_to_markdown(html)


def _default_metadata(markup: str, timeout: float) -> SocialMetadata:
    from urlmd.extractors.metadata import parse_social_metadata
    return parse_social_metadata(markup, timeout)


def _default_captions(video_id: str) -> list[str]:
    from urlmd.extractors.captions import fetch_captions
    return fetch_captions(video_id)


@dataclass(frozen=True)
class Collaborators:
    """One implementation of each conversion collaborator."""

    convert_pdf: PdfConverter = _default_pdf
    render_markdown: MarkdownRenderer = _default_renderer
    parse_metadata: MetadataParser = _default_metadata
    fetch_captions: CaptionFetcher = _default_captions

    @classmethod
    def from_settings(cls, settings: Settings) -> Collaborators:
        """Defaults, with caption languages taken from *settings*."""
        languages = settings.caption_languages

        def _captions(video_id: str) -> list[str]:
            from urlmd.extractors.captions import fetch_captions
            return fetch_captions(video_id, languages=languages)

        return cls(fetch_captions=_captions)

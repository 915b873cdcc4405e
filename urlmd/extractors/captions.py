"""Generated caption transcripts for YouTube videos."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from youtube_transcript_api import YouTubeTranscriptApi

from urlmd.settings import DEFAULT_CAPTION_LANGUAGES

logger = logging.getLogger(__name__)

TRANSCRIPT_HEADING = "## Generated Transcription"


def fetch_captions(
    video_id: str,
    languages: Sequence[str] = DEFAULT_CAPTION_LANGUAGES,
) -> list[str]:
    """Return the caption lines of *video_id* ordered by start time.

    Errors from youtube-transcript-api (no captions, video unavailable,
    network failure) propagate to the caller.
    """
    transcript = YouTubeTranscriptApi().fetch(video_id, languages=list(languages))
    snippets = sorted(transcript, key=lambda s: s.start)
    logger.debug("fetched %d caption snippets for %s", len(snippets), video_id)
    return [s.text for s in snippets]


def format_transcript(lines: Sequence[str]) -> str:
    """Render caption *lines* as the transcript section of a summary."""
    return f"{TRANSCRIPT_HEADING}\n\n" + "\n".join(lines)

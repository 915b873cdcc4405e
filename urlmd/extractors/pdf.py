"""Convert PDF bytes to Markdown via pymupdf4llm."""

from __future__ import annotations

import logging

import pymupdf
import pymupdf4llm

logger = logging.getLogger(__name__)


def pdf_to_markdown(data: bytes) -> str:
    """Convert raw PDF *data* to Markdown.

    Fast, rule-based, no GPU required.  Errors from PyMuPDF (corrupt or
    encrypted files) propagate unchanged.
    """
    doc = pymupdf.open(stream=data, filetype="pdf")
    try:
        pages = doc.page_count
        md = pymupdf4llm.to_markdown(doc)
    finally:
        doc.close()
    logger.debug("PDF extracted: %d pages, %d chars", pages, len(md))
    return md

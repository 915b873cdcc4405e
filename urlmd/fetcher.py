"""Default HTTP transport built on ``urllib``.

Implements the fetch contract used by :mod:`urlmd.query`::

    response = fetch_url(url, redirect="manual", headers={"User-Agent": "..."})
    response.status, response.headers.get("content-type"), response.read()

Error statuses (4xx/5xx) and, under ``redirect="manual"``, 3xx responses are
returned as responses rather than raised; only network-level failures raise.
"""

from __future__ import annotations

import gzip
import logging
import random
import time
import urllib.error
import urllib.request
import zlib
from email.message import Message

from urlmd.items import FetchedResponse
from urlmd.settings import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_RETRIES

logger = logging.getLogger(__name__)

_RETRY_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surface 3xx responses instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        return None


def _build_opener(redirect: str) -> urllib.request.OpenerDirector:
    if redirect == "manual":
        return urllib.request.build_opener(_NoRedirectHandler)
    return urllib.request.build_opener()


def _decompress(raw: bytes, headers: Message | None) -> bytes:
    encoding = ""
    if headers is not None:
        encoding = str(headers.get("Content-Encoding", "")).lower().strip()
    if encoding == "gzip":
        return gzip.decompress(raw)
    if encoding in ("deflate", "zlib"):
        return zlib.decompress(raw)
    return raw


def _to_response(url: str, status: int, headers: Message | None, raw: bytes) -> FetchedResponse:
    return FetchedResponse(
        status=status,
        headers=dict(headers.items()) if headers is not None else {},
        body=_decompress(raw, headers),
        url=url,
    )


def _retry_delay(attempt: int, headers: Message | None = None) -> float:
    # Honour Retry-After (seconds form) when the server sends one
    retry_after = 0
    if headers is not None:
        ra_header = str(headers.get("Retry-After", "") or "").strip()
        retry_after = int(ra_header) if ra_header.isdigit() else 0
    return max(retry_after, 2 ** attempt) + random.uniform(0, 1)


def fetch_url(
    url: str,
    *,
    redirect: str = "follow",
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_FETCH_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> FetchedResponse:
    """Fetch *url* and return a :class:`FetchedResponse`.

    Retries up to *max_retries* times with jittered exponential backoff on
    429/5xx responses and network-level failures.

    Raises:
        urllib.error.URLError / OSError: When no response could be obtained
            after all retries.
    """
    req = urllib.request.Request(url, headers={"Accept-Encoding": "gzip, deflate", **(headers or {})})
    opener = _build_opener(redirect)

    for attempt in range(max_retries + 1):
        try:
            with opener.open(req, timeout=timeout) as resp:
                return _to_response(resp.geturl(), resp.status, resp.headers, resp.read())

        except urllib.error.HTTPError as exc:
            if exc.code in _RETRY_CODES and attempt < max_retries:
                delay = _retry_delay(attempt, exc.headers)
                logger.debug(
                    "HTTP %d for %s — retrying in %.1fs (attempt %d/%d)",
                    exc.code, url, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            try:
                raw = exc.read()
            except OSError:
                raw = b""
            return _to_response(url, exc.code, exc.headers, raw or b"")

        except (urllib.error.URLError, OSError) as exc:
            if attempt < max_retries:
                delay = _retry_delay(attempt)
                logger.debug(
                    "Network error for %s — retrying in %.1fs (attempt %d/%d): %s",
                    url, delay, attempt + 1, max_retries, exc,
                )
                time.sleep(delay)
                continue
            raise

    # range() always yields at least once; every branch returns or raises
    raise AssertionError("unreachable")

"""CLI entry point: python -m urlmd --url URL [options]"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console

from urlmd.parser import MarkdownFetcher
from urlmd.query import FetchError

logger = logging.getLogger(__name__)

_SEPARATOR = "\n\n---\n\n"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="urlmd",
        description=(
            "Fetch a URL and print its readable content as Markdown.\n"
            "Articles, social posts, YouTube videos and PDFs."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--url", required=True, action="append", metavar="URL",
                        help="URL to convert (repeat for several, converted concurrently)")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="Write Markdown to FILE instead of stdout")
    parser.add_argument("--user-agent", default=None, metavar="UA",
                        help="User-Agent header (default: $URLMD_USER_AGENT or curl/7.68.0)")
    parser.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                        help="Network timeout per request (default: 30)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    err_console = Console(stderr=True)

    fetcher = MarkdownFetcher(user_agent=args.user_agent, fetch_timeout=args.timeout)

    try:
        if len(args.url) == 1:
            markdown = fetcher.convert(args.url[0])
        else:
            results = fetcher.convert_batch(args.url, on_error="raise")
            markdown = _SEPARATOR.join(r for r in results if r is not None)
    except (FetchError, ValueError) as exc:
        err_console.print(f"[bold red]Error:[/bold red] {exc}", highlight=False)
        return 1

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(markdown, encoding="utf-8")
        logger.info("Wrote %d chars to %s", len(markdown), out_path)
    else:
        sys.stdout.write(markdown)
        if not markdown.endswith("\n"):
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

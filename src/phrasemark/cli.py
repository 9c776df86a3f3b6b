"""Command-line entry point: ``phrasemark QUERY [FILE]``.

Reads HTML from FILE (or stdin), writes the highlighted HTML to ``-o``
(or stdout), and reports the match count on stderr.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console

from phrasemark.dom.parser import ParserOptions
from phrasemark.highlight.core import HighlightOptions, highlight_with_count

console = Console(stderr=True)


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for the phrasemark command."""
    parser = argparse.ArgumentParser(
        prog="phrasemark",
        description="Wrap every occurrence of a phrase in HTML text with <mark>.",
    )
    parser.add_argument("query", help="Phrase to highlight (case-insensitive)")
    parser.add_argument(
        "file", nargs="?", type=Path, default=None, help="HTML file (default: stdin)"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file (default: stdout)"
    )
    parser.add_argument(
        "--marker-tag", default=None, help="Marker element (default: settings)"
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--fragment",
        dest="fragment",
        action="store_const",
        const=True,
        default=None,
        help="Treat input as an HTML fragment",
    )
    mode.add_argument(
        "--document",
        dest="fragment",
        action="store_const",
        const=False,
        help="Treat input as a full HTML document",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def _read_input(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    from phrasemark import _setup_logging
    from phrasemark.config import get_settings

    args = _build_parser().parse_args(argv)
    settings = get_settings()
    _setup_logging(
        "DEBUG" if args.verbose else settings.log.level,
        settings.log.log_dir if settings.log.file_logging else None,
    )

    try:
        html = _read_input(args.file)
    except OSError as exc:
        console.print(f"[red]Error:[/] cannot read {args.file}: {exc.strerror}")
        return 1

    options = HighlightOptions(
        parser=ParserOptions(fragment=args.fragment),
        marker_tag=args.marker_tag,
    )
    result, total = highlight_with_count(args.query, html, options)

    if args.output is None:
        sys.stdout.write(result)
    else:
        try:
            args.output.write_text(result, encoding="utf-8")
        except OSError as exc:
            console.print(f"[red]Error:[/] cannot write {args.output}: {exc.strerror}")
            return 1

    style = "green" if total else "yellow"
    console.print(f"[{style}]{total} match(es)[/] for [bold]{args.query!r}[/]")
    return 0


def run() -> None:
    """Console-script wrapper around ``main``."""
    sys.exit(main())

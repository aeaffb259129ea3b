"""Command-line entry point: annotate an HTML (or plain-text) document.

Usage:
    annotext page.html > annotated.html
    echo "ping @kneath about #release" | annotext --text --entities
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from annotext.config import get_settings
from annotext.dom import fragment_to_html
from annotext.filters import (
    AnnotationError,
    ConfigurationError,
    PlainTextInputFilter,
    ResultAccumulator,
)
from annotext.pipeline import DEFAULT_FILTERS, FILTERS_BY_NAME, Pipeline

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def _setup_logging() -> None:
    """Configure console logging from settings (once per process)."""
    settings = get_settings()
    root_logger = logging.getLogger()
    if any(getattr(h, "_annotext", False) for h in root_logger.handlers):
        return
    root_logger.setLevel(settings.logging.level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(settings.logging.format, datefmt="%Y-%m-%d %H:%M:%S")
    )
    handler._annotext = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="annotext",
        description="Annotate hashtags, mentions, numbers, quotes and more in HTML.",
    )
    parser.add_argument(
        "path", nargs="?", help="Input file (default: read from stdin)"
    )
    parser.add_argument(
        "--text", action="store_true", help="Treat input as plain text, not HTML"
    )
    parser.add_argument(
        "--filter",
        dest="filters",
        action="append",
        metavar="NAME",
        help=f"Filter to run, repeatable (choices: {', '.join(FILTERS_BY_NAME)})",
    )
    parser.add_argument(
        "--entities",
        action="store_true",
        help="Print the discovered entities as a table on stderr",
    )
    return parser


def _entities_table(result: ResultAccumulator) -> Table:
    table = Table(title="Entities")
    table.add_column("Kind", style="cyan")
    table.add_column("Values")
    for kind in result:
        values = result[kind]
        table.add_row(kind, ", ".join(values) if values else "[dim]none[/]")
    return table


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``annotext`` console script."""
    args = _build_parser().parse_args(argv)
    _setup_logging()

    names = args.filters or [f.name for f in DEFAULT_FILTERS]
    unknown = [name for name in names if name not in FILTERS_BY_NAME]
    if unknown:
        console.print(f"[red]Error:[/] unknown filter(s): {', '.join(unknown)}")
        return 2

    if args.path:
        source = Path(args.path).read_text(encoding="utf-8")
    else:
        source = sys.stdin.read()

    filters = [FILTERS_BY_NAME[name] for name in names]
    if args.text:
        filters.insert(0, PlainTextInputFilter)

    logger.debug(
        "[CLI] Input: %d chars, filters=%s",
        len(source),
        ", ".join(f.name for f in filters),
    )
    try:
        result = Pipeline(filters).call(source)
    except (AnnotationError, ConfigurationError) as exc:
        console.print(f"[red]Error:[/] {exc}")
        return 1

    sys.stdout.write(fragment_to_html(result.output))
    sys.stdout.write("\n")
    if args.entities:
        console.print(_entities_table(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())

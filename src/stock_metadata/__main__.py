"""Command-line entry point.

Examples:
- python -m stock_metadata photos/ --keys "KEY1, KEY2" --output metadata.csv
- python -m stock_metadata clip.mp4 --content-type video --keys-file keys.txt --real-api
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from stock_metadata.config import resolve_config
from stock_metadata.constants import DEFAULT_EXPORT_FILENAME
from stock_metadata.exceptions import ConfigurationError, FileError, ValidationError
from stock_metadata.export import export_csv
from stock_metadata.frontdoor import generate_metadata

if TYPE_CHECKING:
    from collections.abc import Sequence

    from stock_metadata.core.types import BatchProgress
    from stock_metadata.registry import FileRegistry


class ConsoleObserver:
    """Prints one line per finished file."""

    def __init__(self, stream=None) -> None:
        self._stream = stream or sys.stdout

    def on_registry(self, registry: FileRegistry) -> None:
        pass

    def on_progress(self, progress: BatchProgress) -> None:
        if progress.finished:
            print(
                f"[{progress.finished}/{progress.total}] "
                f"{progress.succeeded} ok, {progress.failed} failed",
                file=self._stream,
            )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stock_metadata",
        description="Generate Adobe Stock metadata for images and videos",
    )
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories")
    keys = parser.add_mutually_exclusive_group()
    keys.add_argument("--keys", help="API keys, comma or newline separated")
    keys.add_argument("--keys-file", type=Path, help="File with one API key per line")
    parser.add_argument("--content-type", choices=("image", "video"), default=None)
    parser.add_argument("--title-length", type=int, default=None)
    parser.add_argument("--keywords", type=int, default=None, dest="keyword_count")
    parser.add_argument("--model", default=None)
    parser.add_argument(
        "--real-api",
        action="store_true",
        default=None,
        dest="use_real_api",
        help="Call Gemini instead of the offline mock client",
    )
    parser.add_argument(
        "--output", type=Path, default=Path(DEFAULT_EXPORT_FILENAME), help="CSV path"
    )
    parser.add_argument("--env-file", type=Path, default=None)
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level, format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        api_keys = args.keys
        if args.keys_file is not None:
            api_keys = args.keys_file.read_text(encoding="utf-8")
        cfg = resolve_config(
            {
                "api_keys": api_keys,
                "content_type": args.content_type,
                "title_length": args.title_length,
                "keyword_count": args.keyword_count,
                "model": args.model,
                "use_real_api": args.use_real_api,
            },
            use_env_file=args.env_file,
        )
        report = asyncio.run(
            generate_metadata(args.paths, cfg=cfg, observer=ConsoleObserver())
        )
    except (ValidationError, ConfigurationError, FileError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    for item in report.registry:
        if item.result is not None:
            print(f"OK     {item.name}: {item.result.title} [{item.result.category}]")
        else:
            print(f"FAILED {item.name}: {item.error_message}")

    written = export_csv(report.registry.results, args.output)
    if written is not None:
        print(f"Wrote {len(report.registry.results)} row(s) to {written}")
    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())

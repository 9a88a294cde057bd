"""CLI entry point: reads a k6 results log, aggregates it, writes the report."""

import argparse
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from .aggregator import aggregate
from .config import load_config
from .errors import ConfigError, SourceUnavailableError
from .reader import read_records
from .report import RENDERERS


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="k6report",
        description="Summarize a k6 `--out json` results log.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="results log to read, '-' for stdin (default: from config)",
    )
    parser.add_argument("-o", "--output", help="write the report to this file")
    parser.add_argument("--format", choices=sorted(RENDERERS), dest="output_format")
    return parser.parse_args(argv)


def _fail(message: object) -> NoReturn:
    print(f"k6report: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    try:
        config = load_config()
    except ConfigError as exc:
        _fail(exc)
    input_path = args.input or config.input_path
    output_path = args.output or config.output_path
    output_format = args.output_format or config.output_format

    try:
        records = read_records(input_path)
    except SourceUnavailableError as exc:
        _fail(exc)

    report = RENDERERS[output_format](aggregate(records))
    if output_path is None:
        sys.stdout.write(report)
        return
    try:
        Path(output_path).write_text(report, encoding="utf-8")
    except OSError as exc:
        _fail(f"cannot write {output_path}: {exc.strerror or exc}")
    print(f"Generated report: {output_path}")

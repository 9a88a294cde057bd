"""Decode a k6 ``--out json`` results log into a lazy stream of records."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional, TextIO, Union

from .errors import SourceUnavailableError

# Path that selects standard input instead of a file.
STDIN_PATH = "-"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name!r}")


def decode_line(line: str) -> Optional[Any]:
    """Return the decoded JSON value of *line*, or None.

    Blank lines and anything that is not valid JSON decode to None.
    ``NaN`` and ``Infinity`` literals are not valid JSON and are rejected
    too, so no non-finite value can reach the aggregator.
    """
    if not line.strip():
        return None
    try:
        return json.loads(line, parse_constant=_reject_constant)
    except ValueError:
        return None


def iter_records(lines: Iterable[str]) -> Iterator[Any]:
    """Yield each decodable record in *lines*, one at a time."""
    for line in lines:
        record = decode_line(line)
        if record is not None:
            yield record


def open_source(path: Union[str, Path]) -> TextIO:
    """Open the results log at *path* for reading (``-`` is stdin)."""
    if str(path) == STDIN_PATH:
        return sys.stdin
    source = Path(path)
    try:
        return open(source, encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise SourceUnavailableError(
            f"{source} not found; run k6 with --out json={source.name} first"
        ) from exc
    except IsADirectoryError as exc:
        raise SourceUnavailableError(f"{source} is a directory") from exc
    except OSError as exc:
        message = exc.strerror or exc
        raise SourceUnavailableError(f"cannot read {source}: {message}") from exc


def read_records(path: Union[str, Path]) -> Iterator[Any]:
    """Lazily yield decoded records from the results log at *path*.

    The source is opened before the first record is requested, so a
    missing file raises :class:`SourceUnavailableError` from this call.
    """
    handle = open_source(path)
    return _drain(handle, close=handle is not sys.stdin)


def _drain(handle: TextIO, close: bool) -> Iterator[Any]:
    try:
        yield from iter_records(handle)
    finally:
        if close:
            handle.close()

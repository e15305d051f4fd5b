# SPDX-License-Identifier: AGPL-3.0-or-later
"""Output helpers for persisting parsed entries."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Iterable, Mapping, TextIO

from .models import IniEntry, SyntaxIssue


def printable(text: str) -> str:
    """Render undecodable input bytes (lone surrogates) as ``\\xNN`` escapes."""

    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        # Surrogates outside the escape range only come from in-memory text.
        raw = text.encode("utf-8", "backslashreplace")
    return raw.decode("utf-8", "backslashreplace")


def _printable_fields(data: Mapping[str, object]) -> dict:
    return {key: printable(value) if isinstance(value, str) else value for key, value in data.items()}


def _serialise(record: object) -> str:
    if hasattr(record, "to_dict"):
        record = record.to_dict()  # type: ignore[attr-defined]
    if isinstance(record, Mapping):
        return json.dumps(_printable_fields(record), ensure_ascii=False)
    raise TypeError(f"Cannot serialise {type(record).__name__} as JSON")


def _open_destination(destination: str | Path | TextIO) -> tuple[TextIO, bool]:
    if isinstance(destination, (str, Path)):
        if str(destination) == "-":
            return sys.stdout, False
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path.open("w", encoding="utf-8"), True
    if hasattr(destination, "write"):
        return destination, False
    raise TypeError("destination must be a path, '-', or a text IO handle")


def write_jsonl(
    records: Iterable[IniEntry | SyntaxIssue | Mapping[str, object]],
    destination: str | Path | TextIO,
) -> None:
    """Write *records* to *destination* as JSON Lines.

    ``destination`` can be a filesystem path, ``"-"`` to indicate ``stdout``, or
    any text IO handle. The writer will ensure parent directories exist when a
    path is provided and will avoid closing file-like objects it did not open.
    """

    handle, must_close = _open_destination(destination)
    try:
        for record in records:
            handle.write(_serialise(record))
            handle.write("\n")
    finally:
        if must_close:
            handle.close()


def write_text(entries: Iterable[IniEntry], destination: str | Path | TextIO) -> None:
    """Write ``section.key = value`` lines; keys outside a section have no prefix."""

    handle, must_close = _open_destination(destination)
    try:
        for entry in entries:
            name = f"{entry.section}.{entry.key}" if entry.section else entry.key
            handle.write(printable(f"{name} = {entry.value}") + "\n")
    finally:
        if must_close:
            handle.close()

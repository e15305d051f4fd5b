# SPDX-License-Identifier: AGPL-3.0-or-later
"""Public entry points for parsing INI data from paths, handles and text."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, Any, Optional, Union

from .models import ParseReport
from .parser import ErrorCallback, HandlerCallback, load_stream
from .sources import TextStreamSource, at_eof, read_line
from .status import MAX_LINE_LENGTH, ParserFlags, ParseStatus

__all__ = ["collect", "collect_text", "load", "load_file", "loads"]

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


def load_file(
    handle: Optional[IO[Any]],
    flags: int,
    handler: Optional[HandlerCallback],
    error_handler: Optional[ErrorCallback] = None,
    *,
    encoding: Optional[str] = None,
    max_line_length: int = MAX_LINE_LENGTH,
) -> int:
    """Parse an already open file *handle*.

    Binary handles are decoded with *encoding*; the handle is left open.
    """

    if handle is None:
        return ParseStatus.INVALID_FILE_OBJECT
    if handler is None:
        return ParseStatus.INVALID_HANDLER_CALLBACK

    wrapper: Optional[io.TextIOWrapper] = None
    if isinstance(handle, (io.RawIOBase, io.BufferedIOBase)):
        wrapper = io.TextIOWrapper(
            handle,  # type: ignore[arg-type]
            encoding=encoding or DEFAULT_ENCODING,
            errors="surrogateescape",
        )
        handle = wrapper
    try:
        return load_stream(
            TextStreamSource(handle),
            flags,
            handler,
            error_handler,
            read_line,
            at_eof,
            max_line_length=max_line_length,
        )
    finally:
        if wrapper is not None:
            # Hand the binary handle back to the caller still open.
            wrapper.detach()


def load(
    path: Union[str, Path],
    flags: int,
    handler: Optional[HandlerCallback],
    error_handler: Optional[ErrorCallback] = None,
    *,
    encoding: Optional[str] = None,
    max_line_length: int = MAX_LINE_LENGTH,
) -> int:
    """Open *path*, parse it and close it again."""

    if handler is None:
        return ParseStatus.INVALID_HANDLER_CALLBACK
    target = Path(path).expanduser()
    try:
        handle = target.open("r", encoding=encoding or DEFAULT_ENCODING, errors="surrogateescape")
    except (OSError, LookupError) as exc:
        logger.warning("Unable to open '%s': %s", target, exc)
        return ParseStatus.INVALID_FILE_OBJECT
    with handle:
        return load_file(
            handle,
            flags,
            handler,
            error_handler,
            max_line_length=max_line_length,
        )


def loads(
    text: str,
    flags: int,
    handler: Optional[HandlerCallback],
    error_handler: Optional[ErrorCallback] = None,
    *,
    max_line_length: int = MAX_LINE_LENGTH,
) -> int:
    """Parse INI data held in memory."""

    return load_file(
        io.StringIO(text),
        flags,
        handler,
        error_handler,
        max_line_length=max_line_length,
    )


def collect(
    source: Union[str, Path, IO[Any]],
    flags: int = ParserFlags.NONE,
    *,
    encoding: Optional[str] = None,
    max_line_length: int = MAX_LINE_LENGTH,
) -> ParseReport:
    """Parse *source* and gather every callback into a :class:`ParseReport`.

    *source* is a path or an open handle; see :func:`collect_text` for
    in-memory data.
    """

    report = ParseReport()
    if isinstance(source, (str, Path)):
        report.result = load(
            source,
            flags,
            report.add_entry,
            report.add_issue,
            encoding=encoding,
            max_line_length=max_line_length,
        )
    else:
        report.result = load_file(
            source,
            flags,
            report.add_entry,
            report.add_issue,
            encoding=encoding,
            max_line_length=max_line_length,
        )
    return report


def collect_text(
    text: str,
    flags: int = ParserFlags.NONE,
    *,
    max_line_length: int = MAX_LINE_LENGTH,
) -> ParseReport:
    report = ParseReport()
    report.result = loads(
        text,
        flags,
        report.add_entry,
        report.add_issue,
        max_line_length=max_line_length,
    )
    return report

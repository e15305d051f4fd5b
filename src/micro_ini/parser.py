# SPDX-License-Identifier: AGPL-3.0-or-later
"""Streaming parse loop over an abstract line reader."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .classifier import LineKind, classify_line
from .status import MAX_LINE_LENGTH, MIN_LINE_LENGTH, ParserFlags, ParseStatus
from .text import lstrip_whitespace, rstrip_whitespace, strip_bom

__all__ = [
    "EofCallback",
    "ErrorCallback",
    "HandlerCallback",
    "LineBuffer",
    "ParserState",
    "ReaderCallback",
    "load_stream",
]

logger = logging.getLogger(__name__)

HandlerCallback = Callable[[str, str, str], Any]
ErrorCallback = Callable[[str, int], Any]
ReaderCallback = Callable[[Any, int], Optional[str]]
EofCallback = Callable[[Any], bool]


@dataclass
class LineBuffer:
    """Bounded logical line plus the cursor where the next read appends.

    ``cursor`` is non-zero only while a backslash continuation is being
    assembled and always stays below ``capacity``. The last position of
    ``capacity`` is reserved, so a read never fills it.
    """

    capacity: int = MAX_LINE_LENGTH
    text: str = ""
    cursor: int = 0

    @property
    def remaining(self) -> int:
        return self.capacity - self.cursor - 1

    def append(self, chunk: str) -> str:
        self.text = self.text[: self.cursor] + chunk
        return self.text

    def continue_at(self, text: str) -> None:
        """Keep *text* (already without its trailing backslash) for the next read."""

        self.text = text
        self.cursor = len(text)

    def reset(self) -> None:
        self.text = ""
        self.cursor = 0


@dataclass
class ParserState:
    """Mutable state owned by a single :func:`load_stream` call."""

    buffer: LineBuffer = field(default_factory=LineBuffer)
    section: str = ""
    physical_lines: int = 0
    lineno: int = 0
    errors: int = 0
    first_read: bool = True

    @property
    def in_continuation(self) -> bool:
        return self.buffer.cursor > 0


def _check_preconditions(
    stream: Any,
    handler: Optional[HandlerCallback],
    reader: Optional[ReaderCallback],
    eof: Optional[EofCallback],
) -> Optional[ParseStatus]:
    if stream is None:
        return ParseStatus.INVALID_STREAM_OBJECT
    if handler is None:
        return ParseStatus.INVALID_HANDLER_CALLBACK
    if reader is None:
        return ParseStatus.INVALID_READER_CALLBACK
    if eof is None:
        return ParseStatus.INVALID_EOF_CALLBACK
    return None


def load_stream(
    stream: Any,
    flags: int,
    handler: Optional[HandlerCallback],
    error_handler: Optional[ErrorCallback] = None,
    reader: Optional[ReaderCallback] = None,
    eof: Optional[EofCallback] = None,
    *,
    max_line_length: int = MAX_LINE_LENGTH,
) -> int:
    """Parse INI text pulled from *stream* one physical line at a time.

    ``reader(stream, size)`` must return at most ``size`` characters of the
    next physical line, newline included, and something falsy at end of
    input. ``eof(stream)`` reports whether the source is exhausted.

    ``handler(section, key, value)`` is called for every key/value line and
    ``error_handler(line, lineno)``, when given, for every malformed line.

    Returns a negative :class:`ParseStatus` on a fatal condition, otherwise
    the number of malformed lines (``0`` for a clean parse).
    """

    failure = _check_preconditions(stream, handler, reader, eof)
    if failure is not None:
        return failure
    if max_line_length < MIN_LINE_LENGTH:
        raise ValueError(f"max_line_length must be >= {MIN_LINE_LENGTH}")

    flags = ParserFlags(flags)
    state = ParserState(buffer=LineBuffer(capacity=max_line_length))
    buffer = state.buffer

    while True:
        size = buffer.remaining
        chunk = reader(stream, size)
        if not chunk:
            break
        if len(chunk) > size:
            logger.warning("Reader returned %d characters for a %d character read", len(chunk), size)
            return ParseStatus.BUFFER_OVERFLOW

        state.physical_lines += 1
        if not state.in_continuation:
            state.lineno = state.physical_lines

        if state.first_read:
            state.first_read = False
            if flags & ParserFlags.BOM:
                chunk, skipped = strip_bom(chunk)
                if skipped:
                    logger.debug("Skipped byte-order marker")

        line = buffer.append(chunk)
        if not line.rstrip("\r\n"):
            # Blank physical line; nothing to classify.
            buffer.reset()
            continue

        if not line.endswith("\n") and not eof(stream):
            logger.warning(
                "Line %d exceeds the maximum length of %d characters",
                state.physical_lines,
                max_line_length,
            )
            return ParseStatus.BUFFER_OVERFLOW

        line = rstrip_whitespace(line)

        if flags & ParserFlags.MULTILINE and line.endswith("\\"):
            buffer.continue_at(line[:-1])
            continue

        _dispatch(state, line, handler, error_handler)
        if state.errors and flags & ParserFlags.STOP_ON_FIRST_ERROR:
            return state.errors

        buffer.reset()

    return ParseStatus.SUCCESS + state.errors


def _dispatch(
    state: ParserState,
    line: str,
    handler: HandlerCallback,
    error_handler: Optional[ErrorCallback],
) -> None:
    result = classify_line(lstrip_whitespace(line), state.section)

    if result.kind is LineKind.VALUE:
        handler(result.section, result.key, result.value)
    elif result.kind is LineKind.ERROR:
        logger.debug("Syntax error on line %d: %r", state.lineno, line)
        if error_handler is not None:
            error_handler(line, state.lineno)
        state.errors += 1
    elif result.kind is LineKind.SECTION and result.section != state.section:
        logger.debug("Entering section %r on line %d", result.section, state.lineno)

    state.section = result.section

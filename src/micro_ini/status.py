# SPDX-License-Identifier: AGPL-3.0-or-later
"""Parser flags, result codes and limits shared by every entry point."""

from __future__ import annotations

from enum import IntEnum, IntFlag

__all__ = ["MAX_LINE_LENGTH", "MIN_LINE_LENGTH", "ParseStatus", "ParserFlags", "__version__"]

__version__ = "1.0.0"

# One position is reserved for the terminator: a physical line holds at most
# ``MAX_LINE_LENGTH - 1`` characters, newline included.
MAX_LINE_LENGTH = 512
MIN_LINE_LENGTH = 2


class ParserFlags(IntFlag):
    """Independently combinable parser options."""

    NONE = 0
    BOM = 0x1
    MULTILINE = 0x2
    STOP_ON_FIRST_ERROR = 0x4


class ParseStatus(IntEnum):
    """Fatal result codes.

    Non-negative results are not members: they are the number of malformed
    lines seen during a completed (or stopped) parse.
    """

    SUCCESS = 0
    INVALID_FILE_OBJECT = -1
    INVALID_STREAM_OBJECT = -2
    INVALID_HANDLER_CALLBACK = -3
    INVALID_READER_CALLBACK = -4
    INVALID_EOF_CALLBACK = -5
    BUFFER_OVERFLOW = -6

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ParseStatus.SUCCESS: "parsing succeeded",
    ParseStatus.INVALID_FILE_OBJECT: "file object is missing or could not be opened",
    ParseStatus.INVALID_STREAM_OBJECT: "stream object is missing",
    ParseStatus.INVALID_HANDLER_CALLBACK: "key/value handler callback is missing",
    ParseStatus.INVALID_READER_CALLBACK: "reader callback is missing",
    ParseStatus.INVALID_EOF_CALLBACK: "eof callback is missing",
    ParseStatus.BUFFER_OVERFLOW: "a line exceeded the maximum allowed length",
}

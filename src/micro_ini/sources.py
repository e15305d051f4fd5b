# SPDX-License-Identifier: AGPL-3.0-or-later
"""Reader/eof adapters turning ordinary file handles into parser sources."""

from __future__ import annotations

from typing import IO, Optional

__all__ = ["TextStreamSource", "at_eof", "read_line"]


class TextStreamSource:
    """Wrap a handle exposing ``readline(size)`` with one character of lookahead.

    ``readline`` alone cannot tell whether a read that stopped at ``size``
    characters also reached the end of the data; :meth:`at_eof` peeks one
    character ahead and keeps it for the next read.
    """

    def __init__(self, handle: IO[str]) -> None:
        if not hasattr(handle, "readline"):
            raise TypeError("handle must provide readline()")
        self.handle = handle
        self._pending = ""
        self._exhausted = False

    def readline(self, size: int) -> Optional[str]:
        if size <= 0:
            return None
        text = self._pending
        self._pending = ""
        if not text.endswith("\n") and len(text) < size and not self._exhausted:
            data = self.handle.readline(size - len(text))
            if not data:
                self._exhausted = True
            text += data
        return text or None

    def at_eof(self) -> bool:
        if self._pending:
            return False
        if self._exhausted:
            return True
        peek = self.handle.read(1)
        if not peek:
            self._exhausted = True
            return True
        self._pending = peek
        return False


def read_line(source: TextStreamSource, size: int) -> Optional[str]:
    """Reader callback for :func:`micro_ini.parser.load_stream`."""

    return source.readline(size)


def at_eof(source: TextStreamSource) -> bool:
    """Eof callback for :func:`micro_ini.parser.load_stream`."""

    return source.at_eof()

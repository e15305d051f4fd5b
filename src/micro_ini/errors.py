# SPDX-License-Identifier: AGPL-3.0-or-later
"""Exception view over the integer result codes."""

from __future__ import annotations

from .status import ParseStatus

__all__ = ["MicroIniError", "raise_for_status"]


class MicroIniError(RuntimeError):
    """Raised when a parse ends with a fatal :class:`ParseStatus`."""

    def __init__(self, status: ParseStatus, source: str | None = None) -> None:
        self.status = status
        self.source = source
        message = status.description
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


def raise_for_status(result: int, source: str | None = None) -> int:
    """Return the syntax error count in *result* or raise for fatal codes."""

    if result < 0:
        raise MicroIniError(ParseStatus(result), source)
    return result

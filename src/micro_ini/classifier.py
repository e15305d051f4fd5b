# SPDX-License-Identifier: AGPL-3.0-or-later
"""Classification of a single trimmed INI line.

The value forms are tried in a fixed order and the first one that matches
wins:

1. ``key = "value"`` / ``key = 'value'``
2. ``key = value`` (value ends at the first ``;`` or ``#``)
3. ``key = ;...`` / ``key = #...``
4. ``key =``

Quoted forms come first so that ``;`` and ``#`` inside quotes are kept.
Everything is done with plain index scanning over the line; each form only
ever looks at the text after the first ``=``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .text import lstrip_whitespace, strip_whitespace

__all__ = ["ClassifiedLine", "LineKind", "classify_line"]

_COMMENT_CHARS = "#;"
_QUOTE_CHARS = "\"'"
_EMPTY_QUOTES = ('""', "''")


class LineKind(Enum):
    EMPTY = "empty"
    COMMENT = "comment"
    SECTION = "section"
    VALUE = "value"
    ERROR = "error"


@dataclass(frozen=True)
class ClassifiedLine:
    """Result of :func:`classify_line`.

    ``section`` always carries the section in effect after the line, so a
    caller can thread it into the next call unchanged.
    """

    kind: LineKind
    section: str = ""
    key: str = ""
    value: str = ""


def _split_key(line: str) -> Optional[Tuple[str, str]]:
    """Return ``(key, rest)`` around the first ``=``, or ``None``.

    The key must be at least one character long.
    """

    index = line.find("=")
    if index <= 0:
        return None
    return line[:index], line[index + 1 :]


def _quoted_value(rest: str) -> Optional[str]:
    body = lstrip_whitespace(rest)
    if not body or body[0] not in _QUOTE_CHARS:
        return None
    quote = body[0]
    closing = body.find(quote, 1)
    # An unclosed quote runs to the end of the line.
    captured = body[1:] if closing == -1 else body[1:closing]
    if not captured:
        if closing == 1:
            return ""
        return None
    value = strip_whitespace(captured)
    if value in _EMPTY_QUOTES:
        return ""
    return value


def _unquoted_value(rest: str) -> Optional[str]:
    body = lstrip_whitespace(rest)
    end = len(body)
    for index, char in enumerate(body):
        if char in _COMMENT_CHARS:
            end = index
            break
    if end == 0:
        return None
    return strip_whitespace(body[:end])


def _comment_only_value(rest: str) -> Optional[str]:
    body = lstrip_whitespace(rest)
    if body and body[0] in _COMMENT_CHARS:
        return ""
    return None


def _bare_value(rest: str) -> Optional[str]:
    if lstrip_whitespace(rest):
        return None
    return ""


_VALUE_FORMS = (_quoted_value, _unquoted_value, _comment_only_value, _bare_value)


def _section_name(line: str, current: str) -> str:
    closing = line.find("]", 1)
    captured = line[1:closing]
    if not captured:
        # ``[]`` captures nothing and keeps the previous section.
        return current
    return strip_whitespace(captured)


def classify_line(line: str, section: str = "") -> ClassifiedLine:
    """Classify a trimmed *line* read while *section* is the current section."""

    if not line:
        return ClassifiedLine(LineKind.EMPTY, section)
    if line[0] in _COMMENT_CHARS:
        return ClassifiedLine(LineKind.COMMENT, section)
    if line[0] == "[" and line[-1] == "]":
        return ClassifiedLine(LineKind.SECTION, _section_name(line, section))

    split = _split_key(line)
    if split is None:
        return ClassifiedLine(LineKind.ERROR, section)
    raw_key, rest = split
    key = strip_whitespace(raw_key)

    for form in _VALUE_FORMS:
        value = form(rest)
        if value is not None:
            return ClassifiedLine(LineKind.VALUE, section, key, value)
    return ClassifiedLine(LineKind.ERROR, section)

# SPDX-License-Identifier: AGPL-3.0-or-later
"""Lightweight records collected from parser callbacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .status import ParseStatus


@dataclass(slots=True)
class IniEntry:
    """One key/value callback, in the order it was reported."""

    section: str
    key: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"section": self.section, "key": self.key, "value": self.value}


@dataclass(slots=True)
class SyntaxIssue:
    """A malformed line reported through the error callback."""

    line: str
    lineno: int

    def to_dict(self) -> Dict[str, Any]:
        return {"line": self.line, "lineno": self.lineno}


@dataclass(slots=True)
class ParseReport:
    """Everything a parse reported, without merging or de-duplication."""

    result: int = ParseStatus.SUCCESS
    entries: List[IniEntry] = field(default_factory=list)
    issues: List[SyntaxIssue] = field(default_factory=list)

    def add_entry(self, section: str, key: str, value: str) -> None:
        self.entries.append(IniEntry(section, key, value))

    def add_issue(self, line: str, lineno: int) -> None:
        self.issues.append(SyntaxIssue(line, lineno))

    @property
    def fatal(self) -> bool:
        return self.result < 0

    @property
    def ok(self) -> bool:
        return self.result == ParseStatus.SUCCESS

    @property
    def status(self) -> ParseStatus | None:
        """The fatal status, or ``None`` when the parse ran to completion."""

        return ParseStatus(self.result) if self.fatal else None

    def sections(self) -> List[str]:
        """Return section names in first-seen order."""

        seen: Dict[str, None] = {}
        for entry in self.entries:
            seen.setdefault(entry.section, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""

        return {
            "result": int(self.result),
            "entries": [entry.to_dict() for entry in self.entries],
            "issues": [issue.to_dict() for issue in self.issues],
        }

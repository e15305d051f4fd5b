# SPDX-License-Identifier: AGPL-3.0-or-later
"""Public interface for :mod:`micro_ini` with lightweight imports."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any, Dict, Tuple

from .status import MAX_LINE_LENGTH, ParserFlags, ParseStatus, __version__

__all__ = [
    "MAX_LINE_LENGTH",
    "ParserFlags",
    "ParseStatus",
    "__version__",
    "load",
    "load_file",
    "load_stream",
    "loads",
    "collect",
    "collect_text",
    "classify_line",
    "ClassifiedLine",
    "LineKind",
    "IniEntry",
    "SyntaxIssue",
    "ParseReport",
    "MicroIniError",
    "raise_for_status",
    "TextStreamSource",
]

_LAZY_ATTRS: Dict[str, Tuple[str, str]] = {
    "load": (".loader", "load"),
    "load_file": (".loader", "load_file"),
    "loads": (".loader", "loads"),
    "collect": (".loader", "collect"),
    "collect_text": (".loader", "collect_text"),
    "load_stream": (".parser", "load_stream"),
    "classify_line": (".classifier", "classify_line"),
    "ClassifiedLine": (".classifier", "ClassifiedLine"),
    "LineKind": (".classifier", "LineKind"),
    "IniEntry": (".models", "IniEntry"),
    "SyntaxIssue": (".models", "SyntaxIssue"),
    "ParseReport": (".models", "ParseReport"),
    "MicroIniError": (".errors", "MicroIniError"),
    "raise_for_status": (".errors", "raise_for_status"),
    "TextStreamSource": (".sources", "TextStreamSource"),
}

if TYPE_CHECKING:  # pragma: no cover - import-time only for type checkers
    from .classifier import ClassifiedLine, LineKind, classify_line
    from .errors import MicroIniError, raise_for_status
    from .loader import collect, collect_text, load, load_file, loads
    from .models import IniEntry, ParseReport, SyntaxIssue
    from .parser import load_stream
    from .sources import TextStreamSource


def __getattr__(name: str) -> Any:
    try:
        module_name, attr_name = _LAZY_ATTRS[name]
    except KeyError as exc:  # pragma: no cover - defensive
        raise AttributeError(name) from exc
    module = import_module(module_name, package=__name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:  # pragma: no cover - simple delegation
    return sorted(__all__)

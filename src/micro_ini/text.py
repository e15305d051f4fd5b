# SPDX-License-Identifier: AGPL-3.0-or-later
"""ASCII whitespace trimming and byte-order marker helpers."""

from __future__ import annotations

import string
from typing import Tuple

__all__ = [
    "ASCII_WHITESPACE",
    "BOM_MARKERS",
    "lstrip_whitespace",
    "rstrip_whitespace",
    "strip_bom",
    "strip_whitespace",
]

# ``str.strip()`` with no argument would also remove Unicode spaces such as
# U+00A0.
ASCII_WHITESPACE = string.whitespace

BOM_MARKERS: Tuple[str, ...] = (
    "\ufeff",
    "\xef\xbb\xbf",
)


def strip_whitespace(text: str) -> str:
    """Return *text* without leading or trailing ASCII whitespace.

    An empty or all-whitespace input yields ``""``.
    """

    return text.strip(ASCII_WHITESPACE)


def rstrip_whitespace(text: str) -> str:
    return text.rstrip(ASCII_WHITESPACE)


def lstrip_whitespace(text: str) -> str:
    return text.lstrip(ASCII_WHITESPACE)


def strip_bom(text: str) -> Tuple[str, bool]:
    """Remove a leading UTF-8 byte-order marker from *text*.

    Handles both the decoded marker and its three raw bytes as they appear
    when the source was read through a byte-transparent codec.
    """

    for marker in BOM_MARKERS:
        if text.startswith(marker):
            return text[len(marker) :], True
    return text, False

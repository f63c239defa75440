"""Display-width helpers for laying text into terminal cells."""

from __future__ import annotations

import unicodedata

TAB_STOP = 8


def char_display_width(ch: str, col: int = 0) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    col = 0
    for ch in text:
        col += char_display_width(ch, col)
    return col


def sgr(style: str) -> str:
    """Build an SGR escape for ``style`` parameters such as ``"1;33"``."""
    return f"\033[{style}m" if style else ""


RESET = "\033[0m"

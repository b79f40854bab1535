"""Column arithmetic for program output that may carry SGR color codes.

Captured output is measured in terminal cells: escape sequences take no
room, tabs run to the next stop, wide CJK characters take two cells.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterator

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
REVERSE = "\033[7m"
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when it is drawn at column ``col``."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _segments(text: str) -> Iterator[tuple[str, int]]:
    """Yield ``(piece, cells)`` pairs; escapes come through with zero cells."""
    pos = 0
    col = 0
    end = len(text)
    while pos < end:
        escape = ANSI_ESCAPE_RE.match(text, pos) if text[pos] == "\x1b" else None
        if escape is not None:
            yield escape.group(0), 0
            pos = escape.end()
            continue
        ch = text[pos]
        cells = char_display_width(ch, col)
        yield (" " * cells if ch == "\t" else ch), cells
        col += cells
        pos += 1


def display_width(text: str) -> int:
    return sum(cells for _piece, cells in _segments(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` cells.

    Escapes before the cut are kept so colors stay balanced with the
    caller's trailing reset; tabs come back expanded to spaces.
    """
    kept: list[str] = []
    used = 0
    for piece, cells in _segments(text):
        if used >= max_cols or used + cells > max_cols:
            break
        kept.append(piece)
        used += cells
    return "".join(kept)


def selected_with_ansi(text: str) -> str:
    """Reverse-video ``text``, re-arming reverse after each embedded reset."""
    if not text:
        return text
    return REVERSE + text.replace(RESET, RESET[:-1] + ";7m") + RESET


__all__ = [
    "ANSI_ESCAPE_RE",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "selected_with_ansi",
]

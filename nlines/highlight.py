"""Sanitization and Pygments colorization of captured output.

Program output is displayed verbatim, so terminal control bytes are escaped
before rendering. Colorization picks a lexer from the sole source file name.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
FALLBACK_STYLE = "monokai"


def _escape_control(match: re.Match[str]) -> str:
    return f"\\x{ord(match.group(0)):02x}"


def sanitize_terminal_text(source: str) -> str:
    """Show C0/C1 control bytes and DEL as ``\\xNN`` so output cannot drive the tty."""
    return _CONTROL_RE.sub(_escape_control, source)


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> TerminalFormatter:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        style = FALLBACK_STYLE
    return TerminalFormatter(style=style)


def colorize_output(text: str, path: Path | None, style: str = FALLBACK_STYLE) -> str:
    """Return ``text`` with ANSI colors for the language of ``path``.

    Output of several files (``path`` is ``None``) or of an unknown file type
    is rendered with the plain text lexer.
    """
    if not text:
        return text
    lexer = TextLexer(stripnl=False)
    if path is not None:
        try:
            lexer = get_lexer_for_filename(path.name, text, stripnl=False)
        except ClassNotFound:
            pass
    rendered = highlight(text, lexer, _formatter_for_style(style))
    # Pygments always terminates output with a newline.
    if not text.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


__all__ = ["colorize_output", "sanitize_terminal_text"]

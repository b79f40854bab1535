"""Frame composition for the interactive session.

Rendering is side-effect free: ``render_frame`` returns the escape-sequence
payload for one full screen and the caller writes it.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from .ansi import ANSI_ESCAPE_RE, clip_ansi_line, display_width, selected_with_ansi
from .highlight import colorize_output, sanitize_terminal_text
from .views import View

HELP_KEY_STYLE = "\033[38;5;229m"
HELP_HEADING_STYLE = "\033[1;38;5;81m"
DIM_STYLE = "\033[2m"
RESET = "\033[0m"

HELP_PANEL_LINES: tuple[str, ...] = (
    f"{HELP_HEADING_STYLE}KEYS{RESET}",
    f"{HELP_KEY_STYLE}n{RESET} new view  {HELP_KEY_STYLE}g{RESET} refresh  {HELP_KEY_STYLE}s{RESET} switch command",
    f"{HELP_KEY_STYLE}c{RESET} columnify  {HELP_KEY_STYLE}C{RESET} columnify with delimiter",
    f"{HELP_KEY_STYLE}10g{RESET} refresh with 10 lines  {HELP_KEY_STYLE}5n{RESET}/{HELP_KEY_STYLE}5s{RESET} same for new/switch",
    f"{HELP_KEY_STYLE}m{RESET} mark file at cursor  {HELP_KEY_STYLE}u{RESET} clear marks",
    f"{HELP_KEY_STYLE}Tab{RESET} next view  {HELP_KEY_STYLE}x{RESET} close view",
    f"{HELP_KEY_STYLE}j/k{RESET} line  {HELP_KEY_STYLE}Space/b{RESET} page  {HELP_KEY_STYLE}Home/G{RESET} top/bottom",
    f"{HELP_KEY_STYLE}?{RESET} help  {HELP_KEY_STYLE}q{RESET} quit",
)


def command_help_lines(rows: tuple[tuple[str, str], ...]) -> tuple[str, ...]:
    """Format ``(key, program)`` rows for the picker's side panel."""
    lines = [f"{HELP_HEADING_STYLE}COMMANDS{RESET}"]
    lines.extend(f"{HELP_KEY_STYLE}{key}{RESET}  {program}" for key, program in rows)
    return tuple(lines)


def build_status_line(left_text: str, width: int, right_text: str = "│ ? Help") -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def status_text(view: View | None, marked_count: int, count_buffer: str, message: str) -> str:
    """Describe the current view, marks, pending count prefix and last message."""
    if view is None:
        parts = ["no view"]
    else:
        state = view.state
        total = len(view.lines())
        position = f"{min(view.cursor + 1, total)}/{total}" if total else "0/0"
        parts = [view.name, f"[{state.line_flag} {state.line_count}]", position]
    if marked_count:
        parts.append(f"marked:{marked_count}")
    if count_buffer:
        parts.append(f"count:{count_buffer}")
    if message:
        parts.append(f"- {message}")
    return "  ".join(parts)


@lru_cache(maxsize=8)
def _display_lines(text: str, path: Path | None, style: str, no_color: bool) -> tuple[str, ...]:
    """Screen rows for ``text``, one per entry of ``text.splitlines()``."""
    rows = [sanitize_terminal_text(line) for line in text.splitlines()]
    if no_color or not rows:
        return tuple(rows)
    # Rows hold no line separators now, so "\n" is the only one pygments sees.
    colored = colorize_output("\n".join(rows) + "\n", path, style).split("\n")
    if len(colored) == len(rows) + 1 and not ANSI_ESCAPE_RE.sub("", colored[-1]):
        colored.pop()
    if len(colored) != len(rows):
        colored = [colorize_output(row, path, style) for row in rows]
    return tuple(colored)


def view_display_lines(view: View, style: str, no_color: bool) -> tuple[str, ...]:
    files = view.state.files
    path = files[0] if len(files) == 1 else None
    return _display_lines(view.text, path, style, no_color)


def scroll_top(cursor: int, top: int, visible_rows: int) -> int:
    """Return a scroll offset keeping ``cursor`` inside the visible rows."""
    visible_rows = max(1, visible_rows)
    if cursor < top:
        return cursor
    if cursor >= top + visible_rows:
        return cursor - visible_rows + 1
    return max(0, top)


def render_frame(
    view: View | None,
    top: int,
    columns: int,
    rows: int,
    *,
    status: str,
    prompt: str = "",
    side_lines: tuple[str, ...] = (),
    show_help: bool = False,
    style: str = "monokai",
    no_color: bool = False,
) -> str:
    """Build one full-screen frame.

    The last row holds the prompt when one is active, otherwise the status
    line. Side-panel and help lines take rows from the bottom of the body.
    """
    body_rows = max(0, rows - 1)
    panel = list(side_lines)
    if show_help:
        panel.extend(HELP_PANEL_LINES)
    panel = panel[:body_rows]
    text_rows = body_rows - len(panel)

    lines = view_display_lines(view, style, no_color) if view is not None else ()
    out: list[str] = ["\033[H"]
    for row in range(text_rows):
        idx = top + row
        line = clip_ansi_line(lines[idx], columns) if idx < len(lines) else ""
        if view is not None and idx == view.cursor and idx < len(lines):
            pad = " " * max(0, columns - display_width(line))
            line = selected_with_ansi(line + pad)
        out.append(line + RESET + "\033[K\r\n")
    for panel_line in panel:
        out.append(f"{DIM_STYLE}│{RESET} " + clip_ansi_line(panel_line, max(0, columns - 2)) + RESET + "\033[K\r\n")

    if prompt:
        out.append(clip_ansi_line(prompt, columns) + "\033[K")
    else:
        out.append("\033[7m" + build_status_line(status, columns) + RESET + "\033[K")
    return "".join(out)


__all__ = [
    "HELP_PANEL_LINES",
    "build_status_line",
    "command_help_lines",
    "render_frame",
    "scroll_top",
    "status_text",
    "view_display_lines",
]

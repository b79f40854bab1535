"""Interactive runtime wiring: terminal, key reader, renderer and session."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .commands import CommandRegistry
from .config import Settings
from .input import read_key
from .render import HELP_PANEL_LINES, render_frame, scroll_top, status_text
from .session import Session
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_TIMEOUT_MS = 250


def run_session(
    registry: CommandRegistry,
    settings: Settings,
    files: Sequence[Path],
    *,
    initial_key: str | None = None,
    line_count: int | None = None,
    no_color: bool = False,
    terminal: TerminalController | None = None,
) -> None:
    """Run the full-screen session until the user quits."""
    term = terminal if terminal is not None else TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    session: Session

    def body_rows() -> int:
        _columns, rows = term.size()
        return max(1, rows - 1)

    def redraw() -> None:
        state = session.state
        columns, rows = term.size()
        panel_rows = len(state.side_lines) + (len(HELP_PANEL_LINES) if state.show_help else 0)
        visible = max(1, rows - 1 - panel_rows)
        if state.current is not None:
            state.top = scroll_top(state.current.cursor, state.top, visible)
        frame = render_frame(
            state.current,
            state.top,
            columns,
            rows,
            status=status_text(state.current, len(state.marked), state.count_buffer, state.message),
            prompt=state.prompt,
            side_lines=state.side_lines,
            show_help=state.show_help,
            style=settings.style,
            no_color=no_color,
        )
        term.write(frame)

    def next_key() -> str:
        return read_key(term.stdin_fd, timeout_ms=KEY_POLL_TIMEOUT_MS)

    session = Session(
        registry,
        settings,
        read_key=next_key,
        redraw=redraw,
        marked=files,
        page_rows=body_rows,
    )
    logger.info("session start with %d marked file(s)", len(files))
    with term.raw_mode():
        if initial_key is not None:
            session.open_with(initial_key, line_count)
        elif line_count is not None:
            session.state.count_buffer = str(line_count)
        session.run()
    logger.info("session end")


__all__ = ["run_session"]

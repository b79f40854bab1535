"""tty ownership for the full-screen session.

Child processes get ``/dev/null`` or a pipe as stdin, so the tty can stay
raw while ``head``/``tail``/``column`` run.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l"
LEAVE_SCREEN = b"\x1b[?25h\x1b[?1049l"
FALLBACK_SIZE = (80, 24)


class TerminalController:
    """Switch the controlling tty between cooked and raw alternate-screen mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        # Attributes in effect at startup; restored on the way out.
        self._cooked = termios.tcgetattr(stdin_fd)

    def _emit(self, data: bytes) -> None:
        os.write(self.stdout_fd, data)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._emit(ENTER_SCREEN)

    def disable_tui_mode(self) -> None:
        self._emit(LEAVE_SCREEN)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._cooked)

    def write(self, payload: str) -> None:
        self._emit(payload.encode("utf-8", errors="replace"))

    def size(self) -> tuple[int, int]:
        """``(columns, rows)``; at least two rows so the status line fits."""
        columns, rows = shutil.get_terminal_size(FALLBACK_SIZE)
        return max(1, columns), max(2, rows)

    @contextlib.contextmanager
    def raw_mode(self):
        self.enable_tui_mode()
        try:
            yield self
        finally:
            self.disable_tui_mode()


__all__ = ["TerminalController"]

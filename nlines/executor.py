"""Synchronous external program invocation for views.

Runs a view's generating command and stores its combined output in the
view, or pipes existing view text through a filter such as ``column``.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence

from .errors import ProcessInvocationFailure
from .state import ViewState
from .views import View

logger = logging.getLogger(__name__)

COLUMN_PROGRAM = "column"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def column_argv(delimiter: str | None, program: str = COLUMN_PROGRAM) -> list[str]:
    """Build the formatter argv; no separator argument when ``delimiter`` is unset."""
    argv = [program, "--table"]
    if delimiter:
        argv.extend(["--separator", delimiter])
    return argv


class ViewExecutor:
    """Run processes one at a time and capture their output into views."""

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner if runner is not None else subprocess.run

    def _run(self, argv: Sequence[str], stdin_text: str | None = None) -> subprocess.CompletedProcess[str]:
        logger.debug("running %s", argv)
        kwargs: dict[str, object] = {
            "stdout": subprocess.PIPE,
            "stderr": subprocess.STDOUT,
            "text": True,
            "encoding": "utf-8",
            "errors": "replace",
            "check": False,
        }
        if stdin_text is not None:
            kwargs["input"] = stdin_text
        else:
            kwargs["stdin"] = subprocess.DEVNULL
        try:
            return self._runner(list(argv), **kwargs)
        except OSError as exc:
            logger.warning("cannot run %s: %s", argv[0], exc)
            raise ProcessInvocationFailure(argv, None, str(exc)) from exc

    def execute(self, state: ViewState, view: View) -> None:
        """Regenerate ``view`` from ``state``.

        The view is cleared first and keeps whatever output was captured even
        when the program exits non-zero.
        """
        view.replace_text("")
        argv = state.argv()
        proc = self._run(argv)
        view.replace_text(proc.stdout or "")
        if proc.returncode != 0:
            logger.warning("%s exited with status %d", argv[0], proc.returncode)
            raise ProcessInvocationFailure(argv, proc.returncode)

    def filter_view(self, view: View, argv: Sequence[str]) -> None:
        """Replace ``view``'s text with ``argv``'s output for that text.

        On failure the view text is left unchanged.
        """
        proc = self._run(argv, stdin_text=view.text)
        if proc.returncode != 0:
            logger.warning("%s exited with status %d", argv[0], proc.returncode)
            raise ProcessInvocationFailure(argv, proc.returncode)
        view.replace_text(proc.stdout or "")


__all__ = ["COLUMN_PROGRAM", "ViewExecutor", "column_argv"]

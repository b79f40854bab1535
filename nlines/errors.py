"""Error kinds raised by view operations.

Every error is user-facing: the session shows the message and keeps running,
the one-shot CLI prints it and exits non-zero.
"""

from __future__ import annotations

from collections.abc import Sequence


class NlinesError(Exception):
    """Base class for all nlines operation failures."""


class RegistryError(NlinesError):
    """Command registry definition or lookup is invalid."""


class InputCancelled(NlinesError):
    """User aborted an interactive choice or prompt."""

    def __init__(self, message: str = "Cancelled.") -> None:
        super().__init__(message)


class NoFileSelected(NlinesError):
    def __init__(self, message: str = "No file selected.") -> None:
        super().__init__(message)


class TooManyFiles(NlinesError):
    """A single-file-only command was given more than one file."""

    def __init__(self, program: str, count: int) -> None:
        super().__init__(f"{program} accepts only one file ({count} selected).")
        self.program = program
        self.count = count


class MultiFileColumnify(NlinesError):
    def __init__(self, count: int) -> None:
        super().__init__(f"Cannot columnify output of {count} files.")
        self.count = count


class ProcessInvocationFailure(NlinesError):
    """External program was missing or reported failure.

    ``returncode`` is ``None`` when the program could not be started at all.
    """

    def __init__(self, argv: Sequence[str], returncode: int | None, detail: str = "") -> None:
        self.argv = tuple(argv)
        self.returncode = returncode
        program = self.argv[0] if self.argv else "<none>"
        if returncode is None:
            message = f"Failed to run {program}: {detail}" if detail else f"Failed to run {program}."
        else:
            message = f"{program} exited with status {returncode}."
        super().__init__(message)

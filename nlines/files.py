"""Target file resolution for new views.

Sources are tried in order: marked files, the path at the cursor, then an
interactive prompt. The first source yielding anything wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path

from .errors import NoFileSelected

_HEADER_RE = re.compile(r"^==> (?P<path>.+) <==$")


def path_from_line(line: str) -> Path | None:
    """Extract an existing file path from one line of view text.

    Accepts a bare path or a ``==> path <==`` header as printed by ``head``
    and ``tail`` for multiple files.
    """
    text = line.strip()
    if not text:
        return None
    match = _HEADER_RE.match(text)
    if match is not None:
        text = match.group("path")
    candidate = Path(text).expanduser()
    try:
        if candidate.is_file():
            return candidate
    except OSError:
        return None
    return None


class FileResolver:
    """Resolve a non-empty file list from injected selection sources."""

    def __init__(
        self,
        marked_files: Callable[[], Sequence[Path]],
        line_at_cursor: Callable[[], str],
        prompt_path: Callable[[], str],
    ) -> None:
        self._marked_files = marked_files
        self._line_at_cursor = line_at_cursor
        self._prompt_path = prompt_path

    def resolve_files(self) -> tuple[Path, ...]:
        marked = tuple(self._marked_files())
        if marked:
            return marked

        at_cursor = path_from_line(self._line_at_cursor())
        if at_cursor is not None:
            return (at_cursor,)

        answer = self._prompt_path().strip()
        if answer:
            return (Path(answer).expanduser(),)
        raise NoFileSelected()


__all__ = ["FileResolver", "path_from_line"]

"""The four user-facing view operations.

``create`` is the only way a view comes into being; ``refresh`` re-runs the
same command, ``switch_command`` swaps the command while holding the file
list fixed, and ``columnify`` reformats displayed text without touching the
generating state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .commands import CommandDescriptor
from .config import Settings
from .errors import MultiFileColumnify, TooManyFiles
from .executor import ViewExecutor, column_argv
from .files import FileResolver
from .state import ViewState, format_line_count
from .views import View, ViewStore

logger = logging.getLogger(__name__)


class Picker(Protocol):
    def choose(self) -> CommandDescriptor: ...


def _check_file_count(descriptor: CommandDescriptor, files: tuple[Path, ...]) -> None:
    if descriptor.single_file_only and len(files) > 1:
        raise TooManyFiles(descriptor.program, len(files))


class ViewController:
    """Drive view state transitions and process execution."""

    def __init__(
        self,
        picker: Picker,
        resolver: FileResolver,
        store: ViewStore,
        executor: ViewExecutor,
        settings: Settings,
    ) -> None:
        self.picker = picker
        self.resolver = resolver
        self.store = store
        self.executor = executor
        self.settings = settings

    def _line_count(self, override: int | None, fallback: str | None = None) -> str:
        if override is not None:
            return format_line_count(override)
        if fallback is not None:
            return fallback
        return format_line_count(self.settings.default_line_count)

    def create(self, line_count: int | None = None) -> View:
        """Choose a command and files, then generate a new (or re-used) view."""
        count = self._line_count(line_count)
        descriptor = self.picker.choose()
        files = self.resolver.resolve_files()
        _check_file_count(descriptor, files)
        state = ViewState.from_descriptor(descriptor, count, files)
        view = self.store.obtain(state)
        logger.info("create %s", view.name)
        self.executor.execute(state, view)
        return view

    def refresh(self, view: View, line_count: int | None = None) -> View:
        """Re-run the view's command, optionally with a new line count."""
        if line_count is not None:
            view.state = view.state.with_line_count(format_line_count(line_count))
            self.store.rename(view)
        logger.info("refresh %s", view.name)
        self.executor.execute(view.state, view)
        return view

    def switch_command(self, view: View, line_count: int | None = None) -> View:
        """Regenerate ``view`` with a newly chosen command over the same files."""
        count = self._line_count(line_count, fallback=view.state.line_count)
        descriptor = self.picker.choose()
        files = view.state.files
        _check_file_count(descriptor, files)
        view.state = ViewState.from_descriptor(descriptor, count, files)
        self.store.rename(view)
        logger.info("switch %s", view.name)
        self.executor.execute(view.state, view)
        return view

    def delimiter_for(self, path: Path) -> str | None:
        """Configured column separator for ``path``'s extension, if any."""
        extension = path.suffix[1:] if path.suffix else ""
        if not extension:
            return None
        return self.settings.column_delimiters.get(extension)

    def columnify(self, view: View, delimiter: str | None = None) -> View:
        """Pipe the view's text through ``column --table`` in place."""
        files = view.state.files
        if len(files) > 1:
            raise MultiFileColumnify(len(files))
        separator = delimiter if delimiter else self.delimiter_for(files[0])
        logger.info("columnify %s (separator %r)", view.name, separator)
        self.executor.filter_view(view, column_argv(separator))
        return view


__all__ = ["Picker", "ViewController"]

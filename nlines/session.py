"""Interactive session: key dispatch over the view controller.

The session owns the view store, the marked-file selection, the count
prefix and the message line. It reads keys and redraws through injected
callables, so it runs the same against a real terminal or scripted keys.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .commands import CommandRegistry
from .config import Settings
from .controller import ViewController
from .errors import InputCancelled, NlinesError
from .executor import ViewExecutor
from .files import FileResolver, path_from_line
from .keys import KeyBinding, KeyRegistry
from .picker import CommandPicker, PresetPicker
from .render import command_help_lines
from .views import View, ViewStore

logger = logging.getLogger(__name__)

PAGE_ROWS_FALLBACK = 20


@dataclass
class SessionState:
    store: ViewStore = field(default_factory=ViewStore)
    current: View | None = None
    marked: list[Path] = field(default_factory=list)
    top: int = 0
    count_buffer: str = ""
    message: str = ""
    prompt: str = ""
    side_lines: tuple[str, ...] = ()
    show_help: bool = False
    quit: bool = False


class Session:
    """Bind keys to view operations and keep the display state consistent."""

    def __init__(
        self,
        registry: CommandRegistry,
        settings: Settings,
        read_key: Callable[[], str],
        redraw: Callable[[], None],
        *,
        executor: ViewExecutor | None = None,
        marked: Iterable[Path] = (),
        page_rows: Callable[[], int] | None = None,
    ) -> None:
        self.state = SessionState(marked=[Path(path) for path in marked])
        self.registry = registry
        self.settings = settings
        self._read_key = read_key
        self._redraw = redraw
        self._page_rows = page_rows if page_rows is not None else (lambda: PAGE_ROWS_FALLBACK)
        self.picker = CommandPicker(
            registry,
            read_key=read_key,
            show_prompt=self._show_pick_prompt,
            show_help=self._show_command_help,
            hide_help=self._hide_command_help,
        )
        self.resolver = FileResolver(
            marked_files=lambda: tuple(self.state.marked),
            line_at_cursor=self._line_at_cursor,
            prompt_path=lambda: self.prompt_line("File: "),
        )
        self.controller = ViewController(
            picker=self.picker,
            resolver=self.resolver,
            store=self.state.store,
            executor=executor if executor is not None else ViewExecutor(),
            settings=settings,
        )
        self.keys = KeyRegistry().register(
            KeyBinding(("n",), lambda: self._operate(self._create)),
            KeyBinding(("g",), lambda: self._operate(self._refresh)),
            KeyBinding(("s",), lambda: self._operate(self._switch)),
            KeyBinding(("c",), lambda: self._operate(self._columnify)),
            KeyBinding(("C",), lambda: self._operate(self._columnify_with_prompt)),
            KeyBinding(("m",), self._toggle_mark),
            KeyBinding(("u",), self._clear_marks),
            KeyBinding(("TAB",), self._next_view),
            KeyBinding(("x",), self._close_view),
            KeyBinding(("j", "DOWN", "ENTER"), lambda: self._move(1)),
            KeyBinding(("k", "UP"), lambda: self._move(-1)),
            KeyBinding((" ", "PAGE_DOWN", "CTRL_D"), lambda: self._move(self._page_rows())),
            KeyBinding(("b", "PAGE_UP", "CTRL_U"), lambda: self._move(-self._page_rows())),
            KeyBinding(("HOME",), self._move_top),
            KeyBinding(("G", "END"), self._move_bottom),
            KeyBinding(("?",), self._toggle_help),
            KeyBinding(("q", "CTRL_C"), self._quit),
        )

    # -- prompts -----------------------------------------------------------

    def _show_pick_prompt(self, offered: tuple[str, ...]) -> None:
        self.state.prompt = f"Command [{' '.join(offered)}]: "
        self._redraw()

    def _show_command_help(self, rows: tuple[tuple[str, str], ...]) -> None:
        self.state.side_lines = command_help_lines(rows)

    def _hide_command_help(self) -> None:
        self.state.side_lines = ()
        self.state.prompt = ""

    def prompt_line(self, label: str) -> str:
        """Read one line of input on the prompt row.

        ``ESC`` and ``CTRL_C`` raise ``InputCancelled``; ``TAB`` inserts a
        literal tab so it can be given as a column delimiter.
        """
        buffer: list[str] = []
        try:
            while True:
                self.state.prompt = label + "".join(buffer).replace("\t", "\\t")
                self._redraw()
                key = self._read_key()
                if key in {"ESC", "CTRL_C"}:
                    raise InputCancelled()
                if key == "ENTER":
                    return "".join(buffer)
                if key == "BACKSPACE":
                    if buffer:
                        buffer.pop()
                elif key == "CTRL_U":
                    buffer.clear()
                elif key == "TAB":
                    buffer.append("\t")
                elif len(key) == 1 and key.isprintable():
                    buffer.append(key)
        finally:
            self.state.prompt = ""

    # -- operations ----------------------------------------------------------

    def _take_count(self) -> int | None:
        raw = self.state.count_buffer
        self.state.count_buffer = ""
        return int(raw) if raw else None

    def _line_at_cursor(self) -> str:
        view = self.state.current
        return view.line_at_cursor() if view is not None else ""

    def _require_view(self) -> View:
        view = self.state.current
        if view is None:
            raise NlinesError("No view.")
        return view

    def present(self, view: View) -> None:
        self.state.current = view
        self.state.top = 0
        self.state.message = view.name

    def _operate(self, operation: Callable[[], None]) -> bool:
        """Run one view operation, reporting failures on the message line."""
        try:
            operation()
        except InputCancelled as exc:
            self.state.count_buffer = ""
            self.state.message = str(exc)
        except (NlinesError, ValueError) as exc:
            logger.warning("%s", exc)
            self.state.count_buffer = ""
            self.state.message = str(exc)
        finally:
            self._sync_current()
        return True

    def _sync_current(self) -> None:
        current = self.state.current
        if current is None or not self.state.store.holds(current):
            self.state.current = self.state.store.last()
            self.state.top = 0

    def _create(self) -> None:
        view = self.controller.create(self._take_count())
        self.present(view)

    def _refresh(self) -> None:
        view = self._require_view()
        self.controller.refresh(view, self._take_count())
        self.present(view)

    def _switch(self) -> None:
        view = self._require_view()
        self.controller.switch_command(view, self._take_count())
        self.present(view)

    def open_with(self, key: str, line_count: int | None = None) -> None:
        """Create the first view non-interactively with the command bound to ``key``."""
        preset = ViewController(
            picker=PresetPicker(self.registry, key),
            resolver=self.resolver,
            store=self.state.store,
            executor=self.controller.executor,
            settings=self.settings,
        )
        self._operate(lambda: self.present(preset.create(line_count)))

    def _columnify(self) -> None:
        self.state.count_buffer = ""
        view = self._require_view()
        self.controller.columnify(view)
        self.present(view)

    def _columnify_with_prompt(self) -> None:
        self.state.count_buffer = ""
        view = self._require_view()
        delimiter = self.prompt_line("Delimiter (blank for default): ")
        self.controller.columnify(view, delimiter or None)
        self.present(view)

    # -- selection and navigation --------------------------------------------

    def _toggle_mark(self) -> bool:
        path = path_from_line(self._line_at_cursor())
        if path is None:
            self.state.message = "No file at cursor."
            return True
        if path in self.state.marked:
            self.state.marked.remove(path)
            self.state.message = f"Unmarked {path}"
        else:
            self.state.marked.append(path)
            self.state.message = f"Marked {path}"
        return True

    def _clear_marks(self) -> bool:
        self.state.marked.clear()
        self.state.message = "Marks cleared."
        return True

    def _next_view(self) -> bool:
        view = self.state.store.next_after(self.state.current)
        if view is None:
            self.state.message = "No view."
            return True
        self.present(view)
        return True

    def _close_view(self) -> bool:
        view = self.state.current
        if view is None:
            return True
        following = self.state.store.next_after(view)
        self.state.store.close(view)
        self.state.current = following if following is not view else None
        self.state.top = 0
        self.state.message = f"Closed {view.name}"
        return True

    def _move(self, delta: int) -> bool:
        view = self.state.current
        if view is None:
            return True
        last = max(0, len(view.lines()) - 1)
        view.cursor = max(0, min(last, view.cursor + delta))
        return True

    def _move_top(self) -> bool:
        return self._move(-(1 << 30))

    def _move_bottom(self) -> bool:
        return self._move(1 << 30)

    def _toggle_help(self) -> bool:
        self.state.show_help = not self.state.show_help
        return True

    def _quit(self) -> bool:
        self.state.quit = True
        return True

    # -- loop ------------------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Dispatch one key; returns whether it was handled."""
        if not key:
            return False
        if key.isdigit() and len(key) == 1 and (self.state.count_buffer or key != "0"):
            self.state.count_buffer += key
            return True
        self.state.message = ""
        handled = self.keys.dispatch(key)
        self.state.count_buffer = ""
        return bool(handled)

    def run(self) -> None:
        while not self.state.quit:
            self._redraw()
            self.handle_key(self._read_key())


__all__ = ["Session", "SessionState"]

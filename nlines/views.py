"""Named text views and the store that keeps their names distinct.

A view holds exactly the captured output of its generating command. Views
are read-only to the user; only the executor replaces their text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from .state import ViewState, derive_name


@dataclass(eq=False)
class View:
    """One generated output buffer."""

    name: str
    state: ViewState
    text: str = ""
    cursor: int = 0
    modified: bool = False
    read_only: bool = True

    def lines(self) -> list[str]:
        """Split the text into rows the way the cursor counts them."""
        return self.text.splitlines()

    def line_at_cursor(self) -> str:
        """Return the row under the cursor, or ``""`` for an empty view."""
        lines = self.lines()
        if not lines:
            return ""
        return lines[max(0, min(self.cursor, len(lines) - 1))]

    def replace_text(self, text: str) -> None:
        """Replace content, rewind the cursor and mark the view unmodified."""
        self.text = text
        self.cursor = 0
        self.modified = False


class ViewStore:
    """Ordered collection of views keyed by display name."""

    def __init__(self) -> None:
        self._views: dict[str, View] = {}

    def __len__(self) -> int:
        return len(self._views)

    def __iter__(self) -> Iterator[View]:
        return iter(list(self._views.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._views

    def names(self) -> tuple[str, ...]:
        return tuple(self._views)

    def get(self, name: str) -> View | None:
        return self._views.get(name)

    def obtain(self, state: ViewState) -> View:
        """Return the view named after ``state``, creating it when missing.

        An existing single-file view of the same name is re-used and its
        state replaced; multi-file states always get a fresh view.
        """
        name = derive_name(state, self._views)
        view = self._views.get(name)
        if view is None:
            view = View(name=name, state=state)
            self._views[name] = view
        else:
            view.state = state
        return view

    def rename(self, view: View) -> str:
        """Re-derive ``view``'s name from its state and re-key it.

        The view's own current name does not count as taken. A single-file
        name held by another view is taken over; that other view is dropped.
        """
        taken = {name for name in self._views if name != view.name}
        new_name = derive_name(view.state, taken)
        if new_name == view.name:
            return new_name
        self._views.pop(view.name, None)
        self._views.pop(new_name, None)
        view.name = new_name
        self._views[new_name] = view
        return new_name

    def close(self, view: View) -> None:
        if self._views.get(view.name) is view:
            del self._views[view.name]

    def holds(self, view: View) -> bool:
        return self._views.get(view.name) is view

    def last(self) -> View | None:
        views = list(self._views.values())
        return views[-1] if views else None

    def next_after(self, view: View | None) -> View | None:
        """Return the view following ``view`` in creation order, wrapping around."""
        views = list(self._views.values())
        if not views:
            return None
        if view is None or view not in views:
            return views[0]
        return views[(views.index(view) + 1) % len(views)]


__all__ = ["View", "ViewStore"]

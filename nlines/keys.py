"""Key-token to action table used by the session's normal mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

Action = Callable[[], "bool | None"]


@dataclass(frozen=True)
class KeyBinding:
    keys: tuple[str, ...]
    handler: Action


class KeyRegistry:
    """Exact-match dispatch; a later binding for the same key wins."""

    def __init__(self) -> None:
        self._actions: dict[str, Action] = {}

    def register(self, *bindings: KeyBinding) -> KeyRegistry:
        self._actions.update((key, binding.handler) for binding in bindings for key in binding.keys)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Run the action bound to ``key``; unbound keys give ``None``."""
        action = self._actions.get(key)
        return None if action is None else action()

    def __contains__(self, key: object) -> bool:
        return key in self._actions


__all__ = ["KeyBinding", "KeyRegistry"]

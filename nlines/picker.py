"""Command choice by single key, with a help listing fallback."""

from __future__ import annotations

from collections.abc import Callable

from .commands import HELP_KEY, CommandDescriptor, CommandRegistry
from .errors import InputCancelled, RegistryError

CANCEL_KEYS = frozenset({"ESC", "CTRL_C", "q"})


class CommandPicker:
    """Interactive picker reading one key at a time.

    ``show_prompt`` receives the offered keys (help key last) before every
    read, ``show_help`` receives ``(key, program)`` rows when help is asked
    for, and ``hide_help`` is called once the pick ends either way.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        read_key: Callable[[], str],
        show_prompt: Callable[[tuple[str, ...]], None],
        show_help: Callable[[tuple[tuple[str, str], ...]], None],
        hide_help: Callable[[], None],
    ) -> None:
        self.registry = registry
        self._read_key = read_key
        self._show_prompt = show_prompt
        self._show_help = show_help
        self._hide_help = hide_help

    def offered_keys(self) -> tuple[str, ...]:
        return (*self.registry.keys(), HELP_KEY)

    def choose(self) -> CommandDescriptor:
        offered = self.offered_keys()
        try:
            while True:
                self._show_prompt(offered)
                key = self._read_key()
                if key in CANCEL_KEYS and key not in self.registry:
                    raise InputCancelled()
                if key == HELP_KEY:
                    self._show_help(self.registry.help_rows())
                    continue
                descriptor = self.registry.lookup(key)
                if descriptor is not None:
                    return descriptor
        finally:
            self._hide_help()


class PresetPicker:
    """Non-interactive picker that always returns the command bound to ``key``."""

    def __init__(self, registry: CommandRegistry, key: str) -> None:
        self.registry = registry
        self.key = key

    def choose(self) -> CommandDescriptor:
        descriptor = self.registry.lookup(self.key)
        if descriptor is None:
            known = ", ".join(self.registry.keys())
            raise RegistryError(f"Unknown command key {self.key!r} (known: {known}).")
        return descriptor


__all__ = ["CANCEL_KEYS", "CommandPicker", "PresetPicker"]

"""Command registry for line-selection programs.

Maps single selector characters to the program, line-count flag and fixed
arguments used to generate a view. The table is built once at startup and
never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import RegistryError

HELP_KEY = "?"


@dataclass(frozen=True)
class CommandDescriptor:
    """One selectable line-selection command."""

    key: str
    program: str
    line_flag: str
    extra_args: tuple[str, ...] = ()
    single_file_only: bool = False

    def help_label(self) -> str:
        """Return a one-line description used by ``--list-commands``."""
        parts = [self.program, self.line_flag, *self.extra_args]
        label = " ".join(parts)
        if self.single_file_only:
            label += "  (single file)"
        return label


DEFAULT_COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor(key="h", program="head", line_flag="--lines"),
    CommandDescriptor(key="t", program="tail", line_flag="--lines"),
    CommandDescriptor(key="s", program="shuf", line_flag="--head-count", single_file_only=True),
)


class CommandRegistry:
    """Immutable key -> descriptor table validated at construction."""

    def __init__(self, descriptors: Iterable[CommandDescriptor]) -> None:
        self._by_key: dict[str, CommandDescriptor] = {}
        for descriptor in descriptors:
            self._validate(descriptor)
            self._by_key[descriptor.key] = descriptor
        if not self._by_key:
            raise RegistryError("Command registry is empty.")

    def _validate(self, descriptor: CommandDescriptor) -> None:
        key = descriptor.key
        if not isinstance(key, str) or len(key) != 1:
            raise RegistryError(f"Command key must be a single character: {key!r}")
        if key == HELP_KEY:
            raise RegistryError(f"Command key {HELP_KEY!r} is reserved for help.")
        if key in self._by_key:
            raise RegistryError(f"Duplicate command key: {key!r}")
        if not descriptor.program:
            raise RegistryError(f"Command {key!r} has no program.")
        if not descriptor.line_flag:
            raise RegistryError(f"Command {key!r} has no line-count flag.")

    @classmethod
    def default(cls) -> CommandRegistry:
        """Registry of the built-in head, tail and shuf commands."""
        return cls(DEFAULT_COMMANDS)

    def lookup(self, key: str) -> CommandDescriptor | None:
        """Return the descriptor bound to ``key``, or ``None``."""
        return self._by_key.get(key)

    def keys(self) -> tuple[str, ...]:
        """Return registered keys in registration order."""
        return tuple(self._by_key)

    def descriptors(self) -> tuple[CommandDescriptor, ...]:
        """Return all descriptors in registration order."""
        return tuple(self._by_key.values())

    def help_rows(self) -> tuple[tuple[str, str], ...]:
        """Return ``(key, program)`` pairs for the picker help panel."""
        return tuple((descriptor.key, descriptor.program) for descriptor in self._by_key.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key


__all__ = ["HELP_KEY", "CommandDescriptor", "CommandRegistry", "DEFAULT_COMMANDS"]

"""View state: how a view's content was generated.

A ``ViewState`` is replaced wholesale on command switch and line-count
change; it is never mutated in place, so a failed validation leaves the
previous state intact.
"""

from __future__ import annotations

from collections.abc import Container, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .commands import CommandDescriptor
from .errors import TooManyFiles

MULTIPLE_FILES_LABEL = "multiple files"


def format_line_count(value: int) -> str:
    """Return ``value`` as a line-count argument, rejecting non-positive counts."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"line count must be an integer: {value!r}")
    if value < 1:
        raise ValueError("line count must be >= 1")
    return str(value)


@dataclass(frozen=True)
class ViewState:
    """Generating command and inputs for one view."""

    program: str
    line_flag: str
    line_count: str
    files: tuple[Path, ...]
    extra_args: tuple[str, ...] = field(default=())
    single_file_only: bool = False

    def __post_init__(self) -> None:
        files = tuple(Path(path) for path in self.files)
        object.__setattr__(self, "files", files)
        object.__setattr__(self, "extra_args", tuple(self.extra_args))
        if not files:
            raise ValueError("view state needs at least one file")
        if not self.line_count.isdigit() or int(self.line_count) < 1:
            raise ValueError(f"line count must be a positive integer: {self.line_count!r}")
        if self.single_file_only and len(files) != 1:
            raise TooManyFiles(self.program, len(files))

    @classmethod
    def from_descriptor(
        cls,
        descriptor: CommandDescriptor,
        line_count: str,
        files: Iterable[Path],
    ) -> ViewState:
        return cls(
            program=descriptor.program,
            line_flag=descriptor.line_flag,
            line_count=line_count,
            files=tuple(files),
            extra_args=descriptor.extra_args,
            single_file_only=descriptor.single_file_only,
        )

    def with_line_count(self, line_count: str) -> ViewState:
        return ViewState(
            program=self.program,
            line_flag=self.line_flag,
            line_count=line_count,
            files=self.files,
            extra_args=self.extra_args,
            single_file_only=self.single_file_only,
        )

    def argv(self) -> list[str]:
        return [
            self.program,
            self.line_flag,
            self.line_count,
            *self.extra_args,
            *(str(path) for path in self.files),
        ]


def abbreviate_path(path: Path, home: Path | None = None) -> str:
    """Shorten ``path`` by replacing a leading home directory with ``~``."""
    home_dir = home if home is not None else Path.home()
    text = str(path)
    home_text = str(home_dir).rstrip("/")
    if not home_text:
        return text
    if text == home_text:
        return "~"
    if text.startswith(home_text + "/"):
        return "~" + text[len(home_text):]
    return text


def unique_name(base: str, taken: Container[str]) -> str:
    """Return ``base`` or ``base<N>`` with the smallest ``N >= 2`` not in ``taken``."""
    if base not in taken:
        return base
    suffix = 2
    while f"{base}<{suffix}>" in taken:
        suffix += 1
    return f"{base}<{suffix}>"


def derive_name(state: ViewState, taken: Container[str] = (), home: Path | None = None) -> str:
    """Derive the display name of a view generated from ``state``.

    Single-file views are named after the program and file and are re-used
    rather than disambiguated. Multi-file views get a fresh name that does
    not collide with ``taken``.
    """
    if len(state.files) == 1:
        return f"{state.program} {abbreviate_path(state.files[0], home)}"
    return unique_name(f"{state.program}, {MULTIPLE_FILES_LABEL}", taken)


__all__ = [
    "ViewState",
    "abbreviate_path",
    "derive_name",
    "format_line_count",
    "unique_name",
]

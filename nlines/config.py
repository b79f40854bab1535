"""JSON configuration loading.

Reads the default line count, the command registry, the extension to
column-delimiter table and the highlight style. All access is defensive:
malformed or missing config falls back to built-in defaults. The file is
never written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .commands import DEFAULT_COMMANDS, HELP_KEY, CommandDescriptor, CommandRegistry

logger = logging.getLogger(__name__)

APP_NAME = "nlines"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

DEFAULT_LINE_COUNT = 10
DEFAULT_STYLE = "monokai"
DEFAULT_COLUMN_DELIMITERS: dict[str, str] = {"csv": ",", "tsv": "\t"}


@dataclass(frozen=True)
class Settings:
    """Read-only options consulted by view operations."""

    default_line_count: int = DEFAULT_LINE_COUNT
    column_delimiters: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLUMN_DELIMITERS))
    style: str = DEFAULT_STYLE


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path if path is not None else CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_default_line_count(data: dict[str, object]) -> int:
    """Return the configured default line count; booleans and non-positive values are rejected."""
    value = data.get("default_line_count")
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return DEFAULT_LINE_COUNT
    return value


def load_column_delimiters(data: dict[str, object]) -> dict[str, str]:
    value = data.get("column_delimiters")
    if not isinstance(value, dict):
        return dict(DEFAULT_COLUMN_DELIMITERS)
    delimiters: dict[str, str] = {}
    for extension, delimiter in value.items():
        if not isinstance(extension, str) or not extension.strip():
            continue
        if not isinstance(delimiter, str) or not delimiter:
            continue
        delimiters[extension.strip().lstrip(".")] = delimiter
    return delimiters


def load_style(data: dict[str, object]) -> str:
    value = data.get("style")
    if not isinstance(value, str):
        return DEFAULT_STYLE
    stripped = value.strip()
    return stripped if stripped else DEFAULT_STYLE


def _parse_command(raw: object) -> CommandDescriptor | None:
    """Build a descriptor from one config entry, or ``None`` when malformed."""
    if not isinstance(raw, dict):
        return None
    key = raw.get("key")
    program = raw.get("program")
    line_flag = raw.get("line_flag")
    if not isinstance(key, str) or len(key) != 1:
        return None
    if not isinstance(program, str) or not program.strip():
        return None
    if not isinstance(line_flag, str) or not line_flag.strip():
        return None
    extra_args = raw.get("extra_args", [])
    if not isinstance(extra_args, list) or not all(isinstance(arg, str) for arg in extra_args):
        return None
    single_file_only = raw.get("single_file_only", False)
    if not isinstance(single_file_only, bool):
        return None
    return CommandDescriptor(
        key=key,
        program=program.strip(),
        line_flag=line_flag.strip(),
        extra_args=tuple(extra_args),
        single_file_only=single_file_only,
    )


def load_command_registry(data: dict[str, object]) -> CommandRegistry:
    """Build the command registry from config, falling back to built-ins.

    Entries that are malformed, reuse the help key, or repeat an earlier key
    are dropped with a warning.
    """
    value = data.get("commands")
    if not isinstance(value, list):
        return CommandRegistry(DEFAULT_COMMANDS)

    descriptors: list[CommandDescriptor] = []
    seen: set[str] = set()
    for raw in value:
        descriptor = _parse_command(raw)
        if descriptor is None:
            logger.warning("dropping malformed command entry: %r", raw)
            continue
        if descriptor.key == HELP_KEY or descriptor.key in seen:
            logger.warning("dropping command %r: key %r unavailable", descriptor.program, descriptor.key)
            continue
        seen.add(descriptor.key)
        descriptors.append(descriptor)

    if not descriptors:
        return CommandRegistry(DEFAULT_COMMANDS)
    return CommandRegistry(descriptors)


def load_settings(data: dict[str, object]) -> Settings:
    return Settings(
        default_line_count=load_default_line_count(data),
        column_delimiters=load_column_delimiters(data),
        style=load_style(data),
    )


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_LINE_COUNT",
    "Settings",
    "load_command_registry",
    "load_config",
    "load_settings",
]

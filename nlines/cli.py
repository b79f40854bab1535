"""Command-line front door for nlines.

Parses CLI options, loads configuration and either prints one view's output
(``--nopager``) or dispatches into the interactive session.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from . import config
from .app import run_session
from .commands import CommandRegistry
from .config import Settings
from .controller import ViewController
from .errors import NlinesError, NoFileSelected, ProcessInvocationFailure
from .executor import ViewExecutor
from .files import FileResolver
from .highlight import colorize_output, sanitize_terminal_text
from .log import setup_logging
from .picker import PresetPicker
from .views import View, ViewStore


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _blank() -> str:
    return ""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nlines",
        description="Show the first, last or random lines of files in re-usable terminal views.",
    )
    parser.add_argument("files", nargs="*", type=Path, help="Files to view (the initial marked set).")
    parser.add_argument("-n", "--lines", type=_positive_int, default=None, help="Line count (default from config).")
    parser.add_argument("-c", "--command", metavar="KEY", default=None, help="Command key to run without asking.")
    parser.add_argument("--columnify", action="store_true", help="Pipe --nopager output through column --table.")
    parser.add_argument("--delimiter", default=None, help="Column separator for --columnify (default by extension).")
    parser.add_argument("--nopager", action="store_true", help="Print output directly without the interactive session.")
    parser.add_argument("--list-commands", action="store_true", help="List configured commands and exit.")
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON config file.")
    parser.add_argument("--style", default=None, help="Pygments style name for colored output.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--verbose", action="store_true", help="Log debug details to the log file.")
    return parser


def format_command_listing(registry: CommandRegistry) -> str:
    return "".join(f"{descriptor.key}  {descriptor.help_label()}\n" for descriptor in registry.descriptors())


def render_once(
    registry: CommandRegistry,
    settings: Settings,
    key: str,
    files: list[Path],
    *,
    line_count: int | None = None,
    columnify: bool = False,
    delimiter: str | None = None,
    executor: ViewExecutor | None = None,
    store: ViewStore | None = None,
) -> View:
    """Create one view non-interactively and optionally columnify it.

    Pass ``store`` to reach the view when a program exits non-zero: its
    captured output is kept there although the error propagates.
    """
    controller = ViewController(
        picker=PresetPicker(registry, key),
        resolver=FileResolver(
            marked_files=lambda: tuple(files),
            line_at_cursor=_blank,
            prompt_path=_blank,
        ),
        store=store if store is not None else ViewStore(),
        executor=executor if executor is not None else ViewExecutor(),
        settings=settings,
    )
    view = controller.create(line_count)
    if columnify:
        controller.columnify(view, delimiter)
    return view


def _write_view(view: View, settings: Settings, no_color: bool) -> None:
    text = view.text
    if not no_color and sys.stdout.isatty():
        files = view.state.files
        text = colorize_output(sanitize_terminal_text(text), files[0] if len(files) == 1 else None, settings.style)
    sys.stdout.write(text)
    sys.stdout.flush()


def main() -> None:
    """Parse CLI arguments and run nlines."""
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    data = config.load_config(args.config)
    registry = config.load_command_registry(data)
    settings = config.load_settings(data)
    if args.style is not None:
        settings = dataclasses.replace(settings, style=args.style)

    if args.list_commands:
        sys.stdout.write(format_command_listing(registry))
        return

    missing = [path for path in args.files if not path.exists()]
    if missing:
        raise SystemExit(f"Path not found: {missing[0]}")

    if args.nopager or not sys.stdin.isatty():
        if args.command is None:
            raise SystemExit("--nopager needs --command KEY.")
        store = ViewStore()
        try:
            view = render_once(
                registry,
                settings,
                args.command,
                list(args.files),
                line_count=args.lines,
                columnify=args.columnify,
                delimiter=args.delimiter,
                store=store,
            )
        except NoFileSelected as exc:
            raise SystemExit(f"{exc} Pass one or more files.") from exc
        except ProcessInvocationFailure as exc:
            captured = store.last()
            if exc.returncode is not None and captured is not None:
                _write_view(captured, settings, args.no_color)
            raise SystemExit(str(exc)) from exc
        except NlinesError as exc:
            raise SystemExit(str(exc)) from exc
        _write_view(view, settings, args.no_color)
        return

    if args.command is not None and registry.lookup(args.command) is None:
        raise SystemExit(f"Unknown command key: {args.command!r}")
    run_session(
        registry,
        settings,
        list(args.files),
        initial_key=args.command,
        line_count=args.lines,
        no_color=args.no_color,
    )


if __name__ == "__main__":
    main()

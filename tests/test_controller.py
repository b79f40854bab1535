"""View controller transition tests.

Covers create/refresh/switch/columnify argv assembly, the single-file
constraint, naming and the no-mutation-on-failure guarantees.
"""

from __future__ import annotations

import subprocess
import unittest
from pathlib import Path
from unittest import mock

from nlines.commands import CommandRegistry
from nlines.config import Settings
from nlines.controller import ViewController
from nlines.errors import MultiFileColumnify, ProcessInvocationFailure, TooManyFiles
from nlines.executor import ViewExecutor
from nlines.files import FileResolver
from nlines.views import ViewStore


class _FakeRunner:
    def __init__(self, stdout: str = "one\ntwo\n", returncode: int = 0) -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.calls: list[tuple[list[str], dict[str, object]]] = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        return subprocess.CompletedProcess(argv, self.returncode, stdout=self.stdout)

    @property
    def argvs(self) -> list[list[str]]:
        return [argv for argv, _kwargs in self.calls]


class _ScriptedPicker:
    def __init__(self, registry: CommandRegistry, keys: list[str]) -> None:
        self.registry = registry
        self.keys = list(keys)

    def choose(self):
        descriptor = self.registry.lookup(self.keys.pop(0))
        assert descriptor is not None
        return descriptor


class ViewControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        home_patch = mock.patch("nlines.state.Path.home", return_value=Path("/home/tester"))
        home_patch.start()
        self.addCleanup(home_patch.stop)
        self.registry = CommandRegistry.default()
        self.runner = _FakeRunner()
        self.store = ViewStore()
        self.files: tuple[Path, ...] = (Path("/tmp/a.txt"),)

    def _controller(self, keys: list[str], settings: Settings | None = None) -> ViewController:
        return ViewController(
            picker=_ScriptedPicker(self.registry, keys),
            resolver=FileResolver(
                marked_files=lambda: self.files,
                line_at_cursor=lambda: "",
                prompt_path=lambda: "",
            ),
            store=self.store,
            executor=ViewExecutor(runner=self.runner),
            settings=settings if settings is not None else Settings(),
        )

    def test_create_runs_head_with_default_line_count(self) -> None:
        controller = self._controller(["h"])

        view = controller.create()

        self.assertEqual(self.runner.argvs, [["head", "--lines", "10", "/tmp/a.txt"]])
        self.assertEqual(view.name, "head /tmp/a.txt")
        self.assertEqual(view.text, "one\ntwo\n")
        self.assertEqual(view.cursor, 0)
        self.assertFalse(view.modified)
        self.assertIs(self.store.get("head /tmp/a.txt"), view)

    def test_create_uses_configured_default_and_explicit_override(self) -> None:
        controller = self._controller(["t", "t"], Settings(default_line_count=25))

        controller.create()
        controller.create(3)

        self.assertEqual(self.runner.argvs[0], ["tail", "--lines", "25", "/tmp/a.txt"])
        self.assertEqual(self.runner.argvs[1], ["tail", "--lines", "3", "/tmp/a.txt"])
        self.assertEqual(len(self.store), 1)

    def test_create_abbreviates_home_directory_in_name(self) -> None:
        self.files = (Path("/home/tester/notes/todo.txt"),)
        view = self._controller(["h"]).create()
        self.assertEqual(view.name, "head ~/notes/todo.txt")

    def test_create_rejects_multiple_files_for_single_file_command(self) -> None:
        self.files = (Path("/tmp/a.txt"), Path("/tmp/b.txt"))
        controller = self._controller(["s"])

        with self.assertRaises(TooManyFiles):
            controller.create()

        self.assertEqual(self.runner.calls, [])
        self.assertEqual(len(self.store), 0)

    def test_create_rejects_non_positive_line_count(self) -> None:
        controller = self._controller(["h"])
        with self.assertRaises(ValueError):
            controller.create(0)
        self.assertEqual(self.runner.calls, [])

    def test_multi_file_views_get_distinct_names(self) -> None:
        self.files = (Path("/tmp/a.txt"), Path("/tmp/b.txt"))
        controller = self._controller(["h", "h"])

        first = controller.create()
        second = controller.create()

        self.assertEqual(first.name, "head, multiple files")
        self.assertEqual(second.name, "head, multiple files<2>")
        self.assertIsNot(first, second)
        self.assertEqual(self.runner.argvs[0], ["head", "--lines", "10", "/tmp/a.txt", "/tmp/b.txt"])

    def test_refresh_with_override_updates_line_count_only(self) -> None:
        controller = self._controller(["h"])
        view = controller.create()

        controller.refresh(view, 5)

        self.assertEqual(view.state.line_count, "5")
        self.assertEqual(view.state.program, "head")
        self.assertEqual(view.state.files, (Path("/tmp/a.txt"),))
        self.assertEqual(self.runner.argvs[-1], ["head", "--lines", "5", "/tmp/a.txt"])
        self.assertEqual(view.name, "head /tmp/a.txt")

    def test_refresh_without_override_is_idempotent(self) -> None:
        controller = self._controller(["h"])
        view = controller.create()

        controller.refresh(view)
        first = view.text
        controller.refresh(view)

        self.assertEqual(view.text, first)
        self.assertEqual(self.runner.argvs[1], self.runner.argvs[2])
        self.assertEqual(view.state.line_count, "10")

    def test_refresh_keeps_multi_file_name_when_renaming(self) -> None:
        self.files = (Path("/tmp/a.txt"), Path("/tmp/b.txt"))
        controller = self._controller(["h"])
        view = controller.create()

        controller.refresh(view, 7)

        self.assertEqual(view.name, "head, multiple files")
        self.assertEqual(self.store.names(), ("head, multiple files",))

    def test_switch_command_keeps_files_and_line_count(self) -> None:
        controller = self._controller(["h", "t"])
        view = controller.create()

        controller.switch_command(view)

        self.assertEqual(self.runner.argvs[-1], ["tail", "--lines", "10", "/tmp/a.txt"])
        self.assertEqual(view.name, "tail /tmp/a.txt")
        self.assertEqual(self.store.names(), ("tail /tmp/a.txt",))

    def test_switch_command_with_override_uses_new_flag(self) -> None:
        controller = self._controller(["h", "s"])
        view = controller.create()

        controller.switch_command(view, 4)

        self.assertEqual(self.runner.argvs[-1], ["shuf", "--head-count", "4", "/tmp/a.txt"])
        self.assertTrue(view.state.single_file_only)

    def test_switch_to_single_file_command_with_many_files_leaves_state_untouched(self) -> None:
        self.files = (Path("/tmp/a.txt"), Path("/tmp/b.txt"))
        controller = self._controller(["h", "s"])
        view = controller.create()
        before_state = view.state
        before_calls = len(self.runner.calls)

        with self.assertRaises(TooManyFiles):
            controller.switch_command(view)

        self.assertIs(view.state, before_state)
        self.assertEqual(len(self.runner.calls), before_calls)
        self.assertEqual(view.name, "head, multiple files")

    def test_columnify_uses_extension_delimiter(self) -> None:
        self.files = (Path("/tmp/data.csv"),)
        controller = self._controller(["h"])
        view = controller.create()
        self.runner.stdout = "a  b\n"

        controller.columnify(view)

        argv, kwargs = self.runner.calls[-1]
        self.assertEqual(argv, ["column", "--table", "--separator", ","])
        self.assertEqual(kwargs["input"], "one\ntwo\n")
        self.assertEqual(view.text, "a  b\n")
        self.assertEqual(view.state.program, "head")

    def test_columnify_without_table_entry_passes_no_separator(self) -> None:
        controller = self._controller(["h"])
        view = controller.create()

        controller.columnify(view)

        self.assertEqual(self.runner.argvs[-1], ["column", "--table"])

    def test_columnify_explicit_delimiter_overrides_table(self) -> None:
        self.files = (Path("/tmp/data.csv"),)
        controller = self._controller(["h"])
        view = controller.create()

        controller.columnify(view, ";")

        self.assertEqual(self.runner.argvs[-1], ["column", "--table", "--separator", ";"])

    def test_columnify_rejects_multi_file_view(self) -> None:
        self.files = (Path("/tmp/a.csv"), Path("/tmp/b.csv"))
        controller = self._controller(["h"])
        view = controller.create()
        before_calls = len(self.runner.calls)

        with self.assertRaises(MultiFileColumnify):
            controller.columnify(view)

        self.assertEqual(len(self.runner.calls), before_calls)
        self.assertEqual(view.text, "one\ntwo\n")

    def test_create_surfaces_missing_program(self) -> None:
        def missing(argv, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", argv[0])

        controller = ViewController(
            picker=_ScriptedPicker(self.registry, ["h"]),
            resolver=FileResolver(lambda: self.files, lambda: "", lambda: ""),
            store=self.store,
            executor=ViewExecutor(runner=missing),
            settings=Settings(),
        )

        with self.assertRaises(ProcessInvocationFailure) as ctx:
            controller.create()

        self.assertIsNone(ctx.exception.returncode)
        self.assertEqual(ctx.exception.argv[0], "head")


if __name__ == "__main__":
    unittest.main()

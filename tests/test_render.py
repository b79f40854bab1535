"""Frame, status line and ANSI clipping tests."""

from __future__ import annotations

import re
import unittest
from pathlib import Path

from nlines.ansi import ANSI_ESCAPE_RE, clip_ansi_line, display_width
from nlines.render import (
    HELP_PANEL_LINES,
    build_status_line,
    command_help_lines,
    render_frame,
    scroll_top,
    status_text,
    view_display_lines,
)
from nlines.state import ViewState
from nlines.views import View


def _view(text: str, *files: str) -> View:
    state = ViewState(program="head", line_flag="--lines", line_count="10", files=tuple(Path(f) for f in files))
    return View(name="head " + files[0], state=state, text=text)


def _plain_rows(frame: str) -> list[str]:
    body = frame.removeprefix("\033[H")
    return [ANSI_ESCAPE_RE.sub("", row) for row in re.split(r"\r\n", body)]


class AnsiTests(unittest.TestCase):
    def test_clip_preserves_escapes_and_expands_tabs(self) -> None:
        self.assertEqual(clip_ansi_line("\033[31mabcdef\033[0m", 3), "\033[31mabc")
        self.assertEqual(clip_ansi_line("a\tb", 10), "a       b")
        self.assertEqual(clip_ansi_line("a\tb", 4), "a")
        self.assertEqual(clip_ansi_line("abc", 0), "")

    def test_display_width_counts_wide_chars(self) -> None:
        self.assertEqual(display_width("\033[1m漢字\033[0m"), 4)


class StatusTests(unittest.TestCase):
    def test_build_status_line_right_aligns_help_hint(self) -> None:
        line = build_status_line("left", 20)
        self.assertEqual(len(line), 19)
        self.assertTrue(line.startswith("left"))
        self.assertTrue(line.endswith("│ ? Help"))

    def test_status_text_describes_view_marks_and_count(self) -> None:
        view = _view("a\nb\n", "/var/nl/a.txt")
        view.cursor = 1
        text = status_text(view, marked_count=2, count_buffer="12", message="boom")
        self.assertEqual(text, "head /var/nl/a.txt  [--lines 10]  2/2  marked:2  count:12  - boom")
        self.assertEqual(status_text(None, 0, "", ""), "no view")

    def test_command_help_lines_lists_programs(self) -> None:
        lines = command_help_lines((("h", "head"), ("t", "tail")))
        plain = [ANSI_ESCAPE_RE.sub("", line) for line in lines]
        self.assertEqual(plain, ["COMMANDS", "h  head", "t  tail"])


class FrameTests(unittest.TestCase):
    def test_scroll_top_keeps_cursor_visible(self) -> None:
        self.assertEqual(scroll_top(0, 5, 10), 0)
        self.assertEqual(scroll_top(14, 0, 10), 5)
        self.assertEqual(scroll_top(7, 3, 10), 3)

    def test_frame_renders_rows_and_status(self) -> None:
        view = _view("one\ntwo\n", "/var/nl/a.txt")
        frame = render_frame(view, 0, 30, 4, status="status here", no_color=True)
        rows = _plain_rows(frame)
        self.assertEqual(len(rows), 4)
        self.assertEqual(rows[0].rstrip(), "one")
        self.assertEqual(rows[1], "two")
        self.assertEqual(rows[2], "")
        self.assertTrue(rows[3].startswith("status here"))
        # Cursor row is reverse video.
        self.assertIn("\033[7mone", frame)

    def test_prompt_replaces_status_and_panels_take_bottom_rows(self) -> None:
        view = _view("one\n", "/var/nl/a.txt")
        frame = render_frame(
            view,
            0,
            40,
            5,
            status="status",
            prompt="Command [h t s ?]: ",
            side_lines=("COMMANDS", "h  head"),
            no_color=True,
        )
        rows = _plain_rows(frame)
        self.assertEqual(rows[2], "│ COMMANDS")
        self.assertEqual(rows[3], "│ h  head")
        self.assertEqual(rows[4], "Command [h t s ?]: ")

    def test_help_panel_is_clipped_to_available_rows(self) -> None:
        frame = render_frame(None, 0, 80, 3, status="s", show_help=True)
        rows = _plain_rows(frame)
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[0], "│ " + ANSI_ESCAPE_RE.sub("", HELP_PANEL_LINES[0]))

    def test_control_bytes_in_output_are_escaped(self) -> None:
        view = _view("bell\x07\n", "/var/nl/a.txt")
        frame = render_frame(view, 0, 30, 2, status="s", no_color=True)
        self.assertIn("bell\\x07", frame)
        self.assertNotIn("\x07", frame)

    def test_display_rows_follow_view_lines_with_blank_edges(self) -> None:
        view = _view("\n\n/etc/hosts\nfoo\n\n", "/var/nl/listing.py")
        for no_color in (True, False):
            with self.subTest(no_color=no_color):
                rows = view_display_lines(view, "monokai", no_color)
                self.assertEqual([ANSI_ESCAPE_RE.sub("", row) for row in rows], view.lines())

    def test_display_rows_split_on_form_feed_like_view_lines(self) -> None:
        view = _view("a\x0cb\nc\n", "/var/nl/a.txt")
        self.assertEqual(view.lines(), ["a", "b", "c"])
        for no_color in (True, False):
            with self.subTest(no_color=no_color):
                rows = view_display_lines(view, "monokai", no_color)
                self.assertEqual([ANSI_ESCAPE_RE.sub("", row) for row in rows], ["a", "b", "c"])

    def test_cursor_row_shows_line_at_cursor(self) -> None:
        view = _view("\n\n/etc/hosts\nfoo\n", "/var/nl/listing.py")
        view.cursor = 2
        frame = render_frame(view, 0, 30, 6, status="s")
        body_rows = frame.split("\r\n")[:-1]
        selected = [row for row in body_rows if row.startswith("\033[7m")]
        self.assertEqual(len(selected), 1)
        self.assertEqual(ANSI_ESCAPE_RE.sub("", selected[0]).strip(), view.line_at_cursor())


if __name__ == "__main__":
    unittest.main()

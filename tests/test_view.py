"""Test layout and rendering of snapshots."""

import unittest

from note.commands import FindAppendChar, MoveCursor, StartFind
from note.controller import EditorController
from note.cursor import Direction
from note.model import Position
from note.view import Style, TerminalTextView, display_column, display_width, layout_line

N = Style.NORMAL


class TestLayout(unittest.TestCase):

    def test_tab_expands_to_next_stop(self):
        cells = layout_line("a\tb")
        self.assertEqual([(c.text, c.column, c.width) for c in cells],
                         [("a", 0, 1), (" " * 7, 1, 7), ("b", 8, 1)])

    def test_tab_at_stop_is_full_width(self):
        self.assertEqual(display_width("\t"), 8)
        self.assertEqual(display_width("12345678\t"), 16)

    def test_wide_characters(self):
        self.assertEqual(display_width("漢字"), 4)
        self.assertEqual(display_column("漢字x", 2), 4)

    def test_control_character_shows_as_question_mark(self):
        cells = layout_line("\x01")
        self.assertEqual((cells[0].text, cells[0].width), ("?", 1))

    def test_display_column_past_end_of_line(self):
        self.assertEqual(display_column("ab", 4), 4)
        self.assertEqual(display_column("a\tb", 2), 8)


class TestRender(unittest.TestCase):

    def render(self, editor, rows=3, columns=10):
        view = TerminalTextView(rows, columns)
        return view.render(editor.snapshot(*view.viewport()))

    def test_plain_lines_and_filler(self):
        frame = self.render(EditorController(["hello", "world"]))
        self.assertEqual(frame.rows, [
            [("hello     ", N)],
            [("world     ", N)],
            [("~         ", N)],
        ])
        self.assertEqual((frame.cursor_y, frame.cursor_x), (0, 0))

    def test_tab_rendering_and_cursor(self):
        editor = EditorController(["a\tb"])
        editor.cursor.move_to(Position(0, 2))
        frame = self.render(editor)
        self.assertEqual(frame.rows[0], [("a       b ", N)])
        self.assertEqual(frame.cursor_x, 8)

    def test_stream_selection(self):
        editor = EditorController(["hello"])
        editor.cursor.move_to(Position(0, 1))
        for _ in range(3):
            editor.execute(MoveCursor(Direction.RIGHT, select=True))
        frame = self.render(editor)
        self.assertEqual(frame.rows[0], [("h", N), ("ell", Style.SELECTED), ("o     ", N)])

    def test_selected_line_break_is_one_cell(self):
        editor = EditorController(["ab", "cd"])
        editor.cursor.move_to(Position(0, 1))
        editor.execute(MoveCursor(Direction.DOWN, select=True))
        frame = self.render(editor)
        self.assertEqual(frame.rows[0], [("a", N), ("b ", Style.SELECTED), (" " * 7, N)])
        self.assertEqual(frame.rows[1], [("c", Style.SELECTED), ("d" + " " * 8, N)])

    def test_block_selection_past_line_end(self):
        editor = EditorController(["abcdef", "x", "abcdef"])
        editor.cursor.move_to(Position(0, 2))
        for direction in (Direction.RIGHT, Direction.RIGHT, Direction.DOWN, Direction.DOWN):
            editor.execute(MoveCursor(direction, select=True, block=True))
        frame = self.render(editor)
        self.assertEqual(frame.rows[0], [("ab", N), ("cd", Style.SELECTED), ("ef    ", N)])
        self.assertEqual(frame.rows[1], [("x ", N), ("  ", Style.SELECTED), ("      ", N)])

    def test_search_highlights(self):
        editor = EditorController(["abcab"])
        editor.execute(StartFind())
        editor.execute(FindAppendChar("a"))
        editor.execute(FindAppendChar("b"))
        frame = self.render(editor)
        self.assertEqual(frame.rows[0], [
            ("ab", Style.CURRENT_MATCH), ("c", N), ("ab", Style.MATCH), ("     ", N),
        ])


class TestScrolling(unittest.TestCase):

    def test_vertical_scroll_follows_cursor(self):
        view = TerminalTextView(3, 10)
        view.scroll_to(Position(5, 0), "")
        self.assertEqual(view.first_line, 3)
        view.scroll_to(Position(4, 0), "")
        self.assertEqual(view.first_line, 3)
        view.scroll_to(Position(1, 0), "")
        self.assertEqual(view.first_line, 1)
        self.assertEqual(view.viewport(), (1, 3))

    def test_horizontal_scroll(self):
        editor = EditorController(["abcdefghij"])
        editor.cursor.move_to(Position(0, 8))
        view = TerminalTextView(2, 5)
        view.scroll_to(editor.cursor.position, editor.lines[0])
        self.assertEqual(view.left_column, 4)
        frame = view.render(editor.snapshot(*view.viewport()))
        self.assertEqual(frame.rows[0], [("efghi", N)])
        self.assertEqual(frame.cursor_x, 4)

    def test_wide_character_cut_by_left_edge(self):
        view = TerminalTextView(1, 3)
        view.left_column = 2
        frame = view.render(EditorController(["a漢b"]).snapshot(0, 1))
        self.assertEqual(frame.rows[0], [(" b ", N)])

    def test_scrolled_rows_show_later_lines(self):
        editor = EditorController(["l%d" % i for i in range(10)])
        editor.cursor.move_to(Position(9, 0))
        view = TerminalTextView(3, 4)
        view.scroll_to(editor.cursor.position, editor.lines[9])
        frame = view.render(editor.snapshot(*view.viewport()))
        self.assertEqual([row[0][0] for row in frame.rows], ["l7  ", "l8  ", "l9  "])
        self.assertEqual(frame.cursor_y, 2)

    def test_resize_keeps_at_least_one_cell(self):
        view = TerminalTextView()
        view.resize(0, -3)
        self.assertEqual((view.num_rows, view.num_columns), (1, 1))


if __name__ == '__main__':
    unittest.main()

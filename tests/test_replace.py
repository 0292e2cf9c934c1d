"""Test search and replace."""

import unittest

from note.commands import ReplaceAll, ReplaceOne, ReplaceSkip, StartReplace, Undo
from note.controller import EditorController
from note.model import Position


class TestReplaceAll(unittest.TestCase):

    def test_replacement_containing_pattern_is_not_rematched(self):
        editor = EditorController(["a a"])
        editor.execute(StartReplace("a", "aa"))
        result = editor.execute(ReplaceAll())
        self.assertTrue(result.accepted)
        self.assertEqual(result.status, "2 replacements made")
        self.assertEqual(editor.lines, ["aa aa"])
        self.assertEqual(editor.cursor.position, Position(0, 5))

    def test_replace_all_is_one_undo_step(self):
        editor = EditorController(["a a", "a"])
        editor.execute(StartReplace("a", "bb"))
        editor.execute(ReplaceAll())
        self.assertEqual(editor.lines, ["bb bb", "bb"])
        editor.execute(Undo())
        self.assertEqual(editor.lines, ["a a", "a"])
        self.assertFalse(editor.undo.can_undo())

    def test_multi_line_replacement(self):
        editor = EditorController(["x1 x2"])
        editor.execute(StartReplace("x", "y\nz"))
        result = editor.execute(ReplaceAll())
        self.assertEqual(result.status, "2 replacements made")
        self.assertEqual(editor.lines, ["y", "z1 y", "z2"])

    def test_shorter_replacement_on_same_line(self):
        editor = EditorController(["foo foo foo"])
        editor.execute(StartReplace("foo", "x"))
        editor.execute(ReplaceAll())
        self.assertEqual(editor.lines, ["x x x"])

    def test_identical_replacement_changes_nothing(self):
        editor = EditorController(["aaa"])
        editor.execute(StartReplace("a", "a"))
        result = editor.execute(ReplaceAll())
        self.assertEqual(result.status, "3 replacements made")
        self.assertEqual(editor.lines, ["aaa"])
        self.assertFalse(editor.undo.can_undo())
        self.assertFalse(editor.modified)

    def test_no_matches(self):
        editor = EditorController(["abc"])
        result = editor.execute(StartReplace("z", "y"))
        self.assertEqual(result.status, "Not found")
        result = editor.execute(ReplaceAll())
        self.assertEqual(result.status, "0 replacements made")
        self.assertEqual(editor.lines, ["abc"])


class TestReplaceOne(unittest.TestCase):

    def setUp(self):
        self.editor = EditorController(["foo bar foo"])

    def test_start_moves_to_first_match(self):
        self.editor.cursor.move_to(Position(0, 2))
        result = self.editor.execute(StartReplace("foo", "baz"))
        self.assertTrue(result.snapshot.search_active)
        self.assertEqual(result.snapshot.replacement, "baz")
        self.assertEqual(self.editor.cursor.position, Position(0, 8))

    def test_replace_one_then_next(self):
        self.editor.execute(StartReplace("foo", "baz"))
        result = self.editor.execute(ReplaceOne())
        self.assertEqual(self.editor.lines, ["baz bar foo"])
        self.assertEqual(result.snapshot.current_match, Position(0, 8))
        self.assertEqual(self.editor.cursor.position, Position(0, 8))

        result = self.editor.execute(ReplaceOne())
        self.assertEqual(self.editor.lines, ["baz bar baz"])
        self.assertEqual(result.status, "Not found")
        self.assertIsNone(result.snapshot.current_match)
        self.assertEqual(self.editor.cursor.position, Position(0, 11))

    def test_skip_leaves_match(self):
        self.editor.execute(StartReplace("foo", "baz"))
        self.editor.execute(ReplaceSkip())
        self.assertEqual(self.editor.cursor.position, Position(0, 8))
        self.editor.execute(ReplaceOne())
        self.assertEqual(self.editor.lines, ["foo bar baz"])

    def test_each_replacement_undoes_separately(self):
        self.editor.execute(StartReplace("foo", "baz"))
        self.editor.execute(ReplaceOne())
        self.editor.execute(ReplaceOne())
        self.editor.execute(Undo())
        self.assertEqual(self.editor.lines, ["baz bar foo"])

    def test_undo_ends_replace_session(self):
        self.editor.execute(StartReplace("foo", "baz"))
        self.editor.execute(ReplaceOne())
        result = self.editor.execute(Undo())
        self.assertFalse(result.snapshot.search_active)
        self.assertIsNone(result.snapshot.replacement)

    def test_empty_pattern_is_declined(self):
        result = self.editor.execute(StartReplace("", "x"))
        self.assertFalse(result.accepted)
        self.assertEqual(result.status, "No search pattern")

    def test_replace_without_session_is_declined(self):
        result = self.editor.execute(ReplaceOne())
        self.assertFalse(result.accepted)
        self.assertEqual(result.status, "No active search")
        result = self.editor.execute(ReplaceAll())
        self.assertFalse(result.accepted)


if __name__ == '__main__':
    unittest.main()

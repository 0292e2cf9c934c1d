"""Test the line-oriented text buffer."""

import pytest

from note.errors import BufferBoundsError
from note.model import Position, TextBuffer, end_of_insert, split_lines


def test_empty_buffer_has_one_line():
    buffer = TextBuffer()
    assert buffer.lines == [""]
    assert buffer.line_count() == 1
    assert TextBuffer([]).lines == [""]


def test_lines_may_not_contain_breaks():
    with pytest.raises(ValueError):
        TextBuffer(["one\ntwo"])
    with pytest.raises(ValueError):
        TextBuffer(["one\r"])


def test_insert_within_line():
    buffer = TextBuffer(["hello"])
    end = buffer.insert(Position(0, 5), " world")
    assert buffer.lines == ["hello world"]
    assert end == Position(0, 11)


def test_insert_splits_on_line_breaks():
    """Embedded breaks of any style split the line."""
    buffer = TextBuffer(["abcd"])
    end = buffer.insert(Position(0, 2), "1\n2\r\n3")
    assert buffer.lines == ["ab1", "2", "3cd"]
    assert end == Position(2, 1)


def test_insert_empty_text_is_noop():
    calls = []
    buffer = TextBuffer(["x"])
    buffer.add_listener(lambda: calls.append(1))
    assert buffer.insert(Position(0, 1), "") == Position(0, 1)
    assert calls == []


def test_delete_within_line_returns_removed_text():
    buffer = TextBuffer(["hello world"])
    removed = buffer.delete(Position(0, 5), Position(0, 11))
    assert removed == " world"
    assert buffer.lines == ["hello"]


def test_delete_across_lines_merges():
    buffer = TextBuffer(["first", "second", "third"])
    removed = buffer.delete(Position(0, 3), Position(2, 2))
    assert removed == "st\nsecond\nth"
    assert buffer.lines == ["firird"]


def test_delete_line_break():
    buffer = TextBuffer(["ab", "cd"])
    assert buffer.delete(Position(0, 2), Position(1, 0)) == "\n"
    assert buffer.lines == ["abcd"]


def test_read_does_not_mutate():
    buffer = TextBuffer(["one", "two"])
    assert buffer.read(Position(0, 1), Position(1, 2)) == "ne\ntw"
    assert buffer.lines == ["one", "two"]


def test_out_of_range_positions_raise():
    buffer = TextBuffer(["abc"])
    with pytest.raises(BufferBoundsError):
        buffer.insert(Position(0, 4), "x")
    with pytest.raises(BufferBoundsError):
        buffer.insert(Position(1, 0), "x")
    with pytest.raises(BufferBoundsError):
        buffer.delete(Position(0, 0), Position(3, 0))
    with pytest.raises(BufferBoundsError):
        buffer.line(5)


def test_reversed_range_raises():
    buffer = TextBuffer(["abc"])
    with pytest.raises(BufferBoundsError):
        buffer.read(Position(0, 2), Position(0, 1))


def test_clamp():
    buffer = TextBuffer(["abc", "de"])
    assert buffer.clamp(Position(5, 9)) == Position(1, 2)
    assert buffer.clamp(Position(-1, -1)) == Position(0, 0)
    assert buffer.clamp(Position(0, 10)) == Position(0, 3)


def test_listeners_run_on_every_mutation():
    calls = []
    buffer = TextBuffer(["abc"])
    buffer.add_listener(lambda: calls.append("changed"))
    buffer.insert(Position(0, 0), "x")
    buffer.delete(Position(0, 0), Position(0, 1))
    buffer.replace_lines(["new"])
    assert calls == ["changed"] * 3


def test_lines_property_is_a_copy():
    buffer = TextBuffer(["abc"])
    lines = buffer.lines
    lines.append("oops")
    assert buffer.line_count() == 1


def test_end_position_and_text():
    buffer = TextBuffer(["ab", "cde"])
    assert buffer.end_position() == Position(1, 3)
    assert buffer.text() == "ab\ncde"


def test_split_lines_and_end_of_insert():
    assert split_lines("a\r\nb\rc\nd") == ["a", "b", "c", "d"]
    assert split_lines("") == [""]
    assert end_of_insert(Position(2, 3), "xy") == Position(2, 5)
    assert end_of_insert(Position(2, 3), "x\nyz") == Position(3, 2)


def test_position_ordering_and_display():
    assert Position(0, 5) < Position(1, 0)
    assert Position(1, 2) < Position(1, 3)
    assert str(Position(0, 0)) == "1:1"

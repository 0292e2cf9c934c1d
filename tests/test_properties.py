"""Randomized command sequences checked against the editing invariants."""

import random

import pytest

from note.commands import (
    CopySelection, CutSelection, CutToLineEnd, DeleteBackward, DeleteForward, InsertChar,
    InsertNewline, MoveCursor, MoveToLineEnd, MoveToLineStart, PageDown, PageUp, Paste, Redo,
    Undo,
)
from note.controller import EditorController
from note.cursor import Direction

SEEDS = range(25)
STEPS = 150


def random_command(rng):
    choice = rng.randrange(12)
    if choice == 0:
        return InsertChar(rng.choice("ab \té漢"))
    if choice == 1:
        return InsertNewline()
    if choice == 2:
        return DeleteBackward()
    if choice == 3:
        return DeleteForward()
    if choice == 4:
        return CutToLineEnd()
    if choice == 5:
        return rng.choice([CutSelection(), CopySelection()])
    if choice == 6:
        return Paste()
    if choice == 7:
        return rng.choice([MoveToLineStart(select=rng.random() < 0.5),
                           MoveToLineEnd(select=rng.random() < 0.5)])
    if choice == 8:
        return rng.choice([PageUp(rows=3), PageDown(rows=3)])
    select = rng.random() < 0.4
    block = select and rng.random() < 0.3
    return MoveCursor(rng.choice(list(Direction)), select=select, block=block)


def check_invariants(editor):
    lines = editor.lines
    assert lines, "document must keep at least one line"
    for line in lines:
        assert "\r" not in line and "\n" not in line
    pos = editor.cursor.position
    assert 0 <= pos.line < len(lines)
    assert 0 <= pos.column <= len(lines[pos.line])
    anchor = editor.cursor.anchor
    if anchor is not None:
        assert 0 <= anchor.line < len(lines)
        assert 0 <= anchor.column <= len(lines[anchor.line])


def run_session(seed):
    """Run random edits, returning the editor and the state around each undo unit."""
    rng = random.Random(seed)
    editor = EditorController(["first line", "", "third\tline"], strict=True)
    history = []
    for _ in range(STEPS):
        before = (editor.lines, editor.cursor.state())
        revision = editor.undo.revision
        editor.execute(random_command(rng))
        check_invariants(editor)
        if editor.undo.revision != revision:
            history.append((before, (editor.lines, editor.cursor.state())))
    return editor, history


@pytest.mark.parametrize("seed", SEEDS)
def test_random_commands_keep_cursor_valid(seed):
    run_session(seed)


@pytest.mark.parametrize("seed", SEEDS)
def test_undo_everything_then_redo_everything(seed):
    editor, history = run_session(seed)

    for before, _ in reversed(history):
        assert editor.execute(Undo()).accepted
        assert editor.lines == before[0]
        assert editor.cursor.state() == before[1]
    assert not editor.execute(Undo()).accepted
    assert editor.lines == ["first line", "", "third\tline"]
    assert not editor.modified

    for _, after in history:
        assert editor.execute(Redo()).accepted
        assert editor.lines == after[0]
        assert editor.cursor.state() == after[1]
    assert not editor.execute(Redo()).accepted


@pytest.mark.parametrize("seed", SEEDS)
def test_serialized_form_is_always_crlf(seed):
    editor, _ = run_session(seed)
    data = editor.serialize()
    assert data.endswith(b"\r\n")
    assert data.count(b"\n") == data.count(b"\r\n") == len(editor.lines)

from contextlib import contextmanager
from dataclasses import dataclass, field
from itertools import count
from typing import TYPE_CHECKING, Iterator, Optional, Union

from .constants import EditorConstants
from .cursor import CursorState
from .model import Position, TextBuffer, end_of_insert

if TYPE_CHECKING:
    from .controller import EditorController


@dataclass(frozen=True)
class InsertText:
    at: Position
    text: str

    @property
    def end(self) -> Position:
        return end_of_insert(self.at, self.text)

    def apply(self, buffer: TextBuffer) -> Position:
        return buffer.insert(self.at, self.text)

    def inverse(self) -> "DeleteRange":
        return DeleteRange(self.at, self.end, self.text)


@dataclass(frozen=True)
class DeleteRange:
    start: Position
    end: Position
    removed: str

    def apply(self, buffer: TextBuffer) -> Position:
        buffer.delete(self.start, self.end)
        return self.start

    def inverse(self) -> InsertText:
        return InsertText(self.start, self.removed)


EditOp = Union[InsertText, DeleteRange]


@dataclass
class UndoUnit:
    before: CursorState
    after: Optional[CursorState] = None
    ops: list[EditOp] = field(default_factory=list)
    serial: int = 0


class UndoLog:
    """Undo and redo stacks of UndoUnits.

    A unit is opened with begin_unit() and closed with end_unit(); every
    op recorded in between belongs to it. Nested begin/end pairs merge
    into the outermost unit. Prefer the unit() context manager, which
    also rolls the unit back if the command fails.
    """

    def __init__(self, max_entries: int = EditorConstants.UNDO_LIMIT):
        self._undo_stack: list[UndoUnit] = []
        self._redo_stack: list[UndoUnit] = []
        self._max_entries = max_entries
        self._open: Optional[UndoUnit] = None
        # (op count, cursor state) for each open nesting level
        self._marks: list[tuple[int, CursorState]] = []
        self._serials = count(1)

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._open = None
        self._marks.clear()

    @property
    def in_unit(self) -> bool:
        return self._open is not None

    @property
    def revision(self) -> int:
        """Serial of the unit on top of the undo stack, 0 when empty."""
        return self._undo_stack[-1].serial if self._undo_stack else 0

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def begin_unit(self, cursor: CursorState):
        if self._open is None:
            self._open = UndoUnit(before=cursor)
        self._marks.append((len(self._open.ops), cursor))

    def record(self, op: EditOp):
        if self._open is None:
            raise RuntimeError("record() called outside an undo unit")
        self._open.ops.append(op)

    def end_unit(self, cursor: CursorState) -> bool:
        """Close the current nesting level.

        Returns:
            True if this closed the outermost level and a non-empty unit
            was pushed onto the undo stack
        """
        self._marks.pop()
        if self._marks:
            return False
        unit = self._open
        self._open = None
        if unit is None or not unit.ops:
            return False
        unit.after = cursor
        unit.serial = next(self._serials)
        self._push(unit)
        return True

    def rollback_unit(self, editor: "EditorController"):
        """Revert the ops of the current nesting level and close it."""
        if self._open is None:
            raise RuntimeError("rollback_unit() called outside an undo unit")
        mark, cursor = self._marks.pop()
        ops = self._open.ops[mark:]
        del self._open.ops[mark:]
        for op in reversed(ops):
            op.inverse().apply(editor.buffer)
        editor.cursor.restore(cursor)
        if not self._marks:
            self._open = None

    @contextmanager
    def unit(self, editor: "EditorController") -> Iterator[None]:
        self.begin_unit(editor.cursor.state())
        try:
            yield
        except BaseException:
            self.rollback_unit(editor)
            raise
        self.end_unit(editor.cursor.state())

    def _push(self, unit: UndoUnit):
        self._undo_stack.append(unit)
        # Cap history
        if len(self._undo_stack) > self._max_entries:
            self._undo_stack.pop(0)
        # Any new edit invalidates redo history
        self._redo_stack.clear()

    def undo(self, editor: "EditorController") -> bool:
        if not self._undo_stack:
            return False
        unit = self._undo_stack.pop()
        for op in reversed(unit.ops):
            op.inverse().apply(editor.buffer)
        editor.cursor.restore(unit.before)
        self._redo_stack.append(unit)
        return True

    def redo(self, editor: "EditorController") -> bool:
        if not self._redo_stack:
            return False
        unit = self._redo_stack.pop()
        for op in unit.ops:
            op.apply(editor.buffer)
        editor.cursor.restore(unit.after or unit.before)
        self._undo_stack.append(unit)
        return True

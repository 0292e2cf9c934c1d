"""Cursor and selection tracking."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .model import Position, TextBuffer


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class CursorState:
    """Everything undo needs to put the cursor back."""
    position: Position
    anchor: Optional[Position] = None
    block: bool = False
    goal_column: Optional[int] = None


class Cursor:
    """The active position plus an optional selection anchor.

    Positions are clamped against the buffer on every move, so the cursor
    is always valid. Vertical moves remember a goal column so that
    passing over a short line does not lose the original column.
    """

    def __init__(self, buffer: TextBuffer):
        self.buffer = buffer
        self.position = Position()
        self.anchor: Optional[Position] = None
        self.block = False
        self.goal_column: Optional[int] = None

    # --- state ---
    def state(self) -> CursorState:
        return CursorState(self.position, self.anchor, self.block, self.goal_column)

    def restore(self, state: CursorState):
        self.position = self.buffer.clamp(state.position)
        self.anchor = self.buffer.clamp(state.anchor) if state.anchor is not None else None
        self.block = state.block if state.anchor is not None else False
        self.goal_column = state.goal_column

    def clamp(self):
        """Pull the cursor and anchor back inside the buffer after an edit."""
        self.position = self.buffer.clamp(self.position)
        if self.anchor is not None:
            self.anchor = self.buffer.clamp(self.anchor)

    # --- movement ---
    def move_to(self, pos: Position):
        self.position = self.buffer.clamp(pos)
        self.goal_column = None

    def move(self, direction: Direction):
        if direction is Direction.LEFT:
            self.move_left()
        elif direction is Direction.RIGHT:
            self.move_right()
        elif direction is Direction.UP:
            self.move_up()
        else:
            self.move_down()

    def move_left(self):
        line, column = self.position.line, self.position.column
        if column > 0:
            self.move_to(Position(line, column - 1))
        elif line > 0:
            self.move_to(Position(line - 1, self.buffer.line_length(line - 1)))

    def move_right(self):
        line, column = self.position.line, self.position.column
        if column < self.buffer.line_length(line):
            self.move_to(Position(line, column + 1))
        elif line + 1 < self.buffer.line_count():
            self.move_to(Position(line + 1, 0))

    def move_up(self):
        self._move_vertical(-1)

    def move_down(self):
        self._move_vertical(1)

    def page_up(self, rows: int):
        self._move_vertical(-max(rows, 1))

    def page_down(self, rows: int):
        self._move_vertical(max(rows, 1))

    def _move_vertical(self, delta: int):
        goal = self.goal_column if self.goal_column is not None else self.position.column
        target = min(max(self.position.line + delta, 0), self.buffer.line_count() - 1)
        if target == self.position.line:
            return
        self.position = Position(target, min(goal, self.buffer.line_length(target)))
        self.goal_column = goal

    def move_to_line_start(self):
        self.move_to(Position(self.position.line, 0))

    def move_to_line_end(self):
        line = self.position.line
        self.move_to(Position(line, self.buffer.line_length(line)))

    # --- selection ---
    @property
    def has_selection(self) -> bool:
        return self.anchor is not None

    def start_selection(self, block: bool = False):
        """Drop the anchor at the cursor unless a selection is already active.

        The anchor of an active selection is kept, but its mode follows the
        latest modifier: Alt+arrow turns a stream selection into a block and
        Shift+arrow turns a block back into a stream.
        """
        if self.anchor is None:
            self.anchor = self.position
        self.block = block

    def extend_selection(self, direction: Direction, block: bool = False):
        self.start_selection(block)
        self.move(direction)

    def clear_selection(self):
        self.anchor = None
        self.block = False

    def normalized_selection(self) -> Optional[tuple[Position, Position]]:
        """Selection as (start, end) in document order, or None.

        For a block selection start and end are the top-left and
        bottom-right corners; their columns may lie past the end of
        shorter lines inside the block.
        """
        if self.anchor is None:
            return None
        if self.block:
            top = min(self.anchor.line, self.position.line)
            bottom = max(self.anchor.line, self.position.line)
            left = min(self.anchor.column, self.position.column)
            right = max(self.anchor.column, self.position.column)
            return Position(top, left), Position(bottom, right)
        if self.position < self.anchor:
            return self.position, self.anchor
        return self.anchor, self.position

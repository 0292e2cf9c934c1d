import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .errors import BufferBoundsError

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, order=True)
class Position:
    line: int = 0
    column: int = 0

    def __str__(self):
        return f"{self.line + 1}:{self.column + 1}"


def split_lines(text: str) -> list[str]:
    """Split text on any line break; always returns at least one element."""
    return _LINE_BREAK.split(text)


def normalize_newlines(text: str) -> str:
    """Rewrite every line break in text as a single '\\n'."""
    return "\n".join(split_lines(text))


def end_of_insert(at: Position, text: str) -> Position:
    """Position just after `text` once it is inserted at `at`."""
    parts = split_lines(text)
    if len(parts) == 1:
        return Position(at.line, at.column + len(parts[0]))
    return Position(at.line + len(parts) - 1, len(parts[-1]))


class TextBuffer:
    """The document as a list of lines.

    Lines never contain line terminators. There is always at least one
    line; an empty document is a single empty line. Positions handed in
    must be valid, otherwise BufferBoundsError is raised.
    """

    def __init__(self, lines: Optional[Iterable[str]] = None):
        self._lines: list[str] = list(lines) if lines is not None else [""]
        if not self._lines:
            self._lines = [""]
        for line in self._lines:
            if "\r" in line or "\n" in line:
                raise ValueError("line contains a line break")
        self._listeners: list[Callable[[], None]] = []

    # --- listeners ---
    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every mutation."""
        self._listeners.append(callback)

    def _changed(self):
        for callback in self._listeners:
            callback()

    # --- queries ---
    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def line(self, index: int) -> str:
        if not 0 <= index < len(self._lines):
            raise BufferBoundsError(f"line {index} outside 0..{len(self._lines) - 1}")
        return self._lines[index]

    def line_length(self, index: int) -> int:
        return len(self.line(index))

    def end_position(self) -> Position:
        last = len(self._lines) - 1
        return Position(last, len(self._lines[last]))

    def is_valid(self, pos: Position) -> bool:
        return (0 <= pos.line < len(self._lines)
                and 0 <= pos.column <= len(self._lines[pos.line]))

    def check(self, pos: Position) -> None:
        if not self.is_valid(pos):
            raise BufferBoundsError(f"position {pos.line},{pos.column} is outside the buffer")

    def clamp(self, pos: Position) -> Position:
        """Nearest valid position to `pos`."""
        line = min(max(pos.line, 0), len(self._lines) - 1)
        column = min(max(pos.column, 0), len(self._lines[line]))
        return Position(line, column)

    def _check_range(self, start: Position, end: Position):
        self.check(start)
        self.check(end)
        if end < start:
            raise BufferBoundsError(f"range end {end.line},{end.column} precedes start {start.line},{start.column}")

    def read(self, start: Position, end: Position) -> str:
        """Text between two positions, lines joined with '\\n'."""
        self._check_range(start, end)
        if start.line == end.line:
            return self._lines[start.line][start.column:end.column]
        parts = [self._lines[start.line][start.column:]]
        parts.extend(self._lines[start.line + 1:end.line])
        parts.append(self._lines[end.line][:end.column])
        return "\n".join(parts)

    def text(self) -> str:
        return "\n".join(self._lines)

    # --- mutations ---
    def insert(self, at: Position, text: str) -> Position:
        """Insert text at a position and return the position after it.

        Embedded line breaks split the line.
        """
        self.check(at)
        if not text:
            return at
        parts = split_lines(text)
        current = self._lines[at.line]
        before = current[:at.column]
        after = current[at.column:]
        parts[0] = before + parts[0]
        end = Position(at.line + len(parts) - 1, len(parts[-1]))
        parts[-1] += after
        self._lines[at.line:at.line + 1] = parts
        self._changed()
        return end

    def delete(self, start: Position, end: Position) -> str:
        """Remove the text between two positions and return it.

        A range spanning a line boundary merges the first and last lines.
        """
        removed = self.read(start, end)
        if start == end:
            return removed
        head = self._lines[start.line][:start.column]
        tail = self._lines[end.line][end.column:]
        self._lines[start.line:end.line + 1] = [head + tail]
        self._changed()
        return removed

    def replace_lines(self, lines: Iterable[str]) -> None:
        """Swap in a whole new document."""
        self._lines = list(lines) or [""]
        self._changed()

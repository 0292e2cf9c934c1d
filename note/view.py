"""Layout of editor snapshots onto a grid of terminal cells.

Lines are never wrapped. The view scrolls vertically to keep the cursor
line on screen and horizontally to keep the cursor column on screen. Tabs
expand to the next multiple of EditorConstants.TAB_STOP and wide
characters take two cells, as reported by wcwidth.
"""

from dataclasses import dataclass, field
from enum import Enum

from wcwidth import wcwidth

from .constants import EditorConstants
from .controller import Snapshot
from .model import Position


class Style(Enum):
    NORMAL = 0
    MATCH = 1
    SELECTED = 2
    CURRENT_MATCH = 3


Segment = tuple[str, Style]


@dataclass
class Cell:
    text: str
    column: int  # Display column where the cell starts
    width: int
    index: int  # Character index in the line; past the end for padding


@dataclass
class Frame:
    """What the terminal draws: styled rows plus the cursor cell."""
    rows: list[list[Segment]] = field(default_factory=list)
    cursor_y: int = 0
    cursor_x: int = 0


def layout_line(line: str, tab_stop: int = EditorConstants.TAB_STOP) -> list[Cell]:
    """Split a line into display cells."""
    cells = []
    column = 0
    for index, char in enumerate(line):
        if char == "\t":
            width = tab_stop - column % tab_stop
            cells.append(Cell(" " * width, column, width, index))
        else:
            w = wcwidth(char)
            if w < 0:
                # Non-printable characters show as a single "?"
                cells.append(Cell("?", column, 1, index))
                width = 1
            else:
                cells.append(Cell(char, column, w, index))
                width = w
        column += width
    return cells


def display_width(line: str, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    cells = layout_line(line, tab_stop)
    if not cells:
        return 0
    return cells[-1].column + cells[-1].width


def display_column(line: str, column: int, tab_stop: int = EditorConstants.TAB_STOP) -> int:
    """Display column of a character column; columns past the end count as spaces."""
    prefix = line[:column]
    return display_width(prefix, tab_stop) + max(0, column - len(line))


class TerminalTextView:
    """Viewport over the document for a terminal of num_rows x num_columns."""

    def __init__(self, num_rows: int = 24, num_columns: int = 80):
        self.num_rows = num_rows
        self.num_columns = num_columns
        self.first_line = 0
        self.left_column = 0

    def resize(self, num_rows: int, num_columns: int):
        self.num_rows = max(1, num_rows)
        self.num_columns = max(1, num_columns)

    def viewport(self) -> tuple[int, int]:
        return self.first_line, self.num_rows

    def scroll_to(self, cursor: Position, line_text: str):
        """Adjust scroll offsets so the cursor is visible."""
        if cursor.line < self.first_line:
            self.first_line = cursor.line
        elif cursor.line >= self.first_line + self.num_rows:
            self.first_line = cursor.line - self.num_rows + 1
        x = display_column(line_text, cursor.column)
        if x < self.left_column:
            self.left_column = x
        elif x >= self.left_column + self.num_columns:
            self.left_column = x - self.num_columns + 1

    def render(self, snapshot: Snapshot) -> Frame:
        frame = Frame()
        for offset in range(self.num_rows):
            index = snapshot.first_line + offset
            if offset < len(snapshot.lines):
                line = snapshot.lines[offset]
                frame.rows.append(self._render_line(line, self._ranges(snapshot, index, line)))
            else:
                frame.rows.append([("~".ljust(self.num_columns), Style.NORMAL)])

        cursor = snapshot.cursor
        row = cursor.line - snapshot.first_line
        if 0 <= row < len(snapshot.lines):
            x = display_column(snapshot.lines[row], cursor.column) - self.left_column
            frame.cursor_y = row
            frame.cursor_x = min(max(x, 0), self.num_columns - 1)
        return frame

    def _ranges(self, snapshot: Snapshot, index: int, line: str) -> list[tuple[int, int, Style]]:
        """Styled character ranges on one line, lowest priority first."""
        ranges = []
        for start, end in snapshot.highlights:
            if start.line == index:
                style = Style.CURRENT_MATCH if start == snapshot.current_match else Style.MATCH
                ranges.append((start.column, min(end.column, len(line)), style))
        if snapshot.selection is not None:
            start, end = snapshot.selection
            if start.line <= index <= end.line:
                if snapshot.block_selection:
                    ranges.append((start.column, end.column, Style.SELECTED))
                else:
                    left = start.column if index == start.line else 0
                    # Selected line breaks show as one trailing cell
                    right = end.column if index == end.line else len(line) + 1
                    ranges.append((left, right, Style.SELECTED))
        ranges.sort(key=lambda r: r[2].value)
        return ranges

    def _render_line(self, line: str, ranges: list[tuple[int, int, Style]]) -> list[Segment]:
        cells = layout_line(line)
        end = cells[-1].column + cells[-1].width if cells else 0
        # Padding cells carry the virtual columns past the end of the line
        extra = max((r[1] for r in ranges), default=0) - len(line)
        for offset in range(max(0, extra)):
            cells.append(Cell(" ", end + offset, 1, len(line) + offset))

        left = self.left_column
        right = left + self.num_columns
        segments: list[Segment] = []
        used = 0
        for cell in cells:
            cell_end = cell.column + cell.width
            if cell_end <= left and (cell.width > 0 or cell.column < left):
                continue
            if cell.column >= right:
                break
            if cell.column < left or cell_end > right:
                # Wide character cut by the edge of the view
                text = " " * (min(cell_end, right) - max(cell.column, left))
            else:
                text = cell.text
            style = Style.NORMAL
            for start, stop, candidate in ranges:
                if start <= cell.index < stop:
                    style = candidate
            _append(segments, text, style)
            used = min(cell_end, right) - left
        if used < self.num_columns:
            _append(segments, " " * (self.num_columns - used), Style.NORMAL)
        return segments


def _append(segments: list[Segment], text: str, style: Style):
    if segments and segments[-1][1] is style:
        segments[-1] = (segments[-1][0] + text, style)
    else:
        segments.append((text, style))

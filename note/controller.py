"""The editing engine's command surface."""

import logging
from dataclasses import dataclass
from typing import Optional

from .clipboard import ClipboardRegister, ClipKind
from .codec import parse_lines, serialize_lines
from .commands import EditorCommand
from .constants import EditorConstants
from .cursor import Cursor
from .errors import BufferBoundsError, CommandDeclined
from .model import Position, TextBuffer, normalize_newlines
from .replace import ReplaceEngine
from .search import SearchEngine, is_pattern_char
from .undo import DeleteRange, InsertText, UndoLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the editor state handed to the renderer."""
    lines: tuple[str, ...]
    first_line: int
    line_count: int
    cursor: Position
    selection: Optional[tuple[Position, Position]]
    block_selection: bool
    highlights: tuple[tuple[Position, Position], ...]
    current_match: Optional[Position]
    search_active: bool
    pattern: str
    replacement: Optional[str]
    wrapped: bool
    modified: bool
    status: Optional[str] = None


@dataclass(frozen=True)
class CommandResult:
    accepted: bool
    status: Optional[str]
    snapshot: Snapshot


class EditorController:
    """Owns the buffer, cursor, undo log, clipboard and search state.

    All mutation goes through execute(); errors are turned into declined
    results here and never propagate to the dispatcher. With strict=True
    a BufferBoundsError, which means an internal invariant was broken, is
    re-raised after the command has been rolled back.
    """

    def __init__(self, lines: Optional[list[str]] = None, strict: bool = False):
        self.buffer = TextBuffer(lines)
        self.cursor = Cursor(self.buffer)
        self.undo = UndoLog()
        self.clipboard = ClipboardRegister()
        self.search = SearchEngine(self.buffer)
        self.replacer = ReplaceEngine(self.search, self)
        self.strict = strict
        # (first line, line count) of the slice put into snapshots
        self.viewport: tuple[int, Optional[int]] = (0, None)
        self._saved_revision = 0

    # --- command entry point ---
    def execute(self, command: EditorCommand) -> CommandResult:
        if self.search.active and not command.search_command:
            self.cancel_find()
        try:
            if command.records_undo:
                with self.undo.unit(self):
                    status = command.execute(self)
            else:
                status = command.execute(self)
        except CommandDeclined as e:
            logger.debug(f"{type(command).__name__} declined: {e}")
            return self._result(False, str(e))
        except BufferBoundsError as e:
            logger.error(f"{type(command).__name__} hit a buffer bounds error: {e}")
            if self.strict:
                raise
            self.cursor.clamp()
            return self._result(False, f"Internal error: {e}")
        return self._result(True, status)

    def _result(self, accepted: bool, status: Optional[str]) -> CommandResult:
        return CommandResult(accepted, status, self.snapshot(*self.viewport, status=status))

    # --- snapshots and persistence ---
    def snapshot(self, first_line: int = 0, max_lines: Optional[int] = None,
                 status: Optional[str] = None) -> Snapshot:
        count = self.buffer.line_count()
        first_line = min(max(first_line, 0), count - 1)
        last = count if max_lines is None else min(count, first_line + max_lines)
        highlights: tuple = ()
        current = None
        if self.search.active:
            highlights = tuple(
                (start, end) for start, end in self.search.highlights()
                if first_line <= start.line < last
            )
            current = self.search.current_match()
        return Snapshot(
            lines=tuple(self.buffer.lines[first_line:last]),
            first_line=first_line,
            line_count=count,
            cursor=self.cursor.position,
            selection=self.cursor.normalized_selection(),
            block_selection=self.cursor.block,
            highlights=highlights,
            current_match=current,
            search_active=self.search.active,
            pattern=self.search.pattern,
            replacement=self.replacer.replacement,
            wrapped=self.search.wrapped,
            modified=self.modified,
            status=status,
        )

    @property
    def text(self) -> str:
        return self.buffer.text()

    @property
    def lines(self) -> list[str]:
        return self.buffer.lines

    @property
    def modified(self) -> bool:
        return self.undo.revision != self._saved_revision

    def mark_saved(self):
        self._saved_revision = self.undo.revision

    def serialize(self) -> bytes:
        return serialize_lines(self.buffer.lines)

    def load(self, data: bytes, strict: bool = True):
        """Replace the document with decoded bytes.

        Raises:
            EncodingError: If strict and the data is not CRLF/UTF-8
        """
        lines = parse_lines(data, strict=strict)
        self.cancel_find()
        self.buffer.replace_lines(lines)
        self.undo.clear()
        self.cursor.clear_selection()
        self.cursor.move_to(Position())
        self._saved_revision = self.undo.revision
        logger.info(f"Loaded {len(lines)} lines")

    # --- recorded primitives ---
    def insert_text(self, at: Position, text: str) -> Position:
        text = normalize_newlines(text)
        if not text:
            return at
        end = self.buffer.insert(at, text)
        self.undo.record(InsertText(at, text))
        return end

    def delete_range(self, start: Position, end: Position) -> str:
        if start == end:
            return ""
        removed = self.buffer.delete(start, end)
        self.undo.record(DeleteRange(start, end, removed))
        return removed

    def replace_range(self, start: Position, end: Position, text: str) -> Position:
        self.delete_range(start, end)
        return self.insert_text(start, text)

    # --- selection helpers ---
    def _selection(self) -> tuple[Position, Position]:
        selection = self.cursor.normalized_selection()
        if selection is None:
            raise CommandDeclined(EditorConstants.NO_SELECTION)
        start, end = selection
        empty = start.column == end.column if self.cursor.block else start == end
        if empty:
            raise CommandDeclined(EditorConstants.NO_SELECTION)
        return start, end

    def selected_text(self) -> str:
        start, end = self._selection()
        if not self.cursor.block:
            return self.buffer.read(start, end)
        width = end.column - start.column
        rows = []
        for index in range(start.line, end.line + 1):
            rows.append(self.buffer.line(index)[start.column:end.column].ljust(width))
        return "\n".join(rows)

    def delete_selection(self):
        start, end = self._selection()
        if self.cursor.block:
            for index in range(end.line, start.line - 1, -1):
                length = self.buffer.line_length(index)
                if start.column < length:
                    self.delete_range(Position(index, start.column),
                                      Position(index, min(end.column, length)))
        else:
            self.delete_range(start, end)
        self.cursor.clear_selection()
        self.cursor.move_to(start)

    def _delete_selection_if_any(self) -> bool:
        """Delete the selected text, if any. Returns True if text was removed."""
        if not self.cursor.has_selection:
            return False
        try:
            self.delete_selection()
        except CommandDeclined:
            # Zero-width selection; nothing to remove
            self.cursor.clear_selection()
            return False
        return True

    # --- editing ---
    def insert_char(self, char: str):
        if len(char) != 1 or not (char.isprintable() or char == "\t"):
            raise CommandDeclined(f"Cannot insert {char!r}")
        self._delete_selection_if_any()
        self.cursor.move_to(self.insert_text(self.cursor.position, char))

    def insert_newline(self):
        self._delete_selection_if_any()
        self.cursor.move_to(self.insert_text(self.cursor.position, "\n"))

    def delete_backward(self):
        if self._delete_selection_if_any():
            return
        pos = self.cursor.position
        if pos.column > 0:
            start = Position(pos.line, pos.column - 1)
        elif pos.line > 0:
            start = Position(pos.line - 1, self.buffer.line_length(pos.line - 1))
        else:
            return
        self.delete_range(start, pos)
        self.cursor.move_to(start)

    def delete_forward(self):
        if self._delete_selection_if_any():
            return
        pos = self.cursor.position
        if pos.column < self.buffer.line_length(pos.line):
            end = Position(pos.line, pos.column + 1)
        elif pos.line + 1 < self.buffer.line_count():
            end = Position(pos.line + 1, 0)
        else:
            return
        self.delete_range(pos, end)
        self.cursor.move_to(pos)

    def cut_to_line_end(self):
        """Cut from the cursor to the end of its line.

        At the end of a non-empty line nothing is removed and the register
        is left holding an empty payload. On an empty line the whole line
        is removed and the register becomes line-oriented.
        """
        self.cursor.clear_selection()
        pos = self.cursor.position
        length = self.buffer.line_length(pos.line)
        count = self.buffer.line_count()
        if pos.column < length:
            removed = self.delete_range(pos, Position(pos.line, length))
            self.clipboard.set_cut(removed)
            self.cursor.move_to(pos)
        elif length == 0:
            if count == 1:
                raise CommandDeclined("Nothing to cut")
            if pos.line + 1 < count:
                self.delete_range(Position(pos.line, 0), Position(pos.line + 1, 0))
                self.cursor.move_to(Position(pos.line, 0))
            else:
                previous = Position(pos.line - 1, self.buffer.line_length(pos.line - 1))
                self.delete_range(previous, pos)
                self.cursor.move_to(previous)
            self.clipboard.set_cut("", line_oriented=True)
        else:
            self.clipboard.set_cut("")

    def cut_selection(self):
        block = self.cursor.block
        text = self.selected_text()
        self.delete_selection()
        self.clipboard.set_cut(text, block=block)

    def copy_selection(self):
        self.clipboard.set_copy(self.selected_text(), block=self.cursor.block)

    def paste(self):
        clip = self.clipboard.get()
        if clip is None:
            raise CommandDeclined(EditorConstants.CLIPBOARD_EMPTY)
        self._delete_selection_if_any()
        pos = self.cursor.position
        if clip.kind is ClipKind.LINE:
            self.cursor.move_to(self.insert_text(Position(pos.line, 0), clip.text + "\n"))
        elif clip.kind is ClipKind.BLOCK:
            self._paste_block(pos, clip.rows)
        else:
            self.cursor.move_to(self.insert_text(pos, clip.text))

    def _paste_block(self, at: Position, rows: list[str]):
        """Insert rows column-wise at `at`, padding and adding lines as needed."""
        end = at
        for offset, row in enumerate(rows):
            index = at.line + offset
            if index < self.buffer.line_count():
                length = self.buffer.line_length(index)
                if length < at.column:
                    end = self.insert_text(Position(index, length), " " * (at.column - length) + row)
                else:
                    end = self.insert_text(Position(index, at.column), row)
            else:
                self.insert_text(self.buffer.end_position(), "\n" + " " * at.column + row)
                end = Position(index, at.column + len(row))
        self.cursor.move_to(end)

    def undo_last(self):
        if not self.undo.undo(self):
            raise CommandDeclined(EditorConstants.NOTHING_TO_UNDO)

    def redo_last(self):
        if not self.undo.redo(self):
            raise CommandDeclined(EditorConstants.NOTHING_TO_REDO)

    def go_to_line(self, line: int):
        if not 1 <= line <= self.buffer.line_count():
            raise CommandDeclined(EditorConstants.LINE_OUT_OF_RANGE)
        self.cursor.clear_selection()
        self.cursor.move_to(Position(line - 1, 0))

    # --- search and replace ---
    def _follow_match(self, restore_origin: bool = True) -> Optional[str]:
        """Put the cursor on the current match and describe the outcome."""
        match = self.search.current_match()
        if match is None:
            if self.search.pattern:
                if restore_origin:
                    self.cursor.move_to(self.search.origin)
                return EditorConstants.NOT_FOUND
            return None
        self.cursor.clear_selection()
        self.cursor.move_to(match)
        if self.search.wrapped:
            return EditorConstants.SEARCH_WRAPPED
        return None

    def start_find(self):
        self.replacer.cancel()
        self.search.start_search(self.cursor.position)

    def find_append_char(self, char: str) -> Optional[str]:
        self.search.append_char(char)
        return self._follow_match()

    def find_backspace(self) -> Optional[str]:
        self.search.backspace()
        return self._follow_match()

    def find_next(self) -> Optional[str]:
        self._require_pattern()
        self.search.next()
        return self._follow_match()

    def find_previous(self) -> Optional[str]:
        self._require_pattern()
        self.search.previous()
        return self._follow_match()

    def cancel_find(self):
        self.search.cancel()
        self.replacer.cancel()

    def _require_pattern(self):
        if not self.search.active:
            raise CommandDeclined(EditorConstants.NO_ACTIVE_SEARCH)
        if not self.search.pattern:
            raise CommandDeclined("No search pattern")

    def start_replace(self, pattern: str, replacement: str) -> Optional[str]:
        if not pattern:
            raise CommandDeclined("No search pattern")
        if not all(is_pattern_char(char) for char in pattern):
            raise CommandDeclined(f"Cannot search for {pattern!r}")
        self.search.start_search(self.cursor.position)
        self.search.set_pattern(pattern)
        self.replacer.start(replacement)
        return self._follow_match()

    def replace_one(self) -> Optional[str]:
        self.replacer.replace_current()
        return self._follow_match(restore_origin=False)

    def replace_skip(self) -> Optional[str]:
        self.replacer.skip()
        return self._follow_match()

    def replace_all(self) -> str:
        count = self.replacer.replace_all()
        if count:
            self.cursor.clear_selection()
        return f"{count} replacements made"

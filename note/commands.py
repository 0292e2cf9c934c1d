"""Command pattern implementation for editor actions.

A command is a decoded user action with its payload. The dispatcher
builds one and hands it to EditorController.execute(), which runs it as
a single undo unit.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .cursor import Direction

if TYPE_CHECKING:
    from .controller import EditorController


class EditorCommand(ABC):
    """Base class for editor commands."""

    # Search commands keep an active search session alive; any other
    # command cancels it before running.
    search_command = False
    # Whether the command runs inside an undo unit
    records_undo = True

    @abstractmethod
    def execute(self, editor: 'EditorController') -> Optional[str]:
        """Execute the command.

        Args:
            editor: Controller owning the document

        Returns:
            A status message for the renderer, or None

        Raises:
            CommandDeclined: If the command cannot run; the controller
                reports it and leaves the document unchanged
        """


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands."""

    select = False
    block = False

    def execute(self, editor: 'EditorController') -> Optional[str]:
        cursor = editor.cursor
        if self.select:
            cursor.start_selection(self.block)
        else:
            # Clear selection on non-shift movement
            cursor.clear_selection()
        self._move(editor)
        return None

    @abstractmethod
    def _move(self, editor: 'EditorController'):
        """Perform the movement."""


@dataclass
class MoveCursor(MovementCommand):
    direction: Direction
    select: bool = False
    block: bool = False

    def _move(self, editor):
        editor.cursor.move(self.direction)


@dataclass
class MoveToLineStart(MovementCommand):
    select: bool = False

    def _move(self, editor):
        editor.cursor.move_to_line_start()


@dataclass
class MoveToLineEnd(MovementCommand):
    select: bool = False

    def _move(self, editor):
        editor.cursor.move_to_line_end()


@dataclass
class PageUp(MovementCommand):
    rows: int = 1
    select: bool = False

    def _move(self, editor):
        editor.cursor.page_up(self.rows)


@dataclass
class PageDown(MovementCommand):
    rows: int = 1
    select: bool = False

    def _move(self, editor):
        editor.cursor.page_down(self.rows)


@dataclass
class GoToLine(EditorCommand):
    line: int  # 1-based

    def execute(self, editor):
        editor.go_to_line(self.line)
        return None


class EditCommand(EditorCommand):
    """Base class for editing commands."""

    def execute(self, editor: 'EditorController') -> Optional[str]:
        return self._edit(editor)

    @abstractmethod
    def _edit(self, editor: 'EditorController') -> Optional[str]:
        """Perform the edit."""


@dataclass
class InsertChar(EditCommand):
    char: str

    def _edit(self, editor):
        editor.insert_char(self.char)


class InsertNewline(EditCommand):
    def _edit(self, editor):
        editor.insert_newline()


class DeleteBackward(EditCommand):
    def _edit(self, editor):
        editor.delete_backward()


class DeleteForward(EditCommand):
    def _edit(self, editor):
        editor.delete_forward()


class CutToLineEnd(EditCommand):
    def _edit(self, editor):
        editor.cut_to_line_end()


class CutSelection(EditCommand):
    def _edit(self, editor):
        editor.cut_selection()
        return "Selection cut"


class CopySelection(EditCommand):
    def _edit(self, editor):
        editor.copy_selection()
        return "Selection copied"


class Paste(EditCommand):
    def _edit(self, editor):
        editor.paste()


class HistoryCommand(EditorCommand):
    """Undo and redo manipulate the log directly, outside any unit."""

    records_undo = False


class Undo(HistoryCommand):
    def execute(self, editor):
        editor.undo_last()
        return "Undone"


class Redo(HistoryCommand):
    def execute(self, editor):
        editor.redo_last()
        return "Redone"


class SearchCommand(EditorCommand):
    """Base class for commands that drive the search session."""

    search_command = True


class StartFind(SearchCommand):
    def execute(self, editor):
        editor.start_find()
        return None


@dataclass
class FindAppendChar(SearchCommand):
    char: str

    def execute(self, editor):
        return editor.find_append_char(self.char)


class FindBackspace(SearchCommand):
    def execute(self, editor):
        return editor.find_backspace()


class FindNext(SearchCommand):
    def execute(self, editor):
        return editor.find_next()


class FindPrevious(SearchCommand):
    def execute(self, editor):
        return editor.find_previous()


class CancelFind(SearchCommand):
    def execute(self, editor):
        editor.cancel_find()
        return None


@dataclass
class StartReplace(SearchCommand):
    pattern: str
    replacement: str

    def execute(self, editor):
        return editor.start_replace(self.pattern, self.replacement)


class ReplaceOne(SearchCommand):
    def execute(self, editor):
        return editor.replace_one()


class ReplaceSkip(SearchCommand):
    def execute(self, editor):
        return editor.replace_skip()


class ReplaceAll(SearchCommand):
    def execute(self, editor):
        return editor.replace_all()

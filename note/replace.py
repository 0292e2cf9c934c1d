"""Search-and-replace on top of SearchEngine."""

import logging
from typing import TYPE_CHECKING, Optional

from .constants import EditorConstants
from .errors import CommandDeclined
from .model import Position
from .search import SearchEngine

if TYPE_CHECKING:
    from .controller import EditorController

logger = logging.getLogger(__name__)


def _translate(pos: Position, old_end: Optional[Position], new_end: Optional[Position]) -> Position:
    """Map a position at or after old_end to where it sits after old_end moved to new_end."""
    if old_end is None or new_end is None:
        return pos
    if pos.line == old_end.line:
        return Position(new_end.line, new_end.column + pos.column - old_end.column)
    return Position(pos.line + new_end.line - old_end.line, pos.column)


class ReplaceEngine:
    """Replaces matches of the active search with a destination text.

    Edits go through the controller, so every replacement is recorded in
    the undo log like any other edit.
    """

    def __init__(self, search: SearchEngine, editor: "EditorController"):
        self.search = search
        self.editor = editor
        self.replacement: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.search.active and self.replacement is not None

    def start(self, replacement: str):
        self.replacement = replacement

    def cancel(self):
        self.replacement = None

    def _require_pattern(self):
        if not self.active:
            raise CommandDeclined(EditorConstants.NO_ACTIVE_SEARCH)
        if not self.search.pattern:
            raise CommandDeclined("No search pattern")

    def replace_current(self) -> Optional[Position]:
        """Replace the current match and move on to the next one.

        Returns:
            The new current match, or None if no match is left
        """
        self._require_pattern()
        match = self.search.current_match()
        if match is None:
            return None
        end = self.search.match_end(match)
        editor = self.editor
        if editor.buffer.read(match, end) == self.replacement:
            after = end
        else:
            with editor.undo.unit(editor):
                after = editor.replace_range(match, end, self.replacement)
                editor.cursor.move_to(after)
        return self.search.seek(after)

    def skip(self) -> Optional[Position]:
        """Leave the current match alone and go to the next one."""
        self._require_pattern()
        return self.search.next()

    def replace_all(self) -> int:
        """Replace every match in one undo unit.

        Matches are collected once before editing starts, so a destination
        that contains the pattern is never matched again in the same pass.

        Returns:
            Number of matches replaced
        """
        self._require_pattern()
        matches = self.search.matches
        if not matches:
            return 0
        editor = self.editor
        length = len(self.search.pattern)
        old_end: Optional[Position] = None
        new_end: Optional[Position] = None
        with editor.undo.unit(editor):
            for match in matches:
                start = _translate(match, old_end, new_end)
                end = Position(start.line, start.column + length)
                if editor.buffer.read(start, end) == self.replacement:
                    new_end = end
                else:
                    new_end = editor.replace_range(start, end, self.replacement)
                old_end = Position(match.line, match.column + length)
            editor.cursor.move_to(new_end)
        self.search.seek(new_end)
        logger.debug(f"replaced {len(matches)} occurrences of {self.search.pattern!r}")
        return len(matches)

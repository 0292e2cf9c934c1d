"""Incremental substring search."""

import logging
from bisect import bisect_right
from enum import Enum
from typing import Optional

from .constants import EditorConstants
from .errors import CommandDeclined
from .model import Position, TextBuffer

logger = logging.getLogger(__name__)


class SearchMode(Enum):
    IDLE = "idle"
    ACTIVE = "active"


def is_pattern_char(char: str) -> bool:
    """Whether a typed character may become part of a search pattern."""
    return len(char) == 1 and (char.isprintable() or char == "\t")


class SearchEngine:
    """Idle/Active state machine over a TextBuffer.

    The match list holds the start of every non-overlapping occurrence of
    the pattern, found by one left-to-right scan of the document with
    lines joined by CRLF. Buffer edits only mark the list stale; it is
    rebuilt the next time it is read.
    """

    def __init__(self, buffer: TextBuffer):
        self.buffer = buffer
        self.mode = SearchMode.IDLE
        self.pattern = ""
        self.origin = Position()
        self.wrapped = False
        self.stale = False
        self._matches: list[Position] = []
        self._index: Optional[int] = None
        buffer.add_listener(self.mark_stale)

    @property
    def active(self) -> bool:
        return self.mode is SearchMode.ACTIVE

    def _require_active(self):
        if not self.active:
            raise CommandDeclined(EditorConstants.NO_ACTIVE_SEARCH)

    # --- session ---
    def start_search(self, origin: Position = Position()):
        self.mode = SearchMode.ACTIVE
        self.pattern = ""
        self.origin = origin
        self.wrapped = False
        self.stale = False
        self._matches = []
        self._index = None

    def cancel(self):
        self.mode = SearchMode.IDLE
        self.pattern = ""
        self.wrapped = False
        self.stale = False
        self._matches = []
        self._index = None

    def mark_stale(self):
        if self.active:
            self.stale = True

    # --- pattern editing ---
    def append_char(self, char: str):
        self._require_active()
        if not is_pattern_char(char):
            raise CommandDeclined(f"Cannot search for {char!r}")
        self.set_pattern(self.pattern + char)

    def backspace(self):
        self._require_active()
        if self.pattern:
            self.set_pattern(self.pattern[:-1])

    def set_pattern(self, pattern: str):
        self._require_active()
        self.pattern = pattern
        self._matches = self._scan()
        self.stale = False
        self.seek(self.origin)
        logger.debug(f"pattern {pattern!r}: {len(self._matches)} matches")

    # --- matches ---
    def _scan(self) -> list[Position]:
        if not self.pattern:
            return []
        lines = self.buffer.lines
        separator = EditorConstants.LINE_TERMINATOR
        starts = []
        offset = 0
        for line in lines:
            starts.append(offset)
            offset += len(line) + len(separator)
        text = separator.join(lines)

        matches = []
        found = text.find(self.pattern)
        while found != -1:
            line = bisect_right(starts, found) - 1
            column = min(found - starts[line], len(lines[line]))
            matches.append(Position(line, column))
            found = text.find(self.pattern, found + len(self.pattern))
        return matches

    def refresh(self):
        """Rebuild a stale match list, staying near the current match."""
        if not self.stale:
            return
        anchor = self._current() or self.origin
        wrapped = self.wrapped
        self._matches = self._scan()
        self.stale = False
        self.seek(anchor)
        self.wrapped = wrapped

    @property
    def matches(self) -> list[Position]:
        self.refresh()
        return list(self._matches)

    def _current(self) -> Optional[Position]:
        if self._index is None or not self._matches:
            return None
        return self._matches[self._index]

    def current_match(self) -> Optional[Position]:
        self.refresh()
        return self._current()

    @property
    def current_index(self) -> Optional[int]:
        self.refresh()
        return self._index if self._matches else None

    def match_end(self, start: Position) -> Position:
        return Position(start.line, start.column + len(self.pattern))

    def highlights(self) -> list[tuple[Position, Position]]:
        return [(m, self.match_end(m)) for m in self.matches]

    def seek(self, pos: Position) -> Optional[Position]:
        """Make the first match at or after pos current, wrapping to the top."""
        self.refresh()
        if not self._matches:
            self._index = None
            self.wrapped = False
            return None
        for index, match in enumerate(self._matches):
            if match >= pos:
                self._index = index
                self.wrapped = False
                return match
        self._index = 0
        self.wrapped = True
        return self._matches[0]

    def next(self) -> Optional[Position]:
        self.refresh()
        if not self._matches:
            self.wrapped = False
            return None
        step = 0 if self._index is None else self._index + 1
        self.wrapped = step >= len(self._matches)
        self._index = step % len(self._matches)
        return self._matches[self._index]

    def previous(self) -> Optional[Position]:
        self.refresh()
        if not self._matches:
            self.wrapped = False
            return None
        step = len(self._matches) - 1 if self._index is None else self._index - 1
        self.wrapped = step < 0
        self._index = step % len(self._matches)
        return self._matches[self._index]

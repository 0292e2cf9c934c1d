"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import select
import sys
from typing import Optional

import blessed

from .constants import EditorConstants
from .view import Frame, Segment, Style

logger = logging.getLogger(__name__)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        # Last frame drawn, for minimal updates
        self._last_rows: Optional[list[str]] = None
        self._last_status: Optional[str] = None

    def setup(self):
        """Enter fullscreen mode and start reading keys."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._curtsies_input is None:
            try:
                from curtsies import Input
                self._curtsies_input = Input(keynames='curtsies')
                self._curtsies_input.__enter__()
            except Exception as e:
                # No usable tty (CI, pipes); the editor runs without input
                logger.warning(f"Could not start curtsies input: {e}")
                self._curtsies_input = None

    def cleanup(self):
        """Exit fullscreen mode and restore the terminal."""
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False
        if self._curtsies_input is not None:
            try:
                self._curtsies_input.__exit__(None, None, None)
            except Exception as e:
                logger.warning(f"Could not leave raw mode cleanly: {e}")
            finally:
                self._curtsies_input = None

    def invalidate_frame(self) -> None:
        """Forget the last frame so the next update repaints everything."""
        self._last_rows = None
        self._last_status = None

    def _style(self, style: Style) -> str:
        if style is Style.SELECTED:
            return self.term.reverse
        if style is Style.MATCH:
            return self.term.underline
        if style is Style.CURRENT_MATCH:
            return self.term.reverse + self.term.bold
        return ''

    def compose_row(self, segments: list[Segment]) -> str:
        """Render styled segments as one string of terminal output."""
        out = []
        for text, style in segments:
            attrs = self._style(style)
            if attrs:
                out.append(attrs + text + self.term.normal)
            else:
                out.append(text)
        return ''.join(out)

    def update_frame(self, frame: Frame, status: str, prompt_cursor: Optional[int] = None) -> None:
        """Diff against the last frame and write only the changed rows.

        Args:
            frame: Rows and cursor cell from the view
            status: Text of the bottom line
            prompt_cursor: Column on the status line to put the cursor at
                while a prompt is open
        """
        rows = [self.compose_row(segments) for segments in frame.rows]
        if self._last_rows is None or len(self._last_rows) != len(rows):
            print(self.term.home + self.term.clear, end='')
            self._last_rows = [''] * len(rows)
            self._last_status = None

        for y, row in enumerate(rows):
            if row != self._last_rows[y]:
                print(self.term.move(y, 0) + row, end='')
                self._last_rows[y] = row

        status_text = status[:self.term.width].ljust(self.term.width)
        if status_text != self._last_status:
            print(self.term.move(self.term.height - 1, 0) + self.term.reverse
                  + status_text + self.term.normal, end='')
            self._last_status = status_text

        if prompt_cursor is not None:
            x = min(prompt_cursor, self.term.width - 1)
            print(self.term.move(self.term.height - 1, x) + self.term.normal_cursor, end='', flush=True)
        else:
            print(self.term.move(frame.cursor_y, frame.cursor_x) + self.term.normal_cursor, end='', flush=True)

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the middle of the screen."""
        print(self.term.home + self.term.clear, end='')
        width = self.term.width
        center_y = self.term.height // 2
        for offset, message in enumerate((message1, message2)):
            if message:
                x = max(0, (width - len(message)) // 2)
                print(self.term.move(center_y - 1 + offset, x) + message[:width], end='')
        help_text = "^Q Quit"
        print(self.term.move(self.term.height - 1, max(0, (width - len(help_text)) // 2))
              + help_text, end='', flush=True)
        self.invalidate_frame()

    def get_key(self, timeout=None):
        """Get a single keypress as a curtsies key name.

        Args:
            timeout: Seconds to wait (None blocks, 0 polls)

        Returns:
            The key name string, or None on timeout or without input
        """
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            ready, _, _ = select.select([sys.stdin], [], [], float(timeout))
            if not ready:
                return None
        return str(next(self._curtsies_input))

    @property
    def width(self):
        return self.term.width

    @property
    def height(self):
        """Rows available for text (the last row is the status line)."""
        return self.term.height - 1

    def too_small(self) -> bool:
        return (self.term.width < EditorConstants.MIN_TERMINAL_WIDTH
                or self.term.height < EditorConstants.MIN_TERMINAL_HEIGHT)

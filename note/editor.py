"""Main editor loop: keys in, commands to the controller, frames out."""

import errno
import logging
import os
import select
import signal
import sys
import termios
from enum import Enum
from typing import Optional

from . import commands
from .constants import EditorConstants
from .controller import CommandResult, EditorController, Snapshot
from .fileio import read_document, write_document
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .keymap import EditorAction, KeyMap
from .settings_persistence import SettingsPersistence
from .terminal import TerminalInterface
from .view import TerminalTextView

logger = logging.getLogger(__name__)


class PromptMode(Enum):
    FIND = "find"
    REPLACE_PATTERN = "replace_pattern"
    REPLACE_WITH = "replace_with"
    REPLACE_CONFIRM = "replace_confirm"
    GO_TO_LINE = "go_to_line"
    SAVE_FILENAME = "save_filename"
    SAVE_FILENAME_QUIT = "save_filename_quit"
    QUIT_CONFIRM = "quit_confirm"


# Prompts that read a line of text into prompt_input
_TEXT_PROMPTS = {
    PromptMode.REPLACE_PATTERN: "Replace: ",
    PromptMode.REPLACE_WITH: "With: ",
    PromptMode.GO_TO_LINE: "Go to line: ",
    PromptMode.SAVE_FILENAME: "File to save in: ",
    PromptMode.SAVE_FILENAME_QUIT: "File to save in: ",
}


class Editor:
    """The note application: owns the terminal, the view and one controller."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[SettingsPersistence] = None,
                 permissive: bool = False):
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.keymap = KeyMap()
        self.view = TerminalTextView()
        self.controller = EditorController()
        self.settings = settings or SettingsPersistence()
        self.permissive = permissive
        self.running = False
        self.error_mode = False  # True when the terminal is too small
        self.filename: Optional[str] = None
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[PromptMode] = None
        self.prompt_input = ""
        self._replace_pattern = ""
        self._ctrl_c_pressed = False
        self._resize_pipe_r: Optional[int] = None
        self._resize_pipe_w: Optional[int] = None

    @property
    def modified(self) -> bool:
        return self.controller.modified

    # --- signals ---
    def _handle_resize(self, signum, frame):
        del signum, frame  # Unused
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _handle_sigint(self, signum, frame):
        """Ctrl-C arrives as SIGINT; it is the copy key."""
        del signum, frame  # Unused
        self._ctrl_c_pressed = True
        os.write(self._resize_pipe_w, EditorConstants.SIGINT_PIPE_MARKER)

    # --- main loop ---
    def run(self):
        """Run the editor until the user quits."""
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self.terminal.setup()
        self.running = True
        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_int_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        old_settings = None
        try:
            with self.terminal.term.cbreak():
                try:
                    old_settings = termios.tcgetattr(sys.stdin)
                    new_settings = list(old_settings)
                    # Let Ctrl-S and Ctrl-Q through instead of flow control
                    new_settings[0] &= ~(termios.IXON | termios.IXOFF)
                    # Let Ctrl-V through instead of literal-next
                    new_settings[3] &= ~termios.IEXTEN
                    termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
                except (termios.error, AttributeError, OSError) as e:
                    logger.debug(f"Could not adjust termios flags: {e}")
                    old_settings = None

                need_draw = True
                while self.running:
                    if need_draw:
                        self.draw()
                        need_draw = False
                    ready, _, _ = select.select([0, self._resize_pipe_r], [], [])
                    if self._resize_pipe_r in ready:
                        os.read(self._resize_pipe_r, 1024)
                        if self._ctrl_c_pressed:
                            self._ctrl_c_pressed = False
                            self.handle_key_event(KeyEvent(KeyType.CTRL, 'c', '\x03', is_ctrl=True))
                        else:
                            self.terminal.invalidate_frame()
                        need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            self.handle_key_event(key_event)
                            need_draw = True

                if old_settings:
                    try:
                        termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
                    except (termios.error, OSError) as e:
                        logger.debug(f"Could not restore termios flags: {e}")
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGINT, original_int_handler)
            os.close(self._resize_pipe_r)
            os.close(self._resize_pipe_w)
            self.terminal.cleanup()

    # --- drawing ---
    def draw(self):
        """Draw the current state, or an error box if the terminal is too small."""
        if self.terminal.too_small():
            self.error_mode = True
            self.terminal.draw_error_message(
                EditorConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
                    EditorConstants.MIN_TERMINAL_WIDTH, EditorConstants.MIN_TERMINAL_HEIGHT),
                EditorConstants.CURRENT_SIZE_MESSAGE.format(self.terminal.width, self.terminal.height + 1),
            )
            return
        self.error_mode = False
        snapshot = self.layout()
        status, prompt_cursor = self.status_line(snapshot)
        self.terminal.update_frame(self.view.render(snapshot), status, prompt_cursor)

    def layout(self) -> Snapshot:
        """Scroll the view to the cursor and take a snapshot of what is visible."""
        self.view.resize(self.terminal.height, self.terminal.width)
        cursor = self.controller.cursor.position
        self.view.scroll_to(cursor, self.controller.buffer.line(cursor.line))
        self.controller.viewport = self.view.viewport()
        return self.controller.snapshot(*self.controller.viewport)

    def status_line(self, snapshot: Snapshot) -> tuple[str, Optional[int]]:
        """Text of the bottom line, and the cursor column if a prompt is open."""
        mode = self.prompt_mode
        if mode is PromptMode.FIND:
            text = f" Find: {snapshot.pattern}"
            if self.status_message:
                return f"{text}  [{self.status_message}]", len(text)
            return text, len(text)
        if mode in _TEXT_PROMPTS:
            text = f" {_TEXT_PROMPTS[mode]}{self.prompt_input}"
            return text, len(text)
        if mode is PromptMode.REPLACE_CONFIRM:
            text = f" {EditorConstants.REPLACE_CONFIRM_PROMPT}"
            return text, len(text)
        if mode is PromptMode.QUIT_CONFIRM:
            text = f" {EditorConstants.QUIT_CONFIRM_PROMPT}"
            return text, len(text)
        if self.status_message:
            return f" {self.status_message}", None
        name = self.filename or EditorConstants.NO_NAME
        flag = " *" if snapshot.modified else ""
        position = f"{snapshot.cursor}/{snapshot.line_count}"
        return f" {name}{flag}  {position}  {EditorConstants.MENU_MESSAGE}", None

    # --- input ---
    def dispatch(self, command: commands.EditorCommand) -> CommandResult:
        result = self.controller.execute(command)
        if result.status:
            self.status_message = result.status
        return result

    def handle_key_event(self, key_event: KeyEvent):
        """Route one key to the open prompt or to the key map."""
        if self.prompt_mode is None:
            self.status_message = None
        if self.error_mode:
            if key_event.is_ctrl_key('q'):
                self._quit()
            return
        if self.prompt_mode is PromptMode.FIND:
            if self._handle_find_key(key_event):
                return
        elif self.prompt_mode is PromptMode.REPLACE_CONFIRM:
            self._handle_replace_confirm(key_event)
            return
        elif self.prompt_mode is PromptMode.QUIT_CONFIRM:
            self._handle_quit_confirm(key_event)
            return
        elif self.prompt_mode is not None:
            self._handle_text_prompt(key_event)
            return

        binding = self.keymap.command_for(key_event, rows=max(1, self.view.num_rows - 1))
        if binding is None:
            return
        if isinstance(binding, EditorAction):
            self._handle_action(binding)
        else:
            self.dispatch(binding)

    def _handle_action(self, action: EditorAction):
        if action is EditorAction.FIND:
            if self.dispatch(commands.StartFind()).accepted:
                self.prompt_mode = PromptMode.FIND
        elif action is EditorAction.REPLACE:
            self._open_prompt(PromptMode.REPLACE_PATTERN)
        elif action is EditorAction.GO_TO_LINE:
            self._open_prompt(PromptMode.GO_TO_LINE)
        elif action is EditorAction.SAVE:
            self._handle_save()
        elif action is EditorAction.QUIT:
            self._quit()

    def _open_prompt(self, mode: PromptMode, initial: str = ""):
        self.prompt_mode = mode
        self.prompt_input = initial

    def _close_prompt(self):
        self.prompt_mode = None
        self.prompt_input = ""

    def _handle_find_key(self, key_event: KeyEvent) -> bool:
        """Handle a key during incremental search.

        Returns:
            False if the key ended the search and still needs normal handling
        """
        self.status_message = None
        command = self.keymap.find_command_for(key_event)
        if command is None:
            self.dispatch(commands.CancelFind())
            self._close_prompt()
            return False
        self.dispatch(command)
        if not self.controller.search.active:
            self._close_prompt()
        return True

    def _handle_text_prompt(self, key_event: KeyEvent):
        if key_event.is_special('escape') or key_event.is_ctrl_key('g'):
            self._close_prompt()
        elif key_event.is_special('enter'):
            mode, text = self.prompt_mode, self.prompt_input
            self._close_prompt()
            self._submit_prompt(mode, text)
        elif key_event.is_special('backspace') or key_event.is_ctrl_key('h'):
            self.prompt_input = self.prompt_input[:-1]
        elif key_event.key_type is KeyType.REGULAR and key_event.value.isprintable():
            self.prompt_input += key_event.value

    def _submit_prompt(self, mode: PromptMode, text: str):
        if mode is PromptMode.REPLACE_PATTERN:
            if text:
                self._replace_pattern = text
                self._open_prompt(PromptMode.REPLACE_WITH)
        elif mode is PromptMode.REPLACE_WITH:
            result = self.dispatch(commands.StartReplace(self._replace_pattern, text))
            if result.accepted and result.snapshot.current_match is not None:
                self.prompt_mode = PromptMode.REPLACE_CONFIRM
            else:
                self.dispatch(commands.CancelFind())
        elif mode is PromptMode.GO_TO_LINE:
            try:
                line = int(text)
            except ValueError:
                self.status_message = f"Not a line number: {text}"
                return
            self.dispatch(commands.GoToLine(line))
        elif mode in (PromptMode.SAVE_FILENAME, PromptMode.SAVE_FILENAME_QUIT):
            if text and self.save_file(text) and mode is PromptMode.SAVE_FILENAME_QUIT:
                self.running = False

    def _handle_replace_confirm(self, key_event: KeyEvent):
        if key_event.key_type is not KeyType.REGULAR:
            if key_event.is_special('escape') or key_event.is_ctrl_key('g'):
                self.dispatch(commands.CancelFind())
                self._close_prompt()
            return
        answer = key_event.value.lower()
        if answer == 'y':
            result = self.dispatch(commands.ReplaceOne())
        elif answer == 'n':
            result = self.dispatch(commands.ReplaceSkip())
        elif answer == 'a':
            result = self.dispatch(commands.ReplaceAll())
            self.dispatch(commands.CancelFind())
            self._close_prompt()
            self.status_message = result.status
            return
        else:
            return
        if result.snapshot.current_match is None:
            self.dispatch(commands.CancelFind())
            self._close_prompt()

    def _handle_quit_confirm(self, key_event: KeyEvent):
        if key_event.key_type is not KeyType.REGULAR:
            if key_event.is_special('escape') or key_event.is_ctrl_key('g'):
                self._close_prompt()
            return
        answer = key_event.value.lower()
        if answer == 'y':
            self._close_prompt()
            if self.filename:
                if self.save_file(self.filename):
                    self.running = False
            else:
                self._open_prompt(PromptMode.SAVE_FILENAME_QUIT)
        elif answer == 'n':
            self._close_prompt()
            self.running = False

    def _quit(self):
        if self.modified:
            self._open_prompt(PromptMode.QUIT_CONFIRM)
        else:
            self.running = False

    # --- files ---
    def load_file(self, filename: str):
        """Load a file, or start an empty document if it does not exist.

        Raises:
            EncodingError: If the file is not CRLF/UTF-8 and the editor
                is not permissive
            OSError: If the file exists but cannot be read
        """
        self.filename = filename
        try:
            data = read_document(filename)
        except FileNotFoundError:
            logger.info(f"{filename} does not exist; starting a new document")
            self.status_message = f"New file: {filename}"
            return
        self.controller.load(data, strict=not self.permissive)
        position = self.settings.load_cursor(filename)
        if position is not None:
            self.controller.cursor.move_to(position)

    def save_file(self, filename: str) -> bool:
        """Save the document atomically; report failures on the status line."""
        try:
            write_document(filename, self.controller.serialize())
        except PermissionError:
            self.status_message = f"Error: Permission denied saving {filename}"
            return False
        except OSError as e:
            logger.error(f"Saving {filename} failed: {e}")
            if e.errno == errno.ENOSPC:
                self.status_message = "Error: No space left on device"
            else:
                self.status_message = f"Error: Cannot save to {filename}"
            return False
        self.filename = filename
        self.controller.mark_saved()
        self.settings.save_cursor(filename, self.controller.cursor.position)
        self.status_message = f"Saved to {filename}"
        return True

    def _handle_save(self):
        if self.filename:
            self.save_file(self.filename)
        else:
            self._open_prompt(PromptMode.SAVE_FILENAME)

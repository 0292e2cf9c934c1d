"""Constants and configuration for the note editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Document format
    LINE_TERMINATOR = "\r\n"  # The only line ending note reads or writes
    ENCODING = "utf-8"

    # Display
    TAB_STOP = 8  # Tabs expand to the next multiple of this column
    MIN_TERMINAL_WIDTH = 20  # Below this the editor shows an error box
    MIN_TERMINAL_HEIGHT = 3

    # History
    UNDO_LIMIT = 1000  # Undo units kept before the oldest is dropped

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    SIGINT_PIPE_MARKER = b'C'  # Byte written to pipe when Ctrl-C arrives as SIGINT

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
    CURRENT_SIZE_MESSAGE = "Current size: {}x{}."
    MENU_MESSAGE = "^Q Quit  ^S Save  ^F Find  ^R Replace  ^G Go to line"
    NOTHING_TO_UNDO = "Nothing to undo"
    NOTHING_TO_REDO = "Nothing to redo"
    NO_SELECTION = "No selection"
    CLIPBOARD_EMPTY = "Clipboard empty"
    NO_ACTIVE_SEARCH = "No active search"
    NOT_FOUND = "Not found"
    SEARCH_WRAPPED = "Search wrapped"
    LINE_OUT_OF_RANGE = "Line out of range"
    NO_NAME = "[No Name]"
    QUIT_CONFIRM_PROMPT = "Save changes? (y, n, Esc) "
    REPLACE_CONFIRM_PROMPT = "Replace? (y, n, a, Esc) "

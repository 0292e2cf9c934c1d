"""Fixed mapping from key events to editor commands."""

from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Union

from . import commands
from .cursor import Direction
from .keyboard import KeyEvent, KeyType


class EditorAction(Enum):
    """Actions handled by the editor shell rather than the engine."""
    SAVE = "save"
    QUIT = "quit"
    FIND = "find"
    REPLACE = "replace"
    GO_TO_LINE = "go_to_line"


Binding = Union[commands.EditorCommand, EditorAction]
# Factories receive the number of text rows on screen, for paging
Factory = Callable[[int], Binding]

_ARROWS = {
    'left': Direction.LEFT,
    'right': Direction.RIGHT,
    'up': Direction.UP,
    'down': Direction.DOWN,
}


class KeyMap:
    """Maps key events to commands for the normal and find modes.

    Bindings are fixed; there is no user configuration.
    """

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], Factory] = {}
        self._find_commands: Dict[Tuple[KeyType, str], Factory] = {}
        self._setup_default_commands()
        self._setup_find_commands()

    def _setup_default_commands(self):
        for name, direction in _ARROWS.items():
            self.register((KeyType.SPECIAL, name), lambda rows, d=direction: commands.MoveCursor(d))
            self.register((KeyType.SHIFT_SPECIAL, name),
                          lambda rows, d=direction: commands.MoveCursor(d, select=True))
            # Alt+arrow extends a rectangular selection
            self.register((KeyType.ALT, name),
                          lambda rows, d=direction: commands.MoveCursor(d, select=True, block=True))
        self.register((KeyType.CTRL, 'p'), lambda rows: commands.MoveCursor(Direction.UP))
        self.register((KeyType.CTRL, 'n'), lambda rows: commands.MoveCursor(Direction.DOWN))

        self.register((KeyType.SPECIAL, 'home'), lambda rows: commands.MoveToLineStart())
        self.register((KeyType.CTRL, 'a'), lambda rows: commands.MoveToLineStart())
        self.register((KeyType.SHIFT_SPECIAL, 'home'), lambda rows: commands.MoveToLineStart(select=True))
        self.register((KeyType.SPECIAL, 'end'), lambda rows: commands.MoveToLineEnd())
        self.register((KeyType.CTRL, 'e'), lambda rows: commands.MoveToLineEnd())
        self.register((KeyType.SHIFT_SPECIAL, 'end'), lambda rows: commands.MoveToLineEnd(select=True))

        self.register((KeyType.SPECIAL, 'page_up'), lambda rows: commands.PageUp(rows))
        self.register((KeyType.SPECIAL, 'page_down'), lambda rows: commands.PageDown(rows))
        self.register((KeyType.SHIFT_SPECIAL, 'page_up'), lambda rows: commands.PageUp(rows, select=True))
        self.register((KeyType.SHIFT_SPECIAL, 'page_down'), lambda rows: commands.PageDown(rows, select=True))

        # Editing
        self.register((KeyType.SPECIAL, 'enter'), lambda rows: commands.InsertNewline())
        self.register((KeyType.SPECIAL, 'backspace'), lambda rows: commands.DeleteBackward())
        self.register((KeyType.CTRL, 'h'), lambda rows: commands.DeleteBackward())
        self.register((KeyType.SPECIAL, 'delete'), lambda rows: commands.DeleteForward())
        self.register((KeyType.CTRL, 'd'), lambda rows: commands.DeleteForward())
        self.register((KeyType.CTRL, 'k'), lambda rows: commands.CutToLineEnd())
        self.register((KeyType.CTRL, 'x'), lambda rows: commands.CutSelection())
        self.register((KeyType.CTRL, 'c'), lambda rows: commands.CopySelection())
        self.register((KeyType.CTRL, 'v'), lambda rows: commands.Paste())
        self.register((KeyType.CTRL, 'z'), lambda rows: commands.Undo())
        self.register((KeyType.CTRL, 'y'), lambda rows: commands.Redo())

        # Shell actions
        self.register((KeyType.CTRL, 'f'), lambda rows: EditorAction.FIND)
        self.register((KeyType.CTRL, 'r'), lambda rows: EditorAction.REPLACE)
        self.register((KeyType.CTRL, 'g'), lambda rows: EditorAction.GO_TO_LINE)
        self.register((KeyType.CTRL, 's'), lambda rows: EditorAction.SAVE)
        self.register((KeyType.CTRL, 'q'), lambda rows: EditorAction.QUIT)

    def _setup_find_commands(self):
        find = self._find_commands
        find[(KeyType.SPECIAL, 'backspace')] = lambda rows: commands.FindBackspace()
        find[(KeyType.CTRL, 'h')] = lambda rows: commands.FindBackspace()
        for key in ((KeyType.SPECIAL, 'down'), (KeyType.CTRL, 'n'),
                    (KeyType.CTRL, 'f'), (KeyType.SPECIAL, 'f3')):
            find[key] = lambda rows: commands.FindNext()
        for key in ((KeyType.SPECIAL, 'up'), (KeyType.CTRL, 'p'),
                    (KeyType.SHIFT_SPECIAL, 'f3')):
            find[key] = lambda rows: commands.FindPrevious()
        # Enter keeps the cursor on the match; Escape does the same
        find[(KeyType.SPECIAL, 'enter')] = lambda rows: commands.CancelFind()
        find[(KeyType.SPECIAL, 'escape')] = lambda rows: commands.CancelFind()
        find[(KeyType.CTRL, 'g')] = lambda rows: commands.CancelFind()

    def register(self, key: Tuple[KeyType, str], factory: Factory):
        """Register a command factory for a key combination."""
        self._commands[key] = factory

    def command_for(self, key_event: KeyEvent, rows: int = 1) -> Optional[Binding]:
        """Command for a key in normal editing mode, or None if unbound."""
        factory = self._commands.get((key_event.key_type, key_event.value))
        if factory is not None:
            return factory(rows)
        if key_event.key_type is KeyType.REGULAR and len(key_event.value) == 1:
            return commands.InsertChar(key_event.value)
        return None

    def find_command_for(self, key_event: KeyEvent, rows: int = 1) -> Optional[commands.EditorCommand]:
        """Command for a key while an incremental search is running.

        Keys with no find binding end the search; the caller then handles
        them in normal mode.
        """
        factory = self._find_commands.get((key_event.key_type, key_event.value))
        if factory is not None:
            return factory(rows)
        if key_event.key_type is KeyType.REGULAR and len(key_event.value) == 1:
            return commands.FindAppendChar(key_event.value)
        return None

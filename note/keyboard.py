"""Decoding of curtsies key names into key events."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + arrow keys, etc.


@dataclass
class KeyEvent:
    """A decoded keypress."""
    key_type: KeyType
    value: str  # Base key: 'a', 'left', 'page_up', 'enter'
    raw: str  # The string curtsies produced
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False

    def is_special(self, name: str) -> bool:
        return self.key_type is KeyType.SPECIAL and self.value == name

    def is_ctrl_key(self, letter: str) -> bool:
        return self.key_type is KeyType.CTRL and self.value == letter


SPECIAL_KEYS = frozenset({
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
    'delete', 'page_up', 'page_down', 'insert', 'f3',
})

_ALIASES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'page_up': 'page_up',
    'page_down': 'page_down',
    'esc': 'escape',
    'return': 'enter',
    'del': 'delete',
}


class KeyboardHandler:
    """Turns keys read from a TerminalInterface into KeyEvents."""

    def __init__(self, terminal_interface):
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key name such as '<Ctrl-f>' or '<Shift-LEFT>'.

        Plain characters and single ASCII control bytes are accepted too.
        """
        key_str = str(key)
        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_name(key_str)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (10, 13):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            if o == 9:
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if 1 <= o <= 26:
                return KeyEvent(KeyType.CTRL, chr(ord('a') + o - 1), key_str, is_ctrl=True)
            if o == 27:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)
            if o == 127:
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)

        return KeyEvent(KeyType.REGULAR, key_str, key_str)

    def _parse_name(self, key_str: str) -> KeyEvent:
        lower = key_str[1:-1].lower().replace('+', '-')
        # '<Ctrl-->' style names end in the separator itself
        if lower.endswith('--'):
            parts = lower[:-2].split('-') + ['-']
        else:
            parts = lower.split('-')
        base = _ALIASES.get(parts[-1], parts[-1])
        mods = set(parts[:-1])
        if mods & {'meta', 'esc'}:
            mods.add('alt')

        if not mods:
            if base in ('space', 'spacebar', 'spc'):
                return KeyEvent(KeyType.REGULAR, ' ', key_str)
            if base == 'tab':
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
        if 'ctrl' in mods and len(base) == 1:
            if base in ('j', 'm'):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            return KeyEvent(KeyType.CTRL, base, key_str, is_ctrl=True,
                            is_alt='alt' in mods, is_shift='shift' in mods)
        if 'alt' in mods and (base in SPECIAL_KEYS or len(base) == 1):
            return KeyEvent(KeyType.ALT, base, key_str, is_alt=True,
                            is_shift='shift' in mods)
        if 'shift' in mods and base in SPECIAL_KEYS:
            return KeyEvent(KeyType.SHIFT_SPECIAL, base, key_str, is_shift=True)
        return KeyEvent(KeyType.SPECIAL, base, key_str)

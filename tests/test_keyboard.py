"""Test keyboard input handling."""

from unittest.mock import Mock

import pytest

from note.keyboard import KeyboardHandler, KeyEvent, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []

    def get_key(self, timeout=None):
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key):
        self._key_queue.append(key)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


def test_regular_character(handler):
    event = handler.parse_key("a")
    assert event == KeyEvent(KeyType.REGULAR, "a", "a")


def test_non_ascii_character(handler):
    assert handler.parse_key("é").value == "é"
    assert handler.parse_key("é").key_type is KeyType.REGULAR


@pytest.mark.parametrize("key, name", [
    ("<LEFT>", "left"),
    ("<RIGHT>", "right"),
    ("<UP>", "up"),
    ("<DOWN>", "down"),
    ("<HOME>", "home"),
    ("<END>", "end"),
    ("<PAGEUP>", "page_up"),
    ("<PAGEDOWN>", "page_down"),
    ("<DELETE>", "delete"),
    ("<BACKSPACE>", "backspace"),
    ("<ESC>", "escape"),
    ("<F3>", "f3"),
])
def test_special_keys(handler, key, name):
    event = handler.parse_key(key)
    assert event.key_type is KeyType.SPECIAL
    assert event.value == name
    assert event.raw == key


@pytest.mark.parametrize("key, letter", [
    ("<Ctrl-f>", "f"),
    ("<Ctrl-Q>", "q"),
    ("\x03", "c"),
    ("\x1a", "z"),
])
def test_ctrl_keys(handler, key, letter):
    event = handler.parse_key(key)
    assert event.is_ctrl_key(letter)
    assert event.is_ctrl


@pytest.mark.parametrize("key", ["\r", "\n", "<Ctrl-j>", "<Ctrl-M>"])
def test_enter_variants(handler, key):
    assert handler.parse_key(key).is_special("enter")


def test_single_byte_specials(handler):
    assert handler.parse_key("\x7f").is_special("backspace")
    assert handler.parse_key("\x1b").is_special("escape")


@pytest.mark.parametrize("key", ["\t", "<TAB>"])
def test_tab_is_a_character(handler, key):
    event = handler.parse_key(key)
    assert event.key_type is KeyType.REGULAR
    assert event.value == "\t"


def test_space_name(handler):
    assert handler.parse_key("<SPACE>").value == " "


def test_shift_arrow(handler):
    event = handler.parse_key("<Shift-LEFT>")
    assert event.key_type is KeyType.SHIFT_SPECIAL
    assert event.value == "left"
    assert event.is_shift


def test_shift_f3(handler):
    event = handler.parse_key("<Shift-F3>")
    assert event.key_type is KeyType.SHIFT_SPECIAL
    assert event.value == "f3"


@pytest.mark.parametrize("key", ["<Esc+LEFT>", "<Meta-LEFT>", "<Alt-LEFT>"])
def test_alt_arrow(handler, key):
    event = handler.parse_key(key)
    assert event.key_type is KeyType.ALT
    assert event.value == "left"
    assert event.is_alt


def test_alt_letter(handler):
    event = handler.parse_key("<Esc+x>")
    assert event.key_type is KeyType.ALT
    assert event.value == "x"


def test_ctrl_minus(handler):
    event = handler.parse_key("<Ctrl-->")
    assert event.key_type is KeyType.CTRL
    assert event.value == "-"


def test_get_key_event_reads_from_terminal():
    terminal = MockTerminal()
    terminal.add_key("<Ctrl-s>")
    handler = KeyboardHandler(terminal)
    assert handler.get_key_event(0.1).is_ctrl_key("s")
    assert handler.get_key_event(0.1) is None


def test_get_key_event_accepts_key_objects():
    terminal = MockTerminal()
    key = Mock()
    key.__str__ = Mock(return_value="<UP>")
    terminal.add_key(key)
    event = KeyboardHandler(terminal).get_key_event()
    assert event.is_special("up")

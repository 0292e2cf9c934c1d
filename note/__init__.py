"""note - a minimal terminal editor for CRLF/UTF-8 text files."""

from .controller import CommandResult, EditorController, Snapshot
from .cursor import Direction
from .errors import BufferBoundsError, CommandDeclined, EncodingError, NoteError
from .model import Position, TextBuffer

__all__ = [
    'BufferBoundsError',
    'CommandDeclined',
    'CommandResult',
    'Direction',
    'EditorController',
    'EncodingError',
    'NoteError',
    'Position',
    'Snapshot',
    'TextBuffer',
]

"""Exceptions raised by the editing engine."""


class NoteError(Exception):
    """Base class for all editor errors."""


class BufferBoundsError(NoteError):
    """A position lies outside the buffer.

    Cursor and selection clamp their positions, so this signals a broken
    invariant rather than a user mistake.
    """


class CommandDeclined(NoteError):
    """A command could not be carried out; the document is unchanged.

    The message is shown to the user as the status line.
    """


class EncodingError(NoteError):
    """Input is not strict UTF-8 text with CRLF line endings."""

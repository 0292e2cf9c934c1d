"""Conversion between documents and their on-disk bytes.

The on-disk form is UTF-8 with every line terminated by CRLF, the last
line included. Anything else is rejected unless the caller asks for a
permissive load.
"""

import logging

from .constants import EditorConstants
from .errors import EncodingError
from .model import split_lines

logger = logging.getLogger(__name__)

CRLF = EditorConstants.LINE_TERMINATOR


def serialize_lines(lines: list[str]) -> bytes:
    """Encode lines as UTF-8, each followed by CRLF."""
    return "".join(line + CRLF for line in lines).encode(EditorConstants.ENCODING)


def parse_lines(data: bytes, strict: bool = True) -> list[str]:
    """Decode bytes into lines.

    Args:
        data: Raw file contents
        strict: When False, undecodable bytes become U+FFFD and any of
            CR, LF or CRLF ends a line.

    Returns:
        At least one line. A missing final CRLF is accepted.

    Raises:
        EncodingError: In strict mode, for invalid UTF-8 or a CR or LF
            that is not part of a CRLF pair.
    """
    if strict:
        try:
            text = data.decode(EditorConstants.ENCODING)
        except UnicodeDecodeError as e:
            raise EncodingError(f"Invalid UTF-8 at byte {e.start}") from e
        if not text:
            return [""]
        if text.endswith(CRLF):
            text = text[:-len(CRLF)]
        lines = text.split(CRLF)
        for index, line in enumerate(lines):
            if "\r" in line or "\n" in line:
                raise EncodingError(f"Bare CR or LF on line {index + 1}")
        return lines

    text = data.decode(EditorConstants.ENCODING, errors="replace")
    if not text:
        return [""]
    lines = split_lines(text)
    # A trailing terminator leaves an empty last element; drop it
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    if "\ufffd" in text or any(sep in text.replace(CRLF, "") for sep in ("\r", "\n")):
        logger.warning("Loaded malformed input as a degraded buffer")
    return lines

"""Internal cut/copy register."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ClipKind(Enum):
    RANGE = "range"  # Inline text from a selection or a partial line
    LINE = "line"    # Whole line(s); pasted above the cursor line
    BLOCK = "block"  # Rectangle of columns; pasted column-wise


@dataclass(frozen=True)
class Clip:
    text: str
    kind: ClipKind = ClipKind.RANGE

    @property
    def line_oriented(self) -> bool:
        return self.kind is ClipKind.LINE

    @property
    def rows(self) -> list[str]:
        return self.text.split("\n")


class ClipboardRegister:
    """Holds the most recent cut or copy.

    Only a single payload is kept. Text is stored as a string, which is
    immutable, so the register never aliases the buffer.
    """

    def __init__(self):
        self._clip: Optional[Clip] = None

    @staticmethod
    def _kind(line_oriented: bool, block: bool) -> ClipKind:
        if block:
            return ClipKind.BLOCK
        return ClipKind.LINE if line_oriented else ClipKind.RANGE

    def set_cut(self, text: str, line_oriented: bool = False, block: bool = False) -> None:
        self._clip = Clip(str(text), self._kind(line_oriented, block))

    def set_copy(self, text: str, line_oriented: bool = False, block: bool = False) -> None:
        self._clip = Clip(str(text), self._kind(line_oriented, block))

    def get(self) -> Optional[Clip]:
        return self._clip

    def clear(self) -> None:
        self._clip = None

"""Single unnamed register plus the text extraction used by yanks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .document import BufferDocument
from .state import Cursor
from .text import normalize_range


class RegisterShape(str, Enum):
    CHAR = "char"
    LINE = "line"
    BLOCK = "block"


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str = ""
    shape: RegisterShape = RegisterShape.CHAR

    @property
    def segments(self) -> list[str]:
        return self.text.split("\n")


class Register:
    """Holds the most recent yank or delete; every write replaces it."""

    def __init__(self) -> None:
        self._value = RegisterValue()

    def get(self) -> RegisterValue:
        return self._value

    def set(self, value: RegisterValue) -> None:
        self._value = value

    def yank(self, text: str, shape: RegisterShape = RegisterShape.CHAR) -> None:
        self._value = RegisterValue(text=text, shape=shape)

    @property
    def is_empty(self) -> bool:
        return not self._value.text


def extract_range(document: BufferDocument, start: Cursor, end: Cursor) -> str:
    """Text of the inclusive character range ``start..=end``.

    The end column is clamped to the last character of its line.
    """

    start, end = normalize_range(start, end)
    if start[0] == end[0]:
        line = document.get_line(start[0])
        if not line:
            return ""
        end_col = min(end[1], len(line) - 1)
        return line[start[1] : end_col + 1]

    parts = [document.get_line(start[0])[start[1] :]]
    for row in range(start[0] + 1, end[0]):
        parts.append(document.get_line(row))
    end_line = document.get_line(end[0])
    if end_line:
        parts.append(end_line[: min(end[1], len(end_line) - 1) + 1])
    else:
        parts.append("")
    return "\n".join(parts)


def extract_lines(document: BufferDocument, start_row: int, end_row: int) -> str:
    last = document.line_count - 1
    start = min(start_row, last)
    end = min(end_row, last)
    return "\n".join(document.get_line(row) for row in range(start, end + 1))


__all__ = [
    "Register",
    "RegisterShape",
    "RegisterValue",
    "extract_lines",
    "extract_range",
]

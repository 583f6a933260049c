"""Line storage and character-wise coordinate arithmetic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .state import Cursor
from .text import CharClass, char_class


@dataclass(slots=True)
class BufferDocument:
    """Mutable list-of-lines document.

    The document is never empty: an empty buffer is a single zero-length line.
    Every mutation bumps ``version``, a monotonic edit counter hosts use to
    cache derived data such as syntax spans.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0
    dirty: bool = False

    def __post_init__(self) -> None:
        if not self._lines:
            self._lines.append("")

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(_lines=text.splitlines() or [""])

    def snapshot(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        return self._lines[index]

    def line_len(self, row: int) -> int:
        if 0 <= row < len(self._lines):
            return len(self._lines[row])
        return 0

    def char_at(self, row: int, col: int) -> Optional[str]:
        if not 0 <= row < len(self._lines):
            return None
        line = self._lines[row]
        if 0 <= col < len(line):
            return line[col]
        return None

    def class_at(self, row: int, col: int) -> Optional[CharClass]:
        """Class of the character at ``(row, col)``.

        The position just past the end of a line counts as whitespace so word
        motions treat line breaks as separators.
        """

        length = self.line_len(row)
        if col == length:
            return CharClass.SPACE
        if col > length:
            return None
        ch = self.char_at(row, col)
        return char_class(ch) if ch is not None else None

    def advance_pos(self, pos: Cursor) -> Optional[Cursor]:
        row, col = pos
        if col < self.line_len(row):
            return (row, col + 1)
        if row + 1 < len(self._lines):
            return (row + 1, 0)
        return None

    def prev_pos(self, pos: Cursor) -> Optional[Cursor]:
        row, col = pos
        if col > 0:
            return (row, col - 1)
        if row == 0:
            return None
        prev_len = self.line_len(row - 1)
        return (row - 1, prev_len - 1 if prev_len else 0)

    def clamp(self, pos: Cursor, *, past_end: bool) -> Cursor:
        """Clamp ``pos`` into the document.

        ``past_end`` allows the column right after the last character, which
        only Insert mode uses.
        """

        row = max(0, min(pos[0], len(self._lines) - 1))
        length = len(self._lines[row])
        limit = length if past_end else max(length - 1, 0)
        return (row, max(0, min(pos[1], limit)))

    def offset_of(self, pos: Cursor) -> int:
        """Flat character offset of ``pos`` with one newline per line break."""

        row, col = pos
        return sum(len(line) + 1 for line in self._lines[:row]) + col

    def pos_at(self, offset: int) -> Cursor:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        last = len(self._lines) - 1
        return (last, len(self._lines[last]))

    def _touch(self) -> None:
        self.version += 1
        self.dirty = True

    def set_line(self, row: int, text: str) -> None:
        if self._lines[row] != text:
            self._lines[row] = text
            self._touch()

    def insert_lines(self, row: int, lines: Iterable[str]) -> None:
        new_lines = list(lines)
        if new_lines:
            self._lines[row:row] = new_lines
            self._touch()

    def delete_lines(self, start: int, end: int) -> None:
        """Remove rows ``start..=end``, keeping at least one line."""

        del self._lines[start : end + 1]
        if not self._lines:
            self._lines.append("")
        self._touch()

    def replace_lines(self, start: int, end: int, lines: Iterable[str]) -> None:
        """Swap rows ``start..=end`` for ``lines``, keeping at least one line."""

        self._lines[start : end + 1] = list(lines)
        if not self._lines:
            self._lines.append("")
        self._touch()

    def replace_all(self, lines: Iterable[str], *, dirty: bool) -> None:
        self._lines = list(lines) or [""]
        self.version += 1
        self.dirty = dirty

    def mark_clean(self) -> None:
        self.dirty = False


__all__ = ["BufferDocument"]

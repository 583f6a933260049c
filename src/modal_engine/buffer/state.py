"""Cursor and viewport state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Cursor = Tuple[int, int]  # (row, column) in characters
Selection = Tuple[Cursor, Cursor]


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + scroll info tied to a BufferDocument."""

    cursor: Cursor = (0, 0)
    scroll: int = 0

    @property
    def row(self) -> int:
        return self.cursor[0]

    @property
    def col(self) -> int:
        return self.cursor[1]

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)


__all__ = ["BufferState", "Cursor", "Selection"]

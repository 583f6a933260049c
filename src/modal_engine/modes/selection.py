"""Visual selections derived from an anchor and the live cursor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modal_engine.buffer.blocks import BlockRegion
from modal_engine.buffer.document import BufferDocument
from modal_engine.buffer.state import Cursor, Selection
from modal_engine.buffer.text import normalize_range
from modal_engine.motions.search import char_count_in_range


class VisualKind(str, Enum):
    """Visual sub-modes; values double as registered mode names."""

    CHAR = "visual"
    LINE = "visual_line"
    BLOCK = "visual_block"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_mode(cls, name: Optional[str]) -> Optional["VisualKind"]:
        for kind in cls:
            if kind.value == name:
                return kind
        return None


_LABELS = {
    VisualKind.CHAR: "-- VISUAL --",
    VisualKind.LINE: "-- VISUAL LINE --",
    VisualKind.BLOCK: "-- VISUAL BLOCK --",
}


@dataclass(frozen=True, slots=True)
class LastVisual:
    """Selection remembered for ``gv``."""

    kind: VisualKind
    anchor: Cursor
    cursor: Cursor


@dataclass(slots=True)
class VisualState:
    anchor: Optional[Cursor] = None
    to_eol: bool = False
    last: Optional[LastVisual] = None

    def remember(self, kind: VisualKind, cursor: Cursor) -> None:
        if self.anchor is not None:
            self.last = LastVisual(kind=kind, anchor=self.anchor, cursor=cursor)

    def reset(self) -> None:
        self.anchor = None
        self.to_eol = False


@dataclass(frozen=True, slots=True)
class VisualSelection:
    """Normalized view of an anchor/cursor pair for one visual kind.

    Never stored: it is recomputed from the live cursor on every use.
    """

    kind: VisualKind
    anchor: Cursor
    cursor: Cursor

    @property
    def start(self) -> Cursor:
        if self.kind is VisualKind.BLOCK:
            region = self.region
            return (region.top, region.left)
        start, _ = normalize_range(self.anchor, self.cursor)
        return (start[0], 0) if self.kind is VisualKind.LINE else start

    @property
    def end(self) -> Cursor:
        if self.kind is VisualKind.BLOCK:
            region = self.region
            return (region.bottom, region.right)
        _, end = normalize_range(self.anchor, self.cursor)
        return end

    @property
    def first_row(self) -> int:
        return min(self.anchor[0], self.cursor[0])

    @property
    def last_row(self) -> int:
        return max(self.anchor[0], self.cursor[0])

    @property
    def region(self) -> BlockRegion:
        return BlockRegion.from_corners(self.anchor, self.cursor)

    def summary(self, document: BufferDocument) -> str:
        if self.kind is VisualKind.LINE:
            return f"{self.last_row - self.first_row + 1} lines"
        if self.kind is VisualKind.BLOCK:
            region = self.region
            return f"{region.height}x{region.width}"
        return f"{char_count_in_range(document, self.start, self.end)} chars"

    def host_range(self, document: BufferDocument) -> Selection:
        """Inclusive range a host can highlight; line kinds span whole rows."""

        if self.kind is VisualKind.LINE:
            last = self.last_row
            return ((self.first_row, 0), (last, max(document.line_len(last) - 1, 0)))
        return (self.start, self.end)


__all__ = ["LastVisual", "VisualKind", "VisualSelection", "VisualState"]

"""Rectangular (visual block) regions and the edits applied to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Sequence

from .document import BufferDocument
from .state import Cursor


@dataclass(frozen=True, slots=True)
class BlockRegion:
    """Inclusive rectangle of rows ``top..=bottom`` and columns ``left..=right``."""

    top: int
    bottom: int
    left: int
    right: int

    @classmethod
    def from_corners(cls, a: Cursor, b: Cursor) -> "BlockRegion":
        return cls(
            top=min(a[0], b[0]),
            bottom=max(a[0], b[0]),
            left=min(a[1], b[1]),
            right=max(a[1], b[1]),
        )

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    def rows(self, document: BufferDocument) -> Iterator[int]:
        return iter(range(self.top, min(self.bottom, document.line_count - 1) + 1))


@dataclass(slots=True)
class BlockInsert:
    """Insert session replicated on every row of a block.

    ``col`` advances as characters are typed. With ``append`` set each row
    receives the text at its own end instead of at ``col``.
    """

    start_row: int
    end_row: int
    col: int
    append: bool = False


def extract_block(document: BufferDocument, region: BlockRegion) -> str:
    """One newline-separated segment per row; rows left of the block yield ``""``."""

    segments: List[str] = []
    for row in region.rows(document):
        line = document.get_line(row)
        if region.left >= len(line):
            segments.append("")
            continue
        segments.append(line[region.left : min(region.right, len(line) - 1) + 1])
    return "\n".join(segments)


def delete_block(document: BufferDocument, region: BlockRegion) -> None:
    for row in region.rows(document):
        line = document.get_line(row)
        if region.left >= len(line):
            continue
        end = min(region.right, len(line) - 1) + 1
        document.set_line(row, line[: region.left] + line[end:])


def transform_block(
    document: BufferDocument, region: BlockRegion, transform: Callable[[str], str]
) -> None:
    for row in region.rows(document):
        line = document.get_line(row)
        if region.left >= len(line):
            continue
        end = min(region.right, len(line) - 1) + 1
        document.set_line(
            row, line[: region.left] + transform(line[region.left : end]) + line[end:]
        )


def paste_block_at(
    document: BufferDocument, row: int, col: int, segments: Sequence[str]
) -> None:
    """Insert ``segments`` at ``col`` on consecutive rows starting at ``row``.

    Missing rows are appended and rows shorter than ``col`` are padded with
    spaces so every segment lands in the same column.
    """

    for offset, segment in enumerate(segments):
        target = row + offset
        if target >= document.line_count:
            document.insert_lines(document.line_count, [""])
        line = document.get_line(target)
        if len(line) < col:
            if not segment:
                continue
            line = line + " " * (col - len(line))
        document.set_line(target, line[:col] + segment + line[col:])


def block_insert_text(document: BufferDocument, block: BlockInsert, text: str) -> None:
    for row in range(block.start_row, block.end_row + 1):
        if row >= document.line_count:
            break
        line = document.get_line(row)
        col = len(line) if block.append else block.col
        if col > len(line):
            line = line + " " * (col - len(line))
        document.set_line(row, line[:col] + text + line[col:])
    block.col += len(text)


def block_backspace(document: BufferDocument, block: BlockInsert) -> bool:
    if block.col == 0:
        return False
    target = block.col - 1
    for row in range(block.start_row, block.end_row + 1):
        if row >= document.line_count:
            break
        line = document.get_line(row)
        if target >= len(line):
            continue
        document.set_line(row, line[:target] + line[target + 1 :])
    block.col = target
    return True


def block_split(document: BufferDocument, block: BlockInsert) -> Cursor:
    """Split every block row at the tracked column, bottom row first."""

    last = min(block.end_row, document.line_count - 1)
    for row in range(last, block.start_row - 1, -1):
        line = document.get_line(row)
        col = min(block.col, len(line))
        document.set_line(row, line[:col])
        document.insert_lines(row + 1, [line[col:]])
    return (block.start_row + 1, 0)


__all__ = [
    "BlockInsert",
    "BlockRegion",
    "block_backspace",
    "block_insert_text",
    "block_split",
    "delete_block",
    "extract_block",
    "paste_block_at",
    "transform_block",
]

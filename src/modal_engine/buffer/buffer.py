"""High-level buffer façade combining document, state, undo and file identity."""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Callable, ContextManager, List, Optional

from modal_engine.runtime import telemetry
from modal_engine.runtime.settings import DEFAULT_UNDO_LIMIT

from . import blocks
from .blocks import BlockInsert, BlockRegion
from .document import BufferDocument
from .files import PathLike, load_lines, save_lines
from .indent import (
    IndentOptions,
    indent_for_line_above,
    indent_for_line_below,
    indent_for_split,
    leading_whitespace,
)
from .registers import RegisterShape, RegisterValue
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror
from .text import char_class, normalize_range
from .undo import EditorSnapshot, LineUndo, UndoHistory

DEFAULT_BUFFER_NAME = "[No Name]"


class Buffer:
    """One open document with its own cursor, undo stacks and line undo.

    Every mutating method runs inside a :class:`Transaction`, which records an
    undo snapshot first. While ``coalescing`` is set (Insert mode) snapshots
    follow the coalescing window of :class:`UndoHistory`.
    """

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        path: Optional[PathLike] = None,
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo_limit: int = DEFAULT_UNDO_LIMIT,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.name = name or (self.path.name if self.path else DEFAULT_BUFFER_NAME)
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.history = UndoHistory(limit=undo_limit)
        self.line_undo: Optional[LineUndo] = None
        self.coalescing = False
        self._open_transactions = 0

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: Optional[str] = None,
        path: Optional[PathLike] = None,
        undo_limit: int = DEFAULT_UNDO_LIMIT,
    ) -> "Buffer":
        return cls(
            name=name,
            path=path,
            document=BufferDocument.from_text(text),
            undo_limit=undo_limit,
        )

    @classmethod
    def from_file(
        cls, path: PathLike, *, undo_limit: int = DEFAULT_UNDO_LIMIT
    ) -> "Buffer":
        document = BufferDocument(_lines=load_lines(path))
        return cls(path=path, document=document, undo_limit=undo_limit)

    # -- read access -----------------------------------------------------

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def lines(self) -> List[str]:
        return list(self.document.snapshot())

    @property
    def dirty(self) -> bool:
        return self.document.dirty

    @property
    def version(self) -> int:
        return self.document.version

    def current_line(self) -> str:
        return self.document.get_line(self.state.row)

    def mirror(
        self,
        *,
        selection: Optional[Selection] = None,
        attributes: Optional[dict[str, str]] = None,
    ) -> BufferMirror:
        return BufferMirror(
            text=self.document.text(),
            cursor=self.state.cursor,
            selection=selection,
            version=self.document.version,
            attributes=dict(attributes or {}),
        )

    # -- cursor ----------------------------------------------------------

    def move_to(self, pos: Cursor, *, past_end: bool = True) -> None:
        """Place the cursor at ``pos`` (clamped); leaving a row drops line undo."""

        target = self.document.clamp(pos, past_end=past_end)
        if target[0] != self.state.row:
            self.line_undo = None
        self.state.cursor = target

    # -- undo ------------------------------------------------------------

    def capture(self) -> EditorSnapshot:
        return EditorSnapshot(
            lines=tuple(self.document.snapshot()),
            cursor=self.state.cursor,
            scroll=self.state.scroll,
            dirty=self.document.dirty,
        )

    def restore(self, snapshot: EditorSnapshot) -> None:
        with self.history.restoring():
            self.document.replace_all(snapshot.lines, dirty=snapshot.dirty)
            self.state.cursor = self.document.clamp(snapshot.cursor, past_end=True)
            self.state.scroll = snapshot.scroll
            self.line_undo = None

    def transaction(self, label: str, *, coalesce: Optional[bool] = None) -> "Transaction":
        return Transaction(
            self, label, coalesce=self.coalescing if coalesce is None else coalesce
        )

    def undo(self) -> bool:
        snapshot = self.history.pop_undo(self.capture())
        if snapshot is None:
            return False
        self.restore(snapshot)
        telemetry.record_event(
            "buffer.undo",
            level="debug",
            data={"buffer": self.name, "depth": len(self.history)},
        )
        return True

    def redo(self) -> bool:
        snapshot = self.history.pop_redo(self.capture())
        if snapshot is None:
            return False
        self.restore(snapshot)
        telemetry.record_event(
            "buffer.redo",
            level="debug",
            data={"buffer": self.name, "depth": self.history.redo_depth},
        )
        return True

    def set_line_undo(self, row: int) -> None:
        """Remember ``row``'s text unless that row is already tracked."""

        if not 0 <= row < self.document.line_count:
            return
        if self.line_undo is not None and self.line_undo.row == row:
            return
        self.line_undo = LineUndo(row=row, text=self.document.get_line(row))

    def clear_line_undo(self) -> None:
        self.line_undo = None

    def undo_line(self) -> bool:
        entry, self.line_undo = self.line_undo, None
        if entry is None or entry.row >= self.document.line_count:
            return False
        with self.transaction("undo_line"):
            self.document.set_line(entry.row, entry.text)
            self.state.cursor = (
                entry.row,
                min(self.state.col, len(entry.text)),
            )
        return True

    # -- insert-mode edits -----------------------------------------------

    def insert_char(self, ch: str) -> None:
        with self.transaction("insert_char"):
            row, col = self.state.cursor
            self.set_line_undo(row)
            line = self.document.get_line(row)
            self.document.set_line(row, line[:col] + ch + line[col:])
            self.state.cursor = (row, col + len(ch))

    def insert_text(self, text: str) -> None:
        """Insert a host-supplied string as a single undo step."""

        if not text:
            return
        with self.transaction("insert_text", coalesce=False):
            self.line_undo = None
            parts = text.replace("\r\n", "\n").split("\n")
            row, col = self.state.cursor
            line = self.document.get_line(row)
            head, tail = line[:col], line[col:]
            if len(parts) == 1:
                self.document.set_line(row, head + parts[0] + tail)
                self.state.cursor = (row, col + len(parts[0]))
                return
            self.document.set_line(row, head + parts[0])
            middle = parts[1:-1]
            self.document.insert_lines(row + 1, middle + [parts[-1] + tail])
            self.state.cursor = (row + len(parts) - 1, len(parts[-1]))

    def insert_newline(self, options: IndentOptions) -> None:
        with self.transaction("insert_newline"):
            self.line_undo = None
            row, col = self.state.cursor
            indent = indent_for_split(self.document, (row, col), options)
            line = self.document.get_line(row)
            self.document.set_line(row, line[:col])
            self.document.insert_lines(row + 1, [indent + line[col:]])
            self.state.cursor = (row + 1, len(indent))

    def backspace(self) -> bool:
        row, col = self.state.cursor
        if col == 0 and row == 0:
            return False
        with self.transaction("backspace"):
            if col > 0:
                self.set_line_undo(row)
                line = self.document.get_line(row)
                self.document.set_line(row, line[: col - 1] + line[col:])
                self.state.cursor = (row, col - 1)
            else:
                self.line_undo = None
                current = self.document.get_line(row)
                previous = self.document.get_line(row - 1)
                self.document.set_line(row - 1, previous + current)
                self.document.delete_lines(row, row)
                self.state.cursor = (row - 1, len(previous))
        return True

    def delete_at_cursor(self) -> bool:
        """Delete the character under the cursor, or join the next line at EOL."""

        row, col = self.state.cursor
        line = self.document.get_line(row)
        if col < len(line):
            with self.transaction("delete_char"):
                self.set_line_undo(row)
                self.document.set_line(row, line[:col] + line[col + 1 :])
            return True
        if row + 1 < self.document.line_count:
            with self.transaction("join_line"):
                self.line_undo = None
                self.document.set_line(row, line + self.document.get_line(row + 1))
                self.document.delete_lines(row + 1, row + 1)
            return True
        return False

    def delete_word_before_cursor(self) -> bool:
        row, col = self.state.cursor
        if col == 0:
            return self.backspace()
        line = self.document.get_line(row)
        start = col
        while start > 0 and line[start - 1].isspace():
            start -= 1
        if start > 0:
            cls = char_class(line[start - 1])
            while start > 0 and char_class(line[start - 1]) is cls:
                start -= 1
        with self.transaction("delete_word"):
            self.set_line_undo(row)
            self.document.set_line(row, line[:start] + line[col:])
            self.state.cursor = (row, start)
        return True

    def delete_to_line_start(self) -> bool:
        row, col = self.state.cursor
        if col == 0:
            return False
        line = self.document.get_line(row)
        with self.transaction("delete_line_start"):
            self.set_line_undo(row)
            self.document.set_line(row, line[col:])
            self.state.cursor = (row, 0)
        return True

    def open_line_below(self, options: IndentOptions) -> None:
        with self.transaction("open_below"):
            self.line_undo = None
            row = self.state.row
            indent = indent_for_line_below(self.document, row, options)
            self.document.insert_lines(row + 1, [indent])
            self.state.cursor = (row + 1, len(indent))

    def open_line_above(self, options: IndentOptions) -> None:
        with self.transaction("open_above"):
            self.line_undo = None
            row = self.state.row
            indent = indent_for_line_above(self.document, row, options)
            self.document.insert_lines(row, [indent])
            self.state.cursor = (row, len(indent))

    # -- block insert ----------------------------------------------------

    def block_insert_text(self, block: BlockInsert, text: str) -> None:
        with self.transaction("block_insert"):
            blocks.block_insert_text(self.document, block, text)
            self.state.cursor = (block.start_row, block.col)

    def block_backspace(self, block: BlockInsert) -> bool:
        if block.col == 0:
            return False
        with self.transaction("block_backspace"):
            blocks.block_backspace(self.document, block)
            self.state.cursor = (block.start_row, block.col)
        return True

    def block_split(self, block: BlockInsert) -> None:
        with self.transaction("block_split"):
            self.line_undo = None
            self.state.cursor = blocks.block_split(self.document, block)

    # -- range edits -----------------------------------------------------

    def delete_range(self, start: Cursor, end: Cursor) -> None:
        """Delete the inclusive range ``start..=end``; end columns clamp to the line."""

        start, end = normalize_range(start, end)
        with self.transaction("delete_range"):
            if start[0] == end[0]:
                self.set_line_undo(start[0])
                line = self.document.get_line(start[0])
                if line:
                    stop = min(end[1], len(line) - 1) + 1
                    self.document.set_line(start[0], line[: start[1]] + line[stop:])
            else:
                self.line_undo = None
                head = self.document.get_line(start[0])[: start[1]]
                end_line = self.document.get_line(end[0])
                tail = end_line[min(end[1], len(end_line) - 1) + 1 :] if end_line else ""
                self.document.set_line(start[0], head + tail)
                self.document.delete_lines(start[0] + 1, end[0])
            self.state.cursor = self.document.clamp(start, past_end=True)

    def delete_lines(self, start_row: int, end_row: int) -> None:
        last = self.document.line_count - 1
        start, end = min(start_row, last), min(end_row, last)
        with self.transaction("delete_lines"):
            self.line_undo = None
            self.document.delete_lines(start, end)
            self.state.cursor = (min(start, self.document.line_count - 1), 0)

    def replace_lines(self, start_row: int, end_row: int, lines: List[str]) -> None:
        last = self.document.line_count - 1
        start, end = min(start_row, last), min(end_row, last)
        with self.transaction("replace_lines"):
            self.line_undo = None
            self.document.replace_lines(start, end, lines)
            self.state.cursor = (min(start, self.document.line_count - 1), 0)

    def delete_block(self, region: BlockRegion) -> None:
        with self.transaction("delete_block"):
            self.line_undo = None
            blocks.delete_block(self.document, region)
            row = min(region.top, self.document.line_count - 1)
            self.state.cursor = (row, min(region.left, self.document.line_len(row)))

    def transform_range(
        self, start: Cursor, end: Cursor, transform: Callable[[str], str]
    ) -> None:
        start, end = normalize_range(start, end)
        with self.transaction("transform_range"):
            self.line_undo = None
            for row in range(start[0], min(end[0], self.document.line_count - 1) + 1):
                line = self.document.get_line(row)
                lo = start[1] if row == start[0] else 0
                hi = min(end[1], len(line) - 1) + 1 if row == end[0] else len(line)
                if lo < hi:
                    self.document.set_line(row, line[:lo] + transform(line[lo:hi]) + line[hi:])
            self.state.cursor = self.document.clamp(start, past_end=False)

    def transform_lines(
        self, start_row: int, end_row: int, transform: Callable[[str], str]
    ) -> None:
        with self.transaction("transform_lines"):
            self.line_undo = None
            for row in range(start_row, min(end_row, self.document.line_count - 1) + 1):
                self.document.set_line(row, transform(self.document.get_line(row)))
            self.state.cursor = (start_row, 0)

    def transform_block(
        self, region: BlockRegion, transform: Callable[[str], str]
    ) -> None:
        with self.transaction("transform_block"):
            self.line_undo = None
            blocks.transform_block(self.document, region, transform)
            self.state.cursor = self.document.clamp(
                (region.top, region.left), past_end=False
            )

    def shift_lines(
        self, start_row: int, end_row: int, *, right: bool, shift_width: int
    ) -> None:
        def shift(line: str) -> str:
            if right:
                return " " * shift_width + line if line else line
            indent = leading_whitespace(line)
            if indent.startswith("\t"):
                return line[1:]
            removed = min(shift_width, len(indent) - len(indent.lstrip(" ")))
            return line[removed:]

        self.transform_lines(start_row, end_row, shift)
        self.state.cursor = (start_row, len(leading_whitespace(self.document.get_line(start_row))))

    # -- paste -----------------------------------------------------------

    def paste(self, value: RegisterValue, *, after: bool, count: int = 1) -> bool:
        if not value.text and value.shape is not RegisterShape.LINE:
            return False
        count = max(count, 1)
        with self.transaction("paste"):
            if value.shape is RegisterShape.LINE:
                self.line_undo = None
                at = self.state.row + 1 if after else self.state.row
                self.document.insert_lines(at, value.segments * count)
                self.state.cursor = (at, 0)
            elif value.shape is RegisterShape.BLOCK:
                self.line_undo = None
                row, col = self.state.cursor
                at = col + 1 if after and self.document.line_len(row) else col
                width = max(len(segment) for segment in value.segments)
                for index in range(count):
                    blocks.paste_block_at(
                        self.document, row, at + index * width, value.segments
                    )
                self.state.cursor = (row, at)
            else:
                self._paste_chars(value.text * count, after=after)
        return True

    def _paste_chars(self, text: str, *, after: bool) -> None:
        row, col = self.state.cursor
        line = self.document.get_line(row)
        at = min(col + 1, len(line)) if after else min(col, len(line))
        parts = text.split("\n")
        if len(parts) == 1:
            self.set_line_undo(row)
            self.document.set_line(row, line[:at] + text + line[at:])
            self.state.cursor = (row, at + len(text) - 1)
            return
        self.line_undo = None
        self.document.set_line(row, line[:at] + parts[0])
        self.document.insert_lines(row + 1, parts[1:-1] + [parts[-1] + line[at:]])
        self.state.cursor = (row, at)

    # -- files -----------------------------------------------------------

    def save(self, path: Optional[PathLike] = None) -> Path:
        """Write the buffer to ``path`` (or its own path) and mark it clean.

        Raises :class:`~modal_engine.buffer.files.BufferIOError` on failure.
        """

        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("buffer has no file name")
        save_lines(target, self.document.snapshot())
        if self.path is None:
            self.path = target
            self.name = target.name
        if target == self.path:
            self.document.mark_clean()
        return target

    def reload(self) -> None:
        """Discard edits and re-read the file; undo history is cleared."""

        if self.path is None:
            raise ValueError("buffer has no file name")
        self.document.replace_all(load_lines(self.path), dirty=False)
        self.history.clear()
        self.line_undo = None
        self.state.cursor = self.document.clamp(self.state.cursor, past_end=False)


class Transaction(AbstractContextManager["Transaction"]):
    """Records an undo snapshot and opens a ``buffer::<label>`` span.

    Nested transactions share the outermost snapshot, so a compound edit
    undoes in one step.
    """

    def __init__(self, buffer: Buffer, label: str, *, coalesce: bool = False) -> None:
        self.buffer = buffer
        self.label = label
        self.coalesce = coalesce
        self.recorded = False
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        if self.buffer._open_transactions == 0:
            self.recorded = self.buffer.history.record(
                self.buffer.capture, coalesce=self.coalesce
            )
        self.buffer._open_transactions += 1
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.buffer._open_transactions -= 1
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "DEFAULT_BUFFER_NAME", "Transaction"]

"""Snapshot-based undo/redo with insert-mode coalescing."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from .state import Cursor


@dataclass(frozen=True, slots=True)
class EditorSnapshot:
    lines: Tuple[str, ...]
    cursor: Cursor
    scroll: int
    dirty: bool


@dataclass(frozen=True, slots=True)
class LineUndo:
    """Original text of the row currently being edited."""

    row: int
    text: str


class UndoHistory:
    """Bounded undo and redo stacks.

    While Insert mode has an open coalescing window, ``record`` does nothing so
    a burst of typing becomes one undo step. The window closes on any
    non-character key, on undo-break characters and on leaving Insert mode.
    """

    def __init__(self, *, limit: int = 200) -> None:
        if limit <= 0:
            raise ValueError("undo limit must be positive")
        self.limit = limit
        self._undo: List[EditorSnapshot] = []
        self._redo: List[EditorSnapshot] = []
        self.window_open = False
        self._restoring = False

    def __len__(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(
        self, capture: Callable[[], EditorSnapshot], *, coalesce: bool = False
    ) -> bool:
        """Push the pre-mutation state unless suppressed; return whether pushed."""

        if self._restoring:
            return False
        if coalesce and self.window_open:
            return False
        self._undo.append(capture())
        overflow = len(self._undo) - self.limit
        if overflow > 0:
            del self._undo[:overflow]
        self._redo.clear()
        if coalesce:
            self.window_open = True
        return True

    def close_window(self) -> None:
        self.window_open = False

    def pop_undo(self, current: EditorSnapshot) -> Optional[EditorSnapshot]:
        if not self._undo:
            return None
        self._redo.append(current)
        self.window_open = False
        return self._undo.pop()

    def pop_redo(self, current: EditorSnapshot) -> Optional[EditorSnapshot]:
        if not self._redo:
            return None
        self._undo.append(current)
        self.window_open = False
        return self._redo.pop()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self.window_open = False

    @contextmanager
    def restoring(self) -> Iterator[None]:
        self._restoring = True
        try:
            yield
        finally:
            self._restoring = False


__all__ = ["EditorSnapshot", "LineUndo", "UndoHistory"]

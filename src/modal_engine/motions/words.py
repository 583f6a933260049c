"""Word and WORD motions over a :class:`BufferDocument`.

Words are runs of one character class (word characters or punctuation);
WORDs are runs of anything that is not whitespace. The position right after
the end of a line counts as whitespace, so motions flow across lines.
All functions return ``None`` when there is no further position.
"""

from __future__ import annotations

from typing import Optional

from modal_engine.buffer.document import BufferDocument
from modal_engine.buffer.state import Cursor
from modal_engine.buffer.text import CharClass

SPACE = CharClass.SPACE


def skip_spaces_forward(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    current: Optional[Cursor] = pos
    while current is not None:
        cls = doc.class_at(*current)
        if cls is None:
            return None
        if cls is not SPACE:
            return current
        current = doc.advance_pos(current)
    return None


def skip_spaces_backward(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    current: Optional[Cursor] = pos
    while current is not None:
        cls = doc.class_at(*current)
        if cls is None:
            return None
        if cls is not SPACE:
            return current
        current = doc.prev_pos(current)
    return None


def advance_to_next_class(
    doc: BufferDocument, pos: Cursor, cls: CharClass
) -> Optional[Cursor]:
    """First position after ``pos`` whose class differs from ``cls``."""

    current = pos
    while True:
        nxt = doc.advance_pos(current)
        if nxt is None:
            return None
        next_cls = doc.class_at(*nxt)
        if next_cls is None:
            return None
        if next_cls is not cls:
            return nxt
        current = nxt


def advance_to_next_space(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    current = pos
    while True:
        nxt = doc.advance_pos(current)
        if nxt is None:
            return None
        next_cls = doc.class_at(*nxt)
        if next_cls is None:
            return None
        if next_cls is SPACE:
            return nxt
        current = nxt


def _prev_on_row(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    """Previous position on the same row; a line break always ends a group."""

    prev = doc.prev_pos(pos)
    if prev is None or prev[0] != pos[0]:
        return None
    return prev


def start_of_group(doc: BufferDocument, pos: Cursor, cls: CharClass) -> Cursor:
    current = pos
    while True:
        prev = _prev_on_row(doc, current)
        if prev is None or doc.class_at(*prev) is not cls:
            return current
        current = prev


def end_of_group(doc: BufferDocument, pos: Cursor, cls: CharClass) -> Cursor:
    current = pos
    while True:
        nxt = doc.advance_pos(current)
        if nxt is None or doc.class_at(*nxt) is not cls:
            return current
        current = nxt


def start_of_non_space(doc: BufferDocument, pos: Cursor) -> Cursor:
    current = pos
    while True:
        prev = _prev_on_row(doc, current)
        if prev is None or doc.class_at(*prev) in (SPACE, None):
            return current
        current = prev


def end_of_non_space(doc: BufferDocument, pos: Cursor) -> Cursor:
    current = pos
    while True:
        nxt = doc.advance_pos(current)
        if nxt is None or doc.class_at(*nxt) in (SPACE, None):
            return current
        current = nxt


def _is_group_start(doc: BufferDocument, pos: Cursor, cls: CharClass) -> bool:
    prev = _prev_on_row(doc, pos)
    return prev is None or doc.class_at(*prev) is not cls


def _is_non_space_start(doc: BufferDocument, pos: Cursor) -> bool:
    prev = _prev_on_row(doc, pos)
    return prev is None or doc.class_at(*prev) is SPACE


def next_word_start(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is SPACE:
        return skip_spaces_forward(doc, pos)
    after = advance_to_next_class(doc, pos, cls)
    if after is None:
        return None
    return skip_spaces_forward(doc, after)


def next_word_end(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is not SPACE:
        end = end_of_group(doc, pos, cls)
        if end != pos:
            return end
        nxt = doc.advance_pos(pos)
        if nxt is None:
            return None
        pos = nxt
    start = skip_spaces_forward(doc, pos)
    if start is None:
        return None
    start_cls = doc.class_at(*start)
    if start_cls is None:
        return None
    return end_of_group(doc, start, start_cls)


def prev_word_start(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is not SPACE and not _is_group_start(doc, pos, cls):
        return start_of_group(doc, pos, cls)
    if cls is not SPACE:
        prev = doc.prev_pos(pos)
        if prev is None:
            return None
        pos = prev
    found = skip_spaces_backward(doc, pos)
    if found is None:
        return None
    found_cls = doc.class_at(*found)
    if found_cls is None:
        return None
    return start_of_group(doc, found, found_cls)


def next_big_word_start(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is SPACE:
        return skip_spaces_forward(doc, pos)
    after = advance_to_next_space(doc, pos)
    if after is None:
        return None
    return skip_spaces_forward(doc, after)


def next_big_word_end(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is not SPACE:
        end = end_of_non_space(doc, pos)
        if end != pos:
            return end
        nxt = doc.advance_pos(pos)
        if nxt is None:
            return None
        pos = nxt
    start = skip_spaces_forward(doc, pos)
    if start is None:
        return None
    return end_of_non_space(doc, start)


def prev_big_word_start(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    cls = doc.class_at(*pos)
    if cls is None:
        return None
    if cls is not SPACE and not _is_non_space_start(doc, pos):
        return start_of_non_space(doc, pos)
    if cls is not SPACE:
        prev = doc.prev_pos(pos)
        if prev is None:
            return None
        pos = prev
    found = skip_spaces_backward(doc, pos)
    if found is None:
        return None
    return start_of_non_space(doc, found)


def first_non_blank(doc: BufferDocument, row: int) -> int:
    line = doc.get_line(row)
    return len(line) - len(line.lstrip())


__all__ = [
    "advance_to_next_class",
    "advance_to_next_space",
    "end_of_group",
    "end_of_non_space",
    "first_non_blank",
    "next_big_word_end",
    "next_big_word_start",
    "next_word_end",
    "next_word_start",
    "prev_big_word_start",
    "prev_word_start",
    "skip_spaces_backward",
    "skip_spaces_forward",
    "start_of_group",
    "start_of_non_space",
]

"""Character find, literal substring search and bracket matching."""

from __future__ import annotations

from typing import Optional, Tuple

from modal_engine.buffer.document import BufferDocument
from modal_engine.buffer.state import Cursor
from modal_engine.buffer.text import normalize_range

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}
CLOSING_PAIRS = {close: open_ for open_, close in BRACKET_PAIRS.items()}


def find_char_forward(
    doc: BufferDocument,
    pos: Cursor,
    target: str,
    *,
    until: bool = False,
    cross_line: bool = True,
) -> Optional[Cursor]:
    """Next ``target`` after ``pos``; ``until`` lands one position short."""

    row, start = pos[0], pos[1] + 1
    while row < doc.line_count:
        index = doc.get_line(row).find(target, start)
        if index >= 0:
            found = (row, index)
            if until:
                found = doc.prev_pos(found) or found
            return found
        if not cross_line:
            return None
        row += 1
        start = 0
    return None


def find_char_backward(
    doc: BufferDocument,
    pos: Cursor,
    target: str,
    *,
    until: bool = False,
    cross_line: bool = True,
) -> Optional[Cursor]:
    row, stop = pos
    while True:
        index = doc.get_line(row).rfind(target, 0, max(stop, 0))
        if index >= 0:
            found = (row, index)
            if until:
                found = doc.advance_pos(found) or found
            return found
        if row == 0 or not cross_line:
            return None
        row -= 1
        stop = doc.line_len(row)


def search_forward(
    doc: BufferDocument, pos: Cursor, pattern: str, *, cross_line: bool = True
) -> Optional[Cursor]:
    """First literal occurrence of ``pattern`` starting after ``pos``."""

    if not pattern:
        return None
    row, start = pos[0], pos[1] + 1
    while row < doc.line_count:
        line = doc.get_line(row)
        if start < len(line):
            index = line.find(pattern, start)
            if index >= 0:
                return (row, index)
        if not cross_line:
            return None
        row += 1
        start = 0
    return None


def search_backward(
    doc: BufferDocument, pos: Cursor, pattern: str, *, cross_line: bool = True
) -> Optional[Cursor]:
    """Last literal occurrence of ``pattern`` starting before ``pos``."""

    if not pattern:
        return None
    row, col = pos
    limit = col - 1
    while True:
        line = doc.get_line(row)
        if limit >= 0:
            index = line.rfind(pattern, 0, limit + len(pattern))
            if index >= 0:
                return (row, index)
        if row == 0 or not cross_line:
            return None
        row -= 1
        limit = doc.line_len(row) - 1


def _scan_forward(
    doc: BufferDocument, pos: Cursor, open_: str, close: str
) -> Optional[Cursor]:
    depth = 0
    current = doc.advance_pos(pos)
    while current is not None:
        ch = doc.char_at(*current)
        if ch == open_:
            depth += 1
        elif ch == close:
            if depth == 0:
                return current
            depth -= 1
        current = doc.advance_pos(current)
    return None


def _scan_backward(
    doc: BufferDocument, pos: Cursor, open_: str, close: str
) -> Optional[Cursor]:
    depth = 0
    current = doc.prev_pos(pos)
    while current is not None:
        ch = doc.char_at(*current)
        if ch == close:
            depth += 1
        elif ch == open_:
            if depth == 0:
                return current
            depth -= 1
        current = doc.prev_pos(current)
    return None


def _next_bracket(doc: BufferDocument, pos: Cursor) -> Optional[Tuple[Cursor, str]]:
    current = doc.advance_pos(pos)
    while current is not None:
        ch = doc.char_at(*current)
        if ch is not None and (ch in BRACKET_PAIRS or ch in CLOSING_PAIRS):
            return current, ch
        current = doc.advance_pos(current)
    return None


def match_bracket(doc: BufferDocument, pos: Cursor) -> Optional[Cursor]:
    """Partner of the bracket at ``pos`` or of the next bracket after it."""

    ch = doc.char_at(*pos)
    if ch is None or (ch not in BRACKET_PAIRS and ch not in CLOSING_PAIRS):
        located = _next_bracket(doc, pos)
        if located is None:
            return None
        pos, ch = located
    if ch in BRACKET_PAIRS:
        return _scan_forward(doc, pos, ch, BRACKET_PAIRS[ch])
    return _scan_backward(doc, pos, CLOSING_PAIRS[ch], ch)


def char_count_in_range(doc: BufferDocument, start: Cursor, end: Cursor) -> int:
    """Characters covered by the inclusive range, one per crossed line break."""

    start, end = normalize_range(start, end)
    if start[0] == end[0]:
        return end[1] - start[1] + 1
    count = max(doc.line_len(start[0]) - start[1], 0)
    for row in range(start[0] + 1, end[0]):
        count += doc.line_len(row)
    return count + end[1] + 1


__all__ = [
    "BRACKET_PAIRS",
    "char_count_in_range",
    "find_char_backward",
    "find_char_forward",
    "match_bracket",
    "search_backward",
    "search_forward",
]

"""Text-object resolution: words, delimiter pairs, quotes and markup tags.

Each resolver returns a :class:`TextObjectRange` whose ``end`` is inclusive,
or ``None`` when the cursor is not inside such an object. An inner object
with nothing between its delimiters comes back ``empty``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from modal_engine.buffer.document import BufferDocument
from modal_engine.buffer.state import Cursor
from modal_engine.buffer.text import char_class

TAG_PATTERN = re.compile(r"<(/?)([A-Za-z][\w:.-]*)(?:\s[^<>]*?)?(/?)>")


@dataclass(frozen=True, slots=True)
class TextObjectRange:
    start: Cursor
    end: Cursor

    @property
    def empty(self) -> bool:
        return self.start > self.end


def word_range(
    doc: BufferDocument, pos: Cursor, *, around: bool = False
) -> Optional[TextObjectRange]:
    row, col = pos
    line = doc.get_line(row)
    if not line:
        return None
    col = min(col, len(line) - 1)
    cls = char_class(line[col])
    start = col
    while start > 0 and char_class(line[start - 1]) is cls:
        start -= 1
    end = col
    while end + 1 < len(line) and char_class(line[end + 1]) is cls:
        end += 1
    if around:
        trailing = end
        while trailing + 1 < len(line) and line[trailing + 1].isspace():
            trailing += 1
        if trailing != end:
            end = trailing
        else:
            while start > 0 and line[start - 1].isspace():
                start -= 1
    return TextObjectRange((row, start), (row, end))


def _enclosing_opener(
    doc: BufferDocument, pos: Cursor, open_: str, close: str
) -> Optional[Cursor]:
    ch = doc.char_at(*pos)
    if ch == open_:
        return pos
    # a closer under the cursor is excluded by starting one position back
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


def _matching_closer(
    doc: BufferDocument, opener: Cursor, open_: str, close: str
) -> Optional[Cursor]:
    depth = 0
    current = doc.advance_pos(opener)
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


def pair_range(
    doc: BufferDocument, pos: Cursor, open_: str, close: str, *, around: bool = False
) -> Optional[TextObjectRange]:
    opener = _enclosing_opener(doc, pos, open_, close)
    if opener is None:
        return None
    closer = _matching_closer(doc, opener, open_, close)
    if closer is None:
        return None
    if around:
        return TextObjectRange(opener, closer)
    start = doc.advance_pos(opener) or opener
    end = doc.prev_pos(closer) or closer
    if start >= closer:
        return TextObjectRange(closer, opener)
    return TextObjectRange(start, end)


def _is_escaped(line: str, index: int) -> bool:
    backslashes = 0
    while index - backslashes - 1 >= 0 and line[index - backslashes - 1] == "\\":
        backslashes += 1
    return backslashes % 2 == 1


def quote_range(
    doc: BufferDocument, pos: Cursor, quote: str, *, around: bool = False
) -> Optional[TextObjectRange]:
    row, col = pos
    line = doc.get_line(row)
    marks = [
        index
        for index, ch in enumerate(line)
        if ch == quote and not _is_escaped(line, index)
    ]
    pairs = list(zip(marks[0::2], marks[1::2]))
    chosen: Optional[Tuple[int, int]] = None
    for left, right in pairs:
        if left <= col <= right:
            chosen = (left, right)
            break
    if chosen is None:
        chosen = next(((left, right) for left, right in pairs if left > col), None)
    if chosen is None:
        return None
    left, right = chosen
    if around:
        return TextObjectRange((row, left), (row, right))
    return TextObjectRange((row, left + 1), (row, right - 1))


def _tag_pairs(text: str) -> List[Tuple[int, int, int, int]]:
    pairs: List[Tuple[int, int, int, int]] = []
    stack: List[Tuple[str, int, int]] = []
    for match in TAG_PATTERN.finditer(text):
        closing, name, self_closing = match.group(1), match.group(2), match.group(3)
        if self_closing:
            continue
        if not closing:
            stack.append((name, match.start(), match.end()))
            continue
        for depth in range(len(stack) - 1, -1, -1):
            if stack[depth][0] == name:
                _, open_start, open_end = stack[depth]
                del stack[depth:]
                pairs.append((open_start, open_end, match.start(), match.end()))
                break
    return pairs


def tag_range(
    doc: BufferDocument, pos: Cursor, *, around: bool = False
) -> Optional[TextObjectRange]:
    """Innermost ``<name ...>...</name>`` pair enclosing ``pos``.

    Self-closing tags, comments and declarations (``<!...>``, ``<?...>``)
    never form pairs.
    """

    offset = doc.offset_of(pos)
    enclosing = [
        pair for pair in _tag_pairs(doc.text()) if pair[0] <= offset < pair[3]
    ]
    if not enclosing:
        return None
    open_start, open_end, close_start, close_end = max(enclosing, key=lambda p: p[0])
    if around:
        return TextObjectRange(doc.pos_at(open_start), doc.pos_at(close_end - 1))
    if open_end == close_start:
        return TextObjectRange(doc.pos_at(open_end), doc.pos_at(open_end - 1))
    return TextObjectRange(doc.pos_at(open_end), doc.pos_at(close_start - 1))


_PAIR_TARGETS = {
    "{": ("{", "}"),
    "}": ("{", "}"),
    "(": ("(", ")"),
    ")": ("(", ")"),
    "b": ("(", ")"),
    "[": ("[", "]"),
    "]": ("[", "]"),
    "<": ("<", ">"),
    ">": ("<", ">"),
}


def resolve_text_object(
    doc: BufferDocument, pos: Cursor, target: str, *, around: bool = False
) -> Optional[TextObjectRange]:
    """Dispatch a text-object target key (``w``, ``(``, ``"``, ``t``...)."""

    if target == "w":
        return word_range(doc, pos, around=around)
    if target == "t":
        return tag_range(doc, pos, around=around)
    if target in ("'", '"', "`"):
        return quote_range(doc, pos, target, around=around)
    pair = _PAIR_TARGETS.get(target)
    if pair is None:
        return None
    return pair_range(doc, pos, pair[0], pair[1], around=around)


__all__ = [
    "TAG_PATTERN",
    "TextObjectRange",
    "pair_range",
    "quote_range",
    "resolve_text_object",
    "tag_range",
    "word_range",
]

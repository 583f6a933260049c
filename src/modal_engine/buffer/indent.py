"""Auto-indent rules for new lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .document import BufferDocument
from .state import Cursor

OPENERS = "{[("
CLOSERS = {"}": "{", "]": "[", ")": "("}


@dataclass(frozen=True, slots=True)
class IndentOptions:
    shift_width: int = 4
    indent_colon: bool = False


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def should_increase_indent(line: str, options: IndentOptions) -> bool:
    trimmed = line.rstrip()
    if not trimmed:
        return False
    return trimmed[-1] in OPENERS or (options.indent_colon and trimmed.endswith(":"))


def should_decrease_indent(line: str) -> bool:
    trimmed = line.lstrip()
    return bool(trimmed) and trimmed[0] in CLOSERS


def increase_indent(indent: str, shift_width: int) -> str:
    return indent + " " * shift_width


def decrease_indent(indent: str, shift_width: int) -> str:
    if indent.endswith("\t"):
        return indent[:-1]
    trimmed = indent
    removed = 0
    while removed < shift_width and trimmed.endswith(" "):
        trimmed = trimmed[:-1]
        removed += 1
    return trimmed


def matching_indent_for_closer(
    document: BufferDocument, pos: Cursor, closer: str
) -> Optional[int]:
    """Indent width of the line holding the opener matched by ``closer``.

    The scan walks backwards from the position before ``pos``.
    """

    opener = CLOSERS.get(closer)
    if opener is None:
        return None
    depth = 0
    cursor: Optional[Cursor] = pos
    while True:
        cursor = document.prev_pos(cursor) if cursor is not None else None
        if cursor is None:
            return None
        ch = document.char_at(*cursor)
        if ch == closer:
            depth += 1
        elif ch == opener:
            if depth == 0:
                return len(leading_whitespace(document.get_line(cursor[0])))
            depth -= 1


def indent_for_split(
    document: BufferDocument, pos: Cursor, options: IndentOptions
) -> str:
    """Indent for the new line created by splitting the line at ``pos``."""

    row, col = pos
    line = document.get_line(row)
    left, right = line[:col], line[col:]
    indent = leading_whitespace(left)
    if should_increase_indent(left, options):
        return increase_indent(indent, options.shift_width)
    if should_decrease_indent(right):
        target = matching_indent_for_closer(document, pos, right.lstrip()[0])
        if target is not None:
            return " " * target
        return decrease_indent(indent, options.shift_width)
    return indent


def indent_for_line_above(
    document: BufferDocument, row: int, options: IndentOptions
) -> str:
    line = document.get_line(row)
    indent = leading_whitespace(line)
    if should_decrease_indent(line):
        closer_col = len(indent)
        target = matching_indent_for_closer(document, (row, closer_col), line[closer_col])
        if target is not None:
            return " " * target
        return decrease_indent(indent, options.shift_width)
    return indent


def indent_for_line_below(
    document: BufferDocument, row: int, options: IndentOptions
) -> str:
    line = document.get_line(row)
    indent = leading_whitespace(line)
    if should_increase_indent(line, options):
        return increase_indent(indent, options.shift_width)
    return indent


__all__ = [
    "IndentOptions",
    "decrease_indent",
    "increase_indent",
    "indent_for_line_above",
    "indent_for_line_below",
    "indent_for_split",
    "leading_whitespace",
    "matching_indent_for_closer",
    "should_decrease_indent",
    "should_increase_indent",
]

"""Character classes and index helpers shared by motions and edits."""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from .state import Cursor

UNDO_BREAK_PUNCTUATION = frozenset(".,;:!?()[]{}")


class CharClass(Enum):
    SPACE = "space"
    WORD = "word"
    PUNCT = "punct"


def char_class(ch: str) -> CharClass:
    if ch.isspace():
        return CharClass.SPACE
    if ch.isalnum() or ch == "_":
        return CharClass.WORD
    return CharClass.PUNCT


def is_undo_break_char(ch: str) -> bool:
    """Characters that start a fresh undo step while typing."""

    return ch.isspace() or ch in UNDO_BREAK_PUNCTUATION


def char_to_byte_idx(line: str, char_idx: int) -> int:
    """UTF-8 byte offset of character ``char_idx``; clamps to the line end."""

    if char_idx <= 0:
        return 0
    return len(line[:char_idx].encode("utf-8"))


def byte_to_char_idx(line: str, byte_idx: int) -> int:
    """Character index containing ``byte_idx``; never splits a character."""

    if byte_idx <= 0:
        return 0
    encoded = line.encode("utf-8")
    if byte_idx >= len(encoded):
        return len(line)
    return len(encoded[:byte_idx].decode("utf-8", errors="ignore"))


def normalize_range(a: Cursor, b: Cursor) -> Tuple[Cursor, Cursor]:
    """Order two positions in row-major order."""

    return (a, b) if a <= b else (b, a)


__all__ = [
    "CharClass",
    "UNDO_BREAK_PUNCTUATION",
    "byte_to_char_idx",
    "char_class",
    "char_to_byte_idx",
    "is_undo_break_char",
    "normalize_range",
]

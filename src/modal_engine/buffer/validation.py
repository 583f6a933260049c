"""Cursor clamping shared across buffer services."""

from __future__ import annotations

from .document import BufferDocument
from .state import Cursor

# Modes that may rest one column past the last character.
PAST_END_MODES = frozenset({"insert"})


def clamp_cursor(document: BufferDocument, cursor: Cursor, *, mode: str) -> Cursor:
    """Clamp ``cursor`` to the bounds ``mode`` allows.

    Insert mode may sit right after the last character; every other mode
    stays on a character (column 0 on an empty line).
    """

    return document.clamp(cursor, past_end=mode in PAST_END_MODES)


def is_valid_cursor(document: BufferDocument, cursor: Cursor, *, mode: str) -> bool:
    return clamp_cursor(document, cursor, mode=mode) == cursor


__all__ = ["PAST_END_MODES", "clamp_cursor", "is_valid_cursor"]

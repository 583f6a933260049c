"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from .state import Cursor, Selection


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    text: str
    cursor: Cursor
    selection: Optional[Selection]
    version: int = 0
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SyntaxSpan:
    """Row-local highlight span covering columns ``start..end`` (end exclusive)."""

    start: int
    end: int
    kind: str


SpanMap = Dict[int, List[SyntaxSpan]]


class SyntaxHighlighter(Protocol):
    """Collaborator that classifies text for rendering.

    Implementations receive every line, the visible row window and the edit
    counter so they can cache results between edits.
    """

    def highlight(
        self, lines: Sequence[str], first_row: int, last_row: int, version: int
    ) -> Optional[Mapping[int, Iterable[SyntaxSpan]]]:
        ...


def normalize_spans(
    raw: Optional[Mapping[int, Iterable[SyntaxSpan]]], line_count: int
) -> SpanMap:
    """Sort spans per row and drop empty, out-of-range or overlapping ones."""

    result: SpanMap = {}
    if not raw:
        return result
    for row, spans in raw.items():
        if not 0 <= row < line_count:
            continue
        cleaned: List[SyntaxSpan] = []
        last_end = 0
        for span in sorted(spans, key=lambda item: (item.start, item.end)):
            if span.end <= span.start or span.start < last_end:
                continue
            cleaned.append(span)
            last_end = span.end
        if cleaned:
            result[row] = cleaned
    return result


__all__ = [
    "BufferMirror",
    "SpanMap",
    "SyntaxHighlighter",
    "SyntaxSpan",
    "normalize_spans",
]

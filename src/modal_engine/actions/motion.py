"""Cursor motions shared by Normal and Visual mode.

Every motion takes the session context plus an optional count, moves the
active buffer's cursor and reports how the move should be read by a pending
operator. Motions may leave the cursor one column past the line end; the
mode manager clamps it for the active mode afterwards.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional

from modal_engine.buffer.document import BufferDocument
from modal_engine.buffer.state import Cursor
from modal_engine.modes.base_mode import ModeContext
from modal_engine.modes.pending import FindSpec, MotionKind, MotionOutcome
from modal_engine.motions import (
    find_char_backward,
    find_char_forward,
    first_non_blank,
    match_bracket,
    next_big_word_end,
    next_big_word_start,
    next_word_end,
    next_word_start,
    prev_big_word_start,
    prev_word_start,
)

from .search import repeat_search

MotionFn = Callable[[ModeContext, Optional[int]], MotionOutcome]
StepFn = Callable[[BufferDocument, Cursor], Optional[Cursor]]

EXCLUSIVE = MotionKind.EXCLUSIVE
INCLUSIVE = MotionKind.INCLUSIVE
LINEWISE = MotionKind.LINEWISE
NO_PREVIOUS_FIND = "No previous find"


def _times(count: Optional[int]) -> int:
    return max(count or 1, 1)


def move_left(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    row, col = context.buffer.cursor
    context.buffer.move_to((row, max(col - _times(count), 0)))
    return MotionOutcome(EXCLUSIVE)


def move_right(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    buffer = context.buffer
    row, col = buffer.cursor
    buffer.move_to((row, min(col + _times(count), buffer.document.line_len(row))))
    return MotionOutcome(EXCLUSIVE)


def _move_rows(context: ModeContext, delta: int) -> MotionOutcome:
    buffer = context.buffer
    row, col = buffer.cursor
    target = max(0, min(row + delta, buffer.document.line_count - 1))
    buffer.move_to((target, min(col, buffer.document.line_len(target))))
    return MotionOutcome(LINEWISE)


def move_down(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    return _move_rows(context, _times(count))


def move_up(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    return _move_rows(context, -_times(count))


def line_start(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    del count
    context.buffer.move_to((context.buffer.state.row, 0))
    return MotionOutcome(EXCLUSIVE)


def line_first_non_blank(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    del count
    row = context.buffer.state.row
    context.buffer.move_to((row, first_non_blank(context.buffer.document, row)))
    return MotionOutcome(EXCLUSIVE)


def line_end(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    """``$``: last character of the line, ``count - 1`` lines down."""

    buffer = context.buffer
    row = min(buffer.state.row + _times(count) - 1, buffer.document.line_count - 1)
    buffer.move_to((row, max(buffer.document.line_len(row) - 1, 0)))
    return MotionOutcome(INCLUSIVE)


def goto_first_line(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    context.buffer.move_to(((count or 1) - 1, 0))
    return MotionOutcome(LINEWISE)


def goto_last_line(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    """``G`` jumps to the last line, ``{count}G`` to line ``count``."""

    last = context.buffer.document.line_count - 1
    row = last if count is None else max(0, min(count - 1, last))
    context.buffer.move_to((row, 0))
    return MotionOutcome(LINEWISE)


def goto_line(context: ModeContext, line: int) -> None:
    """Move to 1-based ``line`` (clamped), as ``:<number>`` does."""

    last = context.buffer.document.line_count - 1
    row = max(0, min(line - 1, last))
    context.buffer.move_to((row, first_non_blank(context.buffer.document, row)))


def _word_motion(step: StepFn, kind: MotionKind, *, stop_at_line_end: bool = False) -> MotionFn:
    def motion(context: ModeContext, count: Optional[int]) -> MotionOutcome:
        document = context.buffer.document
        position = context.buffer.cursor
        operator_pending = context.pending.operator is not None
        for _ in range(_times(count)):
            target = step(document, position)
            if target is None:
                if stop_at_line_end and operator_pending:
                    # Operators on the last word still reach the line end.
                    position = (position[0], document.line_len(position[0]))
                break
            if stop_at_line_end and operator_pending and target[0] > position[0]:
                position = (position[0], document.line_len(position[0]))
                break
            position = target
        context.buffer.move_to(position)
        return MotionOutcome(kind)

    return motion


word_forward = _word_motion(next_word_start, EXCLUSIVE, stop_at_line_end=True)
word_end = _word_motion(next_word_end, INCLUSIVE)
word_back = _word_motion(prev_word_start, EXCLUSIVE)
big_word_forward = _word_motion(next_big_word_start, EXCLUSIVE, stop_at_line_end=True)
big_word_end = _word_motion(next_big_word_end, INCLUSIVE)
big_word_back = _word_motion(prev_big_word_start, EXCLUSIVE)


def bracket_match(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    del count
    target = match_bracket(context.buffer.document, context.buffer.cursor)
    if target is None:
        return MotionOutcome(INCLUSIVE, found=False)
    context.buffer.move_to(target)
    return MotionOutcome(INCLUSIVE)


def run_find(
    context: ModeContext,
    spec: FindSpec,
    count: Optional[int],
    *,
    label: Optional[str] = None,
) -> MotionOutcome:
    """Run a character find; forward finds are inclusive, backward exclusive."""

    kind = EXCLUSIVE if spec.reverse else INCLUSIVE
    finder = find_char_backward if spec.reverse else find_char_forward
    document = context.buffer.document
    position = context.buffer.cursor
    times = _times(count)
    for index in range(times):
        target = finder(
            document,
            position,
            spec.char,
            until=spec.until and index == times - 1,
            cross_line=context.settings.find_cross_line,
        )
        if target is None:
            return MotionOutcome(
                kind,
                found=False,
                message=f"Pattern not found: {label or spec.label}",
            )
        position = target
    context.buffer.move_to(position)
    return MotionOutcome(kind, settles=True)


def repeat_find(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    spec = context.last_find
    if spec is None:
        return MotionOutcome(EXCLUSIVE, found=False, message=NO_PREVIOUS_FIND)
    return run_find(context, spec, count)


def repeat_find_reverse(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    spec = context.last_find
    if spec is None:
        return MotionOutcome(EXCLUSIVE, found=False, message=NO_PREVIOUS_FIND)
    inverted = spec.inverted()
    return run_find(context, inverted, count, label=inverted.label)


def search_next(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    return repeat_search(context, count)


def search_previous(context: ModeContext, count: Optional[int]) -> MotionOutcome:
    return repeat_search(context, count, invert=True)


MOTIONS: Dict[str, MotionFn] = {
    "h": move_left,
    "LEFT": move_left,
    "l": move_right,
    "RIGHT": move_right,
    "j": move_down,
    "DOWN": move_down,
    "k": move_up,
    "UP": move_up,
    "0": line_start,
    "HOME": line_start,
    "^": line_first_non_blank,
    "$": line_end,
    "END": line_end,
    "w": word_forward,
    "W": big_word_forward,
    "b": word_back,
    "B": big_word_back,
    "e": word_end,
    "E": big_word_end,
    "G": goto_last_line,
    "%": bracket_match,
    ";": repeat_find,
    ",": repeat_find_reverse,
    "n": search_next,
    "N": search_previous,
}


# -- insert-mode cursor keys ---------------------------------------------


def insert_left(context: ModeContext) -> None:
    """Left arrow in Insert mode wraps to the end of the previous line."""

    buffer = context.buffer
    row, col = buffer.cursor
    if col > 0:
        buffer.move_to((row, col - 1))
    elif row > 0:
        buffer.move_to((row - 1, buffer.document.line_len(row - 1)))


def insert_right(context: ModeContext) -> None:
    buffer = context.buffer
    row, col = buffer.cursor
    if col < buffer.document.line_len(row):
        buffer.move_to((row, col + 1))
    elif row + 1 < buffer.document.line_count:
        buffer.move_to((row + 1, 0))


def insert_line_end(context: ModeContext) -> None:
    row = context.buffer.state.row
    context.buffer.move_to((row, context.buffer.document.line_len(row)))


def insert_word_left(context: ModeContext) -> None:
    target = prev_word_start(context.buffer.document, context.buffer.cursor)
    if target is not None:
        context.buffer.move_to(target)


def insert_word_right(context: ModeContext) -> None:
    target = next_word_start(context.buffer.document, context.buffer.cursor)
    if target is not None:
        context.buffer.move_to(target)


__all__ = [
    "MOTIONS",
    "MotionFn",
    "NO_PREVIOUS_FIND",
    "goto_first_line",
    "goto_last_line",
    "goto_line",
    "insert_left",
    "insert_line_end",
    "insert_right",
    "insert_word_left",
    "insert_word_right",
    "line_end",
    "line_start",
    "move_down",
    "move_left",
    "move_right",
    "move_up",
    "repeat_find",
    "repeat_find_reverse",
    "run_find",
]

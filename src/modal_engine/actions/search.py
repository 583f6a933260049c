"""Literal substring search submitted from the ``/`` and ``?`` prompts."""

from __future__ import annotations

from typing import Optional

from modal_engine.modes.base_mode import ModeContext
from modal_engine.modes.pending import MotionKind, MotionOutcome
from modal_engine.modes.prompt import SearchSpec
from modal_engine.motions import search_backward, search_forward
from modal_engine.runtime import telemetry

NO_PREVIOUS_SEARCH = "No previous search"


def _jump(context: ModeContext, spec: SearchSpec, count: Optional[int]) -> MotionOutcome:
    document = context.buffer.document
    finder = search_backward if spec.reverse else search_forward
    position = context.buffer.cursor
    for _ in range(max(count or 1, 1)):
        found = finder(
            document,
            position,
            spec.pattern,
            cross_line=context.settings.find_cross_line,
        )
        if found is None:
            return MotionOutcome(
                MotionKind.EXCLUSIVE,
                found=False,
                message=f"Pattern not found: {spec.pattern}",
            )
        position = found
    context.buffer.move_to(position)
    return MotionOutcome(MotionKind.EXCLUSIVE)


def execute_search(
    context: ModeContext, pattern: str, *, reverse: bool = False
) -> MotionOutcome:
    """Search for ``pattern``; an empty pattern reuses the last one."""

    if not pattern:
        if context.search.last is None:
            return MotionOutcome(
                MotionKind.EXCLUSIVE, found=False, message=NO_PREVIOUS_SEARCH
            )
        pattern = context.search.last.pattern
    else:
        context.search.history.push(pattern)
    spec = SearchSpec(pattern=pattern, reverse=reverse)
    context.search.last = spec
    outcome = _jump(context, spec, None)
    telemetry.record_event(
        "search.execute",
        level="debug",
        data={"pattern": pattern, "reverse": reverse, "found": outcome.found},
    )
    return outcome


def repeat_search(
    context: ModeContext, count: Optional[int], *, invert: bool = False
) -> MotionOutcome:
    """``n`` repeats the last search; ``N`` (``invert``) runs it the other way."""

    last = context.search.last
    if last is None:
        return MotionOutcome(
            MotionKind.EXCLUSIVE, found=False, message=NO_PREVIOUS_SEARCH
        )
    spec = SearchSpec(pattern=last.pattern, reverse=last.reverse != invert)
    return _jump(context, spec, count)


__all__ = ["NO_PREVIOUS_SEARCH", "execute_search", "repeat_search"]

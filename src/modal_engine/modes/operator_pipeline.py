"""Operator composition: ``d``/``y``/``c`` bound to motions and text objects."""

from __future__ import annotations

from typing import Optional

from modal_engine.actions.motion import run_find
from modal_engine.buffer.indent import leading_whitespace
from modal_engine.buffer.registers import RegisterShape, extract_lines, extract_range
from modal_engine.buffer.state import Cursor
from modal_engine.buffer.text import normalize_range
from modal_engine.motions import TextObjectRange, resolve_text_object
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, ModeContext, ModeResult
from .pending import (
    FindPending,
    FindSpec,
    MotionKind,
    MotionOutcome,
    Operator,
    OperatorPending,
    TextObjectKind,
)
from .selection import VisualKind

NO_TEXT_OBJECT = "No text object"


class OperatorPipeline:
    """Applies a pending operator once its range is known.

    ``start`` arms the operator; the mode manager calls ``complete_motion``
    after a motion key moved the cursor, and the find/text-object stages call
    ``complete_find``/``complete_textobject`` directly.
    """

    def __init__(self, context: ModeContext) -> None:
        self.context = context
        self.logger = telemetry.get_logger("modal_engine.modes.operator")

    # -- arming ------------------------------------------------------------

    def start(self, op: Operator, count: Optional[int]) -> ModeResult:
        pending = self.context.pending
        current = pending.operator
        if current is not None:
            pending.operator = None
            if current.op is op:
                total = current.count * (count or 1)
                row = self.context.buffer.state.row
                last = min(row + total - 1, self.context.buffer.document.line_count - 1)
                return self.apply_lines(op, row, last)
            return ModeResult(consumed=True, status="operator_cancel")
        pending.operator = OperatorPending(
            op=op, anchor=self.context.buffer.cursor, count=count or 1
        )
        return ModeResult(consumed=True, status="operator_pending")

    def motion_count(self, count: Optional[int]) -> Optional[int]:
        """Multiply a motion count with the count typed before the operator."""

        pending = self.context.pending.operator
        if pending is None or (count is None and pending.count == 1):
            return count
        return pending.count * (count or 1)

    def read_motion(self, outcome: MotionOutcome) -> ModeResult:
        """Turn a motion outcome into a mode result; a miss drops the operator."""

        if not outcome.found:
            self.context.pending.operator = None
            return ModeResult(consumed=True, status="miss", message=outcome.message)
        pending = self.context.pending.operator
        if (
            outcome.settles
            and pending is not None
            and self.context.buffer.cursor == pending.anchor
        ):
            self.context.pending.operator = None
            return ModeResult(consumed=True, status="noop", message=outcome.message)
        return ModeResult(consumed=True, message=outcome.message, motion=outcome.kind)

    # -- completion --------------------------------------------------------

    def complete_motion(self, kind: MotionKind) -> ModeResult:
        pending = self.context.pending.operator
        if pending is None:
            return ModeResult(consumed=True)
        buffer = self.context.buffer
        cursor = buffer.cursor
        anchor = pending.anchor
        if kind is MotionKind.LINEWISE:
            self.context.pending.operator = None
            first, last = sorted((anchor[0], cursor[0]))
            return self.apply_lines(pending.op, first, last)
        if cursor == anchor and kind is MotionKind.EXCLUSIVE:
            # Nothing covered yet; keep waiting for a motion that moves.
            return ModeResult(consumed=True, status="operator_pending")
        self.context.pending.operator = None
        start, end = normalize_range(anchor, cursor)
        if kind is MotionKind.EXCLUSIVE:
            end = buffer.document.prev_pos(end) or end
        return self.apply_range(pending.op, start, end)

    def complete_find(self, key: KeyInput) -> ModeResult:
        """Finish ``f``/``t``/``F``/``T`` with the target character in ``key``."""

        pending: Optional[FindPending] = self.context.pending.find
        self.context.pending.find = None
        char = key.char
        if pending is None or char is None:
            self.context.pending.operator = None
            return ModeResult(consumed=True, status="cancel")
        spec = FindSpec(char=char, until=pending.until, reverse=pending.reverse)
        outcome = run_find(self.context, spec, pending.count)
        if outcome.found:
            self.context.last_find = spec
        return self.read_motion(outcome)

    def complete_textobject(self, key: KeyInput, mode_name: str) -> ModeResult:
        kind = self.context.pending.textobj
        self.context.pending.textobj = None
        buffer = self.context.buffer
        char = key.char
        found: Optional[TextObjectRange] = None
        if char is not None:
            found = resolve_text_object(
                buffer.document,
                buffer.cursor,
                char,
                around=kind is TextObjectKind.AROUND,
            )
        if VisualKind.from_mode(mode_name) is not None:
            if found is None:
                return ModeResult(consumed=True, message=NO_TEXT_OBJECT)
            if not found.empty:
                self.context.visual.anchor = found.start
                buffer.move_to(found.end, past_end=False)
            return ModeResult(consumed=True, status="visual_select")
        pending = self.context.pending.operator
        self.context.pending.operator = None
        if found is None:
            return ModeResult(consumed=True, status="miss", message=NO_TEXT_OBJECT)
        if pending is None:
            return ModeResult(consumed=True)
        return self.apply_textobject(pending.op, found)

    # -- application -------------------------------------------------------

    def apply_range(self, op: Operator, start: Cursor, end: Cursor) -> ModeResult:
        """Apply ``op`` to the inclusive character range ``start..=end``."""

        buffer = self.context.buffer
        with telemetry.span(
            "operator::apply",
            component=True,
            metadata={"operator": op.value, "shape": RegisterShape.CHAR.value},
        ):
            text = extract_range(buffer.document, start, end)
            self.context.register.yank(text, RegisterShape.CHAR)
            if op is Operator.YANK:
                buffer.move_to(start, past_end=False)
                return ModeResult(consumed=True, status="yank")
            if op is Operator.CHANGE:
                buffer.coalescing = True
            buffer.delete_range(start, end)
        if op is Operator.CHANGE:
            return ModeResult(consumed=True, switch_to="insert", status="change")
        return ModeResult(consumed=True, status="delete")

    def apply_lines(self, op: Operator, first_row: int, last_row: int) -> ModeResult:
        """Linewise ``op`` over rows ``first_row..=last_row``."""

        buffer = self.context.buffer
        with telemetry.span(
            "operator::apply",
            component=True,
            metadata={"operator": op.value, "shape": RegisterShape.LINE.value},
        ):
            text = extract_lines(buffer.document, first_row, last_row)
            self.context.register.yank(text, RegisterShape.LINE)
            if op is Operator.YANK:
                if buffer.state.row != first_row:
                    buffer.move_to((first_row, 0), past_end=False)
                return ModeResult(consumed=True, status="yank")
            if op is Operator.DELETE:
                buffer.delete_lines(first_row, last_row)
                return ModeResult(consumed=True, status="delete")
            indent = leading_whitespace(buffer.document.get_line(first_row))
            buffer.coalescing = True
            buffer.replace_lines(first_row, last_row, [indent])
            buffer.move_to((first_row, len(indent)))
        return ModeResult(consumed=True, switch_to="insert", status="change")

    def apply_textobject(self, op: Operator, found: TextObjectRange) -> ModeResult:
        if found.empty:
            if op is Operator.CHANGE:
                self.context.buffer.move_to(found.start)
                return ModeResult(consumed=True, switch_to="insert", status="change")
            return ModeResult(consumed=True, status="noop")
        return self.apply_range(op, found.start, found.end)


def pipeline_for(context: ModeContext) -> OperatorPipeline:
    """Shared pipeline stored on the context so every mode uses one instance."""

    pipeline = context.extras.get("operator_pipeline")
    if not isinstance(pipeline, OperatorPipeline):
        pipeline = OperatorPipeline(context)
        context.extras["operator_pipeline"] = pipeline
    return pipeline


__all__ = ["NO_TEXT_OBJECT", "OperatorPipeline", "pipeline_for"]

"""Visual modes: character, line and block selections."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from modal_engine.actions import visual as visual_actions
from modal_engine.actions.motion import MOTIONS, MotionFn, goto_first_line
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .operator_pipeline import pipeline_for
from .pending import FindPending, TextObjectKind
from .selection import VisualKind, VisualSelection

Handler = Callable[[KeyInput], ModeResult]

_KIND_KEYS = {"v": VisualKind.CHAR, "V": VisualKind.LINE, "ctrl+v": VisualKind.BLOCK}
_VERTICAL = frozenset({"j", "k", "UP", "DOWN"})


class VisualMode(Mode):
    """Character-wise Visual mode; line and block modes only change ``kind``."""

    name = VisualKind.CHAR.value
    kind = VisualKind.CHAR

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.visual")
        self.pipeline = pipeline_for(context)
        self._handlers: Dict[str, Handler] = {
            "ESC": self._leave,
            "o": self._swap_anchor,
            "y": self._yank,
            "d": self._delete,
            "x": self._delete,
            "DELETE": self._delete,
            "c": self._change,
            "p": self._put,
            "P": self._put,
            "~": self._case,
            "u": self._case,
            "U": self._case,
            ">": self._shift,
            "<": self._shift,
            "I": self._block_insert,
            "A": self._block_insert,
            "i": self._textobject,
            "a": self._textobject,
            "f": self._find,
            "t": self._find,
            "F": self._find,
            "T": self._find,
            "g": self._g_prefix,
            "v": self._switch_kind,
            "V": self._switch_kind,
            "ctrl+v": self._switch_kind,
        }

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        if self.context.visual.anchor is None:
            self.context.visual.anchor = self.context.buffer.cursor
        self.context.set_status(self.kind.label)
        self.context.bus.emit("visual.enter", self.kind.value)

    def on_exit(self, next_mode: Optional[str]) -> None:
        if VisualKind.from_mode(next_mode) is None:
            self.context.visual.reset()
            self.context.reset_pending()

    def selection(self) -> VisualSelection:
        cursor = self.context.buffer.cursor
        anchor = self.context.visual.anchor
        return VisualSelection(
            kind=self.kind, anchor=anchor if anchor is not None else cursor, cursor=cursor
        )

    def handle_key(self, key: KeyInput) -> ModeResult:
        pending = self.context.pending
        char = key.char
        if pending.g:
            pending.g = False
            if char == "g":
                return self._move(goto_first_line, pending.take_count(), key.token)
        if char is not None and char.isdigit() and pending.push_digit(char):
            return ModeResult(consumed=True, status="count")
        token = key.token
        handler = self._handlers.get(token)
        if handler is not None:
            return handler(key)
        motion = MOTIONS.get(token)
        if motion is not None:
            return self._move(motion, pending.take_count(), token)
        pending.clear()
        return ModeResult(consumed=False, status="miss")

    def _move(self, motion: MotionFn, count: Optional[int], token: str) -> ModeResult:
        if token in ("$", "END"):
            self.context.visual.to_eol = True
        elif token not in _VERTICAL:
            self.context.visual.to_eol = False
        return self.pipeline.read_motion(motion(self.context, count))

    # -- selection management ---------------------------------------------

    def _leave(self, key: KeyInput) -> ModeResult:
        del key
        self.context.visual.remember(self.kind, self.context.buffer.cursor)
        return ModeResult(consumed=True, switch_to="normal", status="visual_exit")

    def _switch_kind(self, key: KeyInput) -> ModeResult:
        target = _KIND_KEYS[key.token]
        if target is self.kind:
            return self._leave(key)
        self.context.pending.clear()
        return ModeResult(consumed=True, switch_to=target.value, status="visual")

    def _swap_anchor(self, key: KeyInput) -> ModeResult:
        del key
        visual = self.context.visual
        buffer = self.context.buffer
        cursor = buffer.cursor
        anchor = visual.anchor if visual.anchor is not None else cursor
        visual.anchor = cursor
        buffer.move_to(anchor, past_end=False)
        return ModeResult(consumed=True, status="visual_swap")

    def _textobject(self, key: KeyInput) -> ModeResult:
        self.context.pending.textobj = (
            TextObjectKind.INNER if key.key == "i" else TextObjectKind.AROUND
        )
        return ModeResult(consumed=True, status="textobj_pending")

    def _find(self, key: KeyInput) -> ModeResult:
        count = self.context.pending.take_count()
        self.context.pending.find = FindPending(
            until=key.key in ("t", "T"),
            reverse=key.key in ("F", "T"),
            count=count or 1,
        )
        return ModeResult(consumed=True, status="find_pending")

    def _g_prefix(self, key: KeyInput) -> ModeResult:
        del key
        self.context.pending.g = True
        return ModeResult(consumed=True, status="g_pending")

    # -- edits ------------------------------------------------------------

    def _yank(self, key: KeyInput) -> ModeResult:
        del key
        return visual_actions.yank_selection(self.context, self.selection())

    def _delete(self, key: KeyInput) -> ModeResult:
        del key
        return visual_actions.delete_selection(self.context, self.selection())

    def _change(self, key: KeyInput) -> ModeResult:
        del key
        return visual_actions.change_selection(self.context, self.selection())

    def _put(self, key: KeyInput) -> ModeResult:
        del key
        return visual_actions.put_selection(self.context, self.selection())

    def _case(self, key: KeyInput) -> ModeResult:
        return visual_actions.change_case(self.context, self.selection(), key.key)

    def _shift(self, key: KeyInput) -> ModeResult:
        return visual_actions.shift_selection(
            self.context, self.selection(), right=key.key == ">"
        )

    def _block_insert(self, key: KeyInput) -> ModeResult:
        if self.kind is not VisualKind.BLOCK:
            return ModeResult(consumed=True, status="noop")
        return visual_actions.start_block_insert(
            self.context, self.selection(), append=key.key == "A"
        )


class VisualLineMode(VisualMode):
    name = VisualKind.LINE.value
    kind = VisualKind.LINE


class VisualBlockMode(VisualMode):
    name = VisualKind.BLOCK.value
    kind = VisualKind.BLOCK


__all__ = ["VisualBlockMode", "VisualLineMode", "VisualMode"]

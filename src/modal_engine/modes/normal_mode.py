"""Normal mode: counts, operators, motions and the commands that enter other modes."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from modal_engine.actions import core as core_actions
from modal_engine.actions.motion import MOTIONS, MotionFn, goto_first_line
from modal_engine.buffer.registers import RegisterShape
from modal_engine.motions import first_non_blank
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .operator_pipeline import pipeline_for
from .pending import FindPending, Operator, TextObjectKind
from .prompt import PromptKind, PromptState
from .selection import VisualKind

Handler = Callable[[KeyInput, Optional[int]], ModeResult]

NO_PREVIOUS_VISUAL = "No previous visual selection"


class NormalMode(Mode):
    name = "normal"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.normal")
        self.pipeline = pipeline_for(context)
        self._handlers: Dict[str, Handler] = {
            "ESC": self._cancel,
            "d": self._operator,
            "y": self._operator,
            "c": self._operator,
            "i": self._insert_before,
            "a": self._insert_after,
            "I": self._insert_line_start,
            "A": self._insert_line_end,
            "o": self._open_below,
            "O": self._open_above,
            "x": self._delete_chars,
            "DELETE": self._delete_chars,
            "p": self._paste,
            "P": self._paste,
            "u": self._undo,
            "ctrl+z": self._undo,
            "ctrl+r": self._redo,
            "U": self._undo_line,
            "v": self._visual,
            "V": self._visual,
            "ctrl+v": self._visual,
            ":": self._prompt,
            "/": self._prompt,
            "?": self._prompt,
            "f": self._find,
            "t": self._find,
            "F": self._find,
            "T": self._find,
            "g": self._g_prefix,
            ".": self._repeat,
            "ctrl+s": self._save,
            "ctrl+q": self._quit,
        }

    def on_enter(self, previous: Optional[str]) -> None:
        if previous == "insert" or VisualKind.from_mode(previous) is not None:
            self.context.set_status("-- NORMAL --")

    def handle_key(self, key: KeyInput) -> ModeResult:
        pending = self.context.pending
        char = key.char
        if pending.g:
            pending.g = False
            if char == "g":
                return self.run_motion(goto_first_line, pending.take_count())
            if char == "v":
                pending.take_count()
                return self._reselect()
        if char is not None and char.isdigit() and pending.push_digit(char):
            return ModeResult(consumed=True, status="count")
        token = key.token
        handler = self._handlers.get(token)
        if handler is not None:
            return handler(key, pending.take_count())
        motion = MOTIONS.get(token)
        if motion is not None:
            return self.run_motion(motion, pending.take_count())
        pending.clear()
        return ModeResult(consumed=False, status="miss")

    def run_motion(self, motion: MotionFn, count: Optional[int]) -> ModeResult:
        outcome = motion(self.context, self.pipeline.motion_count(count))
        return self.pipeline.read_motion(outcome)

    # -- pending state -----------------------------------------------------

    def _cancel(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        self.context.reset_pending()
        return ModeResult(consumed=True, status="cancel")

    def _operator(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        return self.pipeline.start(Operator(key.key), count)

    def _find(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        self.context.pending.find = FindPending(
            until=key.key in ("t", "T"),
            reverse=key.key in ("F", "T"),
            count=self.pipeline.motion_count(count) or 1,
        )
        return ModeResult(consumed=True, status="find_pending")

    def _g_prefix(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key
        self.context.pending.g = True
        if count is not None:
            # Keep the count for ``{count}gg``.
            self.context.pending.count_keys = str(count)
        return ModeResult(consumed=True, status="g_pending")

    def _reselect(self) -> ModeResult:
        last = self.context.visual.last
        if last is None:
            return ModeResult(consumed=True, status="miss", message=NO_PREVIOUS_VISUAL)
        self.context.pending.operator = None
        self.context.visual.anchor = self.context.buffer.document.clamp(
            last.anchor, past_end=False
        )
        self.context.buffer.move_to(last.cursor, past_end=False)
        return ModeResult(consumed=True, switch_to=last.kind.value, status="visual")

    # -- entering other modes ----------------------------------------------

    def _enter_insert(self) -> ModeResult:
        self.context.pending.clear()
        return ModeResult(consumed=True, switch_to="insert", status="insert")

    def _insert_before(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        if self.context.pending.operator is not None:
            self.context.pending.textobj = TextObjectKind.INNER
            return ModeResult(consumed=True, status="textobj_pending")
        return self._enter_insert()

    def _insert_after(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        if self.context.pending.operator is not None:
            self.context.pending.textobj = TextObjectKind.AROUND
            return ModeResult(consumed=True, status="textobj_pending")
        buffer = self.context.buffer
        row, col = buffer.cursor
        if col < buffer.document.line_len(row):
            buffer.move_to((row, col + 1))
        return self._enter_insert()

    def _insert_line_start(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        buffer = self.context.buffer
        row = buffer.state.row
        buffer.move_to((row, first_non_blank(buffer.document, row)))
        return self._enter_insert()

    def _insert_line_end(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        buffer = self.context.buffer
        row = buffer.state.row
        buffer.move_to((row, buffer.document.line_len(row)))
        return self._enter_insert()

    def _open_below(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        buffer = self.context.buffer
        buffer.coalescing = True
        buffer.open_line_below(self.context.indent_options())
        return self._enter_insert()

    def _open_above(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        buffer = self.context.buffer
        buffer.coalescing = True
        buffer.open_line_above(self.context.indent_options())
        return self._enter_insert()

    def _visual(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del count
        kinds = {"v": VisualKind.CHAR, "V": VisualKind.LINE, "ctrl+v": VisualKind.BLOCK}
        self.context.pending.clear()
        self.context.visual.anchor = self.context.buffer.cursor
        self.context.visual.to_eol = False
        return ModeResult(consumed=True, switch_to=kinds[key.token].value, status="visual")

    def _prompt(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del count
        self.context.pending.clear()
        self.context.prompt = PromptState(kind=PromptKind(key.key))
        return ModeResult(consumed=True, switch_to="command", status="prompt")

    # -- edits -------------------------------------------------------------

    def _delete_chars(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key
        buffer = self.context.buffer
        row, col = buffer.cursor
        line = buffer.current_line()
        if col >= len(line):
            changed = buffer.delete_at_cursor()
            return ModeResult(consumed=True, status="delete" if changed else "noop")
        end = min(col + max(count or 1, 1), len(line)) - 1
        self.context.register.yank(line[col : end + 1], RegisterShape.CHAR)
        buffer.delete_range((row, col), (row, end))
        return ModeResult(consumed=True, status="delete")

    def _paste(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        pasted = self.context.buffer.paste(
            self.context.register.get(), after=key.key == "p", count=count or 1
        )
        return ModeResult(consumed=True, status="paste" if pasted else "noop")

    def _undo(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key
        return core_actions.undo_action(self.context, count)

    def _redo(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key
        return core_actions.redo_action(self.context, count)

    def _undo_line(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        return core_actions.undo_line_action(self.context)

    def _repeat(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key
        replay = self.context.extras.get("repeat_last_change")
        if not callable(replay):
            return ModeResult(consumed=True, status="noop")
        return replay(count)

    def _save(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        return core_actions.save_action(self.context)

    def _quit(self, key: KeyInput, count: Optional[int]) -> ModeResult:
        del key, count
        return core_actions.request_quit(self.context)


__all__ = ["NO_PREVIOUS_VISUAL", "NormalMode"]

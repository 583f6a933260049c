"""Insert mode: typed text, auto-indent and block replication."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from modal_engine.actions import core as core_actions
from modal_engine.actions import motion as motion_actions
from modal_engine.buffer.text import is_undo_break_char
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult

Handler = Callable[[KeyInput], ModeResult]


class InsertMode(Mode):
    """Every edit coalesces into one undo step until a break key closes it.

    Cursor keys and ``Enter``/``Backspace``/``Tab`` close the current window
    before they act; so do characters in :func:`is_undo_break_char`.
    """

    name = "insert"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.insert")
        self._handlers: Dict[str, Handler] = {
            "ESC": self._leave,
            "ENTER": self._newline,
            "BACKSPACE": self._backspace,
            "DELETE": self._delete,
            "TAB": self._tab,
            "LEFT": self._cursor(motion_actions.insert_left),
            "RIGHT": self._cursor(motion_actions.insert_right),
            "UP": self._cursor(lambda ctx: motion_actions.move_up(ctx, 1)),
            "DOWN": self._cursor(lambda ctx: motion_actions.move_down(ctx, 1)),
            "HOME": self._cursor(lambda ctx: motion_actions.line_start(ctx, None)),
            "END": self._cursor(motion_actions.insert_line_end),
            "ctrl+z": self._undo,
            "ctrl+r": self._redo,
            "ctrl+s": self._save,
            "ctrl+q": self._quit,
        }

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        # The entering command may already have opened the undo window.
        self.context.buffer.coalescing = True
        self.context.set_status("-- INSERT --")

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        buffer = self.context.buffer
        buffer.coalescing = False
        buffer.history.close_window()
        self.context.block_insert = None

    def handle_key(self, key: KeyInput) -> ModeResult:
        handler = self._handlers.get(key.token)
        if handler is not None:
            return handler(key)
        char = key.char
        if char is None:
            return ModeResult(consumed=False, status="miss")
        self.insert(char)
        return ModeResult(consumed=True, status="insert")

    def insert(self, text: str) -> None:
        buffer = self.context.buffer
        if any(is_undo_break_char(ch) for ch in text):
            self._break()
        block = self.context.block_insert
        if block is not None:
            buffer.block_insert_text(block, text)
        else:
            buffer.insert_char(text)

    def _break(self) -> None:
        self.context.buffer.history.close_window()

    def _cursor(self, move: Callable[[ModeContext], object]) -> Handler:
        def handler(key: KeyInput) -> ModeResult:
            del key
            self._break()
            move(self.context)
            return ModeResult(consumed=True, status="move")

        return handler

    def _leave(self, key: KeyInput) -> ModeResult:
        del key
        return ModeResult(consumed=True, switch_to="normal", status="insert_exit")

    def _newline(self, key: KeyInput) -> ModeResult:
        del key
        self._break()
        buffer = self.context.buffer
        block = self.context.block_insert
        if block is not None:
            self.context.block_insert = None
            buffer.block_split(block)
        else:
            buffer.insert_newline(self.context.indent_options())
        return ModeResult(consumed=True, status="newline")

    def _backspace(self, key: KeyInput) -> ModeResult:
        del key
        self._break()
        buffer = self.context.buffer
        block = self.context.block_insert
        if block is not None:
            changed = buffer.block_backspace(block)
        else:
            changed = buffer.backspace()
        return ModeResult(consumed=True, status="backspace" if changed else "noop")

    def _delete(self, key: KeyInput) -> ModeResult:
        del key
        self._break()
        if self.context.block_insert is not None:
            return ModeResult(consumed=True, status="noop")
        changed = self.context.buffer.delete_at_cursor()
        return ModeResult(consumed=True, status="delete" if changed else "noop")

    def _tab(self, key: KeyInput) -> ModeResult:
        del key
        self._break()
        self.insert(" " * max(self.context.settings.tab_width, 1))
        return ModeResult(consumed=True, status="insert")

    def _undo(self, key: KeyInput) -> ModeResult:
        del key
        return core_actions.undo_action(self.context)

    def _redo(self, key: KeyInput) -> ModeResult:
        del key
        return core_actions.redo_action(self.context)

    def _save(self, key: KeyInput) -> ModeResult:
        del key
        self._break()
        return core_actions.save_action(self.context)

    def _quit(self, key: KeyInput) -> ModeResult:
        del key
        return core_actions.request_quit(self.context)


__all__ = ["InsertMode"]

"""Handlers for the action names that user keymaps may bind.

Handlers are called as ``handler(context, match)``. Most of them replay the
built-in key with the same meaning through the active mode, so a remapped
key behaves exactly like the key it stands for in every mode.
"""

from __future__ import annotations

from typing import Callable, Optional

from modal_engine.buffer.text import char_class
from modal_engine.modes.base_mode import KeyInput, ModeContext, ModeResult

from .core import cycle_buffer
from .motion import insert_word_left, insert_word_right

KeymapHandler = Callable[[ModeContext, object], ModeResult]


def _mode_of(match: object) -> Optional[str]:
    binding = getattr(match, "binding", None)
    return getattr(binding, "mode", None)


def _builtin(context: ModeContext, key: KeyInput) -> ModeResult:
    dispatch = context.extras.get("dispatch_builtin")
    if not callable(dispatch):
        return ModeResult(consumed=False, status="miss")
    result = dispatch(key)
    if isinstance(result, ModeResult):
        return result
    return ModeResult(consumed=True)


def _press(key: str) -> KeymapHandler:
    def handler(context: ModeContext, match: object) -> ModeResult:
        del match
        return _builtin(context, KeyInput(key))

    handler.__name__ = f"press_{key.lower()}"
    return handler


def buffer_next(context: ModeContext, match: object) -> ModeResult:
    del match
    return cycle_buffer(context, 1)


def buffer_prev(context: ModeContext, match: object) -> ModeResult:
    del match
    return cycle_buffer(context, -1)


def move_word_left(context: ModeContext, match: object) -> ModeResult:
    mode = _mode_of(match)
    if mode == "insert":
        context.buffer.history.close_window()
        insert_word_left(context)
        return ModeResult(consumed=True, status="move")
    if mode == "command":
        return ModeResult(consumed=True, status="noop")
    return _builtin(context, KeyInput("b"))


def move_word_right(context: ModeContext, match: object) -> ModeResult:
    mode = _mode_of(match)
    if mode == "insert":
        context.buffer.history.close_window()
        insert_word_right(context)
        return ModeResult(consumed=True, status="move")
    if mode == "command":
        return ModeResult(consumed=True, status="noop")
    return _builtin(context, KeyInput("w"))


def delete_word(context: ModeContext, match: object) -> ModeResult:
    """Delete the word before the cursor (insert mode) or in the prompt."""

    mode = _mode_of(match)
    if mode == "command" and context.prompt is not None:
        prompt = context.prompt
        prompt.text = prompt.text[: _prompt_word_start(prompt.text)]
        return ModeResult(consumed=True, status="editing")
    if mode != "insert":
        return ModeResult(consumed=True, status="noop")
    context.buffer.history.close_window()
    changed = context.buffer.delete_word_before_cursor()
    return ModeResult(consumed=True, status="delete" if changed else "noop")


def delete_line_start(context: ModeContext, match: object) -> ModeResult:
    mode = _mode_of(match)
    if mode == "command" and context.prompt is not None:
        context.prompt.text = ""
        return ModeResult(consumed=True, status="editing")
    if mode != "insert":
        return ModeResult(consumed=True, status="noop")
    context.buffer.history.close_window()
    changed = context.buffer.delete_to_line_start()
    return ModeResult(consumed=True, status="delete" if changed else "noop")


def _prompt_word_start(text: str) -> int:
    start = len(text)
    while start > 0 and text[start - 1].isspace():
        start -= 1
    if start > 0:
        cls = char_class(text[start - 1])
        while start > 0 and char_class(text[start - 1]) is cls:
            start -= 1
    return start


move_left = _press("LEFT")
move_right = _press("RIGHT")
move_up = _press("UP")
move_down = _press("DOWN")
move_line_start = _press("HOME")
move_line_end = _press("END")
backspace = _press("BACKSPACE")
enter = _press("ENTER")
escape = _press("ESC")
tab = _press("TAB")
backtab = _press("BACKTAB")


__all__ = [
    "backspace",
    "backtab",
    "buffer_next",
    "buffer_prev",
    "delete_line_start",
    "delete_word",
    "enter",
    "escape",
    "move_down",
    "move_left",
    "move_line_end",
    "move_line_start",
    "move_right",
    "move_up",
    "move_word_left",
    "move_word_right",
    "tab",
]

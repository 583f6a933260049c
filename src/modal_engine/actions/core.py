"""Core action implementations shared across modes."""

from __future__ import annotations

from typing import Optional

from modal_engine.buffer import BufferIOError
from modal_engine.buffer.files import PathLike
from modal_engine.modes.base_mode import ModeContext, ModeResult

NO_FILE_NAME = "No file name (open with a path)"
QUIT_CONFIRM = "Unsaved changes. Press Ctrl+Q again to quit."
NO_LINE_UNDO = "No line undo"


def any_dirty(context: ModeContext) -> bool:
    return any(buffer.dirty for buffer in context.buffers)


def write_buffer(
    context: ModeContext, path: Optional[PathLike] = None
) -> tuple[bool, str]:
    """Save the active buffer; return ``(ok, status message)``.

    Write failures are reported, never raised.
    """

    try:
        target = context.buffer.save(path)
    except ValueError:
        return False, NO_FILE_NAME
    except BufferIOError as exc:
        return False, str(exc)
    return True, f"Wrote {target}"


def save_action(context: ModeContext) -> ModeResult:
    ok, message = write_buffer(context)
    return ModeResult(
        consumed=True, status="write" if ok else "write_failed", message=message
    )


def request_quit(context: ModeContext) -> ModeResult:
    """Quit, asking for a second press while any buffer has unsaved changes."""

    if any_dirty(context) and not context.quit_confirm:
        context.quit_confirm = True
        return ModeResult(consumed=True, status="quit_confirm", message=QUIT_CONFIRM)
    return ModeResult(consumed=True, status="quit", quit=True)


def undo_action(context: ModeContext, count: Optional[int] = None) -> ModeResult:
    undone = 0
    for _ in range(max(count or 1, 1)):
        if not context.buffer.undo():
            break
        undone += 1
    context.reset_pending()
    return ModeResult(consumed=True, status="undo" if undone else "noop")


def redo_action(context: ModeContext, count: Optional[int] = None) -> ModeResult:
    redone = 0
    for _ in range(max(count or 1, 1)):
        if not context.buffer.redo():
            break
        redone += 1
    context.reset_pending()
    return ModeResult(consumed=True, status="redo" if redone else "noop")


def undo_line_action(context: ModeContext) -> ModeResult:
    if context.buffer.undo_line():
        return ModeResult(consumed=True, status="undo_line")
    return ModeResult(consumed=True, status="noop", message=NO_LINE_UNDO)


def cycle_buffer(context: ModeContext, step: int) -> ModeResult:
    context.switch_buffer(context.active_index + step)
    buffer = context.buffer
    return ModeResult(
        consumed=True,
        status="buffer_switch",
        message=f"[{context.active_index + 1}/{len(context.buffers)}] {buffer.name}",
    )


__all__ = [
    "NO_FILE_NAME",
    "NO_LINE_UNDO",
    "QUIT_CONFIRM",
    "any_dirty",
    "cycle_buffer",
    "redo_action",
    "request_quit",
    "save_action",
    "undo_action",
    "undo_line_action",
    "write_buffer",
]

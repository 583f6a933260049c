"""Actions that evaluate Ex-style command lines."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Callable, Dict, List, Optional

from modal_engine.buffer import Buffer
from modal_engine.buffer.files import PathLike
from modal_engine.modes.base_mode import ModeContext, ModeResult
from modal_engine.runtime import telemetry

from .core import any_dirty, cycle_buffer, write_buffer
from .motion import goto_line

CommandHandler = Callable[[ModeContext, List[str]], ModeResult]

NO_WRITE_SINCE_CHANGE = "No write since last change (add ! to override)"
EDIT_USAGE = "Usage: :e <path>"
SET_USAGE = "Usage: :set findcross|nofindcross|shiftwidth=4|indentcolon"
UNKNOWN_OPTION = "Unknown option"


def _done(status: str, message: Optional[str] = None, *, quit: bool = False) -> ModeResult:
    return ModeResult(
        consumed=True, switch_to="normal", status=status, message=message, quit=quit
    )


def submit_command_line(context: ModeContext, text: str) -> ModeResult:
    """Run one command line; only the first word selects the command."""

    line = text.strip()
    if not line:
        return _done("command_empty")
    if line.isdigit():
        goto_line(context, int(line))
        return _done("command_goto")
    parts = line.split()
    command, args = parts[0], parts[1:]
    handler = _COMMAND_HANDLERS.get(command)
    telemetry.record_event(
        "command.execute",
        level="debug",
        data={"command": command, "args": args, "known": handler is not None},
    )
    if handler is None:
        return _unknown_command(context, command)
    return handler(context, args)


def _unknown_command(context: ModeContext, command: str) -> ModeResult:
    context.bus.emit("command.error", command)
    return _done("command_error", f"Not an editor command: {command}")


def _handle_write(context: ModeContext, args: List[str]) -> ModeResult:
    ok, message = write_buffer(context, args[0] if args else None)
    return _done("command_write" if ok else "command_write_failed", message)


def _handle_quit(
    context: ModeContext, args: List[str], *, force: bool = False
) -> ModeResult:
    del args
    if not force and any_dirty(context):
        return _done("command_quit_blocked", NO_WRITE_SINCE_CHANGE)
    return _done("command_quit", quit=True)


def _handle_wq(
    context: ModeContext, args: List[str], *, force: bool = False
) -> ModeResult:
    ok, message = write_buffer(context, args[0] if args else None)
    if not ok and not force:
        return _done("command_write_failed", message)
    return _done("command_wq", message, quit=True)


def _handle_x(
    context: ModeContext, args: List[str], *, force: bool = False
) -> ModeResult:
    """``:x`` writes only when the buffer changed, then quits."""

    if not context.buffer.dirty and not args:
        return _done("command_x", quit=True)
    return _handle_wq(context, args, force=force)


def _find_buffer(context: ModeContext, path: Path) -> Optional[int]:
    target = path.resolve()
    for index, buffer in enumerate(context.buffers):
        if buffer.path is not None and buffer.path.resolve() == target:
            return index
    return None


def _handle_edit(
    context: ModeContext, args: List[str], *, force: bool = False
) -> ModeResult:
    """Open ``path`` as another buffer, or switch to it when already open.

    ``:e!`` discards the changes of the buffer it lands on.
    """

    if not args:
        if force and context.buffer.path is not None:
            context.buffer.reload()
            return _done("command_edit", f"Opened {context.buffer.path}")
        return _done("command_usage", EDIT_USAGE)
    return _done("command_edit", open_path(context, args[0], force=force))


def open_path(context: ModeContext, raw: PathLike, *, force: bool = False) -> str:
    """Switch to the buffer for ``raw``, loading it first if it is not open."""

    path = Path(raw)
    index = _find_buffer(context, path)
    if index is None:
        buffer = Buffer.from_file(path, undo_limit=context.settings.undo_limit)
        index = context.add_buffer(buffer)
    context.switch_buffer(index)
    if force:
        context.buffer.reload()
    context.bus.emit("command.edit", {"path": str(path), "force": force})
    return f"Opened {path}"


def _handle_set(context: ModeContext, args: List[str]) -> ModeResult:
    if not args:
        return _done("command_usage", SET_USAGE)
    settings = context.settings
    setting = args[0]
    if setting.startswith("shiftwidth="):
        value = setting[len("shiftwidth=") :]
        if not value.isdigit():
            return _done("command_set_error", "shiftwidth expects a number")
        width = int(value)
        if width <= 0:
            return _done("command_set_error", "shiftwidth must be > 0")
        settings.shift_width = width
        return _done("command_set", f"shiftwidth={width}")
    if setting in ("findcross", "nofindcross"):
        settings.find_cross_line = setting == "findcross"
        return _done("command_set", setting)
    if setting == "findcross?":
        return _done("command_set", "findcross" if settings.find_cross_line else "nofindcross")
    if setting == "shiftwidth?":
        return _done("command_set", f"shiftwidth={settings.shift_width}")
    if setting in ("indentcolon", "noindentcolon"):
        settings.indent_colon = setting == "indentcolon"
        return _done("command_set", setting)
    if setting == "indentcolon?":
        return _done("command_set", "indentcolon" if settings.indent_colon else "noindentcolon")
    return _done("command_set_error", UNKNOWN_OPTION)


def _handle_buffer_cycle(context: ModeContext, args: List[str], *, step: int) -> ModeResult:
    del args
    result = cycle_buffer(context, step)
    return _done(result.status, result.message)


_COMMAND_HANDLERS: Dict[str, CommandHandler] = {
    "write": _handle_write,
    "w": _handle_write,
    "quit": _handle_quit,
    "q": _handle_quit,
    "quit!": partial(_handle_quit, force=True),
    "q!": partial(_handle_quit, force=True),
    "wq": _handle_wq,
    "wq!": partial(_handle_wq, force=True),
    "x": _handle_x,
    "x!": partial(_handle_x, force=True),
    "exit": _handle_x,
    "exit!": partial(_handle_x, force=True),
    "edit": _handle_edit,
    "e": _handle_edit,
    "edit!": partial(_handle_edit, force=True),
    "e!": partial(_handle_edit, force=True),
    "set": _handle_set,
    "bnext": partial(_handle_buffer_cycle, step=1),
    "bn": partial(_handle_buffer_cycle, step=1),
    "bprev": partial(_handle_buffer_cycle, step=-1),
    "bp": partial(_handle_buffer_cycle, step=-1),
}


__all__ = [
    "EDIT_USAGE",
    "NO_WRITE_SINCE_CHANGE",
    "SET_USAGE",
    "UNKNOWN_OPTION",
    "open_path",
    "submit_command_line",
]

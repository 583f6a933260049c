"""High-level editing verbs reused across modes."""

from .core import (
    any_dirty,
    cycle_buffer,
    redo_action,
    request_quit,
    save_action,
    undo_action,
    undo_line_action,
    write_buffer,
)
from .visual import (
    change_case,
    change_selection,
    delete_selection,
    put_selection,
    shift_selection,
    start_block_insert,
    yank_selection,
)
from .search import execute_search, repeat_search
from .command import submit_command_line

__all__ = [
    "any_dirty",
    "cycle_buffer",
    "redo_action",
    "request_quit",
    "save_action",
    "undo_action",
    "undo_line_action",
    "write_buffer",
    "change_case",
    "change_selection",
    "delete_selection",
    "put_selection",
    "shift_selection",
    "start_block_insert",
    "yank_selection",
    "execute_search",
    "repeat_search",
    "submit_command_line",
]

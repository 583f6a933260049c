"""Built-in keymap actions, default bindings and user keymap tables."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence

from modal_engine.actions import keymap as keymap_actions

from .models import ActionRef, Binding
from .notation import KeyNotationError, parse_key_sequence
from .registry import KeymapRegistry

KEYMAP_MODES = ("normal", "insert", "visual", "command")

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="buffer_next",
        handler=keymap_actions.buffer_next,
        aliases=("bnext", "bn"),
        description="Switch to the next buffer",
    ),
    ActionRef(
        id="buffer_prev",
        handler=keymap_actions.buffer_prev,
        aliases=("bprev", "bp"),
        description="Switch to the previous buffer",
    ),
    ActionRef(id="move_left", handler=keymap_actions.move_left, aliases=("left",)),
    ActionRef(id="move_right", handler=keymap_actions.move_right, aliases=("right",)),
    ActionRef(id="move_up", handler=keymap_actions.move_up, aliases=("up",)),
    ActionRef(id="move_down", handler=keymap_actions.move_down, aliases=("down",)),
    ActionRef(
        id="move_word_left",
        handler=keymap_actions.move_word_left,
        aliases=("word_left",),
    ),
    ActionRef(
        id="move_word_right",
        handler=keymap_actions.move_word_right,
        aliases=("word_right",),
    ),
    ActionRef(
        id="move_line_start",
        handler=keymap_actions.move_line_start,
        aliases=("line_start",),
    ),
    ActionRef(
        id="move_line_end",
        handler=keymap_actions.move_line_end,
        aliases=("line_end",),
    ),
    ActionRef(id="backspace", handler=keymap_actions.backspace),
    ActionRef(
        id="delete_word",
        handler=keymap_actions.delete_word,
        description="Delete the word before the cursor",
    ),
    ActionRef(
        id="delete_line_start",
        handler=keymap_actions.delete_line_start,
        description="Delete from the cursor back to the line start",
    ),
    ActionRef(id="enter", handler=keymap_actions.enter),
    ActionRef(id="escape", handler=keymap_actions.escape),
    ActionRef(id="tab", handler=keymap_actions.tab),
    ActionRef(id="backtab", handler=keymap_actions.backtab),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="normal.buffer_next",
        mode="normal",
        sequence=parse_key_sequence("]b"),
        action_id="buffer_next",
        description="Next buffer",
        source="default",
    ),
    Binding(
        id="normal.buffer_prev",
        mode="normal",
        sequence=parse_key_sequence("[b"),
        action_id="buffer_prev",
        description="Previous buffer",
        source="default",
    ),
    Binding(
        id="insert.delete_word",
        mode="insert",
        sequence=parse_key_sequence("<C-w>"),
        action_id="delete_word",
        description="Delete the word before the cursor",
        source="default",
    ),
    Binding(
        id="insert.delete_line_start",
        mode="insert",
        sequence=parse_key_sequence("<C-u>"),
        action_id="delete_line_start",
        description="Delete to the start of the line",
        source="default",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register every built-in action and the selected default bindings."""

    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    include = set(include_bindings) if include_bindings else None
    exclude = set(exclude_bindings or ())
    for binding in DEFAULT_BINDINGS:
        if include is not None and binding.id not in include:
            continue
        if binding.id in exclude:
            continue
        registry.register_binding(binding, replace=replace)

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)

    for mode, bindings in (per_mode_overrides or {}).items():
        for binding in bindings:
            if binding.mode != mode:
                raise ValueError(
                    f"Override binding '{binding.id}' must target mode '{mode}'"
                )
            registry.register_binding(binding, replace=True)


def apply_keymap_table(
    registry: KeymapRegistry, mode: str, table: Mapping[str, str]
) -> List[str]:
    """Bind ``{"<C-h>": "move_left", ...}`` entries for ``mode``.

    Bad entries are skipped; the returned list holds one message per entry
    that could not be bound (``"Invalid key: ..."`` or ``"Invalid action: ..."``).
    """

    if mode not in KEYMAP_MODES:
        raise ValueError(f"Unknown keymap mode '{mode}'")
    errors: List[str] = []
    for lhs, rhs in table.items():
        try:
            sequence = parse_key_sequence(lhs)
        except KeyNotationError:
            errors.append(f"Invalid key: {lhs}")
            continue
        action_id = registry.action_id_for(rhs.strip().lower())
        if action_id is None:
            errors.append(f"Invalid action: {rhs}")
            continue
        registry.bind(mode, sequence, action_id, source="user")
    return errors


def apply_keymap_config(
    registry: KeymapRegistry, config: Mapping[str, Mapping[str, str]]
) -> List[str]:
    """Apply per-mode tables such as ``{"normal": {...}, "insert": {...}}``."""

    errors: List[str] = []
    tables: Dict[str, Mapping[str, str]] = dict(config)
    for mode in KEYMAP_MODES:
        table = tables.pop(mode, None)
        if table:
            errors.extend(apply_keymap_table(registry, mode, table))
    errors.extend(f"Unknown keymap mode: {mode}" for mode in tables)
    return errors


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "KEYMAP_MODES",
    "apply_keymap_config",
    "apply_keymap_table",
    "load_default_keymaps",
]

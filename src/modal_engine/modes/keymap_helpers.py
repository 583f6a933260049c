"""Helper utilities for keymap-driven modes."""

from __future__ import annotations

from typing import Mapping, MutableMapping, cast

from modal_engine.keymaps import ResolutionMatch
from modal_engine.runtime import telemetry

from .base_mode import ModeContext, ModeResult


def keymap_flag_context(context: ModeContext) -> Mapping[str, bool]:
    flags = context.extras.setdefault("keymap_flags", {})
    return cast(Mapping[str, bool], flags)


def update_flag(context: ModeContext, key: str, value: bool) -> None:
    flags = cast(
        MutableMapping[str, bool], context.extras.setdefault("keymap_flags", {})
    )
    flags[key] = value


def execute_match(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Run the action bound by ``match`` and normalize what it returns."""

    with telemetry.span(
        "keymaps::execute",
        component="keymaps",
        metadata={"binding_id": match.binding.id, "action": match.action.id},
    ):
        result = match.action(context, match)
    if isinstance(result, ModeResult):
        return result
    return ModeResult(consumed=True, status="keymap")


__all__ = [
    "execute_match",
    "keymap_flag_context",
    "update_flag",
]

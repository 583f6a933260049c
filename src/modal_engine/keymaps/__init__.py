"""Declarative keymap registry, notation parser and default bindings."""

from .models import ActionRef, Binding, KeySequence, KeyStroke, WhenClause
from .notation import KeyNotationError, parse_key_sequence
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import (
    DEFAULT_ACTIONS,
    DEFAULT_BINDINGS,
    apply_keymap_config,
    apply_keymap_table,
    load_default_keymaps,
)

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "WhenClause",
    "KeyNotationError",
    "parse_key_sequence",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "apply_keymap_config",
    "apply_keymap_table",
    "load_default_keymaps",
]

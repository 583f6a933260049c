"""UI-agnostic modal editing engine."""

__all__ = [
    "adapters",
    "buffer",
    "actions",
    "modes",
    "motions",
    "keymaps",
    "runtime",
    "session",
]

__version__ = "0.1.0"

"""Editor options read from the environment and adjusted by ``:set``."""

from __future__ import annotations

from dataclasses import dataclass

from .telemetry import env_flag, env_int

DEFAULT_UNDO_LIMIT = 200
DEFAULT_SHIFT_WIDTH = 4
DEFAULT_TAB_WIDTH = 4
DEFAULT_HISTORY_LIMIT = 50


def _positive(value: int, default: int) -> int:
    return value if value > 0 else default


@dataclass(slots=True)
class EditorSettings:
    """Tunable editing behaviour shared by every buffer in a session."""

    undo_limit: int = DEFAULT_UNDO_LIMIT
    find_cross_line: bool = True
    shift_width: int = DEFAULT_SHIFT_WIDTH
    indent_colon: bool = False
    tab_width: int = DEFAULT_TAB_WIDTH
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_env(cls) -> "EditorSettings":
        """Build settings from ``MODAL_ENGINE_*`` variables.

        Non-numeric or non-positive numbers fall back to the defaults.
        """

        return cls(
            undo_limit=_positive(
                env_int("UNDO_LIMIT", DEFAULT_UNDO_LIMIT), DEFAULT_UNDO_LIMIT
            ),
            find_cross_line=env_flag("FINDCROSS", True),
            shift_width=_positive(
                env_int("SHIFTWIDTH", DEFAULT_SHIFT_WIDTH), DEFAULT_SHIFT_WIDTH
            ),
            indent_colon=env_flag("INDENTCOLON", False),
            tab_width=_positive(
                env_int("TABWIDTH", DEFAULT_TAB_WIDTH), DEFAULT_TAB_WIDTH
            ),
            history_limit=_positive(
                env_int("HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT), DEFAULT_HISTORY_LIMIT
            ),
        )


__all__ = ["EditorSettings"]

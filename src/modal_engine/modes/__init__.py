"""Mode state shared by every editing mode.

Concrete modes live in their own modules (``normal_mode``, ``insert_mode``,
``visual_mode``, ``command_mode``) together with ``mode_manager``; they are
not re-exported here because the action layer imports this package.
"""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .pending import (
    FindPending,
    FindSpec,
    MotionKind,
    MotionOutcome,
    Operator,
    OperatorPending,
    PendingInput,
    TextObjectKind,
)
from .prompt import PromptHistory, PromptKind, PromptState, SearchSpec, SearchState
from .selection import VisualKind, VisualSelection, VisualState

__all__ = [
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "FindPending",
    "FindSpec",
    "MotionKind",
    "MotionOutcome",
    "Operator",
    "OperatorPending",
    "PendingInput",
    "TextObjectKind",
    "PromptHistory",
    "PromptKind",
    "PromptState",
    "SearchSpec",
    "SearchState",
    "VisualKind",
    "VisualSelection",
    "VisualState",
]

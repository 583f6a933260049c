"""Pending sub-states that survive between individual keystrokes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modal_engine.buffer.state import Cursor


class Operator(str, Enum):
    DELETE = "d"
    YANK = "y"
    CHANGE = "c"


class TextObjectKind(str, Enum):
    INNER = "i"
    AROUND = "a"


class MotionKind(str, Enum):
    """How a motion's destination turns into an operator range."""

    EXCLUSIVE = "exclusive"
    INCLUSIVE = "inclusive"
    LINEWISE = "linewise"


@dataclass(frozen=True, slots=True)
class MotionOutcome:
    """Result of running a motion; a miss leaves the cursor where it was.

    ``settles`` marks motions that finish a pending operator even when the
    cursor ends where it started (character finds).
    """

    kind: MotionKind
    found: bool = True
    message: Optional[str] = None
    settles: bool = False


@dataclass(slots=True)
class OperatorPending:
    op: Operator
    anchor: Cursor
    count: int = 1


@dataclass(slots=True)
class FindPending:
    until: bool = False
    reverse: bool = False
    count: int = 1


@dataclass(frozen=True, slots=True)
class FindSpec:
    """Last completed ``f``/``t``/``F``/``T`` request, reused by ``;`` and ``,``."""

    char: str
    until: bool = False
    reverse: bool = False

    @property
    def label(self) -> str:
        return f"{'F' if self.reverse else 'f'}{self.char}"

    def inverted(self) -> "FindSpec":
        return FindSpec(char=self.char, until=self.until, reverse=not self.reverse)


@dataclass(slots=True)
class PendingInput:
    """Everything Normal and Visual mode hold while a command is incomplete."""

    operator: Optional[OperatorPending] = None
    textobj: Optional[TextObjectKind] = None
    find: Optional[FindPending] = None
    g: bool = False
    count_keys: str = ""

    @property
    def is_neutral(self) -> bool:
        return (
            self.operator is None
            and self.textobj is None
            and self.find is None
            and not self.g
            and not self.count_keys
        )

    def push_digit(self, digit: str) -> bool:
        """Accumulate a count digit; a leading ``0`` is not a count."""

        if digit == "0" and not self.count_keys:
            return False
        self.count_keys += digit
        return True

    def take_count(self) -> Optional[int]:
        if not self.count_keys:
            return None
        value, self.count_keys = int(self.count_keys), ""
        return value

    def clear(self) -> None:
        self.operator = None
        self.textobj = None
        self.find = None
        self.g = False
        self.count_keys = ""


__all__ = [
    "FindPending",
    "FindSpec",
    "MotionKind",
    "MotionOutcome",
    "Operator",
    "OperatorPending",
    "PendingInput",
    "TextObjectKind",
]

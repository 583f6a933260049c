"""Dataclasses describing keymap bindings and the actions they run."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from modal_engine.modes.base_mode import normalize_modifiers

_NOTATION_MODIFIERS = {"ctrl": "C", "alt": "M", "meta": "M", "super": "D", "shift": "S"}
_NOTATION_NAMES = {
    "ESC": "Esc",
    "ENTER": "CR",
    "BACKSPACE": "BS",
    "DELETE": "Del",
    "TAB": "Tab",
    "BACKTAB": "BackTab",
    "LEFT": "Left",
    "RIGHT": "Right",
    "UP": "Up",
    "DOWN": "Down",
    "HOME": "Home",
    "END": "End",
    "INSERT": "Insert",
    "PAGEUP": "PageUp",
    "PAGEDOWN": "PageDown",
    " ": "Space",
}


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """One key press inside a bound sequence.

    ``token`` matches :attr:`modal_engine.modes.base_mode.KeyInput.token`, so
    live keys can be looked up without conversion.
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        modifiers = normalize_modifiers(self.modifiers)
        key = self.key
        if len(key) == 1:
            if "shift" in modifiers and key.isalpha():
                key = key.upper()
            modifiers = tuple(m for m in modifiers if m != "shift")
            if "ctrl" in modifiers:
                key = key.lower()
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "modifiers", modifiers)

    @property
    def token(self) -> str:
        if self.modifiers:
            return f"{'+'.join(self.modifiers)}+{self.key}"
        return self.key

    @property
    def notation(self) -> str:
        """``<C-w>``-style rendering; plain characters render as themselves."""

        name = _NOTATION_NAMES.get(self.key, self.key)
        if not self.modifiers and name == self.key:
            return self.key
        prefix = "".join(f"{_NOTATION_MODIFIERS.get(m, m)}-" for m in self.modifiers)
        return f"<{prefix}{name}>"


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable, non-empty run of keystrokes."""

    strokes: tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    def __len__(self) -> int:
        return len(self.strokes)

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @property
    def notation(self) -> str:
        return "".join(stroke.notation for stroke in self.strokes)

    @classmethod
    def from_strings(cls, *keys: str) -> "KeySequence":
        return cls(strokes=tuple(KeyStroke(key) for key in keys if key))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Boolean flag condition gating a binding (``"command_active"``, ``"!visual_active"``)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if not expr:
            raise ValueError("expression cannot be empty")
        if expr.startswith("!"):
            return cls(expr[1:], False)
        return cls(expr, True)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named editor action; handlers are called as ``handler(context, match)``."""

    id: str
    handler: Callable[..., object]
    aliases: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "aliases", tuple(a for a in self.aliases if a))

    @property
    def names(self) -> tuple[str, ...]:
        return (self.id, *self.aliases)

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Key sequence bound to an action in one mode."""

    id: str
    mode: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    source: Optional[str] = None
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        object.__setattr__(
            self,
            "when",
            tuple(
                clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
                for clause in self.when
            ),
        )

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(flags) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "WhenClause",
]

"""Base classes and shared utilities for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from modal_engine.buffer import BlockInsert, Buffer, IndentOptions, Register
from modal_engine.runtime.settings import EditorSettings

from .pending import FindSpec, MotionKind, PendingInput
from .prompt import PromptHistory, PromptState, SearchState
from .selection import VisualState

SPECIAL_KEYS = frozenset(
    {
        "ESC",
        "ENTER",
        "BACKSPACE",
        "DELETE",
        "TAB",
        "BACKTAB",
        "LEFT",
        "RIGHT",
        "UP",
        "DOWN",
        "HOME",
        "END",
        "INSERT",
        "PAGEUP",
        "PAGEDOWN",
    }
)
TEXT_BLOCKING_MODIFIERS = frozenset({"ctrl", "alt", "meta"})


def normalize_modifiers(modifiers: Iterable[str]) -> Tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to modes.

    ``key`` is either a single printable character (``"a"``, ``"A"``, ``" "``)
    or one of :data:`SPECIAL_KEYS`. Shift is folded into printable characters.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    def __post_init__(self) -> None:
        modifiers = normalize_modifiers(self.modifiers)
        if len(self.key) == 1:
            if "shift" in modifiers and self.key.isalpha():
                self.key = self.key.upper()
            modifiers = tuple(m for m in modifiers if m != "shift")
            if "ctrl" in modifiers:
                self.key = self.key.lower()
        self.modifiers = modifiers

    @classmethod
    def ctrl(cls, key: str) -> "KeyInput":
        return cls(key, ("ctrl",))

    @property
    def token(self) -> str:
        if self.modifiers:
            return f"{'+'.join(self.modifiers)}+{self.key}"
        return self.key

    @property
    def char(self) -> Optional[str]:
        """Printable character carried by the key, if any."""

        if TEXT_BLOCKING_MODIFIERS.intersection(self.modifiers):
            return None
        if len(self.key) == 1:
            return self.key
        return None

    @property
    def is_special(self) -> bool:
        return self.key in SPECIAL_KEYS


@dataclass(slots=True)
class ModeResult:
    """Result returned from ``Mode.handle_key``.

    ``motion`` is set when the key moved the cursor as a motion, which lets
    the manager complete a pending operator afterwards.
    """

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    quit: bool = False
    motion: Optional[MotionKind] = None


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode can access.

    One context is the whole editing session state: open buffers, the
    unnamed register, pending input, prompt and search state.
    """

    buffers: List[Buffer]
    register: Register
    bus: "ModeBus"
    settings: EditorSettings = field(default_factory=EditorSettings)
    pending: PendingInput = field(default_factory=PendingInput)
    visual: VisualState = field(default_factory=VisualState)
    block_insert: Optional[BlockInsert] = None
    prompt: Optional[PromptState] = None
    command_history: PromptHistory = field(default_factory=PromptHistory)
    search: SearchState = field(default_factory=SearchState)
    last_find: Optional[FindSpec] = None
    status: str = ""
    quit_confirm: bool = False
    active_index: int = 0
    extras: Dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.buffers:
            self.buffers.append(Buffer(undo_limit=self.settings.undo_limit))

    @property
    def buffer(self) -> Buffer:
        return self.buffers[self.active_index]

    def set_status(self, message: str) -> None:
        self.status = message
        self.bus.emit("status", message)

    def reset_pending(self) -> None:
        self.pending.clear()

    def indent_options(self) -> IndentOptions:
        return IndentOptions(
            shift_width=self.settings.shift_width,
            indent_colon=self.settings.indent_colon,
        )

    def add_buffer(self, buffer: Buffer) -> int:
        self.buffers.append(buffer)
        return len(self.buffers) - 1

    def switch_buffer(self, index: int) -> None:
        """Make ``buffers[index]`` active, carrying Insert-mode coalescing over."""

        index %= len(self.buffers)
        if index == self.active_index:
            return
        previous = self.buffer
        coalescing = previous.coalescing
        previous.coalescing = False
        previous.history.close_window()
        self.active_index = index
        self.buffer.coalescing = coalescing
        self.pending.clear()
        self.bus.emit("buffer.switch", self.buffer.name)


class ModeBus:
    """Minimal event bus letting modes exchange structured signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all concrete editor modes inherit from."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(
        self, previous: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del previous

    def on_exit(
        self, next_mode: Optional[str]
    ) -> None:  # pragma: no cover - default no-op
        del next_mode

    def handle_key(
        self, key: KeyInput
    ) -> ModeResult:  # pragma: no cover - abstract override
        raise NotImplementedError


__all__ = [
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeResult",
    "SPECIAL_KEYS",
    "normalize_modifiers",
]

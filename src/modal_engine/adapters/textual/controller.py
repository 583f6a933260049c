"""Minimal Textual adapter that wires an EditorSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from modal_engine.buffer import BufferMirror
from modal_engine.modes.base_mode import KeyInput, ModeResult
from modal_engine.session import EditorSession

# Textual key names that differ from the engine's special keys.
_TEXTUAL_KEYS: Dict[str, str] = {
    "escape": "ESC",
    "enter": "ENTER",
    "return": "ENTER",
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "tab": "TAB",
    "shift+tab": "BACKTAB",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
    "insert": "INSERT",
    "pageup": "PAGEUP",
    "pagedown": "PAGEDOWN",
    "space": " ",
}

_MODIFIER_NAMES = ("ctrl", "alt", "meta", "shift")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    request_exit: Callable[[], None] = _noop


def translate_key(
    key: str, *, text: Optional[str] = None, modifiers: Iterable[str] = ()
) -> KeyInput:
    """Turn a Textual key name (``"ctrl+w"``, ``"escape"``, ``"A"``) into a KeyInput."""

    mods = [str(mod).lower() for mod in modifiers]
    name = key
    named = _TEXTUAL_KEYS.get(name)
    if named is None and "+" in name and len(name) > 1:
        *prefix, name = name.split("+")
        mods.extend(part for part in prefix if part in _MODIFIER_NAMES)
        named = _TEXTUAL_KEYS.get(name)
    if named is not None:
        return KeyInput(named, tuple(mods), text=text)
    if text and len(text) == 1 and not mods:
        return KeyInput(text, text=text)
    if len(name) == 1:
        return KeyInput(name, tuple(mods), text=text)
    return KeyInput(name.upper(), tuple(mods), text=text)


class TextualVimAdapter:
    """Bridges EditorSession + bus events to a Textual-friendly surface."""

    def __init__(self, session: EditorSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_command_line()

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        result = self.session.dispatch(translate_key(key, text=text, modifiers=modifiers))
        self._after_mode_result(result)
        return result

    def paste(self, text: str) -> None:
        self.session.insert_text(text)
        self._refresh_buffer()

    def _after_mode_result(self, result: ModeResult) -> None:
        self.hooks.update_status(self.session.status)
        self._refresh_buffer()
        self._refresh_command_line()
        if result.quit:
            self.hooks.request_exit()

    def _subscribe_events(self) -> None:
        bus = self.session.context.bus
        for event in (
            "visual.enter",
            "visual.block_insert",
            "command.start",
            "command.end",
            "command.submit",
            "command.edit",
            "command.error",
            "buffer.switch",
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self.hooks.handle_event(name, payload)
        if name.startswith("command"):
            self._refresh_command_line()

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.session.mirror())

    def _refresh_command_line(self) -> None:
        self.hooks.show_command(self.session.command_line)

    def state_metadata(self) -> Dict[str, object]:
        buffer = self.session.buffer
        return {
            "mode": self.session.mode,
            "cursor": buffer.cursor,
            "selection": self.session.selection_summary(),
            "command": self.session.command_line,
            "buffer": buffer.name,
            "buffer_version": buffer.version,
        }


__all__ = ["TextualUIHooks", "TextualVimAdapter", "translate_key"]

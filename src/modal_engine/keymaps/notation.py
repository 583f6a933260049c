"""Parser for ``<C-w>``/``<Esc>``-style key notation."""

from __future__ import annotations

from typing import List

from .models import KeySequence, KeyStroke

_MODIFIERS = {
    "c": "ctrl",
    "ctrl": "ctrl",
    "control": "ctrl",
    "m": "alt",
    "alt": "alt",
    "meta": "alt",
    "d": "super",
    "cmd": "super",
    "super": "super",
    "s": "shift",
    "shift": "shift",
}

_NAMED_KEYS = {
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "backspace": "BACKSPACE",
    "bs": "BACKSPACE",
    "tab": "TAB",
    "backtab": "BACKTAB",
    "enter": "ENTER",
    "cr": "ENTER",
    "esc": "ESC",
    "escape": "ESC",
    "space": " ",
    "delete": "DELETE",
    "del": "DELETE",
    "insert": "INSERT",
    "ins": "INSERT",
    "home": "HOME",
    "end": "END",
    "pageup": "PAGEUP",
    "pagedown": "PAGEDOWN",
}


class KeyNotationError(ValueError):
    """Raised for key notation that does not describe a key sequence."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid key: {raw}")
        self.raw = raw


def parse_bracketed_key(inner: str) -> KeyStroke:
    """Parse the text between ``<`` and ``>``: modifiers joined by ``-``, then a key."""

    parts = inner.split("-")
    modifiers = []
    for part in parts[:-1]:
        modifier = _MODIFIERS.get(part.lower())
        if modifier is None:
            raise KeyNotationError(f"<{inner}>")
        modifiers.append(modifier)
    name = parts[-1]
    key = _NAMED_KEYS.get(name.lower())
    if key is None:
        if len(name) != 1:
            raise KeyNotationError(f"<{inner}>")
        key = name
    return KeyStroke(key, tuple(modifiers))


def parse_key_sequence(raw: str) -> KeySequence:
    """Parse notation such as ``]b``, ``<C-w>`` or ``<Esc>dd``.

    Characters outside brackets stand for themselves.
    """

    text = raw.strip()
    if not text:
        raise KeyNotationError(raw)
    strokes: List[KeyStroke] = []
    index = 0
    while index < len(text):
        ch = text[index]
        if ch != "<":
            strokes.append(KeyStroke(ch))
            index += 1
            continue
        close = text.find(">", index + 1)
        if close == -1:
            raise KeyNotationError(raw)
        strokes.append(parse_bracketed_key(text[index + 1 : close]))
        index = close + 1
    return KeySequence(tuple(strokes))


__all__ = ["KeyNotationError", "parse_bracketed_key", "parse_key_sequence"]

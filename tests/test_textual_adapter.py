from __future__ import annotations

from typing import Any, Dict, List

import pytest

from modal_engine.adapters.textual import TextualUIHooks, TextualVimAdapter, translate_key
from modal_engine.buffer import BufferMirror
from modal_engine.modes import KeyInput
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str) -> EditorSession:
    return EditorSession(lines=list(lines or ("",)), settings=EditorSettings())


def test_translate_key_names() -> None:
    assert translate_key("ctrl+w") == KeyInput("w", ("ctrl",))
    assert translate_key("escape") == KeyInput("ESC")
    assert translate_key("shift+tab") == KeyInput("BACKTAB")
    assert translate_key("space", text=" ").key == " "
    assert translate_key("A", text="A").key == "A"
    assert translate_key("colon", text=":").key == ":"
    assert translate_key("f5").key == "F5"


def test_adapter_updates_buffer_and_status() -> None:
    session = make_session("")
    updates: List[str] = []
    statuses: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        update_status=lambda status: statuses.append(status),
    )
    adapter = TextualVimAdapter(session, hooks)

    adapter.handle_textual_key("i", text="i")
    adapter.handle_textual_key("h", text="h")
    adapter.handle_textual_key("i", text="i")
    adapter.handle_textual_key("escape")

    assert updates[0] == ""
    assert updates[-1] == "hi"
    assert statuses[0] == "-- INSERT --"
    assert statuses[-1] == "-- NORMAL --"


def test_adapter_relays_command_events() -> None:
    session = make_session("abc")
    command_lines: List[str] = []
    events: List[tuple[str, object | None]] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        show_command=lambda text: command_lines.append(text),
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    adapter = TextualVimAdapter(session, hooks)

    adapter.handle_textual_key("colon", text=":")
    assert command_lines[-1] == ":"
    adapter.handle_textual_key("w", text="w")
    adapter.handle_textual_key("q", text="q")
    adapter.handle_textual_key("enter")

    assert command_lines[-1] == ""
    assert ("command.start", ":") in events
    assert ("command.submit", ":wq") in events
    assert ("command.end", "wq") in events


def test_adapter_requests_exit_on_quit() -> None:
    session = make_session("abc")
    exits: List[bool] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None, request_exit=lambda: exits.append(True)
    )
    adapter = TextualVimAdapter(session, hooks)

    for key in (":", "q"):
        adapter.handle_textual_key(key, text=key)
    result = adapter.handle_textual_key("enter")

    assert result.quit
    assert exits == [True]


def test_adapter_surfaces_visual_selection() -> None:
    session = make_session("abc")
    mirrors: List[BufferMirror] = []
    events: List[Dict[str, Any]] = []
    hooks = TextualUIHooks(
        update_buffer=mirrors.append,
        handle_event=lambda name, payload: events.append(
            {"name": name, "payload": payload}
        ),
    )
    adapter = TextualVimAdapter(session, hooks)

    adapter.handle_textual_key("v", text="v")
    adapter.handle_textual_key("l", text="l")

    assert {"name": "visual.enter", "payload": "visual"} in events
    assert mirrors[-1].selection == ((0, 0), (0, 1))
    assert mirrors[-1].attributes["mode"] == "visual"
    assert adapter.state_metadata()["selection"] == "2 chars"


def test_adapter_paste() -> None:
    session = make_session("ab")
    mirrors: List[BufferMirror] = []
    adapter = TextualVimAdapter(session, TextualUIHooks(update_buffer=mirrors.append))

    adapter.paste("xy")

    assert mirrors[-1].text == "xyab"
    assert adapter.state_metadata()["buffer_version"] == 1


def test_render_mirror_marks_cursor() -> None:
    pytest.importorskip("textual")
    from modal_engine.adapters.textual.app import CURSOR_MARK, render_mirror

    mirror = BufferMirror(text="ab\ncd", cursor=(1, 1), selection=None)
    assert render_mirror(mirror) == f"ab\nc{CURSOR_MARK}"

    at_end = BufferMirror(text="ab", cursor=(0, 2), selection=None)
    assert render_mirror(at_end) == f"ab{CURSOR_MARK}"

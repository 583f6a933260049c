from pathlib import Path

import pytest

from modal_engine.buffer import Buffer, Register
from modal_engine.modes import KeyInput, ModeBus, ModeContext
from modal_engine.modes.mode_manager import ModeManager
from modal_engine.modes.normal_mode import NormalMode
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str, **kwargs: object) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings(), **kwargs)


def make_context() -> ModeContext:
    return ModeContext(
        buffers=[Buffer.from_text("abc")], register=Register(), bus=ModeBus()
    )


def test_manager_requires_a_mode() -> None:
    manager = ModeManager(make_context())

    with pytest.raises(RuntimeError):
        manager.handle_key(KeyInput("x"))


def test_first_registered_mode_is_active() -> None:
    manager = ModeManager(make_context())

    manager.register_mode(NormalMode)

    assert manager.active_mode is not None
    assert manager.active_mode.name == "normal"
    with pytest.raises(ValueError):
        manager.register_mode(NormalMode)
    with pytest.raises(KeyError):
        manager.switch_mode("replace")


def test_mode_switch_is_published_on_the_bus() -> None:
    session = make_session("abc")
    seen: list[object] = []
    session.context.bus.subscribe("status", seen.append)

    session.feed("i")

    assert session.mode == "insert"
    assert seen[-1] == "-- INSERT --"


def test_held_prefix_flushes_as_builtin_keys() -> None:
    session = make_session("abc")

    session.feed("]")
    assert session.manager.held_keys == (KeyInput("]"),)

    session.feed("x")

    assert session.manager.held_keys == ()
    assert session.lines == ["bc"]


def test_buffer_cycling_bindings(tmp_path: Path) -> None:
    other = tmp_path / "other.txt"
    other.write_text("second", encoding="utf-8")
    session = make_session("first")
    session.open(other)
    assert session.lines == ["second"]

    session.feed("]b")
    assert session.lines == ["first"]
    assert session.status == "[1/2] [No Name]"

    session.feed("[b")
    assert session.lines == ["second"]
    assert session.status == "[2/2] other.txt"


def test_buffers_keep_their_own_undo(tmp_path: Path) -> None:
    other = tmp_path / "other.txt"
    other.write_text("second", encoding="utf-8")
    session = make_session("first")
    session.feed("x")
    session.open(other)

    session.feed("u")
    assert session.lines == ["second"]

    session.feed("]bu")
    assert session.lines == ["first"]


def test_user_keymap_replays_builtin_key() -> None:
    session = make_session(
        "abc def", keymaps={"normal": {"H": "line_start", "L": "line_end"}}
    )

    session.feed("L")
    assert session.cursor == (0, 6)

    session.feed("H")
    assert session.cursor == (0, 0)


def test_remapped_motion_completes_operator() -> None:
    session = make_session("abc def", keymaps={"normal": {"<C-l>": "word_right"}})

    session.feed("d<C-l>")

    assert session.lines == ["def"]


def test_user_keymap_in_visual_and_command_modes() -> None:
    session = make_session(
        "abc",
        keymaps={"visual": {"H": "move_line_start"}, "command": {"<C-w>": "delete_word"}},
    )

    session.feed("$vHy")
    assert session.register.text == "abc"

    session.feed(":set foo<C-w>")
    assert session.command_line == ":set "


def test_keymap_errors_become_status() -> None:
    session = make_session(
        "abc", keymaps={"normal": {"<Bogus>": "move_left", "Q": "explode"}}
    )

    assert session.keymap_errors == ["Invalid key: <Bogus>", "Invalid action: explode"]
    assert session.status == "Invalid key: <Bogus>"


def test_multi_key_binding_waits_for_completion() -> None:
    session = make_session("abc", keymaps={"insert": {"jk": "escape"}})

    session.feed("ij")
    assert session.lines == ["abc"]
    assert session.mode == "insert"

    session.feed("k")
    assert session.mode == "normal"

    session.feed("ijx<Esc>")
    assert session.lines == ["jxabc"]


def test_feed_stops_at_quit() -> None:
    session = make_session("abc")

    assert session.feed(":q<CR>x")

    assert session.lines == ["abc"]

from modal_engine.buffer import RegisterShape, RegisterValue
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings())


def last_change(session: EditorSession) -> str:
    recorded = session.manager.repeat.last
    return recorded.notation if recorded is not None else ""


def test_repeat_without_change_is_noop() -> None:
    session = make_session("abc")

    session.feed(".")

    assert session.lines == ["abc"]


def test_repeat_delete_char_with_count() -> None:
    session = make_session("abcdef")

    session.feed("x")
    assert last_change(session) == "x"
    session.feed("3.")

    assert session.lines == ["ef"]


def test_count_typed_before_change_is_recorded() -> None:
    session = make_session("abcdef")

    session.feed("2x.")

    assert last_change(session) == "2 x"
    assert session.lines == ["ef"]


def test_repeat_insert() -> None:
    session = make_session("")

    session.feed("ihello<Esc>.")

    assert session.lines == ["hellhelloo"]


def test_repeat_change_word() -> None:
    session = make_session("one two")

    session.feed("ciwfoo<Esc>w.")

    assert session.lines == ["foo foo"]


def test_repeat_dd_follows_current_row() -> None:
    session = make_session("a", "b", "c", "d")

    session.feed("ddj.")

    assert session.lines == ["b", "d"]
    assert session.register == RegisterValue("c", RegisterShape.LINE)


def test_repeat_visual_delete() -> None:
    session = make_session("abcdef")

    session.feed("vld.")

    assert session.lines == ["ef"]


def test_motions_and_yanks_are_not_recorded() -> None:
    session = make_session("abc abc")

    session.feed("x")
    session.feed("wyyp")
    session.feed("dfz")

    assert last_change(session) == "p"
    session.feed("u")
    assert session.lines == ["bc abc"]


def test_changes_without_edits_are_discarded() -> None:
    session = make_session("")

    session.feed("x")

    assert session.manager.repeat.last is None
    assert not session.manager.repeat.recording


def test_undo_after_repeat() -> None:
    session = make_session("abc")

    session.feed("x.u")

    assert session.lines == ["bc"]

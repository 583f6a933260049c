import pytest

from modal_engine.buffer import Buffer, EditorSnapshot, UndoHistory
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_snapshot(text: str) -> EditorSnapshot:
    return EditorSnapshot(lines=(text,), cursor=(0, 0), scroll=0, dirty=False)


def make_session(*lines: str, **settings: object) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings(**settings))


def test_history_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        UndoHistory(limit=0)


def test_history_never_exceeds_limit() -> None:
    history = UndoHistory(limit=3)

    for index in range(10):
        history.record(lambda index=index: make_snapshot(str(index)))

    assert len(history) == 3
    restored = history.pop_undo(make_snapshot("now"))
    assert restored is not None and restored.lines == ("9",)


def test_history_coalescing_window() -> None:
    history = UndoHistory()

    assert history.record(lambda: make_snapshot("a"), coalesce=True)
    assert not history.record(lambda: make_snapshot("b"), coalesce=True)
    history.close_window()
    assert history.record(lambda: make_snapshot("c"), coalesce=True)
    assert len(history) == 2


def test_new_record_clears_redo() -> None:
    history = UndoHistory()
    history.record(lambda: make_snapshot("a"))
    history.pop_undo(make_snapshot("b"))
    assert history.can_redo()

    history.record(lambda: make_snapshot("c"))

    assert not history.can_redo()


def test_restoring_suppresses_records() -> None:
    history = UndoHistory()

    with history.restoring():
        assert not history.record(lambda: make_snapshot("a"))

    assert len(history) == 0


def test_delete_range_then_undo_restores_lines_and_cursor() -> None:
    buffer = Buffer.from_text("alpha\nbeta\ngamma")
    buffer.move_to((0, 3))
    before = (buffer.lines, buffer.cursor)

    buffer.delete_range((0, 3), (2, 1))
    assert buffer.lines == ["alpmma"]

    assert buffer.undo()
    assert (buffer.lines, buffer.cursor) == before
    assert buffer.redo()
    assert buffer.lines == ["alpmma"]


def test_undo_on_empty_stack_is_noop() -> None:
    buffer = Buffer.from_text("abc")

    assert not buffer.undo()
    assert not buffer.redo()
    assert not buffer.undo_line()


def test_undo_restores_dirty_flag() -> None:
    session = make_session("abc")

    session.feed("x")
    assert session.buffer.dirty
    session.feed("u")

    assert session.lines == ["abc"]
    assert not session.buffer.dirty


def test_insert_burst_is_one_undo_step() -> None:
    session = make_session("x")

    session.feed("iabc<Esc>u")

    assert session.lines == ["x"]
    assert session.cursor == (0, 0)


def test_undo_break_characters_split_insert_bursts() -> None:
    session = make_session("")

    session.feed("ifoo bar<Esc>")
    assert session.lines == ["foo bar"]

    session.feed("u")
    assert session.lines == ["foo"]
    session.feed("u")
    assert session.lines == [""]


def test_cursor_keys_close_the_insert_window() -> None:
    session = make_session("")

    session.feed("iab<Left>c<Esc>u")

    assert session.lines == ["ab"]


def test_undo_count_and_redo() -> None:
    session = make_session("abcd")

    session.feed("xxx")
    assert session.lines == ["d"]
    session.feed("2u")
    assert session.lines == ["bcd"]
    session.feed("<C-r>")
    assert session.lines == ["cd"]


def test_undo_clears_pending_input() -> None:
    session = make_session("abc")
    session.feed("x")

    session.feed("du")

    assert session.context.pending.is_neutral
    assert session.lines == ["abc"]


def test_undo_limit_from_settings() -> None:
    session = make_session("abcdef", undo_limit=2)

    session.feed("xxxx")
    session.feed("uuuu")

    assert session.lines == ["cdef"]


def test_line_undo_restores_only_the_row() -> None:
    session = make_session("one", "two")

    session.feed("A!<Esc>jx")
    # Moving to another row dropped the first row's line undo.
    session.feed("U")
    assert session.lines == ["one!", "two"]


def test_line_undo_after_insert() -> None:
    session = make_session("one", "two")

    session.feed("Ayz<Esc>")
    assert session.lines == ["oneyz", "two"]

    session.feed("U")

    assert session.lines == ["one", "two"]
    session.feed("U")
    assert session.status == "No line undo"


def test_line_undo_is_itself_undoable() -> None:
    session = make_session("one")

    session.feed("Ayz<Esc>Uu")

    assert session.lines == ["oneyz"]

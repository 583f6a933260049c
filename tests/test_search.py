from modal_engine.actions.search import NO_PREVIOUS_SEARCH
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str, **settings: object) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings(**settings))


def test_forward_search_and_repeat() -> None:
    session = make_session("foo", "bar foo", "baz foo")

    session.feed("/foo<CR>")
    assert session.cursor == (1, 4)
    assert session.mode == "normal"

    session.feed("n")
    assert session.cursor == (2, 4)
    session.feed("N")
    assert session.cursor == (1, 4)


def test_search_does_not_wrap_around() -> None:
    session = make_session("foo", "bar foo")
    session.feed("/foo<CR>")

    session.feed("n")

    assert session.cursor == (1, 4)
    assert session.status == "Pattern not found: foo"


def test_backward_search_repeats_backward() -> None:
    session = make_session("foo", "bar foo", "baz")
    session.buffer.move_to((2, 0))

    session.feed("?foo<CR>")
    assert session.cursor == (1, 4)

    session.feed("n")
    assert session.cursor == (0, 0)


def test_search_miss_leaves_cursor() -> None:
    session = make_session("abc")

    session.feed("/zzz<CR>")

    assert session.cursor == (0, 0)
    assert session.status == "Pattern not found: zzz"


def test_repeat_without_previous_search() -> None:
    session = make_session("abc")

    session.feed("n")
    assert session.status == NO_PREVIOUS_SEARCH

    session.feed("/<CR>")
    assert session.status == NO_PREVIOUS_SEARCH


def test_empty_pattern_reuses_last_search() -> None:
    session = make_session("ab ab ab")
    session.feed("/ab<CR>")

    session.feed("/<CR>")

    assert session.cursor == (0, 6)


def test_counted_repeat() -> None:
    session = make_session("x x x x")
    session.feed("/x<CR>")

    session.feed("2n")

    assert session.cursor == (0, 6)


def test_search_respects_findcross() -> None:
    session = make_session("foo", "bar foo", find_cross_line=False)

    session.feed("/foo<CR>")

    assert session.cursor == (0, 0)
    assert session.status == "Pattern not found: foo"


def test_search_history_dedups_and_recalls() -> None:
    session = make_session("foo bar")
    session.feed("/foo<CR>/foo<CR>/bar<CR>")

    assert session.context.search.history.entries == ["foo", "bar"]
    assert session.context.command_history.entries == []

    session.feed("/<Up>")
    assert session.command_line == "/bar"
    session.feed("<Esc>")


def test_delete_to_search_match_with_n() -> None:
    session = make_session("one two three")
    session.feed("/three<CR>")
    session.feed("0")

    session.feed("dn")

    assert session.lines == ["three"]

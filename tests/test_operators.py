from modal_engine.buffer import RegisterShape, RegisterValue
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str, cursor: tuple[int, int] = (0, 0)) -> EditorSession:
    session = EditorSession(lines=list(lines), settings=EditorSettings())
    session.buffer.move_to(cursor, past_end=False)
    return session


def test_dw_deletes_to_next_word() -> None:
    session = make_session("hello world")

    session.feed("dw")

    assert session.lines == ["world"]
    assert session.cursor == (0, 0)
    assert session.register == RegisterValue("hello ", RegisterShape.CHAR)


def test_dw_on_last_word_stops_at_line_end() -> None:
    session = make_session("foo bar", "baz", cursor=(0, 4))

    session.feed("dw")

    assert session.lines == ["foo ", "baz"]
    assert session.cursor == (0, 3)


def test_de_is_inclusive() -> None:
    session = make_session("foo bar")

    session.feed("de")

    assert session.lines == [" bar"]


def test_db_deletes_backwards() -> None:
    session = make_session("foo bar", cursor=(0, 4))

    session.feed("db")

    assert session.lines == ["bar"]


def test_d_dollar_and_d0() -> None:
    session = make_session("abcdef", cursor=(0, 3))
    session.feed("d$")
    assert session.lines == ["abc"]

    session = make_session("abcdef", cursor=(0, 3))
    session.feed("d0")
    assert session.lines == ["def"]


def test_dd_deletes_whole_line() -> None:
    session = make_session("only line")

    session.feed("dd")

    assert session.lines == [""]
    assert session.register == RegisterValue("only line", RegisterShape.LINE)


def test_counted_dd() -> None:
    session = make_session("a", "b", "c", "d")

    session.feed("2dd")
    assert session.lines == ["c", "d"]

    session.feed("5dd")
    assert session.lines == [""]


def test_counts_multiply() -> None:
    session = make_session("a b c d e f g")

    session.feed("2d2w")

    assert session.lines == ["e f g"]


def test_dj_is_linewise() -> None:
    session = make_session("a", "b", "c")

    session.feed("dj")

    assert session.lines == ["c"]
    assert session.register.shape is RegisterShape.LINE


def test_dG_and_dgg() -> None:
    session = make_session("a", "b", "c", cursor=(1, 0))
    session.feed("dG")
    assert session.lines == ["a"]

    session = make_session("a", "b", "c", cursor=(1, 0))
    session.feed("dgg")
    assert session.lines == ["c"]


def test_yank_moves_to_range_start_and_keeps_text() -> None:
    session = make_session("foo bar", cursor=(0, 4))

    session.feed("yb")

    assert session.lines == ["foo bar"]
    assert session.cursor == (0, 0)
    assert session.register.text == "foo "


def test_yy_leaves_cursor() -> None:
    session = make_session("one", "two", cursor=(1, 2))

    session.feed("yy")

    assert session.cursor == (1, 2)
    assert session.register == RegisterValue("two", RegisterShape.LINE)


def test_ce_enters_insert_and_types_over() -> None:
    session = make_session("foo bar")

    session.feed("cebaz<Esc>")

    assert session.lines == ["baz bar"]
    assert session.mode == "normal"


def test_cc_keeps_indent() -> None:
    session = make_session("    old text", "next")

    session.feed("ccnew<Esc>")

    assert session.lines == ["    new", "next"]


def test_change_is_one_undo_step() -> None:
    session = make_session("foo bar")

    session.feed("cebaz<Esc>u")

    assert session.lines == ["foo bar"]


def test_find_motions_under_operator() -> None:
    session = make_session("hello world")
    session.feed("dfo")
    assert session.lines == [" world"]

    session = make_session("hello world")
    session.feed("dto")
    assert session.lines == ["o world"]

    session = make_session("hello world", cursor=(0, 10))
    session.feed("dFo")
    assert session.lines == ["hello wd"]


def test_failed_find_cancels_operator() -> None:
    session = make_session("hello")

    session.feed("dfz")

    assert session.lines == ["hello"]
    assert session.status == "Pattern not found: fz"
    assert session.context.pending.is_neutral
    session.feed("l")
    assert session.cursor == (0, 1)


def test_percent_under_operator() -> None:
    session = make_session("f(a, b) + c", cursor=(0, 1))

    session.feed("d%")

    assert session.lines == ["f + c"]


def test_text_objects_under_operator() -> None:
    session = make_session("call(a, b)", cursor=(0, 6))
    session.feed("di(")
    assert session.lines == ["call()"]

    session = make_session("foo bar baz", cursor=(0, 5))
    session.feed("daw")
    assert session.lines == ["foo baz"]

    session = make_session('x = "abc"', cursor=(0, 6))
    session.feed('ci"z<Esc>')
    assert session.lines == ['x = "z"']

    session = make_session("<p>hi</p>", cursor=(0, 4))
    session.feed("dit")
    assert session.lines == ["<p></p>"]


def test_change_inside_empty_pair_enters_insert() -> None:
    session = make_session("f()", cursor=(0, 1))

    session.feed("ci(x<Esc>")

    assert session.lines == ["f(x)"]


def test_pair_objects_resolve_from_closing_delimiter() -> None:
    session = make_session("f(ab) x")
    session.feed("f)di(")
    assert session.lines == ["f() x"]

    session = make_session("a{x}b", cursor=(0, 3))
    session.feed("da{")
    assert session.lines == ["ab"]

    session = make_session("[1, 2]", cursor=(0, 5))
    session.feed("ci[9<Esc>")
    assert session.lines == ["[9]"]


def test_find_that_does_not_move_releases_operator() -> None:
    session = make_session("a.b.c")

    session.feed("$dT.")

    assert session.lines == ["a.b.c"]
    assert session.context.pending.is_neutral
    session.feed("0")
    assert session.lines == ["a.b.c"]
    assert session.cursor == (0, 0)


def test_till_adjacent_target_deletes_nothing() -> None:
    session = make_session("ab")

    session.feed("dtbl")

    assert session.lines == ["ab"]
    assert session.cursor == (0, 1)


def test_missing_text_object_cancels_operator() -> None:
    session = make_session("plain")

    session.feed("di(")

    assert session.lines == ["plain"]
    assert session.status == "No text object"
    assert session.context.pending.is_neutral


def test_different_operator_cancels_pending() -> None:
    session = make_session("abc")

    session.feed("dy")

    assert session.context.pending.is_neutral
    assert session.lines == ["abc"]


def test_escape_cancels_pending_operator() -> None:
    session = make_session("abc def")

    session.feed("d<Esc>w")

    assert session.lines == ["abc def"]
    assert session.cursor == (0, 4)


def test_x_deletes_count_characters_and_yanks() -> None:
    session = make_session("abcdef", cursor=(0, 4))

    session.feed("5x")

    assert session.lines == ["abcd"]
    assert session.cursor == (0, 3)
    assert session.register.text == "ef"


def test_cw_takes_the_trailing_space() -> None:
    session = make_session("foo bar")

    session.feed("cwx<Esc>")

    assert session.lines == ["xbar"]

from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str, **settings: object) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings(**settings))


def test_typing_then_escape_steps_back() -> None:
    session = make_session("")

    session.feed("iabc<Esc>")

    assert session.lines == ["abc"]
    assert session.mode == "normal"
    assert session.cursor == (0, 2)
    assert session.buffer.dirty


def test_append_variants() -> None:
    session = make_session("  mid")

    session.feed("A!<Esc>")
    assert session.lines == ["  mid!"]

    session.feed("I>")
    assert session.lines == ["  >mid!"]


def test_enter_after_opener_indents() -> None:
    session = make_session("if x {")

    session.feed("A<CR>y<Esc>")

    assert session.lines == ["if x {", "    y"]


def test_enter_before_closer_matches_opener() -> None:
    session = make_session("if {", "    x}")
    session.buffer.move_to((1, 5))

    session.feed("i<CR><Esc>")

    assert session.lines == ["if {", "    x", "}"]


def test_colon_indent_follows_setting() -> None:
    session = make_session("def f():", indent_colon=True)
    session.feed("A<CR>pass<Esc>")
    assert session.lines == ["def f():", "    pass"]

    session = make_session("def f():")
    session.feed("A<CR>pass<Esc>")
    assert session.lines == ["def f():", "pass"]


def test_open_line_below_and_above() -> None:
    session = make_session("  a {", "  }")

    session.feed("ob<Esc>")
    assert session.lines == ["  a {", "      b", "  }"]

    session.feed("jOc<Esc>")
    assert session.lines == ["  a {", "      b", "  c", "  }"]


def test_tab_inserts_spaces() -> None:
    session = make_session("", tab_width=2)

    session.feed("i<Tab>x")

    assert session.lines == ["  x"]


def test_backspace_joins_lines() -> None:
    session = make_session("ab", "cd")
    session.buffer.move_to((1, 0))

    session.feed("i<BS>")

    assert session.lines == ["abcd"]
    assert session.cursor == (0, 2)


def test_backspace_at_document_start_is_noop() -> None:
    session = make_session("ab")

    session.feed("i<BS>")

    assert session.lines == ["ab"]


def test_delete_at_line_end_joins_next() -> None:
    session = make_session("ab", "cd")

    session.feed("A<Del>")

    assert session.lines == ["abcd"]


def test_ctrl_u_and_ctrl_w() -> None:
    session = make_session("foo bar")
    session.feed("A<C-u>")
    assert session.lines == [""]

    session = make_session("")
    session.feed("ifoo bar<C-w>")
    assert session.lines == ["foo "]


def test_arrow_keys_wrap_across_lines() -> None:
    session = make_session("ab", "cd")
    session.buffer.move_to((1, 0))

    session.feed("i<Left>X<Right><Right>Y")

    assert session.lines == ["abX", "cYd"]


def test_block_insert_enter_splits_every_row() -> None:
    session = make_session("ab", "cd")

    session.feed("<C-v>jIX<CR>")

    assert session.lines == ["X", "ab", "X", "cd"]
    assert session.cursor == (1, 0)
    assert session.context.block_insert is None


def test_block_insert_backspace() -> None:
    session = make_session("ab", "cd")

    session.feed("<C-v>jIXY<BS><Esc>")

    assert session.lines == ["Xab", "Xcd"]


def test_host_paste_is_one_undo_step() -> None:
    session = make_session("xy")
    session.buffer.move_to((0, 1))

    session.insert_text("a\nb")

    assert session.lines == ["xa", "by"]
    assert session.cursor == (1, 1)
    session.feed("u")
    assert session.lines == ["xy"]


def test_host_paste_during_block_insert_replicates() -> None:
    session = make_session("ab", "cd")
    session.feed("<C-v>jI")

    session.insert_text("--")

    assert session.lines == ["--ab", "--cd"]

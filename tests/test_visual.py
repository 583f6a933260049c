from modal_engine.buffer import RegisterShape, RegisterValue
from modal_engine.modes import KeyInput
from modal_engine.modes.normal_mode import NO_PREVIOUS_VISUAL
from modal_engine.modes.selection import VisualKind, VisualSelection
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings())


def test_char_yank_returns_to_selection_start() -> None:
    session = make_session("hello")

    session.feed("lvly")

    assert session.mode == "normal"
    assert session.cursor == (0, 1)
    assert session.register == RegisterValue("el", RegisterShape.CHAR)


def test_char_delete_spans_lines() -> None:
    session = make_session("abc", "def")

    session.feed("vjd")

    assert session.lines == ["ef"]
    assert session.register == RegisterValue("abc\nd", RegisterShape.CHAR)


def test_line_delete() -> None:
    session = make_session("a", "b", "c")

    session.feed("Vjd")

    assert session.lines == ["c"]
    assert session.register == RegisterValue("a\nb", RegisterShape.LINE)


def test_line_change_keeps_first_indent() -> None:
    session = make_session("  one", "two", "three")

    session.feed("Vjcx<Esc>")

    assert session.lines == ["  x", "three"]


def test_char_change_types_over_selection() -> None:
    session = make_session("hello")

    session.feed("vlcX<Esc>")

    assert session.lines == ["Xllo"]


def test_put_replaces_selection_and_keeps_register() -> None:
    session = make_session("foo bar")

    session.feed("yiwwviwp")

    assert session.lines == ["foo foo"]
    assert session.register.text == "foo"


def test_case_changes() -> None:
    session = make_session("Hello")
    session.feed("v$~")
    assert session.lines == ["hELLO"]

    session = make_session("ab", "cd")
    session.feed("VU")
    assert session.lines == ["AB", "cd"]

    session = make_session("abc", "def")
    session.feed("<C-v>jlU")
    assert session.lines == ["ABc", "DEf"]


def test_shift_right_and_left() -> None:
    session = make_session("a", "", "b")

    session.feed("Vjj>")
    assert session.lines == ["    a", "", "    b"]
    assert session.cursor == (0, 4)

    session.feed("Vjj")
    session.handle_key(KeyInput("<"))
    assert session.lines == ["a", "", "b"]


def test_swap_anchor() -> None:
    session = make_session("abcdef")

    session.feed("vllo")

    assert session.cursor == (0, 0)
    assert session.selection() == VisualSelection(
        kind=VisualKind.CHAR, anchor=(0, 2), cursor=(0, 0)
    )
    session.feed("d")
    assert session.lines == ["def"]


def test_reselect_last_selection() -> None:
    session = make_session("abcdef")
    session.feed("gv")
    assert session.status == NO_PREVIOUS_VISUAL

    session.feed("vly")
    session.feed("gv")

    assert session.mode == "visual"
    assert session.selection() == VisualSelection(
        kind=VisualKind.CHAR, anchor=(0, 0), cursor=(0, 1)
    )


def test_text_object_extends_selection() -> None:
    session = make_session("foo bar", "x")
    session.buffer.move_to((0, 5))

    session.feed("viw")

    assert session.selection_summary() == "3 chars"
    session.feed("d")
    assert session.lines == ["foo ", "x"]


def test_find_inside_visual() -> None:
    session = make_session("hello")

    session.feed("vfly")

    assert session.register.text == "hel"


def test_block_insert_replicates_and_undoes_once() -> None:
    session = make_session("abc", "def", "ghi")

    session.feed("<C-v>jjIX<Esc>")
    assert session.lines == ["Xabc", "Xdef", "Xghi"]

    session.feed("u")
    assert session.lines == ["abc", "def", "ghi"]


def test_block_append_after_right_edge() -> None:
    session = make_session("ab", "cd")

    session.feed("<C-v>jA!<Esc>")

    assert session.lines == ["a!b", "c!d"]


def test_block_append_at_each_line_end() -> None:
    session = make_session("ab", "long line")

    session.feed("<C-v>j$A;<Esc>")

    assert session.lines == ["ab;", "long line;"]


def test_block_change() -> None:
    session = make_session("abc", "def")

    session.feed("<C-v>jlcX<Esc>")

    assert session.lines == ["Xc", "Xf"]
    assert session.register == RegisterValue("ab\nde", RegisterShape.BLOCK)


def test_switching_and_leaving_kinds() -> None:
    session = make_session("a", "b")

    session.feed("vj")
    session.feed("V")
    assert session.mode == "visual_line"
    assert session.status == "-- VISUAL LINE --"
    assert session.selection_summary() == "2 lines"

    session.feed("V")
    assert session.mode == "normal"
    assert session.selection() is None
    assert session.status == "-- NORMAL --"


def test_block_summary_and_escape() -> None:
    session = make_session("abc", "def")

    session.feed("<C-v>jl")
    assert session.selection_summary() == "2x2"

    session.feed("<Esc>")
    assert session.mode == "normal"
    assert session.cursor == (1, 1)
    assert session.lines == ["abc", "def"]

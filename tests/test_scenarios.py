"""End-to-end editing sessions driven only through key notation."""

from pathlib import Path

from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings())


def test_delete_word() -> None:
    session = make_session("hello world")

    session.feed("dw")

    assert session.lines == ["world"]
    assert session.cursor == (0, 0)


def test_delete_only_line() -> None:
    session = make_session("only")

    session.feed("dd")

    assert session.lines == [""]
    assert session.cursor == (0, 0)


def test_insert_then_undo() -> None:
    session = make_session("x")

    session.feed("iabc<Esc>u")

    assert session.lines == ["x"]


def test_block_delete_across_ragged_lines() -> None:
    session = make_session("abc", "de", "fghij")

    session.feed("<C-v>ljjd")

    assert session.lines == ["c", "", "hij"]


def test_search_forward() -> None:
    session = make_session("foo", "bar foo", "baz")

    session.feed("/foo<CR>")

    assert session.cursor == (1, 4)


def test_edit_save_and_quit(tmp_path: Path) -> None:
    target = tmp_path / "todo.txt"
    target.write_text("- milk\n- eggs\n", encoding="utf-8")
    session = EditorSession(path=target, settings=EditorSettings())

    quit_requested = session.feed("jA and bacon<Esc>ggO# Groceries<Esc>:wq<CR>")

    assert quit_requested
    assert target.read_text(encoding="utf-8") == "# Groceries\n- milk\n- eggs and bacon"

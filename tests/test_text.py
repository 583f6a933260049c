from modal_engine.buffer import BufferDocument, CharClass, normalize_range
from modal_engine.buffer.text import (
    byte_to_char_idx,
    char_class,
    char_to_byte_idx,
    is_undo_break_char,
)
from modal_engine.buffer.validation import clamp_cursor, is_valid_cursor


def make_document(*lines: str) -> BufferDocument:
    return BufferDocument(_lines=list(lines))


def test_document_is_never_empty() -> None:
    document = make_document()

    assert document.snapshot() == ("",)
    document.delete_lines(0, 0)
    assert document.line_count == 1
    assert BufferDocument.from_text("").snapshot() == ("",)


def test_mutations_bump_version_and_dirty() -> None:
    document = make_document("abc")

    document.set_line(0, "abc")
    assert document.version == 0
    assert not document.dirty

    document.set_line(0, "abd")
    document.insert_lines(1, ["x"])
    assert document.version == 2
    assert document.dirty


def test_advance_and_prev_pos_cross_lines() -> None:
    document = make_document("ab", "", "c")

    assert document.advance_pos((0, 1)) == (0, 2)
    assert document.advance_pos((0, 2)) == (1, 0)
    assert document.advance_pos((1, 0)) == (2, 0)
    assert document.advance_pos((2, 1)) is None

    assert document.prev_pos((2, 0)) == (1, 0)
    assert document.prev_pos((1, 0)) == (0, 1)
    assert document.prev_pos((0, 0)) is None


def test_char_at_out_of_range_is_none() -> None:
    document = make_document("ab")

    assert document.char_at(0, 1) == "b"
    assert document.char_at(0, 2) is None
    assert document.char_at(5, 0) is None


def test_class_at_treats_line_end_as_space() -> None:
    document = make_document("a_1 ;")

    assert document.class_at(0, 0) is CharClass.WORD
    assert document.class_at(0, 3) is CharClass.SPACE
    assert document.class_at(0, 4) is CharClass.PUNCT
    assert document.class_at(0, 5) is CharClass.SPACE
    assert document.class_at(0, 6) is None


def test_char_classes() -> None:
    assert char_class("_") is CharClass.WORD
    assert char_class("é") is CharClass.WORD
    assert char_class("\t") is CharClass.SPACE
    assert char_class("-") is CharClass.PUNCT


def test_undo_break_characters() -> None:
    assert is_undo_break_char(" ")
    assert is_undo_break_char(".")
    assert not is_undo_break_char("a")


def test_byte_index_conversion_never_splits_characters() -> None:
    line = "aé€b"

    assert char_to_byte_idx(line, 0) == 0
    assert char_to_byte_idx(line, 2) == 3
    assert char_to_byte_idx(line, 3) == 6
    assert char_to_byte_idx(line, 99) == len(line.encode("utf-8"))
    assert byte_to_char_idx(line, 3) == 2
    # Byte 4 sits inside the euro sign.
    assert byte_to_char_idx(line, 4) == 2
    assert byte_to_char_idx(line, 100) == 4


def test_normalize_range_is_commutative() -> None:
    a, b = (3, 1), (1, 7)

    assert normalize_range(a, b) == normalize_range(b, a) == ((1, 7), (3, 1))


def test_offsets_round_trip() -> None:
    document = make_document("ab", "cde")

    assert document.offset_of((1, 2)) == 5
    assert document.pos_at(5) == (1, 2)
    assert document.pos_at(2) == (0, 2)


def test_clamp_cursor_by_mode() -> None:
    document = make_document("abc", "")

    assert clamp_cursor(document, (0, 9), mode="insert") == (0, 3)
    assert clamp_cursor(document, (0, 9), mode="normal") == (0, 2)
    assert clamp_cursor(document, (7, 4), mode="visual") == (1, 0)
    assert is_valid_cursor(document, (0, 3), mode="insert")
    assert not is_valid_cursor(document, (0, 3), mode="normal")

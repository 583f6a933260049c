from modal_engine.buffer import (
    Buffer,
    BufferDocument,
    Register,
    RegisterShape,
    RegisterValue,
)
from modal_engine.buffer.blocks import (
    BlockRegion,
    delete_block,
    extract_block,
    paste_block_at,
)
from modal_engine.buffer.registers import extract_lines, extract_range
from modal_engine.runtime.settings import EditorSettings
from modal_engine.session import EditorSession


def make_session(*lines: str) -> EditorSession:
    return EditorSession(lines=list(lines), settings=EditorSettings())


def make_document(*lines: str) -> BufferDocument:
    return BufferDocument(_lines=list(lines))


def test_register_holds_latest_value() -> None:
    register = Register()
    assert register.is_empty

    register.yank("one", RegisterShape.LINE)
    register.yank("two")

    assert register.get() == RegisterValue("two", RegisterShape.CHAR)


def test_extract_range_and_lines() -> None:
    document = make_document("abc", "def", "ghi")

    assert extract_range(document, (0, 1), (0, 9)) == "bc"
    assert extract_range(document, (2, 0), (0, 2)) == "c\ndef\ng"
    assert extract_lines(document, 1, 5) == "def\nghi"


def test_block_extract_skips_short_rows() -> None:
    document = make_document("abcd", "x", "efgh")
    region = BlockRegion.from_corners((2, 2), (0, 1))

    assert (region.height, region.width) == (3, 2)
    assert extract_block(document, region) == "bc\n\nfg"
    delete_block(document, region)
    assert document.snapshot() == ("ad", "x", "eh")


def test_paste_block_pads_and_extends() -> None:
    document = make_document("abcd", "x")

    paste_block_at(document, 0, 3, ["1", "2", "3"])

    assert document.snapshot() == ("abc1d", "x  2", "   3")


def test_block_yank_paste_round_trip() -> None:
    document = make_document("abcd", "efgh")
    region = BlockRegion(top=0, bottom=1, left=1, right=2)
    segments = extract_block(document, region).split("\n")
    target = make_document("", "")

    paste_block_at(target, 0, 2, segments)

    moved = BlockRegion(top=0, bottom=1, left=2, right=3)
    assert extract_block(target, moved).split("\n") == segments


def test_char_paste_after_and_before() -> None:
    buffer = Buffer.from_text("ac")
    value = RegisterValue("b")

    buffer.paste(value, after=True)
    assert buffer.lines == ["abc"]
    assert buffer.cursor == (0, 1)

    buffer.paste(value, after=False, count=2)
    assert buffer.lines == ["abbbc"]


def test_multiline_char_paste_splits_line() -> None:
    buffer = Buffer.from_text("ad")

    buffer.paste(RegisterValue("b\nc"), after=True)

    assert buffer.lines == ["ab", "cd"]
    assert buffer.cursor == (0, 1)


def test_empty_char_register_does_not_paste() -> None:
    buffer = Buffer.from_text("abc")

    assert not buffer.paste(RegisterValue(""), after=True)
    assert buffer.version == 0


def test_yy_p_puts_line_below() -> None:
    session = make_session("one", "two")

    session.feed("yyp")

    assert session.lines == ["one", "one", "two"]
    assert session.cursor == (1, 0)
    assert session.register == RegisterValue("one", RegisterShape.LINE)


def test_dd_P_puts_line_above() -> None:
    session = make_session("one", "two")

    session.feed("jddkP")

    assert session.lines == ["two", "one"]


def test_x_then_p_swaps_characters() -> None:
    session = make_session("ab")

    session.feed("xp")

    assert session.lines == ["ba"]


def test_count_paste_repeats_text() -> None:
    session = make_session("a")

    session.feed("yl3p")

    assert session.lines == ["aaaa"]


def test_block_yank_and_paste_through_session() -> None:
    session = make_session("ab", "cd")

    session.feed("<C-v>jy")
    assert session.register == RegisterValue("a\nc", RegisterShape.BLOCK)
    assert session.cursor == (0, 0)

    session.feed("p")

    assert session.lines == ["aab", "ccd"]

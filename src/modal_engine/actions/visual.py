"""Actions applied to a Visual mode selection.

Each action receives the live :class:`VisualSelection`, remembers it for
``gv`` and performs one edit; the caller leaves Visual mode afterwards.
"""

from __future__ import annotations

from typing import Callable, Dict

from modal_engine.buffer.blocks import BlockInsert, extract_block
from modal_engine.buffer.indent import leading_whitespace
from modal_engine.buffer.registers import RegisterShape, extract_lines, extract_range
from modal_engine.modes.base_mode import ModeContext, ModeResult
from modal_engine.modes.selection import VisualKind, VisualSelection
from modal_engine.runtime import telemetry

CASE_TRANSFORMS: Dict[str, Callable[[str], str]] = {
    "~": str.swapcase,
    "u": str.lower,
    "U": str.upper,
}


def _remember(context: ModeContext, selection: VisualSelection) -> None:
    context.visual.anchor = selection.anchor
    context.visual.remember(selection.kind, selection.cursor)


def _yank(context: ModeContext, selection: VisualSelection) -> None:
    document = context.buffer.document
    if selection.kind is VisualKind.LINE:
        text = extract_lines(document, selection.first_row, selection.last_row)
        context.register.yank(text, RegisterShape.LINE)
    elif selection.kind is VisualKind.BLOCK:
        context.register.yank(extract_block(document, selection.region), RegisterShape.BLOCK)
    else:
        text = extract_range(document, selection.start, selection.end)
        context.register.yank(text, RegisterShape.CHAR)


def _delete(context: ModeContext, selection: VisualSelection) -> None:
    buffer = context.buffer
    if selection.kind is VisualKind.LINE:
        buffer.delete_lines(selection.first_row, selection.last_row)
    elif selection.kind is VisualKind.BLOCK:
        buffer.delete_block(selection.region)
    else:
        buffer.delete_range(selection.start, selection.end)


def yank_selection(context: ModeContext, selection: VisualSelection) -> ModeResult:
    _remember(context, selection)
    _yank(context, selection)
    context.buffer.move_to(selection.start, past_end=False)
    context.bus.emit("visual.yank", {"kind": selection.kind.value})
    return ModeResult(consumed=True, switch_to="normal", status="visual_yank")


def delete_selection(context: ModeContext, selection: VisualSelection) -> ModeResult:
    _remember(context, selection)
    _yank(context, selection)
    _delete(context, selection)
    context.bus.emit("visual.delete", {"kind": selection.kind.value})
    return ModeResult(consumed=True, switch_to="normal", status="visual_delete")


def change_selection(context: ModeContext, selection: VisualSelection) -> ModeResult:
    """Delete the selection and type over it.

    Line selections keep one line with the first row's indentation; block
    selections start a block insert at the left edge.
    """

    _remember(context, selection)
    _yank(context, selection)
    buffer = context.buffer
    buffer.coalescing = True
    if selection.kind is VisualKind.LINE:
        first = selection.first_row
        indent = leading_whitespace(buffer.document.get_line(first))
        buffer.replace_lines(first, selection.last_row, [indent])
        buffer.move_to((first, len(indent)))
    elif selection.kind is VisualKind.BLOCK:
        region = selection.region
        buffer.delete_block(region)
        last = min(region.bottom, buffer.document.line_count - 1)
        context.block_insert = BlockInsert(
            start_row=region.top, end_row=last, col=region.left
        )
        buffer.move_to((region.top, region.left))
    else:
        buffer.delete_range(selection.start, selection.end)
    return ModeResult(consumed=True, switch_to="insert", status="visual_change")


def put_selection(context: ModeContext, selection: VisualSelection) -> ModeResult:
    """Replace the selection with the register; the register keeps its text."""

    _remember(context, selection)
    buffer = context.buffer
    value = context.register.get()
    with buffer.transaction("visual_put"):
        _delete(context, selection)
        if selection.kind is VisualKind.LINE:
            row = selection.first_row
            if row >= buffer.document.line_count:
                buffer.move_to((buffer.document.line_count - 1, 0))
                buffer.paste(value, after=True)
            else:
                buffer.move_to((row, 0))
                buffer.paste(value, after=False)
        else:
            buffer.move_to(selection.start)
            buffer.paste(value, after=False)
    return ModeResult(consumed=True, switch_to="normal", status="visual_put")


def change_case(
    context: ModeContext, selection: VisualSelection, key: str
) -> ModeResult:
    transform = CASE_TRANSFORMS[key]
    _remember(context, selection)
    buffer = context.buffer
    if selection.kind is VisualKind.LINE:
        buffer.transform_lines(selection.first_row, selection.last_row, transform)
    elif selection.kind is VisualKind.BLOCK:
        buffer.transform_block(selection.region, transform)
    else:
        buffer.transform_range(selection.start, selection.end, transform)
    return ModeResult(consumed=True, switch_to="normal", status="visual_case")


def shift_selection(
    context: ModeContext, selection: VisualSelection, *, right: bool
) -> ModeResult:
    _remember(context, selection)
    context.buffer.shift_lines(
        selection.first_row,
        selection.last_row,
        right=right,
        shift_width=context.settings.shift_width,
    )
    return ModeResult(consumed=True, switch_to="normal", status="visual_shift")


def start_block_insert(
    context: ModeContext, selection: VisualSelection, *, append: bool
) -> ModeResult:
    """``I``/``A`` in block mode: replicate typed text on every selected row.

    ``A`` inserts after the right edge, or at each row's own end when the
    selection was extended with ``$``.
    """

    _remember(context, selection)
    buffer = context.buffer
    region = selection.region
    last = min(region.bottom, buffer.document.line_count - 1)
    if append and context.visual.to_eol:
        col = buffer.document.line_len(region.top)
        block = BlockInsert(start_row=region.top, end_row=last, col=col, append=True)
    else:
        col = region.right + 1 if append else region.left
        block = BlockInsert(start_row=region.top, end_row=last, col=col)
    context.block_insert = block
    buffer.move_to((region.top, col))
    telemetry.record_event(
        "visual.block_insert",
        level="debug",
        data={"rows": last - region.top + 1, "col": col, "append": block.append},
    )
    return ModeResult(consumed=True, switch_to="insert", status="block_insert")


__all__ = [
    "CASE_TRANSFORMS",
    "change_case",
    "change_selection",
    "delete_selection",
    "put_selection",
    "shift_selection",
    "start_block_insert",
    "yank_selection",
]

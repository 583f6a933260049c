"""Buffer abstractions: documents, cursors, registers, undo and file I/O."""

from .blocks import BlockInsert, BlockRegion
from .buffer import Buffer, Transaction
from .document import BufferDocument
from .files import BufferIOError
from .indent import IndentOptions
from .registers import Register, RegisterShape, RegisterValue
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror, SyntaxHighlighter, SyntaxSpan
from .text import CharClass, normalize_range
from .undo import EditorSnapshot, LineUndo, UndoHistory
from .validation import clamp_cursor

__all__ = [
    "BlockInsert",
    "BlockRegion",
    "Buffer",
    "BufferDocument",
    "BufferIOError",
    "BufferMirror",
    "BufferState",
    "CharClass",
    "Cursor",
    "EditorSnapshot",
    "IndentOptions",
    "LineUndo",
    "Register",
    "RegisterShape",
    "RegisterValue",
    "Selection",
    "SyntaxHighlighter",
    "SyntaxSpan",
    "Transaction",
    "UndoHistory",
    "clamp_cursor",
    "normalize_range",
]

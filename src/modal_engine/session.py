"""The editing session: buffers, register, modes and the dispatcher in one object."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence

from modal_engine.actions.command import open_path
from modal_engine.buffer import (
    Buffer,
    BufferDocument,
    BufferMirror,
    Register,
    RegisterValue,
    SyntaxHighlighter,
)
from modal_engine.buffer.files import PathLike
from modal_engine.buffer.sync import SpanMap, normalize_spans
from modal_engine.keymaps import apply_keymap_config, parse_key_sequence
from modal_engine.modes.base_mode import KeyInput, ModeBus, ModeContext, ModeResult
from modal_engine.modes.command_mode import CommandMode
from modal_engine.modes.insert_mode import InsertMode
from modal_engine.modes.mode_manager import ModeManager
from modal_engine.modes.normal_mode import NormalMode
from modal_engine.modes.prompt import PromptHistory, SearchState
from modal_engine.modes.selection import VisualKind, VisualSelection
from modal_engine.modes.visual_mode import VisualBlockMode, VisualLineMode, VisualMode
from modal_engine.runtime import telemetry
from modal_engine.runtime.settings import EditorSettings

KeymapConfig = Mapping[str, Mapping[str, str]]


class EditorSession:
    """Single owner of all editing state.

    Hosts feed keys one at a time through :meth:`handle_key` (or key notation
    through :meth:`feed`) and read back :meth:`mirror`, :attr:`status` and
    :attr:`command_line` to render.
    """

    def __init__(
        self,
        *,
        text: Optional[str] = None,
        lines: Optional[Sequence[str]] = None,
        path: Optional[PathLike] = None,
        settings: Optional[EditorSettings] = None,
        highlighter: Optional[SyntaxHighlighter] = None,
        keymaps: Optional[KeymapConfig] = None,
    ) -> None:
        self.settings = settings or EditorSettings.from_env()
        self.highlighter = highlighter
        self.logger = telemetry.get_logger("modal_engine.session")
        history_limit = self.settings.history_limit
        self.context = ModeContext(
            buffers=[self._initial_buffer(text, lines, path)],
            register=Register(),
            bus=ModeBus(),
            settings=self.settings,
            command_history=PromptHistory(limit=history_limit),
            search=SearchState(history=PromptHistory(limit=history_limit)),
        )
        self.manager = ModeManager(self.context)
        for mode_cls in (
            NormalMode,
            InsertMode,
            VisualMode,
            VisualLineMode,
            VisualBlockMode,
            CommandMode,
        ):
            self.manager.register_mode(mode_cls)
        self.keymap_errors: List[str] = []
        if keymaps:
            self.keymap_errors = apply_keymap_config(
                self.manager.keymap_registry, keymaps
            )
            if self.keymap_errors:
                self.context.set_status(self.keymap_errors[0])

    def _initial_buffer(
        self,
        text: Optional[str],
        lines: Optional[Sequence[str]],
        path: Optional[PathLike],
    ) -> Buffer:
        undo_limit = self.settings.undo_limit
        if path is not None:
            return Buffer.from_file(path, undo_limit=undo_limit)
        if lines is not None:
            document = BufferDocument(_lines=list(lines))
            return Buffer(document=document, undo_limit=undo_limit)
        return Buffer.from_text(text or "", undo_limit=undo_limit)

    # -- input -------------------------------------------------------------

    def handle_key(self, key: KeyInput) -> bool:
        """Dispatch one key; return ``True`` when the session should end."""

        return self.dispatch(key).quit

    def dispatch(self, key: KeyInput) -> ModeResult:
        return self.manager.handle_key(key)

    def feed(self, notation: str) -> bool:
        """Dispatch keys written as ``<Esc>``/``<C-v>``-style notation.

        Stops at the first key that ends the session.
        """

        if not notation:
            return False
        for stroke in parse_key_sequence(notation).strokes:
            if self.handle_key(KeyInput(stroke.key, stroke.modifiers)):
                return True
        return False

    def feed_keys(self, keys: Iterable[KeyInput]) -> bool:
        for key in keys:
            if self.handle_key(key):
                return True
        return False

    def insert_text(self, text: str) -> None:
        """Insert a host paste at the cursor as one undo step."""

        mode = self.manager.active_mode
        if isinstance(mode, InsertMode) and self.context.block_insert is not None:
            mode.insert(text)
            return
        self.buffer.history.close_window()
        self.buffer.insert_text(text)

    def open(self, path: PathLike) -> str:
        """Open ``path`` as an additional buffer (or switch to it) from Normal mode."""

        if self.mode != "normal":
            self.manager.switch_mode("normal")
        message = open_path(self.context, path)
        self.context.set_status(message)
        return message

    # -- state -------------------------------------------------------------

    @property
    def mode(self) -> str:
        active = self.manager.active_mode
        return active.name if active else ""

    @property
    def status(self) -> str:
        return self.context.status

    @property
    def buffers(self) -> List[Buffer]:
        return self.context.buffers

    @property
    def buffer(self) -> Buffer:
        return self.context.buffer

    @property
    def lines(self) -> List[str]:
        return self.buffer.lines

    @property
    def cursor(self) -> tuple[int, int]:
        return self.buffer.cursor

    @property
    def register(self) -> RegisterValue:
        return self.context.register.get()

    @property
    def command_line(self) -> str:
        """Prompt text as shown to the user (``":wq"``), empty when closed."""

        prompt = self.context.prompt
        if prompt is None or self.mode != "command":
            return ""
        return prompt.display

    def selection(self) -> Optional[VisualSelection]:
        kind = VisualKind.from_mode(self.mode)
        if kind is None:
            return None
        cursor = self.buffer.cursor
        anchor = self.context.visual.anchor
        return VisualSelection(
            kind=kind, anchor=anchor if anchor is not None else cursor, cursor=cursor
        )

    def selection_summary(self) -> Optional[str]:
        selection = self.selection()
        if selection is None:
            return None
        return selection.summary(self.buffer.document)

    def mirror(self) -> BufferMirror:
        selection = self.selection()
        host_range = (
            selection.host_range(self.buffer.document) if selection is not None else None
        )
        return self.buffer.mirror(
            selection=host_range,
            attributes={"mode": self.mode, "buffer": self.buffer.name},
        )

    def highlight(self, first_row: int = 0, last_row: Optional[int] = None) -> SpanMap:
        """Ask the highlighter for spans of the visible rows; ``{}`` without one."""

        if self.highlighter is None:
            return {}
        document = self.buffer.document
        last = document.line_count - 1 if last_row is None else last_row
        raw = self.highlighter.highlight(
            document.snapshot(), first_row, last, document.version
        )
        return normalize_spans(raw, document.line_count)


__all__ = ["EditorSession", "KeymapConfig"]

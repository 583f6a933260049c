"""Executable Textual app that hosts the modal editing engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Any, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use modal_engine.adapters.textual.app"
    ) from exc

from modal_engine.buffer import BufferMirror
from modal_engine.runtime import telemetry
from modal_engine.session import EditorSession

from .controller import TextualUIHooks, TextualVimAdapter

CURSOR_MARK = "█"


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    command_text: str = ""


def render_mirror(mirror: BufferMirror) -> str:
    """Plain-text rendering with a block glyph at the cursor."""

    lines = mirror.text.split("\n")
    row, col = mirror.cursor
    if 0 <= row < len(lines):
        line = lines[row]
        lines[row] = line[:col] + CURSOR_MARK + line[col + 1 :]
    return "\n".join(lines)


class ModalEngineApp(App[None]):
    """Minimal Textual UI embedding the editing engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#command-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [("ctrl+c", "quit", "Quit")]

    def __init__(self, *, path: Optional[str] = None) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self.session: EditorSession | None = None
        self.adapter: TextualVimAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._command_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        self._command_widget = Static("", id="command-line")
        yield self._status_widget
        yield self._command_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.session = EditorSession(path=self._path)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_command=self._show_command,
            handle_event=self._handle_event,
            request_exit=self.exit,
        )
        self.adapter = TextualVimAdapter(self.session, hooks)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+c":
            return
        self.adapter.handle_textual_key(event.key, text=event.character)
        event.stop()

    async def on_paste(self, event: events.Paste) -> None:
        if self.adapter:
            self.adapter.paste(event.text)

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = render_mirror(mirror)
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_command(self, command: str) -> None:
        self._state.command_text = command
        if self._command_widget:
            self._command_widget.update(command)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        telemetry.record_event(
            "ui.event", level="debug", data={"name": name, "payload": payload}
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the modal engine Textual demo.")
    parser.add_argument("path", nargs="?", help="File to open")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    ModalEngineApp(path=args.path).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()

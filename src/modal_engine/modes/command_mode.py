"""Command-line mode: the ``:``, ``/`` and ``?`` prompts."""

from __future__ import annotations

from typing import Optional

from modal_engine.actions.command import submit_command_line
from modal_engine.actions.search import execute_search
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import update_flag
from .prompt import PromptHistory, PromptKind, PromptState


class CommandMode(Mode):
    name = "command"

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        self.logger = telemetry.get_logger("modal_engine.modes.command")

    @property
    def prompt(self) -> PromptState:
        if self.context.prompt is None:
            self.context.prompt = PromptState()
        return self.context.prompt

    @property
    def current_command(self) -> str:
        return self.prompt.text

    def on_enter(self, previous: Optional[str]) -> None:
        del previous
        update_flag(self.context, "command_active", True)
        self.context.bus.emit("command.start", self.prompt.kind.value)

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        update_flag(self.context, "command_active", False)
        text = self.context.prompt.text if self.context.prompt else ""
        self.context.bus.emit("command.end", text)
        self.context.prompt = None

    def _history(self) -> PromptHistory:
        if self.prompt.kind.is_search:
            return self.context.search.history
        return self.context.command_history

    def handle_key(self, key: KeyInput) -> ModeResult:
        prompt = self.prompt
        if key.key == "ESC":
            return ModeResult(consumed=True, switch_to="normal", status="command_cancel")
        if key.key == "ENTER":
            return self._submit(prompt)
        if key.key == "BACKSPACE":
            if not prompt.text:
                return ModeResult(
                    consumed=True, switch_to="normal", status="command_cancel"
                )
            prompt.text = prompt.text[:-1]
            return ModeResult(consumed=True, status="editing")
        if key.key == "UP":
            prompt.older(self._history())
            return ModeResult(consumed=True, status="history")
        if key.key == "DOWN":
            prompt.newer(self._history())
            return ModeResult(consumed=True, status="history")
        char = key.char
        if char is not None:
            prompt.text += char
            return ModeResult(consumed=True, status="editing")
        return ModeResult(consumed=False, status="miss")

    def _submit(self, prompt: PromptState) -> ModeResult:
        text = prompt.text
        self.context.bus.emit("command.submit", prompt.display)
        if prompt.kind is PromptKind.COMMAND:
            self.context.command_history.push(text.strip())
            return submit_command_line(self.context, text)
        outcome = execute_search(
            self.context, text, reverse=prompt.kind is PromptKind.SEARCH_BACKWARD
        )
        return ModeResult(
            consumed=True,
            switch_to="normal",
            status="search" if outcome.found else "miss",
            message=outcome.message,
        )


__all__ = ["CommandMode"]

"""Mode manager coordinating the Normal/Insert/Visual/Command pipelines."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from modal_engine.buffer.validation import clamp_cursor
from modal_engine.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from modal_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .keymap_helpers import execute_match, keymap_flag_context
from .operator_pipeline import pipeline_for
from .repeat import RepeatRecorder
from .selection import VisualKind


class ModeManager:
    """Owns the active mode, handles transitions and dispatches key events.

    Each key goes through, in order: a pending find target, a pending text
    object, the user keymap for the active mode, and the mode's own table.
    A motion result then completes a pending operator.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self._held: List[KeyInput] = []
        self.logger = telemetry.get_logger("modal_engine.modes")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="modal_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="modal_engine.keymaps"
        )
        self.pipeline = pipeline_for(context)
        self.repeat = RepeatRecorder(self)
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("keymap_flags", {})
        self.context.extras["mode_manager"] = self
        self.context.extras["dispatch_builtin"] = self.dispatch_builtin
        self.context.extras["repeat_last_change"] = self.repeat.replay

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def held_keys(self) -> tuple[KeyInput, ...]:
        """Keys held while they prefix a longer keymap binding."""

        return tuple(self._held)

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        mode = mode_cls(self.context, *mode_args, **mode_kwargs)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous and previous.name == name:
            return
        self._held.clear()
        if previous:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", level="debug", data={"mode": name})

    # -- dispatch ----------------------------------------------------------

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            name=f"mode::{mode.name}",
            component=True,
            metadata={"key": key.token, "mode": mode.name},
        ):
            self.repeat.before_key(key)
            result = self.step(key)
            self.repeat.after_key()
        return result

    def step(self, key: KeyInput) -> ModeResult:
        """Dispatch one key without touching the change recording."""

        return self._after_mode_result(key, self._route(key, keymaps=True))

    def dispatch_builtin(self, key: KeyInput) -> ModeResult:
        """Run ``key`` with its built-in meaning, skipping user keymaps."""

        return self._after_mode_result(key, self._route(key, keymaps=False))

    def _route(self, key: KeyInput, *, keymaps: bool) -> ModeResult:
        pending = self.context.pending
        if pending.find is not None:
            return self._complete_operator(self.pipeline.complete_find(key))
        if pending.textobj is not None:
            mode = self._require_active()
            return self.pipeline.complete_textobject(key, mode.name)
        if keymaps:
            mapped = self._dispatch_keymap(key)
            if mapped is not None:
                return mapped
        mode = self._require_active()
        return self._complete_operator(mode.handle_key(key))

    def _dispatch_keymap(self, key: KeyInput) -> Optional[ModeResult]:
        keymap_mode = self._keymap_mode()
        if keymap_mode is None or not self.keymap_resolver.has_bindings(keymap_mode):
            return None
        tokens = [held.token for held in self._held] + [key.token]
        resolution = self.keymap_resolver.resolve(
            keymap_mode, tokens, context=keymap_flag_context(self.context)
        )
        if resolution.status == "match" and resolution.match is not None:
            self._held.clear()
            return execute_match(self.context, resolution.match)
        if resolution.status == "pending":
            self._held.append(key)
            return ModeResult(consumed=True, status="keymap_pending")
        if not self._held:
            return None
        # The held prefix led nowhere: give those keys their built-in meaning,
        # then try the current key on its own.
        held, self._held = self._held, []
        for stale in held:
            self.dispatch_builtin(stale)
        return self._route(key, keymaps=True)

    def _complete_operator(self, result: ModeResult) -> ModeResult:
        mode = self.active_mode
        if (
            result.motion is None
            or mode is None
            or mode.name != "normal"
            or self.context.pending.operator is None
        ):
            return result
        completed = self.pipeline.complete_motion(result.motion)
        if completed.message is None and result.message is not None:
            completed.message = result.message
        return completed

    def _after_mode_result(self, key: KeyInput, result: ModeResult) -> ModeResult:
        if result.switch_to:
            self.switch_mode(result.switch_to)
        if result.message:
            self.context.set_status(result.message)
        self._clamp_cursor()
        if key.token != "ctrl+q":
            self.context.quit_confirm = False
        return result

    def _clamp_cursor(self) -> None:
        mode = self._require_active()
        buffer = self.context.buffer
        clamp_mode = mode.name
        if self.context.pending.operator is not None:
            clamp_mode = "insert"
        target = clamp_cursor(buffer.document, buffer.cursor, mode=clamp_mode)
        if target != buffer.cursor:
            buffer.move_to(target)

    def _keymap_mode(self) -> Optional[str]:
        mode = self.active_mode
        if mode is None:
            return None
        if VisualKind.from_mode(mode.name) is not None:
            return "visual"
        return mode.name

    def _require_active(self) -> Mode:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        return mode


__all__ = ["ModeManager"]

"""Recording and replaying the last change for ``.``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

from modal_engine.runtime import telemetry

from .base_mode import KeyInput, ModeResult
from .pending import Operator

if TYPE_CHECKING:
    from .mode_manager import ModeManager

# Keys that may start a change from neutral Normal mode.
CHANGE_TRIGGERS = frozenset(
    {"i", "a", "I", "A", "o", "O", "x", "DELETE", "p", "P", "d", "c", "v", "V", "ctrl+v"}
)
REPEAT_KEY = "."


@dataclass(slots=True)
class RecordedChange:
    keys: Tuple[KeyInput, ...]

    @property
    def notation(self) -> str:
        return " ".join(key.token for key in self.keys)


@dataclass(slots=True)
class _Recording:
    keys: List[KeyInput] = field(default_factory=list)
    baseline: Tuple[int, int] = (0, 0)


class RepeatRecorder:
    """Watches keys going through a :class:`ModeManager`.

    A recording starts on a change key typed in neutral Normal mode (any
    count typed before it is kept) and ends once Normal mode is neutral
    again. It becomes the last change only if the buffer was edited.
    """

    def __init__(self, manager: "ModeManager") -> None:
        self.manager = manager
        self.last: Optional[RecordedChange] = None
        self.replaying = False
        self._recording: Optional[_Recording] = None
        self.logger = telemetry.get_logger("modal_engine.modes.repeat")

    @property
    def recording(self) -> bool:
        return self._recording is not None

    def _fingerprint(self) -> Tuple[int, int]:
        buffer = self.manager.context.buffer
        return id(buffer), buffer.version

    def before_key(self, key: KeyInput) -> None:
        if self.replaying:
            return
        if self._recording is not None:
            if key.token != REPEAT_KEY:
                self._recording.keys.append(key)
            return
        mode = self.manager.active_mode
        pending = self.manager.context.pending
        if mode is None or mode.name != "normal" or key.token not in CHANGE_TRIGGERS:
            return
        if (
            pending.operator is not None
            or pending.textobj is not None
            or pending.find is not None
            or pending.g
        ):
            return
        seed = [KeyInput(digit) for digit in pending.count_keys]
        self._recording = _Recording(keys=seed + [key], baseline=self._fingerprint())

    def after_key(self) -> None:
        recording = self._recording
        if recording is None or self.replaying:
            return
        mode = self.manager.active_mode
        if mode is None or mode.name != "normal":
            return
        if not self.manager.context.pending.is_neutral:
            return
        self._recording = None
        if self._fingerprint() == recording.baseline:
            return
        self.last = RecordedChange(keys=tuple(recording.keys))
        telemetry.record_event(
            "repeat.commit",
            level="debug",
            data={"keys": self.last.notation},
        )

    def replay(self, count: Optional[int] = None) -> ModeResult:
        """Feed the last change back through the manager ``count`` times."""

        if self.last is None or self.replaying:
            return ModeResult(consumed=True, status="noop")
        keys = self.last.keys
        line_delete = tuple(key.token for key in keys) == ("d", "d")
        self.replaying = True
        try:
            for _ in range(max(count or 1, 1)):
                if line_delete:
                    # Always the row under the cursor now, not the recorded one.
                    row = self.manager.context.buffer.state.row
                    self.manager.pipeline.apply_lines(Operator.DELETE, row, row)
                    continue
                for key in keys:
                    self.manager.step(key)
        finally:
            self.replaying = False
        return ModeResult(consumed=True, status="repeat")


__all__ = ["CHANGE_TRIGGERS", "RecordedChange", "RepeatRecorder"]

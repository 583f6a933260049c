"""Command-line prompt state, prompt history and the last search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from modal_engine.runtime.settings import DEFAULT_HISTORY_LIMIT


class PromptKind(str, Enum):
    COMMAND = ":"
    SEARCH_FORWARD = "/"
    SEARCH_BACKWARD = "?"

    @property
    def is_search(self) -> bool:
        return self is not PromptKind.COMMAND


class PromptHistory:
    """Bounded list of submitted prompt lines, newest last."""

    def __init__(self, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.limit = max(limit, 1)
        self._entries: List[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> str:
        return self._entries[index]

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def push(self, entry: str) -> None:
        """Append ``entry`` unless it repeats the previous one."""

        if not entry:
            return
        if self._entries and self._entries[-1] == entry:
            return
        self._entries.append(entry)
        overflow = len(self._entries) - self.limit
        if overflow > 0:
            del self._entries[:overflow]


@dataclass(slots=True)
class PromptState:
    """The line being typed after ``:``, ``/`` or ``?``.

    ``history_index`` is ``None`` while editing a fresh line; walking the
    history keeps the unsent text in ``draft``.
    """

    kind: PromptKind = PromptKind.COMMAND
    text: str = ""
    history_index: Optional[int] = None
    draft: str = ""

    @property
    def display(self) -> str:
        return f"{self.kind.value}{self.text}"

    def older(self, history: PromptHistory) -> None:
        if not len(history):
            return
        if self.history_index is None:
            self.draft = self.text
            self.history_index = len(history) - 1
        elif self.history_index > 0:
            self.history_index -= 1
        self.text = history[self.history_index]

    def newer(self, history: PromptHistory) -> None:
        if self.history_index is None:
            return
        if self.history_index + 1 < len(history):
            self.history_index += 1
            self.text = history[self.history_index]
        else:
            self.history_index = None
            self.text = self.draft


@dataclass(frozen=True, slots=True)
class SearchSpec:
    pattern: str
    reverse: bool = False


@dataclass(slots=True)
class SearchState:
    last: Optional[SearchSpec] = None
    history: PromptHistory = field(default_factory=PromptHistory)


__all__ = [
    "PromptHistory",
    "PromptKind",
    "PromptState",
    "SearchSpec",
    "SearchState",
]

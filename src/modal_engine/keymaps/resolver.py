"""Prefix-tree lookup of key sequences against registered bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Literal, Mapping, Optional, Sequence

from modal_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    bindings: list[str] = field(default_factory=list)
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def walk(self, tokens: Sequence[str]) -> tuple[Optional["TrieNode"], int]:
        """Follow ``tokens`` as far as they go; return the node reached and depth."""

        node: TrieNode = self
        for depth, token in enumerate(tokens):
            nxt = node.children.get(token)
            if nxt is None:
                return None, depth
            node = nxt
        return node, len(tokens)


@dataclass(slots=True)
class KeymapTrie:
    """Bindings of one mode keyed by token path."""

    mode: str
    revision: int = -1
    root: TrieNode = field(default_factory=TrieNode)

    @classmethod
    def build(cls, registry: KeymapRegistry, mode: str) -> "KeymapTrie":
        trie = cls(mode=mode, revision=registry.revision())
        for binding in registry.iter_bindings(mode):
            node = trie.root
            for token in binding.sequence.tokens:
                node = node.children.setdefault(token, TrieNode())
            node.bindings.append(binding.id)
        return trie


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """``match`` runs an action, ``pending`` waits for more keys, ``miss`` falls through.

    An exact match wins over longer bindings sharing its prefix. There is no
    timeout: a pending prefix stays held until the next key extends it or
    misses.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()


class KeymapResolver:
    """Resolves token sequences per mode, rebuilding a trie when the registry changes."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._tries: Dict[str, KeymapTrie] = {}

    @property
    def registry(self) -> KeymapRegistry:
        return self._registry

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        sequence = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "length": len(sequence)},
        ) as handle:
            result = self._lookup(mode, sequence, context or {})
            handle.add_metadata("status", result.status)
            if result.match is not None:
                handle.add_metadata("binding_id", result.match.binding.id)
            return result

    def has_bindings(self, mode: str) -> bool:
        return bool(self._trie_for(mode).root.children)

    def _lookup(
        self, mode: str, sequence: tuple[str, ...], flags: Mapping[str, bool]
    ) -> ResolutionResult:
        node, depth = self._trie_for(mode).root.walk(sequence)
        if node is None:
            return ResolutionResult(status="miss", consumed=depth)
        best = min(
            self._candidates(node, flags),
            key=lambda m: (-m.binding.priority, m.binding.id),
            default=None,
        )
        if best is not None:
            return ResolutionResult(status="match", match=best, consumed=depth)
        if node.children:
            return ResolutionResult(
                status="pending",
                consumed=depth,
                next_expected=tuple(sorted(node.children)),
            )
        return ResolutionResult(status="miss", consumed=depth)

    def _trie_for(self, mode: str) -> KeymapTrie:
        trie = self._tries.get(mode)
        if trie is None or trie.revision != self._registry.revision():
            trie = self._tries[mode] = KeymapTrie.build(self._registry, mode)
        return trie

    def _candidates(
        self, node: TrieNode, flags: Mapping[str, bool]
    ) -> Iterator[ResolutionMatch]:
        for binding_id in node.bindings:
            binding = self._registry.get_binding(binding_id)
            if binding.allows(flags):
                yield ResolutionMatch(
                    binding=binding, action=self._registry.get_action(binding.action_id)
                )


__all__ = [
    "KeymapResolver",
    "KeymapTrie",
    "ResolutionMatch",
    "ResolutionResult",
]

"""Decodes pending input bytes against a keymap, one trie per keymap."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Mapping, Optional

from gapline.runtime.telemetry import span

from .models import ActionRef, Binding, tokens_for_bytes
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    """Bindings ending at this byte plus the bytes that may follow it."""

    bindings: list[Binding] = field(default_factory=list)
    children: Dict[int, "TrieNode"] = field(default_factory=dict)
    # shortest timeout of any binding strictly below this node
    timeout_ms: Optional[int] = None

    def next_tokens(self) -> tuple[str, ...]:
        return tokens_for_bytes(bytes(sorted(self.children)))


def build_trie(bindings) -> TrieNode:
    root = TrieNode()
    for binding in bindings:
        node = root
        for code in binding.sequence.raw:
            node.timeout_ms = _shorter(node.timeout_ms, binding.sequence.timeout_ms)
            node = node.children.setdefault(code, TrieNode())
        node.bindings.append(binding)
    return root


def _shorter(current: Optional[int], candidate: int) -> int:
    return candidate if current is None else min(current, candidate)


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """``match`` runs an action, ``pending`` waits for more bytes, ``miss`` gives up.

    ``consumed`` counts the leading bytes that followed a path in the trie.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


class KeymapResolver:
    """Walks the keymap trie with the bytes received so far.

    A node that completes a binding allowed by the session flags wins
    immediately, even if longer sequences share its prefix. Tries are
    rebuilt when the registry revision changes.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._tries: Dict[str, tuple[int, TrieNode]] = {}

    def resolve(
        self,
        keymap: str,
        data: bytes,
        *,
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        flags = context or {}
        data = bytes(data)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"keymap": keymap, "length": len(data)},
        ) as handle:
            result = self._walk(self._trie(keymap), data, flags)
            handle.add_metadata("status", result.status)
            if result.match is not None:
                handle.add_metadata("binding_id", result.match.binding.id)
            return result

    def reset(self, keymap: Optional[str] = None) -> None:
        if keymap is None:
            self._tries.clear()
        else:
            self._tries.pop(keymap, None)

    def _walk(
        self, root: TrieNode, data: bytes, flags: Mapping[str, bool]
    ) -> ResolutionResult:
        node = root
        for consumed, code in enumerate(data):
            child = node.children.get(code)
            if child is None:
                return ResolutionResult(status="miss", consumed=consumed)
            node = child

        allowed = [binding for binding in node.bindings if binding.allows(flags)]
        if allowed:
            best = min(allowed, key=lambda binding: (-binding.priority, binding.id))
            action = self._registry.get_action(best.action_id)
            return ResolutionResult(
                status="match",
                match=ResolutionMatch(binding=best, action=action),
                consumed=len(data),
            )
        if node.children:
            return ResolutionResult(
                status="pending",
                consumed=len(data),
                next_expected=node.next_tokens(),
                timeout_ms=node.timeout_ms,
            )
        return ResolutionResult(status="miss", consumed=len(data))

    def _trie(self, keymap: str) -> TrieNode:
        revision = self._registry.revision()
        cached = self._tries.get(keymap)
        if cached is None or cached[0] != revision:
            cached = (revision, build_trie(self._registry.iter_bindings(keymap)))
            self._tries[keymap] = cached
        return cached[1]


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "TrieNode",
    "build_trie",
]

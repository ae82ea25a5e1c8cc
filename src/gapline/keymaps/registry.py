"""Registry of editing actions and the byte sequences bound to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence

from gapline.runtime.telemetry import SpanHandle, span

from .models import ActionRef, Binding

# keymap -> raw sequence -> binding ids
SequenceIndex = Dict[str, Dict[bytes, set[str]]]


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    keymaps: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would fire in the same situation as an existing one."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        clashing = ", ".join(other.id for other in self.conflicts)
        super().__init__(
            f"{binding.keymap}: '{binding.key_signature}' for '{binding.id}' "
            f"is already bound by {clashing}"
        )


class KeymapRegistry:
    """Owns action references and the bindings that point at them.

    Every change to the bindings bumps ``revision()`` so resolvers know to
    rebuild their lookup tables.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._index: SequenceIndex = {}
        self._logger_name = logger_name
        self._revision = 0

    def _span(self, name: str, **metadata: object):
        return span(
            f"keymaps::{name}",
            logger_name=self._logger_name,
            component="keymaps",
            metadata=metadata,
        )

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"unknown action '{action_id}'")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"unknown binding '{binding_id}'")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        with self._span("register_action", action_id=action.id):
            if action.id in self._actions and not replace:
                raise ValueError(f"action '{action.id}' is already registered")
            self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts same-id and clashing entries."""

        with self._span(
            "register_binding", binding_id=binding.id, keymap=binding.keymap
        ) as handle:
            self._require_action(binding, handle)
            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if not replace:
                if conflicts:
                    handle.add_metadata("conflicts", ",".join(c.id for c in conflicts))
                    raise KeymapConflictError(binding, conflicts)
                if binding.id in self._bindings:
                    raise ValueError(f"binding '{binding.id}' is already registered")

            for stale in (self._bindings.get(binding.id), *conflicts):
                if stale is not None:
                    self._unindex(stale)
            self._bindings[binding.id] = binding
            self._index.setdefault(binding.keymap, {}).setdefault(
                binding.sequence.raw, set()
            ).add(binding.id)
            self._revision += 1
        return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        with self._span("unregister_binding", binding_id=binding_id):
            binding = self._bindings.get(binding_id)
            if binding is not None:
                self._unindex(binding)
                self._revision += 1
        return binding

    def iter_bindings(self, keymap: Optional[str] = None) -> Iterator[Binding]:
        """Yield bindings, grouped by sequence when ``keymap`` is given."""

        if keymap is None:
            yield from self._bindings.values()
            return
        sequences = self._index.get(keymap, {})
        for raw in sorted(sequences):
            for binding_id in sorted(sequences[raw]):
                yield self._bindings[binding_id]

    def bindings_for(self, keymap: str, raw: bytes) -> list[Binding]:
        ids = self._index.get(keymap, {}).get(bytes(raw), ())
        return [self._bindings[binding_id] for binding_id in sorted(ids)]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            keymaps=tuple(sorted(self._index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] | None = None
    ) -> list[Binding]:
        ignored = set(ignore or ())
        return [
            other
            for other in self.bindings_for(binding.keymap, binding.sequence.raw)
            if other.id not in ignored and _contexts_overlap(binding, other)
        ]

    def _require_action(self, binding: Binding, handle: SpanHandle) -> None:
        if binding.action_id not in self._actions:
            handle.add_metadata("missing_action", binding.action_id)
            raise KeyError(
                f"binding '{binding.id}' refers to unknown action '{binding.action_id}'"
            )

    def _unindex(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        sequences = self._index.get(binding.keymap, {})
        ids = sequences.get(binding.sequence.raw)
        if ids is None:
            return
        ids.discard(binding.id)
        if not ids:
            del sequences[binding.sequence.raw]
        if not sequences:
            self._index.pop(binding.keymap, None)


def _contexts_overlap(left: Binding, right: Binding) -> bool:
    """True when both bindings would be live for the same session flags.

    Unconditional bindings overlap each other. A gated binding next to an
    unconditional one is treated as an override, and two gated bindings
    overlap only when their conditions are identical.
    """

    if bool(left.when) != bool(right.when):
        return False
    return left.conditions == right.conditions


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]

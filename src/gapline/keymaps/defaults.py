"""Readline-style default bindings, including common VT100/xterm escape keys."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from gapline.actions import editing

from .models import ActionRef, Binding, KeySequence
from .registry import KeymapRegistry

DEFAULT_KEYMAP = "emacs"

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="edit.beginning_of_line",
        handler=editing.beginning_of_line,
        description="beginning of line",
    ),
    ActionRef(
        id="edit.end_of_line",
        handler=editing.end_of_line,
        description="end of line",
    ),
    ActionRef(
        id="edit.backward_char",
        handler=editing.backward_char,
        description="backward character",
    ),
    ActionRef(
        id="edit.forward_char",
        handler=editing.forward_char,
        description="forward character",
    ),
    ActionRef(
        id="edit.backward_word",
        handler=editing.backward_word,
        description="backward word",
    ),
    ActionRef(
        id="edit.forward_word",
        handler=editing.forward_word,
        description="forward word",
    ),
    ActionRef(
        id="edit.delete_backward",
        handler=editing.delete_backward,
        description="delete character before cursor",
    ),
    ActionRef(
        id="edit.delete_forward",
        handler=editing.delete_forward,
        description="delete character at cursor",
    ),
    ActionRef(
        id="edit.kill_word",
        handler=editing.kill_word,
        description="delete word forward",
    ),
    ActionRef(
        id="edit.word_rubout",
        handler=editing.word_rubout,
        description="delete word backward",
    ),
    ActionRef(
        id="edit.kill_line",
        handler=editing.kill_line,
        description="delete to end of line",
    ),
    ActionRef(
        id="edit.line_discard",
        handler=editing.line_discard,
        description="delete to start of line",
    ),
    ActionRef(
        id="session.clear_screen",
        handler=editing.clear_screen,
        description="clear screen",
    ),
    ActionRef(
        id="session.end_of_input",
        handler=editing.end_of_input,
        description="end input on an empty line",
    ),
    ActionRef(
        id="session.submit",
        handler=editing.submit_line,
        description="submit the line",
    ),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="emacs.ctrl_a",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x01"),
        action_id="edit.beginning_of_line",
    ),
    Binding(
        id="emacs.ctrl_e",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x05"),
        action_id="edit.end_of_line",
    ),
    Binding(
        id="emacs.ctrl_b",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x02"),
        action_id="edit.backward_char",
    ),
    Binding(
        id="emacs.ctrl_f",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x06"),
        action_id="edit.forward_char",
    ),
    Binding(
        id="emacs.ctrl_k",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x0b"),
        action_id="edit.kill_line",
    ),
    Binding(
        id="emacs.ctrl_u",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x15"),
        action_id="edit.line_discard",
    ),
    Binding(
        id="emacs.ctrl_w",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x17"),
        action_id="edit.word_rubout",
    ),
    Binding(
        id="emacs.backspace",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x7f"),
        action_id="edit.delete_backward",
    ),
    Binding(
        id="emacs.ctrl_l",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x0c"),
        action_id="session.clear_screen",
    ),
    Binding(
        id="emacs.ctrl_d",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x04"),
        action_id="edit.delete_forward",
        when=("!buffer_empty",),
    ),
    Binding(
        id="emacs.ctrl_d_eof",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x04"),
        action_id="session.end_of_input",
        when=("buffer_empty",),
    ),
    Binding(
        id="emacs.enter",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\n"),
        action_id="session.submit",
    ),
    Binding(
        id="emacs.return",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\r"),
        action_id="session.submit",
    ),
    Binding(
        id="emacs.meta_f",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1bf"),
        action_id="edit.forward_word",
    ),
    Binding(
        id="emacs.meta_b",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1bb"),
        action_id="edit.backward_word",
    ),
    Binding(
        id="emacs.meta_d",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1bd"),
        action_id="edit.kill_word",
    ),
    Binding(
        id="emacs.ctrl_right",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[1;5C"),
        action_id="edit.forward_word",
    ),
    Binding(
        id="emacs.ctrl_left",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[1;5D"),
        action_id="edit.backward_word",
    ),
    Binding(
        id="emacs.right",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[C"),
        action_id="edit.forward_char",
    ),
    Binding(
        id="emacs.left",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[D"),
        action_id="edit.backward_char",
    ),
    Binding(
        id="emacs.home",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[H"),
        action_id="edit.beginning_of_line",
    ),
    Binding(
        id="emacs.end",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[F"),
        action_id="edit.end_of_line",
    ),
    Binding(
        id="emacs.home_vt",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[1~"),
        action_id="edit.beginning_of_line",
    ),
    Binding(
        id="emacs.end_vt",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[4~"),
        action_id="edit.end_of_line",
    ),
    Binding(
        id="emacs.delete",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[3~"),
        action_id="edit.delete_forward",
    ),
    Binding(
        id="emacs.delete_char",
        keymap=DEFAULT_KEYMAP,
        sequence=KeySequence.from_bytes(b"\x1b[P"),
        action_id="edit.delete_forward",
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    default_sequence_timeout_ms: int | None = None,
    exclude_bindings: Sequence[str] | None = None,
) -> None:
    """Register the built-in actions and the ``emacs`` keymap."""

    excluded = set(exclude_bindings or ())
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if binding.id in excluded:
            continue
        registry.register_binding(
            _with_timeout(binding, default_sequence_timeout_ms), replace=replace
        )

    for binding in extra_bindings or ():
        registry.register_binding(binding, replace=replace)


def describe_bindings(
    registry: KeymapRegistry, keymap: str = DEFAULT_KEYMAP
) -> str:
    """Render a two-column help listing: keys on the left, action on the right."""

    keys_by_action: dict[str, list[str]] = {}
    for binding in registry.iter_bindings(keymap):
        keys_by_action.setdefault(binding.action_id, []).append(binding.key_signature)

    rows = []
    for action_id, signatures in keys_by_action.items():
        description = registry.get_action(action_id).description or action_id
        rows.append((", ".join(sorted(signatures)), description))
    rows.sort(key=lambda row: row[1])

    width = max((len(keys) for keys, _ in rows), default=0)
    return "\n".join(f"  {keys.ljust(width)}  {description}" for keys, description in rows)


def _with_timeout(binding: Binding, timeout_ms: int | None) -> Binding:
    if timeout_ms is None:
        return binding
    return replace(binding, sequence=replace(binding.sequence, timeout_ms=timeout_ms))


__all__ = [
    "DEFAULT_KEYMAP",
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "load_default_keymaps",
    "describe_bindings",
]

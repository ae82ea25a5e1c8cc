"""Editing commands bound to keys: motions, kills, submit, and end of input."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from gapline.buffer import GapBuffer, navigation
from gapline.session.context import EditResult, SessionContext

if TYPE_CHECKING:
    from gapline.keymaps import ResolutionMatch

BufferOperation = Callable[[GapBuffer], bool]


def _apply(
    context: SessionContext, match: "ResolutionMatch", operation: BufferOperation
) -> EditResult:
    ok = operation(context.buffer)
    return EditResult(
        consumed=True,
        status="ok" if ok else "failed",
        action=match.action.id,
        message=None if ok else getattr(context.buffer.last_failure, "value", None),
    )


def forward_char(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.forward_char)


def backward_char(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.backward_char)


def forward_word(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.forward_word)


def backward_word(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.backward_word)


def beginning_of_line(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.home)


def end_of_line(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.end)


def kill_word(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.kill_word)


def kill_line(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.kill_line)


def line_discard(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.line_discard)


def word_rubout(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, navigation.word_rubout)


def delete_backward(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, lambda buffer: buffer.delete(-1))


def delete_forward(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    return _apply(context, match, lambda buffer: buffer.delete(1))


def clear_screen(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    context.bus.emit("screen.clear")
    return EditResult(consumed=True, status="clear", action=match.action.id)


def end_of_input(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    """C-d on an empty line: the session ends without submitting anything."""

    context.bus.emit("line.eof")
    return EditResult(consumed=True, status="eof", action=match.action.id)


def submit_line(context: SessionContext, match: "ResolutionMatch") -> EditResult:
    written = context.store()
    truncated = len(context.buffer) > written
    context.bus.emit("line.submit", context.stored(written))
    return EditResult(
        consumed=True,
        status="submit",
        action=match.action.id,
        message="truncated" if truncated else None,
        written=written,
    )


__all__ = [
    "forward_char",
    "backward_char",
    "forward_word",
    "backward_word",
    "beginning_of_line",
    "end_of_line",
    "kill_word",
    "kill_line",
    "line_discard",
    "word_rubout",
    "delete_backward",
    "delete_forward",
    "clear_screen",
    "end_of_input",
    "submit_line",
]

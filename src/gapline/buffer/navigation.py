"""Cursor-relative motions and kills for line editing.

Every scan borrows exactly one side of the gap: ``view(0, cursor)`` when
looking backward, ``view(cursor)`` when looking forward. Because the cursor
is the gap boundary those views are always a single run. Word motions and
``kill_word`` stop on alphanumeric boundaries while ``word_rubout`` stops on
whitespace, matching readline's ``M-f``/``M-d`` versus ``C-w``.
"""

from __future__ import annotations

from typing import Callable, Optional

from .buffer import GapBuffer
from .validation import FailureKind

LINE_TERMINATOR = 0x0A

# C-locale classes; bytes >= 0x80 are neither.
_ALNUM = frozenset(b"0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")
_SPACE = frozenset(b" \t\n\v\f\r")

ByteTest = Callable[[int], bool]


def is_alnum(code: int) -> bool:
    return code in _ALNUM


def is_space(code: int) -> bool:
    return code in _SPACE


def is_line_terminator(code: int) -> bool:
    return code == LINE_TERMINATOR


def _not(test: ByteTest) -> ByteTest:
    return lambda code: not test(code)


def _after_cursor(buffer: GapBuffer) -> Optional[memoryview]:
    pair = buffer.view(buffer.cursor)
    if pair is None or pair.split:
        return None
    return pair.first


def _before_cursor(buffer: GapBuffer) -> Optional[memoryview]:
    if buffer.cursor == 0:
        buffer.last_failure = FailureKind.OUT_OF_RANGE
        return None
    pair = buffer.view(0, buffer.cursor)
    if pair is None or pair.split:
        return None
    return pair.first


def _scan_forward(run: memoryview, *phases: ByteTest) -> int:
    """Count bytes from the front, skipping one run per ``phases`` predicate."""

    offset = 0
    for keep in phases:
        while offset < len(run) and keep(run[offset]):
            offset += 1
    return offset


def _scan_backward(run: memoryview, *phases: ByteTest) -> int:
    offset = len(run)
    for keep in phases:
        while offset > 0 and keep(run[offset - 1]):
            offset -= 1
    return len(run) - offset


def forward_char(buffer: GapBuffer) -> bool:
    return buffer.move_cursor(1)


def backward_char(buffer: GapBuffer) -> bool:
    return buffer.move_cursor(-1)


def forward_word(buffer: GapBuffer) -> bool:
    """Move to the end of the next alphanumeric run."""

    run = _after_cursor(buffer)
    if run is None:
        return False
    return buffer.move_cursor(_scan_forward(run, _not(is_alnum), is_alnum))


def backward_word(buffer: GapBuffer) -> bool:
    """Move to the start of the previous alphanumeric run."""

    run = _before_cursor(buffer)
    if run is None:
        return False
    return buffer.move_cursor(-_scan_backward(run, _not(is_alnum), is_alnum))


def home(buffer: GapBuffer) -> bool:
    """Move to the start of the current line; a no-op success at position 0."""

    if buffer.cursor == 0:
        return buffer.move_cursor(0)
    run = _before_cursor(buffer)
    if run is None:
        return False
    return buffer.move_cursor(-_scan_backward(run, _not(is_line_terminator)))


def end(buffer: GapBuffer) -> bool:
    run = _after_cursor(buffer)
    if run is None:
        return False
    return buffer.move_cursor(_scan_forward(run, _not(is_line_terminator)))


def kill_word(buffer: GapBuffer) -> bool:
    run = _after_cursor(buffer)
    if run is None:
        return False
    return buffer.delete(_scan_forward(run, _not(is_alnum), is_alnum))


def kill_line(buffer: GapBuffer) -> bool:
    run = _after_cursor(buffer)
    if run is None:
        return False
    return buffer.delete(_scan_forward(run, _not(is_line_terminator)))


def line_discard(buffer: GapBuffer) -> bool:
    run = _before_cursor(buffer)
    if run is None:
        return False
    return buffer.delete(-_scan_backward(run, _not(is_line_terminator)))


def word_rubout(buffer: GapBuffer) -> bool:
    """Delete back over trailing whitespace and the word before it."""

    run = _before_cursor(buffer)
    if run is None:
        return False
    return buffer.delete(-_scan_backward(run, is_space, _not(is_space)))


__all__ = [
    "LINE_TERMINATOR",
    "is_alnum",
    "is_space",
    "is_line_terminator",
    "forward_char",
    "backward_char",
    "forward_word",
    "backward_word",
    "home",
    "end",
    "kill_word",
    "kill_line",
    "line_discard",
    "word_rubout",
]

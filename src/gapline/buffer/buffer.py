"""Cursor-centric edit, read, and view operations on top of ``GapStorage``."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Optional, Union

from gapline.runtime.settings import DEFAULT_INIT_SIZE

from .storage import GapStorage
from .sync import BufferMirror
from .validation import FailureKind
from .view import SlicePair

BytesLike = Union[bytes, bytearray, memoryview]


class GapBuffer(GapStorage, AbstractContextManager["GapBuffer"]):
    """Mutable byte sequence whose cursor is the left edge of the gap.

    Edits at the cursor are O(1) amortized; moving the cursor costs the
    distance moved. Operations that can fail return ``bool`` and leave the
    reason in ``last_failure``; they never raise for bad positions.
    """

    def __init__(self, initial_size: int = DEFAULT_INIT_SIZE) -> None:
        super().__init__(initial_size)

    @classmethod
    def from_bytes(
        cls, data: BytesLike, *, initial_size: int = DEFAULT_INIT_SIZE
    ) -> "GapBuffer":
        buffer = cls(initial_size)
        if len(data) and not buffer.append_bytes(data):
            raise MemoryError("could not allocate gap buffer storage")
        return buffer

    # lifecycle

    def reset(self) -> None:
        """Empty the buffer logically; storage is kept and not scrubbed."""

        self._check()
        self.gap_start = 0
        self.gap_end = self.capacity
        self._touch()

    def destroy(self) -> None:
        self.release_storage()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.destroy()
        return False

    # cursor

    @property
    def cursor(self) -> int:
        return self.gap_start

    def set_cursor(self, pos: int) -> bool:
        self._check()
        self.last_failure = None
        if pos < 0 or pos > self.length:
            return self._fail(FailureKind.OUT_OF_RANGE)
        self.move_gap(pos)
        return True

    def move_cursor(self, delta: int) -> bool:
        self._check()
        self.last_failure = None
        target = self.gap_start + delta
        if target < 0 or target > self.length:
            return self._fail(FailureKind.OUT_OF_RANGE)
        return self.set_cursor(target)

    # edits

    def append_byte(self, c: int) -> bool:
        """Insert one byte at the cursor and step past it."""

        self._check()
        self.last_failure = None
        if not 0 <= c <= 0xFF:
            return self._fail(FailureKind.INVALID_ARGUMENT)
        if not self.reserve(1):
            return False
        self.data[self.gap_start] = c
        self.gap_start += 1
        self._touch()
        self._check()
        return True

    def append_bytes(self, data: Optional[BytesLike], n: int = 0) -> bool:
        """Insert the first ``n`` bytes of ``data`` at the cursor.

        ``n == 0`` takes all of ``data``.
        """

        self._check()
        self.last_failure = None
        source = self._source(data, n)
        if source is None:
            return False
        if not self.reserve(len(source)):
            return False
        self.data[self.gap_start : self.gap_start + len(source)] = source
        self.gap_start += len(source)
        self._touch()
        self._check()
        return True

    def insert_at(self, pos: int, data: Optional[BytesLike], n: int = 0) -> bool:
        """Move the cursor to ``pos`` and append there.

        Arguments are validated before the cursor moves, so a rejected insert
        leaves the buffer untouched.
        """

        self._check()
        self.last_failure = None
        if self._source(data, n) is None:
            return False
        if not self.set_cursor(pos):
            return False
        return self.append_bytes(data, n)

    def _source(self, data: Optional[BytesLike], n: int) -> Optional[memoryview]:
        if data is None:
            self._fail(FailureKind.INVALID_ARGUMENT)
            return None
        source = memoryview(data).cast("B")
        n = n or len(source)
        if n < 0 or n > len(source):
            self._fail(FailureKind.INVALID_ARGUMENT)
            return None
        return source[:n]

    def delete(self, delta: int) -> bool:
        """Drop ``delta`` bytes after (positive) or before (negative) the cursor.

        Only the gap boundaries move; removed bytes stay in storage as stale
        gap content.
        """

        self._check()
        self.last_failure = None
        if delta == 0:
            return self._fail(FailureKind.INVALID_ARGUMENT)
        if delta > 0:
            if delta > self.length - self.gap_start:
                return self._fail(FailureKind.OUT_OF_RANGE)
            self.gap_end += delta
        else:
            if self.gap_start + delta < 0:
                return self._fail(FailureKind.OUT_OF_RANGE)
            self.gap_start += delta
        self._touch()
        self._check()
        return True

    # reads

    def read_into(
        self, pos: int, dst: Optional[Union[bytearray, memoryview]], n: int | None = None
    ) -> int:
        """Copy up to ``n`` logical bytes from ``pos`` into ``dst``.

        ``n`` defaults to ``len(dst)`` and is clipped to both the destination
        size and the bytes available. Returns the count copied, ``0`` when
        ``pos`` is out of range, there is nothing to copy, or ``dst`` is
        read-only.
        """

        self._check()
        if dst is None:
            return 0
        target = memoryview(dst).cast("B")
        if target.readonly:
            self.last_failure = FailureKind.INVALID_ARGUMENT
            return 0
        length = self.length
        n = len(target) if n is None else min(n, len(target))
        if n <= 0 or pos < 0 or pos >= length:
            return 0
        n = min(n, length - pos)

        start, end = self.gap_start, self.gap_end
        if pos >= start:
            physical = pos + self.gap_length
            target[:n] = self.data[physical : physical + n]
        elif pos + n <= start:
            target[:n] = self.data[pos : pos + n]
        else:
            head = start - pos
            target[:head] = self.data[pos:start]
            target[head:n] = self.data[end : end + n - head]
        return n

    def read(self, pos: int = 0, n: int | None = None) -> bytes:
        """Return up to ``n`` logical bytes from ``pos`` as a new ``bytes``."""

        available = max(self.length - pos, 0)
        out = bytearray(available if n is None else max(min(n, available), 0))
        copied = self.read_into(pos, out)
        return bytes(out[:copied])

    def view(self, pos: int = 0, n: int = 0) -> Optional[SlicePair]:
        """Borrow the logical range ``[pos, pos + n)`` without copying.

        ``n == 0`` (or a length past the end) means through the end of the
        buffer. Returns ``None`` when ``pos`` is not inside the content.
        """

        self._check()
        self.last_failure = None
        length = self.length
        if pos < 0 or pos >= length or n < 0:
            self._fail(FailureKind.OUT_OF_RANGE)
            return None
        if not n or pos + n > length:
            n = length - pos

        storage = memoryview(self.data).toreadonly()
        start = self.gap_start
        empty = storage[0:0]
        if pos >= start:
            physical = pos + self.gap_length
            return SlicePair(self, pos, storage[physical : physical + n], empty)
        if pos + n <= start:
            return SlicePair(self, pos, storage[pos : pos + n], empty)
        head = start - pos
        return SlicePair(
            self,
            pos,
            storage[pos:start],
            storage[self.gap_end : self.gap_end + n - head],
        )

    def flatten(self) -> bytes:
        """Return an owned contiguous copy of the logical content."""

        self._check()
        return bytes(self.data[: self.gap_start]) + bytes(
            self.data[self.gap_end : self.capacity]
        )

    def debug_dump(self, filler: int = ord("_")) -> bytes:
        """Physical storage with gap bytes painted as ``filler``. Diagnostic only."""

        self._check()
        return (
            bytes(self.data[: self.gap_start])
            + bytes([filler]) * self.gap_length
            + bytes(self.data[self.gap_end : self.capacity])
        )

    def mirror(
        self, *, physical: bool = False, filler: int = ord("_")
    ) -> BufferMirror:
        return BufferMirror(
            content=self.flatten(),
            cursor=self.cursor,
            physical=self.debug_dump(filler) if physical else None,
        )

    def __bytes__(self) -> bytes:
        return self.flatten()

    def __repr__(self) -> str:
        return (
            f"GapBuffer(length={self.length}, cursor={self.cursor}, "
            f"gap=[{self.gap_start}, {self.gap_end}), capacity={self.capacity})"
        )


__all__ = ["GapBuffer", "BytesLike"]

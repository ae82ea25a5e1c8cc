"""Backing store, growth policy, and gap relocation for gap buffers."""

from __future__ import annotations

from gapline.runtime.settings import DEFAULT_INIT_SIZE

from .validation import FailureKind, ensure_invariants


def _allocate(size: int) -> bytearray:
    return bytearray(size)


class GapStorage:
    """Owns the byte array and the gap ``[gap_start, gap_end)`` inside it.

    Logical content is ``data[:gap_start] + data[gap_end:]``; bytes inside the
    gap are stale leftovers and never part of the content. Every change to the
    physical layout bumps ``generation`` so outstanding views can tell they
    no longer describe the storage.
    """

    def __init__(self, initial_size: int = DEFAULT_INIT_SIZE) -> None:
        if initial_size <= 0:
            raise ValueError("initial_size must be positive")
        self.initial_size = initial_size
        self.data = bytearray()
        self.capacity = 0
        self.gap_start = 0
        self.gap_end = 0
        self.generation = 0
        self.last_failure: FailureKind | None = None

    @property
    def gap_length(self) -> int:
        return self.gap_end - self.gap_start

    @property
    def length(self) -> int:
        return self.capacity - self.gap_length

    def __len__(self) -> int:
        return self.length

    def reserve(self, need: int) -> bool:
        """Make the gap hold at least ``need`` bytes, doubling capacity if not.

        Growth always lands in a fresh array: the pre-gap run keeps its
        offsets and the post-gap run is copied flush against the new end, so
        the gap stays where the cursor is. On ``MemoryError`` nothing is
        changed and ``False`` is returned.
        """

        if need < 0:
            return self._fail(FailureKind.INVALID_ARGUMENT)
        if self.gap_length >= need:
            return True

        length = self.length
        new_capacity = self.capacity or self.initial_size
        while new_capacity - length < need:
            new_capacity *= 2

        try:
            grown = _allocate(new_capacity)
        except MemoryError:
            return self._fail(FailureKind.ALLOCATION_FAILURE)

        tail = self.capacity - self.gap_end
        new_gap_end = new_capacity - tail
        grown[: self.gap_start] = self.data[: self.gap_start]
        grown[new_gap_end:] = self.data[self.gap_end : self.capacity]

        self.data = grown
        self.gap_end = new_gap_end
        self.capacity = new_capacity
        self._touch()
        return True

    def move_gap(self, pos: int) -> None:
        """Slide the gap so it starts at logical offset ``pos``.

        Only the bytes between the old and new gap position are copied.
        Callers validate ``0 <= pos <= length``.
        """

        start, end = self.gap_start, self.gap_end
        if pos == start:
            return
        if pos < start:
            count = start - pos
            self.data[end - count : end] = self.data[pos:start]
            self.gap_start -= count
            self.gap_end -= count
        else:
            count = pos - start
            self.data[start : start + count] = self.data[end : end + count]
            self.gap_start += count
            self.gap_end += count
        self._touch()

    def release_storage(self) -> None:
        self.data = bytearray()
        self.capacity = 0
        self.gap_start = 0
        self.gap_end = 0
        self._touch()

    def _touch(self) -> None:
        self.generation += 1

    def _fail(self, kind: FailureKind) -> bool:
        self.last_failure = kind
        return False

    def _check(self) -> None:
        ensure_invariants(self)


__all__ = ["GapStorage", "DEFAULT_INIT_SIZE"]

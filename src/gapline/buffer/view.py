"""Zero-copy views over the logical content of a gap buffer."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Iterator

from .validation import StaleViewError

if TYPE_CHECKING:
    from .storage import GapStorage


class SlicePair(AbstractContextManager["SlicePair"]):
    """One or two read-only runs covering a logical range.

    The runs alias the owner's storage. They are only meaningful while the
    owner's ``generation`` matches the one recorded here; touching a pair
    after any edit, cursor move, growth, or reset raises ``StaleViewError``.
    ``second`` is empty unless the range straddles the gap.
    """

    __slots__ = ("_owner", "_generation", "_first", "_second", "pos")

    def __init__(
        self,
        owner: "GapStorage",
        pos: int,
        first: memoryview,
        second: memoryview,
    ) -> None:
        self._owner = owner
        self._generation = owner.generation
        self._first = first
        self._second = second
        self.pos = pos

    @property
    def valid(self) -> bool:
        return self._generation == self._owner.generation

    def _checked(self) -> None:
        if not self.valid:
            raise StaleViewError(
                "view used after the buffer was modified", position=self.pos
            )

    @property
    def first(self) -> memoryview:
        self._checked()
        return self._first

    @property
    def second(self) -> memoryview:
        self._checked()
        return self._second

    @property
    def runs(self) -> tuple[memoryview, memoryview]:
        self._checked()
        return self._first, self._second

    @property
    def split(self) -> bool:
        return len(self._second) > 0

    def __len__(self) -> int:
        return len(self._first) + len(self._second)

    def __iter__(self) -> Iterator[memoryview]:
        self._checked()
        yield self._first
        if self._second:
            yield self._second

    def tobytes(self) -> bytes:
        self._checked()
        return self._first.tobytes() + self._second.tobytes()

    def release(self) -> None:
        self._first.release()
        self._second.release()

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False

    def __repr__(self) -> str:
        state = "valid" if self.valid else "stale"
        return (
            f"SlicePair(pos={self.pos}, lens=({len(self._first)}, "
            f"{len(self._second)}), {state})"
        )


__all__ = ["SlicePair"]

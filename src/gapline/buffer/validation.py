"""Failure kinds and consistency checks shared across buffer services."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from .sync import BufferValidationError

if TYPE_CHECKING:
    from .storage import GapStorage


class FailureKind(str, enum.Enum):
    """Why a buffer operation returned ``False``."""

    INVALID_ARGUMENT = "invalid_argument"
    OUT_OF_RANGE = "out_of_range"
    ALLOCATION_FAILURE = "allocation_failure"


class InvariantViolation(BufferValidationError):
    """Internal gap bookkeeping is inconsistent. Always a programming error."""


class StaleViewError(BufferValidationError):
    """A view was used after the buffer it points into was mutated."""


def ensure_invariants(storage: "GapStorage") -> None:
    """Check ``0 <= gap_start <= gap_end <= capacity`` and storage size.

    Compiled away under ``python -O`` together with the rest of ``__debug__``
    code; slicing keeps release runs inside the allocation regardless.
    """

    if not __debug__:
        return
    start, end, capacity = storage.gap_start, storage.gap_end, storage.capacity
    if not 0 <= start <= end <= capacity:
        raise InvariantViolation(
            f"gap [{start}, {end}) outside storage of capacity {capacity}",
            position=start,
        )
    if len(storage.data) != capacity:
        raise InvariantViolation(
            f"backing store holds {len(storage.data)} bytes, expected {capacity}"
        )

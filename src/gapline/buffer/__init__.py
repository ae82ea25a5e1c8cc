"""Gap buffer storage, edit operations, views, and navigation."""

from . import navigation
from .buffer import GapBuffer
from .storage import DEFAULT_INIT_SIZE, GapStorage
from .sync import BufferMirror, BufferSync, BufferValidationError
from .validation import (
    FailureKind,
    InvariantViolation,
    StaleViewError,
    ensure_invariants,
)
from .view import SlicePair

__all__ = [
    "DEFAULT_INIT_SIZE",
    "GapStorage",
    "GapBuffer",
    "SlicePair",
    "FailureKind",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "InvariantViolation",
    "StaleViewError",
    "ensure_invariants",
    "navigation",
]

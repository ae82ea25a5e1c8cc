"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state."""

    content: bytes
    cursor: int
    physical: Optional[bytes] = None

    @property
    def text(self) -> str:
        # Byte-addressed: latin-1 keeps one character per byte so cursor
        # columns line up with the decoded text.
        return self.content.decode("latin-1")


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...

    def push_host_input(self, data: bytes) -> None:
        """Submit raw input bytes (keys, pastes) produced by the host."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when a buffer is used in a way that breaks its contract."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position

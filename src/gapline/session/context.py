"""Per-session state handed to every editing action."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from gapline.buffer import GapBuffer
from gapline.runtime.settings import EngineSettings


@dataclass(slots=True)
class EditResult:
    """Outcome of feeding one byte (or a timeout) to the line editor."""

    consumed: bool
    status: str = "ok"
    action: Optional[str] = None
    message: Optional[str] = None
    timeout_ms: Optional[int] = None
    written: Optional[int] = None

    @property
    def finished(self) -> bool:
        return self.status in {"submit", "eof"}


class EditorBus:
    """Minimal publish/subscribe channel between actions and hosts."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class SessionContext:
    """One editing session: prompt, buffer, and the caller's destination.

    ``destination`` is the fixed-size area submitted lines are stored into;
    content longer than it is truncated.
    """

    buffer: GapBuffer
    prompt: bytes
    destination: bytearray
    bus: EditorBus = field(default_factory=EditorBus)
    settings: EngineSettings = field(default_factory=EngineSettings)
    flags: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        *,
        settings: Optional[EngineSettings] = None,
        prompt: Optional[bytes] = None,
        destination: Optional[bytearray] = None,
    ) -> "SessionContext":
        resolved = settings or EngineSettings()
        if destination is None:
            destination = bytearray(resolved.destination_size)
        return cls(
            buffer=GapBuffer(resolved.initial_size),
            prompt=resolved.prompt if prompt is None else prompt,
            destination=destination,
            settings=resolved,
        )

    def refresh_flags(self) -> Dict[str, bool]:
        self.flags["buffer_empty"] = len(self.buffer) == 0
        return self.flags

    def store(self) -> int:
        """Copy the content into ``destination``; returns bytes written."""

        return self.buffer.read_into(0, self.destination)

    def stored(self, written: int) -> bytes:
        return bytes(self.destination[:written])


__all__ = ["EditResult", "EditorBus", "SessionContext"]

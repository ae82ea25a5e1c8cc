"""Environment-driven settings for the engine and its line editor."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

ENV_PREFIX = "GAPLINE_"

DEFAULT_INIT_SIZE = 1024
DEFAULT_DEST_SIZE = 1024
DEFAULT_PROMPT = "> "
DEFAULT_PENDING_TIMEOUT_MS = 1000


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Knobs shared by buffers, the line editor, and the demo app."""

    initial_size: int = DEFAULT_INIT_SIZE
    gap_debug: bool = False
    gap_filler: int = ord("_")
    prompt: bytes = DEFAULT_PROMPT.encode("ascii")
    destination_size: int = DEFAULT_DEST_SIZE
    pending_timeout_ms: int = DEFAULT_PENDING_TIMEOUT_MS

    def __post_init__(self) -> None:
        if self.initial_size <= 0:
            raise ValueError("initial_size must be positive")
        if self.destination_size <= 0:
            raise ValueError("destination_size must be positive")
        if self.pending_timeout_ms <= 0:
            raise ValueError("pending_timeout_ms must be positive")
        if not 0 <= self.gap_filler <= 0xFF:
            raise ValueError("gap_filler must be a single byte")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        filler = env("GAP_FILLER") or "_"
        if len(filler) != 1:
            raise ValueError(f"{ENV_PREFIX}GAP_FILLER must be one character")
        prompt = env("PROMPT", DEFAULT_PROMPT) or ""
        return cls(
            initial_size=env_int("INIT_SIZE", DEFAULT_INIT_SIZE),
            gap_debug=env_flag("GAP_DEBUG", False),
            gap_filler=ord(filler),
            prompt=prompt.encode("latin-1"),
            destination_size=env_int("DEST_SIZE", DEFAULT_DEST_SIZE),
            pending_timeout_ms=env_int(
                "PENDING_TIMEOUT_MS", DEFAULT_PENDING_TIMEOUT_MS
            ),
        )


__all__ = [
    "ENV_PREFIX",
    "DEFAULT_INIT_SIZE",
    "EngineSettings",
    "env",
    "env_flag",
    "env_int",
]

"""Dataclasses describing byte-level key bindings and their actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Mapping

_NAMED_BYTES = {
    0x09: "TAB",
    0x0A: "ENTER",
    0x0D: "RET",
    0x1B: "ESC",
    0x7F: "DEL",
}


def token_for_byte(code: int) -> str:
    """Name a raw input byte the way bindings and logs refer to it."""

    if not 0 <= code <= 0xFF:
        raise ValueError(f"not a byte: {code!r}")
    if code in _NAMED_BYTES:
        return _NAMED_BYTES[code]
    if code == 0x00:
        return "C-@"
    if code < 0x20:
        return f"C-{chr(code + 0x60)}"
    if code < 0x7F:
        return chr(code)
    return f"x{code:02x}"


def tokens_for_bytes(data: bytes) -> tuple[str, ...]:
    return tuple(token_for_byte(code) for code in data)


def is_printable(code: int) -> bool:
    return 0x20 <= code < 0x7F


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Bytes a terminal sends for one logical key, e.g. ``ESC [ C``.

    ``timeout_ms`` bounds how long a proper prefix of ``raw`` may wait for
    the rest of the sequence.
    """

    raw: bytes
    timeout_ms: int = 1000

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))
        if not self.raw:
            raise ValueError("KeySequence requires at least one byte")
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

    @classmethod
    def from_bytes(cls, data: bytes, *, timeout_ms: int = 1000) -> "KeySequence":
        return cls(bytes(data), timeout_ms=timeout_ms)

    @property
    def tokens(self) -> tuple[str, ...]:
        return tokens_for_bytes(self.raw)

    def __len__(self) -> int:
        return len(self.raw)

    def __iter__(self) -> Iterator[int]:
        return iter(self.raw)


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Session flag a binding depends on; ``!flag`` requires it to be false."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        flag = text[1:].strip() if negated else text
        if not flag:
            raise ValueError(f"invalid when clause: {expression!r}")
        return cls(flag, not negated)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) is self.expected

    def __str__(self) -> str:
        return self.flag if self.expected else f"!{self.flag}"


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named editing command with the handler that performs it."""

    id: str
    handler: Callable[..., object]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Maps a key sequence in one keymap to an action id.

    ``when`` accepts ``WhenClause`` objects or strings such as
    ``"!buffer_empty"``; all clauses must hold for the binding to fire.
    """

    id: str
    keymap: str
    sequence: KeySequence
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        for name in ("id", "keymap", "action_id"):
            if not getattr(self, name):
                raise ValueError(f"binding {name} cannot be empty")
        clauses = tuple(
            clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
            for clause in self.when
        )
        object.__setattr__(self, "when", clauses)

    @property
    def conditions(self) -> dict[str, bool]:
        return {clause.flag: clause.expected for clause in self.when}

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(flags) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "KeySequence",
    "WhenClause",
    "ActionRef",
    "Binding",
    "token_for_byte",
    "tokens_for_bytes",
    "is_printable",
]

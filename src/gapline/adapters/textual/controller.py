"""Adapter that turns Textual key events into terminal bytes for a LineEditor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from gapline.buffer import BufferMirror, BufferSync
from gapline.runtime import telemetry
from gapline.session import EditResult
from gapline.session.editor import LineEditor

# What an xterm-compatible terminal sends for keys Textual reports by name.
NAMED_KEYS: Dict[str, bytes] = {
    "left": b"\x1b[D",
    "right": b"\x1b[C",
    "home": b"\x1b[H",
    "end": b"\x1b[F",
    "delete": b"\x1b[3~",
    "ctrl+left": b"\x1b[1;5D",
    "ctrl+right": b"\x1b[1;5C",
    "backspace": b"\x7f",
    "enter": b"\n",
    "tab": b"\t",
    "escape": b"\x1b",
}


def key_to_bytes(key: str, character: Optional[str] = None) -> Optional[bytes]:
    """Translate a Textual key name to raw input bytes, or ``None`` if unmapped."""

    if key in NAMED_KEYS:
        return NAMED_KEYS[key]
    prefix, _, rest = key.rpartition("+")
    if prefix in {"alt", "meta"} and len(rest) == 1:
        return b"\x1b" + rest.encode("latin-1")
    if prefix == "ctrl" and len(rest) == 1 and rest.isalpha():
        return bytes([ord(rest.lower()) & 0x1F])
    if character:
        try:
            return character.encode("latin-1")
        except UnicodeEncodeError:
            return None
    return None


def _noop(*_args, **_kwargs) -> None:
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the adapter uses to update widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    submit_line: Callable[[bytes], None] = _noop
    end_of_input: Callable[[], None] = _noop
    clear_screen: Callable[[], None] = _noop
    log: Callable[[str], None] = _noop


class TextualLineAdapter(BufferSync):
    """Bridges a ``LineEditor`` and its event bus to a Textual surface.

    After a submit the editor restarts on an empty line, the way a REPL
    reads the next line; end of input is forwarded so the host can exit.
    """

    def __init__(self, editor: LineEditor, hooks: TextualUIHooks) -> None:
        self.editor = editor
        self.hooks = hooks
        bus = editor.context.bus
        bus.subscribe("line.submit", self._on_submit)
        bus.subscribe("line.eof", lambda _payload: self.hooks.end_of_input())
        bus.subscribe("screen.clear", lambda _payload: self.hooks.clear_screen())
        self._refresh_buffer()

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> list[EditResult]:
        data = key_to_bytes(key, character)
        if data is None:
            self._log("ignored ->", key=key)
            return []
        return self.feed_bytes(data)

    def feed_bytes(self, data: bytes) -> list[EditResult]:
        self._log("bytes ->", data=data)
        with telemetry.span(
            "adapter::feed",
            logger_name="gapline.adapters",
            component="textual",
            metadata={"length": len(data)},
        ):
            results = self.editor.feed(data)
        for result in results:
            self._after_result(result)
        return results

    def push_host_input(self, data: bytes) -> None:
        self.feed_bytes(data)

    def process_timeouts(self) -> Optional[EditResult]:
        result = self.editor.process_timeouts()
        if result is not None:
            self._after_result(result)
        return result

    def pull_buffer(self) -> BufferMirror:
        settings = self.editor.context.settings
        return self.editor.context.buffer.mirror(
            physical=settings.gap_debug, filler=settings.gap_filler
        )

    def _after_result(self, result: EditResult) -> None:
        self._log(
            "result <-",
            status=result.status,
            action=result.action,
            message=result.message,
        )
        self.hooks.update_status(
            result.status if result.message is None else f"{result.status}:{result.message}"
        )
        if result.status == "submit":
            self.editor.restart()
        self._refresh_buffer()

    def _on_submit(self, payload: object | None) -> None:
        line = payload if isinstance(payload, bytes) else b""
        self.hooks.submit_line(line)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _log(self, prefix: str, **fields: object) -> None:
        buffer = self.editor.context.buffer
        snapshot: Dict[str, object] = {
            "cursor": buffer.cursor,
            "length": len(buffer),
            "gap": (buffer.gap_start, buffer.gap_end),
            "pending": " ".join(self.editor.pending_tokens),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualLineAdapter", "TextualUIHooks", "key_to_bytes", "NAMED_KEYS"]

"""Line editor: decodes input bytes through a keymap and edits the buffer."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable, Optional

from gapline.keymaps import (
    DEFAULT_KEYMAP,
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    load_default_keymaps,
)
from gapline.keymaps.models import is_printable, tokens_for_bytes
from gapline.runtime import telemetry

from .context import EditResult, SessionContext
from .frame import clear_frame, render_frame


@dataclass
class PendingTimeout:
    deadline: float
    timeout_ms: int


class LineEditor:
    """Feeds raw terminal bytes into one ``SessionContext``.

    Bytes accumulate while they form a prefix of a bound sequence (escape
    keys arrive as several bytes). A complete sequence runs its action; an
    unknown single printable byte is inserted at the cursor; any other
    unknown sequence is dropped. A failed edit is reported, never raised,
    and the caller simply redraws.
    """

    def __init__(
        self,
        context: SessionContext,
        *,
        keymap: str = DEFAULT_KEYMAP,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.context = context
        self.keymap = keymap
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="gapline.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(
                self.keymap_registry,
                default_sequence_timeout_ms=context.settings.pending_timeout_ms,
            )
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="gapline.keymaps"
        )
        self._pending = bytearray()
        self._timeout: Optional[PendingTimeout] = None
        self.finished: Optional[str] = None

    @property
    def pending_tokens(self) -> tuple[str, ...]:
        return tokens_for_bytes(bytes(self._pending))

    def feed(self, data: bytes | Iterable[int]) -> list[EditResult]:
        """Handle every byte in ``data``; stops early once the line is done."""

        results: list[EditResult] = []
        for code in bytes(data):
            result = self.handle_byte(code)
            results.append(result)
            if result.finished:
                break
        return results

    def handle_byte(self, code: int) -> EditResult:
        self._pending.append(code)
        flags = self.context.refresh_flags()
        result = self.keymap_resolver.resolve(
            self.keymap, bytes(self._pending), context=flags
        )

        if result.status == "match" and result.match is not None:
            self._clear_pending()
            return self._execute(result.match)

        if result.status == "pending":
            timeout_ms = result.timeout_ms or self.context.settings.pending_timeout_ms
            self._arm_timeout(timeout_ms)
            return EditResult(
                consumed=True,
                status="pending",
                message="awaiting_sequence",
                timeout_ms=timeout_ms,
            )

        tokens = self.pending_tokens
        self._clear_pending()
        if len(tokens) == 1 and is_printable(code):
            return self._self_insert(code)
        return EditResult(consumed=False, status="miss", message=" ".join(tokens))

    def process_timeouts(self, now: float | None = None) -> Optional[EditResult]:
        """Drop a pending partial sequence whose deadline has passed."""

        timer = self._timeout
        if timer is None:
            return None
        if (time.monotonic() if now is None else now) < timer.deadline:
            return None
        return self.force_timeout()

    def force_timeout(self) -> Optional[EditResult]:
        if not self._pending:
            self._timeout = None
            return None
        dropped = " ".join(self.pending_tokens)
        self._clear_pending()
        telemetry.record_event(
            "line.pending_timeout",
            level="debug",
            data={"tokens": dropped},
            logger_name="gapline.session",
        )
        return EditResult(consumed=False, status="timeout", message=dropped)

    def render(self) -> bytes:
        settings = self.context.settings
        return render_frame(
            self.context.buffer,
            self.context.prompt,
            gap_debug=settings.gap_debug,
            filler=settings.gap_filler,
        )

    def render_clear(self) -> bytes:
        return clear_frame(self.context.buffer, self.context.prompt)

    def restart(self) -> None:
        """Start a fresh line in the same session, keeping the storage."""

        self._clear_pending()
        self.context.buffer.reset()
        self.finished = None

    def _execute(self, match: ResolutionMatch) -> EditResult:
        with telemetry.span(
            "line::execute",
            logger_name="gapline.session",
            component="line_editor",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ) as handle:
            outcome = match.action(self.context, match)
            if not isinstance(outcome, EditResult):
                outcome = EditResult(consumed=True, action=match.action.id)
            handle.add_metadata("status", outcome.status)

        if outcome.finished:
            self.finished = outcome.status
            telemetry.record_event(
                f"line.{outcome.status}",
                data={"length": len(self.context.buffer), "written": outcome.written},
                logger_name="gapline.session",
            )
        return outcome

    def _self_insert(self, code: int) -> EditResult:
        ok = self.context.buffer.append_byte(code)
        failure = self.context.buffer.last_failure
        return EditResult(
            consumed=True,
            status="ok" if ok else "failed",
            action="edit.self_insert",
            message=None if ok or failure is None else failure.value,
        )

    def _arm_timeout(self, timeout_ms: int) -> None:
        self._timeout = PendingTimeout(
            deadline=time.monotonic() + timeout_ms / 1000.0,
            timeout_ms=timeout_ms,
        )

    def _clear_pending(self) -> None:
        self._pending.clear()
        self._timeout = None


__all__ = ["LineEditor", "PendingTimeout"]

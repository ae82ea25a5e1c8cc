"""Executable Textual app: a read-a-line loop over the gap buffer editor."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use gapline.adapters.textual.app"
    ) from exc

from gapline.buffer import BufferMirror
from gapline.keymaps import (
    DEFAULT_KEYMAP,
    KeymapRegistry,
    KeymapResolver,
    describe_bindings,
    load_default_keymaps,
)
from gapline.runtime import telemetry
from gapline.runtime.settings import EngineSettings
from gapline.session import SessionContext
from gapline.session.editor import LineEditor

from .controller import TextualLineAdapter, TextualUIHooks

HISTORY_LIMIT = 200


def create_line_editor(settings: Optional[EngineSettings] = None) -> LineEditor:
    """Build a LineEditor over a fresh session with the default keymap."""

    resolved = settings or EngineSettings.from_env()
    registry = KeymapRegistry()
    load_default_keymaps(
        registry, default_sequence_timeout_ms=resolved.pending_timeout_ms
    )
    resolver = KeymapResolver(registry)
    context = SessionContext.create(settings=resolved)
    return LineEditor(
        context,
        keymap=DEFAULT_KEYMAP,
        keymap_registry=registry,
        keymap_resolver=resolver,
        load_defaults=False,
    )


def format_submitted(line: bytes) -> str:
    return 'got: "%s"' % line.decode("latin-1")


@dataclass
class UIState:
    history: list[str] = field(default_factory=list)
    prompt_text: str = ""
    gap_text: str = ""
    status_text: str = ""

    def record_submitted(self, line: bytes) -> bool:
        """Echo a submitted line into the history; empty lines are not echoed."""

        if not line:
            return False
        self.history.append(format_submitted(line))
        del self.history[:-HISTORY_LIMIT]
        return True


class GaplineApp(App[None]):
    """Minimal Textual UI that reads lines until end of input."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#history {
		height: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#gap-view {
		height: auto;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#prompt-line {
		height: 2;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, settings: Optional[EngineSettings] = None) -> None:
        super().__init__()
        self.settings = settings or EngineSettings.from_env()
        self._state = UIState()
        self.editor: LineEditor | None = None
        self.adapter: TextualLineAdapter | None = None
        self._history_widget: Static | None = None
        self._gap_widget: Static | None = None
        self._prompt_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="line-area"):
            self._history_widget = Static("", id="history", markup=False)
            yield self._history_widget
            self._gap_widget = Static("", id="gap-view", markup=False)
            self._gap_widget.display = self.settings.gap_debug
            yield self._gap_widget
            self._prompt_widget = Static("", id="prompt-line", markup=False)
            yield self._prompt_widget
        self._status_widget = Static("", id="status-line", markup=False)
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self.editor = create_line_editor(self.settings)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            submit_line=self._submit_line,
            end_of_input=self.exit,
            clear_screen=self._clear_history,
            log=self._log_line,
        )
        self.adapter = TextualLineAdapter(self.editor, hooks)
        self.set_interval(0.1, self._process_timeouts)

    def _process_timeouts(self) -> None:
        if self.adapter:
            self.adapter.process_timeouts()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        self.adapter.handle_textual_key(event.key, character=event.character)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        prompt = self.settings.prompt.decode("latin-1")
        caret = " " * (len(prompt) + mirror.cursor) + "^"
        self._state.prompt_text = f"{prompt}{mirror.text}\n{caret}"
        if self._prompt_widget:
            self._prompt_widget.update(self._state.prompt_text)
        if mirror.physical is not None:
            self._state.gap_text = mirror.physical.decode("latin-1")
            if self._gap_widget:
                self._gap_widget.update(self._state.gap_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _submit_line(self, line: bytes) -> None:
        if self._state.record_submitted(line):
            self._render_history()

    def _clear_history(self) -> None:
        self._state.history.clear()
        self._render_history()

    def _render_history(self) -> None:
        if self._history_widget:
            self._history_widget.update("\n".join(self._state.history))

    def _log_line(self, line: str) -> None:
        telemetry.record_event(
            "adapter.trace",
            level="debug",
            data={"line": line},
            logger_name="gapline.adapters",
        )


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read lines with the gap buffer editor in a Textual UI."
    )
    parser.add_argument("--prompt", help="Prompt shown before the line")
    parser.add_argument(
        "--gap-debug",
        action="store_true",
        default=None,
        help="Show the physical storage with the gap painted in",
    )
    parser.add_argument(
        "--init-size", type=int, help="Initial buffer capacity in bytes"
    )
    parser.add_argument(
        "--dest-size", type=int, help="Size of the area submitted lines are stored in"
    )
    parser.add_argument(
        "--motions",
        action="store_true",
        help="Print the key bindings and exit",
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> EngineSettings:
    """Environment settings with command-line overrides applied."""

    overrides: dict[str, object] = {}
    if args.prompt is not None:
        overrides["prompt"] = args.prompt.encode("latin-1")
    if args.gap_debug is not None:
        overrides["gap_debug"] = args.gap_debug
    if args.init_size is not None:
        overrides["initial_size"] = args.init_size
    if args.dest_size is not None:
        overrides["destination_size"] = args.dest_size
    return replace(EngineSettings.from_env(), **overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    # Console logging would draw over the UI and the bindings listing.
    telemetry.configure(preset="quiet")
    if args.motions:
        registry = KeymapRegistry()
        load_default_keymaps(registry)
        print(describe_bindings(registry))
        return
    settings = settings_from_args(args)
    GaplineApp(settings=settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()

from __future__ import annotations

from typing import List

from gapline.adapters.textual import TextualLineAdapter, TextualUIHooks, key_to_bytes
from gapline.buffer import BufferMirror, BufferSync
from gapline.keymaps import KeymapRegistry, KeymapResolver, load_default_keymaps
from gapline.runtime.settings import EngineSettings
from gapline.session import SessionContext
from gapline.session.editor import LineEditor


def make_editor(**overrides: object) -> LineEditor:
    registry = KeymapRegistry()
    load_default_keymaps(registry)
    resolver = KeymapResolver(registry)
    context = SessionContext.create(settings=EngineSettings(**overrides))  # type: ignore[arg-type]
    return LineEditor(
        context, keymap_registry=registry, keymap_resolver=resolver, load_defaults=False
    )


def test_adapter_updates_buffer_and_status() -> None:
    editor = make_editor()
    updates: List[str] = []
    statuses: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        update_status=lambda status: statuses.append(status),
    )
    adapter = TextualLineAdapter(editor, hooks)

    adapter.handle_textual_key("h", character="h")
    adapter.handle_textual_key("i", character="i")

    assert updates == ["", "h", "hi"]
    assert statuses == ["ok", "ok"]


def test_adapter_translates_named_keys() -> None:
    editor = make_editor()
    mirrors: List[BufferMirror] = []
    adapter = TextualLineAdapter(editor, TextualUIHooks(update_buffer=mirrors.append))

    adapter.feed_bytes(b"hello world")
    adapter.handle_textual_key("home")
    adapter.handle_textual_key("ctrl+right")
    adapter.handle_textual_key("delete")

    assert mirrors[-1].text == "helloworld"
    assert mirrors[-1].cursor == 5


def test_adapter_reports_pending_escape() -> None:
    editor = make_editor()
    statuses: List[str] = []
    adapter = TextualLineAdapter(
        editor,
        TextualUIHooks(update_buffer=lambda mirror: None, update_status=statuses.append),
    )

    adapter.handle_textual_key("escape")

    assert statuses == ["pending:awaiting_sequence"]
    assert editor.pending_tokens == ("ESC",)


def test_adapter_submits_and_restarts_line() -> None:
    editor = make_editor()
    submitted: List[bytes] = []
    updates: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: updates.append(mirror.text),
        submit_line=submitted.append,
    )
    adapter = TextualLineAdapter(editor, hooks)

    adapter.feed_bytes(b"hi")
    results = adapter.handle_textual_key("enter")

    assert submitted == [b"hi"]
    assert results[-1].status == "submit"
    assert updates[-1] == ""
    assert editor.finished is None


def test_adapter_forwards_end_of_input_and_clear() -> None:
    editor = make_editor()
    calls: List[str] = []
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        end_of_input=lambda: calls.append("eof"),
        clear_screen=lambda: calls.append("clear"),
    )
    adapter = TextualLineAdapter(editor, hooks)

    adapter.handle_textual_key("ctrl+l")
    adapter.handle_textual_key("ctrl+d")

    assert calls == ["clear", "eof"]


def test_adapter_mirror_includes_physical_storage_in_gap_debug() -> None:
    editor = make_editor(gap_debug=True, initial_size=4, gap_filler=ord("."))
    mirrors: List[BufferMirror] = []
    adapter = TextualLineAdapter(editor, TextualUIHooks(update_buffer=mirrors.append))

    adapter.feed_bytes(b"ab")

    assert mirrors[-1].physical == b"ab.."


def test_adapter_logs_input_and_results() -> None:
    editor = make_editor()
    lines: List[str] = []
    adapter = TextualLineAdapter(
        editor, TextualUIHooks(update_buffer=lambda mirror: None, log=lines.append)
    )

    assert adapter.handle_textual_key("f5") == []
    adapter.handle_textual_key("x", character="x")

    assert lines[0].startswith("ignored -> ")
    assert "key='f5'" in lines[0]
    assert any(line.startswith("bytes -> ") for line in lines)
    assert any("status='ok'" in line for line in lines)


def test_adapter_process_timeouts_drops_pending_escape() -> None:
    editor = make_editor()
    statuses: List[str] = []
    adapter = TextualLineAdapter(
        editor,
        TextualUIHooks(update_buffer=lambda mirror: None, update_status=statuses.append),
    )
    adapter.handle_textual_key("escape")

    assert adapter.process_timeouts() is None
    editor._timeout.deadline = 0.0

    result = adapter.process_timeouts()

    assert result is not None and result.status == "timeout"
    assert statuses[-1] == "timeout:ESC"
    assert editor.pending_tokens == ()


def test_key_to_bytes() -> None:
    assert key_to_bytes("left") == b"\x1b[D"
    assert key_to_bytes("ctrl+a") == b"\x01"
    assert key_to_bytes("ctrl+w") == b"\x17"
    assert key_to_bytes("alt+f") == b"\x1bf"
    assert key_to_bytes("backspace") == b"\x7f"
    assert key_to_bytes("a", "a") == b"a"
    assert key_to_bytes("f1") is None
    assert key_to_bytes("snowman", "☃") is None


def test_adapter_exchanges_bytes_through_buffer_sync() -> None:
    editor = make_editor(gap_debug=True, initial_size=8)
    adapter = TextualLineAdapter(editor, TextualUIHooks(update_buffer=lambda mirror: None))
    sync: BufferSync = adapter

    sync.push_host_input(b"abc\x1b[D")
    snapshot = sync.pull_buffer()

    assert snapshot.content == b"abc"
    assert snapshot.cursor == 2
    assert snapshot.physical is not None
    assert len(snapshot.physical) == editor.context.buffer.capacity

from __future__ import annotations

import random

import pytest

from gapline.buffer import FailureKind, GapBuffer


def make_buffer(content: bytes = b"hello world", *, size: int = 16) -> GapBuffer:
    buffer = GapBuffer(size)
    assert buffer.append_bytes(content)
    return buffer


def test_append_bytes_moves_cursor_past_insert() -> None:
    buffer = GapBuffer()

    assert buffer.append_bytes(b"hello world")

    assert len(buffer) == 11
    assert buffer.cursor == 11


def test_delete_backward_from_end() -> None:
    buffer = make_buffer()
    buffer.set_cursor(11)

    assert buffer.delete(-5)

    assert buffer.flatten() == b"hello "
    assert len(buffer) == 6


def test_append_byte_in_middle() -> None:
    buffer = make_buffer()
    buffer.set_cursor(5)

    assert buffer.append_byte(ord("_"))

    assert buffer.flatten() == b"hello_ world"
    assert buffer.cursor == 6


@pytest.mark.parametrize("code", [-1, 256])
def test_append_byte_rejects_non_bytes(code: int) -> None:
    buffer = make_buffer()

    assert not buffer.append_byte(code)
    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert buffer.flatten() == b"hello world"


def test_append_bytes_with_count_takes_prefix() -> None:
    buffer = GapBuffer()

    assert buffer.append_bytes(b"abcdef", 3)

    assert buffer.flatten() == b"abc"


def test_append_bytes_rejects_missing_source_and_bad_count() -> None:
    buffer = GapBuffer()

    assert not buffer.append_bytes(None)
    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert not buffer.append_bytes(b"abc", 4)
    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert not buffer.append_bytes(b"abc", -1)
    assert len(buffer) == 0


def test_append_empty_is_a_successful_noop() -> None:
    buffer = make_buffer()

    assert buffer.append_bytes(b"")

    assert buffer.flatten() == b"hello world"
    assert buffer.last_failure is None


def test_append_accepts_memoryview_and_bytearray() -> None:
    buffer = GapBuffer()

    assert buffer.append_bytes(bytearray(b"ab"))
    assert buffer.append_bytes(memoryview(b"cd"))

    assert buffer.flatten() == b"abcd"


def test_success_clears_previous_failure() -> None:
    buffer = make_buffer()
    assert not buffer.delete(0)
    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT

    assert buffer.delete(-1)

    assert buffer.last_failure is None


def test_insert_at_moves_cursor_then_inserts() -> None:
    buffer = make_buffer(b"hello")

    assert buffer.insert_at(3, b"XY")

    assert buffer.flatten() == b"helXYlo"
    assert buffer.cursor == 5


def test_insert_at_out_of_range_changes_nothing() -> None:
    buffer = make_buffer(b"hello")
    buffer.set_cursor(2)

    assert not buffer.insert_at(6, b"x")

    assert buffer.last_failure is FailureKind.OUT_OF_RANGE
    assert buffer.flatten() == b"hello"
    assert buffer.cursor == 2


def test_insert_at_bad_source_does_not_move_cursor() -> None:
    buffer = make_buffer(b"hello")
    buffer.set_cursor(2)

    assert not buffer.insert_at(0, None)
    assert not buffer.insert_at(0, b"ab", 3)

    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert buffer.cursor == 2


def test_set_cursor_bounds() -> None:
    buffer = make_buffer(b"abc")

    assert buffer.set_cursor(0)
    assert buffer.set_cursor(3)
    assert not buffer.set_cursor(4)
    assert buffer.last_failure is FailureKind.OUT_OF_RANGE
    assert not buffer.set_cursor(-1)
    assert buffer.cursor == 3


def test_move_cursor_is_relative() -> None:
    buffer = make_buffer(b"abcdef")

    assert buffer.move_cursor(-4)
    assert buffer.cursor == 2
    assert buffer.move_cursor(1)
    assert buffer.cursor == 3
    assert not buffer.move_cursor(4)
    assert not buffer.move_cursor(-4)
    assert buffer.cursor == 3


def test_set_cursor_to_current_position_is_idempotent() -> None:
    buffer = make_buffer()
    buffer.set_cursor(4)
    layout = (buffer.gap_start, buffer.gap_end)

    assert buffer.set_cursor(4)

    assert (buffer.gap_start, buffer.gap_end) == layout


def test_delete_bounds() -> None:
    buffer = make_buffer(b"abc")

    assert not buffer.delete(0)
    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert not buffer.delete(1)
    assert buffer.last_failure is FailureKind.OUT_OF_RANGE
    assert not buffer.delete(-4)
    assert buffer.last_failure is FailureKind.OUT_OF_RANGE
    assert buffer.flatten() == b"abc"


def test_delete_forward_drops_bytes_after_cursor() -> None:
    buffer = make_buffer()
    buffer.set_cursor(5)

    assert buffer.delete(6)

    assert buffer.flatten() == b"hello"
    assert buffer.cursor == 5


def test_insert_then_delete_restores_content() -> None:
    buffer = make_buffer()
    buffer.set_cursor(6)

    buffer.append_bytes(b"big ")
    assert buffer.delete(-4)

    assert buffer.flatten() == b"hello world"
    assert buffer.cursor == 6


def test_from_bytes() -> None:
    buffer = GapBuffer.from_bytes(b"abc", initial_size=2)

    assert buffer.flatten() == b"abc"
    assert buffer.cursor == 3


def test_edits_match_reference_model() -> None:
    rng = random.Random(1234)
    buffer = GapBuffer(2)
    model = bytearray()
    cursor = 0

    for _ in range(500):
        op = rng.choice(("insert", "delete", "move"))
        if op == "insert":
            chunk = bytes(rng.randrange(32, 127) for _ in range(rng.randrange(1, 6)))
            assert buffer.append_bytes(chunk)
            model[cursor:cursor] = chunk
            cursor += len(chunk)
        elif op == "delete" and model:
            delta = rng.choice((-1, 1)) * rng.randrange(1, 4)
            ok = buffer.delete(delta)
            if delta > 0 and cursor + delta <= len(model):
                assert ok
                del model[cursor : cursor + delta]
            elif delta < 0 and cursor + delta >= 0:
                assert ok
                del model[cursor + delta : cursor]
                cursor += delta
            else:
                assert not ok
        else:
            target = rng.randrange(0, len(model) + 1)
            assert buffer.set_cursor(target)
            cursor = target

        assert buffer.flatten() == bytes(model)
        assert buffer.cursor == cursor
        assert buffer.gap_start <= buffer.gap_end <= buffer.capacity

from __future__ import annotations

import pytest

from gapline.buffer import FailureKind, GapBuffer, StaleViewError


def make_buffer(content: bytes = b"hello world", *, cursor: int | None = None) -> GapBuffer:
    buffer = GapBuffer(16)
    buffer.append_bytes(content)
    if cursor is not None:
        buffer.set_cursor(cursor)
    return buffer


def test_view_straddling_gap_returns_two_runs() -> None:
    buffer = make_buffer(cursor=5)
    buffer.append_byte(ord("_"))

    pair = buffer.view(0, len(buffer))

    assert pair is not None
    assert pair.split
    assert pair.first.tobytes() == b"hello_"
    assert pair.second.tobytes() == b" world"
    assert pair.tobytes() == b"hello_ world"
    assert len(pair) == 12


def test_view_on_one_side_of_gap_is_single_run() -> None:
    buffer = make_buffer(cursor=5)

    before = buffer.view(0, 5)
    after = buffer.view(5)

    assert before is not None and after is not None
    assert not before.split and not after.split
    assert before.tobytes() == b"hello"
    assert after.tobytes() == b" world"
    assert list(after) == [after.first]


def test_view_length_past_end_is_clipped() -> None:
    buffer = make_buffer()

    pair = buffer.view(6, 100)

    assert pair is not None
    assert pair.tobytes() == b"world"


def test_view_rejects_positions_outside_content() -> None:
    buffer = make_buffer()

    assert buffer.view(11) is None
    assert buffer.last_failure is FailureKind.OUT_OF_RANGE
    assert buffer.view(-1) is None
    assert buffer.view(0, -1) is None
    assert GapBuffer().view() is None


def test_view_runs_are_read_only() -> None:
    buffer = make_buffer()
    pair = buffer.view()
    assert pair is not None

    assert pair.first.readonly
    with pytest.raises(TypeError):
        pair.first[0] = ord("H")


def test_view_goes_stale_after_mutation() -> None:
    buffer = make_buffer()
    pair = buffer.view()
    assert pair is not None and pair.valid

    buffer.append_byte(ord("!"))

    assert not pair.valid
    with pytest.raises(StaleViewError):
        pair.tobytes()
    with pytest.raises(StaleViewError):
        list(pair)


def test_view_goes_stale_after_cursor_move() -> None:
    buffer = make_buffer()
    pair = buffer.view(0, 3)
    assert pair is not None

    buffer.set_cursor(1)

    with pytest.raises(StaleViewError):
        _ = pair.first


def test_growth_is_allowed_while_a_view_is_held() -> None:
    buffer = GapBuffer(4)
    buffer.append_bytes(b"abcd")
    pair = buffer.view()
    assert pair is not None

    assert buffer.append_bytes(b"efghijkl")

    assert buffer.flatten() == b"abcdefghijkl"
    assert not pair.valid


def test_view_context_manager_releases_runs() -> None:
    buffer = make_buffer()

    with buffer.view() as pair:
        first = pair.first
        assert first.tobytes() == b"hello world"

    with pytest.raises(ValueError):
        first.tobytes()


def test_read_into_across_gap() -> None:
    buffer = make_buffer(cursor=5)
    dst = bytearray(6)

    copied = buffer.read_into(3, dst)

    assert copied == 6
    assert dst == bytearray(b"lo wor")


def test_read_into_clips_to_destination_and_content() -> None:
    buffer = make_buffer()
    small = bytearray(4)
    large = bytearray(32)

    assert buffer.read_into(0, small, 10) == 4
    assert small == bytearray(b"hell")
    assert buffer.read_into(8, large) == 3
    assert large[:3] == bytearray(b"rld")


def test_read_into_out_of_range_copies_nothing() -> None:
    buffer = make_buffer()
    dst = bytearray(4)

    assert buffer.read_into(11, dst) == 0
    assert buffer.read_into(-1, dst) == 0
    assert buffer.read_into(0, None) == 0
    assert buffer.read_into(0, dst, 0) == 0
    assert dst == bytearray(4)


def test_read_into_read_only_destination_copies_nothing() -> None:
    buffer = make_buffer()
    frozen = b"xxx"

    assert buffer.read_into(0, frozen) == 0
    assert buffer.read_into(0, memoryview(bytearray(3)).toreadonly()) == 0

    assert buffer.last_failure is FailureKind.INVALID_ARGUMENT
    assert frozen == b"xxx"


def test_read_returns_owned_bytes() -> None:
    buffer = make_buffer(cursor=4)

    assert buffer.read() == b"hello world"
    assert buffer.read(2, 5) == b"llo w"
    assert buffer.read(20) == b""


def test_flatten_has_no_terminator_and_round_trips() -> None:
    buffer = make_buffer(cursor=3)

    flat = buffer.flatten()

    assert flat == b"hello world"
    assert bytes(buffer) == flat
    assert GapBuffer.from_bytes(flat).flatten() == flat


def test_debug_dump_paints_gap() -> None:
    buffer = GapBuffer(16)
    buffer.append_bytes(b"hello")
    buffer.set_cursor(2)

    dump = buffer.debug_dump(ord("."))

    assert dump == b"he" + b"." * 11 + b"llo"
    assert len(dump) == buffer.capacity


def test_mirror_snapshot() -> None:
    buffer = make_buffer(cursor=5)

    plain = buffer.mirror()
    physical = buffer.mirror(physical=True, filler=ord("#"))

    assert plain.text == "hello world"
    assert plain.cursor == 5
    assert plain.physical is None
    assert physical.physical is not None
    assert physical.physical.count(b"#") == buffer.gap_length

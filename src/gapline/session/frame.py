"""Terminal redraw frames for a single prompt line."""

from __future__ import annotations

from gapline.buffer import GapBuffer

CLEAR_SCREEN = b"\x1b[2J\x1b[H"
REVERSE_VIDEO = b"\x1b[7m"
RESET_VIDEO = b"\x1b[m"
CLEAR_TO_EOL = b"\x1b[0K"


def cursor_column(column: int) -> bytes:
    """Return to column 0 and step right ``column`` cells."""

    # CSI 0 C moves one cell on most terminals, so column 0 is just CR.
    if column <= 0:
        return b"\r"
    return b"\r\x1b[%dC" % column


def render_frame(
    buffer: GapBuffer,
    prompt: bytes,
    *,
    gap_debug: bool = False,
    filler: int = ord("_"),
) -> bytes:
    """Build the bytes that redraw ``prompt`` + content and place the cursor.

    With ``gap_debug`` the physical storage, gap included, is painted in
    reverse video on the line above.
    """

    frame = bytearray()
    if gap_debug:
        frame += CLEAR_SCREEN + REVERSE_VIDEO + prompt
        frame += buffer.debug_dump(filler)
        frame += RESET_VIDEO + b"\n"

    frame += b"\r" + prompt
    pair = buffer.view(0, len(buffer))
    if pair is not None:
        with pair:
            for run in pair:
                frame += run
    frame += CLEAR_TO_EOL
    frame += cursor_column(len(prompt) + buffer.cursor)
    return bytes(frame)


def clear_frame(buffer: GapBuffer, prompt: bytes) -> bytes:
    return CLEAR_SCREEN + render_frame(buffer, prompt)


__all__ = ["render_frame", "clear_frame", "cursor_column"]

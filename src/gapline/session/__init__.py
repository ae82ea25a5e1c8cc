"""Line editing sessions built on the gap buffer."""

from .context import EditorBus, EditResult, SessionContext
from .frame import clear_frame, cursor_column, render_frame

__all__ = [
    "EditResult",
    "EditorBus",
    "SessionContext",
    "render_frame",
    "clear_frame",
    "cursor_column",
]

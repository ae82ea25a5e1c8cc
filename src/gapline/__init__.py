"""Gap-buffer engine for cursor-centric line editing."""

__all__ = [
    "adapters",
    "actions",
    "buffer",
    "keymaps",
    "runtime",
    "session",
]

__version__ = "0.1.0"

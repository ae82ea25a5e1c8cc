"""Textual integration. ``app`` is imported on demand since it builds the UI."""

from .controller import NAMED_KEYS, TextualLineAdapter, TextualUIHooks, key_to_bytes

__all__ = ["NAMED_KEYS", "TextualLineAdapter", "TextualUIHooks", "key_to_bytes"]

"""Declarative byte-sequence keymaps and the default readline bindings."""

from .models import ActionRef, Binding, KeySequence, WhenClause
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult
from .defaults import DEFAULT_KEYMAP, describe_bindings, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "WhenClause",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "DEFAULT_KEYMAP",
    "describe_bindings",
    "load_default_keymaps",
]

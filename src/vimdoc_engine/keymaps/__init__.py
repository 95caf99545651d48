"""Declarative keymap registry and resolver.

Default bindings live in :mod:`vimdoc_engine.keymaps.defaults`, which pulls
in the command handlers and is imported on demand.
"""

from .models import Binding, Command, CommandKind, KeySequence, KeyStroke, normalize_key
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "Binding",
    "Command",
    "CommandKind",
    "KeySequence",
    "KeyStroke",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
    "normalize_key",
]

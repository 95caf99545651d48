"""Modal (vim-style) editing engine for a single text document."""

from .config import EngineConfig
from .engine import Engine

__all__ = [
    "Engine",
    "EngineConfig",
    "actions",
    "adapters",
    "buffer",
    "dispatch",
    "keymaps",
    "modes",
    "runtime",
]

__version__ = "0.1.0"

"""Mode handlers and the controller that switches between them."""

from .base_mode import (
    Invocation,
    KeyInput,
    Mode,
    ModeBus,
    ModeContext,
    TextRange,
)
from .command_mode import CommandLineMode
from .controller import EditorMode, ModeController, ModeTransitionError, TRANSITIONS
from .insert_mode import InsertMode
from .normal_mode import NormalMode
from .replace_mode import ReplaceMode
from .visual_mode import VisualMode

MODE_HANDLERS = (NormalMode, InsertMode, VisualMode, ReplaceMode, CommandLineMode)

__all__ = [
    "CommandLineMode",
    "EditorMode",
    "InsertMode",
    "Invocation",
    "KeyInput",
    "MODE_HANDLERS",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeController",
    "ModeTransitionError",
    "NormalMode",
    "ReplaceMode",
    "TRANSITIONS",
    "TextRange",
    "VisualMode",
]

"""Buffer abstractions: document storage, cursors, registers, and history."""

from .buffer import Buffer, Transaction
from .cursor import CursorModel, Selection
from .document import TextBuffer
from .registers import RegisterBank, RegisterValue
from .sync import EngineSnapshot, RenderSink
from .undo import EditTransaction, HistoryManager
from .validation import (
    NO_OP,
    NOT_FOUND,
    OutOfBounds,
    Position,
    Sentinel,
    clamp_position,
    ensure_position,
)

__all__ = [
    "Buffer",
    "Transaction",
    "CursorModel",
    "Selection",
    "TextBuffer",
    "RegisterBank",
    "RegisterValue",
    "EngineSnapshot",
    "RenderSink",
    "EditTransaction",
    "HistoryManager",
    "NO_OP",
    "NOT_FOUND",
    "OutOfBounds",
    "Position",
    "Sentinel",
    "clamp_position",
    "ensure_position",
]

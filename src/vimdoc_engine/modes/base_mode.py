"""Base classes and shared types for editor modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, FrozenSet, Optional, Tuple

from vimdoc_engine.buffer import Buffer, Position, RegisterBank
from vimdoc_engine.keymaps.models import Command, normalize_key

if TYPE_CHECKING:
    from vimdoc_engine.search import SearchEngine

    from .controller import EditorMode, ModeController


@dataclass(frozen=True, slots=True)
class KeyInput:
    """One inbound key event: ``{key, modifiers}`` plus optional typed text."""

    key: str
    modifiers: FrozenSet[str] = frozenset()
    text: Optional[str] = None

    @property
    def token(self) -> str:
        return normalize_key(self.key, self.modifiers)

    @property
    def char(self) -> Optional[str]:
        """Printable text carried by the key, if any."""

        if {m.lower() for m in self.modifiers} & {"ctrl", "control", "alt", "meta"}:
            return None
        if self.text:
            return self.text
        if len(self.key) == 1 and self.key.isprintable():
            return self.key
        if self.token == " ":
            return " "
        return None


@dataclass(frozen=True, slots=True)
class TextRange:
    """Operator target. ``end`` is exclusive; linewise ranges cover whole rows."""

    start: Position
    end: Position
    linewise: bool = False


@dataclass(frozen=True, slots=True)
class Invocation:
    """How a command was reached: keys, count, argument, and operator range."""

    command: Command
    keys: Tuple[str, ...] = ()
    count: Optional[int] = None
    argument: Optional[str] = None
    range: Optional[TextRange] = None

    @property
    def repeat(self) -> int:
        return self.count or 1


@dataclass
class ModeContext:
    """Shared services every mode and command can access."""

    buffer: Buffer
    registers: RegisterBank
    bus: "ModeBus"
    search: Optional["SearchEngine"] = None
    modes: Optional["ModeController"] = None
    extras: Dict[str, object] = field(default_factory=dict)


class ModeBus:
    """Minimal event bus letting components and hosts exchange signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


class Mode:
    """Base class all concrete mode handlers inherit from."""

    mode: "EditorMode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    @property
    def name(self) -> str:
        return self.mode.value

    def on_enter(self, previous: Optional["EditorMode"]) -> None:
        del previous

    def on_exit(self, next_mode: "EditorMode") -> None:
        del next_mode

    def handle_text(self, key: KeyInput) -> bool:
        """Offer an unbound key to the mode's own input handling."""

        del key
        return False

    def on_cursor_moved(self) -> None:
        """Called after a motion moves the cursor while this mode is active."""

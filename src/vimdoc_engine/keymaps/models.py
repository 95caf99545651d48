"""Dataclasses describing keystrokes, commands, and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, Optional

if TYPE_CHECKING:
    from vimdoc_engine.actions.motions import MotionSpec

# Host key names (Textual, browsers, tests) folded onto vim notation.
KEY_ALIASES = {
    "escape": "<Esc>",
    "esc": "<Esc>",
    "<esc>": "<Esc>",
    "enter": "<CR>",
    "return": "<CR>",
    "<cr>": "<CR>",
    "<enter>": "<CR>",
    "backspace": "<BS>",
    "<bs>": "<BS>",
    "delete": "<Del>",
    "<del>": "<Del>",
    "tab": "<Tab>",
    "<tab>": "<Tab>",
    "left": "<Left>",
    "right": "<Right>",
    "up": "<Up>",
    "down": "<Down>",
    "home": "<Home>",
    "end": "<End>",
    "space": " ",
    "<space>": " ",
}

_MODIFIER_PREFIX = {"ctrl": "C", "control": "C", "alt": "M", "meta": "M"}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


def normalize_key(key: str, modifiers: Iterable[str] = ()) -> str:
    """Return the vim-notation token for a host key event."""

    if len(key) > 1:
        key = KEY_ALIASES.get(key.lower(), key)
    prefixes = [
        _MODIFIER_PREFIX[m] for m in _normalize_modifiers(modifiers) if m in _MODIFIER_PREFIX
    ]
    if not prefixes:
        return key
    bare = key[1:-1] if key.startswith("<") and key.endswith(">") else key
    return f"<{'-'.join(prefixes)}-{bare}>"


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press used by key sequences."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        return normalize_key(self.key, self.modifiers)


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = 1000

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @classmethod
    def from_strings(cls, *keys: str, timeout_ms: int = 1000) -> "KeySequence":
        strokes = tuple(KeyStroke(key) for key in keys if key)
        return cls(strokes=strokes, timeout_ms=timeout_ms)


class CommandKind(str, Enum):
    MOTION = "motion"
    OPERATOR = "operator"
    EDIT = "edit"
    MODE_SWITCH = "mode_switch"


@dataclass(frozen=True, slots=True)
class Command:
    """A dispatchable command.

    ``kind`` tags the variant: motions only move the cursor (and supply an
    operator range when they carry a ``motion`` spec), operators wait for a
    range, edits mutate the buffer directly, and mode switches change the
    active mode. Every variant shares
    ``execute(context, invocation) -> EditTransaction | None``.
    """

    id: str
    kind: CommandKind
    handler: Callable[..., object]
    modes: tuple[str, ...] = ()
    description: str = ""
    switch_to: Optional[str] = None
    motion: Optional["MotionSpec"] = None
    takes_argument: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Command id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")

    def applies_to(self, mode: str) -> bool:
        return not self.modes or mode in self.modes

    def execute(self, context: object, invocation: object) -> object:
        return self.handler(context, invocation)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in one scope with a command."""

    id: str
    mode: str
    sequence: KeySequence
    command_id: str
    description: str = ""
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.command_id:
            raise ValueError("binding command_id cannot be empty")

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = [
    "KeyStroke",
    "KeySequence",
    "CommandKind",
    "Command",
    "Binding",
    "normalize_key",
]

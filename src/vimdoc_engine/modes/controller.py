"""Mode state machine: the single source of truth for the active mode."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Type

from vimdoc_engine.runtime import telemetry

from .base_mode import Mode, ModeContext


class EditorMode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    VISUAL = "visual"
    REPLACE = "replace"
    COMMAND = "command"


TRANSITIONS: Mapping[EditorMode, FrozenSet[EditorMode]] = {
    EditorMode.NORMAL: frozenset(
        {EditorMode.INSERT, EditorMode.VISUAL, EditorMode.REPLACE, EditorMode.COMMAND}
    ),
    EditorMode.INSERT: frozenset({EditorMode.NORMAL}),
    EditorMode.VISUAL: frozenset({EditorMode.NORMAL, EditorMode.INSERT}),
    EditorMode.REPLACE: frozenset({EditorMode.NORMAL}),
    EditorMode.COMMAND: frozenset({EditorMode.NORMAL}),
}


class ModeTransitionError(ValueError):
    """Raised for a transition the table or the enabled mode set forbids."""

    def __init__(self, current: EditorMode, target: EditorMode, reason: str) -> None:
        super().__init__(f"Cannot switch {current.value} -> {target.value}: {reason}")
        self.current = current
        self.target = target


class ModeController:
    """Owns the active mode and runs enter/exit side effects on transitions."""

    def __init__(
        self,
        context: ModeContext,
        *,
        enabled_modes: Optional[Iterable[EditorMode]] = None,
    ) -> None:
        self.context = context
        self.enabled: FrozenSet[EditorMode] = frozenset(
            EditorMode(m) for m in (enabled_modes or EditorMode)
        ) | {EditorMode.NORMAL}
        self._handlers: Dict[EditorMode, Mode] = {}
        self._active = EditorMode.NORMAL
        context.modes = self

    @property
    def current(self) -> EditorMode:
        return self._active

    @property
    def active_handler(self) -> Optional[Mode]:
        return self._handlers.get(self._active)

    def handler_for(self, mode: EditorMode) -> Mode:
        try:
            return self._handlers[mode]
        except KeyError as exc:
            raise KeyError(f"No handler registered for mode '{mode.value}'") from exc

    def register_mode(
        self, mode_cls: Type[Mode], /, *mode_args: object, **mode_kwargs: object
    ) -> Mode:
        handler = mode_cls(self.context, *mode_args, **mode_kwargs)
        if handler.mode in self._handlers:
            raise ValueError(f"Mode '{handler.name}' already registered")
        self._handlers[handler.mode] = handler
        if handler.mode is self._active:
            handler.on_enter(None)
        return handler

    def can_transition(self, target: EditorMode) -> bool:
        if target is self._active:
            return True
        return (
            target in self.enabled
            and target in TRANSITIONS[self._active]
            and target in self._handlers
        )

    def transition(self, target: EditorMode, *, trigger: str = "") -> EditorMode:
        target = EditorMode(target)
        previous = self._active
        if target is previous:
            return previous
        if target not in self.enabled:
            raise ModeTransitionError(previous, target, "mode disabled")
        if target not in TRANSITIONS[previous]:
            raise ModeTransitionError(previous, target, "not a legal transition")
        if target not in self._handlers:
            raise ModeTransitionError(previous, target, "no handler registered")

        outgoing = self._handlers.get(previous)
        if outgoing is not None:
            outgoing.on_exit(target)
        self._active = target
        self._handlers[target].on_enter(previous)

        telemetry.record_event(
            "mode.switch",
            level="debug",
            data={"from": previous.value, "to": target.value, "trigger": trigger},
        )
        self.context.bus.emit(
            "mode.changed", {"from": previous, "to": target, "trigger": trigger}
        )
        return target


__all__ = ["EditorMode", "ModeController", "ModeTransitionError", "TRANSITIONS"]

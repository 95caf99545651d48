"""Adapter that wires an Engine's snapshots and bus events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from vimdoc_engine.buffer import EngineSnapshot
from vimdoc_engine.dispatch import DispatchOutcome
from vimdoc_engine.engine import Engine
from vimdoc_engine.modes import KeyInput

RELAYED_EVENTS = (
    "mode.changed",
    "visual.selection",
    "register.yank",
    "command.start",
    "command.end",
    "command.submit",
    "command.write",
    "command.quit",
    "command.echo",
    "command.error",
    "search.not_found",
    "history.noop",
)

# Textual key names that differ from the engine's host aliases.
_TEXTUAL_NAMES = {
    "escape": "<Esc>",
    "enter": "<CR>",
    "backspace": "<BS>",
    "delete": "<Del>",
    "tab": "<Tab>",
    "left": "<Left>",
    "right": "<Right>",
    "up": "<Up>",
    "down": "<Down>",
    "home": "<Home>",
    "end": "<End>",
}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def translate_textual_key(
    key: str, character: Optional[str] = None
) -> Tuple[str, Optional[str], Tuple[str, ...]]:
    """Map a Textual ``(key, character)`` pair to ``(key, text, modifiers)``."""

    parts = key.split("+")
    modifiers = tuple(p for p in parts[:-1] if p in {"ctrl", "alt", "meta"})
    base = parts[-1]
    if modifiers:
        return (_TEXTUAL_NAMES.get(base, base), None, modifiers)
    if base in _TEXTUAL_NAMES:
        return (_TEXTUAL_NAMES[base], None, ())
    if character and len(character) == 1 and character.isprintable():
        return (character, character, ())
    return (base, None, ())


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_view: Callable[[EngineSnapshot], None]
    update_status: Callable[[str], None] = _noop
    show_command: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEngineAdapter:
    """Bridges an Engine to a Textual-friendly surface."""

    def __init__(self, engine: Engine, hooks: TextualUIHooks) -> None:
        self.engine = engine
        self.hooks = hooks
        self._unsubscribe = engine.subscribe(self._render)
        for event in RELAYED_EVENTS:
            engine.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )
        self._render(engine.snapshot())
        self.hooks.update_status(self._status_line())

    def handle_textual_key(
        self,
        key: str,
        *,
        character: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> DispatchOutcome:
        """Translate a Textual key event and dispatch it."""

        name, text, extra = translate_textual_key(key, character)
        mods = frozenset(m.lower() for m in (*modifiers, *extra))
        self.hooks.log(f"key -> {name!r} mods={sorted(mods)}")
        outcome = self.engine.handle_key(KeyInput(key=name, modifiers=mods, text=text))
        self.hooks.update_status(self._status_line())
        self.hooks.log(f"result <- {outcome.kind} {outcome.command or outcome.message or ''}")
        return outcome

    def process_timeouts(self) -> Optional[DispatchOutcome]:
        outcome = self.engine.process_timeouts()
        if outcome is not None:
            self.hooks.update_status(self._status_line())
        return outcome

    def close(self) -> None:
        self._unsubscribe()

    def _status_line(self) -> str:
        label = f"-- {self.engine.mode.value.upper()} --"
        pending = "".join(self.engine.dispatcher.pending_keys)
        if pending:
            label = f"{label} {pending}"
        row, col = self.engine.cursor
        return f"{label}  Line {row + 1}, Col {col + 1}"

    def _render(self, snapshot: EngineSnapshot) -> None:
        self.hooks.update_view(snapshot)
        self.hooks.show_command(snapshot.command_line or "")

    def _handle_event(self, name: str, payload: object | None) -> None:
        self.hooks.log(f"event -> {name} {payload!r}")
        self.hooks.handle_event(name, payload)

    def state_metadata(self) -> Dict[str, object]:
        snapshot = self.engine.snapshot()
        return {
            "mode": snapshot.mode,
            "cursor": snapshot.cursor,
            "pending": snapshot.pending_keys,
            "command": snapshot.command_line,
            "version": snapshot.version,
        }


__all__ = ["TextualEngineAdapter", "TextualUIHooks", "translate_textual_key", "RELAYED_EVENTS"]

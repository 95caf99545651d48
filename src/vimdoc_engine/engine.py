"""Engine facade wiring buffer, modes, keymaps and dispatch together."""

from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional, Union

from vimdoc_engine.buffer import Buffer, EngineSnapshot, RenderSink
from vimdoc_engine.dispatch import CommandDispatcher, DispatchOutcome
from vimdoc_engine.keymaps import KeymapRegistry, KeymapResolver
from vimdoc_engine.keymaps.defaults import load_default_keymaps
from vimdoc_engine.modes import (
    MODE_HANDLERS,
    CommandLineMode,
    EditorMode,
    KeyInput,
    ModeBus,
    ModeContext,
    ModeController,
)
from vimdoc_engine.search import SearchEngine

from .config import EngineConfig

KeyLike = Union[KeyInput, str]


class Engine:
    """One editing session over one document.

    Every processed key yields a :class:`DispatchOutcome`, and subscribers
    receive a fresh :class:`EngineSnapshot` afterwards.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        registry: Optional[KeymapRegistry] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or EngineConfig()
        self.buffer = Buffer.from_text(
            self.config.initial_text,
            coalesce=self.config.coalesce_insert,
            history_limit=self.config.history_limit,
        )
        self.bus = ModeBus()
        self.search = SearchEngine(
            self.buffer.document, ignore_case=self.config.search_ignore_case
        )
        self.context = ModeContext(
            buffer=self.buffer,
            registers=self.buffer.registers,
            bus=self.bus,
            search=self.search,
        )
        self.modes = ModeController(self.context, enabled_modes=self.config.enabled_modes)
        for handler_cls in MODE_HANDLERS:
            self.modes.register_mode(handler_cls)

        if registry is None:
            registry = KeymapRegistry(logger_name="vimdoc_engine.keymaps")
            load_default_keymaps(
                registry, default_sequence_timeout_ms=self.config.key_buffer_timeout_ms
            )
        self.registry = registry
        self.resolver = KeymapResolver(registry, logger_name="vimdoc_engine.keymaps")
        self.dispatcher = CommandDispatcher(
            self.context,
            self.resolver,
            timeout_ms=self.config.key_buffer_timeout_ms,
            clock=clock,
        )
        self._sinks: List[RenderSink] = []

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def mode(self) -> EditorMode:
        return self.modes.current

    @property
    def cursor(self):
        return self.buffer.cursor.position

    def handle_key(
        self, key: KeyLike, *, modifiers: Iterable[str] = (), text: Optional[str] = None
    ) -> DispatchOutcome:
        if isinstance(key, str):
            key = KeyInput(key=key, modifiers=frozenset(modifiers), text=text)
        outcome = self.dispatcher.handle_key(key)
        self._publish()
        return outcome

    def feed(self, *keys: KeyLike) -> List[DispatchOutcome]:
        """Handle each key in order; plain strings are single key names."""

        return [self.handle_key(key) for key in keys]

    def type_text(self, text: str) -> List[DispatchOutcome]:
        return [self.handle_key(char) for char in text]

    def process_timeouts(self) -> Optional[DispatchOutcome]:
        outcome = self.dispatcher.process_timeouts()
        if outcome is not None:
            self._publish()
        return outcome

    def force_timeout(self) -> Optional[DispatchOutcome]:
        outcome = self.dispatcher.force_timeout()
        if outcome is not None:
            self._publish()
        return outcome

    def subscribe(self, sink: RenderSink) -> Callable[[], None]:
        """Register a renderer; returns a callable that unsubscribes it."""

        self._sinks.append(sink)

        def unsubscribe() -> None:
            if sink in self._sinks:
                self._sinks.remove(sink)

        return unsubscribe

    def snapshot(self) -> EngineSnapshot:
        cursor = self.buffer.cursor
        command_line = None
        if self.modes.current is EditorMode.COMMAND:
            handler = self.modes.handler_for(EditorMode.COMMAND)
            if isinstance(handler, CommandLineMode):
                command_line = handler.display
        return EngineSnapshot(
            document_text=self.buffer.text,
            cursor=cursor.position,
            mode=self.modes.current.value,
            selections=tuple((s.anchor, s.head) for s in cursor.selections),
            version=self.buffer.document.version,
            pending_keys=self.dispatcher.pending_keys,
            command_line=command_line,
        )

    def _publish(self) -> None:
        if not self._sinks:
            return
        snapshot = self.snapshot()
        for sink in list(self._sinks):
            sink(snapshot)


__all__ = ["Engine", "KeyLike"]

"""Turns key tokens plus the active mode into command executions."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from vimdoc_engine.actions import operators
from vimdoc_engine.buffer import EditTransaction, OutOfBounds
from vimdoc_engine.keymaps import Command, CommandKind, KeymapResolver, ResolutionMatch
from vimdoc_engine.modes.base_mode import Invocation, KeyInput, ModeContext
from vimdoc_engine.modes.controller import EditorMode, ModeController, ModeTransitionError
from vimdoc_engine.runtime import telemetry

from .outcome import DispatchOutcome

OPERATOR_SCOPE = "operator"

# Modes entered before the command body runs, so their undo group covers it.
_ENTER_FIRST = (EditorMode.INSERT, EditorMode.REPLACE)
_COUNT_SCOPES = (EditorMode.NORMAL.value, EditorMode.VISUAL.value, OPERATOR_SCOPE)
_SETTLED_MODES = (EditorMode.NORMAL, EditorMode.VISUAL)


class CountParser:
    """Collects a decimal count prefix. ``0`` only extends a started count."""

    def __init__(self) -> None:
        self._digits: List[str] = []

    @property
    def pending(self) -> bool:
        return bool(self._digits)

    def accepts(self, token: str) -> bool:
        if len(token) != 1 or not token.isdigit():
            return False
        return token != "0" or bool(self._digits)

    def push(self, token: str) -> None:
        self._digits.append(token)

    def take(self) -> Optional[int]:
        if not self._digits:
            return None
        value = int("".join(self._digits))
        self._digits.clear()
        return value

    def clear(self) -> None:
        self._digits.clear()


@dataclass(slots=True)
class PendingOperator:
    command: Command
    keys: Tuple[str, ...]
    count: Optional[int]


@dataclass(slots=True)
class PendingArgument:
    match: ResolutionMatch
    keys: Tuple[str, ...]
    count: Optional[int]


class CommandDispatcher:
    """Owns the pending key buffer and executes resolved commands.

    Per key: a pending single-character argument is filled first; otherwise
    digits feed the count, and everything else extends the key buffer that
    is resolved against the active scope (``operator`` while an operator
    waits for its motion). A complete match that is also a prefix of a
    longer binding is held until the next key or the timeout decides.
    """

    def __init__(
        self,
        context: ModeContext,
        resolver: KeymapResolver,
        *,
        timeout_ms: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if context.modes is None:
            raise ValueError("dispatcher requires a context with a mode controller")
        self.context = context
        self._modes: ModeController = context.modes
        self._resolver = resolver
        self._timeout_ms = timeout_ms
        self._clock = clock
        self._keys: List[str] = []
        self._trail: List[str] = []
        self._held: Optional[ResolutionMatch] = None
        self._count = CountParser()
        self._operator: Optional[PendingOperator] = None
        self._argument: Optional[PendingArgument] = None
        self._deadline: Optional[float] = None

    @property
    def scope(self) -> str:
        if self._operator is not None:
            return OPERATOR_SCOPE
        return self._modes.current.value

    @property
    def pending_keys(self) -> Tuple[str, ...]:
        return tuple(self._trail)

    @property
    def has_pending(self) -> bool:
        return bool(
            self._keys
            or self._count.pending
            or self._operator is not None
            or self._argument is not None
        )

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def handle_key(self, key: KeyInput) -> DispatchOutcome:
        token = key.token
        with telemetry.span(
            "dispatch::key",
            component="dispatch",
            metadata={"key": token, "scope": self.scope},
        ) as handle:
            if self._deadline is not None and self._clock() >= self._deadline:
                self._expire()
            self._trail.append(token)
            outcome = self._dispatch(key, token)
            if not outcome.is_pending:
                self._trail.clear()
            handle.add_metadata("outcome", outcome.kind)
            if outcome.message:
                handle.add_metadata("detail", outcome.message)
        return outcome

    def process_timeouts(self) -> Optional[DispatchOutcome]:
        """Expire the pending state if its window has elapsed."""

        if self._deadline is None or self._clock() < self._deadline:
            return None
        return self._expire()

    def force_timeout(self) -> Optional[DispatchOutcome]:
        """Expire the pending state now, regardless of the clock."""

        if not self.has_pending:
            return None
        return self._expire()

    def reset(self) -> None:
        self._keys.clear()
        self._trail.clear()
        self._held = None
        self._count.clear()
        self._operator = None
        self._argument = None
        self._deadline = None

    def _dispatch(self, key: KeyInput, token: str) -> DispatchOutcome:
        if self._argument is not None:
            return self._fill_argument(key, token)

        if token == "<Esc>" and self.has_pending:
            self.reset()
            return DispatchOutcome.ignored("cancelled")

        scope = self.scope
        if scope in _COUNT_SCOPES and not self._keys and self._count.accepts(token):
            self._count.push(token)
            self._arm(self._timeout_ms)
            return DispatchOutcome.pending("awaiting_count", self._timeout_ms)

        self._keys.append(token)
        result = self._resolver.resolve(scope, self._keys)
        if result.status == "pending":
            self._held = result.match
            timeout_ms = result.timeout_ms or self._timeout_ms
            self._arm(timeout_ms)
            return DispatchOutcome.pending("awaiting_sequence", timeout_ms)

        keys = tuple(self._keys)
        self._keys.clear()
        held, self._held = self._held, None
        self._deadline = None

        if result.status == "match" and result.match is not None:
            return self._run(result.match, keys, self._count.take())

        if held is not None:
            # The held shorter match runs, then this key starts over.
            self._run(held, keys[:-1], self._count.take())
            self._trail = [token]
            return self._dispatch(key, token)

        if self._operator is not None:
            self.reset()
            return DispatchOutcome.ignored("operator_discarded")

        self._count.clear()
        handler = self._modes.active_handler
        if len(keys) == 1 and handler is not None and handler.handle_text(key):
            return DispatchOutcome.consumed("text")
        return DispatchOutcome.ignored("unbound")

    def _fill_argument(self, key: KeyInput, token: str) -> DispatchOutcome:
        pending, self._argument = self._argument, None
        self._deadline = None
        char = key.char
        if pending is None or token == "<Esc>" or char is None:
            self.reset()
            return DispatchOutcome.ignored("argument_cancelled")
        return self._run(
            pending.match, pending.keys + (token,), pending.count, argument=char
        )

    def _run(
        self,
        match: ResolutionMatch,
        keys: Tuple[str, ...],
        count: Optional[int],
        *,
        argument: Optional[str] = None,
    ) -> DispatchOutcome:
        command = match.command
        if command.takes_argument and argument is None:
            self._argument = PendingArgument(match=match, keys=keys, count=count)
            self._arm(self._timeout_ms)
            return DispatchOutcome.pending("awaiting_argument", self._timeout_ms)

        if self._operator is not None:
            return self._apply_operator(command, keys, count, argument)

        if command.kind is CommandKind.OPERATOR:
            if self._modes.current is EditorMode.VISUAL:
                invocation = Invocation(
                    command=command,
                    keys=keys,
                    count=count,
                    argument=argument,
                    range=operators.selection_range(self.context),
                )
                return self._execute(command, invocation)
            self._operator = PendingOperator(command=command, keys=keys, count=count)
            self._arm(self._timeout_ms)
            return DispatchOutcome.pending("operator_pending", self._timeout_ms)

        invocation = Invocation(command=command, keys=keys, count=count, argument=argument)
        return self._execute(command, invocation)

    def _apply_operator(
        self,
        command: Command,
        keys: Tuple[str, ...],
        count: Optional[int],
        argument: Optional[str],
    ) -> DispatchOutcome:
        pending, self._operator = self._operator, None
        self._deadline = None
        if pending is None:
            return DispatchOutcome.ignored("no_operator")
        operator = pending.command
        explicit = pending.count is not None or count is not None
        total = (pending.count or 1) * (count or 1)

        if command.kind is CommandKind.OPERATOR:
            if command.id != operator.id:
                return DispatchOutcome.ignored("operator_mismatch")
            row = self.context.buffer.cursor.position[0]
            last = min(row + total - 1, self.context.buffer.document.line_count() - 1)
            target = operators.line_range(row, last)
        elif command.motion is not None:
            target = operators.motion_range(
                self.context,
                command.motion,
                total,
                argument,
                explicit_count=explicit,
                change=operator.handler is operators.change,
            )
        else:
            return DispatchOutcome.ignored("not_a_motion")

        if target is None:
            return DispatchOutcome.ignored("empty_range")
        invocation = Invocation(
            command=operator,
            keys=pending.keys + keys,
            count=total if explicit else None,
            argument=argument,
            range=target,
        )
        return self._execute(operator, invocation)

    def _execute(self, command: Command, invocation: Invocation) -> DispatchOutcome:
        modes = self._modes
        target = EditorMode(command.switch_to) if command.switch_to else None
        if target is not None and not modes.can_transition(target):
            return DispatchOutcome.ignored("mode_unavailable")
        trigger = "".join(invocation.keys)

        rejected: Optional[Exception] = None
        with telemetry.span(
            "command::execute",
            component="commands",
            metadata={"command": command.id, "count": invocation.count or 1},
        ) as handle:
            try:
                if target in _ENTER_FIRST:
                    modes.transition(target, trigger=trigger)
                result = command.execute(self.context, invocation)
                if target is not None and target not in _ENTER_FIRST:
                    modes.transition(target, trigger=trigger)
            except (OutOfBounds, ModeTransitionError) as exc:
                handle.add_metadata("rejected", type(exc).__name__)
                rejected = exc
        if rejected is not None:
            telemetry.record_event(
                "command.rejected",
                level="warning",
                data={"command": command.id, "error": str(rejected)},
            )
            return DispatchOutcome.ignored(type(rejected).__name__)

        if modes.current in _SETTLED_MODES:
            self.context.buffer.cursor.settle(past_end=False)
        transaction = result if isinstance(result, EditTransaction) else None
        self.context.bus.emit(
            "command.executed",
            {"command": command.id, "count": invocation.count, "mode": modes.current},
        )
        return DispatchOutcome.consumed(command.id, transaction)

    def _expire(self) -> DispatchOutcome:
        held, keys = self._held, tuple(self._keys)
        self._held = None
        self._keys.clear()
        self._trail.clear()
        self._deadline = None
        if held is not None:
            telemetry.record_event(
                "dispatch.timeout",
                level="debug",
                data={"keys": keys, "resolved": held.command.id},
            )
            return self._run(held, keys, self._count.take())
        self.reset()
        return DispatchOutcome.ignored("timeout")

    def _arm(self, timeout_ms: int) -> None:
        self._deadline = self._clock() + timeout_ms / 1000.0


__all__ = ["CommandDispatcher", "CountParser", "OPERATOR_SCOPE"]

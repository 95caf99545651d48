"""Command and binding storage shared by the resolver and the loaders."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional, Tuple

from vimdoc_engine.runtime.telemetry import span

from .models import Binding, Command, KeySequence

Slot = Tuple[str, str]


@dataclass(slots=True)
class RegistryStats:
    command_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding reuses a sequence already bound in its scope."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        taken = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"'{binding.key_signature}' in scope '{binding.mode}' is already "
            f"bound by {taken}; cannot add '{binding.id}'"
        )


class KeymapRegistry:
    """Owns commands and bindings.

    Each scope holds at most one binding per key sequence; the ``(mode,
    signature)`` slot map enforces that. Every mutation bumps ``revision`` so
    resolvers know to rebuild their indexes.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._commands: Dict[str, Command] = {}
        self._bindings: Dict[str, Binding] = {}
        self._slots: Dict[Slot, str] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_command(self, command_id: str) -> Command:
        command = self._commands.get(command_id)
        if command is None:
            raise KeyError(f"Command '{command_id}' is not registered")
        return command

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_command(self, command: Command, *, replace: bool = False) -> Command:
        if command.id in self._commands and not replace:
            raise ValueError(f"Command '{command.id}' already registered")
        self._commands[command.id] = command
        self._revision += 1
        return command

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever holds its slot."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            metadata={"binding_id": binding.id, "mode": binding.mode},
        ) as handle:
            command = self._commands.get(binding.command_id)
            if command is None:
                raise KeyError(
                    f"Binding '{binding.id}' references unknown command "
                    f"'{binding.command_id}'"
                )
            if not command.applies_to(binding.mode):
                raise ValueError(
                    f"Command '{command.id}' is not available in '{binding.mode}'"
                )

            evicted = []
            occupant = self.detect_conflict(binding)
            if occupant is not None and occupant.id != binding.id:
                if not replace:
                    raise KeymapConflictError(binding, (occupant,))
                evicted.append(occupant.id)
            if binding.id in self._bindings:
                if not replace:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
                evicted.append(binding.id)

            for binding_id in evicted:
                self._drop(binding_id)
            if evicted:
                handle.add_metadata("replaced", ",".join(evicted))
            self._bindings[binding.id] = binding
            self._slots[_slot_of(binding)] = binding.id
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        if binding_id not in self._bindings:
            return None
        removed = self._drop(binding_id)
        self._revision += 1
        return removed

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if mode is None or binding.mode == mode:
                yield binding

    def override_sequence_timeouts(
        self, *, timeout_ms: int, mode: Optional[str] = None
    ) -> None:
        """Give every binding (optionally of one scope) the same key timeout."""

        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        updated = {
            binding.id: replace(
                binding,
                sequence=KeySequence(binding.sequence.strokes, timeout_ms=timeout_ms),
            )
            for binding in self.iter_bindings(mode)
        }
        self._bindings.update(updated)
        self._revision += 1

    def stats(self) -> RegistryStats:
        return RegistryStats(
            command_count=len(self._commands),
            binding_count=len(self._bindings),
            modes=tuple(sorted({mode for mode, _ in self._slots})),
        )

    def detect_conflict(self, binding: Binding) -> Optional[Binding]:
        occupant = self._slots.get(_slot_of(binding))
        return None if occupant is None else self._bindings[occupant]

    def _drop(self, binding_id: str) -> Binding:
        binding = self._bindings.pop(binding_id)
        slot = _slot_of(binding)
        if self._slots.get(slot) == binding_id:
            del self._slots[slot]
        return binding


def _slot_of(binding: Binding) -> Slot:
    return (binding.mode, binding.key_signature)


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]

"""Key sequence resolution over a per-scope prefix index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Sequence, Set, Tuple

from vimdoc_engine.runtime.telemetry import span

from .models import Binding, Command
from .registry import KeymapRegistry

Prefix = Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its command."""

    binding: Binding
    command: Command


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    A ``pending`` result may still carry a ``match``: the keys so far form a
    complete command that is also a prefix of a longer one. The caller holds
    it until the next key or the timeout decides.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[ResolutionMatch] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None


@dataclass(slots=True)
class _ScopeIndex:
    """Every proper prefix of a scope's sequences, with what may follow it."""

    revision: int
    complete: Dict[Prefix, List[Binding]] = field(default_factory=dict)
    followers: Dict[Prefix, Set[str]] = field(default_factory=dict)
    # Shortest timeout among the longer sequences sharing a prefix.
    timeouts: Dict[Prefix, int] = field(default_factory=dict)

    def add(self, binding: Binding) -> None:
        tokens = tuple(binding.sequence.tokens)
        self.complete.setdefault(tokens, []).append(binding)
        timeout = binding.sequence.timeout_ms
        for cut in range(len(tokens)):
            prefix = tokens[:cut]
            self.followers.setdefault(prefix, set()).add(tokens[cut])
            known = self.timeouts.get(prefix)
            self.timeouts[prefix] = timeout if known is None else min(known, timeout)

    def longest_known(self, keys: Prefix) -> int:
        consumed = 0
        while consumed < len(keys) and keys[consumed] in self.followers.get(
            keys[:consumed], ()
        ):
            consumed += 1
        return consumed


class KeymapResolver:
    """Resolves typed tokens against the bindings registered for a scope.

    Indexes are rebuilt lazily whenever the registry revision moves.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._indexes: Dict[str, _ScopeIndex] = {}

    def resolve(self, mode: str, tokens: Sequence[str]) -> ResolutionResult:
        keys = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            metadata={"mode": mode, "length": len(keys)},
        ) as handle:
            result = self._lookup(self._index_for(mode), keys)
            handle.add_metadata("status", result.status)
            if result.match is not None:
                handle.add_metadata("binding_id", result.match.binding.id)
            return result

    def reset(self, mode: Optional[str] = None) -> None:
        if mode is None:
            self._indexes.clear()
        else:
            self._indexes.pop(mode, None)

    def _lookup(self, index: _ScopeIndex, keys: Prefix) -> ResolutionResult:
        consumed = index.longest_known(keys)
        if consumed < len(keys):
            return ResolutionResult(status="miss", consumed=consumed)

        match = self._best(index.complete.get(keys, ()))
        followers = index.followers.get(keys)
        if followers:
            return ResolutionResult(
                status="pending",
                match=match,
                consumed=consumed,
                next_expected=tuple(sorted(followers)),
                timeout_ms=index.timeouts.get(keys),
            )
        if match is None:
            return ResolutionResult(status="miss", consumed=consumed)
        return ResolutionResult(status="match", match=match, consumed=consumed)

    def _best(self, bindings: Sequence[Binding]) -> Optional[ResolutionMatch]:
        if not bindings:
            return None
        chosen = min(bindings, key=lambda b: (-b.priority, b.id))
        return ResolutionMatch(
            binding=chosen, command=self._registry.get_command(chosen.command_id)
        )

    def _index_for(self, mode: str) -> _ScopeIndex:
        revision = self._registry.revision()
        index = self._indexes.get(mode)
        if index is None or index.revision != revision:
            index = _ScopeIndex(revision=revision)
            for binding in self._registry.iter_bindings(mode):
                index.add(binding)
            self._indexes[mode] = index
        return index


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
    "ResolutionMatch",
]

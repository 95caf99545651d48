"""Read-only snapshots handed to rendering collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

from .validation import Position


@dataclass(frozen=True, slots=True)
class EngineSnapshot:
    """Everything a renderer needs after one processed key event."""

    document_text: str
    cursor: Position
    mode: str
    selections: Tuple[Tuple[Position, Position], ...]
    version: int
    pending_keys: Tuple[str, ...] = ()
    command_line: Optional[str] = None

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self.document_text.split("\n"))


class RenderSink(Protocol):
    """Callable that receives a snapshot after every processed key."""

    def __call__(self, snapshot: EngineSnapshot) -> None:
        ...


__all__ = ["EngineSnapshot", "RenderSink"]

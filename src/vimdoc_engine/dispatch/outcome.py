"""Result of feeding one key to the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from vimdoc_engine.buffer import EditTransaction

OutcomeKind = Literal["consumed", "pending", "ignored"]


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """``consumed`` ran a command, ``pending`` awaits more keys, ``ignored`` did nothing."""

    kind: OutcomeKind
    command: Optional[str] = None
    transaction: Optional[EditTransaction] = None
    message: Optional[str] = None
    timeout_ms: Optional[int] = None

    @classmethod
    def consumed(
        cls, command: str, transaction: Optional[EditTransaction] = None
    ) -> "DispatchOutcome":
        return cls(kind="consumed", command=command, transaction=transaction)

    @classmethod
    def pending(cls, message: str, timeout_ms: Optional[int] = None) -> "DispatchOutcome":
        return cls(kind="pending", message=message, timeout_ms=timeout_ms)

    @classmethod
    def ignored(cls, message: Optional[str] = None) -> "DispatchOutcome":
        return cls(kind="ignored", message=message)

    @property
    def is_consumed(self) -> bool:
        return self.kind == "consumed"

    @property
    def is_pending(self) -> bool:
        return self.kind == "pending"

    @property
    def is_ignored(self) -> bool:
        return self.kind == "ignored"


__all__ = ["DispatchOutcome", "OutcomeKind"]

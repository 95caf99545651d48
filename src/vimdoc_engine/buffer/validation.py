"""Position types, bounds checks, and the non-error result sentinels."""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple

Position = Tuple[int, int]  # (line, column)


class OutOfBounds(IndexError):
    """Raised when a position or line index falls outside the document."""

    def __init__(self, message: str, *, position: Position | None = None) -> None:
        super().__init__(message)
        self.position = position


class Sentinel(Enum):
    """Legal results that had nothing to do. Falsy so callers can branch."""

    NO_OP = "no_op"
    NOT_FOUND = "not_found"

    def __bool__(self) -> bool:
        return False


NO_OP = Sentinel.NO_OP
NOT_FOUND = Sentinel.NOT_FOUND


def ensure_position(lines: Sequence[str], position: Position) -> Position:
    row, col = position
    if row < 0 or row >= len(lines):
        raise OutOfBounds(f"Line {row} out of range", position=position)
    if col < 0 or col > len(lines[row]):
        raise OutOfBounds(f"Column {col} out of range", position=position)
    return (row, col)


def clamp_position(
    lines: Sequence[str], position: Position, *, past_end: bool = True
) -> Position:
    """Clamp into the document; without ``past_end`` stop on the last character."""

    row, col = position
    row = max(0, min(row, len(lines) - 1))
    limit = len(lines[row])
    if not past_end:
        limit = max(0, limit - 1)
    return (row, max(0, min(col, limit)))


__all__ = [
    "Position",
    "OutOfBounds",
    "Sentinel",
    "NO_OP",
    "NOT_FOUND",
    "ensure_position",
    "clamp_position",
]

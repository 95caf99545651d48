"""Undo/redo history keyed to edit transactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from vimdoc_engine.runtime import telemetry

from .document import TextBuffer
from .validation import NO_OP, Position, Sentinel


@dataclass(frozen=True, slots=True)
class EditTransaction:
    label: str
    before_text: str
    after_text: str
    cursor_before: Position
    cursor_after: Position


@dataclass(slots=True)
class _OpenGroup:
    label: str
    before_text: str
    cursor_before: Position
    edits: int = 0


class HistoryManager:
    """Linear undo/redo stacks over full-text snapshots.

    While a group is open (one Insert or Replace session) recorded edits are
    folded into a single transaction that is committed when the group ends.
    With ``coalesce=False`` every edit is committed on its own.
    """

    def __init__(
        self,
        document: TextBuffer,
        *,
        coalesce: bool = True,
        max_entries: Optional[int] = None,
    ) -> None:
        self.document = document
        self.coalesce = coalesce
        self.max_entries = max_entries
        self._undo: List[EditTransaction] = []
        self._redo: List[EditTransaction] = []
        self._group: Optional[_OpenGroup] = None

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def commit(self, transaction: EditTransaction) -> None:
        self._undo.append(transaction)
        if self.max_entries is not None and len(self._undo) > self.max_entries:
            del self._undo[: len(self._undo) - self.max_entries]
        self._redo.clear()

    def record(self, transaction: EditTransaction) -> None:
        """Commit an edit, or fold it into the open group."""

        if self._group is not None and self.coalesce:
            self._group.edits += 1
            return
        self.commit(transaction)

    def begin_group(self, label: str, cursor: Position) -> None:
        if self._group is not None:
            return
        self._group = _OpenGroup(
            label=label, before_text=self.document.text, cursor_before=cursor
        )

    def end_group(self, cursor: Position) -> Optional[EditTransaction]:
        group, self._group = self._group, None
        if group is None:
            return None
        after_text = self.document.text
        if after_text == group.before_text:
            return None
        transaction = EditTransaction(
            label=group.label,
            before_text=group.before_text,
            after_text=after_text,
            cursor_before=group.cursor_before,
            cursor_after=cursor,
        )
        if self.coalesce:
            self.commit(transaction)
        return transaction

    def mark_boundary(self, cursor: Position) -> None:
        """Split the open group so the edits so far undo separately."""

        if self._group is None:
            return
        label = self._group.label
        self.end_group(cursor)
        self.begin_group(label, cursor)

    def undo(self, cursor: Optional[Position] = None) -> Union[Position, Sentinel]:
        if self._group is not None:
            self.end_group(cursor or (0, 0))
        if not self._undo:
            telemetry.record_event("history.undo_empty", level="debug")
            return NO_OP
        transaction = self._undo.pop()
        self.document.restore(transaction.before_text)
        self._redo.append(transaction)
        return transaction.cursor_before

    def redo(self) -> Union[Position, Sentinel]:
        if self._group is not None or not self._redo:
            return NO_OP
        transaction = self._redo.pop()
        self.document.restore(transaction.after_text)
        self._undo.append(transaction)
        return transaction.cursor_after


__all__ = ["EditTransaction", "HistoryManager"]

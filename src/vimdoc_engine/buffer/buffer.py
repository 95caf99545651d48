"""Buffer facade combining document, cursor, registers, and history."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Optional

from vimdoc_engine.runtime import telemetry

from .cursor import CursorModel
from .document import TextBuffer
from .registers import RegisterBank
from .undo import EditTransaction, HistoryManager
from .validation import Position, ensure_position


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[TextBuffer] = None,
        registers: Optional[RegisterBank] = None,
        coalesce: bool = True,
        history_limit: Optional[int] = None,
    ) -> None:
        self.name = name
        self.document = document or TextBuffer()
        self.cursor = CursorModel(self.document)
        self.registers = registers or RegisterBank()
        self.history = HistoryManager(
            self.document, coalesce=coalesce, max_entries=history_limit
        )

    @classmethod
    def from_text(cls, text: str, *, name: str = "default", **kwargs) -> "Buffer":
        return cls(name=name, document=TextBuffer(text), **kwargs)

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def lines(self):
        return self.document.lines

    def replace_range(
        self,
        start: Position,
        end: Position,
        text: str,
        *,
        label: str,
        cursor_after: Optional[Position] = None,
    ) -> Optional[EditTransaction]:
        """Replace ``[start, end)`` with ``text`` as one recorded transaction.

        The cursor lands after the inserted text unless ``cursor_after`` is
        given. Returns ``None`` when the document did not change.
        """

        lines = self.document.lines
        start = ensure_position(lines, start)
        end = ensure_position(lines, end)
        if end < start:
            start, end = end, start
        with Transaction(self, label) as tx:
            self.document.delete(start, end)
            landed = self.document.insert(start, text) if text else start
            self.cursor.set_position(cursor_after or landed)
            return tx.commit()

    def insert_text(self, text: str, *, at: Optional[Position] = None) -> Optional[EditTransaction]:
        position = at or self.cursor.position
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(
        self, start: Position, end: Position, *, label: str = "delete_range"
    ) -> Optional[EditTransaction]:
        return self.replace_range(start, end, "", label=label)

    def lines_text(self, first: int, last: int) -> str:
        """Return lines ``first..last`` newline-terminated, as a linewise yank."""

        count = self.document.line_count()
        first, last = max(0, first), min(last, count - 1)
        return "\n".join(self.document.lines[first : last + 1]) + "\n"

    def delete_lines(
        self,
        first: int,
        last: int,
        *,
        label: str = "delete_lines",
        first_non_blank: bool = False,
    ) -> Optional[EditTransaction]:
        """Remove whole lines ``first..last``; the cursor lands on the next line.

        With ``first_non_blank`` it lands on that line's first non-blank
        character instead of column 0.
        """

        count = self.document.line_count()
        first, last = max(0, first), min(last, count - 1)
        if last + 1 < count:
            start, end = (first, 0), (last + 1, 0)
        elif first > 0:
            start = (first - 1, len(self.document.line_at(first - 1)))
            end = (last, len(self.document.line_at(last)))
        else:
            start, end = (0, 0), (last, len(self.document.line_at(last)))
        remaining = max(1, count - (last - first + 1))
        landing = ""
        if last + 1 < count:
            landing = self.document.line_at(last + 1)
        elif first > 0:
            landing = self.document.line_at(first - 1)
        col = len(landing) - len(landing.lstrip()) if first_non_blank else 0
        return self.replace_range(
            start, end, "", label=label, cursor_after=(min(first, remaining - 1), col)
        )

    def get_text_range(self, start: Position, end: Position) -> str:
        return self.document.text_range(start, end)


class Transaction(AbstractContextManager["Transaction"]):
    """Brackets one mutation: captures the before-state and records the edit."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._before_text = ""
        self._before_cursor: Position = (0, 0)

    def __enter__(self) -> "Transaction":
        self._before_text = self.buffer.document.text
        self._before_cursor = self.buffer.cursor.position
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self) -> Optional[EditTransaction]:
        after_text = self.buffer.document.text
        if after_text == self._before_text:
            return None
        entry = EditTransaction(
            label=self.label,
            before_text=self._before_text,
            after_text=after_text,
            cursor_before=self._before_cursor,
            cursor_after=self.buffer.cursor.position,
        )
        self.buffer.history.record(entry)
        return entry

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None and self.buffer.document.text != self._before_text:
            self.buffer.document.restore(self._before_text)
            self.buffer.cursor.set_position(self._before_cursor)
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "Transaction"]

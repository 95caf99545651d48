"""Insert mode: typed text goes into the document at the cursor."""

from __future__ import annotations

from typing import Optional

from .base_mode import KeyInput, Mode
from .controller import EditorMode


class InsertMode(Mode):
    """One Insert session is one undo group unless coalescing is disabled."""

    mode = EditorMode.INSERT

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        buffer = self.context.buffer
        buffer.history.begin_group("insert", buffer.cursor.position)

    def on_exit(self, next_mode: EditorMode) -> None:
        del next_mode
        buffer = self.context.buffer
        row, col = buffer.cursor.position
        settled = (row, max(col - 1, 0))
        buffer.cursor.set_position(settled)
        buffer.history.end_group(settled)

    def handle_text(self, key: KeyInput) -> bool:
        text = key.char
        if text is None:
            return False
        self.context.buffer.insert_text(text)
        return True

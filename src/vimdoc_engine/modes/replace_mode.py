"""Replace mode: typed characters overwrite the text under the cursor."""

from __future__ import annotations

from typing import List, Optional

from .base_mode import KeyInput, Mode, ModeContext
from .controller import EditorMode


class ReplaceMode(Mode):
    mode = EditorMode.REPLACE

    def __init__(self, context: ModeContext) -> None:
        super().__init__(context)
        # One entry per character typed since the cursor last moved: the
        # overwritten char, or None if appended.
        self._replaced: List[Optional[str]] = []

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        self._replaced.clear()
        buffer = self.context.buffer
        buffer.history.begin_group("replace", buffer.cursor.position)

    def on_exit(self, next_mode: EditorMode) -> None:
        del next_mode
        self._replaced.clear()
        buffer = self.context.buffer
        row, col = buffer.cursor.position
        settled = (row, max(col - 1, 0))
        buffer.cursor.set_position(settled)
        buffer.history.end_group(settled)

    def on_cursor_moved(self) -> None:
        self._replaced.clear()

    def handle_text(self, key: KeyInput) -> bool:
        text = key.char
        if text is None:
            return False
        for char in text:
            self._overwrite(char)
        return True

    def _overwrite(self, char: str) -> None:
        buffer = self.context.buffer
        row, col = buffer.cursor.position
        line = buffer.document.line_at(row)
        if col < len(line):
            self._replaced.append(line[col])
            buffer.replace_range((row, col), (row, col + 1), char, label="replace")
        else:
            self._replaced.append(None)
            buffer.insert_text(char)

    def backspace(self) -> None:
        """Step left, restoring the character typed over at that spot."""

        buffer = self.context.buffer
        row, col = buffer.cursor.position
        if col == 0:
            return
        if not self._replaced:
            buffer.cursor.set_position((row, col - 1))
            return
        original = self._replaced.pop()
        target = (row, col - 1)
        if original is None:
            buffer.delete_range(target, (row, col), label="replace")
        else:
            buffer.replace_range(
                target, (row, col), original, label="replace", cursor_after=target
            )

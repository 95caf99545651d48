"""Normal mode: the cursor rests on a character, never past the line end."""

from __future__ import annotations

from typing import Optional

from .base_mode import Mode
from .controller import EditorMode


class NormalMode(Mode):
    mode = EditorMode.NORMAL

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        self.context.buffer.cursor.settle(past_end=False)

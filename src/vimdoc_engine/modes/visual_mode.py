"""Visual mode: the primary selection is anchored where the mode began."""

from __future__ import annotations

from typing import Optional

from .base_mode import Mode
from .controller import EditorMode


class VisualMode(Mode):
    mode = EditorMode.VISUAL

    def on_enter(self, previous: Optional[EditorMode]) -> None:
        del previous
        selection = self.context.buffer.cursor.begin_selection()
        self.context.bus.emit(
            "visual.selection", {"anchor": selection.anchor, "head": selection.head}
        )

    def on_exit(self, next_mode: EditorMode) -> None:
        del next_mode
        self.context.buffer.cursor.collapse_to_point()

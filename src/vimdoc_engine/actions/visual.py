"""Visual mode specific actions."""

from __future__ import annotations

from vimdoc_engine.modes.base_mode import Invocation, ModeContext


def swap_selection_anchor(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    selection = context.buffer.cursor.swap_anchor()
    context.bus.emit(
        "visual.selection", {"anchor": selection.anchor, "head": selection.head}
    )
    return None


__all__ = ["swap_selection_anchor"]

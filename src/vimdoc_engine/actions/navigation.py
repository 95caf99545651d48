"""Cursor movement commands: motions and search repeats."""

from __future__ import annotations

from vimdoc_engine.buffer import NOT_FOUND
from vimdoc_engine.modes.base_mode import Invocation, ModeContext
from vimdoc_engine.modes.controller import EditorMode

from .operators import spec_for_count


def _emit_selection(context: ModeContext) -> None:
    selection = context.buffer.cursor.primary
    context.bus.emit(
        "visual.selection", {"anchor": selection.anchor, "head": selection.head}
    )


def move(context: ModeContext, invocation: Invocation) -> None:
    spec = invocation.command.motion
    if spec is None:
        return None
    spec = spec_for_count(spec, invocation.count is not None)
    mode = context.modes.current if context.modes else EditorMode.NORMAL
    cursor = context.buffer.cursor
    if mode is EditorMode.VISUAL:
        cursor.extend_selection(spec, invocation.repeat, invocation.argument)
        _emit_selection(context)
        return None
    typing = mode in (EditorMode.INSERT, EditorMode.REPLACE)
    cursor.move_by(spec, invocation.repeat, invocation.argument, past_end=typing)
    if typing:
        context.buffer.history.mark_boundary(cursor.position)
        handler = context.modes.active_handler if context.modes else None
        if handler is not None:
            handler.on_cursor_moved()
    return None


def _repeat_search(context: ModeContext, invocation: Invocation, *, reverse: bool) -> None:
    search = context.search
    if search is None:
        return None
    cursor = context.buffer.cursor
    position = cursor.position
    for _ in range(invocation.repeat):
        found = search.repeat(position, reverse=reverse)
        if found is NOT_FOUND:
            context.bus.emit("search.not_found", search.last_pattern)
            return None
        position = found
    if context.modes and context.modes.current is EditorMode.VISUAL:
        cursor.extend_to(position)
        _emit_selection(context)
        return None
    cursor.set_position(position, past_end=False)
    return None


def search_next(context: ModeContext, invocation: Invocation) -> None:
    return _repeat_search(context, invocation, reverse=False)


def search_previous(context: ModeContext, invocation: Invocation) -> None:
    return _repeat_search(context, invocation, reverse=True)


__all__ = ["move", "search_next", "search_previous"]

"""Mode-entry positioning, history and register actions."""

from __future__ import annotations

from typing import Optional

from vimdoc_engine.buffer import NO_OP, EditTransaction
from vimdoc_engine.modes.base_mode import Invocation, ModeContext


def noop(context: ModeContext, invocation: Invocation) -> None:
    del context, invocation
    return None


def append(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    cursor = context.buffer.cursor
    row, col = cursor.position
    if context.buffer.document.line_at(row):
        cursor.set_position((row, col + 1))
    return None


def append_line_end(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    cursor = context.buffer.cursor
    row = cursor.position[0]
    cursor.set_position((row, len(context.buffer.document.line_at(row))))
    return None


def insert_line_start(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    cursor = context.buffer.cursor
    row = cursor.position[0]
    line = context.buffer.document.line_at(row)
    cursor.set_position((row, len(line) - len(line.lstrip())))
    return None


def open_line_below(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    del invocation
    buffer = context.buffer
    row = buffer.cursor.position[0]
    end = (row, len(buffer.document.line_at(row)))
    return buffer.replace_range(end, end, "\n", label="open_line")


def open_line_above(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    del invocation
    buffer = context.buffer
    row = buffer.cursor.position[0]
    return buffer.replace_range(
        (row, 0), (row, 0), "\n", label="open_line", cursor_after=(row, 0)
    )


def undo(context: ModeContext, invocation: Invocation) -> None:
    buffer = context.buffer
    for _ in range(invocation.repeat):
        landed = buffer.history.undo(buffer.cursor.position)
        if landed is NO_OP:
            context.bus.emit("history.noop", "undo")
            break
        buffer.cursor.set_position(landed)
    return None


def redo(context: ModeContext, invocation: Invocation) -> None:
    buffer = context.buffer
    for _ in range(invocation.repeat):
        landed = buffer.history.redo()
        if landed is NO_OP:
            context.bus.emit("history.noop", "redo")
            break
        buffer.cursor.set_position(landed)
    return None


def select_register(context: ModeContext, invocation: Invocation) -> None:
    name = invocation.argument or ""
    if len(name) == 1 and (name.isalnum() or name == '"'):
        context.registers.active = name
    return None


__all__ = [
    "append",
    "append_line_end",
    "insert_line_start",
    "noop",
    "open_line_above",
    "open_line_below",
    "redo",
    "select_register",
    "undo",
]

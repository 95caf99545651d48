"""Direct edits: ``x``, ``X``, ``D``, ``J``, ``p``, ``P``, ``r`` and typing keys."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, cast

from vimdoc_engine.buffer import EditTransaction
from vimdoc_engine.modes.base_mode import Invocation, ModeContext
from vimdoc_engine.modes.controller import EditorMode
from vimdoc_engine.modes.replace_mode import ReplaceMode

from .operators import change, line_range


def delete_char(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    buffer = context.buffer
    row, col = buffer.cursor.position
    line = buffer.document.line_at(row)
    if not line:
        return None
    end = (row, min(len(line), col + invocation.repeat))
    context.registers.store(buffer.get_text_range((row, col), end))
    return buffer.delete_range((row, col), end, label="delete_char")


def delete_char_before(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    buffer = context.buffer
    row, col = buffer.cursor.position
    if col == 0:
        return None
    start = (row, max(0, col - invocation.repeat))
    context.registers.store(buffer.get_text_range(start, (row, col)))
    return buffer.delete_range(start, (row, col), label="delete_char")


def delete_to_line_end(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    buffer = context.buffer
    row, col = buffer.cursor.position
    last = min(row + invocation.repeat - 1, buffer.document.line_count() - 1)
    end = (last, len(buffer.document.line_at(last)))
    if (row, col) == end:
        return None
    context.registers.store(buffer.get_text_range((row, col), end))
    return buffer.delete_range((row, col), end, label="delete_to_line_end")


def substitute_lines(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    """``S``: clear [count] lines down to one empty line."""

    row = context.buffer.cursor.position[0]
    last = min(row + invocation.repeat - 1, context.buffer.document.line_count() - 1)
    return change(context, replace(invocation, range=line_range(row, last)))


def join_lines(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    """Join the current line with the next ``max(count - 1, 1)`` lines."""

    buffer = context.buffer
    row = buffer.cursor.position[0]
    joins = max(1, invocation.repeat - 1)
    last = min(row + joins, buffer.document.line_count() - 1)
    if last == row:
        return None
    lines = buffer.document.lines
    joined = lines[row]
    join_col = len(joined)
    for following in lines[row + 1 : last + 1]:
        following = following.lstrip()
        join_col = len(joined)
        if following and joined and not joined.endswith(" "):
            joined += " "
        joined += following
    end = (last, len(lines[last]))
    return buffer.replace_range(
        (row, 0), end, joined, label="join", cursor_after=(row, join_col)
    )


def _put(
    context: ModeContext, invocation: Invocation, *, after: bool
) -> Optional[EditTransaction]:
    value = context.registers.take()
    if not value.text:
        return None
    buffer = context.buffer
    row, col = buffer.cursor.position
    line = buffer.document.line_at(row)

    if value.linewise:
        body = value.text[:-1] if value.text.endswith("\n") else value.text
        block = "\n".join([body] * invocation.repeat)
        if after:
            at = (row, len(line))
            return buffer.replace_range(
                at, at, "\n" + block, label="put", cursor_after=(row + 1, 0)
            )
        return buffer.replace_range(
            (row, 0), (row, 0), block + "\n", label="put", cursor_after=(row, 0)
        )

    at = (row, min(col + 1, len(line))) if after and line else (row, col)
    text = value.text * invocation.repeat
    pieces = text.split("\n")
    last_col = len(pieces[-1]) + (at[1] if len(pieces) == 1 else 0)
    return buffer.replace_range(
        at,
        at,
        text,
        label="put",
        cursor_after=(row + len(pieces) - 1, max(0, last_col - 1)),
    )


def put_after(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    return _put(context, invocation, after=True)


def put_before(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    return _put(context, invocation, after=False)


def replace_char(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    char = invocation.argument
    if not char:
        return None
    buffer = context.buffer
    row, col = buffer.cursor.position
    count = invocation.repeat
    if col + count > len(buffer.document.line_at(row)):
        return None
    return buffer.replace_range(
        (row, col),
        (row, col + count),
        char * count,
        label="replace_char",
        cursor_after=(row, col + count - 1),
    )


def insert_backspace(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    del invocation
    buffer = context.buffer
    row, col = buffer.cursor.position
    if col > 0:
        return buffer.delete_range((row, col - 1), (row, col), label="backspace")
    if row > 0:
        previous = (row - 1, len(buffer.document.line_at(row - 1)))
        return buffer.delete_range(previous, (row, 0), label="backspace")
    return None


def insert_newline(
    context: ModeContext, invocation: Invocation
) -> Optional[EditTransaction]:
    del invocation
    return context.buffer.insert_text("\n")


def insert_tab(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    del invocation
    return context.buffer.insert_text("\t")


def replace_backspace(context: ModeContext, invocation: Invocation) -> None:
    del invocation
    if context.modes is None:
        return None
    handler = cast(ReplaceMode, context.modes.handler_for(EditorMode.REPLACE))
    handler.backspace()
    return None


__all__ = [
    "delete_char",
    "delete_char_before",
    "delete_to_line_end",
    "insert_backspace",
    "insert_newline",
    "insert_tab",
    "join_lines",
    "put_after",
    "put_before",
    "replace_backspace",
    "replace_char",
    "substitute_lines",
]

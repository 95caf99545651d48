"""Operators (``d``, ``c``, ``y``) and the ranges they act on."""

from __future__ import annotations

from typing import Optional

from vimdoc_engine.buffer import EditTransaction, clamp_position
from vimdoc_engine.modes.base_mode import Invocation, ModeContext, TextRange

from .motions import MOTIONS, MotionSpec

_WORD_MOTIONS = {"word_forward": "word_end", "big_word_forward": "big_word_end"}


def spec_for_count(spec: MotionSpec, explicit_count: bool) -> MotionSpec:
    """``G`` with a count jumps to that line instead of the last one."""

    if spec.name == "document_end" and explicit_count:
        return MOTIONS["goto_line"]
    return spec


def line_range(first: int, last: int) -> TextRange:
    return TextRange((first, 0), (last, 0), linewise=True)


def motion_range(
    context: ModeContext,
    spec: MotionSpec,
    count: int,
    argument: Optional[str] = None,
    *,
    explicit_count: bool = False,
    change: bool = False,
) -> Optional[TextRange]:
    """Range covered by moving from the cursor with ``spec``.

    Returns ``None`` when the motion fails or covers nothing.
    """

    lines = context.buffer.document.lines
    start = context.buffer.cursor.position
    spec = spec_for_count(spec, explicit_count)

    if change and spec.name in _WORD_MOTIONS:
        row, col = start
        if col < len(lines[row]) and not lines[row][col].isspace():
            # cw on a word changes to its end, not to the next word.
            spec = MOTIONS[_WORD_MOTIONS[spec.name]]

    target = spec.resolve(lines, start, count, argument, past_end=True)
    if target is None:
        return None
    target = clamp_position(lines, target)

    if spec.linewise:
        first, last = sorted((start[0], target[0]))
        return line_range(first, last)

    if spec.name in _WORD_MOTIONS and target[0] > start[0]:
        if not lines[target[0]][: target[1]].strip():
            # A word motion that stops at the start of a later line ends the
            # range at the end of the previous line.
            target = (target[0] - 1, len(lines[target[0] - 1]))

    begin, end = sorted((start, target))
    if spec.inclusive:
        end = (end[0], min(end[1] + 1, len(lines[end[0]])))
    if begin == end:
        return None
    return TextRange(begin, end)


def selection_range(context: ModeContext) -> TextRange:
    """Inclusive Visual selection turned into an exclusive range."""

    lines = context.buffer.document.lines
    begin, end = context.buffer.cursor.primary.ordered()
    row, col = end
    if col < len(lines[row]):
        end = (row, col + 1)
    elif row + 1 < len(lines):
        end = (row + 1, 0)
    return TextRange(begin, end)


def _range_text(context: ModeContext, rng: TextRange) -> str:
    if rng.linewise:
        return context.buffer.lines_text(rng.start[0], rng.end[0])
    return context.buffer.get_text_range(rng.start, rng.end)


def delete(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    rng = invocation.range
    if rng is None:
        return None
    buffer = context.buffer
    context.registers.store(_range_text(context, rng), linewise=rng.linewise)
    if rng.linewise:
        return buffer.delete_lines(
            rng.start[0], rng.end[0], label="delete", first_non_blank=True
        )
    return buffer.delete_range(rng.start, rng.end, label="delete")


def change(context: ModeContext, invocation: Invocation) -> Optional[EditTransaction]:
    rng = invocation.range
    if rng is None:
        return None
    buffer = context.buffer
    context.registers.store(_range_text(context, rng), linewise=rng.linewise)
    if rng.linewise:
        first, last = rng.start[0], rng.end[0]
        end = (last, len(buffer.document.line_at(last)))
        return buffer.replace_range((first, 0), end, "", label="change")
    return buffer.delete_range(rng.start, rng.end, label="change")


def yank(context: ModeContext, invocation: Invocation) -> None:
    rng = invocation.range
    if rng is None:
        return None
    text = _range_text(context, rng)
    context.registers.store(text, linewise=rng.linewise, yank=True)
    context.bus.emit("register.yank", {"text": text, "linewise": rng.linewise})
    if not rng.linewise:
        context.buffer.cursor.set_position(rng.start)
    elif context.buffer.cursor.position[0] > rng.start[0]:
        context.buffer.cursor.set_position((rng.start[0], 0))
    return None


__all__ = [
    "change",
    "delete",
    "line_range",
    "motion_range",
    "selection_range",
    "spec_for_count",
    "yank",
]

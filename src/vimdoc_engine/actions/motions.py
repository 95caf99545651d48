"""Cursor motions.

A motion is a pure function of the document lines and a start position
that returns the destination, or ``None`` when the motion cannot be made
(``f`` with no match). Motions never raise for out-of-range input; callers
clamp the result. The same targets drive plain cursor movement, Visual
selection extension and the ranges handed to operators.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from vimdoc_engine.buffer.validation import Position, clamp_position

MotionTarget = Callable[..., Optional[Position]]

WORD_CHARS = re.compile(r"\w")

# Goal column used after ``$`` so vertical moves stick to the line end.
LINE_END_GOAL = sys.maxsize


@dataclass(frozen=True, slots=True)
class MotionSpec:
    """Named motion plus the flags operators need to build a range."""

    name: str
    target: MotionTarget
    inclusive: bool = False
    linewise: bool = False
    vertical: bool = False
    needs_argument: bool = False

    def resolve(
        self,
        lines: Sequence[str],
        position: Position,
        count: int = 1,
        argument: Optional[str] = None,
        *,
        past_end: bool = False,
    ) -> Optional[Position]:
        return self.target(
            lines, position, max(1, count), argument, past_end=past_end
        )


def _char_class(lines: Sequence[str], row: int, col: int, big: bool) -> int:
    line = lines[row]
    if col >= len(line) or line[col].isspace():
        return 0
    if big or WORD_CHARS.match(line[col]):
        return 1
    return 2


def _step_forward(lines: Sequence[str], pos: Position) -> Optional[Position]:
    row, col = pos
    if col < len(lines[row]):
        return (row, col + 1)
    if row + 1 < len(lines):
        return (row + 1, 0)
    return None


def _step_backward(lines: Sequence[str], pos: Position) -> Optional[Position]:
    row, col = pos
    if col > 0:
        return (row, col - 1)
    if row > 0:
        return (row - 1, len(lines[row - 1]))
    return None


def _is_empty_line_start(lines: Sequence[str], pos: Position) -> bool:
    return pos[1] == 0 and not lines[pos[0]]


def _first_non_blank(lines: Sequence[str], row: int) -> Position:
    line = lines[row]
    stripped = len(line) - len(line.lstrip())
    return (row, min(stripped, max(0, len(line) - 1)) if line.strip() else 0)


def char_left(lines, pos, count, argument=None, *, past_end=False):
    row, col = pos
    return (row, max(0, col - count))


def char_right(lines, pos, count, argument=None, *, past_end=False):
    return clamp_position(lines, (pos[0], pos[1] + count), past_end=past_end)


def line_up(lines, pos, count, argument=None, *, past_end=False):
    return clamp_position(lines, (pos[0] - count, pos[1]), past_end=past_end)


def line_down(lines, pos, count, argument=None, *, past_end=False):
    return clamp_position(lines, (pos[0] + count, pos[1]), past_end=past_end)


def line_start(lines, pos, count, argument=None, *, past_end=False):
    return (pos[0], 0)


def first_non_blank(lines, pos, count, argument=None, *, past_end=False):
    return _first_non_blank(lines, pos[0])


def line_end(lines, pos, count, argument=None, *, past_end=False):
    row = min(pos[0] + count - 1, len(lines) - 1)
    return clamp_position(lines, (row, len(lines[row])), past_end=past_end)


def document_start(lines, pos, count, argument=None, *, past_end=False):
    # ``gg`` without a count lands on line 1; ``5gg`` on line 5.
    return _first_non_blank(lines, min(count, len(lines)) - 1)


def document_end(lines, pos, count, argument=None, *, past_end=False):
    return _first_non_blank(lines, len(lines) - 1)


def goto_line(lines, pos, count, argument=None, *, past_end=False):
    return _first_non_blank(lines, min(count, len(lines)) - 1)


def _word_forward(lines: Sequence[str], pos: Position, big: bool) -> Position:
    start = pos
    cls = _char_class(lines, *pos, big)
    current: Optional[Position] = pos
    if cls:
        while current is not None and _char_class(lines, *current, big) == cls:
            current = _step_forward(lines, current)
    while current is not None and _char_class(lines, *current, big) == 0:
        if current != start and _is_empty_line_start(lines, current):
            return current
        current = _step_forward(lines, current)
    if current is None:
        return (len(lines) - 1, len(lines[-1]))
    return current


def _word_backward(lines: Sequence[str], pos: Position, big: bool) -> Position:
    current = _step_backward(lines, pos)
    if current is None:
        return (0, 0)
    while _char_class(lines, *current, big) == 0:
        if _is_empty_line_start(lines, current):
            return current
        previous = _step_backward(lines, current)
        if previous is None:
            return current
        current = previous
    cls = _char_class(lines, *current, big)
    while True:
        previous = _step_backward(lines, current)
        if previous is None or _char_class(lines, *previous, big) != cls:
            return current
        current = previous


def _word_end(lines: Sequence[str], pos: Position, big: bool) -> Position:
    current = _step_forward(lines, pos)
    if current is None:
        return pos
    while _char_class(lines, *current, big) == 0:
        following = _step_forward(lines, current)
        if following is None:
            return current
        current = following
    cls = _char_class(lines, *current, big)
    while True:
        following = _step_forward(lines, current)
        if following is None or _char_class(lines, *following, big) != cls:
            return current
        current = following


def _repeat(step: Callable[[Position], Position], pos: Position, count: int) -> Position:
    for _ in range(count):
        pos = step(pos)
    return pos


def word_forward(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_forward(lines, p, False), pos, count)


def big_word_forward(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_forward(lines, p, True), pos, count)


def word_backward(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_backward(lines, p, False), pos, count)


def big_word_backward(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_backward(lines, p, True), pos, count)


def word_end(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_end(lines, p, False), pos, count)


def big_word_end(lines, pos, count, argument=None, *, past_end=False):
    return _repeat(lambda p: _word_end(lines, p, True), pos, count)


def _find_in_line(
    lines: Sequence[str], pos: Position, count: int, char: Optional[str], forward: bool
) -> Optional[int]:
    if not char:
        return None
    row, col = pos
    line = lines[row]
    found = col
    for _ in range(count):
        if forward:
            found = line.find(char, found + 1)
        elif found > 0:
            found = line.rfind(char, 0, found)
        else:
            return None
        if found < 0:
            return None
    return found


def find_char_forward(lines, pos, count, argument=None, *, past_end=False):
    col = _find_in_line(lines, pos, count, argument, True)
    return None if col is None else (pos[0], col)


def find_char_backward(lines, pos, count, argument=None, *, past_end=False):
    col = _find_in_line(lines, pos, count, argument, False)
    return None if col is None else (pos[0], col)


def till_char_forward(lines, pos, count, argument=None, *, past_end=False):
    col = _find_in_line(lines, (pos[0], pos[1] + 1), count, argument, True)
    return None if col is None else (pos[0], col - 1)


def till_char_backward(lines, pos, count, argument=None, *, past_end=False):
    if pos[1] == 0:
        return None
    col = _find_in_line(lines, (pos[0], pos[1] - 1), count, argument, False)
    return None if col is None else (pos[0], col + 1)


MOTIONS: Dict[str, MotionSpec] = {
    spec.name: spec
    for spec in (
        MotionSpec("char_left", char_left),
        MotionSpec("char_right", char_right),
        MotionSpec("line_up", line_up, linewise=True, vertical=True),
        MotionSpec("line_down", line_down, linewise=True, vertical=True),
        MotionSpec("word_forward", word_forward),
        MotionSpec("big_word_forward", big_word_forward),
        MotionSpec("word_backward", word_backward),
        MotionSpec("big_word_backward", big_word_backward),
        MotionSpec("word_end", word_end, inclusive=True),
        MotionSpec("big_word_end", big_word_end, inclusive=True),
        MotionSpec("line_start", line_start),
        MotionSpec("first_non_blank", first_non_blank),
        MotionSpec("line_end", line_end, inclusive=True),
        MotionSpec("document_start", document_start, linewise=True),
        MotionSpec("document_end", document_end, linewise=True),
        MotionSpec("goto_line", goto_line, linewise=True),
        MotionSpec(
            "find_char_forward", find_char_forward, inclusive=True, needs_argument=True
        ),
        MotionSpec("find_char_backward", find_char_backward, needs_argument=True),
        MotionSpec(
            "till_char_forward", till_char_forward, inclusive=True, needs_argument=True
        ),
        MotionSpec("till_char_backward", till_char_backward, needs_argument=True),
    )
}


def get_motion(name: str) -> MotionSpec:
    try:
        return MOTIONS[name]
    except KeyError as exc:
        raise KeyError(f"Unknown motion '{name}'") from exc


__all__ = ["MotionSpec", "MOTIONS", "LINE_END_GOAL", "get_motion"]

"""Line-based text storage for engine buffers."""

from __future__ import annotations

from typing import List, Sequence

from .validation import OutOfBounds, Position, ensure_position


def split_lines(text: str) -> List[str]:
    """Split on any newline flavour, keeping a trailing empty line."""

    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


class TextBuffer:
    """Mutable list-of-lines document that never drops below one line.

    Every mutation computes the complete replacement line list before
    swapping it in, so a failed edit leaves the document untouched. The
    ``version`` counter lets cursor state notice that it has to re-clamp.
    """

    def __init__(self, text: str = "") -> None:
        self._lines: List[str] = split_lines(text)
        self.version = 0

    @property
    def lines(self) -> Sequence[str]:
        return tuple(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, index: int) -> str:
        if index < 0 or index >= len(self._lines):
            raise OutOfBounds(f"Line {index} out of range")
        return self._lines[index]

    def insert(self, position: Position, text: str) -> Position:
        row, col = ensure_position(self._lines, position)
        line = self._lines[row]
        pieces = split_lines(text)
        pieces[0] = line[:col] + pieces[0]
        new_col = len(pieces[-1])
        pieces[-1] = pieces[-1] + line[col:]
        self._swap(row, row + 1, pieces)
        return (row + len(pieces) - 1, new_col)

    def delete(self, start: Position, end: Position) -> str:
        start = ensure_position(self._lines, start)
        end = ensure_position(self._lines, end)
        if end < start:
            start, end = end, start
        removed = self.text_range(start, end)
        if start == end:
            return removed
        (s_row, s_col), (e_row, e_col) = start, end
        merged = self._lines[s_row][:s_col] + self._lines[e_row][e_col:]
        self._swap(s_row, e_row + 1, [merged])
        return removed

    def text_range(self, start: Position, end: Position) -> str:
        start = ensure_position(self._lines, start)
        end = ensure_position(self._lines, end)
        if end < start:
            start, end = end, start
        (s_row, s_col), (e_row, e_col) = start, end
        if s_row == e_row:
            return self._lines[s_row][s_col:e_col]
        parts = [self._lines[s_row][s_col:]]
        parts.extend(self._lines[s_row + 1 : e_row])
        parts.append(self._lines[e_row][:e_col])
        return "\n".join(parts)

    def restore(self, text: str) -> None:
        """Replace the whole document, as undo and redo do."""

        self._swap(0, len(self._lines), split_lines(text))

    def offset_of(self, position: Position) -> int:
        row, col = ensure_position(self._lines, position)
        return sum(len(line) + 1 for line in self._lines[:row]) + col

    def position_at(self, offset: int) -> Position:
        running = 0
        for row, line in enumerate(self._lines):
            if offset <= running + len(line):
                return (row, max(0, offset - running))
            running += len(line) + 1
        return (len(self._lines) - 1, len(self._lines[-1]))

    def end_position(self) -> Position:
        return (len(self._lines) - 1, len(self._lines[-1]))

    def _swap(self, start: int, end: int, new_lines: List[str]) -> None:
        lines = list(self._lines)
        lines[start:end] = new_lines
        if not lines:
            lines = [""]
        self._lines = lines
        self.version += 1


__all__ = ["TextBuffer", "split_lines"]

"""Cursor and selection state anchored into a TextBuffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from .document import TextBuffer
from .validation import Position, clamp_position

if TYPE_CHECKING:
    from vimdoc_engine.actions.motions import MotionSpec


@dataclass(slots=True)
class Selection:
    """Anchor/head pair; ``anchor == head`` is a plain cursor."""

    anchor: Position
    head: Position

    @property
    def is_point(self) -> bool:
        return self.anchor == self.head

    def ordered(self) -> Tuple[Position, Position]:
        if self.anchor <= self.head:
            return self.anchor, self.head
        return self.head, self.anchor


class CursorModel:
    """Primary cursor plus optional secondary selections.

    Stored positions are re-clamped lazily: every read first compares the
    document version with the one seen last, so no caller can observe a
    position that points past the end of the current document.
    """

    def __init__(self, document: TextBuffer) -> None:
        self.document = document
        self._selections: List[Selection] = [Selection((0, 0), (0, 0))]
        self._seen_version = document.version
        self._goal_col: Optional[int] = None

    @property
    def primary(self) -> Selection:
        self._revalidate()
        return self._selections[0]

    @property
    def position(self) -> Position:
        return self.primary.head

    @property
    def selections(self) -> Tuple[Selection, ...]:
        self._revalidate()
        return tuple(Selection(s.anchor, s.head) for s in self._selections)

    def set_position(self, position: Position, *, past_end: bool = True) -> Position:
        self._revalidate()
        target = clamp_position(self.document.lines, position, past_end=past_end)
        self._selections[0] = Selection(target, target)
        self._goal_col = None
        return target

    def move_by(
        self,
        motion: Union[str, "MotionSpec"],
        count: int = 1,
        argument: Optional[str] = None,
        *,
        past_end: bool = False,
    ) -> Position:
        target = self._resolve(motion, count, argument, past_end)
        self._selections[0] = Selection(target, target)
        return target

    def extend_selection(
        self,
        motion: Union[str, "MotionSpec"],
        count: int = 1,
        argument: Optional[str] = None,
        *,
        past_end: bool = False,
    ) -> Position:
        anchor = self.primary.anchor
        target = self._resolve(motion, count, argument, past_end)
        self._selections[0] = Selection(anchor, target)
        return target

    def extend_to(self, position: Position, *, past_end: bool = False) -> Position:
        anchor = self.primary.anchor
        target = clamp_position(self.document.lines, position, past_end=past_end)
        self._selections[0] = Selection(anchor, target)
        self._goal_col = None
        return target

    def begin_selection(self) -> Selection:
        head = self.position
        self._selections[0] = Selection(head, head)
        return self._selections[0]

    def collapse_to_point(self) -> Position:
        head = self.position
        self._selections[0] = Selection(head, head)
        return head

    def swap_anchor(self) -> Selection:
        current = self.primary
        self._selections[0] = Selection(current.head, current.anchor)
        self._goal_col = None
        return self._selections[0]

    def add_selection(self, anchor: Position, head: Position) -> Selection:
        self._revalidate()
        lines = self.document.lines
        selection = Selection(clamp_position(lines, anchor), clamp_position(lines, head))
        self._selections.append(selection)
        return selection

    def clear_secondary(self) -> None:
        del self._selections[1:]

    def settle(self, *, past_end: bool) -> Position:
        """Pull the primary head back onto the line, keeping the anchor."""

        current = self.primary
        head = clamp_position(self.document.lines, current.head, past_end=past_end)
        self._selections[0] = Selection(current.anchor, head)
        return head

    def renormalize(self) -> None:
        lines = self.document.lines
        self._selections = [
            Selection(clamp_position(lines, s.anchor), clamp_position(lines, s.head))
            for s in self._selections
        ]
        self._seen_version = self.document.version

    def _revalidate(self) -> None:
        if self._seen_version != self.document.version:
            self.renormalize()

    def _resolve(
        self,
        motion: Union[str, "MotionSpec"],
        count: int,
        argument: Optional[str],
        past_end: bool,
    ) -> Position:
        from vimdoc_engine.actions.motions import LINE_END_GOAL, get_motion

        spec = get_motion(motion) if isinstance(motion, str) else motion
        lines = self.document.lines
        row, col = self.position
        start = (row, col)
        if spec.vertical and self._goal_col is not None:
            start = (row, self._goal_col)
        target = spec.resolve(lines, start, count, argument, past_end=past_end)
        if target is None:
            return (row, col)
        target = clamp_position(lines, target, past_end=past_end)
        if spec.vertical:
            if self._goal_col is None:
                self._goal_col = col
        elif spec.name == "line_end":
            self._goal_col = LINE_END_GOAL
        else:
            self._goal_col = None
        return target


__all__ = ["CursorModel", "Selection"]

"""Forward/backward pattern search over a TextBuffer with one wrap-around."""

from __future__ import annotations

import re
from typing import Literal, Optional, Pattern, Union

from vimdoc_engine.buffer import NOT_FOUND, Position, Sentinel, TextBuffer
from vimdoc_engine.runtime import telemetry

Direction = Literal["forward", "backward"]


class SearchEngine:
    """Regex search that remembers the last pattern and direction for ``n``/``N``.

    Patterns that do not compile as regular expressions are searched for
    literally.
    """

    def __init__(self, document: TextBuffer, *, ignore_case: bool = False) -> None:
        self.document = document
        self.ignore_case = ignore_case
        self.last_pattern: Optional[str] = None
        self.last_direction: Direction = "forward"

    def find(
        self,
        pattern: str,
        from_position: Position,
        direction: Direction = "forward",
    ) -> Union[Position, Sentinel]:
        if not pattern:
            if self.last_pattern is None:
                return NOT_FOUND
            pattern = self.last_pattern
        self.last_pattern = pattern
        self.last_direction = direction
        return self._scan(pattern, from_position, direction)

    def repeat(
        self, from_position: Position, *, reverse: bool = False
    ) -> Union[Position, Sentinel]:
        if self.last_pattern is None:
            return NOT_FOUND
        direction = self.last_direction
        if reverse:
            direction = "backward" if direction == "forward" else "forward"
        return self._scan(self.last_pattern, from_position, direction)

    def _compile(self, pattern: str) -> Pattern[str]:
        flags = re.MULTILINE | (re.IGNORECASE if self.ignore_case else 0)
        try:
            return re.compile(pattern, flags)
        except re.error:
            return re.compile(re.escape(pattern), flags)

    def _scan(
        self, pattern: str, from_position: Position, direction: Direction
    ) -> Union[Position, Sentinel]:
        text = self.document.text
        origin = self.document.offset_of(from_position)
        with telemetry.span(
            "search::scan",
            component="search",
            metadata={"pattern": pattern, "direction": direction},
        ) as handle:
            starts = [m.start() for m in self._compile(pattern).finditer(text)]
            if direction == "forward":
                after = [s for s in starts if s > origin]
                found = after[0] if after else (starts[0] if starts else None)
            else:
                before = [s for s in starts if s < origin]
                found = before[-1] if before else (starts[-1] if starts else None)
            if found is None:
                handle.add_metadata("status", "not_found")
                return NOT_FOUND
            handle.add_metadata("status", "match")
            return self.document.position_at(found)


__all__ = ["SearchEngine", "Direction"]

"""Literal substring search over a ``TextBuffer``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from edit_engine.buffer import Position, TextBuffer
from edit_engine.runtime import telemetry


@dataclass(frozen=True, slots=True)
class Match:
    line: int
    start: int
    end: int

    @property
    def position(self) -> Position:
        return Position(self.line, self.start)

    @property
    def end_position(self) -> Position:
        return Position(self.line, self.end)


class SearchIndex:
    """Ordered, non-overlapping matches of one case-sensitive term.

    ``index`` points at the current match and cycles through the list;
    it is ``-1`` whenever there are no matches. The list is recomputed in
    full on every ``search``/``refresh``.
    """

    def __init__(self, buffer: TextBuffer) -> None:
        self.buffer = buffer
        self._term = ""
        self._matches: List[Match] = []
        self._index = -1

    @property
    def term(self) -> str:
        return self._term

    @property
    def matches(self) -> Tuple[Match, ...]:
        return tuple(self._matches)

    @property
    def index(self) -> int:
        return self._index

    @property
    def count(self) -> int:
        return len(self._matches)

    @property
    def is_active(self) -> bool:
        return bool(self._term)

    @property
    def current(self) -> Optional[Match]:
        if self._index < 0:
            return None
        return self._matches[self._index]

    def search(self, term: str) -> Tuple[Match, ...]:
        self._term = term
        self._matches = self._scan(term)
        self._index = 0 if self._matches else -1
        return self.matches

    def refresh(self) -> Tuple[Match, ...]:
        """Re-run the active term after the buffer changed."""

        previous = self._index
        self._matches = self._scan(self._term)
        if not self._matches:
            self._index = -1
        else:
            self._index = min(max(previous, 0), len(self._matches) - 1)
        return self.matches

    def clear(self) -> None:
        self._term = ""
        self._matches = []
        self._index = -1

    def next(self) -> Optional[Match]:
        return self._step(1)

    def prev(self) -> Optional[Match]:
        return self._step(-1)

    def matches_on_line(self, line: int) -> Tuple[Match, ...]:
        return tuple(match for match in self._matches if match.line == line)

    def _step(self, direction: int) -> Optional[Match]:
        count = len(self._matches)
        if count == 0:
            return None
        self._index = (self._index + direction + count) % count
        return self._matches[self._index]

    def _scan(self, term: str) -> List[Match]:
        if not term:
            return []
        with telemetry.span(
            "search::scan",
            logger_name="edit_engine.search",
            component="search",
            metadata={"term_length": len(term)},
        ) as handle:
            found: List[Match] = []
            for line_index, line in enumerate(self.buffer.lines):
                start = line.find(term)
                while start != -1:
                    found.append(Match(line_index, start, start + len(term)))
                    start = line.find(term, start + len(term))
            handle.add_metadata("matches", len(found))
            return found


__all__ = ["Match", "SearchIndex"]

"""Cursor and selection state over a ``TextBuffer``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .document import TextBuffer
from .errors import NoSelection
from .position import Direction, Position, Range, Selection, ensure_direction
from .validation import ensure_position


@dataclass(frozen=True, slots=True)
class SelectionState:
    cursor: Position
    selection: Optional[Selection]


class SelectionModel:
    """Owns the cursor and an optional anchor/active selection.

    Positions are validated against the buffer on every write; nothing is
    clamped. A selection whose endpoints coincide is stored as ``None``.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        *,
        cursor: Optional[Position] = None,
    ) -> None:
        self.buffer = buffer
        self._cursor = ensure_position(buffer, cursor or Position.origin())
        self._selection: Optional[Selection] = None

    @property
    def cursor(self) -> Position:
        return self._cursor

    @property
    def selection(self) -> Optional[Selection]:
        return self._selection

    def update_cursor(self, pos: Position) -> None:
        self._cursor = ensure_position(self.buffer, pos)

    def set_selection(self, anchor: Position, active: Position) -> None:
        ensure_position(self.buffer, anchor)
        ensure_position(self.buffer, active)
        selection = Selection(anchor, active)
        self._selection = None if selection.is_empty else selection

    def clear_selection(self) -> None:
        self._selection = None

    def has_selection(self) -> bool:
        return self._selection is not None and not self._selection.is_empty

    def normalize(self) -> Range:
        if not self.has_selection():
            raise NoSelection()
        assert self._selection is not None
        return self._selection.normalized()

    def selected_text(self) -> str:
        if not self.has_selection():
            return ""
        span = self.normalize()
        return self.buffer.slice_text(span.start, span.end)

    def move_cursor_to_selection_start(self) -> None:
        if self.has_selection():
            self.update_cursor(self.normalize().start)
            self.clear_selection()

    def move_cursor_to_selection_end(self) -> None:
        if self.has_selection():
            self.update_cursor(self.normalize().end)
            self.clear_selection()

    def move_cursor(self, direction: Direction) -> None:
        self._cursor = step(self.buffer, self._cursor, direction)

    def extend(self, direction: Direction) -> None:
        if self._selection is None:
            anchor = active = self._cursor
        else:
            anchor, active = self._selection.anchor, self._selection.active

        target = step(self.buffer, active, direction)
        if target == anchor:
            self._selection = None
            self._cursor = anchor
            return
        self._selection = Selection(anchor, target)
        self._cursor = target

    def select_all(self) -> None:
        self.set_selection(Position.origin(), self.buffer.end_position())
        self._cursor = self.buffer.end_position()

    def reset(self) -> None:
        self._selection = None
        self._cursor = Position.origin()

    def snapshot(self) -> SelectionState:
        return SelectionState(cursor=self._cursor, selection=self._selection)

    def restore(self, state: SelectionState) -> None:
        self.update_cursor(state.cursor)
        if state.selection is None:
            self.clear_selection()
        else:
            self.set_selection(state.selection.anchor, state.selection.active)


def step(buffer: TextBuffer, pos: Position, direction: Direction) -> Position:
    """Move ``pos`` one unit; vertical moves clamp to the target line length."""

    direction = ensure_direction(direction)
    ensure_position(buffer, pos)
    line, ch = pos.line, pos.ch
    if direction == "left":
        if ch > 0:
            return Position(line, ch - 1)
        if line > 0:
            return Position(line - 1, buffer.line_length(line - 1))
        return pos
    if direction == "right":
        if ch < buffer.line_length(line):
            return Position(line, ch + 1)
        if line < buffer.line_count - 1:
            return Position(line + 1, 0)
        return pos
    if direction == "up":
        if line == 0:
            return pos
        return Position(line - 1, min(ch, buffer.line_length(line - 1)))
    if line >= buffer.line_count - 1:
        return pos
    return Position(line + 1, min(ch, buffer.line_length(line + 1)))


__all__ = ["SelectionModel", "SelectionState", "step"]

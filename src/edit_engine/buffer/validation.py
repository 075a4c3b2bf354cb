"""Validation helpers shared across buffer services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import OutOfRange
from .position import Position

if TYPE_CHECKING:
    from .document import TextBuffer


def ensure_line(buffer: "TextBuffer", line: int) -> int:
    if line < 0 or line >= buffer.line_count:
        raise OutOfRange(f"Line {line} out of range", line=line)
    return line


def ensure_position(buffer: "TextBuffer", position: Position) -> Position:
    ensure_line(buffer, position.line)
    if position.ch < 0 or position.ch > buffer.line_length(position.line):
        raise OutOfRange("Column out of range", position=position)
    return position


def ensure_ordered(
    buffer: "TextBuffer", start: Position, end: Position
) -> tuple[Position, Position]:
    ensure_position(buffer, start)
    ensure_position(buffer, end)
    if end < start:
        raise OutOfRange(f"Range end {end} precedes start {start}", position=end)
    return start, end

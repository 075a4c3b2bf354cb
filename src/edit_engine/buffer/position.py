"""Immutable coordinate types shared by the buffer, selection and commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

Direction = Literal["left", "right", "up", "down"]

DIRECTIONS: tuple[str, ...] = get_args(Direction)


def ensure_direction(direction: str) -> Direction:
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction '{direction}'")
    return direction  # type: ignore[return-value]


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """A ``(line, ch)`` document coordinate ordered in document order."""

    line: int
    ch: int

    def shifted(self, delta: int) -> "Position":
        return Position(self.line, self.ch + delta)

    def as_tuple(self) -> tuple[int, int]:
        return (self.line, self.ch)

    @classmethod
    def origin(cls) -> "Position":
        return cls(0, 0)


@dataclass(frozen=True, slots=True)
class Range:
    """Normalized span with ``start <= end``."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end precedes start: {self!r}")

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def is_multiline(self) -> bool:
        return self.start.line != self.end.line


@dataclass(frozen=True, slots=True)
class Selection:
    """Anchor/active pair; ``active`` is the end that moves on extension."""

    anchor: Position
    active: Position

    @property
    def is_empty(self) -> bool:
        return self.anchor == self.active

    @property
    def is_reversed(self) -> bool:
        return self.active < self.anchor

    def normalized(self) -> Range:
        if self.is_reversed:
            return Range(self.active, self.anchor)
        return Range(self.anchor, self.active)


__all__ = [
    "DIRECTIONS",
    "Direction",
    "Position",
    "Range",
    "Selection",
    "ensure_direction",
]

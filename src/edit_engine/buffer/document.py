"""Line-oriented text storage for edit_engine documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .errors import OutOfRange
from .position import Position
from .validation import ensure_line, ensure_ordered, ensure_position

NEWLINE = "\n"
"""Unit reported by ``delete_backward`` when two lines were joined."""


@dataclass(frozen=True, slots=True)
class Deletion:
    removed: str
    cursor: Position

    @property
    def joined_lines(self) -> bool:
        return self.removed == NEWLINE


@dataclass(slots=True)
class TextBuffer:
    """Mutable list-of-lines document.

    The sequence is never empty: an empty document is a single empty line.
    Every mutation bumps ``version``. The representation can be swapped for a
    piece table or rope without changing the public operations below.
    """

    _lines: List[str] = field(default_factory=lambda: [""])
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "TextBuffer":
        return cls(_lines=_split(text))

    @property
    def lines(self) -> Sequence[str]:
        """Return the current lines without exposing internal mutability."""

        return tuple(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, index: int) -> str:
        ensure_line(self, index)
        return self._lines[index]

    def line_length(self, index: int) -> int:
        return len(self.get_line(index))

    def end_position(self) -> Position:
        last = len(self._lines) - 1
        return Position(last, len(self._lines[last]))

    @property
    def char_count(self) -> int:
        return sum(len(line) for line in self._lines) + len(self._lines) - 1

    def get_text(self) -> str:
        return NEWLINE.join(self._lines)

    def set_text(self, text: str) -> None:
        self._lines = _split(text)
        self._touch()

    def insert_char(self, pos: Position, ch: str) -> Position:
        if NEWLINE in ch:
            return self.insert_text(pos, ch)
        ensure_position(self, pos)
        line = self._lines[pos.line]
        self._lines[pos.line] = line[: pos.ch] + ch + line[pos.ch :]
        self._touch()
        return pos.shifted(len(ch))

    def delete_backward(self, pos: Position) -> Optional[Deletion]:
        ensure_position(self, pos)
        if pos.ch > 0:
            line = self._lines[pos.line]
            removed = line[pos.ch - 1]
            self._lines[pos.line] = line[: pos.ch - 1] + line[pos.ch :]
            self._touch()
            return Deletion(removed=removed, cursor=pos.shifted(-1))
        if pos.line == 0:
            return None
        previous = self._lines[pos.line - 1]
        self._lines[pos.line - 1 : pos.line + 1] = [previous + self._lines[pos.line]]
        self._touch()
        return Deletion(removed=NEWLINE, cursor=Position(pos.line - 1, len(previous)))

    def insert_newline(self, pos: Position) -> Position:
        ensure_position(self, pos)
        line = self._lines[pos.line]
        self._lines[pos.line : pos.line + 1] = [line[: pos.ch], line[pos.ch :]]
        self._touch()
        return Position(pos.line + 1, 0)

    def insert_text(self, pos: Position, text: str) -> Position:
        ensure_position(self, pos)
        segments = text.split(NEWLINE)
        line = self._lines[pos.line]
        before, after = line[: pos.ch], line[pos.ch :]
        if len(segments) == 1:
            self._lines[pos.line] = before + text + after
            self._touch()
            return pos.shifted(len(text))

        replacement = [before + segments[0], *segments[1:-1], segments[-1] + after]
        self._lines[pos.line : pos.line + 1] = replacement
        self._touch()
        return Position(pos.line + len(segments) - 1, len(segments[-1]))

    def delete_range(self, start: Position, end: Position) -> Position:
        ensure_ordered(self, start, end)
        if start == end:
            return start
        head = self._lines[start.line][: start.ch]
        tail = self._lines[end.line][end.ch :]
        self._lines[start.line : end.line + 1] = [head + tail]
        self._touch()
        return start

    def slice_text(self, start: Position, end: Position) -> str:
        ensure_ordered(self, start, end)
        if start.line == end.line:
            return self._lines[start.line][start.ch : end.ch]
        parts = [self._lines[start.line][start.ch :]]
        parts.extend(self._lines[start.line + 1 : end.line])
        parts.append(self._lines[end.line][: end.ch])
        return NEWLINE.join(parts)

    def to_utf16(self, pos: Position) -> Position:
        """Same position with ``ch`` counted in UTF-16 code units."""

        ensure_position(self, pos)
        return Position(pos.line, to_utf16_ch(self._lines[pos.line], pos.ch))

    def from_utf16(self, pos: Position) -> Position:
        """Inverse of ``to_utf16``; offsets inside a surrogate pair are rejected."""

        line = self._lines[ensure_line(self, pos.line)]
        try:
            return Position(pos.line, from_utf16_ch(line, pos.ch))
        except ValueError as exc:
            raise OutOfRange(str(exc), position=pos) from None

    def _touch(self) -> None:
        self.version += 1


def to_utf16_ch(line: str, ch: int) -> int:
    """Code-point offset ``ch`` in ``line`` -> UTF-16 code-unit offset."""

    return ch + sum(1 for char in line[:ch] if ord(char) > 0xFFFF)


def from_utf16_ch(line: str, units: int) -> int:
    """UTF-16 code-unit offset in ``line`` -> code-point offset."""

    if units < 0:
        raise ValueError(f"negative offset {units}")
    seen = 0
    for index, char in enumerate(line):
        if seen == units:
            return index
        seen += 2 if ord(char) > 0xFFFF else 1
        if seen > units:
            raise ValueError(f"offset {units} splits a surrogate pair")
    if seen == units:
        return len(line)
    raise ValueError(f"offset {units} is past the end of the line")


def _split(text: str) -> List[str]:
    return text.split(NEWLINE)


__all__ = ["Deletion", "NEWLINE", "TextBuffer", "from_utf16_ch", "to_utf16_ch"]

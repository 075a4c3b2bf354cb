"""Plain-data edit commands and the records produced by executing them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from edit_engine.buffer import NoSelection, Position, Selection


class CommandKind(str, Enum):
    INSERT_CHAR = "insert_char"
    INSERT_NEWLINE = "insert_newline"
    DELETE_CHAR = "delete_char"
    DELETE_SELECTION = "delete_selection"
    INSERT_TEXT = "insert_text"


@dataclass(frozen=True, slots=True)
class Command:
    """One reversible mutation: a kind plus the parameters needed to replay it."""

    kind: CommandKind
    position: Optional[Position] = None
    text: str = ""
    selection: Optional[Selection] = None

    @property
    def label(self) -> str:
        return self.kind.value


@dataclass(frozen=True, slots=True)
class CommandRecord:
    """Executed command plus the after-state needed to invert it.

    ``removed`` holds the deleted unit (``DELETE_CHAR``), the deleted text
    (``DELETE_SELECTION``) or the text an ``INSERT_TEXT`` replaced.
    ``origin`` is where inserted content starts.
    """

    command: Command
    cursor_before: Position
    selection_before: Optional[Selection]
    after: Position
    origin: Optional[Position] = None
    removed: Optional[str] = None

    @property
    def kind(self) -> CommandKind:
        return self.command.kind


def insert_char(pos: Position, text: str) -> Command:
    return Command(CommandKind.INSERT_CHAR, position=pos, text=text)


def insert_newline(pos: Position) -> Command:
    return Command(CommandKind.INSERT_NEWLINE, position=pos)


def delete_char(pos: Position) -> Command:
    return Command(CommandKind.DELETE_CHAR, position=pos)


def delete_selection(selection: Optional[Selection]) -> Command:
    if selection is None or selection.is_empty:
        raise NoSelection("delete_selection requires a non-empty selection")
    return Command(CommandKind.DELETE_SELECTION, selection=selection)


def insert_text(text: str) -> Command:
    return Command(CommandKind.INSERT_TEXT, text=text)


__all__ = [
    "Command",
    "CommandKind",
    "CommandRecord",
    "delete_char",
    "delete_selection",
    "insert_char",
    "insert_newline",
    "insert_text",
]

"""Single dispatch point that executes and inverts edit commands."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from edit_engine.buffer import NEWLINE, NoSelection, Position, SelectionModel, TextBuffer

from .models import Command, CommandKind, CommandRecord

Applier = Callable[[TextBuffer, SelectionModel, Command], Optional[CommandRecord]]
Inverter = Callable[[TextBuffer, CommandRecord], None]


def apply_command(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    """Execute ``command`` once; ``None`` means it left the document untouched."""

    return _APPLIERS[command.kind](buffer, selection, command)


def invert_command(
    buffer: TextBuffer, selection: SelectionModel, record: CommandRecord
) -> None:
    """Undo ``record``, restoring text, cursor and selection exactly."""

    _INVERTERS[record.kind](buffer, record)
    selection.update_cursor(record.cursor_before)
    before = record.selection_before
    if before is None:
        selection.clear_selection()
    else:
        selection.set_selection(before.anchor, before.active)


def _settle(selection: SelectionModel, cursor: Position) -> None:
    selection.clear_selection()
    selection.update_cursor(cursor)


def _position(command: Command) -> Position:
    if command.position is None:
        raise ValueError(f"'{command.label}' command needs a position")
    return command.position


def _origin(record: CommandRecord) -> Position:
    if record.origin is None:
        raise ValueError(f"'{record.kind.value}' record has no origin")
    return record.origin


def _removed(record: CommandRecord) -> str:
    if record.removed is None:
        raise ValueError(f"'{record.kind.value}' record has no removed text")
    return record.removed


def _apply_insert_char(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    pos = _position(command)
    if not command.text:
        return None
    state = selection.snapshot()
    after = buffer.insert_char(pos, command.text)
    _settle(selection, after)
    return CommandRecord(
        command=command,
        cursor_before=state.cursor,
        selection_before=state.selection,
        after=after,
        origin=pos,
    )


def _apply_insert_newline(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    pos = _position(command)
    state = selection.snapshot()
    after = buffer.insert_newline(pos)
    _settle(selection, after)
    return CommandRecord(
        command=command,
        cursor_before=state.cursor,
        selection_before=state.selection,
        after=after,
        origin=pos,
    )


def _apply_delete_char(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    state = selection.snapshot()
    deletion = buffer.delete_backward(_position(command))
    if deletion is None:
        return None
    _settle(selection, deletion.cursor)
    return CommandRecord(
        command=command,
        cursor_before=state.cursor,
        selection_before=state.selection,
        after=deletion.cursor,
        removed=deletion.removed,
    )


def _apply_delete_selection(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    if command.selection is None or command.selection.is_empty:
        raise NoSelection(f"'{command.label}' requires a non-empty selection")
    state = selection.snapshot()
    span = command.selection.normalized()
    text = buffer.slice_text(span.start, span.end)
    after = buffer.delete_range(span.start, span.end)
    _settle(selection, after)
    return CommandRecord(
        command=command,
        cursor_before=state.cursor,
        selection_before=state.selection,
        after=after,
        origin=span.start,
        removed=text,
    )


def _apply_insert_text(
    buffer: TextBuffer, selection: SelectionModel, command: Command
) -> Optional[CommandRecord]:
    state = selection.snapshot()
    origin = state.cursor
    replaced = None
    if selection.has_selection():
        span = selection.normalize()
        replaced = buffer.slice_text(span.start, span.end)
        origin = buffer.delete_range(span.start, span.end)
    elif not command.text:
        return None
    after = buffer.insert_text(origin, command.text)
    _settle(selection, after)
    return CommandRecord(
        command=command,
        cursor_before=state.cursor,
        selection_before=state.selection,
        after=after,
        origin=origin,
        removed=replaced,
    )


def _invert_insert(buffer: TextBuffer, record: CommandRecord) -> None:
    buffer.delete_range(_origin(record), record.after)


def _invert_insert_newline(buffer: TextBuffer, record: CommandRecord) -> None:
    buffer.delete_backward(record.after)


def _invert_delete_char(buffer: TextBuffer, record: CommandRecord) -> None:
    removed = _removed(record)
    if removed == NEWLINE:
        buffer.insert_newline(record.after)
    else:
        buffer.insert_char(record.after, removed)


def _invert_delete_selection(buffer: TextBuffer, record: CommandRecord) -> None:
    buffer.insert_text(record.after, _removed(record))


def _invert_insert_text(buffer: TextBuffer, record: CommandRecord) -> None:
    origin = _origin(record)
    buffer.delete_range(origin, record.after)
    if record.removed is not None:
        buffer.insert_text(origin, record.removed)


_APPLIERS: Dict[CommandKind, Applier] = {
    CommandKind.INSERT_CHAR: _apply_insert_char,
    CommandKind.INSERT_NEWLINE: _apply_insert_newline,
    CommandKind.DELETE_CHAR: _apply_delete_char,
    CommandKind.DELETE_SELECTION: _apply_delete_selection,
    CommandKind.INSERT_TEXT: _apply_insert_text,
}

_INVERTERS: Dict[CommandKind, Inverter] = {
    CommandKind.INSERT_CHAR: _invert_insert,
    CommandKind.INSERT_NEWLINE: _invert_insert_newline,
    CommandKind.DELETE_CHAR: _invert_delete_char,
    CommandKind.DELETE_SELECTION: _invert_delete_selection,
    CommandKind.INSERT_TEXT: _invert_insert_text,
}


__all__ = ["apply_command", "invert_command"]

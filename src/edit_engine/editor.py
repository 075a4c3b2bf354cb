"""High-level editor facade combining buffer, selection, history and search."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from edit_engine import commands
from edit_engine.buffer import (
    Direction,
    DocumentSnapshot,
    Position,
    SelectionModel,
    TextBuffer,
)
from edit_engine.clipboard import Clipboard, LocalClipboard
from edit_engine.commands import Command, CommandRecord
from edit_engine.events import (
    BUFFER_CHANGED,
    DOCUMENT_LOADED,
    HISTORY_CHANGED,
    SEARCH_CHANGED,
    SELECTION_CHANGED,
    EventBus,
)
from edit_engine.history import HistoryManager
from edit_engine.runtime import telemetry
from edit_engine.runtime.clock import Clock
from edit_engine.runtime.config import EngineConfig
from edit_engine.search import Match, SearchIndex


@dataclass(frozen=True, slots=True)
class FileInfo:
    name: str
    size: int
    lines: int
    last_saved: Optional[float]
    unsaved_changes: bool


class Editor:
    """One open document: the unit hosts drive from key and clipboard events.

    Every mutation goes through ``HistoryManager``; composite actions (typing
    over a selection, cut, paste) are wrapped in explicit batches so they undo
    as a single step.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: Optional[str] = None,
        clock: Optional[Clock] = None,
        clipboard: Optional[Clipboard] = None,
        bus: Optional[EventBus] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.config = config or EngineConfig.from_env()
        self.buffer = TextBuffer.from_text(text)
        self.selection = SelectionModel(self.buffer)
        self.history = HistoryManager(
            self.buffer,
            self.selection,
            clock=clock,
            idle_ms=self.config.idle_batch_ms,
        )
        self.search = SearchIndex(self.buffer)
        self.clipboard: Clipboard = clipboard or LocalClipboard()
        self.bus = bus or EventBus()
        self.name = name or self.config.default_name
        self._saved_text = text
        self._last_saved: Optional[float] = None

    @property
    def cursor(self) -> Position:
        return self.selection.cursor

    @property
    def clock(self) -> Clock:
        return self.history.clock

    def get_text(self) -> str:
        return self.buffer.get_text()

    def snapshot(self) -> DocumentSnapshot:
        return DocumentSnapshot(
            text=self.buffer.get_text(),
            cursor=self.selection.cursor,
            selection=self.selection.selection,
            version=self.buffer.version,
            name=self.name,
        )

    # -- editing -----------------------------------------------------------

    def execute(self, command: Command) -> Optional[CommandRecord]:
        record = self.history.execute(command)
        if record is not None:
            self._after_edit()
        return record

    def type_text(self, text: str) -> Optional[CommandRecord]:
        """Insert typed characters, replacing the selection as one undo step."""

        if not self.selection.has_selection():
            return self.execute(commands.insert_char(self.cursor, text))
        with self.history.batch("type"):
            self._delete_selection()
            return self.execute(commands.insert_char(self.cursor, text))

    def insert_newline(self) -> Optional[CommandRecord]:
        if not self.selection.has_selection():
            return self.execute(commands.insert_newline(self.cursor))
        with self.history.batch("newline"):
            self._delete_selection()
            return self.execute(commands.insert_newline(self.cursor))

    def backspace(self) -> Optional[CommandRecord]:
        if self.selection.has_selection():
            return self._delete_selection()
        return self.execute(commands.delete_char(self.cursor))

    def insert_text(self, text: str) -> Optional[CommandRecord]:
        return self.execute(commands.insert_text(text))

    def _delete_selection(self) -> Optional[CommandRecord]:
        return self.execute(commands.delete_selection(self.selection.selection))

    # -- clipboard ---------------------------------------------------------

    def copy(self) -> str:
        text = self.selection.selected_text()
        if text:
            self.clipboard.write(text)
        return text

    @telemetry.traced("editor::cut", component="editor")
    def cut(self) -> str:
        text = self.selection.selected_text()
        if not text:
            return ""
        self.clipboard.write(text)
        with self.history.batch("cut"):
            self._delete_selection()
        return text

    @telemetry.traced("editor::paste", component="editor")
    def paste(self, text: Optional[str] = None) -> Optional[CommandRecord]:
        """Insert ``text`` (or the clipboard) over the selection as one step.

        An empty paste changes nothing and records no history.
        """

        content = self.clipboard.read() if text is None else text
        if not content:
            return None
        with self.history.batch("paste"):
            if self.selection.has_selection():
                self._delete_selection()
            return self.execute(commands.insert_text(content))

    # -- history -----------------------------------------------------------

    def undo(self) -> bool:
        changed = self.history.undo()
        if changed:
            self._after_edit()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        if changed:
            self._after_edit()
        return changed

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def tick(self) -> int:
        """Fire due idle timers when running on a polled clock."""

        return self.history.fire_overdue()

    # -- cursor and selection ----------------------------------------------

    def move(self, direction: Direction) -> None:
        """Arrow-key movement: collapse an active selection before moving."""

        if self.selection.has_selection():
            if direction == "left":
                self.selection.move_cursor_to_selection_start()
            elif direction == "right":
                self.selection.move_cursor_to_selection_end()
            else:
                self.selection.clear_selection()
                self.selection.move_cursor(direction)
        else:
            self.selection.move_cursor(direction)
        self._selection_changed()

    def extend(self, direction: Direction) -> None:
        self.selection.extend(direction)
        self._selection_changed()

    def select(self, anchor: Position, active: Position) -> None:
        self.selection.set_selection(anchor, active)
        self.selection.update_cursor(active)
        self._selection_changed()

    def select_all(self) -> None:
        self.selection.select_all()
        self._selection_changed()

    def place_cursor(self, pos: Position) -> None:
        self.selection.clear_selection()
        self.selection.update_cursor(pos)
        self._selection_changed()

    def clear_selection(self) -> None:
        self.selection.clear_selection()
        self._selection_changed()

    # -- search ------------------------------------------------------------

    def find(self, term: str) -> Optional[Match]:
        self.search.search(term)
        return self._reveal(self.search.current)

    def find_next(self) -> Optional[Match]:
        return self._reveal(self.search.next())

    def find_prev(self) -> Optional[Match]:
        return self._reveal(self.search.prev())

    def close_search(self) -> None:
        self.search.clear()
        self.bus.emit(SEARCH_CHANGED, self.search)

    def _reveal(self, match: Optional[Match]) -> Optional[Match]:
        if match is not None:
            self.selection.clear_selection()
            self.selection.update_cursor(match.position)
            self._selection_changed()
        self.bus.emit(SEARCH_CHANGED, self.search)
        return match

    # -- document lifecycle ------------------------------------------------

    def load_text(self, text: str, *, name: Optional[str] = None) -> None:
        """Replace the document: cursor to origin, no selection, empty history."""

        self.buffer.set_text(text)
        self.selection.reset()
        self.history.clear()
        if name is not None:
            self.name = name
        if self.search.is_active:
            self.search.refresh()
        self.mark_saved()
        telemetry.record_event(
            DOCUMENT_LOADED,
            data={"name": self.name, "lines": self.buffer.line_count},
            logger_name="edit_engine.editor",
        )
        self.bus.emit(DOCUMENT_LOADED, self.snapshot())
        self._after_edit()

    def new_document(self) -> None:
        self.load_text("", name=self.config.default_name)

    def restore(self, snapshot: DocumentSnapshot) -> None:
        self.load_text(snapshot.text, name=snapshot.name or self.name)
        self.selection.update_cursor(snapshot.cursor)
        if snapshot.selection is not None:
            self.selection.set_selection(
                snapshot.selection.anchor, snapshot.selection.active
            )
        self._selection_changed()

    # BufferSync

    def pull_document(self) -> DocumentSnapshot:
        return self.snapshot()

    def push_document(self, snapshot: DocumentSnapshot) -> None:
        self.restore(snapshot)

    def mark_saved(self, name: Optional[str] = None) -> None:
        if name is not None:
            self.name = name
        self._saved_text = self.buffer.get_text()
        self._last_saved = time.time()

    def has_unsaved_changes(self) -> bool:
        return self.buffer.get_text() != self._saved_text

    def file_info(self) -> FileInfo:
        return FileInfo(
            name=self.name,
            size=self.buffer.char_count,
            lines=self.buffer.line_count,
            last_saved=self._last_saved,
            unsaved_changes=self.has_unsaved_changes(),
        )

    # -- notifications -----------------------------------------------------

    def _after_edit(self) -> None:
        if self.search.is_active:
            self.search.refresh()
            self.bus.emit(SEARCH_CHANGED, self.search)
        self.bus.emit(BUFFER_CHANGED, self.buffer.version)
        self.bus.emit(HISTORY_CHANGED, self.history)
        self._selection_changed()

    def _selection_changed(self) -> None:
        self.bus.emit(
            SELECTION_CHANGED,
            {"cursor": self.selection.cursor, "selection": self.selection.selection},
        )


__all__ = ["Editor", "FileInfo"]

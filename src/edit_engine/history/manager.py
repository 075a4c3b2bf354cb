"""Batched undo/redo history over executed edit commands."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import ContextManager, Iterator, List, Optional

from edit_engine.buffer import EngineError, SelectionModel, SelectionState, TextBuffer
from edit_engine.commands import Command, CommandRecord, apply_command, invert_command
from edit_engine.runtime import telemetry
from edit_engine.runtime.clock import Clock, MonotonicClock, TimerHandle
from edit_engine.runtime.config import DEFAULT_IDLE_BATCH_MS

_LOGGER = "edit_engine.history"


@dataclass(slots=True)
class Batch:
    """Commands undone and redone as one step."""

    records: List[CommandRecord] = field(default_factory=list)
    label: str = "edit"
    closed: bool = False

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[CommandRecord]:
        return iter(self.records)


class HistoryManager:
    """Undo/redo stacks of batches with idle-timeout coalescing.

    ``add`` appends to the open batch and re-arms an idle timer on the
    injected clock; when the timer fires the batch is closed. Explicit
    ``begin_batch``/``end_batch`` pairs nest and suspend the idle timer so a
    composite action always lands in a single batch.
    """

    def __init__(
        self,
        buffer: TextBuffer,
        selection: SelectionModel,
        *,
        clock: Optional[Clock] = None,
        idle_ms: int = DEFAULT_IDLE_BATCH_MS,
    ) -> None:
        if idle_ms <= 0:
            raise ValueError("idle_ms must be positive")
        self.buffer = buffer
        self.selection = selection
        self.clock: Clock = clock or MonotonicClock()
        self.idle_ms = idle_ms
        self._undo: List[Batch] = []
        self._redo: List[Batch] = []
        self._open: Optional[Batch] = None
        self._depth = 0
        self._timer: Optional[TimerHandle] = None

    @property
    def open_batch(self) -> Optional[Batch]:
        return self._open

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    @property
    def in_explicit_batch(self) -> bool:
        return self._depth > 0

    def execute(self, command: Command) -> Optional[CommandRecord]:
        """Apply ``command`` and record it; no-op commands are not recorded."""

        record = apply_command(self.buffer, self.selection, command)
        if record is not None:
            self.add(record)
        return record

    def add(self, record: CommandRecord) -> None:
        self.fire_overdue()
        if self._open is None:
            self._open = Batch(label=record.command.label)
        self._open.records.append(record)
        self._redo.clear()
        if self._depth == 0:
            self._arm_timer()

    def begin_batch(self, label: str = "batch") -> None:
        if self._depth == 0:
            self.end_batch()
            self._open = Batch(label=label)
        self._depth += 1

    def end_batch(self) -> None:
        if self._depth > 1:
            self._depth -= 1
            return
        self._depth = 0
        self._cancel_timer()
        batch, self._open = self._open, None
        if batch is None or not batch.records:
            return
        batch.closed = True
        self._undo.append(batch)
        telemetry.record_event(
            "history.batch_closed",
            level="debug",
            data={"label": batch.label, "commands": len(batch)},
            logger_name=_LOGGER,
        )

    def batch(self, label: str = "batch") -> "HistoryBatch":
        return HistoryBatch(self, label)

    def undo(self) -> bool:
        self._close_all()
        if not self._undo:
            return False
        batch = self._undo.pop()
        with telemetry.span(
            "history::undo",
            logger_name=_LOGGER,
            component="history",
            metadata={"label": batch.label, "commands": len(batch)},
        ):
            for record in reversed(batch.records):
                invert_command(self.buffer, self.selection, record)
        self._redo.append(batch)
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._close_all()
        batch = self._redo.pop()
        with telemetry.span(
            "history::redo",
            logger_name=_LOGGER,
            component="history",
            metadata={"label": batch.label, "commands": len(batch)},
        ):
            replayed: List[CommandRecord] = []
            for record in batch.records:
                # INSERT_TEXT targets the live cursor and selection
                self.selection.restore(
                    SelectionState(record.cursor_before, record.selection_before)
                )
                again = apply_command(self.buffer, self.selection, record.command)
                if again is None:
                    raise EngineError(f"'{record.kind.value}' replayed as a no-op")
                replayed.append(again)
        batch.records = replayed
        self._undo.append(batch)
        return True

    def can_undo(self) -> bool:
        return bool(self._undo) or bool(self._open and self._open.records)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def clear(self) -> None:
        self._cancel_timer()
        self._undo.clear()
        self._redo.clear()
        self._open = None
        self._depth = 0

    def fire_overdue(self) -> int:
        """Run idle timers whose deadline has passed; returns how many fired."""

        if isinstance(self.clock, MonotonicClock):
            return self.clock.process_due()
        return 0

    def _close_all(self) -> None:
        self._depth = min(self._depth, 1)
        self.end_batch()

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self._timer = self.clock.schedule(self.idle_ms, self._on_idle)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self.clock.cancel(self._timer)
            self._timer = None

    def _on_idle(self) -> None:
        self._timer = None
        if self._depth == 0:
            self.end_batch()


class HistoryBatch(AbstractContextManager["HistoryBatch"]):
    """Context manager that groups every command it encloses into one batch."""

    def __init__(self, history: HistoryManager, label: str) -> None:
        self.history = history
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "HistoryBatch":
        self._span_cm = telemetry.span(
            name=f"history::{self.label}",
            logger_name=_LOGGER,
            component="history",
        )
        self._span_cm.__enter__()
        self.history.begin_batch(self.label)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            self.history.end_batch()
        finally:
            if self._span_cm is not None:
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Batch", "HistoryBatch", "HistoryManager"]

from __future__ import annotations

import pytest

from edit_engine import commands
from edit_engine.buffer import Position, SelectionModel, TextBuffer
from edit_engine.history import HistoryManager
from edit_engine.runtime import ManualClock, MonotonicClock


def make_history(
    text: str = "", *, idle_ms: int = 500
) -> tuple[HistoryManager, ManualClock]:
    buffer = TextBuffer.from_text(text)
    selection = SelectionModel(buffer)
    clock = ManualClock()
    return HistoryManager(buffer, selection, clock=clock, idle_ms=idle_ms), clock


def type_chars(history: HistoryManager, text: str) -> None:
    for ch in text:
        history.execute(commands.insert_char(history.selection.cursor, ch))


class UnpolledClock(MonotonicClock):
    """Real scheduling semantics, but nothing calls ``process_due`` for us."""

    def __init__(self) -> None:
        super().__init__()
        self.time = 0.0

    def now(self) -> float:
        return self.time


def test_idle_timeout_closes_batch() -> None:
    history, clock = make_history()

    type_chars(history, "ab")
    assert history.open_batch is not None
    assert history.undo_depth == 0

    clock.advance(500)

    assert history.open_batch is None
    assert history.undo_depth == 1
    assert history.undo()
    assert history.buffer.get_text() == ""


def test_typing_resets_idle_timer() -> None:
    history, clock = make_history()

    type_chars(history, "a")
    clock.advance(300)
    type_chars(history, "b")
    clock.advance(300)
    assert history.undo_depth == 0

    clock.advance(300)
    assert history.undo_depth == 1

    type_chars(history, "c")
    clock.advance(600)
    assert history.undo_depth == 2

    assert history.undo()
    assert history.buffer.get_text() == "ab"
    assert history.undo()
    assert history.buffer.get_text() == ""


def test_undo_closes_open_batch_first() -> None:
    history, _clock = make_history()

    type_chars(history, "abc")
    assert history.can_undo()

    assert history.undo()
    assert history.buffer.get_text() == ""
    assert history.selection.cursor == Position(0, 0)
    assert history.redo_depth == 1


def test_explicit_batch_is_atomic_and_suspends_timer() -> None:
    history, clock = make_history("hello")

    with history.batch("compound"):
        history.execute(commands.insert_char(Position(0, 5), "!"))
        clock.advance(5000)
        assert history.undo_depth == 0
        history.execute(commands.insert_newline(Position(0, 6)))

    assert history.undo_depth == 1
    assert history.buffer.get_text() == "hello!\n"

    assert history.undo()
    assert history.buffer.get_text() == "hello"
    assert not history.can_undo()


def test_begin_batch_closes_pending_idle_batch() -> None:
    history, _clock = make_history()

    type_chars(history, "ab")
    history.begin_batch("paste")
    history.execute(commands.insert_text("XY"))
    history.end_batch()

    assert history.undo_depth == 2
    history.undo()
    assert history.buffer.get_text() == "ab"


def test_nested_batches_close_once() -> None:
    history, _clock = make_history()

    history.begin_batch("outer")
    type_chars(history, "a")
    history.begin_batch("inner")
    type_chars(history, "b")
    history.end_batch()
    assert history.undo_depth == 0
    assert history.in_explicit_batch
    history.end_batch()

    assert not history.in_explicit_batch
    assert history.undo_depth == 1
    history.undo()
    assert history.buffer.get_text() == ""


def test_empty_explicit_batch_records_nothing() -> None:
    history, _clock = make_history()

    with history.batch("nothing"):
        pass

    assert history.undo_depth == 0
    assert not history.can_undo()


def test_noop_command_creates_no_entry() -> None:
    history, clock = make_history("abc")

    record = history.execute(commands.delete_char(Position(0, 0)))
    clock.advance(1000)

    assert record is None
    assert history.undo_depth == 0
    assert clock.pending == 0


def test_redo_reapplies_and_new_edit_clears_redo() -> None:
    history, clock = make_history()

    type_chars(history, "hi")
    clock.advance(500)
    history.undo()

    assert history.can_redo()
    assert history.redo()
    assert history.buffer.get_text() == "hi"
    assert history.selection.cursor == Position(0, 2)

    history.undo()
    type_chars(history, "x")
    assert not history.can_redo()
    assert not history.redo()


def test_undo_redo_on_empty_history() -> None:
    history, _clock = make_history()

    assert not history.undo()
    assert not history.redo()


def test_batch_context_closes_on_error() -> None:
    history, _clock = make_history()

    with pytest.raises(RuntimeError):
        with history.batch("broken"):
            type_chars(history, "a")
            raise RuntimeError("boom")

    assert not history.in_explicit_batch
    assert history.undo_depth == 1


def test_clear_drops_everything() -> None:
    history, clock = make_history()

    type_chars(history, "abc")
    history.clear()

    assert not history.can_undo()
    assert not history.can_redo()
    assert clock.pending == 0


def test_idle_ms_must_be_positive() -> None:
    buffer = TextBuffer()

    with pytest.raises(ValueError):
        HistoryManager(buffer, SelectionModel(buffer), idle_ms=0)


def test_overdue_idle_timer_closes_batch_without_polling() -> None:
    buffer = TextBuffer.from_text("")
    clock = UnpolledClock()
    history = HistoryManager(buffer, SelectionModel(buffer), clock=clock, idle_ms=50)

    type_chars(history, "a")
    clock.time += 0.2
    type_chars(history, "b")

    assert history.undo_depth == 1
    assert history.undo()
    assert buffer.get_text() == "a"
    assert history.undo()
    assert buffer.get_text() == ""


def test_redo_reapplies_whole_batch_in_order() -> None:
    history, _clock = make_history("xyz")

    with history.batch("pair"):
        history.execute(commands.insert_char(Position(0, 0), "A"))
        history.execute(commands.insert_char(Position(0, 4), "B"))
    assert history.buffer.get_text() == "AxyzB"

    assert history.undo()
    assert history.buffer.get_text() == "xyz"
    assert history.redo_depth == 1

    assert history.redo()
    assert history.buffer.get_text() == "AxyzB"
    assert history.selection.cursor == Position(0, 5)
    assert history.undo_depth == 1
    assert not history.can_redo()

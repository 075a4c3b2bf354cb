from __future__ import annotations

from typing import List

import pytest

from edit_engine.buffer import OutOfRange, Position, Selection
from edit_engine.clipboard import LocalClipboard
from edit_engine.editor import Editor
from edit_engine.events import BUFFER_CHANGED, DOCUMENT_LOADED, SEARCH_CHANGED
from edit_engine.runtime import EngineConfig, ManualClock


def make_editor(text: str = "", **kwargs: object) -> Editor:
    return Editor(
        text,
        clock=ManualClock(),
        config=EngineConfig(),
        **kwargs,  # type: ignore[arg-type]
    )


def advance(editor: Editor, ms: int = 1000) -> None:
    clock = editor.clock
    assert isinstance(clock, ManualClock)
    clock.advance(ms)


def test_typed_burst_undoes_as_one_step() -> None:
    editor = make_editor()

    for ch in "hello":
        editor.type_text(ch)
    advance(editor)

    assert editor.get_text() == "hello"
    assert editor.undo()
    assert editor.get_text() == ""
    assert editor.cursor == Position(0, 0)


def test_typing_over_selection_is_one_step() -> None:
    editor = make_editor("hello world")
    editor.select(Position(0, 0), Position(0, 5))

    editor.type_text("J")

    assert editor.get_text() == "J world"
    assert editor.undo()
    assert editor.get_text() == "hello world"
    assert editor.selection.selection == Selection(Position(0, 0), Position(0, 5))


def test_multiline_delete_undo_restores_selection() -> None:
    editor = make_editor("alpha\nbeta\ngamma")
    editor.select(Position(0, 2), Position(2, 3))

    editor.backspace()

    assert editor.get_text() == "alma"
    assert editor.cursor == Position(0, 2)
    assert editor.undo()
    assert editor.get_text() == "alpha\nbeta\ngamma"
    assert editor.selection.selection == Selection(Position(0, 2), Position(2, 3))
    assert editor.cursor == Position(2, 3)


def test_backspace_joins_lines_and_noop_at_origin() -> None:
    editor = make_editor("ab\ncd")
    editor.place_cursor(Position(1, 0))

    editor.backspace()
    assert editor.get_text() == "abcd"
    assert editor.cursor == Position(0, 2)

    editor.place_cursor(Position(0, 0))
    assert editor.backspace() is None


def test_paste_over_selection_is_one_step() -> None:
    editor = make_editor("one two three", clipboard=LocalClipboard("2\n2"))
    editor.select(Position(0, 4), Position(0, 7))

    editor.paste()

    assert editor.get_text() == "one 2\n2 three"
    assert editor.cursor == Position(1, 1)
    assert editor.history.undo_depth == 1
    assert editor.undo()
    assert editor.get_text() == "one two three"
    assert editor.selection.selection == Selection(Position(0, 4), Position(0, 7))
    assert not editor.can_undo()


def test_empty_paste_records_nothing() -> None:
    editor = make_editor("abc")

    assert editor.paste() is None
    assert editor.paste("") is None
    assert not editor.can_undo()


def test_cut_and_copy_use_clipboard() -> None:
    clipboard = LocalClipboard()
    editor = make_editor("copy me", clipboard=clipboard)
    editor.select(Position(0, 0), Position(0, 4))

    assert editor.copy() == "copy"
    assert clipboard.read() == "copy"

    assert editor.cut() == "copy"
    assert editor.get_text() == " me"
    assert editor.cut() == ""

    editor.undo()
    assert editor.get_text() == "copy me"


def test_move_collapses_selection_to_edges() -> None:
    editor = make_editor("abcdef")
    editor.select(Position(0, 1), Position(0, 4))

    editor.move("left")
    assert editor.cursor == Position(0, 1)
    assert editor.selection.selection is None

    editor.select(Position(0, 1), Position(0, 4))
    editor.move("right")
    assert editor.cursor == Position(0, 4)


def test_extend_and_select_all() -> None:
    editor = make_editor("ab\ncd")

    editor.extend("right")
    assert editor.selection.selected_text() == "a"

    editor.select_all()
    assert editor.selection.selected_text() == "ab\ncd"

    editor.clear_selection()
    assert not editor.selection.has_selection()


def test_find_moves_cursor_and_cycles() -> None:
    editor = make_editor("cat dog cat")
    seen: List[object] = []
    editor.bus.subscribe(SEARCH_CHANGED, seen.append)

    match = editor.find("cat")

    assert match is not None
    assert editor.cursor == Position(0, 0)
    assert editor.find_next() is not None
    assert editor.cursor == Position(0, 8)
    assert editor.find_prev() is not None
    assert editor.cursor == Position(0, 0)
    assert seen

    editor.close_search()
    assert not editor.search.is_active


def test_search_refreshes_after_edit() -> None:
    editor = make_editor("cat")
    editor.find("cat")
    editor.place_cursor(Position(0, 3))

    editor.type_text(" cat")

    assert editor.search.count == 2


def test_load_text_is_a_fresh_document() -> None:
    editor = make_editor("old text")
    loaded: List[object] = []
    editor.bus.subscribe(DOCUMENT_LOADED, loaded.append)
    editor.type_text("x")
    editor.select(Position(0, 0), Position(0, 2))

    editor.load_text("new\ncontent", name="new.txt")

    assert editor.get_text() == "new\ncontent"
    assert editor.cursor == Position(0, 0)
    assert editor.selection.selection is None
    assert not editor.can_undo()
    assert not editor.can_redo()
    assert editor.name == "new.txt"
    assert not editor.has_unsaved_changes()
    assert len(loaded) == 1


def test_snapshot_and_restore() -> None:
    editor = make_editor("first line\nsecond", name="doc.txt")
    editor.select(Position(1, 0), Position(0, 5))
    snapshot = editor.snapshot()

    editor.load_text("other")
    editor.restore(snapshot)

    assert editor.get_text() == "first line\nsecond"
    assert editor.cursor == Position(0, 5)
    assert editor.selection.selection == Selection(Position(1, 0), Position(0, 5))
    assert editor.name == "doc.txt"
    assert editor.pull_document().text == snapshot.text


def test_dirty_tracking_and_file_info() -> None:
    editor = make_editor("abc")
    assert not editor.has_unsaved_changes()

    editor.place_cursor(Position(0, 3))
    editor.type_text("d")
    info = editor.file_info()
    assert info.unsaved_changes
    assert info.size == 4
    assert info.lines == 1
    assert info.last_saved is None

    editor.mark_saved("abcd.txt")
    assert not editor.has_unsaved_changes()
    assert editor.file_info().name == "abcd.txt"
    assert editor.file_info().last_saved is not None

    editor.undo()
    assert editor.has_unsaved_changes()


def test_new_document_uses_default_name() -> None:
    editor = Editor("text", clock=ManualClock(), config=EngineConfig(default_name="scratch"))

    editor.new_document()

    assert editor.get_text() == ""
    assert editor.name == "scratch"


def test_edits_emit_buffer_changed() -> None:
    editor = make_editor()
    versions: List[object] = []
    editor.bus.subscribe(BUFFER_CHANGED, versions.append)

    editor.type_text("a")
    editor.insert_newline()

    assert versions == [1, 2]
    assert editor.get_text() == "a\n"


def test_place_cursor_rejects_out_of_range() -> None:
    editor = make_editor("abc")

    with pytest.raises(OutOfRange):
        editor.place_cursor(Position(0, 9))


def test_redo_after_undo() -> None:
    editor = make_editor()
    editor.insert_text("multi\nline")

    editor.undo()
    assert editor.get_text() == ""
    assert editor.redo()
    assert editor.get_text() == "multi\nline"
    assert editor.cursor == Position(1, 4)


def test_redo_replays_each_insert_where_it_was_made() -> None:
    editor = make_editor("abc")

    editor.insert_text("X")
    editor.place_cursor(Position(0, 4))
    editor.insert_text("Y")
    assert editor.get_text() == "XabcY"
    assert editor.history.undo_depth == 0

    assert editor.undo()
    assert editor.get_text() == "abc"
    assert editor.redo()
    assert editor.get_text() == "XabcY"
    assert editor.cursor == Position(0, 5)


def test_cursor_stays_valid_through_mixed_edits() -> None:
    editor = make_editor("first line\nsecond", clipboard=LocalClipboard())
    steps = [
        lambda: editor.select_all(),
        lambda: editor.cut(),
        lambda: editor.type_text("x"),
        lambda: editor.undo(),
        lambda: editor.undo(),
        lambda: editor.select(Position(0, 6), Position(1, 3)),
        lambda: editor.backspace(),
        lambda: editor.paste("a\nbb\n"),
        lambda: editor.insert_newline(),
        lambda: editor.undo(),
        lambda: editor.redo(),
        lambda: editor.move("up"),
        lambda: editor.extend("right"),
        lambda: editor.type_text("z"),
        lambda: advance(editor),
        lambda: editor.undo(),
        lambda: editor.undo(),
        lambda: editor.undo(),
        lambda: editor.redo(),
    ]

    for run in steps:
        run()
        cursor = editor.cursor
        assert 0 <= cursor.line < editor.buffer.line_count
        assert 0 <= cursor.ch <= editor.buffer.line_length(cursor.line)
        selection = editor.selection.selection
        if selection is not None:
            for end in (selection.anchor, selection.active):
                assert end <= editor.buffer.end_position()
                assert end.ch <= editor.buffer.line_length(end.line)

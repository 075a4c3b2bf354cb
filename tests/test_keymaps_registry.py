import pytest

from edit_engine.keymaps import (
    ActionRef,
    Binding,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    WhenClause,
    load_default_keymaps,
)


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    token: str = "ctrl+z",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(token),
        action_id=action_id,
        when=when,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="editor.undo")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings("ctrl+z")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="editor.undo"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="editor.undo.duplicate"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default", token="ESC"))
    registry.register_binding(
        make_binding(
            binding_id="selection",
            token="ESC",
            when=(WhenClause("has_selection"),),
        )
    )
    registry.register_binding(
        make_binding(
            binding_id="no_selection",
            token="ESC",
            when=(WhenClause.parse("!has_selection"),),
        )
    )

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)
    before = registry.revision()

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.stats().signatures == ()
    assert registry.revision() == before + 1


def test_key_stroke_normalizes_modifier_order() -> None:
    assert KeyStroke.parse("shift+ctrl+z").token == "ctrl+shift+z"
    assert KeyStroke("LEFT", ("SHIFT",)).token == "shift+LEFT"

    with pytest.raises(ValueError):
        KeyStroke.parse("hyper+z")


def test_binding_accepts_string_stroke() -> None:
    binding = Binding(id="b", stroke="ctrl+a", action_id="core.test")  # type: ignore[arg-type]

    assert binding.stroke == KeyStroke("a", ("ctrl",))
    assert binding.key_signature == "ctrl+a"


def test_load_default_keymaps_registers_editing_keys() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    stats = registry.stats()
    assert "ctrl+z" in stats.signatures
    assert "shift+LEFT" in stats.signatures
    assert registry.get_binding("editor.redo_shift").key_signature == "ctrl+shift+z"
    assert registry.get_binding("editor.undo").action_id == "history.undo"
    assert len(list(registry.iter_bindings("ESC"))) == 2


def test_load_default_keymaps_is_idempotent() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)
    count = registry.stats().binding_count
    load_default_keymaps(registry)

    assert registry.stats().binding_count == count


def test_rebind_moves_binding_to_new_stroke() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    moved = registry.rebind("editor.undo", "alt+BACKSPACE")

    assert moved.key_signature == "alt+BACKSPACE"
    assert list(registry.iter_bindings("ctrl+z")) == []
    assert registry.strokes_for("history.undo") == ("alt+BACKSPACE",)


def test_rebind_refuses_taken_stroke() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    with pytest.raises(KeymapConflictError):
        registry.rebind("editor.undo", "ctrl+y")

    assert registry.get_binding("editor.undo").key_signature == "ctrl+z"


def test_strokes_for_lists_every_binding_of_an_action() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    assert registry.strokes_for("history.redo") == ("ctrl+shift+z", "ctrl+y")
    assert registry.strokes_for("missing") == ()

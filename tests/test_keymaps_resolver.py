from __future__ import annotations

from edit_engine.keymaps import (
    ActionRef,
    Binding,
    KeyStroke,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    token: str = "ESC",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(token),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_token() -> None:
    binding = make_binding("editor.undo", token="ctrl+z")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("ctrl+z")

    assert result is not None
    assert result.binding.id == binding.id
    assert result.action.id == "core.test"


def test_resolver_reports_miss() -> None:
    resolver = KeymapResolver(build_registry([make_binding("editor.undo", token="ctrl+z")]))

    assert resolver.resolve("ctrl+y") is None


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "selection.clear",
        when=(WhenClause("has_selection"),),
        action_id="core.clear",
    )
    resolver = KeymapResolver(build_registry([gating]))

    assert resolver.resolve("ESC", context={}) is None

    hit = resolver.resolve("ESC", context={"has_selection": True})
    assert hit is not None
    assert hit.binding.id == gating.id


def test_resolver_prefers_priority_then_specificity() -> None:
    selection = make_binding(
        "selection.clear",
        when=(WhenClause("has_selection"),),
        action_id="core.clear",
    )
    search = make_binding(
        "search.close",
        when=(WhenClause("search_active"),),
        action_id="core.close",
        priority=1,
    )
    resolver = KeymapResolver(build_registry([selection, search]))

    both = resolver.resolve(
        "ESC", context={"has_selection": True, "search_active": True}
    )
    only_selection = resolver.resolve("ESC", context={"has_selection": True})

    assert both is not None and both.binding.id == "search.close"
    assert only_selection is not None and only_selection.binding.id == "selection.clear"


def test_resolver_sees_bindings_registered_later() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    assert resolver.resolve("x") is None

    registry.register_action(make_action("core.x"))
    registry.register_binding(make_binding("editor.x", token="x", action_id="core.x"))

    match = resolver.resolve("x")
    assert match is not None
    assert match.binding.id == "editor.x"

"""Built-in keymap that seeds the editor with conventional bindings."""

from __future__ import annotations

from functools import partial
from typing import Iterable

from edit_engine.actions import editing as editing_actions
from edit_engine.actions import search as search_actions
from edit_engine.actions import selection as selection_actions

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

_ARROWS = {"LEFT": "left", "RIGHT": "right", "UP": "up", "DOWN": "down"}

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="edit.newline",
        handler=editing_actions.insert_newline,
        description="Split the line at the cursor",
    ),
    ActionRef(
        id="edit.backspace",
        handler=editing_actions.backspace,
        description="Delete the selection or the character before the cursor",
    ),
    ActionRef(
        id="edit.tab",
        handler=editing_actions.insert_tab,
        description="Insert a tab character",
    ),
    ActionRef(id="history.undo", handler=editing_actions.undo, description="Undo"),
    ActionRef(id="history.redo", handler=editing_actions.redo, description="Redo"),
    ActionRef(
        id="clipboard.copy",
        handler=editing_actions.copy,
        description="Copy the selection",
    ),
    ActionRef(
        id="clipboard.cut",
        handler=editing_actions.cut,
        description="Cut the selection",
    ),
    ActionRef(
        id="clipboard.paste",
        handler=editing_actions.paste,
        description="Paste over the selection",
    ),
    *(
        ActionRef(
            id=f"cursor.{direction}",
            handler=partial(selection_actions.move, direction=direction),
            description=f"Move the cursor {direction}",
        )
        for direction in _ARROWS.values()
    ),
    *(
        ActionRef(
            id=f"selection.extend_{direction}",
            handler=partial(selection_actions.extend, direction=direction),
            description=f"Extend the selection {direction}",
        )
        for direction in _ARROWS.values()
    ),
    ActionRef(
        id="selection.all",
        handler=selection_actions.select_all,
        description="Select the whole document",
    ),
    ActionRef(
        id="selection.clear",
        handler=selection_actions.clear_selection,
        description="Drop the selection",
    ),
    ActionRef(
        id="search.next",
        handler=search_actions.find_next,
        description="Jump to the next match",
    ),
    ActionRef(
        id="search.prev",
        handler=search_actions.find_prev,
        description="Jump to the previous match",
    ),
    ActionRef(
        id="search.close",
        handler=search_actions.close_search,
        description="Leave search",
    ),
)


def _binding(
    binding_id: str,
    token: str,
    action_id: str,
    *,
    when: Iterable[str] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(token),
        action_id=action_id,
        when=tuple(when),  # type: ignore[arg-type]
        priority=priority,
        tags=("default",),
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    _binding("editor.enter", "ENTER", "edit.newline"),
    _binding("editor.backspace", "BACKSPACE", "edit.backspace"),
    _binding("editor.tab", "TAB", "edit.tab"),
    _binding("editor.undo", "ctrl+z", "history.undo"),
    _binding("editor.redo", "ctrl+y", "history.redo"),
    _binding("editor.redo_shift", "ctrl+shift+z", "history.redo"),
    _binding("editor.copy", "ctrl+c", "clipboard.copy"),
    _binding("editor.cut", "ctrl+x", "clipboard.cut"),
    _binding("editor.paste", "ctrl+v", "clipboard.paste"),
    _binding("editor.select_all", "ctrl+a", "selection.all"),
    *(_binding(f"editor.{name}", key, f"cursor.{name}") for key, name in _ARROWS.items()),
    *(
        _binding(f"editor.shift_{name}", f"shift+{key}", f"selection.extend_{name}")
        for key, name in _ARROWS.items()
    ),
    _binding(
        "editor.escape_selection", "ESC", "selection.clear", when=("has_selection",)
    ),
    _binding(
        "editor.escape_search",
        "ESC",
        "search.close",
        when=("search_active",),
        priority=1,
    ),
    _binding("editor.find_next", "F3", "search.next", when=("search_active",)),
    _binding("editor.find_prev", "shift+F3", "search.prev", when=("search_active",)),
)


def load_default_keymaps(registry: KeymapRegistry) -> KeymapRegistry:
    for action in DEFAULT_ACTIONS:
        registry.register_action(action, replace=True)
    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding, replace=True)
    return registry


__all__ = ["DEFAULT_ACTIONS", "DEFAULT_BINDINGS", "load_default_keymaps"]

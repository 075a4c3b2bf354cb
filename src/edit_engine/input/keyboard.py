"""Keymap-driven dispatch of key events onto an ``Editor``."""

from __future__ import annotations

from typing import Dict, Mapping

from edit_engine.editor import Editor
from edit_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    ResolutionMatch,
    load_default_keymaps,
)
from edit_engine.runtime import telemetry

from .base import ActionContext, ActionResult, KeyInput

_TEXT_BLOCKING_MODIFIERS = frozenset({"ctrl", "alt", "meta"})


def key_to_token(key: KeyInput) -> str:
    return KeyStroke(key.key, tuple(key.modifiers)).token


class KeyboardController:
    """Resolves key events against the keymap and runs the bound action.

    Keys without a binding that carry printable text (and no ctrl, alt or
    meta modifier) are typed into the document.
    """

    def __init__(
        self,
        editor: Editor,
        *,
        registry: KeymapRegistry | None = None,
        resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.editor = editor
        self.logger = telemetry.get_logger("edit_engine.input")
        self.registry = registry or KeymapRegistry(logger_name="edit_engine.keymaps")
        if load_defaults and registry is None:
            load_default_keymaps(self.registry)
        self.resolver = resolver or KeymapResolver(
            self.registry, logger_name="edit_engine.keymaps"
        )
        self.context = ActionContext(editor=editor)
        self.context.extras.setdefault("keymap_registry", self.registry)
        self.context.extras.setdefault("keyboard", self)

    def flags(self) -> Mapping[str, bool]:
        flags: Dict[str, bool] = {
            "has_selection": self.editor.selection.has_selection(),
            "search_active": self.editor.search.is_active,
        }
        return flags

    def handle_key(self, key: KeyInput) -> ActionResult:
        token = key_to_token(key)
        match = self.resolver.resolve(token, context=self.flags())
        if match is not None:
            return self._execute_match(match)

        if key.text and not _TEXT_BLOCKING_MODIFIERS.intersection(key.modifiers):
            record = self.editor.type_text(key.text)
            status = "typed" if record is not None else "noop"
            return ActionResult(consumed=True, status=status)

        return ActionResult(consumed=False, status="miss", message=token)

    def _execute_match(self, match: ResolutionMatch) -> ActionResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, ActionResult):
            return outcome
        return ActionResult(consumed=True)


__all__ = ["KeyboardController", "key_to_token"]

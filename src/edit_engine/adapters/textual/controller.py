"""Textual adapter that wires KeyboardController and editor events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from edit_engine.buffer import DocumentSnapshot
from edit_engine.editor import Editor
from edit_engine.events import (
    BUFFER_CHANGED,
    DOCUMENT_LOADED,
    HISTORY_CHANGED,
    SEARCH_CHANGED,
    SELECTION_CHANGED,
)
from edit_engine.input import ActionResult, KeyInput
from edit_engine.input.keyboard import KeyboardController


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[DocumentSnapshot], None]
    update_status: Callable[[str], None] = _noop
    show_search: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Bridges KeyboardController + editor bus events to a Textual-friendly surface."""

    def __init__(self, controller: KeyboardController, hooks: TextualUIHooks) -> None:
        self.controller = controller
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_buffer()
        self._refresh_search_line()

    @property
    def editor(self) -> Editor:
        return self.controller.editor

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ActionResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized_modifiers = tuple(str(mod).lower() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.controller.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._after_action_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
        )
        return result

    def process_timeouts(self) -> int:
        """Fire due idle timers so typing bursts close into undo steps."""

        fired = self.editor.tick()
        if fired:
            self._log_state("timeout ->", fired=fired)
        return fired

    def find(self, term: str) -> None:
        match = self.editor.find(term)
        if match is None and term:
            self.hooks.update_status(f"not found: {term}")
        self._refresh_buffer()

    def _after_action_result(self, result: ActionResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._refresh_buffer()

    def _subscribe_events(self) -> None:
        bus = self.editor.bus
        for event in (
            BUFFER_CHANGED,
            SELECTION_CHANGED,
            SEARCH_CHANGED,
            HISTORY_CHANGED,
            DOCUMENT_LOADED,
        ):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)
        if name == SEARCH_CHANGED:
            self._refresh_search_line()
        elif name == DOCUMENT_LOADED:
            self._refresh_buffer()
            self.hooks.update_status(f"loaded {self.editor.name}")

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.editor.snapshot())

    def _refresh_search_line(self) -> None:
        search = self.editor.search
        if not search.is_active:
            self.hooks.show_search("")
            return
        if not search.count:
            self.hooks.show_search(f"/{search.term}  no matches")
            return
        self.hooks.show_search(f"/{search.term}  {search.index + 1}/{search.count}")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        editor = self.editor
        return {
            "cursor": editor.cursor.as_tuple(),
            "selection": editor.selection.selection,
            "search": editor.search.term if editor.search.is_active else "",
            "undo_depth": editor.history.undo_depth,
            "buffer": editor.name,
            "buffer_version": editor.buffer.version,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]

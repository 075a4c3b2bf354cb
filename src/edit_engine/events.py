"""Minimal event bus letting renderers follow engine changes."""

from __future__ import annotations

from typing import Callable, Dict, List

BUFFER_CHANGED = "buffer.changed"
SELECTION_CHANGED = "selection.changed"
SEARCH_CHANGED = "search.changed"
HISTORY_CHANGED = "history.changed"
DOCUMENT_LOADED = "document.loaded"

Subscriber = Callable[[object], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscriber]] = {}

    def subscribe(self, event: str, callback: Subscriber) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Subscriber) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "BUFFER_CHANGED",
    "DOCUMENT_LOADED",
    "HISTORY_CHANGED",
    "SEARCH_CHANGED",
    "SELECTION_CHANGED",
    "EventBus",
    "Subscriber",
]

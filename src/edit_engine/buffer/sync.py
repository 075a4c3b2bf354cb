"""Adapter boundary types for syncing documents with host widgets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .position import Position, Selection


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Host-friendly snapshot describing the current document state."""

    text: str
    cursor: Position
    selection: Optional[Selection]
    version: int = 0
    name: str = ""

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self.text.split("\n"))


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the engine."""

    def pull_document(self) -> DocumentSnapshot:
        """Return the latest snapshot that the host should render."""
        ...

    def push_document(self, snapshot: DocumentSnapshot) -> None:
        """Replace the document with a host-provided snapshot (e.g. file load)."""
        ...


__all__ = ["BufferSync", "DocumentSnapshot"]

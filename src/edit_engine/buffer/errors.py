"""Precondition failures raised by the edit engine."""

from __future__ import annotations

from typing import Optional

from .position import Position


class EngineError(RuntimeError):
    """Base class for violated engine preconditions."""


class OutOfRange(EngineError):
    """Raised when a line index or position lies outside the buffer."""

    def __init__(
        self,
        message: str,
        *,
        position: Optional[Position] = None,
        line: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.line = position.line if position is not None and line is None else line


class NoSelection(EngineError):
    """Raised when a selection is required but none is active."""

    def __init__(self, message: str = "No active selection") -> None:
        super().__init__(message)


__all__ = ["EngineError", "OutOfRange", "NoSelection"]

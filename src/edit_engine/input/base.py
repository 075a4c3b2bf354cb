"""Shared types for turning key events into editor actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from edit_engine.editor import Editor


@dataclass(slots=True)
class KeyInput:
    """Normalized key event handed to the keyboard controller."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None


@dataclass(slots=True)
class ActionResult:
    """Outcome of dispatching one key."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None


@dataclass(slots=True)
class ActionContext:
    """Services every action handler can reach."""

    editor: Editor
    extras: Dict[str, object] = field(default_factory=dict)


__all__ = ["ActionContext", "ActionResult", "KeyInput"]

"""Input-source types; the keymap-driven controller lives in ``keyboard``."""

from .base import ActionContext, ActionResult, KeyInput

__all__ = ["ActionContext", "ActionResult", "KeyInput"]

"""Cursor movement and selection actions."""

from __future__ import annotations

from edit_engine.buffer import Direction
from edit_engine.input.base import ActionContext, ActionResult


def move(context: ActionContext, match, *, direction: Direction) -> ActionResult:
    del match
    context.editor.move(direction)
    return ActionResult(consumed=True, status="move", message=direction)


def extend(context: ActionContext, match, *, direction: Direction) -> ActionResult:
    del match
    context.editor.extend(direction)
    if context.editor.selection.has_selection():
        return ActionResult(consumed=True, status="select", message=direction)
    return ActionResult(consumed=True, status="select_collapsed", message=direction)


def select_all(context: ActionContext, match) -> ActionResult:
    del match
    context.editor.select_all()
    return ActionResult(consumed=True, status="select_all")


def clear_selection(context: ActionContext, match) -> ActionResult:
    del match
    context.editor.clear_selection()
    return ActionResult(consumed=True, status="select_clear")


__all__ = ["move", "extend", "select_all", "clear_selection"]

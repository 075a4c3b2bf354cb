"""Actions that change document content or history."""

from __future__ import annotations

from edit_engine.input.base import ActionContext, ActionResult


def _edited(record: object, status: str) -> ActionResult:
    if record is None:
        return ActionResult(consumed=True, status="noop")
    return ActionResult(consumed=True, status=status)


def insert_newline(context: ActionContext, match) -> ActionResult:
    del match
    return _edited(context.editor.insert_newline(), "newline")


def backspace(context: ActionContext, match) -> ActionResult:
    del match
    return _edited(context.editor.backspace(), "delete")


def insert_tab(context: ActionContext, match) -> ActionResult:
    del match
    return _edited(context.editor.type_text("\t"), "typed")


def undo(context: ActionContext, match) -> ActionResult:
    del match
    if context.editor.undo():
        return ActionResult(consumed=True, status="undo")
    return ActionResult(consumed=True, status="noop", message="nothing_to_undo")


def redo(context: ActionContext, match) -> ActionResult:
    del match
    if context.editor.redo():
        return ActionResult(consumed=True, status="redo")
    return ActionResult(consumed=True, status="noop", message="nothing_to_redo")


def copy(context: ActionContext, match) -> ActionResult:
    del match
    text = context.editor.copy()
    if not text:
        return ActionResult(consumed=True, status="no_selection")
    return ActionResult(consumed=True, status="copy", message=f"{len(text)} chars")


def cut(context: ActionContext, match) -> ActionResult:
    del match
    text = context.editor.cut()
    if not text:
        return ActionResult(consumed=True, status="no_selection")
    return ActionResult(consumed=True, status="cut", message=f"{len(text)} chars")


def paste(context: ActionContext, match) -> ActionResult:
    del match
    return _edited(context.editor.paste(), "paste")


__all__ = [
    "insert_newline",
    "backspace",
    "insert_tab",
    "undo",
    "redo",
    "copy",
    "cut",
    "paste",
]

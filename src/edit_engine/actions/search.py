"""Actions navigating the active search."""

from __future__ import annotations

from typing import Optional

from edit_engine.input.base import ActionContext, ActionResult
from edit_engine.search import Match


def _located(context: ActionContext, match: Optional[Match]) -> ActionResult:
    if match is None:
        return ActionResult(consumed=True, status="search_empty")
    search = context.editor.search
    return ActionResult(
        consumed=True,
        status="search_match",
        message=f"{search.index + 1}/{search.count}",
    )


def find_next(context: ActionContext, match) -> ActionResult:
    del match
    return _located(context, context.editor.find_next())


def find_prev(context: ActionContext, match) -> ActionResult:
    del match
    return _located(context, context.editor.find_prev())


def close_search(context: ActionContext, match) -> ActionResult:
    del match
    context.editor.close_search()
    return ActionResult(consumed=True, status="search_closed")


__all__ = ["find_next", "find_prev", "close_search"]

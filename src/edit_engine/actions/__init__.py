"""Editing verbs bound by the default keymap."""

from .editing import backspace, copy, cut, insert_newline, insert_tab, paste, redo, undo
from .search import close_search, find_next, find_prev
from .selection import clear_selection, extend, move, select_all

__all__ = [
    "backspace",
    "copy",
    "cut",
    "insert_newline",
    "insert_tab",
    "paste",
    "redo",
    "undo",
    "close_search",
    "find_next",
    "find_prev",
    "clear_selection",
    "extend",
    "move",
    "select_all",
]

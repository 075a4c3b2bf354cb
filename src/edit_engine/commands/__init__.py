"""Reversible edit commands expressed as plain data."""

from .apply import apply_command, invert_command
from .models import (
    Command,
    CommandKind,
    CommandRecord,
    delete_char,
    delete_selection,
    insert_char,
    insert_newline,
    insert_text,
)

__all__ = [
    "Command",
    "CommandKind",
    "CommandRecord",
    "apply_command",
    "invert_command",
    "delete_char",
    "delete_selection",
    "insert_char",
    "insert_newline",
    "insert_text",
]

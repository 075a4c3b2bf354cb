"""UI-agnostic plain-text editing engine."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "commands",
    "editor",
    "history",
    "input",
    "keymaps",
    "runtime",
    "search",
]

__version__ = "0.1.0"

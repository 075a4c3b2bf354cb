"""Buffer, position and selection primitives."""

from .document import NEWLINE, Deletion, TextBuffer, from_utf16_ch, to_utf16_ch
from .errors import EngineError, NoSelection, OutOfRange
from .position import DIRECTIONS, Direction, Position, Range, Selection
from .selection import SelectionModel, SelectionState
from .sync import BufferSync, DocumentSnapshot
from .validation import ensure_line, ensure_ordered, ensure_position

__all__ = [
    "NEWLINE",
    "DIRECTIONS",
    "Deletion",
    "Direction",
    "TextBuffer",
    "EngineError",
    "NoSelection",
    "OutOfRange",
    "Position",
    "Range",
    "Selection",
    "SelectionModel",
    "SelectionState",
    "BufferSync",
    "DocumentSnapshot",
    "ensure_line",
    "ensure_ordered",
    "ensure_position",
    "from_utf16_ch",
    "to_utf16_ch",
]

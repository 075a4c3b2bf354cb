"""Literal substring search over the document buffer."""

from .index import Match, SearchIndex

__all__ = ["Match", "SearchIndex"]

"""Undo/redo history with batching."""

from .manager import Batch, HistoryBatch, HistoryManager

__all__ = ["Batch", "HistoryBatch", "HistoryManager"]

"""Clipboard providers used by cut, copy and paste."""

from __future__ import annotations

from typing import Optional, Protocol


class Clipboard(Protocol):
    def read(self) -> Optional[str]:
        ...

    def write(self, text: str) -> None:
        ...


class LocalClipboard:
    """Process-local clipboard; hosts with OS integration supply their own."""

    def __init__(self, text: Optional[str] = None) -> None:
        self._text = text

    def read(self) -> Optional[str]:
        return self._text

    def write(self, text: str) -> None:
        self._text = text


__all__ = ["Clipboard", "LocalClipboard"]

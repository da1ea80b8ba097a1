"""Ports for the file and clipboard collaborators of a session."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class FileIOError(OSError):
    """Raised by file adapters when reading or writing text fails."""


class ClipboardError(RuntimeError):
    """Raised by clipboard adapters when the clipboard is unavailable."""


@runtime_checkable
class TextFilePort(Protocol):
    """Reads user-selected files as raw text and writes exported output."""

    def read_text(self, path: str) -> str:
        ...

    def write_text(self, path: str, text: str) -> None:
        ...


@runtime_checkable
class ClipboardPort(Protocol):
    """Plain-text access to a system clipboard."""

    def read_text(self) -> str:
        ...

    def write_text(self, text: str) -> None:
        ...

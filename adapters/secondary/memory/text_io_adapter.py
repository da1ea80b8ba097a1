"""In-memory file and clipboard adapters for testing."""

from __future__ import annotations

from typing import Dict, Optional

from ports.text_io_port import ClipboardError, ClipboardPort, FileIOError, TextFilePort


class InMemoryTextFiles(TextFilePort):
    """Adapter serving files from a path -> text dictionary."""

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self.files: Dict[str, str] = dict(files or {})

    def read_text(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError as exc:
            raise FileIOError(f"No such file: {path}") from exc

    def write_text(self, path: str, text: str) -> None:
        self.files[path] = text


class InMemoryClipboard(ClipboardPort):
    """Clipboard holding a single string; can simulate an unavailable clipboard."""

    def __init__(self, text: str = "", available: bool = True) -> None:
        self._text = text
        self.available = available

    def read_text(self) -> str:
        if not self.available:
            raise ClipboardError("Clipboard is not available")
        return self._text

    def write_text(self, text: str) -> None:
        if not self.available:
            raise ClipboardError("Clipboard is not available")
        self._text = text

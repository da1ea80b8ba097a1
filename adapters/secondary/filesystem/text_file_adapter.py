"""Local filesystem adapter for importing and exporting raw text."""

from __future__ import annotations

from pathlib import Path

from ports.text_io_port import FileIOError, TextFilePort


class LocalTextFileAdapter(TextFilePort):
    """Reads and writes whole files as text in a fixed encoding."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read_text(self, path: str) -> str:
        try:
            # newline="" keeps \r\n intact; the engine does not normalize it
            with open(path, encoding=self.encoding, newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise FileIOError(f"Could not read {path}: {exc}") from exc

    def write_text(self, path: str, text: str) -> None:
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "w", encoding=self.encoding, newline="") as handle:
                handle.write(text)
        except (OSError, UnicodeEncodeError) as exc:
            raise FileIOError(f"Could not write {path}: {exc}") from exc

"""Key-value store persisted as a JSON object in a local file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from ports.preset_store_port import KeyValueStorePort

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore(KeyValueStorePort):
    """Stores string values under string keys in a single JSON document.

    A missing or unreadable document behaves like an empty store; it is
    rewritten on the next ``set``.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding

    def _read(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding=self.encoding))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read key-value store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Key-value store %s is not a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding=self.encoding)
        tmp.replace(self.path)

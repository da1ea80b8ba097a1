"""In-memory key-value store for presets, useful for tests."""

from __future__ import annotations

from typing import Dict, Optional

from ports.preset_store_port import KeyValueStorePort


class InMemoryKeyValueStore(KeyValueStorePort):
    """Dictionary-backed store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("Stored values must be strings")
        self._data[key] = value

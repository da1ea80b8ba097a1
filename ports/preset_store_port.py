"""Preset persistence port and the repository built on top of it."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Tuple, runtime_checkable

from core.domain.presets import (
    Preset,
    StorageReadError,
    deserialize_presets,
    serialize_presets,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class KeyValueStorePort(Protocol):
    """String key-value store, e.g. browser local storage or a JSON file."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class PresetRepository:
    """Loads and saves the preset collection under a single store key."""

    def __init__(self, store: KeyValueStorePort, key: str = "textProcessingPresets") -> None:
        self._store = store
        self.key = key

    def load_all(self) -> Tuple[Preset, ...]:
        """Return stored presets; unreadable or absent data yields no presets."""
        raw = self._store.get(self.key)
        if raw is None:
            return ()
        try:
            return deserialize_presets(raw)
        except StorageReadError as exc:
            logger.warning("Ignoring stored presets under %r: %s", self.key, exc)
            return ()

    def save_all(self, presets: Iterable[Preset]) -> None:
        self._store.set(self.key, serialize_presets(presets))

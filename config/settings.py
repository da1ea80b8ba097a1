"""Session configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from core.domain.history import DEFAULT_HISTORY_SIZE


class ConfigError(ValueError):
    """Raised when configuration values are invalid."""


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for a text-processing session."""

    history_limit: int = DEFAULT_HISTORY_SIZE
    presets_storage_key: str = "textProcessingPresets"
    export_filename: str = "processed_text.txt"

    def __post_init__(self) -> None:
        if not isinstance(self.history_limit, int) or self.history_limit < 1:
            raise ConfigError("history_limit must be a positive integer")
        if not self.presets_storage_key:
            raise ConfigError("presets_storage_key must be provided")
        if not self.export_filename:
            raise ConfigError("export_filename must be provided")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SessionConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in values.items() if key in known})

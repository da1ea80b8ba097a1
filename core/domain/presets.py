"""Preset value objects and their persisted JSON contract."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import pandas as pd

from core.domain.operations import (
    IdGenerator,
    OperationChain,
    RandomIdGenerator,
)


class PresetError(ValueError):
    """Raised when a preset cannot be created."""


class StorageReadError(ValueError):
    """Raised when persisted preset data is missing or malformed."""


@dataclass(frozen=True, slots=True)
class Preset:
    """Named, reusable copy of an operation chain."""

    id: str
    name: str
    operations: OperationChain
    created_at: pd.Timestamp

    def __post_init__(self) -> None:
        if not self.id:
            raise PresetError("Preset id must be provided")
        if not self.name or not self.name.strip():
            raise PresetError("Preset name must be a non-empty string")
        if not isinstance(self.operations, OperationChain):
            raise PresetError("Preset operations must be an OperationChain")

    @classmethod
    def create(
        cls,
        name: str,
        chain: OperationChain,
        *,
        id_generator: Optional[IdGenerator] = None,
        created_at: Optional[pd.Timestamp] = None,
    ) -> "Preset":
        """Capture ``chain`` under ``name`` with a fresh id and timestamp."""
        if not isinstance(name, str) or not name.strip():
            raise PresetError("Preset name must be a non-empty string")
        return cls(
            id=(id_generator or RandomIdGenerator())(),
            name=name.strip(),
            operations=OperationChain(chain.steps),
            created_at=created_at if created_at is not None else pd.Timestamp.now(tz="UTC"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "operations": self.operations.to_list(),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Preset":
        preset_id, name = payload["id"], payload["name"]
        if not isinstance(preset_id, str) or not isinstance(name, str):
            raise StorageReadError("Preset id and name must be strings")
        return cls(
            id=preset_id,
            name=name,
            operations=OperationChain.from_list(payload["operations"]),
            created_at=_parse_timestamp(payload["createdAt"]),
        )


def _parse_timestamp(value: Any) -> pd.Timestamp:
    if not isinstance(value, str):
        raise StorageReadError(f"createdAt must be an ISO-8601 string, got {value!r}")
    try:
        stamp = pd.Timestamp(value)
    except ValueError as exc:
        raise StorageReadError(f"Unparseable createdAt: {value!r}") from exc
    if stamp is pd.NaT:
        raise StorageReadError(f"Unparseable createdAt: {value!r}")
    return stamp if stamp.tzinfo is not None else stamp.tz_localize("UTC")


def serialize_presets(presets: Iterable[Preset]) -> str:
    """Encode presets as a JSON array."""
    return json.dumps([preset.to_dict() for preset in presets], ensure_ascii=False)


def deserialize_presets(raw: Optional[str]) -> Tuple[Preset, ...]:
    """Decode a JSON array produced by :func:`serialize_presets`.

    Any structural problem is reported as :class:`StorageReadError`.
    """
    if raw is None:
        raise StorageReadError("No stored presets")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageReadError(f"Stored presets are not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise StorageReadError("Stored presets must be a JSON array")
    try:
        return tuple(Preset.from_dict(item) for item in payload)
    except StorageReadError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageReadError(f"Malformed preset entry: {exc}") from exc

"""Operation catalog: kinds, per-kind settings records, and chain value objects."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, Tuple, Type, Union


class UnknownOperationKindError(ValueError):
    """Raised when an operation kind name is not part of the catalog."""


class OperationKind(str, Enum):
    REMOVE_CHARACTERS = "removeCharacters"
    REGEX_REPLACE = "regexReplace"
    CHANGE_CASE = "changeCase"
    DEDUPLICATE = "deduplicate"
    REMOVE_EMPTY_LINES = "removeEmptyLines"
    TRIM_WHITESPACE = "trimWhitespace"
    ADD_PREFIX_SUFFIX = "addPrefixSuffix"

    @classmethod
    def parse(cls, value: Union[str, "OperationKind"]) -> "OperationKind":
        try:
            return cls(value)
        except ValueError as exc:
            raise UnknownOperationKindError(f"Unknown operation kind: {value!r}") from exc


class CaseType(str, Enum):
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"
    SENTENCE = "sentence"


def _require_strings(settings: Any, *names: str) -> None:
    for name in names:
        value = getattr(settings, name)
        if not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got {type(value).__name__}")


@dataclass(frozen=True)
class RemoveCharactersSettings:
    characters: str = ""

    def __post_init__(self) -> None:
        _require_strings(self, "characters")


@dataclass(frozen=True)
class RegexReplaceSettings:
    pattern: str = ""
    replacement: str = ""
    flags: str = "g"

    def __post_init__(self) -> None:
        _require_strings(self, "pattern", "replacement", "flags")


@dataclass(frozen=True)
class ChangeCaseSettings:
    case_type: CaseType = CaseType.LOWERCASE

    def __post_init__(self) -> None:
        object.__setattr__(self, "case_type", CaseType(self.case_type))


@dataclass(frozen=True)
class DeduplicateSettings:
    preserve_order: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.preserve_order, bool):
            raise ValueError("preserve_order must be a boolean")


@dataclass(frozen=True)
class RemoveEmptyLinesSettings:
    pass


@dataclass(frozen=True)
class TrimWhitespaceSettings:
    pass


@dataclass(frozen=True)
class AddPrefixSuffixSettings:
    prefix: str = ""
    suffix: str = ""

    def __post_init__(self) -> None:
        _require_strings(self, "prefix", "suffix")


OperationSettings = Union[
    RemoveCharactersSettings,
    RegexReplaceSettings,
    ChangeCaseSettings,
    DeduplicateSettings,
    RemoveEmptyLinesSettings,
    TrimWhitespaceSettings,
    AddPrefixSuffixSettings,
]


@dataclass(frozen=True)
class CatalogEntry:
    """Label and settings record type registered for an operation kind."""

    label: str
    settings_type: Type[Any]
    # persisted key -> settings attribute
    fields: Mapping[str, str] = field(default_factory=dict)


CATALOG: Mapping[OperationKind, CatalogEntry] = MappingProxyType(
    {
        OperationKind.REMOVE_CHARACTERS: CatalogEntry(
            "Remove characters",
            RemoveCharactersSettings,
            MappingProxyType({"characters": "characters"}),
        ),
        OperationKind.REGEX_REPLACE: CatalogEntry(
            "Regex replace",
            RegexReplaceSettings,
            MappingProxyType(
                {"pattern": "pattern", "replacement": "replacement", "flags": "flags"}
            ),
        ),
        OperationKind.CHANGE_CASE: CatalogEntry(
            "Change case",
            ChangeCaseSettings,
            MappingProxyType({"caseType": "case_type"}),
        ),
        OperationKind.DEDUPLICATE: CatalogEntry(
            "Remove duplicates",
            DeduplicateSettings,
            MappingProxyType({"preserveOrder": "preserve_order"}),
        ),
        OperationKind.REMOVE_EMPTY_LINES: CatalogEntry(
            "Remove empty lines", RemoveEmptyLinesSettings
        ),
        OperationKind.TRIM_WHITESPACE: CatalogEntry(
            "Trim whitespace", TrimWhitespaceSettings
        ),
        OperationKind.ADD_PREFIX_SUFFIX: CatalogEntry(
            "Add prefix/suffix",
            AddPrefixSuffixSettings,
            MappingProxyType({"prefix": "prefix", "suffix": "suffix"}),
        ),
    }
)


def default_settings(kind: OperationKind) -> OperationSettings:
    """Return the default settings record for ``kind``."""
    return CATALOG[kind].settings_type()


def label(kind: OperationKind) -> str:
    """Return the human readable label for ``kind``."""
    return CATALOG[kind].label


class IdGenerator(Protocol):
    """Source of identifiers unique within a session."""

    def __call__(self) -> str:
        ...


class RandomIdGenerator:
    """Collision-resistant identifiers derived from uuid4."""

    def __init__(self, length: int = 12) -> None:
        if not 8 <= length <= 32:
            raise ValueError("Identifier length must be between 8 and 32")
        self._length = length

    def __call__(self) -> str:
        return uuid.uuid4().hex[: self._length]


class CounterIdGenerator:
    """Monotonic identifiers, handy for deterministic tests."""

    def __init__(self, prefix: str = "op", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


_default_ids = RandomIdGenerator()


@dataclass(frozen=True)
class Operation:
    """A configured, toggleable step in a chain."""

    id: str
    kind: OperationKind
    enabled: bool = True
    settings: Optional[OperationSettings] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Operation id must be provided")
        kind = OperationKind.parse(self.kind)
        object.__setattr__(self, "kind", kind)
        expected = CATALOG[kind].settings_type
        if self.settings is None:
            object.__setattr__(self, "settings", expected())
        elif not isinstance(self.settings, expected):
            raise ValueError(
                f"{kind.value} expects {expected.__name__}, got {type(self.settings).__name__}"
            )

    @property
    def label(self) -> str:
        return label(self.kind)

    def with_settings(self, **changes: Any) -> "Operation":
        """Return a copy with some settings fields replaced."""
        return replace(self, settings=replace(self.settings, **changes))

    def toggled(self) -> "Operation":
        return replace(self, enabled=not self.enabled)

    def to_dict(self) -> Dict[str, Any]:
        entry = CATALOG[self.kind]
        settings: Dict[str, Any] = {}
        for key, attr in entry.fields.items():
            value = getattr(self.settings, attr)
            settings[key] = value.value if isinstance(value, Enum) else value
        return {
            "id": self.id,
            "type": self.kind.value,
            "enabled": self.enabled,
            "settings": settings,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Operation":
        """Rebuild an operation from its persisted form.

        Missing settings keys fall back to the kind defaults; unknown keys
        are ignored.
        """
        kind = OperationKind.parse(payload["type"])
        entry = CATALOG[kind]
        op_id = payload["id"]
        if not isinstance(op_id, str):
            raise ValueError("Operation id must be a string")
        raw = payload.get("settings") or {}
        if not isinstance(raw, Mapping):
            raise ValueError("Operation settings must be an object")
        values = {attr: raw[key] for key, attr in entry.fields.items() if key in raw}
        enabled = payload.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("Operation 'enabled' flag must be a boolean")
        return cls(
            id=op_id,
            kind=kind,
            enabled=enabled,
            settings=entry.settings_type(**values),
        )


def create_operation(
    kind: Union[str, OperationKind],
    id_generator: Optional[IdGenerator] = None,
) -> Operation:
    """Create an enabled operation of ``kind`` with default settings."""
    kind = OperationKind.parse(kind)
    new_id = (id_generator or _default_ids)()
    return Operation(id=new_id, kind=kind, enabled=True, settings=default_settings(kind))


@dataclass(frozen=True)
class OperationChain:
    """Ordered collection of operations; order defines application order."""

    steps: Tuple[Operation, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        seen = set()
        for op in self.steps:
            if op.id in seen:
                raise ValueError(f"Operation chain contains duplicate id: {op.id}")
            seen.add(op.id)

    @classmethod
    def empty(cls) -> "OperationChain":
        return cls(steps=tuple())

    def __iter__(self) -> Iterator[Operation]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index: int) -> Operation:
        return self.steps[index]

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(op.id for op in self.steps)

    def index_of(self, operation_id: str) -> int:
        """Return the position of ``operation_id`` or -1 when absent."""
        for index, op in enumerate(self.steps):
            if op.id == operation_id:
                return index
        return -1

    def find(self, operation_id: str) -> Optional[Operation]:
        index = self.index_of(operation_id)
        return self.steps[index] if index >= 0 else None

    def append(self, operation: Operation) -> "OperationChain":
        return OperationChain(self.steps + (operation,))

    def replace(self, operation: Operation) -> "OperationChain":
        """Swap in ``operation`` for the step sharing its id."""
        return OperationChain(
            tuple(operation if op.id == operation.id else op for op in self.steps)
        )

    def remove(self, operation_id: str) -> "OperationChain":
        return OperationChain(tuple(op for op in self.steps if op.id != operation_id))

    def swap(self, first: int, second: int) -> "OperationChain":
        steps = list(self.steps)
        steps[first], steps[second] = steps[second], steps[first]
        return OperationChain(tuple(steps))

    def truncated(self, operation_id: Optional[str]) -> "OperationChain":
        """Return the chain up to and including ``operation_id``.

        Unknown or missing ids leave the chain untouched.
        """
        if operation_id is None:
            return self
        index = self.index_of(operation_id)
        if index < 0:
            return self
        return OperationChain(self.steps[: index + 1])

    def enabled_steps(self) -> Tuple[Operation, ...]:
        return tuple(op for op in self.steps if op.enabled)

    def to_list(self) -> list:
        return [op.to_dict() for op in self.steps]

    @classmethod
    def from_list(cls, payload) -> "OperationChain":
        return cls(tuple(Operation.from_dict(item) for item in payload))

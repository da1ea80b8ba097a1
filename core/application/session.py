"""Session controller orchestrating the engine, history and presets."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import PurePath
from typing import List, Literal, Optional, Tuple, Union

from config.settings import SessionConfig
from core.domain import transformations
from core.domain.history import HistoryInfo, HistoryManager, HistorySnapshot
from core.domain.operations import (
    IdGenerator,
    Operation,
    OperationChain,
    OperationKind,
    RandomIdGenerator,
    create_operation,
)
from core.domain.presets import Preset
from core.domain.text_stats import TextStats, calculate_text_stats
from core.domain.transformations import Diagnostic
from ports.preset_store_port import KeyValueStorePort, PresetRepository
from ports.text_io_port import ClipboardError, ClipboardPort, FileIOError, TextFilePort

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

INITIAL_STATE = "Initial state"
RESET_STATE = "Reset to initial state"


@dataclass(frozen=True)
class SessionStats:
    """Statistics of the input text and of the current output."""

    input: TextStats
    output: TextStats


class SessionController:
    """Holds the editable text and chain and keeps the output up to date.

    Every state-changing call recomputes the output and records a labelled
    snapshot in the history; undo and redo restore snapshots without
    recording new ones. Public methods are serialized by a single lock.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        *,
        store: Optional[KeyValueStorePort] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        self.config = config or SessionConfig()
        self._ids = id_generator or RandomIdGenerator()
        self._lock = threading.RLock()
        self._history = HistoryManager(self.config.history_limit)
        self._repository = (
            PresetRepository(store, key=self.config.presets_storage_key)
            if store is not None
            else None
        )
        self._presets: Tuple[Preset, ...] = (
            self._repository.load_all() if self._repository else ()
        )
        self._text = ""
        self._operations = OperationChain.empty()
        self._preview_up_to_id: Optional[str] = None
        self._output = ""
        self._diagnostics: Tuple[Diagnostic, ...] = ()
        self.last_error: Optional[Exception] = None
        self._history.push_state(self._text, self._operations, INITIAL_STATE)

    # read-only state

    @property
    def text(self) -> str:
        return self._text

    @property
    def operations(self) -> OperationChain:
        return self._operations

    @property
    def preview_up_to_id(self) -> Optional[str]:
        return self._preview_up_to_id

    @property
    def output(self) -> str:
        return self._output

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        """Recovered failures from the last recompute."""
        return self._diagnostics

    @property
    def presets(self) -> Tuple[Preset, ...]:
        return self._presets

    @property
    def enabled_count(self) -> int:
        return len(self._operations.enabled_steps())

    @property
    def preview_label(self) -> Optional[str]:
        if self._preview_up_to_id is None:
            return None
        operation = self._operations.find(self._preview_up_to_id)
        return operation.label if operation else None

    def history_info(self) -> HistoryInfo:
        return self._history.info()

    def history_descriptions(self) -> List[str]:
        return self._history.descriptions()

    def stats(self) -> SessionStats:
        with self._lock:
            return SessionStats(
                input=calculate_text_stats(self._text),
                output=calculate_text_stats(self._output),
            )

    # internals

    def _recompute(self) -> None:
        result = transformations.apply_chain(
            self._text, self._operations, self._preview_up_to_id
        )
        self._output = result.text
        self._diagnostics = result.diagnostics

    def _commit(self, text: str, operations: OperationChain, description: str) -> None:
        # computed first so a failing chain leaves the session untouched
        result = transformations.apply_chain(text, operations)
        self._text = text
        self._operations = operations
        self._preview_up_to_id = None
        self._output = result.text
        self._diagnostics = result.diagnostics
        self._history.push_state(text, operations, description)

    def _restore(self, snapshot: Optional[HistorySnapshot]) -> bool:
        if snapshot is None:
            return False
        self._text = snapshot.text
        self._operations = snapshot.operations
        self._preview_up_to_id = None
        self._recompute()
        return True

    def _persist_presets(self) -> None:
        if self._repository is not None:
            self._repository.save_all(self._presets)

    # mutations

    def set_text(self, text: str, description: str = "Input text changed") -> None:
        """Replace the input text; unchanged text records nothing."""
        with self._lock:
            if text == self._text:
                return
            self._commit(text, self._operations, description)

    def add_operation(self, kind: Union[str, OperationKind]) -> Operation:
        with self._lock:
            operation = create_operation(kind, self._ids)
            self._commit(
                self._text,
                self._operations.append(operation),
                f"Added operation: {operation.label}",
            )
            return operation

    def update_operation(self, operation: Operation) -> bool:
        """Replace the operation sharing ``operation.id``; unknown ids are ignored."""
        with self._lock:
            if self._operations.find(operation.id) is None:
                return False
            self._commit(
                self._text,
                self._operations.replace(operation),
                f"Updated operation: {operation.label}",
            )
            return True

    def toggle_operation(self, operation_id: str) -> bool:
        with self._lock:
            operation = self._operations.find(operation_id)
            if operation is None:
                return False
            return self.update_operation(operation.toggled())

    def remove_operation(self, operation_id: str) -> bool:
        with self._lock:
            operation = self._operations.find(operation_id)
            if operation is None:
                return False
            self._commit(
                self._text,
                self._operations.remove(operation_id),
                f"Removed operation: {operation.label}",
            )
            return True

    def move_operation(self, operation_id: str, direction: Direction) -> bool:
        """Swap an operation with its neighbour; edge moves are no-ops."""
        if direction not in ("up", "down"):
            raise ValueError(f"Unknown direction: {direction!r}")
        with self._lock:
            index = self._operations.index_of(operation_id)
            if index < 0:
                return False
            target = index - 1 if direction == "up" else index + 1
            if not 0 <= target < len(self._operations):
                return False
            self._commit(
                self._text,
                self._operations.swap(index, target),
                "Reordered operations",
            )
            return True

    def toggle_preview(self, operation_id: str) -> Optional[str]:
        """Preview the chain up to ``operation_id``, or stop previewing it."""
        with self._lock:
            if self._operations.find(operation_id) is None:
                return self._preview_up_to_id
            if self._preview_up_to_id == operation_id:
                self._preview_up_to_id = None
            else:
                self._preview_up_to_id = operation_id
            self._recompute()
            return self._preview_up_to_id

    def reset(self) -> None:
        """Drop text, chain and history, keeping the stored presets."""
        with self._lock:
            self._text = ""
            self._operations = OperationChain.empty()
            self._preview_up_to_id = None
            self._recompute()
            self._history.clear()
            self._history.push_state(self._text, self._operations, RESET_STATE)

    def undo(self) -> bool:
        with self._lock:
            return self._restore(self._history.undo())

    def redo(self) -> bool:
        with self._lock:
            return self._restore(self._history.redo())

    # presets

    def save_preset(self, name: str) -> Preset:
        with self._lock:
            preset = Preset.create(name, self._operations, id_generator=self._ids)
            self._presets = self._presets + (preset,)
            self._persist_presets()
            logger.info("Saved preset %r with %d operations", preset.name, len(preset.operations))
            return preset

    def load_preset(self, preset_id: str) -> bool:
        with self._lock:
            preset = self._find_preset(preset_id)
            if preset is None:
                return False
            self._commit(
                self._text,
                OperationChain(preset.operations.steps),
                f"Loaded preset: {preset.name}",
            )
            return True

    def delete_preset(self, preset_id: str) -> bool:
        with self._lock:
            if self._find_preset(preset_id) is None:
                return False
            self._presets = tuple(p for p in self._presets if p.id != preset_id)
            self._persist_presets()
            return True

    def _find_preset(self, preset_id: str) -> Optional[Preset]:
        for preset in self._presets:
            if preset.id == preset_id:
                return preset
        return None

    # external collaborators

    def load_file(self, path: str, reader: TextFilePort) -> bool:
        """Import ``path`` as the input text; failures keep the prior text."""
        with self._lock:
            try:
                content = reader.read_text(path)
            except FileIOError as exc:
                logger.warning("File import failed: %s", exc)
                self.last_error = exc
                return False
            self.last_error = None
            self._commit(content, self._operations, f"Loaded file: {PurePath(path).name}")
            return True

    def export_output(self, writer: TextFilePort, path: Optional[str] = None) -> bool:
        with self._lock:
            target = path or self.config.export_filename
            try:
                writer.write_text(target, self._output)
            except FileIOError as exc:
                logger.warning("File export failed: %s", exc)
                self.last_error = exc
                return False
            self.last_error = None
            return True

    def copy_output(self, clipboard: ClipboardPort) -> bool:
        with self._lock:
            try:
                clipboard.write_text(self._output)
            except ClipboardError as exc:
                logger.warning("Copy to clipboard failed: %s", exc)
                self.last_error = exc
                return False
            self.last_error = None
            return True

    def paste_text(self, clipboard: ClipboardPort) -> bool:
        with self._lock:
            try:
                content = clipboard.read_text()
            except ClipboardError as exc:
                logger.warning("Paste from clipboard failed: %s", exc)
                self.last_error = exc
                return False
            self.last_error = None
            self.set_text(content, "Pasted text")
            return True

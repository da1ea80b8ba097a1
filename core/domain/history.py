"""Bounded undo/redo log of (text, operation chain) snapshots."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

import pandas as pd

from core.domain.operations import OperationChain

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 50


class HistoryError(ValueError):
    """Raised when the history manager is misconfigured."""


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """Immutable record of the session state at one point in time."""

    text: str
    operations: OperationChain
    timestamp: pd.Timestamp
    description: str


@dataclass(frozen=True, slots=True)
class HistoryInfo:
    """Read-only view of the log position.

    ``current_position`` is 1-based; an empty log reports 0.
    """

    current_position: int
    total_count: int
    can_undo: bool
    can_redo: bool


class HistoryManager:
    """Branch-discarding undo/redo log with a fixed capacity.

    Pushing after an undo drops the redo branch. When the log grows past
    ``max_size`` the oldest snapshot is evicted and the index shifts so that
    it keeps pointing at the same snapshot. Snapshots and chains are frozen
    value objects, so stored entries cannot be altered by callers.
    """

    def __init__(self, max_size: int = DEFAULT_HISTORY_SIZE) -> None:
        if not isinstance(max_size, int) or max_size < 1:
            raise HistoryError("History size must be a positive integer")
        self.max_size = max_size
        self._snapshots: List[HistorySnapshot] = []
        self._index = -1
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def push_state(self, text: str, chain: OperationChain, description: str) -> HistorySnapshot:
        """Record a new snapshot and make it current."""
        with self._lock:
            del self._snapshots[self._index + 1 :]
            snapshot = HistorySnapshot(
                text=text,
                operations=OperationChain(chain.steps),
                timestamp=pd.Timestamp.now(tz="UTC"),
                description=description,
            )
            self._snapshots.append(snapshot)
            self._index += 1
            if len(self._snapshots) > self.max_size:
                self._snapshots.pop(0)
                self._index -= 1
            logger.debug(
                "History push %r (%d/%d)", description, self._index + 1, len(self._snapshots)
            )
            return snapshot

    def undo(self) -> Optional[HistorySnapshot]:
        """Step back and return the now-current snapshot, or None."""
        with self._lock:
            if not self.can_undo:
                return None
            self._index -= 1
            return self._snapshots[self._index]

    def redo(self) -> Optional[HistorySnapshot]:
        """Step forward and return the now-current snapshot, or None."""
        with self._lock:
            if not self.can_redo:
                return None
            self._index += 1
            return self._snapshots[self._index]

    def current(self) -> Optional[HistorySnapshot]:
        with self._lock:
            if self._index < 0:
                return None
            return self._snapshots[self._index]

    def clear(self) -> None:
        with self._lock:
            self._snapshots = []
            self._index = -1

    def info(self) -> HistoryInfo:
        with self._lock:
            return HistoryInfo(
                current_position=self._index + 1,
                total_count=len(self._snapshots),
                can_undo=self.can_undo,
                can_redo=self.can_redo,
            )

    def descriptions(self) -> List[str]:
        """Return snapshot descriptions, oldest first."""
        with self._lock:
            return [snapshot.description for snapshot in self._snapshots]

"""Character, word and line statistics for raw text."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass

import pandas as pd

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True, slots=True)
class TextStats:
    """Counts reported for a piece of raw text."""

    characters: int = 0
    characters_without_spaces: int = 0
    lines: int = 0
    words: int = 0


@dataclass(frozen=True, slots=True)
class StatsDelta:
    """Difference between two :class:`TextStats` (after minus before)."""

    characters: int
    words: int
    lines: int


def calculate_text_stats(text: str) -> TextStats:
    """Count characters, non-whitespace characters, lines and words.

    Empty text reports zero lines, unlike the engine which treats it as a
    single empty line.
    """
    if not text:
        return TextStats()
    return TextStats(
        characters=len(text),
        characters_without_spaces=len(_WHITESPACE.sub("", text)),
        lines=text.count("\n") + 1,
        words=len(text.split()),
    )


def compare_stats(before: TextStats, after: TextStats) -> StatsDelta:
    return StatsDelta(
        characters=after.characters - before.characters,
        words=after.words - before.words,
        lines=after.lines - before.lines,
    )


def _count(value: int, noun: str) -> str:
    return f"{value} {noun}" if value == 1 else f"{value} {noun}s"


def format_stats(stats: TextStats) -> str:
    return ", ".join(
        [
            _count(stats.characters, "character"),
            _count(stats.words, "word"),
            _count(stats.lines, "line"),
        ]
    )


def stats_table(before: TextStats, after: TextStats) -> pd.DataFrame:
    """Return a metric-indexed frame with ``before``, ``after`` and ``delta`` columns."""
    frame = pd.DataFrame({"before": asdict(before), "after": asdict(after)})
    frame.index.name = "metric"
    frame["delta"] = frame["after"] - frame["before"]
    return frame.astype("int64")

"""Timestamped lyric units and the per-frame active unit lookup."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .config import PLACEHOLDER_GLYPHS


class TimelineValidationError(ValueError):
    """Raised when a unit sequence has bad or unordered timestamps."""


@dataclass(frozen=True)
class TimelineUnit:
    text: str
    start_time: float
    end_time: float
    index: int

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def contains(self, position: float) -> bool:
        return self.start_time <= position < self.end_time


def is_placeholder(text: str) -> bool:
    """True for glyphs that stand for a gap rather than something to render."""
    return text in PLACEHOLDER_GLYPHS or not text.strip()


def validate_units(units: Sequence[TimelineUnit], label: str = "unit") -> None:
    """Fail fast on malformed timestamps.

    Checks finite times, ``start_time <= end_time``, sequential ``index``
    values and non-decreasing start times.
    """
    prev_start = -math.inf
    for i, u in enumerate(units):
        if not (math.isfinite(u.start_time) and math.isfinite(u.end_time)):
            raise TimelineValidationError(f"{label} {i}: non-finite timestamp")
        if u.start_time > u.end_time:
            raise TimelineValidationError(
                f"{label} {i} ({u.text!r}): start {u.start_time} > end {u.end_time}"
            )
        if u.start_time < prev_start:
            raise TimelineValidationError(
                f"{label} {i} ({u.text!r}): start {u.start_time} before previous {prev_start}"
            )
        if u.index != i:
            raise TimelineValidationError(f"{label} {i}: index {u.index} out of sequence")
        prev_start = u.start_time


def build_units(rows: Iterable[Tuple[str, float, float]], label: str = "unit") -> Tuple[TimelineUnit, ...]:
    """Build a validated, immutable unit sequence from ``(text, start, end)`` rows."""
    units = tuple(
        TimelineUnit(str(text), float(start), float(end), i)
        for i, (text, start, end) in enumerate(rows)
    )
    validate_units(units, label)
    return units


class TimelineIndex:
    """Binary-search lookup of the active unit at a playback position.

    The index holds no per-call state, so lookups after a seek in either
    direction are as correct as sequential ones.
    """

    def __init__(self, units: Sequence[TimelineUnit] = ()):
        self.units: Tuple[TimelineUnit, ...] = tuple(units)
        validate_units(self.units)
        self._starts = np.array([u.start_time for u in self.units], dtype=np.float64)
        # nearest renderable unit at or before each position, -1 if none
        self._renderable = np.full(len(self.units), -1, dtype=np.int64)
        last = -1
        for i, u in enumerate(self.units):
            if not is_placeholder(u.text):
                last = i
            self._renderable[i] = last

    def __len__(self) -> int:
        return len(self.units)

    def find_active_index(self, position: float) -> int:
        """Return the index of the last started renderable unit, or ``-1``.

        The search boundary is the first unit starting after ``position``;
        the unit just before it is the candidate, and placeholders are
        skipped backwards from there.
        """
        if not self.units or position is None or not math.isfinite(position):
            return -1
        boundary = int(np.searchsorted(self._starts, position, side="right"))
        candidate = boundary - 1
        if candidate < 0:
            return -1
        return int(self._renderable[candidate])

    def unit_at(self, index: int) -> Optional[TimelineUnit]:
        if 0 <= index < len(self.units):
            return self.units[index]
        return None

    def text_at(self, position: float, default: str = "") -> str:
        unit = self.unit_at(self.find_active_index(position))
        return unit.text if unit is not None else default

"""Normalized pointer input, sampled once per frame."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import POINTER_SETTLE_MS


@dataclass(frozen=True)
class PointerSample:
    x: float = 0.0
    y: float = 0.0
    active: bool = False


IDLE_POINTER = PointerSample()


def normalize_client(client_x: float, client_y: float, width: float, height: float) -> Tuple[float, float]:
    """Map client pixels to ``[-1, 1]`` with ``y`` pointing up."""
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    return (client_x / width) * 2 - 1, -(client_y / height) * 2 + 1


class PointerSampler:
    """Collects pointer events and hands out one sample per frame.

    Releasing the pointer does not deactivate it straight away: the release
    is held for ``settle_ms`` and applied by the first ``sample`` at or past
    that deadline.  A move before the deadline cancels the pending release.
    """

    def __init__(self, settle_ms: float = POINTER_SETTLE_MS):
        self.settle_ms = settle_ms
        self._x = 0.0
        self._y = 0.0
        self._active = False
        self._release_at: Optional[float] = None

    def move(self, x: float, y: float, now_ms: float) -> None:
        if not (math.isfinite(x) and math.isfinite(y)):
            return
        self._x = x
        self._y = y
        self._active = True
        self._release_at = None

    def move_client(self, client_x: float, client_y: float, width: float, height: float, now_ms: float) -> None:
        x, y = normalize_client(client_x, client_y, width, height)
        self.move(x, y, now_ms)

    def release(self, now_ms: float) -> None:
        if self._active:
            self._release_at = now_ms + self.settle_ms

    def sample(self, now_ms: float) -> PointerSample:
        if self._release_at is not None and now_ms >= self._release_at:
            self._active = False
            self._release_at = None
        return PointerSample(self._x, self._y, self._active)

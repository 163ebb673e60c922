"""Easing, smoothing and deterministic jitter used by the camera and floaters."""
from __future__ import annotations

import math
import random
from typing import Sequence, Tuple

import numpy as np


def ease_in_out(t: float) -> float:
    """Cosine ease-in-out for ``t`` in [0,1]."""
    return 0.5 - 0.5 * math.cos(math.pi * t)


def ease_in(t: float) -> float:
    """Cosine ease-in for ``t`` in [0,1]."""
    return 1 - math.cos(0.5 * math.pi * t)


def ease_out(t: float) -> float:
    """Cosine ease-out for ``t`` in [0,1]."""
    return math.sin(0.5 * math.pi * t)


def get_ease_fn(name: str):
    return {
        "linear": lambda t: t,
        "in": ease_in,
        "out": ease_out,
        "inout": ease_in_out,
    }.get(name, ease_out)


def progress(elapsed: float, duration: float) -> float:
    """Return ``elapsed / duration`` clamped to ``[0, 1]``.

    A non-positive ``duration`` counts as already finished.
    """
    if duration <= 0 or not math.isfinite(elapsed):
        return 1.0
    return max(0.0, min(1.0, elapsed / duration))


def lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a + (b - a) * t


def smoothing_factor(dt: float, smooth_time: float) -> float:
    """Fraction of the remaining distance covered in ``dt``.

    Parameters
    ----------
    dt:
        Elapsed time since the previous step, same unit as ``smooth_time``.
    smooth_time:
        Time constant of the exponential approach. ``<= 0`` snaps.
    """
    if smooth_time <= 0:
        return 1.0
    if dt <= 0 or not math.isfinite(dt):
        return 0.0
    return 1.0 - math.exp(-dt / smooth_time)


def clamp_to_unit_disc(x: float, y: float) -> Tuple[float, float]:
    """Scale ``(x, y)`` down onto the unit disc when it lies outside."""
    if not (math.isfinite(x) and math.isfinite(y)):
        return 0.0, 0.0
    r = math.hypot(x, y)
    if r > 1.0:
        return x / r, y / r
    return x, y


def seeded_point(
    seed: int,
    key: int,
    ranges: Sequence[Tuple[float, float]],
) -> Tuple[float, ...]:
    """Return a deterministic point with one coordinate per ``ranges`` entry.

    ``seed`` selects the layout, ``key`` the element within it.
    """
    rng = random.Random((seed << 16) ^ key)
    return tuple(rng.uniform(lo, hi) for lo, hi in ranges)


def seeded_tilt(seed: int, key: int) -> float:
    """Small deterministic roll angle in radians, within ``[-1/8, 1/8]``."""
    rng = random.Random((seed << 16) ^ key ^ 0x5EED)
    return (0.5 - rng.random()) / 4

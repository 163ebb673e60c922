"""Mood colour utilities.

Palette corners are given as sRGB hex strings and blended in linear light so
that the midpoint between two saturated corners does not turn muddy.  The
conversion formulae follow the sRGB standard and operate on NumPy arrays.
"""

from __future__ import annotations

import math
from typing import Dict, Tuple

import numpy as np
from PIL import ImageColor

from .config import MOOD_PALETTE, SKY_TINT

RGB = Tuple[float, float, float]


def srgb_to_linear(arr: np.ndarray) -> np.ndarray:
    """Convert sRGB values in ``[0, 1]`` to linear light floats."""
    arr = np.clip(np.asarray(arr, dtype=np.float64), 0.0, 1.0)
    return np.where(arr <= 0.04045, arr / 12.92, ((arr + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(lin: np.ndarray) -> np.ndarray:
    """Convert linear light floats back to sRGB values in ``[0, 1]``."""
    lin = np.clip(np.asarray(lin, dtype=np.float64), 0.0, 1.0)
    srgb = np.where(lin <= 0.0031308, lin * 12.92, 1.055 * np.power(lin, 1 / 2.4) - 0.055)
    return np.clip(srgb, 0.0, 1.0)


def parse_color(value: str) -> np.ndarray:
    """Return ``value`` (any colour string Pillow understands) as sRGB floats."""
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError as e:
        raise ValueError(f"invalid colour: {value}") from e
    return np.array(rgb[:3], dtype=np.float64) / 255.0


def _unit(v: float) -> float:
    if not math.isfinite(v):
        return 0.5
    return (max(-1.0, min(1.0, v)) + 1.0) / 2.0


class MoodPalette:
    """Bilinear blend of four corner colours over the valence/arousal square.

    Parameters
    ----------
    corners:
        Mapping ``(valence_sign, arousal_sign) -> colour`` with signs in
        ``{-1, 1}``.  Missing corners raise ``ValueError``.
    """

    def __init__(self, corners: Dict[Tuple[int, int], str] | None = None):
        corners = corners or MOOD_PALETTE
        missing = {(-1, -1), (1, -1), (-1, 1), (1, 1)} - set(corners)
        if missing:
            raise ValueError(f"mood palette missing corners: {sorted(missing)}")
        self._lin = {k: srgb_to_linear(parse_color(v)) for k, v in corners.items()}

    def blend(self, valence: float, arousal: float) -> RGB:
        """Return the sRGB mood colour for ``valence``/``arousal`` in ``[-1, 1]``.

        Non-finite inputs fall back to the neutral centre.
        """
        u = _unit(valence)
        w = _unit(arousal)
        low = self._lin[(-1, -1)] * (1 - u) + self._lin[(1, -1)] * u
        high = self._lin[(-1, 1)] * (1 - u) + self._lin[(1, 1)] * u
        out = linear_to_srgb(low * (1 - w) + high * w)
        return tuple(float(c) for c in out)


def sky_color(mood: RGB, tint: float = SKY_TINT) -> RGB:
    """Mood colour lifted by a flat grey, clamped to ``[0, 1]``."""
    arr = np.clip(np.asarray(mood, dtype=np.float64) + tint, 0.0, 1.0)
    return tuple(float(c) for c in arr)

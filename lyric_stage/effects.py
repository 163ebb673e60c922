"""Amplitude driven text effects."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from .config import (
    BASE_TEXT_SIZE,
    MAX_TEXT_SCALE,
    MIN_TEXT_SCALE,
    POLAROID_TEXT_SIZE,
    STRETCH_DECAY,
    STRETCH_GAIN,
    STRETCH_LIMIT,
)


@dataclass(frozen=True)
class EffectState:
    text_scale: float = 1.0
    previous_text_scale: float = 1.0
    stretch: float = 0.0


NEUTRAL_STATE = EffectState()


@dataclass(frozen=True)
class TextModulation:
    font_size: float
    letter_spacing: float
    scale: Tuple[float, float]


class EffectGenerator:
    """Per-frame text scale and stretch with single-frame memory.

    ``step`` must be called once per frame in playback order.  Only the
    previous ``text_scale`` is kept, so a seek produces one stretch transient
    and nothing else.
    """

    def __init__(
        self,
        min_scale: float = MIN_TEXT_SCALE,
        max_scale: float = MAX_TEXT_SCALE,
        gain: float = STRETCH_GAIN,
        decay: float = STRETCH_DECAY,
        limit: float = STRETCH_LIMIT,
    ):
        if not (0 < min_scale <= max_scale):
            raise ValueError("need 0 < min_scale <= max_scale")
        if not (0 < decay < 1):
            raise ValueError("decay must be within (0, 1)")
        self.min_scale = min_scale
        self.max_scale = max_scale
        self.gain = gain
        self.decay = decay
        self.limit = abs(limit)
        self.state = NEUTRAL_STATE

    def reset(self) -> None:
        self.state = NEUTRAL_STATE

    def scale_for(self, amplitude: float, max_amplitude: float) -> float:
        """Log-compressed text scale for an amplitude sample."""
        if (
            max_amplitude is None
            or not math.isfinite(max_amplitude)
            or max_amplitude <= 0
            or amplitude is None
            or not math.isfinite(amplitude)
        ):
            ratio = 0.0
        else:
            ratio = max(0.0, min(1.0, amplitude / max_amplitude))
        span = self.max_scale - self.min_scale
        return self.min_scale + span * math.log(ratio * self.max_scale + 1) / math.log(self.max_scale + 1)

    def step(self, amplitude: float, max_amplitude: float) -> EffectState:
        previous = self.state.text_scale
        scale = self.scale_for(amplitude, max_amplitude)
        stretch = self.state.stretch + (scale - previous) * self.gain
        stretch *= self.decay
        stretch = max(-self.limit, min(self.limit, stretch))
        self.state = EffectState(scale, previous, stretch)
        return self.state


def lyric_modulation(state: EffectState, base_size: float = BASE_TEXT_SIZE) -> TextModulation:
    """Big lyric text: cubic stretch keeps small values nearly invisible."""
    s3 = state.stretch ** 3
    return TextModulation(
        font_size=base_size * state.text_scale,
        letter_spacing=state.stretch / 10,
        scale=(1 + s3, 1 - s3),
    )


def slot_modulation(state: EffectState, base_size: float = POLAROID_TEXT_SIZE) -> TextModulation:
    # exaggerated, polaroid text is small
    return TextModulation(
        font_size=base_size * state.text_scale ** 2,
        letter_spacing=0.0,
        scale=(1 + state.stretch / 5, 1 - state.stretch / 5),
    )

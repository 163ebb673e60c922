"""Floating characters drifting past the window."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np

from .config import (
    FLOAT_AXIS,
    FLOAT_BOUNDS,
    FLOAT_ENTRY_X,
    FLOAT_EXIT_X,
    FLOAT_LEAD_MS,
    FLOAT_SCALE,
    FLOAT_Y_RANGE,
    FLOAT_Z_RANGE,
)
from .motion import seeded_point, seeded_tilt
from .timeline import TimelineUnit, is_placeholder

Vec3 = Tuple[float, float, float]


@dataclass
class FloatingElement:
    text: str
    spawn_time: float
    start_position: np.ndarray
    velocity: np.ndarray
    current_position: np.ndarray
    visible: bool = False
    rotation_z: float = 0.0


@dataclass(frozen=True)
class FloatingView:
    text: str
    position: Vec3
    visible: bool
    rotation_z: float


@dataclass(frozen=True)
class Bounds:
    """Spatial window along one axis."""

    axis: int = FLOAT_AXIS
    low: float = FLOAT_BOUNDS[0]
    high: float = FLOAT_BOUNDS[1]

    def contains(self, point: np.ndarray) -> bool:
        v = float(point[self.axis])
        return self.low <= v <= self.high


def build_floating_elements(
    units: Sequence[TimelineUnit],
    seed: int = 0,
    entry_x: float = FLOAT_ENTRY_X,
    exit_x: float = FLOAT_EXIT_X,
    y_range: Tuple[float, float] = FLOAT_Y_RANGE,
    z_range: Tuple[float, float] = FLOAT_Z_RANGE,
) -> List[FloatingElement]:
    """Create one element per renderable unit.

    Start and exit points are drawn per unit from ``seed`` so a reload of the
    same song produces the same layout.  The velocity is the unit vector from
    start to exit.
    """
    elements: List[FloatingElement] = []
    for unit in units:
        if is_placeholder(unit.text):
            continue
        y0, z0, y1, z1 = seeded_point(seed, unit.index, [y_range, z_range, y_range, z_range])
        start = np.array([entry_x, y0, z0], dtype=np.float64)
        end = np.array([exit_x, y1, z1], dtype=np.float64)
        delta = end - start
        dist = float(np.linalg.norm(delta))
        velocity = delta / dist if dist > 1e-9 else np.zeros(3)
        elements.append(
            FloatingElement(
                text=unit.text,
                spawn_time=unit.start_time,
                start_position=start,
                velocity=velocity,
                current_position=start.copy(),
                rotation_z=seeded_tilt(seed, unit.index),
            )
        )
    return elements


class FloatingTracker:
    """Linear extrapolation of floating elements from their spawn time.

    Elements are never dropped; ``update`` only moves them and flips
    ``visible``, so an element that left the window can come back after a
    backward seek without being rebuilt.
    """

    def __init__(
        self,
        elements: Sequence[FloatingElement] = (),
        lead_ms: float = FLOAT_LEAD_MS,
        scale: float = FLOAT_SCALE,
        bounds: Bounds | None = None,
    ):
        self.elements = list(elements)
        self.lead_ms = lead_ms
        self.scale = scale
        self.bounds = bounds or Bounds()

    def position_at(self, element: FloatingElement, position: float) -> np.ndarray:
        travel = max(0.0, position - element.spawn_time + self.lead_ms) * self.scale
        return element.start_position + element.velocity * travel

    def update(self, position: float, predicate: Callable[[], bool]) -> List[FloatingView]:
        facing = bool(predicate())
        for element in self.elements:
            element.current_position = self.position_at(element, position)
            element.visible = facing and self.bounds.contains(element.current_position)
        return self.views()

    def views(self) -> List[FloatingView]:
        return [
            FloatingView(
                text=e.text,
                position=tuple(float(c) for c in e.current_position),
                visible=e.visible,
                rotation_z=e.rotation_z,
            )
            for e in self.elements
        ]

    @property
    def visible_count(self) -> int:
        return sum(1 for e in self.elements if e.visible)

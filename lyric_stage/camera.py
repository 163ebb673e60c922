"""Named camera viewpoints with eased transitions and pointer parallax.

Orientation is a pair ``(azimuth, polar)`` in radians.  Parallax is kept as
a separate additive offset on top of the base pose; the base pose itself
only ever moves along a viewpoint transition.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .config import (
    CAMERA_SMOOTH_MS,
    CAMERA_TRANSITION_MS,
    MOVEMENT_STRENGTH,
    ROTATE_STRENGTH,
)
from .motion import clamp_to_unit_disc, get_ease_fn, lerp, progress, smoothing_factor
from .pointer import IDLE_POINTER, PointerSample


@dataclass(frozen=True)
class Viewpoint:
    name: str
    position: Tuple[float, float, float]
    orientation: Tuple[float, float]
    text_anchor: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    shows_lyrics: bool = False
    shows_floating: bool = False

    def pose(self) -> Tuple[np.ndarray, np.ndarray]:
        return (
            np.array(self.position, dtype=np.float64),
            np.array(self.orientation, dtype=np.float64),
        )


@dataclass(frozen=True)
class CameraPose:
    position: Tuple[float, float, float]
    orientation: Tuple[float, float]
    viewpoint: str
    transition: float = 1.0


@dataclass
class CameraState:
    viewpoint_index: int = 0
    offset_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    offset_orientation: np.ndarray = field(default_factory=lambda: np.zeros(2))


class CameraStateMachine:
    """Move between a fixed list of viewpoints.

    ``go_left`` and ``go_right`` follow the list order and stop at either
    end.  A new transition request replaces the one in flight, starting
    from wherever the camera is at that moment.
    """

    def __init__(
        self,
        viewpoints: Sequence[Viewpoint],
        initial: Union[int, str] = 0,
        transition_ms: float = CAMERA_TRANSITION_MS,
        smooth_ms: float = CAMERA_SMOOTH_MS,
        movement_strength: float = MOVEMENT_STRENGTH,
        rotate_strength: float = ROTATE_STRENGTH,
        ease: str = "out",
    ):
        if not viewpoints:
            raise ValueError("at least one viewpoint is required")
        self.viewpoints = tuple(viewpoints)
        self._by_name: Dict[str, int] = {}
        for i, vp in enumerate(self.viewpoints):
            if vp.name in self._by_name:
                raise ValueError(f"duplicate viewpoint name: {vp.name}")
            self._by_name[vp.name] = i
        self.transition_ms = transition_ms
        self.smooth_ms = smooth_ms
        self.movement_strength = movement_strength
        self.rotate_strength = rotate_strength
        self._ease = get_ease_fn(ease)

        self.state = CameraState(viewpoint_index=self.resolve(initial))
        self._from_position, self._from_orientation = self.current.pose()
        self._transition_start: Optional[float] = None
        self._last_now: Optional[float] = None

    # -- lookup -----------------------------------------------------------
    def resolve(self, target: Union[int, str]) -> int:
        if isinstance(target, str):
            if target not in self._by_name:
                raise KeyError(f"unknown viewpoint: {target}")
            return self._by_name[target]
        if not 0 <= target < len(self.viewpoints):
            raise KeyError(f"viewpoint index out of range: {target}")
        return int(target)

    @property
    def index(self) -> int:
        return self.state.viewpoint_index

    @property
    def current(self) -> Viewpoint:
        return self.viewpoints[self.state.viewpoint_index]

    def in_transition(self, now_ms: float) -> bool:
        return self._transition_progress(now_ms) < 1.0

    # -- navigation -------------------------------------------------------
    def go_to_viewpoint(self, target: Union[int, str], now_ms: float) -> Viewpoint:
        index = self.resolve(target)
        self._from_position, self._from_orientation = self._base_at(now_ms)
        self._transition_start = now_ms
        if index != self.state.viewpoint_index:
            logging.debug(
                "camera: %s -> %s", self.current.name, self.viewpoints[index].name
            )
        self.state.viewpoint_index = index
        return self.current

    def go_left(self, now_ms: float) -> bool:
        if self.index == 0:
            return False
        self.go_to_viewpoint(self.index - 1, now_ms)
        return True

    def go_right(self, now_ms: float) -> bool:
        if self.index == len(self.viewpoints) - 1:
            return False
        self.go_to_viewpoint(self.index + 1, now_ms)
        return True

    # -- per frame --------------------------------------------------------
    def _transition_progress(self, now_ms: float) -> float:
        if self._transition_start is None:
            return 1.0
        return progress(now_ms - self._transition_start, self.transition_ms)

    def _base_at(self, now_ms: float) -> Tuple[np.ndarray, np.ndarray]:
        target_pos, target_ori = self.current.pose()
        p = self._transition_progress(now_ms)
        if p >= 1.0:
            return target_pos, target_ori
        e = self._ease(p)
        return (
            lerp(self._from_position, target_pos, e),
            lerp(self._from_orientation, target_ori, e),
        )

    def parallax_goal(self, pointer: PointerSample) -> Tuple[np.ndarray, np.ndarray]:
        """Offset the pointer asks for, before smoothing.

        The pointer vector is clamped to the unit disc, so the position goal
        never exceeds ``movement_strength`` and each orientation component
        never exceeds ``rotate_strength``.
        """
        if not pointer.active:
            return np.zeros(3), np.zeros(2)
        x, y = clamp_to_unit_disc(pointer.x, pointer.y)
        azimuth = self.current.orientation[0]
        right = np.array([math.cos(azimuth), 0.0, -math.sin(azimuth)])
        up = np.array([0.0, 1.0, 0.0])
        position = (right * x + up * y) * self.movement_strength
        orientation = np.array([-x, -y]) * self.rotate_strength
        return position, orientation

    def update(self, pointer: PointerSample | None, now_ms: float) -> CameraPose:
        pointer = pointer or IDLE_POINTER
        dt = 0.0 if self._last_now is None else max(0.0, now_ms - self._last_now)
        self._last_now = now_ms

        base_pos, base_ori = self._base_at(now_ms)
        p = self._transition_progress(now_ms)
        if p >= 1.0:
            self._transition_start = None

        if p < 1.0:
            goal_pos, goal_ori = np.zeros(3), np.zeros(2)
        else:
            goal_pos, goal_ori = self.parallax_goal(pointer)

        k = smoothing_factor(dt, self.smooth_ms)
        st = self.state
        st.offset_position = st.offset_position + (goal_pos - st.offset_position) * k
        st.offset_orientation = st.offset_orientation + (goal_ori - st.offset_orientation) * k

        pos = base_pos + st.offset_position
        ori = base_ori + st.offset_orientation
        return CameraPose(
            position=tuple(float(c) for c in pos),
            orientation=tuple(float(c) for c in ori),
            viewpoint=self.current.name,
            transition=p,
        )

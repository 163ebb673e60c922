import math

import numpy as np
import pytest

from lyric_stage.camera import CameraStateMachine, Viewpoint
from lyric_stage.pointer import PointerSample

VIEWS = [
    Viewpoint("a", (0.0, 0.0, 0.0), (0.0, 0.0)),
    Viewpoint("b", (10.0, 0.0, 0.0), (1.0, 0.0)),
    Viewpoint("c", (20.0, 0.0, 0.0), (2.0, 0.0)),
]


def _camera(**kw):
    kw.setdefault("transition_ms", 1000)
    kw.setdefault("smooth_ms", 100)
    kw.setdefault("movement_strength", 0.5)
    kw.setdefault("rotate_strength", 0.05)
    return CameraStateMachine(VIEWS, **kw)


def test_initial_pose_is_viewpoint():
    cam = _camera()
    pose = cam.update(None, 0)
    assert pose.position == (0.0, 0.0, 0.0)
    assert pose.viewpoint == "a"
    assert pose.transition == 1.0


def test_eased_transition():
    cam = _camera()
    cam.update(None, 0)
    cam.go_to_viewpoint("b", 0)
    mid = cam.update(None, 500)
    assert mid.position[0] == pytest.approx(10 * math.sin(math.pi / 4))
    assert mid.orientation[0] == pytest.approx(math.sin(math.pi / 4))
    assert cam.in_transition(500)
    end = cam.update(None, 1000)
    assert end.position[0] == pytest.approx(10.0)
    assert not cam.in_transition(1000)


def test_new_target_replaces_in_flight_transition():
    cam = _camera()
    cam.update(None, 0)
    cam.go_to_viewpoint("b", 0)
    cam.update(None, 500)
    cam.go_to_viewpoint("c", 500)
    same = cam.update(None, 500)
    assert same.position[0] == pytest.approx(10 * math.sin(math.pi / 4))
    assert cam.update(None, 1500).position[0] == pytest.approx(20.0)
    assert cam.current.name == "c"


def test_left_right_clamped():
    cam = _camera()
    assert cam.go_left(0) is False
    assert cam.go_right(0) is True
    assert cam.go_right(0) is True
    assert cam.index == 2
    assert cam.go_right(0) is False
    assert cam.index == 2
    assert cam.go_left(0) is True
    assert cam.current.name == "b"


def test_unknown_and_duplicate_viewpoints():
    cam = _camera()
    with pytest.raises(KeyError):
        cam.go_to_viewpoint("nowhere", 0)
    with pytest.raises(KeyError):
        cam.go_to_viewpoint(7, 0)
    with pytest.raises(ValueError):
        CameraStateMachine([VIEWS[0], VIEWS[0]])
    with pytest.raises(ValueError):
        CameraStateMachine([])


def test_pointer_outside_disc_is_rescaled():
    cam = _camera()
    pos, ori = cam.parallax_goal(PointerSample(2.0, 2.0, True))
    assert np.linalg.norm(pos) == pytest.approx(0.5)
    assert np.linalg.norm(ori) == pytest.approx(0.05)
    inside, _ = cam.parallax_goal(PointerSample(0.3, 0.4, True))
    assert np.linalg.norm(inside) == pytest.approx(0.25)


def test_zero_and_invalid_pointer_vectors():
    cam = _camera()
    pos, ori = cam.parallax_goal(PointerSample(0.0, 0.0, True))
    assert not pos.any() and not ori.any()
    pos, ori = cam.parallax_goal(PointerSample(float("nan"), 1.0, True))
    assert np.all(np.isfinite(pos)) and np.all(np.isfinite(ori))


def test_parallax_settles_and_eases_back():
    cam = _camera()
    pointer = PointerSample(1.0, 0.0, True)
    t = 0.0
    while t <= 2000:
        pose = cam.update(pointer, t)
        t += 16
    assert pose.position[0] == pytest.approx(0.5, abs=1e-3)
    assert pose.orientation[0] == pytest.approx(-0.05, abs=1e-4)

    released = cam.update(PointerSample(1.0, 0.0, False), t)
    assert 0.0 < released.position[0] < 0.5
    while t <= 4000:
        t += 16
        pose = cam.update(PointerSample(), t)
    assert pose.position[0] == pytest.approx(0.0, abs=1e-3)


def test_parallax_never_overshoots():
    cam = _camera()
    for i in range(200):
        pose = cam.update(PointerSample(5.0, -5.0, True), i * 16)
        assert np.linalg.norm(pose.position) <= 0.5 + 1e-9


def test_parallax_cancelled_during_transition():
    cam = _camera()
    pointer = PointerSample(0.0, 1.0, True)
    for i in range(100):
        cam.update(pointer, i * 16)
    assert cam.state.offset_position[1] > 0.4
    cam.go_to_viewpoint("b", 1600)
    for i in range(101, 160):
        cam.update(pointer, i * 16)
    assert cam.in_transition(159 * 16)
    assert cam.state.offset_position[1] < 0.01

import numpy as np
import pytest

from lyric_stage.color import (
    MoodPalette,
    linear_to_srgb,
    parse_color,
    sky_color,
    srgb_to_linear,
)

CORNERS = {
    (-1, -1): "#000000",
    (1, -1): "#ff0000",
    (-1, 1): "#00ff00",
    (1, 1): "#ffffff",
}


def test_corners_reproduced():
    palette = MoodPalette(CORNERS)
    assert palette.blend(-1, -1) == pytest.approx((0.0, 0.0, 0.0))
    assert palette.blend(1, -1) == pytest.approx((1.0, 0.0, 0.0))
    assert palette.blend(1, 1) == pytest.approx((1.0, 1.0, 1.0))


def test_blend_in_linear_light():
    palette = MoodPalette(CORNERS)
    r, g, b = palette.blend(0.0, -1.0)
    # half of red in linear light is brighter than half in sRGB
    assert r == pytest.approx(float(linear_to_srgb(np.array(0.5))))
    assert r > 0.5
    assert g == 0.0 and b == 0.0


def test_out_of_range_and_nan_inputs():
    palette = MoodPalette()
    assert palette.blend(5, 5) == palette.blend(1, 1)
    assert palette.blend(float("nan"), float("nan")) == palette.blend(0, 0)
    assert all(0.0 <= c <= 1.0 for c in palette.blend(0.3, -0.2))


def test_missing_corner():
    with pytest.raises(ValueError):
        MoodPalette({(-1, -1): "#000000"})


def test_parse_color():
    assert list(parse_color("#ff8000")) == pytest.approx([1.0, 128 / 255, 0.0])
    assert list(parse_color("white")) == pytest.approx([1.0, 1.0, 1.0])
    with pytest.raises(ValueError):
        parse_color("not-a-colour")


def test_sky_color_lifted_and_clamped():
    assert sky_color((0.9, 0.1, 0.5)) == pytest.approx((1.0, 0.3, 0.7))


def test_srgb_roundtrip():
    rng = np.random.default_rng(1234)
    arr = rng.random((8, 3))
    assert np.allclose(linear_to_srgb(srgb_to_linear(arr)), arr, atol=1e-9)

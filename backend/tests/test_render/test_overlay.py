"""Tests for the seasonal overlay and the head parts."""

import pytest

from troutgen.render.assets import HAT_PATHS
from troutgen.render.fish import Layout
from troutgen.render.head import barbel, lip, teeth
from troutgen.render.overlay import hat, seasonal_hat, snowfall, snowflake
from troutgen.utils.geometry import BBox
from troutgen.utils.rng import Rng


def test_hat_has_every_layer():
    elements = hat(10, 20, 100, flip=False)
    assert len(elements) == len(HAT_PATHS)
    assert all(e["tag"] == "path" and e["d"].startswith("M") for e in elements)


def test_hat_scales_stroke_width():
    elements = hat(0, 0, 410.435 / 2, flip=False)
    assert "stroke-width:0.4167" in elements[0]["style"]


def test_flipped_hat_differs():
    assert hat(0, 0, 100, flip=True)[0]["d"] != hat(0, 0, 100, flip=False)[0]["d"]


def test_snowflake_element():
    flake = snowflake(5, 5, 41.1, 30)
    assert flake["fill"] == "snow"
    assert flake["stroke"] == "gray"
    assert flake["stroke-width"] == "0.1"


def test_snowfall_count_range():
    for seed in range(1, 20):
        flakes = snowfall(Rng(seed))
        assert 21 <= len(flakes) <= 120


def test_seasonal_hat_sits_on_neckline():
    layout = Layout(bbox=BBox(0, 0, 100, 100), px=0, py=0, s=1, p=0)
    elements = seasonal_hat((50.0, 60.0), 25, layout, Rng(2))
    assert len(elements) == len(HAT_PATHS)


def test_lip_is_deterministic_open_curve():
    a = lip((0.0, 0.0), (10.0, 0.0), 3, Rng(1))
    b = lip((0.0, 0.0), (10.0, 0.0), 3, Rng(1))
    assert a == b
    assert len(a) > 5
    # ends sit near p0, jittered by at most a unit of noise
    assert abs(a[0][0]) < 2 and abs(a[-1][0]) < 2


def test_teeth_follow_spacing():
    strokes = teeth((0.0, 0.0), (35.0, 0.0), 5, 1, spacing=3.5)
    assert len(strokes) == 10
    assert all(len(s) == 5 for s in strokes)


def test_barbel_is_deterministic():
    assert barbel(0, 0, 10, 0.5, Rng(3)) == barbel(0, 0, 10, 0.5, Rng(3))

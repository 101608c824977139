"""Tests for hatching, fills and scale textures."""

from troutgen.kernel.texture import dots, fill_lines, hatch, pattern_shade, scale_mask, veins
from troutgen.utils.geometry import bbox
from troutgen.utils.rng import Rng
from tests.conftest import SQUARE

BIG_SQUARE = [(0.0, 0.0), (60.0, 0.0), (60.0, 60.0), (0.0, 60.0)]


def _inside_box(lines, box, tol=1e-6):
    return all(
        box.x - tol <= x <= box.x + box.w + tol and box.y - tol <= y <= box.y + box.h + tol
        for line in lines
        for x, y in line
    )


def test_fill_lines_stay_inside():
    lines = fill_lines(SQUARE, 2)
    assert lines
    assert _inside_box(lines, bbox(SQUARE))


def test_textures_skip_degenerate_polygons():
    line = [(0.0, 0.0), (10.0, 0.0)]
    rng = Rng(1)
    assert fill_lines(line) == []
    assert hatch(line, rng) == []
    assert veins(line, rng) == []
    assert dots(line, rng) == []
    assert pattern_shade(line, 3, lambda x, y: True) == []


def test_hatch_is_deterministic():
    a = hatch(BIG_SQUARE, Rng(2), 4, 5, 5)
    b = hatch(BIG_SQUARE, Rng(2), 4, 5, 5)
    assert a == b
    assert _inside_box(a, bbox(BIG_SQUARE))


def test_pattern_shade_follows_predicate():
    assert pattern_shade(BIG_SQUARE, 3, lambda x, y: False) == []
    left = pattern_shade(BIG_SQUARE, 3, lambda x, y: x < 30)
    assert left
    # cuts land midway between resampled points
    assert all(x < 31.5 for line in left for x, _ in line)


def test_veins_inside_polygon():
    lines = veins(BIG_SQUARE, Rng(3), count=20)
    assert _inside_box(lines, bbox(BIG_SQUARE))


def test_dots_inside_polygon():
    lines = dots(BIG_SQUARE, Rng(4))
    assert _inside_box(lines, bbox(BIG_SQUARE))


def test_scale_mask_is_closed_ring():
    ring = scale_mask(10, 6)
    assert len(ring) >= 3

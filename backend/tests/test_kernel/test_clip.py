"""Tests for polygon and predicate clipping."""

import pytest

from troutgen.kernel.clip import ClipResult, binclip, clip, clip_multi, clip_multi_by
from tests.conftest import FAR_SQUARE, NOTCHED, SQUARE


def test_empty_polyline_gives_empty_result():
    result = clip([], SQUARE)
    assert result == ClipResult(inside=[], outside=[])


def test_line_through_square():
    result = clip([(-5.0, 5.0), (15.0, 5.0)], SQUARE)
    assert len(result.inside) == 1
    assert result.inside[0] == [pytest.approx((0.0, 5.0)), pytest.approx((10.0, 5.0))]
    assert len(result.outside) == 2
    assert result.outside[0][0] == (-5.0, 5.0)
    assert result.outside[1][-1] == (15.0, 5.0)


def test_line_fully_inside():
    line = [(2.0, 2.0), (8.0, 3.0), (4.0, 7.0)]
    result = clip(line, SQUARE)
    assert result.inside == [line]
    assert result.outside == []


def test_disjoint_bbox_is_outside():
    line = [(0.0, 0.0), (5.0, 5.0)]
    result = clip(line, FAR_SQUARE)
    assert result.inside == []
    assert result.outside == [line]


def test_degenerate_polygon_encloses_nothing():
    line = [(0.0, 0.0), (5.0, 5.0)]
    result = clip(line, [(0.0, 0.0), (10.0, 10.0)])
    assert result.inside == []
    assert result.outside == [line]


def test_concave_polygon_splits_twice():
    # y=8 crosses both arms of the notch
    result = clip([(-1.0, 8.0), (11.0, 8.0)], NOTCHED)
    assert len(result.inside) == 2
    assert len(result.outside) == 3


def test_clip_multi_collects_all_lines():
    lines = [[(-5.0, 5.0), (15.0, 5.0)], [(2.0, 2.0), (3.0, 3.0)]]
    result = clip_multi(lines, SQUARE)
    assert len(result.inside) == 2
    assert len(result.outside) == 2


def test_binclip_cuts_at_midpoint():
    line = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    result = binclip(line, lambda x, y, t: x < 1.5)
    assert result.inside == [[(0.0, 0.0), (1.0, 0.0), (1.5, 0.0)]]
    assert result.outside == [[(1.5, 0.0), (2.0, 0.0), (3.0, 0.0)]]


def test_binclip_passes_arc_parameter():
    seen = []
    binclip([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)], lambda x, y, t: seen.append(t) or True)
    assert seen == [0.0, 0.5, 1.0]


def test_binclip_empty():
    assert binclip([], lambda x, y, t: True) == ClipResult()


def test_clip_multi_by():
    lines = [[(0.0, 0.0), (4.0, 0.0)], [(0.0, 1.0), (4.0, 1.0)]]
    result = clip_multi_by(lines, lambda x, y, t: y > 0.5)
    assert result.inside == [[(0.0, 1.0), (4.0, 1.0)]]
    assert result.outside == [[(0.0, 0.0), (4.0, 0.0)]]


def test_corner_touch_is_not_a_crossing():
    # grazes the corner at (10, 10) from outside
    result = clip([(16.0, -2.0), (9.0, 12.0)], SQUARE)
    assert result.inside == []
    assert len(result.outside) == 1


def test_line_through_opposite_corners():
    result = clip([(-5.0, -5.0), (15.0, 15.0)], SQUARE)
    assert len(result.inside) == 1
    assert result.inside[0] == [pytest.approx((0.0, 0.0)), pytest.approx((10.0, 10.0))]
    assert len(result.outside) == 2

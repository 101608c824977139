"""Tests for ring union and bridging."""

import pytest
from shapely.geometry import Polygon

from troutgen.kernel.union import bridge, union
from tests.conftest import FAR_SQUARE, SHIFTED_SQUARE, SQUARE


def _area(ring):
    return Polygon(ring).area


def test_overlapping_squares():
    ring = union(SQUARE, SHIFTED_SQUARE)
    assert len(ring) >= 8
    assert _area(ring) == pytest.approx(175.0)


def test_contained_ring_is_absorbed_or_bridged():
    inner = [(2.0, 2.0), (4.0, 2.0), (4.0, 4.0), (2.0, 4.0)]
    ring = union(SQUARE, inner)
    xs = [x for x, _ in ring]
    ys = [y for _, y in ring]
    assert min(xs) == 0.0 and max(xs) == 10.0
    assert min(ys) == 0.0 and max(ys) == 10.0


def test_disjoint_rings_are_bridged():
    ring = union(SQUARE, FAR_SQUARE)
    assert len(ring) == len(SQUARE) + len(FAR_SQUARE)
    assert set(ring) == set(SQUARE) | set(FAR_SQUARE)


def test_empty_operand_returns_other():
    assert union([], SQUARE) == SQUARE
    assert union(SQUARE, []) == SQUARE


def test_degenerate_input_terminates():
    sliver = [(0.0, 10.0), (10.0, 10.0), (10.0, 10.0), (0.0, 10.0)]
    ring = union(sliver, SHIFTED_SQUARE)
    assert isinstance(ring, list)


def test_bridge_splices_at_closest_pair():
    ring = bridge(SQUARE, FAR_SQUARE)
    # closest pair is (10, 10) and (100, 100)
    i = ring.index((100.0, 100.0))
    assert ring[i - 1] == (10.0, 0.0)
    assert ring[-2:] == [(10.0, 10.0), (0.0, 10.0)]

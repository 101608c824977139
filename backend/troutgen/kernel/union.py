"""Boundary of the union of two polygons by walking their crossings.

The walk starts at the leftmost vertex (always on the outer boundary) and
alternates between the two rings at every crossing, turning according to
which side the other ring enters from. It is iterative, remembers every
(ring, edge, crossing, direction) state it has passed, and gives up after a
hard step budget. Walks that fail fall back to shapely.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from shapely.geometry import Polygon
from shapely.ops import unary_union
from shapely.validation import make_valid

from troutgen.utils.geometry import Point, Polyline, as_array, half_plane, segment_intersection

logger = logging.getLogger(__name__)


@dataclass
class _Crossing:
    t: float
    s: float
    xy: Point
    side: int
    other: int = -1
    jump: bool = False


@dataclass
class _Edge:
    crossings: list[_Crossing] = field(default_factory=list)
    by_edge: dict[tuple[int, int], _Crossing] = field(default_factory=dict)


def bridge(a: Sequence[Point], b: Sequence[Point]) -> Polyline:
    """Splice two disjoint rings together at their closest vertex pair."""
    if not a:
        return list(b)
    if not b:
        return list(a)
    arr_a = as_array(a)
    arr_b = as_array(b)
    d2 = ((arr_a[:, None, :] - arr_b[None, :, :]) ** 2).sum(axis=2)
    i, j = (int(v) for v in np.unravel_index(np.argmin(d2), d2.shape))
    a, b = list(a), list(b)
    return a[:i] + b[j:] + b[:j] + a[i:]


def _mirror(existing: _Crossing, a: Point, b: Point, c: Point) -> _Crossing:
    # Same crossing seen from the other edge: swap parameters, keep the point
    side = 1 if half_plane(a, b, c) < 0 else -1
    return _Crossing(t=existing.s, s=existing.t, xy=existing.xy, side=side)


def _find(edge: _Edge, key: tuple[int, int], a: Point, b: Point, c: Point, d: Point) -> _Crossing | None:
    existing = edge.by_edge.get(key)
    if existing is not None:
        return _mirror(existing, a, b, c)
    hit = segment_intersection(a, b, c, d)
    if hit is None:
        return None
    return _Crossing(t=hit.t, s=hit.s, xy=hit.xy, side=hit.side)


def _segment_boxes(poly: Sequence[Point]) -> tuple[np.ndarray, np.ndarray]:
    start = as_array(poly)
    end = np.roll(start, -1, axis=0)
    return np.minimum(start, end), np.maximum(start, end)


def _candidates(a: Point, b: Point, lo: np.ndarray, hi: np.ndarray) -> np.ndarray:
    # Only segments whose boxes overlap a-b can cross it
    if len(lo) == 0:
        return np.zeros(0, dtype=int)
    return np.flatnonzero(
        (lo[:, 0] <= max(a[0], b[0]))
        & (hi[:, 0] >= min(a[0], b[0]))
        & (lo[:, 1] <= max(a[1], b[1]))
        & (hi[:, 1] >= min(a[1], b[1]))
    )


def _build_edges(
    poly: Sequence[Point],
    other: Sequence[Point],
    out: list[_Edge],
    other_out: list[_Edge],
    idx: int,
    self_intersecting: bool,
) -> bool:
    n = len(poly)
    m = len(other)
    crossed = False
    if self_intersecting:
        lo, hi = _segment_boxes(poly)
        for i in range(n):
            i1 = (i + 1) % n
            a, b = poly[i], poly[i1]
            for j in _candidates(a, b, lo, hi):
                j = int(j)
                j1 = (j + 1) % n
                if i == j or i == j1 or i1 == j or i1 == j1:
                    continue
                hit = _find(out[j], (idx, i), a, b, poly[j], poly[j1])
                if hit is not None:
                    hit.other = j
                    hit.jump = False
                    out[i].crossings.append(hit)
                    out[i].by_edge[(idx, j)] = hit

    lo, hi = _segment_boxes(other)
    for i in range(n):
        i1 = (i + 1) % n
        a, b = poly[i], poly[i1]
        for j in _candidates(a, b, lo, hi):
            j = int(j)
            j1 = (j + 1) % m
            hit = _find(other_out[j], (idx, i), a, b, other[j], other[j1])
            if hit is not None:
                crossed = True
                hit.other = j
                hit.jump = True
                out[i].crossings.append(hit)
                out[i].by_edge[(1 - idx, j)] = hit
        out[i].crossings.sort(key=lambda c: c.t)
    return crossed


def _mirror_table(rings: list[list[_Edge]]) -> dict[tuple[int, int, int], tuple[int, int, int] | None]:
    table: dict[tuple[int, int, int], tuple[int, int, int] | None] = {}
    for idx, edges in enumerate(rings):
        for i, edge in enumerate(edges):
            for j, c in enumerate(edge.crossings):
                target = 1 - idx if c.jump else idx
                back = rings[target][c.other].crossings
                z = next(
                    (k for k, x in enumerate(back) if x.jump == c.jump and x.other == i),
                    None,
                )
                table[(idx, i, j)] = None if z is None else (target, c.other, z)
    return table


def _walk(
    polys: list[Sequence[Point]],
    rings: list[list[_Edge]],
    mirrors: dict[tuple[int, int, int], tuple[int, int, int] | None],
    start: tuple[int, int],
    direction: int,
) -> Polyline | None:
    idx, i = start
    j = -1
    total = sum(len(p) for p in polys) + sum(len(e.crossings) for r in rings for e in r)
    budget = 4 * total + 16
    origin = (idx, i, j)
    visited: set[tuple[int, int, int, int]] = set()
    out: Polyline = []

    for step in range(budget):
        if step and (idx, i, j) == origin:
            return out
        state = (idx, i, j, direction)
        if state in visited:
            return None
        visited.add(state)

        verts = polys[idx]
        edges = rings[idx]
        n = len(verts)
        i1 = (i + direction) % n
        if j == -1:
            out.append(verts[i])
            if direction < 0:
                i, j = i1, len(edges[i1].crossings) - 1
            elif not edges[i].crossings:
                i, j = i1, -1
            else:
                j = 0
        elif j >= len(edges[i].crossings):
            i, j = i1, -1
        else:
            c = edges[i].crossings[j]
            out.append(c.xy)
            target = mirrors.get((idx, i, j))
            if target is None:
                return None
            idx, i, z = target
            if c.side * direction < 0:
                j, direction = z - 1, -1
            else:
                j, direction = z + 1, 1
    return None


def _shapely_union(a: Sequence[Point], b: Sequence[Point]) -> Polyline:
    shapes = []
    for ring in (a, b):
        if len(ring) < 3:
            continue
        poly = Polygon(ring)
        if not poly.is_valid:
            poly = make_valid(poly)
        shapes.append(poly)
    if not shapes:
        return []
    merged = unary_union(shapes)
    parts = [merged] if merged.geom_type == "Polygon" else [
        g for g in getattr(merged, "geoms", []) if g.geom_type == "Polygon"
    ]
    parts = [p for p in parts if not p.is_empty]
    if not parts:
        return []
    best = max(parts, key=lambda g: g.area)
    return [(float(x), float(y)) for x, y in list(best.exterior.coords)[:-1]]


def union(a: Sequence[Point], b: Sequence[Point], self_intersecting: bool = False) -> Polyline:
    """Outline of the union of rings ``a`` and ``b``.

    Disjoint rings are bridged rather than rejected. With
    ``self_intersecting`` the rings' own crossings are traced too.
    """
    a = list(a)
    b = list(b)
    if not a or not b:
        return list(a or b)

    rings = [[_Edge() for _ in a], [_Edge() for _ in b]]
    crossed = _build_edges(a, b, rings[0], rings[1], 0, self_intersecting)
    crossed = _build_edges(b, a, rings[1], rings[0], 1, self_intersecting) or crossed

    if not crossed:
        bridged = bridge(a, b)
        if not self_intersecting:
            return bridged
        return _trace_single(bridged)

    result = _trace(a, b, rings)
    if result is None:
        logger.debug("Union walk did not close (%d + %d vertices); using shapely", len(a), len(b))
        return _shapely_union(a, b)
    return result


def _trace(a: Polyline, b: Polyline, rings: list[list[_Edge]]) -> Polyline | None:
    polys: list[Sequence[Point]] = [a, b]
    mirrors = _mirror_table(rings)

    # leftmost vertex, preferring the first ring on ties
    start = (0, 0)
    xmin = float("inf")
    for idx, poly in enumerate(polys):
        for i, (x, _) in enumerate(poly):
            if x < xmin:
                xmin = x
                start = (idx, i)
    poly = polys[start[0]]
    n = len(poly)
    k = start[1]
    direction = 1 if half_plane(poly[(k - 1) % n], poly[k], poly[(k + 1) % n]) < 0 else -1

    out = _walk(polys, rings, mirrors, start, direction)
    if out is None or len(out) < 3:
        return None
    return out


def _trace_single(ring: Polyline) -> Polyline:
    edges = [_Edge() for _ in ring]
    _build_edges(ring, [], edges, [], 0, True)
    if not any(e.crossings for e in edges):
        return ring
    rings = [edges, []]
    result = _trace(ring, [], rings)
    if result is None:
        return _shapely_union(ring, [])
    return result

"""Split polylines into inside/outside runs against a polygon or a predicate."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from troutgen.utils.geometry import BBox, Intersection, Point, Polyline, as_array, bbox, lerp2d

PointPredicate = Callable[[float, float, float], bool]

VERTEX_EPS = 1e-9


@dataclass
class ClipResult:
    inside: list[Polyline] = field(default_factory=list)
    outside: list[Polyline] = field(default_factory=list)

    def extend(self, other: ClipResult) -> None:
        self.inside.extend(other.inside)
        self.outside.extend(other.outside)


class _Edges:
    """Polygon edges as arrays, built once per clip call."""

    __slots__ = ("start", "delta", "box")

    def __init__(self, polygon: Sequence[Point]) -> None:
        self.start = as_array(polygon)
        self.delta = np.roll(self.start, -1, axis=0) - self.start
        self.box = bbox(polygon)

    def crossings(self, a: Point, b: Point, ray: bool = False) -> list[Intersection]:
        n = len(self.start)
        if n == 0:
            return []
        d0x = b[0] - a[0]
        d0y = b[1] - a[1]
        d1x = self.delta[:, 0]
        d1y = self.delta[:, 1]
        qpx = self.start[:, 0] - a[0]
        qpy = self.start[:, 1] - a[1]
        vc = d0x * d1y - d0y * d1x
        with np.errstate(divide="ignore", invalid="ignore"):
            t = (qpx * d1y - qpy * d1x) / vc
            s = (qpx * d0y - qpy * d0x) / vc
        # A vertex belongs to the edge that starts at it
        ok = (vc != 0) & (t >= 0) & (s >= -VERTEX_EPS) & (s < 1 - VERTEX_EPS)
        if not ray:
            ok &= t < 1
        hits = []
        for k in np.flatnonzero(ok):
            sk = float(s[k])
            qx, qy = self.start[k]
            if sk <= VERTEX_EPS:
                # Through a vertex: only a crossing when its neighbours straddle a-b
                px, py = self.start[k - 1]
                nx, ny = self.start[(k + 1) % n]
                before = d0x * (py - a[1]) - d0y * (px - a[0])
                after = d0x * (ny - a[1]) - d0y * (nx - a[0])
                if before * after >= 0:
                    continue
                sk = 0.0
            tk = float(t[k])
            # q0 on the negative side of a-b
            side = 1 if (a[0] - b[0]) * (qy - b[1]) - (a[1] - b[1]) * (qx - b[0]) < 0 else -1
            xy = (b[0] * tk + a[0] * (1 - tk), b[1] * tk + a[1] * (1 - tk))
            hits.append(Intersection(tk, sk, xy, side))
        hits.sort(key=lambda h: h.t)
        return hits


def _disjoint(a: BBox, b: BBox) -> bool:
    return a.x > b.x + b.w or b.x > a.x + a.w or a.y > b.y + b.h or b.y > a.y + a.h


def segment_polygon_crossings(
    a: Point, b: Point, polygon: Sequence[Point], ray: bool = False
) -> list[Intersection]:
    """All crossings of a-b with the polygon's edges, ordered along a-b."""
    return _Edges(polygon).crossings(a, b, ray)


def _starts_inside(p: Point, edges: _Edges) -> bool:
    # Odd-even ray cast in an irrational direction to dodge vertex hits
    probe = (p[0] + math.e, p[1] + math.pi)
    return len(edges.crossings(p, probe, ray=True)) % 2 == 1


def _collect(runs: dict[bool, list[Polyline]]) -> ClipResult:
    return ClipResult(
        inside=[r for r in runs[True] if r],
        outside=[r for r in runs[False] if r],
    )


def _clip(polyline: Sequence[Point], edges: _Edges) -> ClipResult:
    if not polyline:
        return ClipResult()
    if len(edges.start) < 3 or _disjoint(bbox(polyline), edges.box):
        return ClipResult(outside=[list(polyline)])
    io = _starts_inside(polyline[0], edges)
    runs: dict[bool, list[Polyline]] = {True: [[]], False: [[]]}
    for i, a in enumerate(polyline):
        runs[io][-1].append(a)
        if i + 1 >= len(polyline):
            break
        for hit in edges.crossings(a, polyline[i + 1]):
            runs[io][-1].append(hit.xy)
            io = not io
            runs[io].append([hit.xy])
    return _collect(runs)


def clip(polyline: Sequence[Point], polygon: Sequence[Point]) -> ClipResult:
    """Split ``polyline`` at every crossing of the polygon boundary.

    A polygon with fewer than three vertices encloses nothing, so the whole
    polyline lands in ``outside``.
    """
    return _clip(polyline, _Edges(polygon))


def clip_multi(polylines: Iterable[Sequence[Point]], polygon: Sequence[Point]) -> ClipResult:
    edges = _Edges(polygon)
    out = ClipResult()
    for line in polylines:
        out.extend(_clip(line, edges))
    return out


def binclip(polyline: Sequence[Point], predicate: PointPredicate) -> ClipResult:
    """Split wherever ``predicate(x, y, t)`` flips between neighbours.

    ``t`` runs from 0 at the first point to 1 at the last. The cut lands at
    the midpoint of the segment where the bin changes.
    """
    if not polyline:
        return ClipResult()
    n = len(polyline)
    bins = [bool(predicate(x, y, i / (n - 1) if n > 1 else 0.0)) for i, (x, y) in enumerate(polyline)]
    io = bins[0]
    runs: dict[bool, list[Polyline]] = {True: [[]], False: [[]]}
    for i, a in enumerate(polyline):
        runs[io][-1].append(a)
        if i + 1 >= n:
            break
        if bins[i] != bins[i + 1]:
            mid = lerp2d(a, polyline[i + 1], 0.5)
            runs[io][-1].append(mid)
            io = not io
            runs[io].append([mid])
    return _collect(runs)


def clip_multi_by(polylines: Iterable[Sequence[Point]], predicate: PointPredicate) -> ClipResult:
    out = ClipResult()
    for line in polylines:
        out.extend(binclip(line, predicate))
    return out

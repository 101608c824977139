"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

Point = tuple[float, float]
Polyline = list[Point]


class BBox(NamedTuple):
    x: float
    y: float
    w: float
    h: float


class Intersection(NamedTuple):
    """Crossing of segment p with segment q.

    ``t`` is the parameter along p, ``s`` along q. ``side`` is +1 when q
    starts on the negative side of p, -1 otherwise.
    """

    t: float
    s: float
    xy: Point
    side: int


def as_array(points: Sequence[Point]) -> NDArray[np.float64]:
    """Nx2 float array view of a polyline."""
    if len(points) == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.asarray(points, dtype=np.float64).reshape(-1, 2)


def to_polyline(arr: NDArray[np.float64]) -> Polyline:
    return [(float(x), float(y)) for x, y in arr]


def dist(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def lerp(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


def lerp2d(a: Point, b: Point, t: float) -> Point:
    return (a[0] * (1 - t) + b[0] * t, a[1] * (1 - t) + b[1] * t)


def half_plane(p: Point, a: Point, b: Point) -> float:
    """Signed cross product of (p - a) with (b - a). Zero means collinear."""
    return (p[0] - a[0]) * (b[1] - a[1]) - (p[1] - a[1]) * (b[0] - a[0])


def segment_intersection(
    p0: Point, p1: Point, q0: Point, q1: Point, ray: bool = False
) -> Intersection | None:
    """Intersect segment p0-p1 (or the ray from p0 through p1) with segment q0-q1."""
    d0x = p1[0] - p0[0]
    d0y = p1[1] - p0[1]
    d1x = q1[0] - q0[0]
    d1y = q1[1] - q0[1]
    vc = d0x * d1y - d0y * d1x
    if vc == 0:
        return None
    qpx = q0[0] - p0[0]
    qpy = q0[1] - p0[1]
    t = (qpx * d1y - qpy * d1x) / vc
    s = (qpx * d0y - qpy * d0x) / vc
    if 0 <= t and (ray or t < 1) and 0 <= s < 1:
        xy = (p1[0] * t + p0[0] * (1 - t), p1[1] * t + p0[1] * (1 - t))
        side = 1 if half_plane(p0, p1, q0) < 0 else -1
        return Intersection(t, s, xy, side)
    return None


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    cx = b[0] - a[0]
    cy = b[1] - a[1]
    len_sq = cx * cx + cy * cy
    param = -1.0
    if len_sq != 0:
        param = ((p[0] - a[0]) * cx + (p[1] - a[1]) * cy) / len_sq
    if param < 0:
        xx, yy = a
    elif param > 1:
        xx, yy = b
    else:
        xx = a[0] + param * cx
        yy = a[1] + param * cy
    return math.hypot(p[0] - xx, p[1] - yy)


def point_segment_distances(
    points: NDArray[np.float64], a: NDArray[np.float64], b: NDArray[np.float64]
) -> NDArray[np.float64]:
    """Vectorised distance of every row in ``points`` to segment a-b."""
    ab = b - a
    len_sq = float(np.dot(ab, ab))
    if len_sq == 0:
        return np.hypot(points[:, 0] - a[0], points[:, 1] - a[1])
    param = np.clip(((points - a) @ ab) / len_sq, 0.0, 1.0)
    proj = a + param[:, None] * ab
    d = points - proj
    return np.hypot(d[:, 0], d[:, 1])


def circle_line_intersection(c: Point, r: float, a: Point, b: Point) -> float | None:
    """Parameter along a-b of the first crossing with the circle, or None."""
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    fx = a[0] - c[0]
    fy = a[1] - c[1]
    qa = dx * dx + dy * dy
    if qa == 0:
        return None
    qb = 2 * (fx * dx + fy * dy)
    qc = fx * fx + fy * fy - r * r
    disc = qb * qb - 4 * qa * qc
    if disc < 0:
        return None
    disc = math.sqrt(disc)
    t0 = (-qb - disc) / (2 * qa)
    if 0 <= t0 <= 1:
        return t0
    t1 = (-qb + disc) / (2 * qa)
    if t1 > 1 or t1 < 0:
        return None
    return t1


def bbox(points: Sequence[Point]) -> BBox:
    """Axis-aligned (x, y, w, h). Empty input gives a zero box."""
    arr = as_array(points)
    if len(arr) == 0:
        return BBox(0.0, 0.0, 0.0, 0.0)
    lo = arr.min(axis=0)
    hi = arr.max(axis=0)
    return BBox(float(lo[0]), float(lo[1]), float(hi[0] - lo[0]), float(hi[1] - lo[1]))


def translate(poly: Sequence[Point], dx: float, dy: float) -> Polyline:
    return [(x + dx, y + dy) for x, y in poly]


def scale(poly: Sequence[Point], sx: float, sy: float | None = None) -> Polyline:
    if sy is None:
        sy = sx
    return [(x * sx, y * sy) for x, y in poly]


def shear(poly: Sequence[Point], sx: float) -> Polyline:
    return [(x + y * sx, y) for x, y in poly]


def rotate(poly: Sequence[Point], theta: float) -> Polyline:
    """Rotate about the origin by ``theta`` radians."""
    arr = as_array(poly)
    if len(arr) == 0:
        return []
    c, s = math.cos(theta), math.sin(theta)
    rot = np.array([[c, s], [-s, c]])
    return to_polyline(arr @ rot)


def signed_pow(a: float, b: float) -> float:
    """sign(a) * |a|**b, so odd-looking exponents keep the sign."""
    return math.copysign(abs(a) ** b, a) if a != 0 else 0.0

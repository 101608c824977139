"""Resampling, simplification and blue-noise point sampling."""

from __future__ import annotations

import math
from collections.abc import Collection, Sequence

import numpy as np

from troutgen.utils.geometry import (
    Point,
    Polyline,
    as_array,
    circle_line_intersection,
    dist,
    lerp2d,
    point_segment_distances,
)
from troutgen.utils.rng import Rng

POISSON_TRIES = 30


def _resample_run(polyline: Sequence[Point], step: float) -> Polyline:
    pts = list(polyline)
    out: Polyline = [pts[0]]
    i = 0
    while i < len(pts) - 1:
        a, b = pts[i], pts[i + 1]
        d = dist(a, b)
        if d == 0:
            i += 1
            continue
        n = int(d / step)
        rest = n * step / d
        rp = lerp2d(a, b, rest)
        for j in range(1, n + 1):
            out.append(lerp2d(a, rp, j / n))

        # carry the leftover arc into the following segments
        nxt = None
        for j in range(i + 2, len(pts)):
            p, q = pts[j - 1], pts[j]
            if p == q:
                continue
            t = circle_line_intersection(rp, step, p, q)
            if t is None:
                continue
            hit = lerp2d(p, q, t)
            out.append(hit)
            pts[j - 1] = hit
            nxt = j - 1
            break
        if nxt is None:
            break
        i = nxt

    if len(out) > 1 and dist(out[-1], pts[-1]) < step * 0.5:
        out.pop()
    out.append(pts[-1])
    return out


def resample(
    polyline: Sequence[Point], step: float, features: Collection[int] | None = None
) -> Polyline:
    """Respace a polyline to roughly ``step`` arc length between points.

    Both endpoints are kept exactly, as is every input index listed in
    ``features``.
    """
    if len(polyline) < 2 or step <= 0:
        return list(polyline)
    last = len(polyline) - 1
    cuts = sorted({i for i in (features or ()) if 0 < i < last})
    if not cuts:
        return _resample_run(polyline, step)
    out: Polyline = []
    bounds = [0, *cuts, last]
    for lo, hi in zip(bounds, bounds[1:]):
        run = _resample_run(polyline[lo : hi + 1], step)
        out.extend(run if not out else run[1:])
    return out


def simplify(polyline: Sequence[Point], epsilon: float) -> Polyline:
    """Douglas-Peucker. Runs under three points come back unchanged."""
    if len(polyline) < 3:
        return list(polyline)
    arr = as_array(polyline)
    keep = np.zeros(len(arr), dtype=bool)
    keep[0] = keep[-1] = True
    stack = [(0, len(arr) - 1)]
    while stack:
        lo, hi = stack.pop()
        if hi - lo < 2:
            continue
        d = point_segment_distances(arr[lo + 1 : hi], arr[lo], arr[hi])
        k = int(np.argmax(d))
        if d[k] > epsilon:
            mid = lo + 1 + k
            keep[mid] = True
            stack.append((lo, mid))
            stack.append((mid, hi))
    return [polyline[i] for i in np.flatnonzero(keep)]


def poisson_disk(width: float, height: float, radius: float, rng: Rng) -> Polyline:
    """Bridson sampling inside [0, width) x [0, height), seeded at the centre.

    Candidates are kept one grid cell away from the border.
    """
    center = (width / 2.0, height / 2.0)
    cell = radius / math.sqrt(2)
    if radius <= 0:
        return [center]
    cols = int(width / cell)
    rows = int(height / cell)
    if cols < 3 or rows < 3:
        return [center]

    r2 = radius * radius
    grid = [-1] * (cols * rows)
    samples: Polyline = [center]
    grid[int(center[0] / cell) + int(center[1] / cell) * cols] = 0
    active: Polyline = [center]

    while active:
        ridx = int(rng.next() * len(active))
        px, py = active[ridx]
        found = False
        for _ in range(POISSON_TRIES):
            sr = radius + rng.next() * radius
            sa = 2 * math.pi * rng.next()
            sx = px + sr * math.cos(sa)
            sy = py + sr * math.sin(sa)
            col = int(sx / cell)
            row = int(sy / cell)
            if not (0 < col < cols - 1 and 0 < row < rows - 1):
                continue
            if grid[col + row * cols] != -1:
                continue
            ok = True
            for di in (-1, 0, 1):
                for dj in (-1, 0, 1):
                    nbr = grid[(row + di) * cols + col + dj]
                    if nbr != -1:
                        qx, qy = samples[nbr]
                        if (sx - qx) ** 2 + (sy - qy) ** 2 < r2:
                            ok = False
            if ok:
                found = True
                grid[row * cols + col] = len(samples)
                samples.append((sx, sy))
                active.append((sx, sy))
        if not found:
            active.pop(ridx)
    return samples

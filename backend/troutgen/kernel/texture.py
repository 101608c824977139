"""Texture generators. Each takes a closed polygon and returns polylines inside it."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from troutgen.kernel.clip import PointPredicate, clip_multi, clip_multi_by
from troutgen.kernel.sampling import poisson_disk, resample
from troutgen.kernel.union import union
from troutgen.utils.geometry import (
    BBox,
    Point,
    Polyline,
    bbox,
    dist,
    lerp2d,
    rotate,
    signed_pow,
    translate,
)
from troutgen.utils.rng import Rng

ScaleShape = Callable[[float, float, float, float], list[Polyline]]


def _padded_bbox(poly: Sequence[Point], pad: float) -> BBox:
    b = bbox(poly)
    return BBox(b.x - pad, b.y - pad, b.w + pad * 2, b.h + pad * 2)


def _frange(start: float, stop: float, step: float):
    v = start
    while v < stop:
        yield v
        v += step


def hatch(poly: Sequence[Point], rng: Rng, step: float = 5, dx: float = 10, dy: float = 20) -> list[Polyline]:
    """45 degree shading, carved away where the polygon shifted by (-dx, -dy) covers it."""
    if len(poly) < 3 or step <= 0:
        return []
    b = _padded_bbox(poly, step)
    lines = [
        [(b.x + i, b.y), (b.x + i + b.h, b.y + b.h)]
        for i in _frange(-b.h, b.w, step)
    ]
    lines = clip_multi(lines, poly).inside
    lines = clip_multi(lines, translate(poly, -dx, -dy)).outside

    out = []
    for line in lines:
        a, z = line[0], line[-1]
        s = rng.next() * 0.5
        if dy > 0:
            line = [lerp2d(a, z, s), *line[1:]]
        else:
            line = [*line[:-1], lerp2d(z, a, s)]
        out.append(line)
    return out


def fill_lines(poly: Sequence[Point], step: float = 5) -> list[Polyline]:
    """Dense parallel strokes filling the polygon."""
    if len(poly) < 3 or step <= 0:
        return []
    b = _padded_bbox(poly, step)
    lines = [
        [(b.x + i, b.y), (b.x + i - b.h / 2, b.y + b.h)]
        for i in _frange(0, b.w + b.h / 2, step)
    ]
    return clip_multi(lines, poly).inside


def pattern_shade(
    poly: Sequence[Point], step: float, pattern: Callable[[float, float], bool]
) -> list[Polyline]:
    """Hatching kept only where ``pattern(x, y)`` holds."""
    if len(poly) < 3 or step <= 0:
        return []
    b = _padded_bbox(poly, step)
    lines = [
        [(b.x + i, b.y), (b.x + i + b.h / 2, b.y + b.h)]
        for i in _frange(-b.h / 2, b.w, step)
    ]
    lines = [resample(line, 2) for line in clip_multi(lines, poly).inside]
    predicate: PointPredicate = lambda x, y, _t: pattern(x, y)
    return clip_multi_by(lines, predicate).inside


def veins(poly: Sequence[Point], rng: Rng, count: int = 50) -> list[Polyline]:
    """Short noise-advected strokes seeded uniformly over the bounding box."""
    if len(poly) < 3:
        return []
    b = bbox(poly)
    out = []
    for _ in range(count):
        x = b.x + rng.next() * b.w
        y = b.y + rng.next() * b.h
        walk: Polyline = [(x, y)]
        for _ in range(15):
            ddx = (rng.noise(x * 0.1, y * 0.1, 7) - 0.5) * 4
            ddy = (rng.noise(x * 0.1, y * 0.1, 6) - 0.5) * 4
            x += ddx
            y += ddy
            walk.append((x, y))
        out.append(walk)
    return clip_multi(out, poly).inside


def dots(poly: Sequence[Point], rng: Rng, scale: float = 1) -> list[Polyline]:
    """Pairs of tiny ellipses on a Poisson-disk layout, thinning out lower down."""
    if len(poly) < 3:
        return []
    b = bbox(poly)
    samples = [(x + b.x, y + b.y) for x, y in poisson_disk(b.w, b.h, 5 * scale, rng)]
    n = 7
    out = []
    for x, y in samples:
        t = y / 300 if y > 0 else 0.5
        if (t > 0.4 or y < 0) and t > rng.next():
            continue
        for k in range(2):
            ring = []
            for j in range(n):
                a = j / (n - 1) * math.pi * 2
                ring.append((math.cos(a) - k * 0.3, math.sin(a) * 0.5 - k * 0.3))
            out.append(translate(rotate(ring, rng.next() * math.pi * 2), x, y))
    return clip_multi(out, poly).inside


def scale_mask(w: float, h: float) -> Polyline:
    """Closed footprint that one scale hides of the scales drawn after it."""
    ring = []
    n = 7
    for i in range(n):
        a = i / n * math.pi * 2
        ring.append((-signed_pow(math.cos(a), 1.3) * w, signed_pow(math.sin(a), 1.3) * h))
    return ring


def scale_shape(w: float, h: float, rng: Rng, strokes: int = 3) -> list[Polyline]:
    """One scale: a rim arc plus ``strokes`` short inner marks."""
    rim = []
    n = 8
    for i in range(n):
        a = i / (n - 1) * math.pi + math.pi / 2
        rim.append((-signed_pow(math.cos(a), 1.4) * w, signed_pow(math.sin(a), 1.4) * h))
    shape = [rim]
    for i in range(strokes):
        t = i / (strokes - 1) if strokes > 1 else 0.0
        shape.append([
            (-w * 0.3 + (rng.next() - 0.5), -h * 0.2 + t * h * 0.4 + (rng.next() - 0.5)),
            (w * 0.5 + (rng.next() - 0.5), -h * 0.3 + t * h * 0.6 + (rng.next() - 0.5)),
        ])
    return shape


def scale_mesh(
    cols: int,
    rows: int,
    cell_w: float,
    cell_h: float,
    shape: ScaleShape,
    rng: Rng,
    noise_x: float,
    noise_y: float,
    interclip: bool = True,
) -> list[Polyline]:
    """Staggered grid of scales over a noise-warped lattice.

    With ``interclip`` every scale is clipped against the union of the masks
    of the scales already placed, so overlapping scales hide each other.
    """
    m, n = cols, rows
    if m < 3 or n < 3:
        return []
    pts: list[Point] = []
    for i in range(n):
        for j in range(m):
            x = j * cell_w
            y = n * cell_h / 2 - math.cos(i / (n - 1) * math.pi) * (n * cell_h / 2)
            a = rng.noise(x * 0.005, y * 0.005) * math.pi * 2 - math.pi
            r = rng.noise(x * 0.005, y * 0.005)
            pts.append((x + math.cos(a) * r * noise_x, y + math.cos(a) * r * noise_y))

    sizes: list[tuple[float, float]] = []
    for i in range(n):
        for j in range(m):
            if i in (0, n - 1) or j in (0, m - 1):
                sizes.append((cell_w / 2, cell_h / 2))
                continue
            p = pts[i * m + j]
            dw = (dist(p, pts[i * m + j + 1]) + dist(p, pts[i * m + j - 1])) / 4
            dh = (dist(p, pts[(i - 1) * m + j]) + dist(p, pts[(i + 1) * m + j])) / 4
            sizes.append((dw, dh))

    out: list[Polyline] = []
    clipper: Polyline | None = None

    def place(x: float, y: float, dw: float, dh: float) -> None:
        nonlocal clipper
        parts = [translate(part, x, y) for part in shape(x, y, dw, dh)]
        if not interclip:
            out.extend(parts)
            return
        mask = translate(scale_mask(dw, dh), x, y)
        if clipper is None:
            out.extend(parts)
            clipper = mask
        else:
            out.extend(clip_multi(parts, clipper).outside)
            clipper = union(clipper, mask)

    for j in range(1, m - 1):
        for i in range(1, n - 1):
            x, y = pts[i * m + j]
            dw, dh = sizes[i * m + j]
            place(x, y, dw, dh)
        for i in range(1, n - 1):
            quad = [i * m + j, i * m + j + 1, (i + 1) * m + j, (i + 1) * m + j + 1]
            x = sum(pts[k][0] for k in quad) / 4
            y = sum(pts[k][1] for k in quad) / 4
            dw = sum(sizes[k][0] for k in quad) / 4 * 1.2
            dh = sum(sizes[k][1] for k in quad) / 4
            place(x, y, dw, dh)
    return out


def scale_pattern(
    poly: Sequence[Point],
    rng: Rng,
    unit: float = 15,
    shape: ScaleShape | None = None,
    interclip: bool = True,
) -> list[Polyline]:
    """Cover a polygon with a self-clipped scale mesh and keep what falls inside."""
    if len(poly) < 3 or unit <= 0:
        return []
    b = bbox(poly)
    m = int(b.w / unit)
    n = int(b.h / unit)
    if m < 1 or n < 1:
        return []
    uw = b.w / m
    uh = b.h / n
    if shape is None:
        shape = lambda _x, _y, w, h: scale_shape(w, h, rng)
    mesh = scale_mesh(m, n + 3, uw, uh, shape, rng, uw * 3, uh * 3, interclip)
    mesh = [translate(line, b.x, b.y - uh * 1.5) for line in mesh]
    return clip_multi(mesh, poly).inside

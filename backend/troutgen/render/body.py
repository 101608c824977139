"""Body outline curves and the four body textures.

Curves run head to tail with 32 points each: ``upper`` along the back,
``lower`` along the belly. Every body style returns the two outline curves
first (upper, then lower reversed) followed by its texture strokes; fill
underlays later rely on that ordering.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from troutgen.kernel.clip import clip_multi, clip_multi_by
from troutgen.kernel.sampling import resample
from troutgen.kernel.texture import scale_mesh, scale_shape, veins
from troutgen.render.patterns import Pattern
from troutgen.utils.geometry import Polyline, bbox, lerp, lerp2d, translate
from troutgen.utils.math_helpers import bean
from troutgen.utils.rng import Rng

CURVE_POINTS = 32
CENTER_X = 225
CENTER_Y = 150


def body_curves(phenotype: Mapping[str, Any], rng: Rng) -> tuple[Polyline, Polyline]:
    """Upper and lower body curves for either curve family."""
    n = CURVE_POINTS
    length = phenotype["body_length"]
    height = phenotype["body_height"]
    amount = phenotype["body_curve_amount"]
    sine = phenotype["body_curve_type"] == 0

    def profile(t: float, z: int) -> float:
        if sine:
            return (math.sin(t * math.pi) * lerp(0.5, 1, rng.noise(t * 2, z)) * amount + (1 - amount)) * height
        return lerp(1 - amount, 1, rng.noise(t * 1.2, z) * bean(1 - t)) * height

    curves = []
    for sign, z in ((-1, 1), (1, 2)):
        curve = []
        for i in range(n):
            t = i / (n - 1)
            curve.append((CENTER_X + (t - 0.5) * length, CENTER_Y + sign * profile(t, z)))
        curves.append(curve)
    return curves[0], curves[1]


def _inset(upper: Polyline, lower: Polyline, t: float) -> Polyline:
    return [lerp2d(a, b, t) for a, b in zip(upper, lower)]


def _mesh_units(upper: Polyline, lower: Polyline, unit: float):
    b = bbox(upper + lower)
    m = max(1, int(b.w / unit))
    n = max(1, int(b.h / unit))
    return b, m, n, b.w / m, b.h / n


def scaled_body(upper: Polyline, lower: Polyline, scale_scale: float, pattern: Pattern | None, rng: Rng) -> list[Polyline]:
    """Large interclipped scales. Scales over the pattern get inner marks,
    and those near the belly are thinned at random."""
    outline2 = upper + _inset(upper, lower, 0.95)[::-1]
    outline3 = upper + _inset(upper, lower, 0.85)[::-1]
    b, m, n, uw, uh = _mesh_units(upper, lower, scale_scale * 15)

    if pattern is not None:
        shape = lambda x, y, w, h: scale_shape(w, h, rng, 3 if pattern(x, y) else 0)
    else:
        shape = lambda x, y, w, h: scale_shape(w, h, rng)
    mesh = scale_mesh(m, n + 3, uw, uh, shape, rng, uw * 3, uh * 3, interclip=True)
    mesh = [translate(line, b.x, b.y - uh * 1.5) for line in mesh]

    inner = clip_multi(clip_multi(mesh, outline2).inside, outline3)
    belly = [line for line in inner.outside if rng.next() < 0.6]
    return [upper, lower[::-1], *inner.inside, *belly]


def small_scaled_body(upper: Polyline, lower: Polyline, scale_scale: float, pattern: Pattern | None, rng: Rng) -> list[Polyline]:
    """Fine unclipped scale rims, fading out toward the belly."""
    outline2 = upper + _inset(upper, lower, 0.95)[::-1]
    b, m, n, uw, uh = _mesh_units(upper, lower, scale_scale * 5)

    mesh = scale_mesh(
        m, n + 16, uw, uh,
        lambda x, y, w, h: scale_shape(w * 0.7, h * 0.6, rng, 0),
        rng, uw * 8, uh * 8, interclip=False,
    )
    mesh = [translate(line, b.x, b.y - uh * 8) for line in mesh]

    kept = []
    for line in clip_multi(mesh, outline2).inside:
        x, y = line[0]
        t = (y - b.y) / b.h
        if pattern is not None:
            if pattern(x, y) or (rng.next() > t and rng.next() > t):
                kept.append(line)
        elif rng.next() > t:
            kept.append(line)
    return [upper, lower[::-1], *kept]


def hatched_body(upper: Polyline, lower: Polyline, scale_scale: float, rng: Rng) -> list[Polyline]:
    """Cross hatching bent around the body by a cosine warp."""
    step = 6 * scale_scale
    outline2 = upper + _inset(upper, lower, 0.95)[::-1]
    midline = _inset(upper, lower, 0.4)[::-1]

    raw = bbox(upper + lower)
    bx, by = raw.x - step, raw.y - step
    bw, bh = raw.w + step * 2, raw.h + step * 2

    lines: list[Polyline] = [midline]
    i = -bh
    while i < bw:
        lines.append([(bx + i, by), (bx + i + bh, by + bh)])
        i += step
    i = 0.0
    while i < bw + bh:
        lines.append([(bx + i, by), (bx + i - bh, by + bh)])
        i += step

    warped = []
    for line in lines:
        bent = []
        for x, y in resample(line, 4):
            t = (y - by) / bh
            y1 = -math.cos(t * math.pi) * bh / 2 + by + bh / 2
            dx = (rng.noise(x * 0.005, y1 * 0.005, 0.1) - 0.5) * 50
            dy = (rng.noise(x * 0.005, y1 * 0.005, 1.2) - 0.5) * 50
            bent.append((x + dx, y1 + dy))
        warped.append(bent)

    inside = clip_multi(warped, outline2).inside
    kept = clip_multi_by(inside, lambda x, y, t: rng.next() > t or rng.next() > t).inside
    return [upper, lower[::-1], *kept]


def ribbed_body(upper: Polyline, lower: Polyline, scale_scale: float, rng: Rng) -> list[Polyline]:
    """Diagonal ribs between the outline and a midline, plus veins."""
    mid = _inset(upper, lower, 0.4)
    step = 10 * scale_scale
    upper = resample(upper, step)
    lower = resample(lower, step)
    mid = resample(mid, step)
    outline1 = upper + lower[::-1]

    ribs: list[Polyline] = [mid]
    for i in range(3, min(len(upper), len(lower), len(mid))):
        ribs.append([upper[i], mid[i - 3]])
        ribs.append([mid[i - 3], lower[i]])

    def keep(x: float, y: float, t: float) -> bool:
        edge = math.cos(t * math.pi)
        return (rng.next() > edge and rng.next() < x / 500) or (rng.next() > edge and rng.next() < x / 500)

    kept = []
    for rib in ribs:
        wobbly = []
        for x, y in resample(rib, 4):
            dx = 30 * (rng.noise(x * 0.01, y * 0.01, -1) - 0.5)
            dy = 30 * (rng.noise(x * 0.01, y * 0.01, 9) - 0.5)
            wobbly.append((x + dx, y + dy))
        kept.extend(clip_multi_by([wobbly], keep).inside)
    kept = clip_multi(kept, outline1).inside
    return [upper, lower[::-1], *kept, *veins(outline1, rng)]


def body_texture(
    phenotype: Mapping[str, Any], upper: Polyline, lower: Polyline, pattern: Pattern | None, rng: Rng
) -> list[Polyline]:
    kind = phenotype["scale_type"]
    scale_scale = phenotype["scale_scale"]
    if kind == 0:
        return scaled_body(upper, lower, scale_scale, pattern, rng)
    if kind == 1:
        return small_scaled_body(upper, lower, scale_scale, pattern, rng)
    if kind == 2:
        return hatched_body(upper, lower, scale_scale, rng)
    return ribbed_body(upper, lower, scale_scale, rng)

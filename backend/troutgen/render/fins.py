"""Fin builders and their placement along the body.

A builder takes a guide curve and sweeps rays off it at angles offset from
the curve normal. It returns ``(region, strokes)``: the closed region the
fin covers (used to clip whatever is drawn beneath it) and the strokes to
draw.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

from troutgen.kernel.clip import clip, clip_multi_by
from troutgen.kernel.sampling import resample
from troutgen.kernel.union import union
from troutgen.utils.geometry import Point, Polyline, dist, lerp, lerp2d, translate
from troutgen.utils.math_helpers import normal_angles
from troutgen.utils.rng import Rng

Fin = tuple[Polyline, list[Polyline]]
Profile = Callable[[float], float]


def _ray(origin: Point, angle: float, length: float) -> Point:
    return (origin[0] + math.cos(angle) * length, origin[1] + math.sin(angle) * length)


def fin_rays(
    curve: Polyline,
    ang0: float,
    ang1: float,
    profile: Profile,
    rng: Rng,
    clip_root: bool = False,
    curvature0: float = 0,
    curvature1: float = 0,
    softness: float = 10,
) -> Fin:
    """Soft-rayed fin: noisy rays under a wavy rim.

    With ``clip_root`` each ray starts a few samples out from the body.
    """
    n = len(curve)
    if n < 2:
        return list(curve), []
    angs = normal_angles(curve)
    rim: Polyline = []
    rays: list[Polyline] = []
    first: Polyline = []
    last: Polyline = []
    for i, (x0, y0) in enumerate(curve):
        t = i / (n - 1)
        a = angs[i] + lerp(ang0, ang1, t)
        tip = _ray((x0, y0), a, profile(t))
        cv = lerp(curvature0, curvature1, t)

        pts = resample([(x0, y0), tip], 3)
        bent = []
        for j, (x, y) in enumerate(pts):
            s = j / (len(pts) - 1) if len(pts) > 1 else 0.0
            ss = math.sqrt(s)
            bow = cv * math.sin(s * math.pi)
            bent.append((
                x + rng.noise(x * 0.1, y * 0.1, 3) * ss * softness + math.cos(a - math.pi / 2) * bow,
                y + rng.noise(x * 0.1, y * 0.1, 4) * ss * softness + math.sin(a - math.pi / 2) * bow,
            ))

        if i == 0:
            first = bent
        elif i == n - 1:
            last = bent[::-1]
        else:
            rim.append(bent[-1])
            lo = int(rng.next() * 4) if clip_root else 0
            hi = max(2, int(len(bent) * (rng.next() * 0.5 + 0.5)))
            ray = bent[lo:hi]
            if ray:
                rays.append(ray)

    wobble = softness / 10
    rim = [
        (x + (rng.noise(x * 0.1, y * 0.1) * 6 - 3) * wobble, y + (rng.noise(x * 0.1, y * 0.1) * 6 - 3) * wobble)
        for x, y in resample(rim, 3)
    ]
    edge = first + rim + last
    return edge + curve[::-1], [edge, *rays]


def fin_membrane(curve: Polyline, ang0: float, ang1: float, profile: Profile, rng: Rng, dark: float = 1) -> Fin:
    """Spiny fin: thin spines with a scalloped membrane and vein hatching between them."""
    n = len(curve)
    if n < 2:
        return list(curve), []
    angs = normal_angles(curve)
    spines: list[Polyline] = []
    for i, base in enumerate(curve):
        t = i / (n - 1)
        a = angs[i] + lerp(ang0, ang1, t)
        x1, y1 = _ray(base, a, profile(t))
        spines.append([
            _ray(base, a - math.pi / 2, 1.8),
            _ray((x1, y1), a - math.pi / 2, 0.5),
            _ray((x1, y1), a + math.pi / 2, 0.5),
            _ray(base, a + math.pi / 2, 1.8),
        ])

    k = 10
    membranes: list[Polyline] = []
    vein_lines: list[Polyline] = []
    for i in range(n - 1):
        _, _, a0, q0 = spines[i]
        p1, a1, _, _ = spines[i + 1]
        b = lerp2d(a0, q0, 0.1)
        c = lerp2d(a1, p1, 0.1)
        ang = math.atan2(c[1] - b[1], c[0] - b[0])
        web = []
        for j in range(k):
            t = j / (k - 1)
            p = lerp2d(b, c, t)
            web.append(_ray(p, ang + math.pi / 2, math.sin(t * math.pi) * 2))
        membranes.append(web)

        count = int(min(dist(a0, q0), dist(a1, p1)) / 10 * dark)
        root = lerp2d(curve[i], curve[i + 1], 0.5)
        for m in range(count):
            s = m / count * 0.7
            vein_lines.append([lerp2d(web[j], root, s) for j in range(1, k - 1)])

    visible = [spines[0]]
    clipper = spines[0]
    for spine in spines[1:]:
        visible.extend(clip(spine, clipper).outside)
        clipper = union(clipper, spine)

    region = [p for web in membranes for p in web] + curve[::-1]
    return region, visible + membranes + vein_lines


def finlet(curve: Polyline, h: float, rng: Rng, direction: int = 1) -> Fin:
    """Serrated row of small spikes, every third point raised."""
    n = len(curve)
    if n < 2:
        return list(curve), []
    angs = normal_angles(curve)
    tips: Polyline = []
    for i, base in enumerate(curve):
        t = i / (n - 1)
        w = 0 if (i + 1) % 3 else h
        w *= 1 - t * 0.5 if direction > 0 else 0.5 + t * 0.5
        tips.append(_ray(base, angs[i], w))
    edge = [
        (x + rng.noise(x * 0.1, y * 0.1) * 2 - 3, y + rng.noise(x * 0.1, y * 0.1) * 2 - 3)
        for x, y in resample(tips, 2)
    ]
    edge.append(curve[-1])
    return edge + curve[::-1], [edge]


def fin_adipose(curve: Polyline, dx: float, dy: float, r: float, rng: Rng) -> Fin:
    """Fleshy rounded fin: a circular cap tangent-joined to the curve ends."""
    if len(curve) < 2:
        return list(curve), []
    x0, y0 = curve[len(curve) // 2]
    cx, cy = x0 + dx, y0 + dy
    x1, y1 = curve[0]
    x2, y2 = curve[-1]
    d1 = max(dist((cx, cy), (x1, y1)), r)
    d2 = max(dist((cx, cy), (x2, y2)), r)
    a01 = math.atan2(y1 - cy, x1 - cx) + math.acos(r / d1)
    a02 = math.atan2(y2 - cy, x2 - cx) - math.acos(r / d2)
    a02 -= math.pi * 2
    while a02 < a01:
        a02 += math.pi * 2

    k = 20
    cap: Polyline = [(x1, y1)]
    for i in range(k):
        a = lerp(a01, a02, i / (k - 1))
        cap.append((cx + math.cos(a) * r, cy + math.sin(a) * r))
    cap.append((x2, y2))
    cap = resample(cap, 3)
    edge = []
    for i, (x, y) in enumerate(cap):
        s = math.sin(i / (len(cap) - 1) * math.pi)
        edge.append((
            x + (rng.noise(x * 0.01, y * 0.01) - 0.5) * s * 50,
            y + (rng.noise(x * 0.01, y * 0.01) - 0.5) * s * 50,
        ))

    region = edge + curve[::-1]
    shade = clip(translate(edge, 0, 4), region).inside
    shade = clip_multi_by(shade, lambda x, y, t: rng.next() < math.sin(t * math.pi)).inside
    return region, [edge, *shade]


# -- Placement ---------------------------------------------------------------


def _segment(curve: Polyline, start: Any, end: Any) -> Polyline:
    return curve[int(start):int(end)]


def dorsal_fin(phenotype: Mapping[str, Any], upper: Polyline, rng: Rng) -> Fin:
    length = phenotype["dorsal_length"]
    if phenotype["dorsal_type"] == 0:
        a0 = 0.2 + rng.deviate(0.05)
        a1 = 0.3 + rng.deviate(0.05)
        cv = 0.0
        profile = lambda t: (0.3 + rng.noise(t * 3) * 0.7) * length * math.sin(t * math.pi) ** 0.5
    else:
        a0 = 0.6 + rng.deviate(0.05)
        a1 = 0.3 + rng.deviate(0.05)
        cv = length / 8
        profile = lambda t: length * ((t - 1) ** 2 * 0.5 + (1 - t) * 0.5)
    guide = _segment(upper, phenotype["dorsal_start"], phenotype["dorsal_end"])
    if phenotype["dorsal_texture_type"] == 0:
        return fin_rays(resample(guide, 5), a0, a1, profile, rng, False, cv, 0)
    return fin_membrane(resample(guide, 15), a0, a1, profile, rng)


def pectoral_fin(phenotype: Mapping[str, Any], upper: Polyline, lower: Polyline, rng: Rng) -> Fin:
    length = phenotype["wing_length"]
    width = phenotype["wing_width"]
    px, py = lerp2d(upper[int(phenotype["wing_start"])], lower[int(phenotype["wing_end"])], phenotype["wing_y"])
    guide = [(px, lerp(py - width / 2, py + width / 2, i / 9)) for i in range(10)]

    if phenotype["wing_type"] == 0:
        a0 = -0.4 + rng.deviate(0.05)
        a1 = 0.4 + rng.deviate(0.05)
        softness, cv = 10, 0.0
        profile = lambda t: (40 + (20 + rng.noise(t * 3) * 70) * math.sin(t * math.pi) ** 0.5) / 130 * length
    else:
        a0 = 0 + rng.deviate(0.05)
        a1 = 0.4 + rng.deviate(0.05)
        softness, cv = 5, length / 25
        profile = lambda t: length * (1 - t * 0.95)

    if phenotype["wing_texture_type"] == 0:
        return fin_rays(resample(guide, 1.5), a0, a1, profile, rng, True, cv, 0, softness)
    return fin_membrane(resample(guide, 4), a0, a1, profile, rng, dark=0.3)


def pelvic_fin(phenotype: Mapping[str, Any], lower: Polyline, rng: Rng) -> Fin:
    length = phenotype["pelvic_length"]
    if phenotype["pelvic_type"] == 0:
        a0 = -0.8 + rng.deviate(0.05)
        a1 = -0.5 + rng.deviate(0.05)
        profile = lambda t: (10 + (15 + rng.noise(t * 3) * 60) * math.sin(t * math.pi) ** 0.5) / 85 * length
    else:
        a0 = -0.9 + rng.deviate(0.05)
        a1 = -0.3 + rng.deviate(0.05)
        profile = lambda t: (t * 0.5 + 0.5) * length
    guide = _segment(lower, phenotype["pelvic_start"], phenotype["pelvic_end"])[::-1]
    if phenotype["pelvic_texture_type"] == 0:
        return fin_rays(resample(guide, 2 if phenotype["pelvic_type"] else 5), a0, a1, profile, rng)
    return fin_membrane(resample(guide, 2 if phenotype["pelvic_type"] else 15), a0, a1, profile, rng)


def anal_fin(phenotype: Mapping[str, Any], lower: Polyline, rng: Rng) -> Fin:
    length = phenotype["anal_length"]
    a0 = -0.4 + rng.deviate(0.05)
    a1 = -0.4 + rng.deviate(0.05)
    if phenotype["anal_type"] == 0:
        profile = lambda t: (10 + (10 + rng.noise(t * 3) * 30) * math.sin(t * math.pi) ** 0.5) / 50 * length
    else:
        profile = lambda t: length * (t * t * 0.8 + 0.2)
    guide = _segment(lower, phenotype["anal_start"], phenotype["anal_end"])[::-1]
    if phenotype["anal_texture_type"] == 0:
        return fin_rays(resample(guide, 5), a0, a1, profile, rng)
    return fin_membrane(resample(guide, 15), a0, a1, profile, rng)


def tail_fin(phenotype: Mapping[str, Any], upper: Polyline, lower: Polyline, rng: Rng) -> Fin:
    length = phenotype["tail_length"]
    kind = phenotype["tail_type"]
    span = dist(upper[-2], lower[-2])
    rays = max(min(int(span / 1.5), 20), 8)
    step = span / rays
    pi = math.pi

    if kind in (0, 2):
        guide = [upper[-1], lower[-1]]
    else:
        guide = [upper[-2], lower[-2]]

    if kind == 0:
        profile = lambda t: (75 - (10 + rng.noise(t * 3) * 10) * math.sin(3 * t * pi - pi)) / 75 * length
    elif kind == 1:
        profile = lambda t: length * (math.sin(t * pi) * 0.5 + 0.5)
    elif kind == 2:
        cv = length / 8
        profile = lambda t: (abs(math.cos(pi * t)) * 0.8 + 0.2) * length
        return fin_rays(resample(guide, step * 0.7), -0.6, 0.6, profile, rng, True, cv, -cv)
    elif kind == 3:
        profile = lambda t: (1 - math.sin(t * pi) * 0.3) * length
    elif kind == 4:
        profile = lambda t: (1 - math.sin(t * pi) * 0.6) * (1 - t * 0.45) * length
    else:
        profile = lambda t: (1 - math.sin(t * pi) ** 0.4 * 0.55) * length
    return fin_rays(resample(guide, step), -0.6, 0.6, profile, rng, True)


def finlets(
    phenotype: Mapping[str, Any], upper: Polyline, lower: Polyline, outline: Polyline, rng: Rng
) -> tuple[list[Polyline], Polyline]:
    """Strokes for the finlet variant, plus the body outline (the adipose fin joins it)."""
    kind = phenotype["finlet_type"]
    if kind == 1:
        strokes = finlet(resample(upper[int(phenotype["dorsal_end"]):-2], 5), 5, rng)[1]
        guide = resample(lower[int(phenotype["anal_end"]):-2][::-1], 5)
        if len(guide) > 1:
            strokes = strokes + finlet(guide, 5, rng)[1]
        return strokes, outline
    if kind == 2:
        region, strokes = fin_adipose(resample(upper[27:30], 5), 20, -5, 6, rng)
        return strokes, union(outline, translate(region, 0, -1))
    if kind == 3:
        guide = resample(upper[int(phenotype["dorsal_end"]) + 2:-3], 5)
        if len(guide) > 2:
            length = phenotype["dorsal_length"]
            profile = lambda t: (0.3 + rng.noise(t * 3) * 0.7) * length * 0.6 * math.sin(t * math.pi) ** 0.5
            return fin_rays(guide, 0.2, 0.3, profile, rng)[1], outline
    return [], outline

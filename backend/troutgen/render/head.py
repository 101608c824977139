"""Head geometry: outline, gill line, eye, lips, jaw, teeth and barbels.

The head is laid out from three anchors: the nose, the top of the neck on
the upper body curve and the bottom of the neck on the lower one.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from troutgen.kernel.clip import clip, clip_multi
from troutgen.kernel.sampling import resample
from troutgen.kernel.texture import fill_lines, hatch, veins
from troutgen.utils.geometry import (
    Point,
    Polyline,
    dist,
    lerp,
    lerp2d,
    point_segment_distance,
    signed_pow,
    translate,
)
from troutgen.utils.rng import Rng

# Eye position as barycentric weights of (nose, upper neck)
EYE_PLACEMENT = (0.475, 0.375)


@dataclass
class Head:
    region: Polyline
    lines: list[Polyline]
    neckline: Point


def _polar(c: Point, angle: float, r: float) -> Point:
    return (c[0] + math.cos(angle) * r, c[1] + math.sin(angle) * r)


def lip(p0: Point, p1: Point, w: float, rng: Rng) -> Polyline:
    """Rounded lip outline hooked around ``p1``."""
    x0 = p0[0] + rng.next() * 0.001 - 0.0005
    y0 = p0[1] + rng.next() * 0.001 - 0.0005
    x1 = p1[0] + rng.next() * 0.001 - 0.0005
    y1 = p1[1] + rng.next() * 0.001 - 0.0005
    h = dist((x0, y0), (x1, y1))
    a0 = math.atan2(y1 - y0, x1 - x0)
    ang = math.acos(min(1.0, w / h)) if h > 0 else 0.0
    dx = math.cos(a0 + math.pi / 2) * 0.5
    dy = math.sin(a0 + math.pi / 2) * 0.5

    n = 10
    out: Polyline = [(x0 - dx, y0 - dy)]
    for i in range(n):
        a = lerp(ang, math.pi * 2 - ang, i / (n - 1)) + a0
        out.append((-math.cos(a) * w + x1, -math.sin(a) * w + y1))
    out.append((x0 + dx, y0 + dy))
    return [
        (x + rng.noise(x * 0.05, y * 0.05, -1) * 2 - 1, y + rng.noise(x * 0.05, y * 0.05, -2) * 2 - 1)
        for x, y in resample(out, 2.5)
    ]


def teeth(p0: Point, p1: Point, h: float, direction: int, spacing: float = 3.5) -> list[Polyline]:
    """Teeth along p0-p1, growing from nothing at p0 to ``h`` at p1."""
    n = max(2, int(dist(p0, p1) / spacing))
    ang = math.atan2(p1[1] - p0[1], p1[0] - p0[0])
    out = []
    for i in range(n):
        t = i / (n - 1)
        a = lerp2d(p0, p1, t)
        w = h * t
        tip = _polar(a, ang + direction * math.pi / 2, w)
        c = _polar(a, ang, 1)
        d = _polar(a, ang + math.pi, 1)
        hook = _polar(a, ang + direction * (math.pi / 2 + 0.15), w)
        out.append([c, lerp2d(c, tip, 0.7), hook, lerp2d(d, tip, 0.7), d])
    return out


def jaw(p0: Point, p1: Point, p2: Point, rng: Rng) -> tuple[Polyline, list[Polyline]]:
    """Lower jaw bulge from ``p2`` back to ``p0``, plus the triangle it closes."""
    n = 10
    ang = math.atan2(p2[1] - p0[1], p2[0] - p0[0])
    d = dist(p0, p2)
    curve = []
    for i in range(n):
        t = i / (n - 1)
        s = math.sin(t * math.pi)
        q = _polar(lerp2d(p2, p0, t), ang - math.pi / 2, s * d / 20)
        curve.append((
            q[0] + (rng.noise(q[0] * 0.01, q[1] * 0.01, 1) - 0.5) * 4 * s,
            q[1] + (rng.noise(q[0] * 0.01, q[1] * 0.01, 4) - 0.5) * 4 * s,
        ))
    return [p2, p1, p0], [curve, *veins(curve, rng, 5)]


def ringed_eye(ex: float, ey: float, rad: float, rng: Rng) -> tuple[Polyline, list[Polyline]]:
    n = 20
    ring: Polyline = []
    lid: Polyline = []
    pupil: Polyline = []
    for i in range(n):
        t = i / (n - 1)
        a = t * math.pi * 2 + math.pi / 4 * 3
        ring.append(_polar((ex, ey), a, rad))
        if t > 0.5:
            lid.append(_polar((ex, ey), a, rad * 0.8))
        px, py = _polar((ex, ey), a, rad * 0.4)
        pupil.append((px - 0.75, py - 0.75))
    return ring, [ring, lid, pupil, *hatch(pupil, rng, 2.7, 10, 10)]


def layered_eye(ex: float, ey: float, rad: float, rng: Rng) -> tuple[Polyline, list[Polyline]]:
    n = 20
    ring: Polyline = []
    pupil: Polyline = []
    for i in range(n):
        a = i / (n - 1) * math.pi * 2 + math.e
        ring.append(_polar((ex, ey), a, rad))
        pupil.append(_polar((ex, ey), a, rad * 0.4))

    arcs = []
    for i in range(int(rad * 0.6 / 2)):
        r = rad - i * 2
        arcs.append([_polar((ex, ey), lerp(math.pi * 7 / 8, math.pi * 13 / 8, j / (n - 1)), r) for j in range(n)])

    glint = resample([
        _polar((ex, ey), -math.pi * 3 / 4, rad * 0.9),
        (ex + 1, ey + 1),
        _polar((ex, ey), -math.pi * 11 / 12, rad * 0.9),
    ], 3)
    jittered = []
    for x, y in glint:
        x += rng.noise(x * 0.1, y * 0.1, 22) * 4 - 2
        y += rng.noise(x * 0.1, y * 0.1, 33) * 4 - 2
        jittered.append((x, y))
    glint = jittered

    fill = clip_multi(fill_lines(pupil, 1.5), glint).outside
    arcs = clip_multi(arcs, glint).outside
    return ring, [ring, *arcs, *clip(pupil, glint).outside, *fill]


def barbel(x: float, y: float, n: int, ang: float, rng: Rng, step: float = 3) -> Polyline:
    """Tapered whisker wandering off at ``ang`` for ``n`` steps."""
    n = int(n)
    spine: Polyline = [(x, y)]
    sd = rng.next() * math.pi * 2
    ar = 1.0
    for i in range(n):
        x += math.cos(ang) * step
        y += math.sin(ang) * step
        ang += (rng.noise(i * 0.1, sd) - 0.5) * ar
        ar *= 1.02 if i < n / 2 else 0.92
        spine.append((x, y))

    left: Polyline = []
    right: Polyline = []
    for i in range(n - 1):
        w = 1.5 * (1 - i / (n - 1))
        b = spine[i]
        c = spine[i + 1]
        a1 = math.atan2(c[1] - b[1], c[0] - b[0])
        if i > 0:
            a = spine[i - 1]
            a0 = math.atan2(a[1] - b[1], a[0] - b[0])
            a1 -= math.pi * 2
            while a1 < a0:
                a1 += math.pi * 2
            a2 = (a0 + a1) / 2
        else:
            a2 = a1 - math.pi / 2
        left.append(_polar(b, a2, w))
        right.append(_polar(b, a2 + math.pi, w))
    left.append(spine[-1])
    return left + right[::-1]


def _head_curves(nose: Point, upper: Point, lower: Point, rng: Rng) -> tuple[Polyline, Polyline, Polyline]:
    (x0, y0), (x1, y1), (x2, y2) = nose, upper, lower
    n = 20
    top: Polyline = []
    bottom: Polyline = []
    for i in range(n):
        t = i / (n - 1)
        a = math.pi / 2 * t
        x = x1 - signed_pow(math.cos(a), 1.5) * (x1 - x0)
        y = y0 - signed_pow(math.sin(a), 1.5) * (y0 - y1)
        top.append((
            x + (rng.noise(x * 0.01, y * 0.01, 9) * 40 - 20) * (1.01 - t),
            y + (rng.noise(x * 0.01, y * 0.01, 8) * 40 - 20) * (1.01 - t),
        ))
    for i in range(n):
        t = i / (n - 1)
        a = math.pi / 2 * t
        x = x2 - signed_pow(math.cos(a), 0.8) * (x2 - x0)
        y = y0 + signed_pow(math.sin(a), 1.5) * (y2 - y0)
        bottom.append((
            x + (rng.noise(x * 0.01, y * 0.01, 9) * 40 - 20) * (1.01 - t),
            y + (rng.noise(x * 0.01, y * 0.01, 8) * 40 - 20) * (1.01 - t),
        ))
    bottom.reverse()

    ang = math.atan2(y2 - y1, x2 - x1)
    gill: Polyline = []
    for i in range(1, n - 1):
        t = i / (n - 1)
        r = rng.noise(t * 2, 1.2) * signed_pow(math.sin(t * math.pi), 0.5) * 20
        gill.append(_polar(lerp2d(upper, lower, t), ang - math.pi / 2, r))
    return top, gill, bottom


def _place_eye(nose: Point, upper: Point, lower: Point, size: float) -> tuple[Point, float]:
    """Eye centre and radius, moved or shrunk to stay clear of the head edges."""
    (x0, y0), (x1, y1), (x2, y2) = nose, upper, lower
    wa, wb = EYE_PLACEMENT
    eye = (x0 * wa + x1 * wb + x2 * (1 - wa - wb), y0 * wa + y1 * wb + y2 * (1 - wa - wb))
    d0 = point_segment_distance(eye, nose, upper)
    d1 = point_segment_distance(eye, nose, lower)
    if d0 < size and d1 < size:
        size = min(d0, d1)
    elif d0 < size:
        ang = math.atan2(y1 - y0, x1 - x0) + math.pi / 2
        eye = _polar(((x0 + x1) / 2, (y0 + y1) / 2), ang, size)
    return eye, size


def head(nose: Point, upper: Point, lower: Point, phenotype: Mapping[str, Any], rng: Rng) -> Head:
    top, gill, bottom = _head_curves(nose, upper, lower, rng)
    neckline = top[-1]
    outline = top + gill + bottom

    inline = (gill[len(gill) // 3:] + bottom[: len(bottom) // 2])[: len(top)]
    inline = [
        lerp2d(p, top[i], math.sin(i / (len(inline) - 1) * math.pi) ** 2 * 0.1 + 0.12)
        for i, p in enumerate(inline)
    ]
    dix = (nose[0] - inline[-1][0]) * 0.3
    diy = (nose[1] - inline[-1][1]) * 0.2
    inline = translate(inline, dix, diy)

    (ex, ey), eye_size = _place_eye(nose, upper, lower, phenotype["eye_size"])

    mouth = int(phenotype["mouth_size"])
    corner = bottom[18]
    jaw_pt0 = bottom[18 - mouth]
    jaw_len = dist(jaw_pt0, corner) * phenotype["jaw_size"]
    jaw_ang = math.atan2(corner[1] - jaw_pt0[1], corner[0] - jaw_pt0[0])
    jaw_ang -= (phenotype["has_teeth"] * 0.5 + 0.5) * phenotype["jaw_open"] * math.pi / 4
    jaw_pt1 = _polar(jaw_pt0, jaw_ang, jaw_len)

    eye_fn = layered_eye if phenotype["eye_type"] else ringed_eye
    eye_ring, eye_lines = eye_fn(ex, ey, eye_size, rng)
    eye_lines = clip_multi(eye_lines, outline).inside
    inlines = clip(inline, eye_ring).outside

    upper_lip = lip(jaw_pt0, corner, 3, rng)
    lower_lip = lip(jaw_pt0, jaw_pt1, 3, rng)

    jaw_region, jaw_lines = jaw(bottom[15 - mouth], jaw_pt0, jaw_pt1, rng)
    jaw_lines = clip_multi(jaw_lines, lower_lip).outside
    jaw_lines = clip_multi(jaw_lines, outline).outside
    jaw_lines.append(jaw_region)

    upper_teeth: list[Polyline] = []
    lower_teeth: list[Polyline] = []
    if phenotype["has_teeth"]:
        length = phenotype["teeth_length"]
        spacing = phenotype["teeth_space"]
        upper_teeth = clip_multi(teeth(jaw_pt0, corner, length, -1, spacing), upper_lip).outside
        lower_teeth = clip_multi(teeth(jaw_pt0, jaw_pt1, length, 1, spacing), lower_lip).outside

    outlines = clip(outline, upper_lip).outside
    upper_lips = clip(upper_lip, lower_lip).outside

    shading = hatch(outline, rng, 6, -6, -6)
    shading = clip_multi(clip_multi(shading, upper_lip).outside, eye_ring).outside
    texture = veins(outline, rng, int(phenotype["head_texture_amount"]))
    texture = clip_multi(clip_multi(texture, upper_lip).outside, eye_ring).outside

    barbels: list[Polyline] = []
    lower_lips = [lower_lip]
    if phenotype["has_moustache"]:
        moustache = barbel(*jaw_pt0, phenotype["moustache_length"], math.pi * 3 / 4, rng, 1.5)
        lower_lips = clip(lower_lip, moustache).outside
        jaw_lines = clip_multi(jaw_lines, moustache).outside
        barbels.append(moustache)

    if phenotype["has_beard"]:
        if jaw_lines and jaw_lines[0]:
            root = jaw_lines[0][len(jaw_lines[0]) // 2]
        else:
            root = bottom[8]
        beard = []
        for _ in range(3):
            ang = math.pi * 0.6 + rng.next() * 0.4 - 0.2
            strand = barbel(*root, phenotype["beard_length"], ang, rng)
            beard.append(translate(strand, rng.next() - 0.5, rng.next() - 0.5))
        b1, b2, b3 = beard
        b3c = clip_multi(clip_multi([b3], b2).outside, b1).outside
        b2c = clip_multi([b2], b1).outside
        barbels.extend([b1, *b2c, *b3c])

    region = [
        (0, 0),
        (top[-1][0], 0),
        top[-1],
        *gill,
        bottom[0],
        (bottom[0][0], 300),
        (0, 300),
    ]
    lines = [
        *outlines,
        *inlines,
        *upper_lips,
        *lower_lips,
        *eye_lines,
        *shading,
        *texture,
        *barbels,
        *upper_teeth,
        *lower_teeth,
        *jaw_lines,
    ]
    return Head(region=region, lines=lines, neckline=neckline)

"""Compose a whole fish from its phenotype and serialize it to SVG.

Rendering is a pure function of ``(phenotype, overlay, seed)``: every draw
comes from a fresh ``Rng(seed)`` and the phenotype mapping is only read.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from troutgen.kernel.clip import clip_multi
from troutgen.kernel.sampling import simplify
from troutgen.kernel.texture import dots, hatch, pattern_shade
from troutgen.kernel.union import union
from troutgen.render.body import body_curves, body_texture
from troutgen.render.fins import anal_fin, dorsal_fin, finlets, pectoral_fin, pelvic_fin, tail_fin
from troutgen.render.head import head
from troutgen.render.overlay import (
    SEASONAL_BACKGROUND,
    SEASONAL_FILL,
    OverlayOptions,
    seasonal_hat,
    snowfall,
)
from troutgen.render.patterns import SMALL_DOTS, pattern_for
from troutgen.svg.serializer import path_data, serialize_svg
from troutgen.utils.geometry import BBox, Point, Polyline, bbox, dist, translate
from troutgen.utils.rng import Rng

logger = logging.getLogger(__name__)

CANVAS_W = 520
CANVAS_H = 320
FRAME = 10
DRAW_W = 500
DRAW_H = 300
PADDING = 20

# Slices of the final polyline list that get a filled underlay:
# positive k takes the first k lines, negative k the last -k.
FILL_SLICES = (2, 3, 5, -8, -5, -3, -2)

GRADIENT_ID = "trout-gradient"
GRADIENT_STOPS = (
    ("0%", "#4F0E23"),
    ("15%", "#63343E"),
    ("30%", "#3F7067"),
    ("50%", "#E38A26"),
    ("70%", "#A1161D"),
    ("85%", "#581414"),
)


@dataclass(frozen=True)
class Layout:
    """How model coordinates were fitted into the drawing area."""

    bbox: BBox
    px: float
    py: float
    s: float
    p: float

    def to_canvas(self, point: Point) -> Point:
        x, y = point
        return (
            (x - self.bbox.x) * self.s + self.px + self.p,
            (y - self.bbox.y) * self.s + self.py + self.p,
        )


@dataclass
class Drawing:
    lines: list[Polyline]
    neckline: Point
    head_length: float


def compose(phenotype: Mapping[str, Any], rng: Rng) -> Drawing:
    """Build every stroke of the fish in model space, mutually clipped."""
    upper, lower = body_curves(phenotype, rng)
    outline = upper + lower[::-1]
    shading = hatch(outline, rng, 8, -12, -12)

    pattern = pattern_for(phenotype, rng)
    body = body_texture(phenotype, upper, lower, pattern, rng)

    dorsal_region, dorsal = dorsal_fin(phenotype, upper, rng)
    dorsal = clip_multi(dorsal, translate(outline, 0, 0.001)).outside

    pectoral_region, pectoral = pectoral_fin(phenotype, upper, lower, rng)
    body = clip_multi(body, pectoral_region).outside

    _, pelvic = pelvic_fin(phenotype, lower, rng)
    pelvic = clip_multi(pelvic, pectoral_region).outside

    _, anal = anal_fin(phenotype, lower, rng)
    anal = clip_multi(anal, pectoral_region).outside

    tail_region, tail = tail_fin(phenotype, upper, lower, rng)
    body = clip_multi(body, translate(tail_region, 1, 0)).outside
    tail = clip_multi(tail, pectoral_region).outside

    extra, outline = finlets(phenotype, upper, lower, outline, rng)

    nose = (50 - phenotype["head_length"], 150 + phenotype["nose_height"])
    if phenotype["neck_type"] == 0:
        fh = head(nose, upper[6], lower[5], phenotype, rng)
    else:
        fh = head(nose, upper[5], lower[6], phenotype, rng)

    body = clip_multi(body, fh.region).outside
    shading = clip_multi(clip_multi(shading, fh.region).outside, pectoral_region).outside
    pectoral = clip_multi(pectoral, fh.region).outside
    dorsal = clip_multi(dorsal, pectoral_region).outside

    pattern_lines: list[Polyline] = []
    if pattern is not None:
        if phenotype["scale_type"] > 1:
            pattern_lines = pattern_shade(union(outline, translate(dorsal_region, 0, 3)), 3.5, pattern)
        else:
            pattern_lines = pattern_shade(dorsal_region, 4.5, pattern)
        pattern_lines = clip_multi(clip_multi(pattern_lines, fh.region).outside, pectoral_region).outside

    dot_lines: list[Polyline] = []
    if phenotype["pattern_type"] == SMALL_DOTS:
        dot_lines = dots(union(outline, translate(dorsal_region, 0, 5)), rng, phenotype["pattern_scale"])
        dot_lines = clip_multi(clip_multi(dot_lines, pectoral_region).outside, fh.region).outside

    lines = [
        *body,
        *dorsal,
        *pectoral,
        *pelvic,
        *anal,
        *extra,
        *fh.lines,
        *shading,
        *pattern_lines,
        *dot_lines,
        *tail,
    ]
    return Drawing(lines=lines, neckline=fh.neckline, head_length=phenotype["head_length"])


def reframe(polylines: list[Polyline], pad: float = PADDING) -> tuple[list[Polyline], Layout]:
    """Scale and centre into the drawing area, keeping aspect."""
    w = DRAW_W - pad * 2
    h = DRAW_H - pad * 2
    box = bbox([p for line in polylines for p in line])
    s = min(w / box.w if box.w else 1.0, h / box.h if box.h else 1.0)
    layout = Layout(bbox=box, px=(w - box.w * s) / 2, py=(h - box.h * s) / 2, s=s, p=pad)
    return [[layout.to_canvas(p) for p in line] for line in polylines], layout


def _truncate(v: float) -> float:
    return int(v * 10000) / 10000


def cleanup(polylines: list[Polyline]) -> list[Polyline]:
    """Simplify, truncate to 4 decimals and drop degenerate polylines."""
    out = []
    for line in polylines:
        line = [(_truncate(x), _truncate(y)) for x, y in simplify(line, 0.1)]
        if len(line) < 2:
            continue
        if len(line) == 2 and dist(line[0], line[1]) < 0.9:
            continue
        out.append(line)
    return out


def _fill_slice(lines: list[Polyline], k: int) -> list[Polyline]:
    return lines[k:] if k < 0 else lines[:k]


def to_svg(
    lines: list[Polyline],
    layout: Layout,
    drawing: Drawing,
    phenotype: Mapping[str, Any],
    overlay: OverlayOptions,
    rng: Rng,
) -> str:
    background = "floralwhite"
    fill = "floralwhite"
    stroke = "black"
    defs: list[dict[str, Any]] = []
    underlay: list[dict[str, Any]] = []
    on_top: list[dict[str, Any]] = []

    if phenotype.get("color") == "rainbow":
        defs.append({
            "tag": "linearGradient",
            "id": GRADIENT_ID,
            "x1": 0, "y1": 0, "x2": 0, "y2": 1,
            "children": [{"tag": "stop", "offset": o, "stop-color": c} for o, c in GRADIENT_STOPS],
        })
        stroke = f"url(#{GRADIENT_ID})"
        fill = "snow"

    if overlay.seasonal:
        fill = SEASONAL_FILL
        background = SEASONAL_BACKGROUND
        on_top = seasonal_hat(drawing.neckline, drawing.head_length, layout, rng)
        underlay = snowfall(rng, DRAW_W, DRAW_H)

    elements: list[dict[str, Any]] = [
        {"tag": "rect", "x": 0, "y": 0, "width": CANVAS_W, "height": CANVAS_H, "fill": background},
        {
            "tag": "rect", "x": FRAME, "y": FRAME, "width": DRAW_W, "height": DRAW_H,
            "stroke": "black", "stroke-width": 1, "fill": "none",
        },
        *underlay,
    ]
    for k in FILL_SLICES:
        elements.append({"tag": "path", "fill": fill, "d": path_data(_fill_slice(lines, k), FRAME, close=True)})
    elements.append({
        "tag": "path",
        "stroke": stroke,
        "stroke-width": 1,
        "fill": fill,
        "stroke-linecap": "round",
        "stroke-linejoin": "round",
        "d": path_data(lines, FRAME),
    })
    elements.extend(on_top)
    return serialize_svg(elements, CANVAS_W, CANVAS_H, defs=defs)


def render(phenotype: Mapping[str, Any], overlay: OverlayOptions | None = None, seed: int = 0) -> str:
    """Draw ``phenotype`` as an SVG document."""
    overlay = overlay or OverlayOptions()
    started = time.perf_counter()
    rng = Rng(seed)
    drawing = compose(phenotype, rng)
    framed, layout = reframe(drawing.lines)
    lines = cleanup(framed)
    svg = to_svg(lines, layout, drawing, phenotype, overlay, rng)
    logger.debug(
        "Rendered seed=%d lines=%d seasonal=%s in %.1fms",
        seed, len(lines), overlay.seasonal, (time.perf_counter() - started) * 1000,
    )
    return svg


def rasterize_png(svg: str, scale: float = 1.0) -> bytes:
    """Render SVG text to PNG bytes."""
    import cairosvg

    return cairosvg.svg2png(
        bytestring=svg.encode(),
        output_width=int(CANVAS_W * scale),
        output_height=int(CANVAS_H * scale),
    )

"""Seasonal overlay: a hat on the neckline and snowflakes behind the fish.

Asset paths are parsed with svgpathtools and transformed straight into
canvas coordinates, so the output needs no nested ``<svg>`` viewports.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from svgpathtools import parse_path

from troutgen.render.assets import (
    HAT_HEIGHT,
    HAT_ORIGIN,
    HAT_PATHS,
    HAT_WIDTH,
    SNOWFLAKE_HEIGHT,
    SNOWFLAKE_PATH,
    SNOWFLAKE_WIDTH,
)
from troutgen.utils.geometry import Point
from troutgen.utils.rng import Rng

SEASONAL_BACKGROUND = "powderblue"
SEASONAL_FILL = "#fff6e5"
FLIP_CHANCE = 0.2

_STROKE_WIDTH = re.compile(r"stroke-width:([0-9.]+)(px)?")


@dataclass(frozen=True)
class OverlayOptions:
    seasonal: bool = False


def _scale_stroke(style: str, k: float) -> str:
    return _STROKE_WIDTH.sub(lambda m: f"stroke-width:{float(m.group(1)) * k:.4g}", style)


def hat(x: float, y: float, width: float, flip: bool) -> list[dict[str, Any]]:
    """Hat paths fitted into a box of ``width`` whose top-left corner is (x, y)."""
    k = width / HAT_WIDTH
    elements = []
    for d, style in HAT_PATHS:
        path = parse_path(d).translated(HAT_ORIGIN)
        if flip:
            path = path.scaled(-1, 1).translated(HAT_WIDTH)
        path = path.scaled(k).translated(complex(x, y))
        elements.append({"tag": "path", "d": path.d(), "style": _scale_stroke(style, k)})
    return elements


def snowflake(x: float, y: float, size: float, degrees: float) -> dict[str, Any]:
    """A snowflake centred in a ``size`` square at (x, y), rotated about its middle."""
    k = size / max(SNOWFLAKE_WIDTH, SNOWFLAKE_HEIGHT)
    dx = (size - SNOWFLAKE_WIDTH * k) / 2
    dy = (size - SNOWFLAKE_HEIGHT * k) / 2
    origin = complex(SNOWFLAKE_WIDTH / 2, SNOWFLAKE_HEIGHT / 2)
    path = parse_path(SNOWFLAKE_PATH).rotated(degrees, origin=origin).scaled(k).translated(complex(x + dx, y + dy))
    return {
        "tag": "path",
        "d": path.d(),
        "fill": "snow",
        "stroke": "gray",
        "stroke-width": f"{k:.4g}",
    }


def snowfall(rng: Rng, width: float = 500, height: float = 300) -> list[dict[str, Any]]:
    count = 20 + math.ceil(rng.next() * 100)
    flakes = []
    for _ in range(count):
        size = 40 * rng.next() + 3
        degrees = round(360 * rng.next())
        flakes.append(snowflake(rng.next() * (width - size), rng.next() * (height - size), size, degrees))
    return flakes


def seasonal_hat(neckline: Point, head_length: float, layout: Any, rng: Rng) -> list[dict[str, Any]]:
    """Place the hat over the framed neckline, flipped now and then."""
    width = head_length * 4
    height = width * HAT_HEIGHT / HAT_WIDTH
    flip = rng.next() > 1 - FLIP_CHANCE
    nx, ny = layout.to_canvas(neckline)
    x = nx - (0 if flip else width / 2)
    y = ny - height + 25 + (10 if flip else 0)
    return hat(x, y, width, flip)

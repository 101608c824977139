"""Write SVG output from element dicts and polylines."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from html import escape
from typing import Any

from troutgen.utils.geometry import Point


def format_coord(v: float, offset: float = 0.0) -> str:
    """Truncate to two decimals after shifting by ``offset``."""
    n = int((v + offset) * 100) / 100
    text = f"{n:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def path_data(polylines: Iterable[Sequence[Point]], offset: float = 0.0, close: bool = False) -> str:
    """``M x y x y ...`` per polyline, or one closed run over all of them."""
    if close:
        coords = " ".join(
            f"{format_coord(x, offset)} {format_coord(y, offset)}" for line in polylines for x, y in line
        )
        return f"M {coords} Z"
    parts = []
    for line in polylines:
        coords = " ".join(f"{format_coord(x, offset)} {format_coord(y, offset)}" for x, y in line)
        parts.append(f"M {coords}")
    return "\n".join(parts)


def _element(elem: dict[str, Any], indent: str) -> list[str]:
    tag = elem.get("tag", "path")
    attrs = {k: v for k, v in elem.items() if k not in ("tag", "children")}
    attr_str = " ".join(f'{k}="{escape(str(v))}"' for k, v in attrs.items())
    children = elem.get("children") or []
    if not children:
        return [f"{indent}<{tag} {attr_str} />"]
    lines = [f"{indent}<{tag} {attr_str}>"]
    for child in children:
        lines.extend(_element(child, indent + "  "))
    lines.append(f"{indent}</{tag}>")
    return lines


def serialize_svg(
    elements: list[dict[str, Any]],
    canvas_w: float = 520,
    canvas_h: float = 320,
    title: str = "",
    description: str = "",
    defs: list[dict[str, Any]] | None = None,
) -> str:
    """Generate SVG markup from element definitions.

    Elements are dicts with a ``tag`` key, optional ``children`` and the
    remaining keys written as attributes in insertion order.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{canvas_w}" height="{canvas_h}"'
        f' viewBox="0 0 {canvas_w} {canvas_h}">',
    ]

    if title:
        lines.append(f"  <title>{escape(title)}</title>")
    if description:
        lines.append(f"  <desc>{escape(description)}</desc>")

    if defs:
        lines.append("  <defs>")
        for elem in defs:
            lines.extend(_element(elem, "    "))
        lines.append("  </defs>")

    for elem in elements:
        lines.extend(_element(elem, "  "))

    lines.append("</svg>")
    return "\n".join(lines)

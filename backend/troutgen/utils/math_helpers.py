"""Shape functions shared by the renderer. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Sequence

from troutgen.utils.geometry import Point


def gauss2d(x: float, y: float) -> float:
    """Unnormalised 2D Gaussian bump, 1.0 at the origin."""
    return math.exp(-0.5 * x * x) * math.exp(-0.5 * y * y)


def bean(x: float) -> float:
    """Half-bean profile on [0, 1], used by the second body curve family."""
    return math.sqrt(max(0.0, 0.25 - (x - 0.5) ** 2)) * (2.6 + 2.4 * math.pow(x, 1.5)) * 0.542


def normal_angles(curve: Sequence[Point]) -> list[float]:
    """Outward ray angle at each vertex of a guide curve.

    Endpoints use the perpendicular of their single edge; interior vertices
    bisect the two edges, measured clockwise from the previous edge.
    """
    n = len(curve)
    if n < 2:
        return [0.0] * n
    angs: list[float] = []
    for i in range(n):
        if i == 0:
            a = math.atan2(curve[1][1] - curve[0][1], curve[1][0] - curve[0][0]) - math.pi / 2
        elif i == n - 1:
            a = math.atan2(curve[i][1] - curve[i - 1][1], curve[i][0] - curve[i - 1][0]) - math.pi / 2
        else:
            a0 = math.atan2(curve[i - 1][1] - curve[i][1], curve[i - 1][0] - curve[i][0])
            a1 = math.atan2(curve[i + 1][1] - curve[i][1], curve[i + 1][0] - curve[i][0])
            while a1 > a0:
                a1 -= math.pi * 2
            a1 += math.pi * 2
            a = (a0 + a1) / 2
        angs.append(a)
    return angs

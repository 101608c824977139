"""Body pattern predicates: ``(x, y) -> bool`` masks over the unframed canvas."""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from typing import Any

import numpy as np

from troutgen.kernel.sampling import poisson_disk
from troutgen.utils.geometry import as_array
from troutgen.utils.math_helpers import gauss2d
from troutgen.utils.rng import Rng

Pattern = Callable[[float, float], bool]

SPOTS = 1
BLOTCHES = 2
BANDS = 3
SMALL_DOTS = 4


def spot_field(scale: float, rng: Rng) -> Pattern:
    """Poisson-disk spots with a noisy Gaussian falloff."""
    samples = poisson_disk(500, 300, 20 * scale, rng)
    centers = as_array(samples)
    radii = np.array([(rng.next() * 5 + 10) * scale for _ in samples])

    def spots(x: float, y: float) -> bool:
        near = np.flatnonzero(np.hypot(centers[:, 0] - x, centers[:, 1] - y) < radii)
        if len(near) == 0:
            return False
        grain = rng.noise(x, y, 999)
        for k in near:
            r = radii[k]
            dx = x - centers[k, 0]
            dy = y - centers[k, 1]
            if gauss2d(dx / r * 2, dy / r * 2) * grain > 0.2:
                return True
        return False

    return spots


def pattern_for(phenotype: Mapping[str, Any], rng: Rng) -> Pattern | None:
    """The predicate for ``pattern_type``. None for plain bodies and small dots,
    which are drawn separately."""
    kind = phenotype["pattern_type"]
    scale = phenotype["pattern_scale"]
    if kind == SPOTS:
        return spot_field(scale, rng)
    if kind == BLOTCHES:
        return lambda x, y: rng.noise(x * 0.1, y * 0.1) * max(0.35, (y - 10) / 280) < 0.2
    if kind == BANDS:
        def bands(x: float, y: float) -> bool:
            dx = rng.noise(x * 0.01, y * 0.01) * 30
            return math.fmod(int((x + dx) / (30 * scale)), 2) == 1

        return bands
    return None

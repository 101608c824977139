"""Seeded xorshift32 generator with coherent Perlin-style noise. No engine imports.

Every generation run owns its own ``Rng``. Two instances seeded with the
same value produce identical streams and identical noise surfaces no matter
what else has been drawn elsewhere in the process.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

DEFAULT_SEED = 0x5EED
MAX_SEED = 2**32 - 1

# Noise lattice layout (p5.js compatible)
PERLIN_YWRAPB = 4
PERLIN_YWRAP = 1 << PERLIN_YWRAPB
PERLIN_ZWRAPB = 8
PERLIN_ZWRAP = 1 << PERLIN_ZWRAPB
PERLIN_SIZE = 4095
PERLIN_OCTAVES = 4
PERLIN_AMP_FALLOFF = 0.5


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _scaled_cosine(i: float) -> float:
    return 0.5 * (1.0 - math.cos(i * math.pi))


class Rng:
    """Deterministic uniform stream plus a lazily built noise lattice."""

    def __init__(self, seed: int = DEFAULT_SEED) -> None:
        self._state = 0
        self._perlin: list[float] | None = None
        self.seed(seed)

    def seed(self, n: int) -> None:
        """Reset the stream. The noise lattice is rebuilt on next use."""
        state = _int32(int(n) % 2**32)
        # zero is a fixed point of xorshift
        self._state = state or DEFAULT_SEED
        self._perlin = None

    def next(self) -> float:
        """Uniform float in [0, 1)."""
        s = self._state
        s = _int32(s ^ (s << 17))
        s = _int32(s ^ (s >> 13))
        s = _int32(s ^ (s << 5))
        self._state = s
        return (s & 0xFFFFFFFF) / 4294967296.0

    __call__ = next

    def gauss(self, mean: float = 0.0, std: float = 1.0) -> float:
        """Box-Muller sample."""
        u = self._nonzero()
        v = self._nonzero()
        normal = math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
        return mean + std * normal

    def _nonzero(self) -> float:
        r = self.next()
        while r == 0.0:
            r = self.next()
        return r

    def choice(self, options: Sequence[T], weights: Sequence[float] | None = None) -> T:
        """Weighted pick; uniform when no weights are given."""
        if not options:
            raise ValueError("choice() from an empty sequence")
        if weights is None:
            weights = [1.0] * len(options)
        if len(weights) != len(options):
            raise ValueError("choice() weights do not match options")
        total = float(sum(weights))
        r = self.next() * total
        acc = 0.0
        for option, w in zip(options, weights):
            acc += w
            if r <= acc:
                return option
        return options[-1]

    def triangular(self, low: float, mode: float, high: float) -> float:
        """Sample a triangular distribution by inverting its CDF."""
        s0 = (mode - low) / 2
        s1 = (high - mode) / 2
        s = s0 + s1
        r = self.next() * s
        if r < s0:
            return low + math.sqrt(2 * r * (mode - low))
        return high - math.sqrt(2 * (s - r) * (high - mode))

    def deviate(self, n: float) -> float:
        """Uniform in [-n, n)."""
        return self.next() * 2 * n - n

    def noise(self, x: float, y: float = 0.0, z: float = 0.0) -> float:
        """Smooth noise in roughly [0, 1), 4 octaves."""
        if self._perlin is None:
            self._perlin = [self.next() for _ in range(PERLIN_SIZE + 1)]
        perlin = self._perlin

        x, y, z = abs(x), abs(y), abs(z)
        xi, yi, zi = math.floor(x), math.floor(y), math.floor(z)
        xf, yf, zf = x - xi, y - yi, z - zi

        r = 0.0
        ampl = 0.5
        for _ in range(PERLIN_OCTAVES):
            of = xi + (yi << PERLIN_YWRAPB) + (zi << PERLIN_ZWRAPB)
            rxf = _scaled_cosine(xf)
            ryf = _scaled_cosine(yf)

            n1 = perlin[of & PERLIN_SIZE]
            n1 += rxf * (perlin[(of + 1) & PERLIN_SIZE] - n1)
            n2 = perlin[(of + PERLIN_YWRAP) & PERLIN_SIZE]
            n2 += rxf * (perlin[(of + PERLIN_YWRAP + 1) & PERLIN_SIZE] - n2)
            n1 += ryf * (n2 - n1)

            of += PERLIN_ZWRAP
            n2 = perlin[of & PERLIN_SIZE]
            n2 += rxf * (perlin[(of + 1) & PERLIN_SIZE] - n2)
            n3 = perlin[(of + PERLIN_YWRAP) & PERLIN_SIZE]
            n3 += rxf * (perlin[(of + PERLIN_YWRAP + 1) & PERLIN_SIZE] - n3)
            n2 += ryf * (n3 - n2)

            n1 += _scaled_cosine(zf) * (n2 - n1)
            r += n1 * ampl
            ampl *= PERLIN_AMP_FALLOFF

            xi <<= 1
            xf *= 2
            yi <<= 1
            yf *= 2
            zi <<= 1
            zf *= 2
            if xf >= 1.0:
                xi += 1
                xf -= 1
            if yf >= 1.0:
                yi += 1
                yf -= 1
            if zf >= 1.0:
                zi += 1
                zf -= 1
        return r

"""The trait catalog: every gene an organism carries.

Declaration order is the order phenotypes are resolved in whenever the
dependency graph leaves a choice, so keep new traits at the end.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from troutgen.genetics.rules import (
    Bernoulli,
    Choice,
    Conditional,
    Constant,
    Continuous,
    Discrete,
    Domain,
    Enumerated,
    Epistatic,
    Fixed,
    Frozen,
    Incomplete,
    Mendelian,
    Offset,
    Ranged,
    Triangular,
    TraitValue,
)


@dataclass(frozen=True)
class TraitSpec:
    name: str
    domain: Domain
    generate: Any
    dominance: Any
    mutation: Any

    @property
    def dependencies(self) -> frozenset[str]:
        return frozenset(self.generate.requires) | frozenset(self.dominance.requires)


def _enum(
    name: str,
    values: tuple[TraitValue, ...],
    weights: tuple[float, ...] | None = None,
    order: tuple[TraitValue, ...] | None = None,
    generate: Any = None,
    dominance: Any = None,
    mutation: Any = None,
) -> TraitSpec:
    return TraitSpec(
        name=name,
        domain=Enumerated(values),
        generate=generate or Choice(values, weights),
        dominance=dominance or Mendelian(order or values),
        mutation=mutation or Discrete(values),
    )


def _ranged(
    name: str,
    lo: float,
    hi: float,
    generate: Any = None,
    dominance: Any = None,
) -> TraitSpec:
    return TraitSpec(
        name=name,
        domain=Ranged(lo, hi),
        generate=generate or Triangular(lo, (lo + hi) / 2, hi),
        dominance=dominance or Incomplete(lo, hi),
        mutation=Continuous(lo, hi),
    )


def _tri(lo: float, mode: float, hi: float) -> Triangular:
    return Triangular(lo, mode, hi)


def _itri(lo: float, mode: float, hi: float) -> Triangular:
    return Triangular(lo, mode, hi, integer=True)


def _floored(lo: float, hi: float) -> Incomplete:
    return Incomplete(lo, hi, floor=True)


_BINARY = (0, 1)

TRAITS: tuple[TraitSpec, ...] = (
    # body and scales
    _enum("body_curve_type", _BINARY),
    _ranged("body_curve_amount", 0.5, 0.98, _tri(0.5, 0.85, 0.98)),
    _ranged("body_length", 200, 420, _tri(200, 350, 420)),
    _ranged("body_height", 45, 150, _tri(45, 90, 150)),
    _enum("scale_type", (0, 1, 2, 3)),
    _ranged("scale_scale", 0.8, 1.5, _tri(0.8, 1, 1.5)),
    _enum("pattern_type", (0, 1, 2, 3, 4)),
    _ranged("pattern_scale", 0.5, 2, _tri(0.5, 1, 2)),
    # dorsal fin
    _enum("dorsal_texture_type", _BINARY),
    _enum("dorsal_type", _BINARY),
    _ranged("dorsal_length", 30, 180, _tri(30, 90, 180)),
    _ranged(
        "dorsal_start", 7, 16,
        Conditional("dorsal_type", {0: _itri(7, 8, 15), 1: _itri(11, 12, 16)}),
        Epistatic("dorsal_type", {0: _floored(7, 15), 1: _floored(11, 16)}),
    ),
    _ranged(
        "dorsal_end", 19, 28,
        Conditional("dorsal_type", {0: _itri(20, 27, 28), 1: _itri(19, 21, 24)}),
        Epistatic("dorsal_type", {0: _floored(20, 28), 1: _floored(19, 24)}),
    ),
    # pectoral fin
    _enum("wing_texture_type", _BINARY),
    _enum("wing_type", _BINARY),
    _ranged(
        "wing_length", 40, 350,
        Conditional("wing_type", {0: _tri(40, 130, 200), 1: _tri(40, 150, 350)}),
        Epistatic("wing_type", {0: Incomplete(40, 200), 1: Incomplete(40, 350)}),
    ),
    _ranged(
        "wing_width", 7, 50,
        Conditional("wing_texture_type", {0: _tri(7, 10, 20), 1: _tri(20, 30, 50)}),
        Epistatic("wing_texture_type", {0: Incomplete(7, 20), 1: Incomplete(20, 50)}),
    ),
    _ranged(
        "wing_y", 0.45, 0.85,
        Conditional("wing_texture_type", {0: _tri(0.45, 0.7, 0.85), 1: _tri(0.45, 0.65, 0.75)}),
        Epistatic("wing_texture_type", {0: Incomplete(0.45, 0.85), 1: Incomplete(0.45, 0.75)}),
    ),
    _ranged("wing_start", 5, 8, _itri(5, 6, 8), _floored(5, 8)),
    _ranged("wing_end", 5, 8, _itri(5, 6, 8), _floored(5, 8)),
    # pelvic fin
    _enum(
        "pelvic_texture_type", _BINARY,
        generate=Conditional("dorsal_texture_type", {0: Fixed(0), 1: Choice(_BINARY)}),
        dominance=Epistatic("dorsal_texture_type", {0: Constant(0), 1: Mendelian(_BINARY)}),
    ),
    _enum("pelvic_type", _BINARY),
    _ranged("pelvic_length", 30, 140, _tri(30, 85, 140)),
    _ranged(
        "pelvic_start", 7, 12,
        Conditional("pelvic_type", {0: _itri(7, 9, 11), 1: _itri(7, 9, 12)}),
        Epistatic("pelvic_type", {0: _floored(7, 11), 1: _floored(11, 12)}),
    ),
    _ranged(
        "pelvic_end", 9, 15,
        Conditional("pelvic_type", {0: _itri(13, 14, 15), 1: Offset("pelvic_start", 2)}),
        Epistatic("pelvic_type", {0: _floored(13, 15), 1: Offset("pelvic_start", 2)}),
    ),
    # anal fin
    _enum(
        "anal_texture_type", _BINARY,
        generate=Conditional("dorsal_texture_type", {0: Fixed(0), 1: Choice(_BINARY)}),
        dominance=Epistatic("dorsal_texture_type", {0: Constant(0), 1: Mendelian(_BINARY)}),
    ),
    _enum("anal_type", _BINARY),
    _ranged("anal_length", 20, 80, _tri(20, 50, 80)),
    _ranged("anal_start", 16, 23, _itri(16, 19, 23), _floored(16, 23)),
    _ranged("anal_end", 25, 31, _itri(25, 29, 31), _floored(25, 31)),
    # tail and finlets
    _enum("tail_type", (0, 1, 2, 3, 4, 5)),
    _ranged("tail_length", 50, 180, _tri(50, 75, 180)),
    _enum("finlet_type", (0, 1, 2, 3)),
    # head
    _enum("neck_type", _BINARY),
    _ranged("nose_height", -50, 35, _tri(-50, 0, 35)),
    _ranged("head_length", 20, 35, _tri(20, 30, 35)),
    _ranged("mouth_size", 6, 11, _itri(6, 8, 11), _floored(6, 11)),
    _ranged("head_texture_amount", 30, 160, _itri(30, 60, 160), _floored(30, 160)),
    # barbels
    _enum("has_moustache", _BINARY, weights=(3, 1)),
    _enum("has_beard", _BINARY, weights=(5, 1)),
    _ranged(
        "moustache_length", 0, 40, _itri(10, 20, 40),
        Epistatic("has_moustache", {0: Constant(0), 1: _floored(10, 40)}),
    ),
    _ranged(
        "beard_length", 0, 50, _itri(20, 30, 50),
        Epistatic("has_beard", {0: Constant(0), 1: _floored(20, 50)}),
    ),
    # eyes and jaw
    _enum("eye_type", _BINARY),
    _ranged("eye_size", 8, 28, _tri(8, 10, 28)),
    _ranged("jaw_size", 0.7, 1.4, _tri(0.7, 1, 1.4)),
    _enum("has_teeth", _BINARY, weights=(1, 2), order=(1, 0)),
    _ranged("teeth_length", 5, 15, _tri(5, 8, 15)),
    _ranged("teeth_space", 3, 6, _tri(3, 3.5, 6)),
    # colour
    _enum(
        "color", ("normal", "rainbow"),
        generate=Fixed("normal"),
        mutation=Discrete(("normal", "rainbow"), rate=1e-3),
    ),
    _enum(
        "jaw_open", _BINARY,
        generate=Fixed(1),
        dominance=Epistatic("has_teeth", {0: Bernoulli(0.8, 1, 0), 1: Constant(1)}),
        mutation=Frozen(),
    ),
)

"""Trait domains and the generation, dominance and mutation strategies.

Every strategy is a frozen dataclass. ``requires`` names the traits whose
values must already be known (in the haploid being generated, or in the
phenotype being resolved) before the strategy can run.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from troutgen.utils.rng import Rng

TraitValue = Union[int, float, str]


class GeneticsConfigError(ValueError):
    """A trait catalog, haploid or rule that cannot be evaluated."""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


# -- Domains ---------------------------------------------------------------


@dataclass(frozen=True)
class Enumerated:
    values: tuple[TraitValue, ...]

    kind = "discrete"

    def contains(self, value: Any) -> bool:
        return not isinstance(value, bool) and value in self.values


@dataclass(frozen=True)
class Ranged:
    min: float
    max: float

    kind = "continuous"

    def contains(self, value: Any) -> bool:
        return _is_number(value) and self.min <= value <= self.max


Domain = Union[Enumerated, Ranged]


# -- Generation --------------------------------------------------------------


@dataclass(frozen=True)
class Choice:
    """Weighted pick from ``values``; uniform without weights."""

    values: tuple[TraitValue, ...]
    weights: tuple[float, ...] | None = None

    requires: tuple[str, ...] = field(default=(), init=False)

    def sample(self, rng: Rng, drafted: Mapping[str, TraitValue]) -> TraitValue:
        return rng.choice(self.values, self.weights)


@dataclass(frozen=True)
class Triangular:
    low: float
    mode: float
    high: float
    integer: bool = False

    requires: tuple[str, ...] = field(default=(), init=False)

    def sample(self, rng: Rng, drafted: Mapping[str, TraitValue]) -> TraitValue:
        v = rng.triangular(self.low, self.mode, self.high)
        # truncate toward zero
        return int(v) if self.integer else v


@dataclass(frozen=True)
class Fixed:
    value: TraitValue

    requires: tuple[str, ...] = field(default=(), init=False)

    def sample(self, rng: Rng, drafted: Mapping[str, TraitValue]) -> TraitValue:
        return self.value


@dataclass(frozen=True)
class Conditional:
    """Generation distribution picked by an already generated trait."""

    governing: str
    table: Mapping[TraitValue, Any]

    @property
    def requires(self) -> tuple[str, ...]:
        deps = {self.governing}
        for sub in self.table.values():
            deps.update(sub.requires)
        return tuple(sorted(deps))

    def sample(self, rng: Rng, drafted: Mapping[str, TraitValue]) -> TraitValue:
        key = drafted[self.governing]
        if key not in self.table:
            raise GeneticsConfigError(f"No generation rule for {self.governing}={key!r}")
        return self.table[key].sample(rng, drafted)


# -- Dominance ---------------------------------------------------------------


@dataclass(frozen=True)
class Mendelian:
    """Allele earlier in ``order`` wins; unknown values lose to known ones."""

    order: tuple[TraitValue, ...]

    requires: tuple[str, ...] = field(default=(), init=False)

    def _rank(self, value: TraitValue) -> int:
        try:
            return self.order.index(value)
        except ValueError:
            return len(self.order)

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        return right if self._rank(right) < self._rank(left) else left


@dataclass(frozen=True)
class Incomplete:
    """Blend: Gaussian at the allele mean, clamped, optionally floored."""

    min: float
    max: float
    factor: float = 0.05
    floor: bool = False

    requires: tuple[str, ...] = field(default=(), init=False)

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        if not (_is_number(left) and _is_number(right)):
            raise GeneticsConfigError(f"Incomplete dominance needs numbers, got {left!r}, {right!r}")
        o = rng.gauss((left + right) / 2, (self.max - self.min) * self.factor)
        o = max(self.min, min(o, self.max))
        return int(math.floor(o)) if self.floor else o


@dataclass(frozen=True)
class Epistatic:
    """Dominance rule selected by the resolved phenotype of ``governing``."""

    governing: str
    table: Mapping[TraitValue, Any]

    @property
    def requires(self) -> tuple[str, ...]:
        deps = {self.governing}
        for sub in self.table.values():
            deps.update(sub.requires)
        return tuple(sorted(deps))

    def rule_for(self, phenotype: Mapping[str, TraitValue]) -> Any:
        key = phenotype[self.governing]
        if key not in self.table:
            raise GeneticsConfigError(f"No dominance rule for {self.governing}={key!r}")
        return self.table[key]

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        return self.rule_for(phenotype).resolve(phenotype, left, right, rng)


@dataclass(frozen=True)
class Constant:
    value: TraitValue

    requires: tuple[str, ...] = field(default=(), init=False)

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        return self.value


@dataclass(frozen=True)
class Bernoulli:
    """``hit`` with probability ``p``, otherwise ``miss``."""

    p: float
    hit: TraitValue
    miss: TraitValue

    requires: tuple[str, ...] = field(default=(), init=False)

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        return self.hit if rng.next() < self.p else self.miss


@dataclass(frozen=True)
class Offset:
    """Another trait's value shifted by ``delta``.

    Works for generation (reads the haploid being drafted) and for
    dominance (reads the phenotype resolved so far).
    """

    source: str
    delta: float

    @property
    def requires(self) -> tuple[str, ...]:
        return (self.source,)

    def sample(self, rng: Rng, drafted: Mapping[str, TraitValue]) -> TraitValue:
        return drafted[self.source] + self.delta

    def resolve(
        self, phenotype: Mapping[str, TraitValue], left: TraitValue, right: TraitValue, rng: Rng
    ) -> TraitValue:
        return phenotype[self.source] + self.delta


# -- Mutation ----------------------------------------------------------------


@dataclass(frozen=True)
class Discrete:
    """With probability ``rate`` switch to a different member of ``values``."""

    values: tuple[TraitValue, ...]
    rate: float = 2e-3

    def apply(self, value: TraitValue, rng: Rng) -> TraitValue:
        if rng.next() >= self.rate:
            return value
        alternatives = [v for v in self.values if v != value] or list(self.values)
        return alternatives[int(rng.next() * len(alternatives))]


@dataclass(frozen=True)
class Continuous:
    """Additive Gaussian drift, std ``factor`` times the range, then clamp."""

    min: float
    max: float
    factor: float = 1e-3

    def apply(self, value: TraitValue, rng: Rng) -> TraitValue:
        if not _is_number(value):
            raise GeneticsConfigError(f"Continuous mutation needs a number, got {value!r}")
        drifted = value + rng.gauss(0.0, (self.max - self.min) * self.factor)
        return max(self.min, min(drifted, self.max))


@dataclass(frozen=True)
class Frozen:
    """Never mutates."""

    def apply(self, value: TraitValue, rng: Rng) -> TraitValue:
        return value

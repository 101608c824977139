"""Tests for generation, dominance and mutation rules."""

import pytest

from troutgen.genetics.rules import (
    Bernoulli,
    Conditional,
    Continuous,
    Discrete,
    Enumerated,
    Fixed,
    Frozen,
    GeneticsConfigError,
    Incomplete,
    Mendelian,
    Ranged,
    Triangular,
)
from troutgen.utils.rng import Rng


def test_mendelian_is_symmetric():
    rule = Mendelian((0, 1))
    rng = Rng(1)
    assert rule.resolve({}, 0, 1, rng) == 0
    assert rule.resolve({}, 1, 0, rng) == 0
    assert rule.resolve({}, 1, 1, rng) == 1


def test_mendelian_unknown_allele_loses():
    assert Mendelian((0, 1)).resolve({}, 7, 1, Rng(1)) == 1


def test_incomplete_stays_clamped():
    rule = Incomplete(0, 10, factor=5.0)
    rng = Rng(2)
    for _ in range(200):
        assert 0 <= rule.resolve({}, 0, 10, rng) <= 10


def test_incomplete_floor_gives_int():
    value = Incomplete(7, 15, floor=True).resolve({}, 9, 12, Rng(3))
    assert isinstance(value, int)
    assert 7 <= value <= 15


def test_incomplete_rejects_text():
    with pytest.raises(GeneticsConfigError):
        Incomplete(0, 1).resolve({}, "a", 1, Rng(1))


def test_bernoulli_extremes():
    rng = Rng(4)
    assert Bernoulli(1.0, "hit", "miss").resolve({}, 0, 0, rng) == "hit"
    assert Bernoulli(0.0, "hit", "miss").resolve({}, 0, 0, rng) == "miss"


def test_conditional_picks_by_governing_value():
    rule = Conditional("kind", {0: Fixed(5), 1: Fixed(9)})
    assert rule.requires == ("kind",)
    assert rule.sample(Rng(1), {"kind": 1}) == 9


def test_conditional_without_entry_raises():
    with pytest.raises(GeneticsConfigError):
        Conditional("kind", {0: Fixed(5)}).sample(Rng(1), {"kind": 3})


def test_integer_triangular_truncates():
    rng = Rng(6)
    values = [Triangular(7, 8, 15, integer=True).sample(rng, {}) for _ in range(100)]
    assert all(isinstance(v, int) and 7 <= v <= 15 for v in values)


def test_discrete_mutation_picks_a_different_member():
    rule = Discrete((0, 1, 2), rate=1.0)
    rng = Rng(7)
    for _ in range(50):
        assert rule.apply(1, rng) in (0, 2)


def test_discrete_mutation_rate_zero_is_identity():
    assert Discrete((0, 1), rate=0.0).apply(1, Rng(1)) == 1


def test_continuous_mutation_clamps():
    rule = Continuous(0, 1, factor=10.0)
    rng = Rng(8)
    for _ in range(100):
        assert 0 <= rule.apply(0.5, rng) <= 1


def test_frozen_never_changes():
    assert Frozen().apply(1, Rng(9)) == 1


def test_domains():
    assert Enumerated((0, 1)).contains(1)
    assert not Enumerated((0, 1)).contains(True)
    assert Ranged(0, 1).contains(0.5)
    assert not Ranged(0, 1).contains(float("nan"))
    assert not Ranged(0, 1).contains("0.5")

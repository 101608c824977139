"""Tests for the trait table and its evaluation order."""

import pytest

from troutgen.genetics.catalog import TRAITS, TraitSpec
from troutgen.genetics.rules import (
    Choice,
    Continuous,
    Discrete,
    Enumerated,
    Epistatic,
    GeneticsConfigError,
    Incomplete,
    Mendelian,
    Offset,
    Ranged,
    Triangular,
)
from troutgen.genetics.table import TraitTable, get_table


def _binary(name, **kwargs):
    values = (0, 1)
    return TraitSpec(
        name=name,
        domain=Enumerated(values),
        generate=kwargs.get("generate", Choice(values)),
        dominance=kwargs.get("dominance", Mendelian(values)),
        mutation=Discrete(values),
    )


def _offset(name, source):
    return TraitSpec(
        name=name,
        domain=Ranged(0, 100),
        generate=Offset(source, 1),
        dominance=Offset(source, 1),
        mutation=Continuous(0, 100),
    )


def test_catalog_registers_all_traits():
    table = get_table()
    assert len(table) == 50
    assert table.names == tuple(spec.name for spec in TRAITS)
    assert "dorsal_start" in table


def test_order_respects_dependencies():
    table = get_table()
    seen = set()
    for spec in table.ordered():
        assert spec.dependencies <= seen, spec.name
        seen.add(spec.name)
    assert len(seen) == len(table)


def test_governing_traits_precede_dependents():
    names = [spec.name for spec in get_table().ordered()]
    assert names.index("dorsal_type") < names.index("dorsal_start")
    assert names.index("pelvic_start") < names.index("pelvic_end")
    assert names.index("has_teeth") < names.index("jaw_open")


def test_ties_keep_declaration_order():
    table = TraitTable([_binary("b"), _binary("a"), _binary("c")])
    assert [s.name for s in table.ordered()] == ["b", "a", "c"]


def test_cycle_is_rejected():
    with pytest.raises(GeneticsConfigError, match="Circular"):
        TraitTable([_offset("x", "y"), _offset("y", "x")])


def test_unknown_dependency_is_rejected():
    with pytest.raises(GeneticsConfigError, match="unknown trait"):
        TraitTable([_offset("x", "missing")])


def test_duplicate_trait_is_rejected():
    with pytest.raises(GeneticsConfigError, match="Duplicate"):
        TraitTable([_binary("a"), _binary("a")])


def test_epistatic_rule_must_cover_governing_domain():
    dependent = TraitSpec(
        name="size",
        domain=Ranged(0, 10),
        generate=Triangular(0, 5, 10),
        dominance=Epistatic("kind", {0: Incomplete(0, 10)}),
        mutation=Continuous(0, 10),
    )
    with pytest.raises(GeneticsConfigError, match="no rule"):
        TraitTable([_binary("kind"), dependent])


def test_unknown_trait_lookup():
    with pytest.raises(GeneticsConfigError):
        get_table().get("wings")

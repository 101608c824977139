"""Tests for spawning, breeding and phenotype expression."""

import pytest

from troutgen.genetics.model import (
    Organism,
    as_genotype,
    breed,
    compute_phenotype,
    make_gamete,
    mutate,
    spawn,
    validate_haploid,
    with_trait,
)
from troutgen.genetics.rules import GeneticsConfigError
from troutgen.genetics.table import get_table
from troutgen.utils.rng import Rng


def _override(organism, **values):
    left, right = organism.genotype
    return {**left, **values}, {**right, **values}


def test_spawn_is_deterministic():
    assert spawn(11) == spawn(11)
    assert spawn(11) != spawn(12)


def test_spawned_roots_are_valid():
    for seed in range(1, 25):
        organism = spawn(seed)
        for haploid in (*organism.genotype, organism.phenotype):
            validate_haploid(haploid)
        assert organism.phenotype["color"] == "normal"


def test_breed_is_deterministic(root_organism, other_root):
    a = breed(root_organism.genotype, other_root.genotype, 99)
    b = breed(root_organism.genotype, other_root.genotype, 99)
    assert a == b


def test_bred_phenotypes_stay_in_domain(root_organism, other_root):
    table = get_table()
    for seed in range(20):
        child = breed(root_organism.genotype, other_root.genotype, seed)
        for spec in table:
            assert spec.domain.contains(child.phenotype[spec.name]), spec.name


def test_phenotype_depends_only_on_genotype(root_organism):
    assert compute_phenotype(root_organism.genotype) == root_organism.phenotype


def test_gamete_takes_each_trait_from_a_parent(root_organism):
    left, right = root_organism.genotype
    gamete = make_gamete(root_organism.genotype, Rng(3))
    for name, value in gamete.items():
        assert value in (left[name], right[name])


def test_mutate_keeps_domain(root_organism):
    rng = Rng(4)
    haploid = root_organism.genotype[0]
    for _ in range(50):
        haploid = mutate(haploid, rng)
    validate_haploid(haploid)


def test_dominant_allele_wins(root_organism):
    # 0 is dominant for dorsal_type
    genotype = _override(root_organism)
    genotype[0]["dorsal_type"] = 0
    genotype[1]["dorsal_type"] = 1
    flipped = (genotype[1], genotype[0])
    assert compute_phenotype(genotype)["dorsal_type"] == 0
    assert compute_phenotype(flipped)["dorsal_type"] == 0


def test_teeth_dominance_runs_the_other_way(root_organism):
    genotype = _override(root_organism)
    genotype[0]["has_teeth"] = 0
    genotype[1]["has_teeth"] = 1
    phenotype = compute_phenotype(genotype)
    assert phenotype["has_teeth"] == 1
    assert phenotype["jaw_open"] == 1


def test_epistasis_silences_fin_texture(root_organism):
    genotype = _override(root_organism, dorsal_texture_type=0, pelvic_texture_type=1, anal_texture_type=1)
    phenotype = compute_phenotype(genotype)
    assert phenotype["pelvic_texture_type"] == 0
    assert phenotype["anal_texture_type"] == 0


def test_missing_barbel_has_zero_length(root_organism):
    genotype = _override(root_organism, has_moustache=0, moustache_length=30, has_beard=0, beard_length=40)
    phenotype = compute_phenotype(genotype)
    assert phenotype["moustache_length"] == 0
    assert phenotype["beard_length"] == 0


def test_pelvic_end_follows_start_for_paired_fins(root_organism):
    genotype = _override(root_organism, pelvic_type=1, pelvic_start=11, pelvic_end=13)
    phenotype = compute_phenotype(genotype)
    assert phenotype["pelvic_end"] == phenotype["pelvic_start"] + 2


def test_floored_traits_are_integers(root_organism):
    for name in ("dorsal_start", "dorsal_end", "mouth_size", "anal_start"):
        assert root_organism.phenotype[name] == int(root_organism.phenotype[name])


def test_with_trait_overrides_both_alleles(root_organism):
    rainbow = with_trait(root_organism, "color", "rainbow")
    assert rainbow.phenotype["color"] == "rainbow"
    assert all(h["color"] == "rainbow" for h in rainbow.genotype)
    assert root_organism.phenotype["color"] == "normal"


def test_with_trait_rejects_unknown_trait(root_organism):
    with pytest.raises(GeneticsConfigError):
        with_trait(root_organism, "fins", 3)


def test_validate_rejects_out_of_domain(root_organism):
    haploid = {**root_organism.genotype[0], "body_length": 10_000}
    with pytest.raises(GeneticsConfigError, match="outside"):
        validate_haploid(haploid)


def test_validate_rejects_missing_and_unknown(root_organism):
    haploid = dict(root_organism.genotype[0])
    del haploid["tail_type"]
    with pytest.raises(GeneticsConfigError, match="Missing"):
        validate_haploid(haploid)
    with pytest.raises(GeneticsConfigError, match="Unknown"):
        validate_haploid({**root_organism.genotype[0], "gills": 1})


def test_as_genotype_needs_two_haploids(root_organism):
    with pytest.raises(GeneticsConfigError):
        as_genotype([root_organism.genotype[0]])
    assert as_genotype(list(root_organism.genotype)) == root_organism.genotype


def test_organism_dict_round_trip(root_organism):
    data = root_organism.to_dict()
    assert Organism.from_dict(data) == root_organism


def test_organism_from_dict_rejects_tampered_phenotype(root_organism):
    data = root_organism.to_dict()
    data["phenotype"]["color"] = "rainbow"
    with pytest.raises(GeneticsConfigError):
        Organism.from_dict(data)

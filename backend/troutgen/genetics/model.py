"""Genotype operations: gametes, mutation, breeding, spawning and phenotype expression.

Every operation takes an explicit ``Rng`` or seed; nothing here touches
shared random state. Phenotypes are derived, never stored on their own:
``compute_phenotype`` seeds its own generator from the genotype digest so
the same genotype always expresses the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from troutgen.genetics.rules import GeneticsConfigError, TraitValue
from troutgen.genetics.table import TraitTable, get_table
from troutgen.utils.canonical import digest_seed
from troutgen.utils.rng import Rng

logger = logging.getLogger(__name__)

Haploid = dict[str, TraitValue]
Genotype = tuple[Haploid, Haploid]


@dataclass(frozen=True)
class Organism:
    genotype: Genotype
    phenotype: Haploid

    def to_dict(self) -> dict[str, Any]:
        left, right = self.genotype
        return {"genotype": [dict(left), dict(right)], "phenotype": dict(self.phenotype)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], table: TraitTable | None = None) -> Organism:
        """Rebuild from ``to_dict`` output, checking that the phenotype matches the genotype."""
        genotype = as_genotype(data.get("genotype"), table)
        phenotype = compute_phenotype(genotype, table)
        stored = data.get("phenotype")
        if stored is not None and dict(stored) != phenotype:
            raise GeneticsConfigError("Stored phenotype does not match its genotype")
        return cls(genotype=genotype, phenotype=phenotype)


def validate_haploid(haploid: Mapping[str, Any], table: TraitTable | None = None) -> None:
    """Raise unless ``haploid`` has exactly the catalog's traits, each inside its domain."""
    table = table or get_table()
    missing = [n for n in table.names if n not in haploid]
    if missing:
        raise GeneticsConfigError(f"Missing traits: {missing}")
    unknown = sorted(k for k in haploid if k not in table)
    if unknown:
        raise GeneticsConfigError(f"Unknown traits: {unknown}")
    for spec in table:
        value = haploid[spec.name]
        if not spec.domain.contains(value):
            raise GeneticsConfigError(f"Trait {spec.name}={value!r} is outside {spec.domain}")


def as_genotype(value: Any, table: TraitTable | None = None) -> Genotype:
    """Coerce a decoded ``[left, right]`` pair into a validated genotype."""
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)) or len(value) != 2:
        raise GeneticsConfigError("A genotype is exactly two haploids")
    left, right = (dict(h) for h in value)
    validate_haploid(left, table)
    validate_haploid(right, table)
    return left, right


def make_gamete(genotype: Genotype, rng: Rng, table: TraitTable | None = None) -> Haploid:
    """Pick each trait from the left haploid with probability 0.5, else the right."""
    table = table or get_table()
    left, right = genotype
    return {name: left[name] if rng.next() < 0.5 else right[name] for name in table.names}


def mutate(haploid: Mapping[str, TraitValue], rng: Rng, table: TraitTable | None = None) -> Haploid:
    table = table or get_table()
    out = {spec.name: spec.mutation.apply(haploid[spec.name], rng) for spec in table}
    validate_haploid(out, table)
    return out


def generate_haploid(rng: Rng, table: TraitTable | None = None) -> Haploid:
    """Draft a root haploid from the generation distributions."""
    table = table or get_table()
    drafted: Haploid = {}
    for spec in table.ordered():
        drafted[spec.name] = spec.generate.sample(rng, drafted)
    out = {name: drafted[name] for name in table.names}
    validate_haploid(out, table)
    return out


def compute_phenotype(
    genotype: Genotype, table: TraitTable | None = None, rng: Rng | None = None
) -> Haploid:
    """Resolve each trait's two alleles with its dominance rule, in dependency order."""
    table = table or get_table()
    if len(genotype) != 2:
        raise GeneticsConfigError("A genotype is exactly two haploids")
    left, right = genotype
    validate_haploid(left, table)
    validate_haploid(right, table)
    if rng is None:
        rng = Rng(digest_seed([left, right]))

    resolved: Haploid = {}
    for spec in table.ordered():
        resolved[spec.name] = spec.dominance.resolve(resolved, left[spec.name], right[spec.name], rng)
    phenotype = {name: resolved[name] for name in table.names}
    validate_haploid(phenotype, table)
    return phenotype


def express(genotype: Genotype, table: TraitTable | None = None) -> Organism:
    return Organism(genotype=genotype, phenotype=compute_phenotype(genotype, table))


def breed(left: Genotype, right: Genotype, seed: int, table: TraitTable | None = None) -> Organism:
    """One mutated gamete from each parent, paired into a child."""
    table = table or get_table()
    rng = Rng(seed)
    gl = mutate(make_gamete(left, rng, table), rng, table)
    gr = mutate(make_gamete(right, rng, table), rng, table)
    logger.debug("Bred organism from seed %d", seed)
    return express((gl, gr), table)


def spawn(seed: int, table: TraitTable | None = None) -> Organism:
    """A root organism with no parents."""
    table = table or get_table()
    rng = Rng(seed)
    left = generate_haploid(rng, table)
    right = generate_haploid(rng, table)
    logger.debug("Spawned organism from seed %d", seed)
    return express((left, right), table)


def with_trait(organism: Organism, name: str, value: TraitValue, table: TraitTable | None = None) -> Organism:
    """Overwrite one trait in both haploids and re-express."""
    table = table or get_table()
    table.get(name)
    left, right = organism.genotype
    return express(({**left, name: value}, {**right, name: value}), table)

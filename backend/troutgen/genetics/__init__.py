from troutgen.genetics.model import (
    Genotype,
    Haploid,
    Organism,
    breed,
    compute_phenotype,
    make_gamete,
    mutate,
    spawn,
    validate_haploid,
)
from troutgen.genetics.rules import GeneticsConfigError
from troutgen.genetics.table import TraitTable, get_table

__all__ = [
    "GeneticsConfigError",
    "Genotype",
    "Haploid",
    "Organism",
    "TraitTable",
    "breed",
    "compute_phenotype",
    "get_table",
    "make_gamete",
    "mutate",
    "spawn",
    "validate_haploid",
]

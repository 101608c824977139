"""Trait table: the catalog frozen into a dispatch table with a fixed evaluation order.

Usage:
    table = get_table()
    for spec in table.ordered():
        phenotype[spec.name] = spec.dominance.resolve(phenotype, l[spec.name], r[spec.name], rng)

The order is computed once, when the table is built. Any dependency a rule
names (an epistatic governor, a conditional generator, an offset source)
is guaranteed to come earlier.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from troutgen.genetics.catalog import TRAITS, TraitSpec
from troutgen.genetics.rules import Conditional, Enumerated, Epistatic, GeneticsConfigError

logger = logging.getLogger(__name__)


class TraitTable:
    """Immutable trait name to ``TraitSpec`` mapping."""

    def __init__(self, specs: Iterable[TraitSpec]) -> None:
        specs_by_name: dict[str, TraitSpec] = {}
        for spec in specs:
            if spec.name in specs_by_name:
                raise GeneticsConfigError(f"Duplicate trait: {spec.name}")
            specs_by_name[spec.name] = spec
        self._specs = MappingProxyType(specs_by_name)
        self._check_references()
        self._order = tuple(self._resolve_order())
        logger.debug("Built trait table with %d traits", len(self._specs))

    def _check_references(self) -> None:
        for spec in self._specs.values():
            for dep in spec.dependencies:
                if dep not in self._specs:
                    raise GeneticsConfigError(f"Trait {spec.name} depends on unknown trait {dep}")
            for rule in (spec.generate, spec.dominance):
                if not isinstance(rule, (Conditional, Epistatic)):
                    continue
                governing = self._specs[rule.governing].domain
                if isinstance(governing, Enumerated):
                    missing = set(governing.values) - set(rule.table)
                    if missing:
                        raise GeneticsConfigError(
                            f"Trait {spec.name} has no rule for {rule.governing} in {sorted(missing)}"
                        )

    def _resolve_order(self) -> list[TraitSpec]:
        # Kahn's algorithm, ties broken by declaration order
        position = {name: i for i, name in enumerate(self._specs)}
        in_degree = {name: len(spec.dependencies) for name, spec in self._specs.items()}

        queue = sorted((n for n, d in in_degree.items() if d == 0), key=position.__getitem__)
        ordered: list[TraitSpec] = []

        while queue:
            name = queue.pop(0)
            ordered.append(self._specs[name])
            for other, other_spec in self._specs.items():
                if name in other_spec.dependencies:
                    in_degree[other] -= 1
                    if in_degree[other] == 0:
                        queue.append(other)
                        queue.sort(key=position.__getitem__)

        if len(ordered) != len(self._specs):
            missing = set(self._specs) - {s.name for s in ordered}
            raise GeneticsConfigError(f"Circular dependency detected among: {sorted(missing)}")
        return ordered

    def get(self, name: str) -> TraitSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise GeneticsConfigError(f"Unknown trait: {name}") from None

    def ordered(self) -> tuple[TraitSpec, ...]:
        return self._order

    @property
    def names(self) -> tuple[str, ...]:
        """Trait names in declaration order."""
        return tuple(self._specs)

    @property
    def specs(self) -> MappingProxyType:
        return self._specs

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[TraitSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


# Module-level singleton
_table: TraitTable | None = None


def get_table() -> TraitTable:
    global _table
    if _table is None:
        _table = TraitTable(TRAITS)
    return _table

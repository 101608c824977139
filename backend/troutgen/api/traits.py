"""GET /api/traits — the trait catalog in evaluation order."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from troutgen.dependencies import get_trait_table
from troutgen.genetics.rules import Enumerated
from troutgen.genetics.table import TraitTable
from troutgen.models.responses import TraitInfo, TraitsResponse

router = APIRouter()


@router.get("/traits", response_model=TraitsResponse)
async def list_traits(table: TraitTable = Depends(get_trait_table)) -> TraitsResponse:
    order = {spec.name: i for i, spec in enumerate(table.ordered())}
    traits = []
    for spec in table:
        if isinstance(spec.domain, Enumerated):
            domain = list(spec.domain.values)
        else:
            domain = [spec.domain.min, spec.domain.max]
        traits.append(TraitInfo(
            name=spec.name,
            kind=spec.domain.kind,
            domain=domain,
            depends_on=sorted(spec.dependencies),
            order=order[spec.name],
        ))
    return TraitsResponse(traits=traits)

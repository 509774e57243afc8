"""FastAPI route definitions."""

from __future__ import annotations

from fastapi import APIRouter

from deckframe.services.structure_service import StructureService
from deckframe.api.schemas import (
    StructureRequest, StructureResponse, RuleInfo,
)

router = APIRouter()

# Shared service instance
_service = StructureService()


@router.post("/structure", response_model=StructureResponse)
async def calculate_structure(request: StructureRequest) -> StructureResponse:
    """Generate the framing plan for one deck footprint."""
    structure = _service.calculate(
        request.points,
        request.ledger_indices,
        inputs=request.inputs,
        dimensions=request.dimensions,
        constants=request.constants,
        config=request.config,
    )

    return StructureResponse(
        structure=structure,
        rule_count=len(_service.list_rules()),
        point_count=len(request.points),
    )


@router.get("/rules", response_model=list[RuleInfo])
async def list_rules() -> list[RuleInfo]:
    """List all available framing rules."""
    return [RuleInfo(**r) for r in _service.list_rules()]


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}

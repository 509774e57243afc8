"""API request/response schemas."""

from __future__ import annotations
from pydantic import BaseModel, field_validator

from deckframe.models import (
    Point, DeckDimensions, DeckInputs, FramingConstants, GenerationConfig,
    StructureComponents,
)


class StructureRequest(BaseModel):
    """Request body for the /structure endpoint."""
    points: list[Point]
    ledger_indices: list[int]
    inputs: DeckInputs = DeckInputs()
    dimensions: DeckDimensions | None = None
    constants: FramingConstants = FramingConstants()
    config: GenerationConfig = GenerationConfig()

    @field_validator("ledger_indices", mode="before")
    @classmethod
    def _single_index(cls, value):
        # The drawing front end sends a bare index for single-ledger decks
        if isinstance(value, int):
            return [value]
        return value


class StructureResponse(BaseModel):
    """Response from the /structure endpoint."""
    structure: StructureComponents
    rule_count: int
    point_count: int


class RuleInfo(BaseModel):
    id: str
    name: str

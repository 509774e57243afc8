"""High-level structure service: facade for the API layer."""

from __future__ import annotations

from deckframe.advisory.tables import SpanTables
from deckframe.models import (
    Point, DeckDimensions, DeckInputs, FramingConstants, GenerationConfig,
    StructureComponents,
)
from deckframe.core.generator import StructureGenerator
from deckframe.core.geometry import normalize_shape
from deckframe.core.registry import RuleRegistry, create_default_registry
from deckframe.core.validator import validate_components


class StructureService:
    """Fills in defaults, delegates to the generator, validates the output."""

    def __init__(self, registry: RuleRegistry | None = None) -> None:
        self.registry = registry or create_default_registry()
        self.generator = StructureGenerator(self.registry)

    def calculate(
        self,
        points: list[Point],
        ledger_indices: int | list[int],
        inputs: DeckInputs | None = None,
        dimensions: DeckDimensions | None = None,
        constants: FramingConstants | None = None,
        tables: SpanTables | None = None,
        config: GenerationConfig | None = None,
    ) -> StructureComponents:
        if inputs is None:
            inputs = DeckInputs()
        if constants is None:
            constants = FramingConstants()
        if dimensions is None and points:
            dimensions = DeckDimensions.from_points(points, constants.pixels_per_foot)
        if dimensions is None:
            return StructureComponents(error="Deck dimensions invalid.")

        components = self.generator.generate(
            points, ledger_indices, inputs, dimensions,
            constants=constants, tables=tables, config=config,
        )
        if components.error is None:
            polygon = normalize_shape(points).points
            components.validation = validate_components(
                components, polygon, constants.pixels_per_foot,
            )
        return components

    def list_rules(self) -> list[dict[str, str]]:
        return [
            {"id": r.get_id(), "name": r.get_name()}
            for r in self.registry.list_rules()
        ]

"""Structure generator: orchestrates footprint analysis and rule execution."""

from __future__ import annotations
import logging

from deckframe.advisory.tables import SpanTables, DEFAULT_SPAN_TABLES
from deckframe.models import (
    Point, DeckDimensions, DeckInputs, FramingConstants, GenerationConfig,
    StructureComponents, StructureContext, BEAM_ORDER,
)
from deckframe.core.analyzer import FootprintAnalyzer, normalize_ledger_indices
from deckframe.core.errors import StructureError
from deckframe.core.geometry import normalize_shape
from deckframe.core.registry import RuleRegistry, create_default_registry

logger = logging.getLogger(__name__)


class StructureGenerator:
    """
    Stateless structure generator.

    Takes a footprint + inputs, runs analysis, executes the applicable
    rules on one context, and returns the finished StructureComponents.
    Fatal stage errors end the run and are reported on `error`.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry
        self.analyzer = FootprintAnalyzer()

    def build_context(
        self,
        shape_points: list[Point],
        ledger_indices: int | list[int],
        inputs: DeckInputs,
        deck_dimensions: DeckDimensions,
        constants: FramingConstants | None = None,
        tables: SpanTables | None = None,
        config: GenerationConfig | None = None,
    ) -> StructureContext:
        return StructureContext(
            shape=normalize_shape(shape_points),
            ledger_indices=normalize_ledger_indices(ledger_indices),
            inputs=inputs,
            dimensions=deck_dimensions,
            constants=constants or FramingConstants(),
            tables=tables or DEFAULT_SPAN_TABLES,
            config=config or GenerationConfig(),
        )

    def run(self, context: StructureContext) -> StructureComponents:
        try:
            # Analysis phase: ledger orientation, extents, diagonals
            self.analyzer.analyze(context)

            # Generation phase: run applicable rules
            for rule in self.registry.get_applicable_rules(context):
                logger.debug("Running rule %s", rule.get_id())
                rule.apply(context)
        except StructureError as exc:
            logger.error("Structure calculation failed: %s", exc)
            context.components.error = str(exc)

        self._finalize(context)
        return context.components

    def generate(
        self,
        shape_points: list[Point],
        ledger_indices: int | list[int],
        inputs: DeckInputs,
        deck_dimensions: DeckDimensions,
        constants: FramingConstants | None = None,
        tables: SpanTables | None = None,
        config: GenerationConfig | None = None,
    ) -> StructureComponents:
        context = self.build_context(
            shape_points, ledger_indices, inputs, deck_dimensions,
            constants, tables, config,
        )
        return self.run(context)

    def _finalize(self, context: StructureContext) -> None:
        """Flatten beam layouts into the output and sort members."""
        components = context.components
        layouts = sorted(context.beam_layouts, key=lambda l: BEAM_ORDER.get(l.beam.usage, 99))
        components.beams = [l.beam for l in layouts]
        components.posts = [p for l in layouts for p in l.posts]
        components.footings = [f for l in layouts for f in l.footings]
        components.joists.sort(
            key=lambda j: (context.placement_coord(j.p1), context.run_coord(j.p1) * context.outward_sign)
        )

        if components.error is None:
            logger.info(
                "Structure: %d beam(s), %d post(s), %d joist(s), %d rim joist(s), "
                "%d blocking, %d ladder rung(s), %d diagonal ledger(s)",
                len(components.beams), len(components.posts), len(components.joists),
                len(components.rim_joists), len(components.mid_span_blocking),
                len(components.picture_frame_blocking), len(components.diagonal_ledgers),
            )


def calculate_structure(
    shape_points: list[Point],
    ledger_indices: int | list[int],
    inputs: DeckInputs,
    deck_dimensions: DeckDimensions,
    *,
    constants: FramingConstants | None = None,
    tables: SpanTables | None = None,
    config: GenerationConfig | None = None,
) -> StructureComponents:
    """Compute the complete framing plan for one footprint with the default pipeline."""
    generator = StructureGenerator(create_default_registry())
    return generator.generate(
        shape_points, ledger_indices, inputs, deck_dimensions,
        constants=constants, tables=tables, config=config,
    )

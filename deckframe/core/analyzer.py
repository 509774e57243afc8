"""Footprint analysis: ledger orientation, deck extents and diagonal edges."""

from __future__ import annotations
import logging

from deckframe.models import StructureContext, EdgeKind
from deckframe.core.errors import StructureError
from deckframe.core.geometry import find_self_intersection, winding_sign

logger = logging.getLogger(__name__)


def normalize_ledger_indices(value: int | list[int] | None) -> list[int]:
    """Accept a single edge index or a list; the first entry is the primary ledger."""
    if value is None:
        return []
    if isinstance(value, int):
        return [value]
    return [int(v) for v in value]


class FootprintAnalyzer:
    """Derives everything the rules need to know about the footprint."""

    def analyze(self, context: StructureContext) -> None:
        """Run all analysis passes and populate the context."""
        dims = context.dimensions
        shape = context.shape

        if not dims.is_valid():
            raise StructureError("Deck dimensions invalid.")
        if shape.num_edges < 3:
            raise StructureError("Deck shape needs at least three edges.")
        for edge in shape.edges:
            if edge.kind == EdgeKind.OTHER:
                raise StructureError(
                    f"Edge {edge.index + 1} must be horizontal, vertical or at 45 degrees."
                )
        crossing = find_self_intersection(shape.points)
        if crossing is not None:
            first, second = crossing
            raise StructureError(
                f"Shape has self-intersecting lines. Edge {first + 1} intersects with edge {second + 1}."
            )
        if not context.ledger_indices:
            raise StructureError("No ledger edge selected.")
        for index in context.ledger_indices:
            if not 0 <= index < shape.num_edges:
                raise StructureError(f"Ledger edge index {index} is out of range.")

        primary = shape.edge(context.ledger_indices[0])
        if not primary.is_axis_aligned:
            raise StructureError("Primary ledger edge must be horizontal or vertical.")
        context.primary_edge = primary

        wall_p1, wall_p2 = primary.start, primary.end
        context.is_wall_horizontal = abs(wall_p1.x - wall_p2.x) > abs(wall_p1.y - wall_p2.y)
        self._detect_extents(context)

        context.winding = winding_sign(shape.points)
        context.is_rectangular = (
            shape.num_edges == 4 and all(e.is_axis_aligned for e in shape.edges)
        )

        ledger_set = set(context.ledger_indices)
        diagonals = [e for e in shape.edges if e.kind == EdgeKind.DIAGONAL]
        context.diagonal_ledger_edges = [e for e in diagonals if e.index in ledger_set]
        context.diagonal_rim_edges = [e for e in diagonals if e.index not in ledger_set]

        components = context.components
        components.corner_count = shape.num_edges
        components.total_depth_feet = context.constants.pixels_to_feet(
            abs(context.outer_edge_coord - context.wall_side_edge_coord)
        )

        logger.debug(
            "Footprint: %d edges, ledger %s (%s), depth %.2f', %d diagonal ledger / %d diagonal rim",
            shape.num_edges, context.ledger_indices,
            "horizontal" if context.is_wall_horizontal else "vertical",
            components.total_depth_feet,
            len(context.diagonal_ledger_edges), len(context.diagonal_rim_edges),
        )

    def _detect_extents(self, context: StructureContext) -> None:
        """Which way the deck grows away from the wall, and its edges along that run."""
        dims = context.dimensions
        center = dims.center
        wall_mid = context.primary_edge.midpoint

        if context.is_wall_horizontal:
            context.extends_positive = center.y > wall_mid.y
            low, high = dims.min_y, dims.max_y
            context.placement_min, context.placement_max = dims.min_x, dims.max_x
        else:
            context.extends_positive = center.x > wall_mid.x
            low, high = dims.min_x, dims.max_x
            context.placement_min, context.placement_max = dims.min_y, dims.max_y

        if context.extends_positive:
            context.wall_side_edge_coord, context.outer_edge_coord = low, high
        else:
            context.wall_side_edge_coord, context.outer_edge_coord = high, low

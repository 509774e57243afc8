"""Rim joists: end joists on both sides, the outer rim, and a wall rim when unattached."""

from __future__ import annotations
import logging

from deckframe.core.errors import StructureError
from deckframe.core.geometry import distance, unit_vector
from deckframe.models import (
    Point, Edge, RimJoist, MemberUsage, AttachmentType, StructureContext,
    direction_from_points,
)
from deckframe.rules.base import FramingRule

logger = logging.getLogger(__name__)

COVERAGE_TOLERANCE = 0.1  # Pixels


def span_coords(context: StructureContext) -> list[float]:
    """Run coordinates end joists break at, from the wall side outward."""
    if context.force_single_span or not context.interior_support_coords:
        return [context.joist_start_coord, context.outer_support_coord]
    return context.support_coords()


def uncovered_spans(
    edge: Edge, members: list[RimJoist], min_gap: float, tolerance: float = COVERAGE_TOLERANCE,
) -> list[tuple[Point, Point]]:
    """Stretches of an edge longer than `min_gap` that no member lying along it covers."""
    direction = unit_vector(edge.start, edge.end)
    if direction is None:
        return []
    length = edge.length

    covered: list[tuple[float, float]] = []
    for member in members:
        offsets = [direction_from_points(edge.start, p) for p in (member.p1, member.p2)]
        if any(abs(direction.cross(o)) > tolerance for o in offsets):
            continue
        along = [direction.dot(o) for o in offsets]
        low, high = max(0.0, min(along)), min(length, max(along))
        if high - low > tolerance:
            covered.append((low, high))

    gaps: list[tuple[float, float]] = []
    cursor = 0.0
    for low, high in sorted(covered):
        if low - cursor > min_gap:
            gaps.append((cursor, low))
        cursor = max(cursor, high)
    if length - cursor > min_gap:
        gaps.append((cursor, length))
    return [(edge.start.offset(direction, a), edge.start.offset(direction, b)) for a, b in gaps]


class RimJoistRule(FramingRule):
    """End joists follow the joist segmentation; outer and wall rims run the full edge."""

    priority = 70
    dependencies = ["joists.supports"]

    def get_id(self) -> str:
        return "rim_joists.layout"

    def get_name(self) -> str:
        return "Rim Joists"

    def apply(self, context: StructureContext) -> None:
        if context.joist_size is None:
            raise StructureError("Joist size has not been determined.")

        rims: list[RimJoist] = []

        def add(p1: Point, p2: Point, usage: MemberUsage, full_p1: Point, full_p2: Point) -> None:
            if distance(p1, p2) > context.constants.epsilon:
                rims.append(RimJoist(
                    p1=p1,
                    p2=p2,
                    size=context.joist_size,
                    length_feet=context.constants.pixels_to_feet(distance(p1, p2)),
                    usage=usage,
                    full_edge_p1=full_p1,
                    full_edge_p2=full_p2,
                ))

        coords = span_coords(context)

        wall = context.wall_side_edge_coord
        outer = context.outer_edge_coord
        for side in (context.placement_min, context.placement_max):
            full_p1 = context.axis_point(side, wall)
            full_p2 = context.axis_point(side, outer)
            for run_start, run_end in zip(coords, coords[1:]):
                add(
                    context.axis_point(side, run_start), context.axis_point(side, run_end),
                    MemberUsage.END_JOIST, full_p1, full_p2,
                )

        outer_p1 = context.axis_point(context.placement_min, outer)
        outer_p2 = context.axis_point(context.placement_max, outer)
        add(outer_p1, outer_p2, MemberUsage.OUTER_RIM_JOIST, outer_p1, outer_p2)

        if context.inputs.attachment_type in (AttachmentType.CONCRETE, AttachmentType.FLOATING):
            wall_p1 = context.axis_point(context.placement_min, wall)
            wall_p2 = context.axis_point(context.placement_max, wall)
            add(wall_p1, wall_p2, MemberUsage.WALL_RIM_JOIST, wall_p1, wall_p2)

        context.components.rim_joists.extend(rims)
        logger.debug("Added %d rim joist(s)", len(rims))


class PerimeterRimRule(FramingRule):
    """
    Frames footprint edges the bounding-box rims never reach, such as the
    sides of a notch. Runs after rims are clipped to the footprint; edges
    parallel to the ledger get an outer rim, the rest get end joists split
    at the joist supports.
    """

    priority = 77
    dependencies = ["diagonals.trim"]

    def get_id(self) -> str:
        return "rim_joists.perimeter"

    def get_name(self) -> str:
        return "Perimeter Rim Closure"

    def applies(self, context: StructureContext) -> bool:
        return not context.is_rectangular

    def apply(self, context: StructureContext) -> None:
        if context.joist_size is None or context.primary_edge is None:
            raise StructureError("Joist size has not been determined.")

        constants = context.constants
        # Rims stop one lumber thickness short where they butt into a flush beam
        min_gap = constants.lumber_thickness_pixels + COVERAGE_TOLERANCE
        ledger_set = set(context.ledger_indices)
        coords = span_coords(context)
        rims = context.components.rim_joists
        added: list[RimJoist] = []

        for edge in context.shape.edges:
            if edge.index in ledger_set or not edge.is_axis_aligned:
                continue
            parallel_to_ledger = edge.kind == context.primary_edge.kind
            usage = MemberUsage.OUTER_RIM_JOIST if parallel_to_ledger else MemberUsage.END_JOIST

            for start, end in uncovered_spans(edge, rims, min_gap):
                pieces = [(start, end)] if parallel_to_ledger else self._split(start, end, coords, context)
                for p1, p2 in pieces:
                    if distance(p1, p2) <= constants.epsilon:
                        continue
                    added.append(RimJoist(
                        p1=p1,
                        p2=p2,
                        size=context.joist_size,
                        length_feet=constants.pixels_to_feet(distance(p1, p2)),
                        usage=usage,
                        full_edge_p1=edge.start,
                        full_edge_p2=edge.end,
                    ))

        rims.extend(added)
        if added:
            logger.debug("Closed perimeter with %d rim joist(s)", len(added))

    def _split(
        self, start: Point, end: Point, coords: list[float], context: StructureContext,
    ) -> list[tuple[Point, Point]]:
        eps = context.constants.epsilon
        r1, r2 = context.run_coord(start), context.run_coord(end)
        low, high = sorted((r1, r2))
        cuts = sorted((c for c in coords if low + eps < c < high - eps), reverse=r1 > r2)
        placement = context.placement_coord(start)
        points = [start, *(context.axis_point(placement, c) for c in cuts), end]
        return list(zip(points, points[1:]))

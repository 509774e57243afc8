"""Diagonal edge handling and the final boundary clip.

A 45-degree edge is either a diagonal ledger (a bay-window wall in the
ledger selection) or a diagonal rim. Diagonal ledgers only ever move a
joist's wall end (p1); diagonal rims only ever move its outer end (p2).
"""

from __future__ import annotations
import logging

from deckframe.core.geometry import (
    distance, line_intersection, point_on_segment, unit_vector,
    clip_segment_to_polygon, line_segments_in_polygon,
)
from deckframe.models import (
    Point, Edge, Joist, RimJoist, StructuralMember, MemberUsage, StructureContext,
    direction_from_points,
)
from deckframe.rules.base import FramingRule
from deckframe.rules.beams.layout import place_beam, spec_for_layout

logger = logging.getLogger(__name__)

DIAGONAL_CUT_ANGLE = 45.0
ON_SEGMENT_TOLERANCE = 0.1  # Pixels


def signed_side(point: Point, edge: Edge) -> float:
    """Signed distance of a point from the edge's line."""
    direction = unit_vector(edge.start, edge.end)
    if direction is None:
        return 0.0
    return direction.cross(direction_from_points(edge.start, point))


def trim_at_diagonal(
    p1: Point, p2: Point, edge: Edge, inside: Point, epsilon: float,
) -> tuple[Point, Point] | None:
    """
    Cut p1-p2 where it crosses the diagonal, dropping the part on the far
    side from `inside`. Returns None when the member does not cross the
    diagonal segment or has no endpoint outside it.
    """
    hit = line_intersection(p1, p2, edge.start, edge.end)
    if hit is None:
        return None
    if not point_on_segment(hit, p1, p2, ON_SEGMENT_TOLERANCE):
        return None
    if not point_on_segment(hit, edge.start, edge.end, ON_SEGMENT_TOLERANCE):
        return None

    inside_side = signed_side(inside, edge)
    if abs(inside_side) < epsilon:
        return None
    p1_outside = signed_side(p1, edge) * inside_side < 0 and abs(signed_side(p1, edge)) > epsilon
    p2_outside = signed_side(p2, edge) * inside_side < 0 and abs(signed_side(p2, edge)) > epsilon

    if p1_outside and not p2_outside:
        trimmed = (hit, p2)
    elif p2_outside and not p1_outside:
        trimmed = (p1, hit)
    else:
        return None
    if distance(*trimmed) <= epsilon:
        return None
    return trimmed


def _mark_diagonal_cut(member: Joist | RimJoist, pixels_per_foot: float) -> None:
    member.cut_angle = DIAGONAL_CUT_ANGLE
    member.trimmed_at_diagonal = True
    member.refresh_length(pixels_per_foot)


class DiagonalLedgerRule(FramingRule):
    """Emits diagonal ledgers and extends innermost joists back to them."""

    priority = 60
    dependencies = ["joists.layout"]

    def get_id(self) -> str:
        return "joists.diagonal_ledger"

    def get_name(self) -> str:
        return "Diagonal Ledger"

    def applies(self, context: StructureContext) -> bool:
        return bool(context.diagonal_ledger_edges)

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        eps = constants.epsilon
        components = context.components
        extended = 0

        for edge in context.diagonal_ledger_edges:
            components.diagonal_ledgers.append(StructuralMember(
                p1=edge.start,
                p2=edge.end,
                size=context.joist_size or "",
                length_feet=constants.pixels_to_feet(edge.length),
                usage=MemberUsage.DIAGONAL_LEDGER,
            ))

            low, high = sorted((context.placement_coord(edge.start), context.placement_coord(edge.end)))
            for joist in components.joists:
                if not joist.is_innermost:
                    continue
                position = context.placement_coord(joist.p1)
                if not low - eps <= position <= high + eps:
                    continue
                hit = line_intersection(joist.p1, joist.p2, edge.start, edge.end)
                if hit is None:
                    continue
                # Only ever lengthen towards the house
                if (context.run_coord(hit) - context.run_coord(joist.p1)) * context.outward_sign < -eps:
                    joist.p1 = hit
                    _mark_diagonal_cut(joist, constants.pixels_per_foot)
                    extended += 1

        logger.debug(
            "%d diagonal ledger(s); extended %d joist(s)",
            len(context.diagonal_ledger_edges), extended,
        )


class DiagonalRimRule(FramingRule):
    """Emits diagonal rim joists and cuts each joist at the first diagonal it meets."""

    priority = 62
    dependencies = ["joists.layout"]

    def get_id(self) -> str:
        return "joists.diagonal_rim"

    def get_name(self) -> str:
        return "Diagonal Rim"

    def applies(self, context: StructureContext) -> bool:
        return bool(context.diagonal_rim_edges)

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        components = context.components

        for edge in context.diagonal_rim_edges:
            components.rim_joists.append(RimJoist(
                p1=edge.start,
                p2=edge.end,
                size=context.joist_size or "",
                length_feet=constants.pixels_to_feet(edge.length),
                usage=MemberUsage.DIAGONAL_RIM_JOIST,
                cut_angle=DIAGONAL_CUT_ANGLE,
                full_edge_p1=edge.start,
                full_edge_p2=edge.end,
            ))

        trimmed = sum(
            self._cut_joist(joist, context) for joist in components.joists
        )
        logger.debug("%d diagonal rim(s); cut %d joist(s)", len(context.diagonal_rim_edges), trimmed)

    def _cut_joist(self, joist: Joist, context: StructureContext) -> bool:
        eps = context.constants.epsilon
        direction = unit_vector(joist.p1, joist.p2)
        if direction is None:
            return False
        center = context.dimensions.center
        length = distance(joist.p1, joist.p2)

        nearest: tuple[float, Point] | None = None
        for edge in context.diagonal_rim_edges:
            center_side = signed_side(center, edge)
            # A joist starting beyond this diagonal is left to the boundary clip
            if signed_side(joist.p1, edge) * center_side < -eps:
                continue
            hit = line_intersection(joist.p1, joist.p2, edge.start, edge.end)
            if hit is None or not point_on_segment(hit, edge.start, edge.end, ON_SEGMENT_TOLERANCE):
                continue
            t = direction.dot(direction_from_points(joist.p1, hit))
            if t <= eps:
                continue
            if nearest is None or t < nearest[0]:
                nearest = (t, hit)

        if nearest is None:
            return False
        t, hit = nearest
        if t < length - eps:
            joist.p2 = hit
        elif t > length + eps and joist.is_outermost:
            joist.p2 = hit
        else:
            return False
        _mark_diagonal_cut(joist, context.constants.pixels_per_foot)
        return True


class BoundaryClipRule(FramingRule):
    """Pulls joist ends back onto the footprint; drops joists entirely outside."""

    priority = 64
    dependencies = ["joists.layout"]

    def get_id(self) -> str:
        return "joists.boundary_clip"

    def get_name(self) -> str:
        return "Joist Boundary Clip"

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        kept: list[Joist] = []
        dropped = 0
        for joist in context.components.joists:
            result = clip_segment_to_polygon(joist.p1, joist.p2, context.polygon)
            if result is None:
                dropped += 1
                continue
            p1, p2, clipped = result
            if clipped:
                joist.p1, joist.p2 = p1, p2
                joist.clipped = True
                joist.refresh_length(constants.pixels_per_foot)
            if distance(joist.p1, joist.p2) <= constants.epsilon:
                dropped += 1
                continue
            kept.append(joist)
        context.components.joists = kept
        if dropped:
            logger.debug("Dropped %d joist piece(s) outside the footprint", dropped)


class DiagonalTrimRule(FramingRule):
    """
    Trims axis-aligned rim joists and beams at diagonal rims, then clips
    rim joists to the footprint. Trimmed beams are re-placed so their
    posts and footings match the new extent.
    """

    priority = 75
    dependencies = ["rim_joists.layout"]

    def get_id(self) -> str:
        return "diagonals.trim"

    def get_name(self) -> str:
        return "Diagonal Trim & Rim Clip"

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        eps = constants.epsilon
        center = context.dimensions.center
        components = context.components

        for edge in context.diagonal_rim_edges:
            for rim in components.rim_joists:
                if rim.usage == MemberUsage.DIAGONAL_RIM_JOIST:
                    continue
                trimmed = trim_at_diagonal(rim.p1, rim.p2, edge, center, eps)
                if trimmed:
                    rim.p1, rim.p2 = trimmed
                    _mark_diagonal_cut(rim, constants.pixels_per_foot)

            for i, layout in enumerate(context.beam_layouts):
                if layout.beam.is_diagonal:
                    continue
                trimmed = trim_at_diagonal(layout.beam.p1, layout.beam.p2, edge, center, eps)
                if trimmed:
                    context.beam_layouts[i] = place_beam(
                        trimmed[0], trimmed[1], spec_for_layout(layout, context),
                        constants, context.tables,
                    )

        components.rim_joists = self._clip_rims(components.rim_joists, context)
        context.beam_layouts = [
            l for l in context.beam_layouts if l.beam.length_feet > eps
        ]

    def _clip_rims(self, rims: list[RimJoist], context: StructureContext) -> list[RimJoist]:
        eps = context.constants.epsilon
        ppf = context.constants.pixels_per_foot
        clipped: list[RimJoist] = []
        for rim in rims:
            if rim.usage == MemberUsage.DIAGONAL_RIM_JOIST:
                clipped.append(rim)
                continue
            pieces = line_segments_in_polygon(rim.p1, rim.p2, context.polygon)
            if len(pieces) == 1 and pieces[0][0].is_close(rim.p1, eps) and pieces[0][1].is_close(rim.p2, eps):
                clipped.append(rim)
                continue
            for start, end in pieces:
                piece = rim.model_copy(update={"p1": start, "p2": end, "clipped": True})
                piece.refresh_length(ppf)
                clipped.append(piece)
        return clipped

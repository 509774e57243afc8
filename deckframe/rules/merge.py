"""Colinear beam merging.

Beams of the same size, ply, flush type and usage that lie on one line
and touch or overlap become a single beam. Posts and footings of the
merged beam are laid out again from scratch on the merged support axis.
"""

from __future__ import annotations
import logging

from deckframe.core.geometry import unit_vector, point_to_segment_distance
from deckframe.models import Beam, BeamLayout, Point, StructureContext, direction_from_points
from deckframe.rules.base import FramingRule
from deckframe.rules.beams.layout import place_beam, spec_for_layout

logger = logging.getLogger(__name__)

COLLINEAR_TOLERANCE = 0.1  # Pixels off the line


def _line_distance(point: Point, a: Point, b: Point) -> float | None:
    direction = unit_vector(a, b)
    if direction is None:
        return None
    return abs(direction.cross(direction_from_points(a, point)))


def are_collinear(first: Beam, second: Beam, tolerance: float = COLLINEAR_TOLERANCE) -> bool:
    d1 = _line_distance(second.centerline_p1, first.centerline_p1, first.centerline_p2)
    d2 = _line_distance(second.centerline_p2, first.centerline_p1, first.centerline_p2)
    if d1 is None or d2 is None:
        return False
    return d1 < tolerance and d2 < tolerance


def should_merge(first: Beam, second: Beam, epsilon: float) -> bool:
    """Same material and usage, on one line, touching or overlapping."""
    if (first.size, first.ply, first.is_flush, first.usage) != (
        second.size, second.ply, second.is_flush, second.usage
    ):
        return False
    if not are_collinear(first, second):
        return False
    gap = min(
        point_to_segment_distance(second.p1, first.p1, first.p2),
        point_to_segment_distance(second.p2, first.p1, first.p2),
        point_to_segment_distance(first.p1, second.p1, second.p2),
        point_to_segment_distance(first.p2, second.p1, second.p2),
    )
    return gap <= epsilon


def merged_axis(beams: list[Beam]) -> tuple[Point, Point] | None:
    """Union of the support axes, projected on the first beam's direction."""
    reference = beams[0]
    origin = reference.centerline_p1
    direction = unit_vector(reference.centerline_p1, reference.centerline_p2)
    if direction is None:
        return None
    params = [
        direction.dot(direction_from_points(origin, p))
        for beam in beams
        for p in (beam.centerline_p1, beam.centerline_p2)
    ]
    return origin.offset(direction, min(params)), origin.offset(direction, max(params))


class BeamMergeRule(FramingRule):
    """Merges touching colinear beams and re-lays their posts and footings."""

    priority = 90

    def get_id(self) -> str:
        return "beams.merge"

    def get_name(self) -> str:
        return "Colinear Beam Merge"

    def apply(self, context: StructureContext) -> None:
        eps = context.constants.epsilon
        layouts = list(context.beam_layouts)
        before = len(layouts)

        merged_any = True
        while merged_any:
            merged_any = False
            for i in range(len(layouts)):
                group = [layouts[i]]
                for other in layouts[i + 1:]:
                    if any(should_merge(g.beam, other.beam, eps) for g in group):
                        group.append(other)
                if len(group) > 1:
                    merged = self._merge_group(group, context)
                    if merged is None:
                        continue
                    layouts = [l for l in layouts if all(l is not g for g in group)]
                    layouts.insert(i, merged)
                    merged_any = True
                    break

        context.beam_layouts = layouts
        if len(layouts) != before:
            logger.debug("Merged beams: %d -> %d", before, len(layouts))

    def _merge_group(self, group: list[BeamLayout], context: StructureContext) -> BeamLayout | None:
        axis = merged_axis([l.beam for l in group])
        if axis is None:
            return None
        template = group[0]
        return place_beam(
            axis[0], axis[1], spec_for_layout(template, context),
            context.constants, context.tables,
            is_diagonal=template.beam.is_diagonal,
        )

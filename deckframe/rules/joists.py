"""Joist layout perpendicular to the primary ledger.

Joists sit at every joist-spacing increment along the ledger. With
mid-beams in place each joist line is built from one board per
beam-to-beam span, unless the forced single-span rule keeps the boards
continuous. Picture-frame joists are inset from both side edges and the
regular spacing starts from the inner picture-frame line.
"""

from __future__ import annotations
import logging

from deckframe.core.errors import StructureError
from deckframe.core.geometry import distance
from deckframe.models import Joist, MemberUsage, StructureContext
from deckframe.rules.base import FramingRule

logger = logging.getLogger(__name__)


def joist_positions(
    placement_min: float,
    placement_max: float,
    spacing: float,
    picture_frame_positions: list[float],
    epsilon: float,
) -> list[tuple[float, MemberUsage]]:
    """Positions along the ledger, picture-frame joists first."""
    if spacing <= 0:
        return []

    positions = [(p, MemberUsage.PICTURE_FRAME_JOIST) for p in picture_frame_positions]
    area_start, area_end = placement_min, placement_max
    if picture_frame_positions:
        # The inner picture-frame lines bound the regular joists even if the
        # second one was too close to the first to be placed
        inset = picture_frame_positions[0] - placement_min
        area_start, area_end = placement_min + inset, placement_max - inset

    pos = area_start + spacing
    while pos < area_end - epsilon:
        positions.append((pos, MemberUsage.JOIST))
        pos += spacing
    return positions


class JoistLayoutRule(FramingRule):
    """Regular, picture-frame and segmented joists."""

    priority = 50
    dependencies = ["joists.supports"]

    def get_id(self) -> str:
        return "joists.layout"

    def get_name(self) -> str:
        return "Joist Layout"

    def apply(self, context: StructureContext) -> None:
        if context.joist_size is None:
            raise StructureError("Joist size has not been determined.")

        constants = context.constants
        if context.force_single_span or not context.interior_support_coords:
            coords = [context.joist_start_coord, context.outer_support_coord]
        else:
            coords = context.support_coords()
        spans = list(zip(coords, coords[1:]))

        positions = joist_positions(
            context.placement_min, context.placement_max,
            context.joist_spacing_pixels, context.picture_frame_positions,
            constants.epsilon,
        )

        joists: list[Joist] = []
        for pos, usage in positions:
            for span_index, (run_start, run_end) in enumerate(spans):
                p1 = context.axis_point(pos, run_start)
                p2 = context.axis_point(pos, run_end)
                length = distance(p1, p2)
                if length <= constants.epsilon:
                    continue
                joists.append(Joist(
                    p1=p1,
                    p2=p2,
                    size=context.joist_size,
                    length_feet=constants.pixels_to_feet(length),
                    usage=usage,
                    span_index=span_index,
                    span_count=len(spans),
                ))

        joists.sort(key=lambda j: (context.placement_coord(j.p1), j.span_index))
        context.components.joists = joists
        logger.debug(
            "Laid out %d joist piece(s) at %d position(s), %d span(s) each",
            len(joists), len(positions), len(spans),
        )

"""Mid-span blocking rows and picture-frame ladder blocking."""

from __future__ import annotations
import logging
import math

from deckframe.core.geometry import distance, line_segments_in_polygon
from deckframe.models import (
    Blocking, MemberUsage, PictureFrame, Point, StructureContext,
)
from deckframe.rules.base import FramingRule

logger = logging.getLogger(__name__)


def blocking_row_offsets(span_pixels: float, max_spacing_pixels: float, epsilon: float) -> list[float]:
    """Distances from the span start at which blocking rows go."""
    if max_spacing_pixels <= 0 or span_pixels <= max_spacing_pixels + epsilon:
        return []
    sections = math.ceil(span_pixels / max_spacing_pixels)
    rows = max(0, sections - 1)
    step = span_pixels / (rows + 1)
    return [step * i for i in range(1, rows + 1)]


def _blocking_pieces(
    context: StructureContext, p1: Point, p2: Point, usage: MemberUsage,
) -> list[Blocking]:
    eps = context.constants.epsilon
    pieces: list[Blocking] = []
    for start, end in line_segments_in_polygon(p1, p2, context.polygon):
        length = distance(start, end)
        if length > eps:
            pieces.append(Blocking(
                p1=start,
                p2=end,
                size=context.joist_size or "",
                length_feet=context.constants.pixels_to_feet(length),
                usage=usage,
            ))
    return pieces


class MidSpanBlockingRule(FramingRule):
    """Rows of blocking dividing each joist span into sections no longer than the max."""

    priority = 80
    dependencies = ["joists.supports"]

    def get_id(self) -> str:
        return "blocking.mid_span"

    def get_name(self) -> str:
        return "Mid-Span Blocking"

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        max_spacing = constants.feet_to_pixels(constants.max_blocking_spacing_feet)
        coords = context.support_coords()

        blocking: list[Blocking] = []
        for span_start, span_end in zip(coords, coords[1:]):
            direction = 1.0 if span_end > span_start else -1.0
            for offset in blocking_row_offsets(abs(span_end - span_start), max_spacing, constants.epsilon):
                row = span_start + offset * direction
                blocking.extend(_blocking_pieces(
                    context,
                    context.axis_point(context.placement_min, row),
                    context.axis_point(context.placement_max, row),
                    MemberUsage.MID_SPAN_BLOCKING,
                ))

        context.components.mid_span_blocking = blocking
        logger.debug("Added %d mid-span blocking piece(s)", len(blocking))


class PictureFrameBlockingRule(FramingRule):
    """
    Ladder blocking in the bays between each side rim and its picture-frame
    joist, one rung per joist spacing along the joist run.
    """

    priority = 82
    dependencies = ["joists.layout"]

    def get_id(self) -> str:
        return "blocking.picture_frame"

    def get_name(self) -> str:
        return "Picture-Frame Ladder Blocking"

    def applies(self, context: StructureContext) -> bool:
        return context.inputs.picture_frame != PictureFrame.NONE

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        eps = constants.epsilon
        half = constants.lumber_thickness_pixels / 2
        spacing = context.joist_spacing_pixels

        pf_positions = sorted({
            round(context.placement_coord(j.p1), 6)
            for j in context.components.joists
            if j.usage == MemberUsage.PICTURE_FRAME_JOIST
        })
        if not pf_positions or spacing <= 0:
            return

        run_start = context.toward_outer(context.wall_side_edge_coord, half)
        run_end = context.toward_outer(context.outer_edge_coord, -half)
        run_min, run_max = sorted((run_start, run_end))

        bays = [(
            context.placement_min + half,
            pf_positions[0] - half,
            MemberUsage.LADDER_BLOCKING_SIDE_1,
        )]
        if len(pf_positions) > 1 and pf_positions[-1] - pf_positions[0] > eps:
            bays.append((
                pf_positions[-1] + half,
                context.placement_max - half,
                MemberUsage.LADDER_BLOCKING_SIDE_2,
            ))

        blocking: list[Blocking] = []
        for bay_start, bay_end, usage in bays:
            if abs(bay_end - bay_start) < eps:
                continue
            run = run_min + spacing
            while run < run_max - eps:
                blocking.extend(_blocking_pieces(
                    context,
                    context.axis_point(bay_start, run),
                    context.axis_point(bay_end, run),
                    usage,
                ))
                run += spacing

        context.components.picture_frame_blocking = blocking
        logger.debug("Added %d ladder blocking rung(s)", len(blocking))

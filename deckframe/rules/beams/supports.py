"""Wall-side support (ledger or wall-side beam) and joist support coordinates."""

from __future__ import annotations
import logging

from deckframe.core.errors import StructureError
from deckframe.models import (
    Ledger, MemberUsage, AttachmentType, BeamType, PictureFrame, StructureContext,
)
from deckframe.rules.base import FramingRule
from .layout import beam_spec, place_axis_beam

logger = logging.getLogger(__name__)


class WallSideSupportRule(FramingRule):
    """Ledger on the house rim, a wall-side beam for floating decks, nothing on concrete."""

    priority = 20
    dependencies = ["sizing.joists"]

    def get_id(self) -> str:
        return "supports.wall_side"

    def get_name(self) -> str:
        return "Ledger / Wall-Side Beam"

    def apply(self, context: StructureContext) -> None:
        attachment = context.inputs.attachment_type
        constants = context.constants

        if attachment == AttachmentType.HOUSE_RIM:
            edge = context.primary_edge
            if context.joist_size is None:
                raise StructureError("Joist size has not been determined.")
            context.ledger = Ledger(
                p1=edge.start,
                p2=edge.end,
                size=context.joist_size,
                length_feet=constants.pixels_to_feet(edge.length),
                usage=MemberUsage.LEDGER,
            )
            context.components.ledger = context.ledger
            return

        if attachment == AttachmentType.FLOATING:
            is_flush = context.inputs.beam_type == BeamType.FLUSH
            coordinate = context.wall_side_edge_coord
            if not is_flush:
                coordinate = context.toward_outer(
                    coordinate, constants.feet_to_pixels(constants.drop_beam_setback_feet),
                )
            spec = beam_spec(
                context, MemberUsage.WALL_SIDE_BEAM, is_flush, context.beam_plan.sub_span_feet,
            )
            layout = place_axis_beam(context, coordinate, spec)
            if layout.beam.length_feet > constants.epsilon:
                context.beam_layouts.append(layout)
            else:
                logger.debug("Wall-side beam degenerate at %.2f", coordinate)


class JoistSupportRule(FramingRule):
    """
    Derives the run coordinates every joist piece starts and ends on.

    Start: the ledger line, else the wall-side beam (inside face when
    flush), else the wall-side edge. Interior supports: each mid-beam.
    Outer: the outer edge, one lumber thickness in for flush outer beams.
    """

    priority = 45
    dependencies = ["supports.wall_side", "beams.outer", "beams.mid"]

    def get_id(self) -> str:
        return "joists.supports"

    def get_name(self) -> str:
        return "Joist Supports"

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        thickness = constants.lumber_thickness_pixels

        wall_side = context.layouts_for(MemberUsage.WALL_SIDE_BEAM)
        if context.ledger:
            start = context.run_coord(context.ledger.p1)
        elif wall_side and wall_side[0].beam.is_flush:
            start = context.toward_outer(context.wall_side_edge_coord, thickness)
        else:
            start = context.wall_side_edge_coord

        outer = context.outer_edge_coord
        outer_beams = context.layouts_for(MemberUsage.OUTER_BEAM, MemberUsage.DIAGONAL_BEAM)
        if outer_beams and all(l.beam.is_flush for l in outer_beams):
            outer = context.toward_outer(outer, -thickness)

        mids = sorted(
            (context.run_coord(l.beam.centerline_p1) for l in context.layouts_for(MemberUsage.MID_BEAM)),
            key=lambda c: (c - start) * context.outward_sign,
        )

        context.joist_start_coord = start
        context.interior_support_coords = mids
        context.outer_support_coord = outer
        context.picture_frame_positions = self._picture_frame_positions(context)

        logger.debug(
            "Joist supports: start %.2f, interior %s, outer %.2f",
            start, [round(c, 2) for c in mids], outer,
        )

    def _picture_frame_positions(self, context: StructureContext) -> list[float]:
        mode = context.inputs.picture_frame
        if mode == PictureFrame.NONE:
            return []
        constants = context.constants
        inset_inches = (
            constants.picture_frame_single_inset_inches if mode == PictureFrame.SINGLE
            else constants.picture_frame_double_inset_inches
        )
        inset = constants.inches_to_pixels(inset_inches)
        first = context.placement_min + inset
        last = context.placement_max - inset
        if abs(last - first) > context.joist_spacing_pixels * 0.5:
            return [first, last]
        return [first]

"""Joist, beam and post sizing: the first pipeline stage."""

from __future__ import annotations
import logging

from deckframe import config
from deckframe.advisory.sizing import plan_mid_beams, size_beam
from deckframe.core.errors import StructureError
from deckframe.models import StructureContext, PostSize
from deckframe.rules.base import FramingRule

logger = logging.getLogger(__name__)


def auto_post_size(post_size: PostSize, deck_height_inches: float, six_by_six_min_height: float) -> str:
    if post_size != PostSize.AUTO:
        return post_size.value
    return "6x6" if deck_height_inches >= six_by_six_min_height else "4x4"


def is_forced_single_span(joist_size: str | None, requires_mid_beam: bool,
                          total_depth_feet: float, epsilon: float) -> bool:
    """Continuous 2x8 boards between 18' and 20' of depth, even with a mid-beam."""
    return (
        joist_size == config.FORCED_SINGLE_SPAN_JOIST_SIZE
        and requires_mid_beam
        and config.FORCED_SINGLE_SPAN_MIN_DEPTH_FEET + epsilon
        < total_depth_feet
        <= config.FORCED_SINGLE_SPAN_MAX_DEPTH_FEET + epsilon
    )


class JoistSizingRule(FramingRule):
    """Sizes joists for the deck depth and decides how many mid-beams are needed."""

    priority = 10

    def get_id(self) -> str:
        return "sizing.joists"

    def get_name(self) -> str:
        return "Joist & Beam Sizing"

    def apply(self, context: StructureContext) -> None:
        inputs = context.inputs
        constants = context.constants
        components = context.components
        depth = components.total_depth_feet

        sizing, plan = plan_mid_beams(
            depth, inputs.joist_spacing, inputs.deck_height, context.tables, constants,
        )
        if sizing.error or not sizing.size:
            raise StructureError(sizing.error or "Could not determine joist size.")

        context.joist_size = sizing.size
        context.beam_plan = plan
        context.force_single_span = is_forced_single_span(
            sizing.size, sizing.requires_mid_beam, depth, constants.epsilon,
        )
        context.post_size = auto_post_size(
            inputs.post_size, inputs.deck_height, constants.six_by_six_min_height_inches,
        )
        context.beam_ply = 3 if context.post_size == "6x6" else 2

        # Posts are never further apart than max_post_spacing
        beam = size_beam(
            constants.max_post_spacing_feet, plan.sub_span_feet, context.beam_ply, context.tables,
        )
        context.beam_size = beam.size
        if beam.needs_more_posts:
            components.beam_warning = beam.message

        context.joist_spacing_pixels = constants.inches_to_pixels(inputs.joist_spacing)

        components.joist_size = context.joist_size
        components.beam_size = context.beam_size
        components.post_size = context.post_size
        components.requires_mid_beam = sizing.requires_mid_beam
        components.number_of_mid_beams = plan.number_of_mid_beams

        logger.debug(
            "Sized %s joists, %s-ply %s beams, %s posts; plan=%s%s",
            context.joist_size, context.beam_ply, context.beam_size, context.post_size,
            plan.kind, " (forced single span)" if context.force_single_span else "",
        )

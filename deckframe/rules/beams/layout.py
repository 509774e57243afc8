"""Beam & post layout.

A beam is placed on a support axis: two posts inset from the axis ends
(one centre post on very short axes), evenly spaced intermediate posts
whenever the post-to-post span exceeds the maximum post spacing, material
cantilevered past the outermost posts, and one footing per post.
"""

from __future__ import annotations
import logging
import math
from pydantic import BaseModel

from deckframe.advisory.sizing import size_footing, tributary_area
from deckframe.advisory.tables import SpanTables, DEFAULT_SPAN_TABLES
from deckframe.core.errors import StructureError
from deckframe.core.geometry import distance, unit_vector, line_segments_in_polygon
from deckframe.models import (
    Point, Beam, BeamLayout, Post, Footing, MemberUsage, FootingType, BeamType,
    AttachmentType, FramingConstants, StructureContext, SingleMidBeam, MultipleMidBeams,
)
from deckframe.rules.base import FramingRule
from .outline import generate_beam_outline

logger = logging.getLogger(__name__)


class BeamSpec(BaseModel):
    """Material and load inputs shared by every beam of one kind."""
    size: str
    ply: int
    post_size: str
    height_feet: float
    footing_type: FootingType
    usage: MemberUsage
    is_flush: bool
    joist_span_feet: float


def layout_posts(axis_p1: Point, axis_p2: Point, constants: FramingConstants) -> list[Point]:
    """Post positions along the axis, ordered from axis_p1 to axis_p2."""
    length = distance(axis_p1, axis_p2)
    unit = unit_vector(axis_p1, axis_p2)
    if unit is None or length <= constants.epsilon:
        return []

    inset = constants.feet_to_pixels(constants.post_inset_feet)
    if length < inset * 2:
        return [axis_p1.lerp(axis_p2, 0.5)]

    inset = min(inset, length / 2 - constants.epsilon * 10)
    first = axis_p1.offset(unit, inset)
    last = axis_p2.offset(unit, -inset)
    posts = [first]

    span = distance(first, last)
    if span > constants.epsilon:
        span_feet = constants.pixels_to_feet(span)
        if span_feet > constants.max_post_spacing_feet:
            count = math.floor(span_feet / constants.max_post_spacing_feet)
            step = span / (count + 1)
            posts.extend(first.offset(unit, step * i) for i in range(1, count + 1))
        posts.append(last)
    return posts


def footings_for_posts(
    posts: list[Point],
    post_spacing_feet: float,
    spec: BeamSpec,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
) -> list[Footing]:
    """One footing per post; the first and last posts carry corner loads."""
    footings: list[Footing] = []
    last = len(posts) - 1
    for i, post in enumerate(posts):
        area = tributary_area(post_spacing_feet, spec.joist_span_feet, is_corner=i in (0, last))
        sizing = size_footing(area)
        footings.append(Footing(
            x=post.x,
            y=post.y,
            type=spec.footing_type.value,
            diameter=0 if spec.footing_type == FootingType.HELICAL else sizing.diameter,
            load=sizing.load,
            tributary_area=area,
            message=sizing.message,
        ))
    return footings


def zero_length_layout(at: Point, spec: BeamSpec, is_diagonal: bool = False) -> BeamLayout:
    beam = Beam(
        p1=at, p2=at,
        centerline_p1=at, centerline_p2=at,
        position_coordinate_line_p1=at, position_coordinate_line_p2=at,
        size=spec.size, length_feet=0.0, usage=spec.usage,
        ply=spec.ply, is_flush=spec.is_flush, is_diagonal=is_diagonal,
    )
    return BeamLayout(beam=beam, joist_span_feet=spec.joist_span_feet)


def place_beam(
    axis_p1: Point,
    axis_p2: Point,
    spec: BeamSpec,
    constants: FramingConstants,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
    is_diagonal: bool = False,
) -> BeamLayout:
    """Place a beam with its posts and footings on any support axis."""
    unit = unit_vector(axis_p1, axis_p2)
    if unit is None:
        return zero_length_layout(axis_p1, spec, is_diagonal)

    post_points = layout_posts(axis_p1, axis_p2, constants)
    material_p1, material_p2 = axis_p1, axis_p2
    if post_points:
        cantilever = constants.feet_to_pixels(constants.beam_cantilever_feet)
        material_p1 = post_points[0].offset(unit, -cantilever)
        material_p2 = post_points[-1].offset(unit, cantilever)

    if len(post_points) > 1:
        post_spacing = constants.pixels_to_feet(distance(post_points[0], post_points[1]))
    else:
        post_spacing = constants.pixels_to_feet(distance(axis_p1, axis_p2))

    beam = Beam(
        p1=material_p1,
        p2=material_p2,
        centerline_p1=axis_p1,
        centerline_p2=axis_p2,
        position_coordinate_line_p1=axis_p1,
        position_coordinate_line_p2=axis_p2,
        size=spec.size,
        length_feet=constants.pixels_to_feet(distance(material_p1, material_p2)),
        usage=spec.usage,
        ply=spec.ply,
        is_flush=spec.is_flush,
        is_diagonal=is_diagonal,
    )
    posts = [
        Post(x=p.x, y=p.y, size=spec.post_size, height_feet=spec.height_feet)
        for p in post_points
    ]
    return BeamLayout(
        beam=beam,
        posts=posts,
        footings=footings_for_posts(post_points, post_spacing, spec, tables),
        joist_span_feet=spec.joist_span_feet,
    )


def beam_spec(
    context: StructureContext,
    usage: MemberUsage,
    is_flush: bool,
    joist_span_feet: float,
) -> BeamSpec:
    if context.beam_size is None or context.post_size is None:
        raise StructureError("Beam size has not been determined.")
    return BeamSpec(
        size=context.beam_size,
        ply=context.beam_ply,
        post_size=context.post_size,
        height_feet=context.inputs.deck_height / 12,
        footing_type=context.inputs.footing_type,
        usage=usage,
        is_flush=is_flush,
        joist_span_feet=joist_span_feet,
    )


def spec_for_layout(layout: BeamLayout, context: StructureContext) -> BeamSpec:
    """Rebuild the BeamSpec of an already placed beam, e.g. to re-place it after trimming."""
    beam = layout.beam
    return BeamSpec(
        size=beam.size,
        ply=beam.ply,
        post_size=layout.posts[0].size if layout.posts else (context.post_size or "4x4"),
        height_feet=context.inputs.deck_height / 12,
        footing_type=context.inputs.footing_type,
        usage=beam.usage,
        is_flush=beam.is_flush,
        joist_span_feet=layout.joist_span_feet,
    )


def place_axis_beam(context: StructureContext, coordinate: float, spec: BeamSpec) -> BeamLayout:
    """
    Place a beam parallel to the ledger at a run coordinate.

    The axis spans the bounding box, is clipped to the footprint, and the
    longest inside piece is kept.
    """
    axis_p1 = context.axis_point(context.placement_min, coordinate)
    axis_p2 = context.axis_point(context.placement_max, coordinate)
    pieces = line_segments_in_polygon(axis_p1, axis_p2, context.polygon)
    if not pieces:
        return zero_length_layout(axis_p1, spec)

    start, end = max(pieces, key=lambda piece: distance(piece[0], piece[1]))
    return place_beam(start, end, spec, context.constants, context.tables)


class OuterBeamRule(FramingRule):
    """Outer support: one axis beam on rectangles, a stitched outline otherwise."""

    priority = 30
    dependencies = ["sizing.joists"]

    def get_id(self) -> str:
        return "beams.outer"

    def get_name(self) -> str:
        return "Outer Beams"

    def apply(self, context: StructureContext) -> None:
        constants = context.constants
        is_flush = context.inputs.beam_type == BeamType.FLUSH
        joist_span = context.beam_plan.sub_span_feet

        layouts: list[BeamLayout] = []
        if not context.is_rectangular:
            offset = 0.0 if is_flush else constants.joist_cantilever_pixels(context.joist_size or "")
            outline = generate_beam_outline(
                context.shape, context.ledger_indices, context.is_wall_horizontal,
                offset, context.winding,
            )
            for segment in outline:
                usage = MemberUsage.DIAGONAL_BEAM if segment.is_diagonal else MemberUsage.OUTER_BEAM
                spec = beam_spec(context, usage, is_flush, joist_span)
                layouts.append(place_beam(
                    segment.p1, segment.p2, spec, constants, context.tables,
                    is_diagonal=segment.is_diagonal,
                ))

        if not layouts:
            coordinate = context.outer_edge_coord
            if not is_flush:
                coordinate = context.toward_outer(
                    coordinate, -constants.feet_to_pixels(constants.drop_beam_setback_feet),
                )
            spec = beam_spec(context, MemberUsage.OUTER_BEAM, is_flush, joist_span)
            layouts.append(place_axis_beam(context, coordinate, spec))

        placed = [l for l in layouts if l.beam.length_feet > constants.epsilon]
        context.beam_layouts.extend(placed)
        logger.debug("Placed %d outer beam(s)", len(placed))

        if not placed and context.inputs.attachment_type == AttachmentType.CONCRETE:
            raise StructureError("Outer beam calculation failed for non-ledger, non-floating deck.")


class MidBeamRule(FramingRule):
    """Evenly spaced mid-beams between the wall side and the outer edge."""

    priority = 40
    dependencies = ["sizing.joists", "supports.wall_side"]

    def get_id(self) -> str:
        return "beams.mid"

    def get_name(self) -> str:
        return "Mid Beams"

    def apply(self, context: StructureContext) -> None:
        plan = context.beam_plan
        count = plan.number_of_mid_beams
        if count == 0:
            return

        start = (
            context.run_coord(context.ledger.p1) if context.ledger
            else context.wall_side_edge_coord
        )
        end = context.outer_edge_coord
        # Mid-beams carry half of the span on each side
        spec = beam_spec(context, MemberUsage.MID_BEAM, False, plan.sub_span_feet * 2)

        placed: list[BeamLayout] = []
        for i in range(1, count + 1):
            coordinate = start + (end - start) * i / (count + 1)
            layout = place_axis_beam(context, coordinate, spec)
            if layout.beam.length_feet <= context.constants.epsilon:
                if context.force_single_span:
                    logger.debug("Mid-beam %d degenerate; continuing with single-span joists", i)
                    continue
                raise StructureError("Mid-beam required but could not be calculated.")
            placed.append(layout)

        context.beam_layouts.extend(placed)
        if isinstance(plan, SingleMidBeam):
            plan.beam = placed[0].beam if placed else None
        elif isinstance(plan, MultipleMidBeams):
            plan.beams = [l.beam for l in placed]
        logger.debug("Placed %d of %d mid-beam(s)", len(placed), count)

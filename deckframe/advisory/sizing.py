"""Joist, beam and footing sizing from the span tables."""

from __future__ import annotations
import logging
import math
from pydantic import BaseModel

from deckframe.models.framing import BeamPlan, NoMidBeam, SingleMidBeam, MultipleMidBeams
from deckframe.models.parameters import FramingConstants
from .tables import (
    SpanTables, DEFAULT_SPAN_TABLES,
    STANDARD_FOOTING_DIAMETERS, DEFAULT_SOIL_BEARING_CAPACITY, DECK_DESIGN_LOAD_PSF,
)

logger = logging.getLogger(__name__)


class JoistSizing(BaseModel):
    size: str | None = None
    requires_mid_beam: bool = False
    error: str | None = None
    max_span_any_size: float = 0.0


class BeamSizing(BaseModel):
    size: str
    max_span: float | None = None
    needs_more_posts: bool = False
    message: str | None = None


class BeamSpanCheck(BaseModel):
    valid: bool
    max_span: float | None = None
    message: str


class FootingSizing(BaseModel):
    diameter: float
    load: float
    required_area: float
    calculated_diameter: float
    message: str | None = None


def size_joists(
    span_feet: float,
    spacing_inches: float,
    height_inches: float,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
    constants: FramingConstants | None = None,
) -> JoistSizing:
    """
    Pick the smallest joist size whose tabulated span covers `span_feet`.

    Returns requires_mid_beam=True when sizes exist for the spacing but
    none reaches the span. An error is returned only when the table has
    nothing usable for this spacing/height.
    """
    constants = constants or FramingConstants()
    eps = constants.epsilon

    if not tables.max_joist_spans:
        return JoistSizing(error="Max joist span data not available.")

    prohibit_2x6 = height_inches >= constants.min_height_for_no_2x6_inches
    smallest: str | None = None
    largest_span = 0.0

    for size in constants.joist_size_order:
        if prohibit_2x6 and size == "2x6":
            continue
        max_span = tables.max_joist_span(size, spacing_inches)
        if max_span is None:
            continue
        largest_span = max(largest_span, max_span)
        if smallest is None and max_span >= span_feet - eps:
            smallest = size

    if smallest:
        return JoistSizing(size=smallest, max_span_any_size=largest_span)

    if largest_span > 0 and span_feet > largest_span + eps:
        return JoistSizing(requires_mid_beam=True, max_span_any_size=largest_span)

    message = (
        f"No joist for span {span_feet:.2f}' @ {spacing_inches:g}\" OC. "
        f"Max: {largest_span:.2f}'."
    )
    if prohibit_2x6 and "2x6" in constants.joist_size_order:
        message += (
            f" (2x6 not allowed for height >= "
            f"{constants.min_height_for_no_2x6_inches / 12:g}')"
        )
    return JoistSizing(error=message, max_span_any_size=largest_span)


def mid_beam_count(total_depth_feet: float, max_span_any_size: float) -> int:
    """Number of mid-beams that splits the depth into spans no longer than the max."""
    if max_span_any_size <= 0 or total_depth_feet <= max_span_any_size:
        return 0
    spans = math.ceil(total_depth_feet / max_span_any_size - 1e-9)
    return max(1, spans - 1)


def plan_mid_beams(
    total_depth_feet: float,
    spacing_inches: float,
    height_inches: float,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
    constants: FramingConstants | None = None,
) -> tuple[JoistSizing, BeamPlan]:
    """Size joists for the full depth, escalating to evenly spaced mid-beams."""
    full = size_joists(total_depth_feet, spacing_inches, height_inches, tables, constants)
    if full.error or not full.requires_mid_beam:
        return full, NoMidBeam(sub_span_feet=total_depth_feet)

    count = mid_beam_count(total_depth_feet, full.max_span_any_size)
    sub_span = total_depth_feet / (count + 1)
    plan: BeamPlan
    if count == 1:
        plan = SingleMidBeam(sub_span_feet=sub_span)
    else:
        plan = MultipleMidBeams(number_of_mid_beams=count, sub_span_feet=sub_span)

    sub = size_joists(sub_span, spacing_inches, height_inches, tables, constants)
    if sub.size is None:
        return JoistSizing(
            requires_mid_beam=True,
            error=sub.error or "Cannot size joists for mid-beam config.",
            max_span_any_size=full.max_span_any_size,
        ), plan

    logger.debug(
        "Depth %.2f' needs %d mid-beam(s); sub-span %.2f' uses %s joists",
        total_depth_feet, count, sub_span, sub.size,
    )
    return JoistSizing(
        size=sub.size,
        requires_mid_beam=True,
        max_span_any_size=full.max_span_any_size,
    ), plan


def max_beam_span(
    beam_size: str,
    ply: int,
    joist_span_ft: float,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
) -> float | None:
    """Allowed beam span, interpolated on joist span and clamped to the table ends."""
    ply_data = tables.max_beam_spans.get(ply)
    if not ply_data:
        logger.warning("Invalid beam ply count: %s", ply)
        return None
    entries = ply_data.get(beam_size)
    if not entries:
        logger.warning("Unknown beam size: %s for %s-ply", beam_size, ply)
        return None

    rows = sorted(entries, key=lambda e: e.joist_span_ft)
    if joist_span_ft <= rows[0].joist_span_ft:
        return rows[0].max_beam_span_ft
    if joist_span_ft >= rows[-1].joist_span_ft:
        return rows[-1].max_beam_span_ft

    for lower, upper in zip(rows, rows[1:]):
        if lower.joist_span_ft <= joist_span_ft <= upper.joist_span_ft:
            ratio = (joist_span_ft - lower.joist_span_ft) / (upper.joist_span_ft - lower.joist_span_ft)
            return lower.max_beam_span_ft + ratio * (upper.max_beam_span_ft - lower.max_beam_span_ft)
    return None


def validate_beam_span(
    actual_span_ft: float,
    beam_size: str,
    ply: int,
    joist_span_ft: float,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
) -> BeamSpanCheck:
    limit = max_beam_span(beam_size, ply, joist_span_ft, tables)
    if limit is None:
        return BeamSpanCheck(
            valid=False,
            message=(
                f"Cannot validate beam span: unknown configuration "
                f"({ply}-ply {beam_size} with {joist_span_ft}' joist span)"
            ),
        )
    valid = actual_span_ft <= limit + 0.1
    if valid:
        message = f"Beam span {actual_span_ft:.1f}' is within IRC limit of {limit:.1f}'"
    else:
        message = (
            f"WARNING: Beam span {actual_span_ft:.1f}' exceeds IRC limit of {limit:.1f}' "
            f"for {ply}-ply {beam_size} with {joist_span_ft:.1f}' joist span"
        )
    return BeamSpanCheck(valid=valid, max_span=limit, message=message)


def size_beam(
    post_span_ft: float,
    joist_span_ft: float,
    ply: int,
    tables: SpanTables = DEFAULT_SPAN_TABLES,
) -> BeamSizing:
    """Smallest beam that spans between posts; falls back to the largest with a warning."""
    sizes = tables.beam_size_order
    for size in sizes:
        limit = max_beam_span(size, ply, joist_span_ft, tables)
        if limit and limit >= post_span_ft:
            return BeamSizing(size=size, max_span=limit)

    largest = sizes[-1]
    limit = max_beam_span(largest, ply, joist_span_ft, tables)
    limit_text = f"{limit:.1f}'" if limit is not None else "unknown"
    message = f"Maximum {ply}-ply {largest} span is {limit_text} - additional posts required"
    logger.warning(message)
    return BeamSizing(size=largest, max_span=limit, needs_more_posts=True, message=message)


def tributary_area(post_spacing_ft: float, joist_span_ft: float, is_corner: bool = False) -> float:
    """Floor area carried by one post: corners take half of an interior post."""
    half_joist_span = joist_span_ft / 2
    if is_corner:
        return post_spacing_ft / 2 * half_joist_span
    return post_spacing_ft * half_joist_span


def size_footing(
    tributary_area_sq_ft: float,
    soil_bearing_capacity: float = DEFAULT_SOIL_BEARING_CAPACITY,
) -> FootingSizing:
    """Round the bearing-area diameter up to the next standard footing size."""
    load = tributary_area_sq_ft * DECK_DESIGN_LOAD_PSF
    required_area = load / soil_bearing_capacity
    required_diameter = math.sqrt(4 * required_area * 144 / math.pi)

    diameter = STANDARD_FOOTING_DIAMETERS[-1]
    for standard in STANDARD_FOOTING_DIAMETERS:
        if standard >= required_diameter:
            diameter = standard
            break

    message = None
    if required_diameter > STANDARD_FOOTING_DIAMETERS[-1]:
        message = (
            f"Load exceeds standard footing capacity. Required: {required_diameter:.1f}\". "
            f"Using {STANDARD_FOOTING_DIAMETERS[-1]}\" but consult engineer."
        )
        logger.warning(message)

    return FootingSizing(
        diameter=diameter,
        load=load,
        required_area=required_area,
        calculated_diameter=required_diameter,
        message=message,
    )

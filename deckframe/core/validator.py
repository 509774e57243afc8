"""Boundary validation of a generated structure.

Every joist, beam, rim joist and post is checked against the deck
polygon. Nothing is corrected here; the report only lists what escaped.
"""

from __future__ import annotations
import logging

from deckframe.config import BOUNDARY_TOLERANCE_PIXELS, PIXELS_PER_FOOT
from deckframe.core.geometry import distance, point_in_polygon, point_on_polygon_edge
from deckframe.models import (
    Point, Beam, Joist, RimJoist, Post, StructureComponents,
    ValidationIssue, ValidationReport,
)

logger = logging.getLogger(__name__)

BEAM_CANTILEVER_ALLOWANCE_FEET = 2.0
MAX_JOIST_LENGTH_FEET = 30.0
MAX_BEAM_LENGTH_FEET = 40.0


def _inside(point: Point, polygon: list[Point], tolerance: float) -> bool:
    return point_in_polygon(point, polygon) or point_on_polygon_edge(point, polygon, tolerance)


def validate_joist(
    joist: Joist, polygon: list[Point], pixels_per_foot: float = PIXELS_PER_FOOT,
) -> list[str]:
    issues: list[str] = []
    for name, point in (("p1", joist.p1), ("p2", joist.p2)):
        if not _inside(point, polygon, BOUNDARY_TOLERANCE_PIXELS):
            issues.append(f"Joist {name} ({point.x:.1f}, {point.y:.1f}) is outside deck boundary")

    length = distance(joist.p1, joist.p2)
    if length < BOUNDARY_TOLERANCE_PIXELS:
        issues.append(f"Joist has near-zero length ({length / pixels_per_foot:.2f} ft)")
    length_feet = length / pixels_per_foot
    if length_feet > MAX_JOIST_LENGTH_FEET:
        issues.append(f"Joist is unusually long ({length_feet:.1f} ft) - possible calculation error")
    return issues


def validate_beam(
    beam: Beam, polygon: list[Point], pixels_per_foot: float = PIXELS_PER_FOOT,
) -> list[str]:
    issues: list[str] = []
    tolerance = BOUNDARY_TOLERANCE_PIXELS + BEAM_CANTILEVER_ALLOWANCE_FEET * pixels_per_foot
    for name, point in (("p1", beam.p1), ("p2", beam.p2)):
        if not _inside(point, polygon, tolerance):
            issues.append(f"Beam {name} ({point.x:.1f}, {point.y:.1f}) extends beyond deck boundary")

    length_feet = distance(beam.p1, beam.p2) / pixels_per_foot
    if length_feet > MAX_BEAM_LENGTH_FEET:
        issues.append(f"Beam is unusually long ({length_feet:.1f} ft) - possible calculation error")
    return issues


def validate_rim_joist(rim: RimJoist, polygon: list[Point]) -> list[str]:
    # Rims sit on the perimeter, so they get twice the point tolerance
    return [
        f"Rim joist {name} ({point.x:.1f}, {point.y:.1f}) is outside deck boundary"
        for name, point in (("p1", rim.p1), ("p2", rim.p2))
        if not _inside(point, polygon, BOUNDARY_TOLERANCE_PIXELS * 2)
    ]


def validate_post(post: Post, polygon: list[Point]) -> list[str]:
    if _inside(post.point, polygon, BOUNDARY_TOLERANCE_PIXELS * 3):
        return []
    return [f"Post at ({post.x:.1f}, {post.y:.1f}) is outside deck boundary"]


def _collect(members, check) -> list[ValidationIssue]:
    found: list[ValidationIssue] = []
    for index, member in enumerate(members):
        issues = check(member)
        if issues:
            found.append(ValidationIssue(index=index, issues=issues))
    return found


def validate_components(
    components: StructureComponents,
    polygon: list[Point],
    pixels_per_foot: float = PIXELS_PER_FOOT,
) -> ValidationReport:
    """Check every member of a structure against the deck boundary."""
    if len(polygon) < 3:
        return ValidationReport(valid=False, summary="Invalid components or deck points")

    report = ValidationReport(
        joist_issues=_collect(components.joists, lambda j: validate_joist(j, polygon, pixels_per_foot)),
        beam_issues=_collect(components.beams, lambda b: validate_beam(b, polygon, pixels_per_foot)),
        rim_joist_issues=_collect(components.rim_joists, lambda r: validate_rim_joist(r, polygon)),
        post_issues=_collect(components.posts, lambda p: validate_post(p, polygon)),
    )

    counts = (
        len(report.joist_issues), len(report.beam_issues),
        len(report.rim_joist_issues), len(report.post_issues),
    )
    total = sum(counts)
    report.valid = total == 0
    if report.valid:
        report.summary = "All structural components validated successfully"
    else:
        report.summary = (
            f"Found {total} component(s) with boundary issues: "
            f"{counts[0]} joists, {counts[1]} beams, {counts[2]} rim joists, {counts[3]} posts"
        )
        logger.warning(report.summary)
    return report

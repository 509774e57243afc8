"""Deck framing output models."""

from __future__ import annotations
from enum import Enum
from typing import Literal, Union
from pydantic import BaseModel, Field

from .geometry import Point


class MemberUsage(str, Enum):
    LEDGER = "Ledger"
    WALL_SIDE_BEAM = "Wall-Side Beam"
    MID_BEAM = "Mid Beam"
    OUTER_BEAM = "Outer Beam"
    DIAGONAL_BEAM = "Diagonal Beam"
    JOIST = "Joist"
    PICTURE_FRAME_JOIST = "Picture Frame Joist"
    END_JOIST = "End Joist"
    OUTER_RIM_JOIST = "Outer Rim Joist"
    WALL_RIM_JOIST = "Wall Rim Joist"
    DIAGONAL_RIM_JOIST = "Diagonal Rim Joist"
    DIAGONAL_LEDGER = "Diagonal Ledger"
    MID_SPAN_BLOCKING = "Mid-Span Blocking"
    LADDER_BLOCKING_SIDE_1 = "Ladder Blocking (Side 1)"
    LADDER_BLOCKING_SIDE_2 = "Ladder Blocking (Side 2)"
    POST = "Post"


BEAM_ORDER = {
    MemberUsage.WALL_SIDE_BEAM: 1,
    MemberUsage.MID_BEAM: 2,
    MemberUsage.OUTER_BEAM: 3,
    MemberUsage.DIAGONAL_BEAM: 4,
}


class StructuralMember(BaseModel):
    """A single piece of lumber laid out on the plan."""
    p1: Point
    p2: Point
    size: str
    length_feet: float
    usage: MemberUsage

    def refresh_length(self, pixels_per_foot: float) -> None:
        self.length_feet = self.p1.distance_to(self.p2) / pixels_per_foot


class Ledger(StructuralMember):
    ply: int = 1


class Beam(StructuralMember):
    """
    A beam. `p1`/`p2` are the material ends (including cantilever);
    the centerline is the support line between the extreme posts' axis.
    """
    centerline_p1: Point
    centerline_p2: Point
    position_coordinate_line_p1: Point
    position_coordinate_line_p2: Point
    ply: int
    is_flush: bool
    is_diagonal: bool = False


class Joist(StructuralMember):
    """`p1` is always the wall/ledger end, `p2` the outer end."""
    cut_angle: float = 90.0
    trimmed_at_diagonal: bool = False
    clipped: bool = False
    span_index: int = 0
    span_count: int = 1

    @property
    def is_innermost(self) -> bool:
        return self.span_index == 0

    @property
    def is_outermost(self) -> bool:
        return self.span_index == self.span_count - 1


class RimJoist(StructuralMember):
    cut_angle: float = 90.0
    trimmed_at_diagonal: bool = False
    clipped: bool = False
    full_edge_p1: Point | None = None
    full_edge_p2: Point | None = None


class Blocking(StructuralMember):
    """One piece between two adjacent joists."""


class Post(BaseModel):
    x: float
    y: float
    size: str
    height_feet: float
    usage: MemberUsage = MemberUsage.POST

    @property
    def point(self) -> Point:
        return Point(x=self.x, y=self.y)


class Footing(BaseModel):
    x: float
    y: float
    type: str
    diameter: float
    load: float
    tributary_area: float
    message: str | None = None


class BeamLayout(BaseModel):
    """A beam together with the posts and footings derived from it."""
    beam: Beam
    posts: list[Post] = []
    footings: list[Footing] = []
    joist_span_feet: float = 0.0


class NoMidBeam(BaseModel):
    kind: Literal["none"] = "none"
    number_of_mid_beams: int = 0
    sub_span_feet: float


class SingleMidBeam(BaseModel):
    kind: Literal["single"] = "single"
    number_of_mid_beams: int = 1
    sub_span_feet: float
    beam: Beam | None = None


class MultipleMidBeams(BaseModel):
    kind: Literal["multiple"] = "multiple"
    number_of_mid_beams: int
    sub_span_feet: float
    beams: list[Beam] = []


BeamPlan = Union[NoMidBeam, SingleMidBeam, MultipleMidBeams]


class ValidationIssue(BaseModel):
    index: int
    issues: list[str]


class ValidationReport(BaseModel):
    """Boundary check of every member against the deck polygon."""
    valid: bool = True
    joist_issues: list[ValidationIssue] = []
    beam_issues: list[ValidationIssue] = []
    rim_joist_issues: list[ValidationIssue] = []
    post_issues: list[ValidationIssue] = []
    summary: str = ""


class StructureComponents(BaseModel):
    """The complete generated framing plan (or an error)."""
    ledger: Ledger | None = None
    beams: list[Beam] = []
    joists: list[Joist] = []
    posts: list[Post] = []
    footings: list[Footing] = []
    rim_joists: list[RimJoist] = []
    mid_span_blocking: list[Blocking] = []
    picture_frame_blocking: list[Blocking] = []
    diagonal_ledgers: list[StructuralMember] = []
    error: str | None = None
    total_depth_feet: float = 0.0
    corner_count: int = 0
    beam_warning: str | None = None

    joist_size: str | None = None
    beam_size: str | None = None
    post_size: str | None = None
    requires_mid_beam: bool = False
    number_of_mid_beams: int = 0
    validation: ValidationReport | None = Field(default=None)

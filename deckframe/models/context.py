"""Structure context: accumulates state during one framing calculation."""

from __future__ import annotations
from pydantic import BaseModel, Field

from deckframe.advisory.tables import SpanTables, DEFAULT_SPAN_TABLES
from .geometry import Point
from .footprint import Edge, NormalizedShape, DeckDimensions
from .framing import (
    BeamLayout, BeamPlan, NoMidBeam, Ledger, MemberUsage, StructureComponents,
)
from .parameters import DeckInputs, FramingConstants, GenerationConfig


class StructureContext(BaseModel):
    """
    Holds all state during a single calculation pass.

    The analyzer fills in the footprint analysis, rules fill in sizing,
    supports and members. Nothing here outlives the call.
    """
    # Input
    shape: NormalizedShape
    ledger_indices: list[int]
    inputs: DeckInputs
    dimensions: DeckDimensions
    constants: FramingConstants = Field(default_factory=FramingConstants)
    tables: SpanTables = DEFAULT_SPAN_TABLES
    config: GenerationConfig = Field(default_factory=GenerationConfig)

    # Footprint analysis (populated by the analyzer)
    primary_edge: Edge | None = None
    is_wall_horizontal: bool = True
    extends_positive: bool = True
    wall_side_edge_coord: float = 0.0
    outer_edge_coord: float = 0.0
    placement_min: float = 0.0
    placement_max: float = 0.0
    winding: int = 0
    is_rectangular: bool = False
    diagonal_ledger_edges: list[Edge] = []
    diagonal_rim_edges: list[Edge] = []

    # Sizing
    joist_size: str | None = None
    beam_size: str | None = None
    post_size: str | None = None
    beam_ply: int = 2
    beam_plan: BeamPlan = Field(default_factory=lambda: NoMidBeam(sub_span_feet=0.0))
    force_single_span: bool = False

    # Supports
    ledger: Ledger | None = None
    beam_layouts: list[BeamLayout] = []
    joist_start_coord: float = 0.0
    interior_support_coords: list[float] = []
    outer_support_coord: float = 0.0
    joist_spacing_pixels: float = 0.0
    picture_frame_positions: list[float] = []

    # Output
    components: StructureComponents = Field(default_factory=StructureComponents)

    @property
    def polygon(self) -> list[Point]:
        return self.shape.points

    @property
    def outward_sign(self) -> float:
        """+1 when the deck grows towards increasing run coordinates."""
        return 1.0 if self.extends_positive else -1.0

    def axis_point(self, placement: float, run: float) -> Point:
        """Point from a position along the ledger and a coordinate along the joists."""
        if self.is_wall_horizontal:
            return Point(x=placement, y=run)
        return Point(x=run, y=placement)

    def run_coord(self, point: Point) -> float:
        return point.y if self.is_wall_horizontal else point.x

    def placement_coord(self, point: Point) -> float:
        return point.x if self.is_wall_horizontal else point.y

    def toward_outer(self, coord: float, distance: float) -> float:
        return coord + distance * self.outward_sign

    def layouts_for(self, *usages: MemberUsage) -> list[BeamLayout]:
        return [layout for layout in self.beam_layouts if layout.beam.usage in usages]

    def support_coords(self) -> list[float]:
        """Joist support line coordinates from the wall side outward."""
        return [self.joist_start_coord, *self.interior_support_coords, self.outer_support_coord]

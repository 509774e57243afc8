"""Footprint models: edges, normalized shapes and the deck bounding box."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel

from .geometry import Point


class EdgeKind(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    OTHER = "other"


class Edge(BaseModel):
    """One side of the footprint, from point `index` to the next point."""
    index: int
    start: Point
    end: Point
    kind: EdgeKind

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def midpoint(self) -> Point:
        return self.start.lerp(self.end, 0.5)

    @property
    def is_axis_aligned(self) -> bool:
        return self.kind in (EdgeKind.HORIZONTAL, EdgeKind.VERTICAL)


class NormalizedShape(BaseModel):
    """
    A footprint with its closing point resolved.

    `points` never repeats the first point; `edges` has exactly
    `num_edges` entries, the last one wrapping back to `points[0]`.
    """
    points: list[Point] = []
    edges: list[Edge] = []
    num_edges: int = 0
    is_closed: bool = False

    def edge(self, index: int) -> Edge:
        return self.edges[index % self.num_edges]

    def previous_edge(self, index: int) -> Edge:
        return self.edges[(index - 1) % self.num_edges]

    def next_edge(self, index: int) -> Edge:
        return self.edges[(index + 1) % self.num_edges]


class DeckDimensions(BaseModel):
    """Axis-aligned bounding box of the footprint, in pixels."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    width_feet: float
    height_feet: float | None = None

    @classmethod
    def from_points(cls, points: list[Point], pixels_per_foot: float) -> DeckDimensions:
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)
        return cls(
            min_x=min_x, max_x=max_x,
            min_y=min_y, max_y=max_y,
            width_feet=(max_x - min_x) / pixels_per_foot,
            height_feet=(max_y - min_y) / pixels_per_foot,
        )

    @property
    def center(self) -> Point:
        return Point(x=(self.min_x + self.max_x) / 2, y=(self.min_y + self.max_y) / 2)

    def is_valid(self) -> bool:
        return self.max_x > self.min_x and self.max_y > self.min_y

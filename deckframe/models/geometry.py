"""Geometric primitives used throughout the generator."""

from __future__ import annotations
import math
from pydantic import BaseModel

from deckframe.config import EPSILON


class Point(BaseModel):
    """Point in plan-view pixel space."""
    x: float
    y: float

    def distance_to(self, other: Point) -> float:
        return math.sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def lerp(self, other: Point, t: float) -> Point:
        return Point(
            x=self.x + (other.x - self.x) * t,
            y=self.y + (other.y - self.y) * t,
        )

    def is_close(self, other: Point, tolerance: float = EPSILON) -> bool:
        return abs(self.x - other.x) < tolerance and abs(self.y - other.y) < tolerance

    def offset(self, vector: Vector2D, distance: float = 1.0) -> Point:
        return Point(x=self.x + vector.x * distance, y=self.y + vector.y * distance)


class Vector2D(BaseModel):
    """2D vector for direction calculations on the plan."""
    x: float
    y: float

    def perpendicular(self) -> Vector2D:
        """90-degree rotation (left normal in y-up coordinates)."""
        return Vector2D(x=-self.y, y=self.x)

    def dot(self, other: Vector2D) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2D) -> float:
        return self.x * other.y - self.y * other.x

    def __neg__(self) -> Vector2D:
        return Vector2D(x=-self.x, y=-self.y)


def direction_from_points(start: Point, end: Point) -> Vector2D:
    """Get direction vector from start to end."""
    return Vector2D(x=end.x - start.x, y=end.y - start.y)

"""Plan-view geometry helpers.

Every helper tolerates degenerate input (zero-length segments, parallel
lines, polygons with fewer than three points) and returns None or an
empty result instead of raising.
"""

from __future__ import annotations
import math

from deckframe.config import EPSILON, ANGLE_TOLERANCE_DEGREES, BOUNDARY_TOLERANCE_PIXELS
from deckframe.models.geometry import Point, Vector2D
from deckframe.models.footprint import Edge, EdgeKind, NormalizedShape


PARALLEL_TOLERANCE = 1e-10
SEGMENT_PARAM_TOLERANCE = 0.001


def distance(p1: Point, p2: Point) -> float:
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def classify_edge(p1: Point, p2: Point, tolerance_degrees: float = ANGLE_TOLERANCE_DEGREES) -> EdgeKind:
    dx = abs(p2.x - p1.x)
    dy = abs(p2.y - p1.y)
    if dx < EPSILON and dy < EPSILON:
        return EdgeKind.OTHER

    angle = math.degrees(math.atan2(dy, dx))
    if angle <= tolerance_degrees:
        return EdgeKind.HORIZONTAL
    if angle >= 90 - tolerance_degrees:
        return EdgeKind.VERTICAL
    if abs(angle - 45) <= tolerance_degrees:
        return EdgeKind.DIAGONAL
    return EdgeKind.OTHER


def unit_vector(p1: Point, p2: Point) -> Vector2D | None:
    length = distance(p1, p2)
    if length < EPSILON:
        return None
    return Vector2D(x=(p2.x - p1.x) / length, y=(p2.y - p1.y) / length)


def perpendicular(vector: Vector2D) -> Vector2D:
    return vector.perpendicular()


def line_intersection(p1: Point, p2: Point, p3: Point, p4: Point) -> Point | None:
    """Intersection of the infinite lines p1-p2 and p3-p4."""
    denom = (p4.y - p3.y) * (p2.x - p1.x) - (p4.x - p3.x) * (p2.y - p1.y)
    if abs(denom) < PARALLEL_TOLERANCE:
        return None
    ua = ((p4.x - p3.x) * (p1.y - p3.y) - (p4.y - p3.y) * (p1.x - p3.x)) / denom
    return Point(x=p1.x + ua * (p2.x - p1.x), y=p1.y + ua * (p2.y - p1.y))


def segment_intersection(
    p1: Point, p2: Point, p3: Point, p4: Point,
    tolerance: float = SEGMENT_PARAM_TOLERANCE,
) -> tuple[Point, float] | None:
    """
    Intersection of segments p1-p2 and p3-p4.

    Returns the point and its parameter `t` along p1-p2, or None when the
    segments are parallel or miss each other.
    """
    denom = (p4.y - p3.y) * (p2.x - p1.x) - (p4.x - p3.x) * (p2.y - p1.y)
    if abs(denom) < PARALLEL_TOLERANCE:
        return None

    ua = ((p4.x - p3.x) * (p1.y - p3.y) - (p4.y - p3.y) * (p1.x - p3.x)) / denom
    ub = ((p2.x - p1.x) * (p1.y - p3.y) - (p2.y - p1.y) * (p1.x - p3.x)) / denom
    if -tolerance <= ua <= 1 + tolerance and -tolerance <= ub <= 1 + tolerance:
        point = Point(x=p1.x + ua * (p2.x - p1.x), y=p1.y + ua * (p2.y - p1.y))
        return point, ua
    return None


def point_in_polygon(point: Point, polygon: list[Point]) -> bool:
    """Ray-casting test. Points exactly on an edge may go either way."""
    if len(polygon) < 3:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def point_to_segment_distance(point: Point, a: Point, b: Point) -> float:
    dx = b.x - a.x
    dy = b.y - a.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return distance(point, a)

    t = ((point.x - a.x) * dx + (point.y - a.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (a.x + t * dx), point.y - (a.y + t * dy))


def point_on_polygon_edge(
    point: Point, polygon: list[Point], tolerance: float = BOUNDARY_TOLERANCE_PIXELS,
) -> bool:
    if len(polygon) < 2:
        return False
    n = len(polygon)
    return any(
        point_to_segment_distance(point, polygon[i], polygon[(i + 1) % n]) <= tolerance
        for i in range(n)
    )


def point_inside_or_on_boundary(
    point: Point, polygon: list[Point], tolerance: float = BOUNDARY_TOLERANCE_PIXELS,
) -> bool:
    return point_in_polygon(point, polygon) or point_on_polygon_edge(point, polygon, tolerance)


def point_on_segment(point: Point, a: Point, b: Point, tolerance: float = EPSILON) -> bool:
    return point_to_segment_distance(point, a, b) <= tolerance


def polygon_signed_area(points: list[Point]) -> float:
    """Shoelace area; positive when the vertices wind counter-clockwise in x/y."""
    if len(points) < 3:
        return 0.0
    total = 0.0
    n = len(points)
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        total += a.x * b.y - b.x * a.y
    return total / 2


def winding_sign(points: list[Point]) -> int:
    area = polygon_signed_area(points)
    if abs(area) < EPSILON:
        return 0
    return 1 if area > 0 else -1


def inward_normal(edge_start: Point, edge_end: Point, winding: int) -> Vector2D | None:
    """Unit normal of an edge pointing into a polygon of the given winding."""
    direction = unit_vector(edge_start, edge_end)
    if direction is None or winding == 0:
        return None
    left = direction.perpendicular()
    return left if winding > 0 else -left


def segment_polygon_crossings(p1: Point, p2: Point, polygon: list[Point]) -> list[tuple[Point, float]]:
    """All crossings of p1-p2 with the polygon's edges, ordered along p1-p2."""
    if len(polygon) < 3 or distance(p1, p2) < EPSILON:
        return []

    crossings: list[tuple[Point, float]] = []
    n = len(polygon)
    for i in range(n):
        hit = segment_intersection(p1, p2, polygon[i], polygon[(i + 1) % n])
        if hit is not None:
            crossings.append(hit)
    crossings.sort(key=lambda c: c[1])
    return crossings


def line_segments_in_polygon(
    p1: Point, p2: Point, polygon: list[Point], tolerance: float = EPSILON * 10,
) -> list[tuple[Point, Point]]:
    """
    Split p1-p2 into the pieces that lie inside the polygon or on its boundary.

    Pieces are returned in order from p1 towards p2; pieces shorter than
    EPSILON are dropped.
    """
    length = distance(p1, p2)
    if len(polygon) < 3 or length < EPSILON:
        return []

    params = {0.0, 1.0}
    for _, t in segment_polygon_crossings(p1, p2, polygon):
        params.add(min(1.0, max(0.0, t)))
    # Vertices lying on the segment split it too (covers collinear overlaps)
    for vertex in polygon:
        if point_on_segment(vertex, p1, p2, tolerance):
            t = ((vertex.x - p1.x) * (p2.x - p1.x) + (vertex.y - p1.y) * (p2.y - p1.y)) / (length * length)
            params.add(min(1.0, max(0.0, t)))

    ordered = sorted(params)
    pieces: list[tuple[float, float]] = []
    for t0, t1 in zip(ordered, ordered[1:]):
        if (t1 - t0) * length < EPSILON:
            continue
        mid = p1.lerp(p2, (t0 + t1) / 2)
        if not point_inside_or_on_boundary(mid, polygon, tolerance):
            continue
        if pieces and abs(pieces[-1][1] - t0) * length < EPSILON:
            pieces[-1] = (pieces[-1][0], t1)
        else:
            pieces.append((t0, t1))

    return [(p1.lerp(p2, t0), p1.lerp(p2, t1)) for t0, t1 in pieces]


def clip_segment_to_polygon(
    p1: Point, p2: Point, polygon: list[Point], tolerance: float = BOUNDARY_TOLERANCE_PIXELS,
) -> tuple[Point, Point, bool] | None:
    """
    Pull the endpoints of p1-p2 back onto the polygon boundary.

    Returns (p1, p2, clipped) or None when the segment lies entirely outside.
    Only an endpoint that is outside is moved.
    """
    if len(polygon) < 3:
        return None

    p1_inside = point_inside_or_on_boundary(p1, polygon, tolerance)
    p2_inside = point_inside_or_on_boundary(p2, polygon, tolerance)
    if p1_inside and p2_inside:
        return p1, p2, False

    crossings = segment_polygon_crossings(p1, p2, polygon)
    if not crossings:
        if not p1_inside and not p2_inside:
            return None
        return p1, p2, False

    # A kept endpoint lying on the boundary is itself a crossing; skip it
    if p1_inside:
        ahead = [c for c, _ in crossings if distance(c, p1) > EPSILON * 10]
        return p1, (ahead[0] if ahead else crossings[0][0]), True
    if p2_inside:
        behind = [c for c, _ in crossings if distance(c, p2) > EPSILON * 10]
        return (behind[-1] if behind else crossings[-1][0]), p2, True
    if len(crossings) >= 2:
        return crossings[0][0], crossings[-1][0], True
    return None


def find_self_intersection(
    points: list[Point], tolerance: float = SEGMENT_PARAM_TOLERANCE,
) -> tuple[int, int] | None:
    """
    First pair of non-adjacent edges that cross, as edge indices.

    Edges touching only at their endpoints do not count. Returns None for a
    simple polygon.
    """
    n = len(points)
    if n < 4:
        return None
    for i in range(n):
        a1, a2 = points[i], points[(i + 1) % n]
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue
            b1, b2 = points[j], points[(j + 1) % n]
            denom = (b2.y - b1.y) * (a2.x - a1.x) - (b2.x - b1.x) * (a2.y - a1.y)
            if abs(denom) < PARALLEL_TOLERANCE:
                continue
            ua = ((b2.x - b1.x) * (a1.y - b1.y) - (b2.y - b1.y) * (a1.x - b1.x)) / denom
            ub = ((a2.x - a1.x) * (a1.y - b1.y) - (a2.y - a1.y) * (a1.x - b1.x)) / denom
            if tolerance < ua < 1 - tolerance and tolerance < ub < 1 - tolerance:
                return i, j
    return None


def bounding_box(points: list[Point]) -> tuple[float, float, float, float] | None:
    """(min_x, max_x, min_y, max_y) or None for an empty list."""
    if not points:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return min(xs), max(xs), min(ys), max(ys)


def normalize_shape(points: list[Point], tolerance: float = EPSILON) -> NormalizedShape:
    """
    Resolve the closing point once and build the edge list.

    A shape given in closed form (last point repeats the first) and the
    same shape in open form produce identical edges.
    """
    if len(points) < 2:
        return NormalizedShape(points=list(points))

    is_closed = len(points) > 2 and points[-1].is_close(points[0], tolerance)
    unique = list(points[:-1]) if is_closed else list(points)
    n = len(unique)
    edges = [
        Edge(
            index=i,
            start=unique[i],
            end=unique[(i + 1) % n],
            kind=classify_edge(unique[i], unique[(i + 1) % n]),
        )
        for i in range(n)
    ]
    return NormalizedShape(points=unique, edges=edges, num_edges=n, is_closed=is_closed)

"""Perimeter beam outline for non-rectangular footprints.

Instead of one axis-aligned beam per edge, the edges that cross under the
joists are offset inward and stitched into one mitred polyline. Each
segment of that polyline becomes a beam.

Stitching extends a segment until it meets its neighbour; when the
neighbouring edge carries no beam the segment runs to that edge's line.
For footprints more irregular than a few notches and cut corners the
extension can meet the wrong deck edge.
"""

from __future__ import annotations
from pydantic import BaseModel

from deckframe.config import EPSILON
from deckframe.models import Point, Edge, EdgeKind, NormalizedShape
from deckframe.core.geometry import inward_normal, line_intersection, distance


class OutlineSegment(BaseModel):
    edge_index: int
    p1: Point
    p2: Point
    is_diagonal: bool = False


def needs_outline_beam(edge: Edge, ledger_indices: list[int], is_wall_horizontal: bool) -> bool:
    """Diagonal edges and edges parallel to the ledger carry a beam."""
    if edge.index in ledger_indices:
        return False
    if edge.kind == EdgeKind.DIAGONAL:
        return True
    parallel_to_ledger = EdgeKind.HORIZONTAL if is_wall_horizontal else EdgeKind.VERTICAL
    return edge.kind == parallel_to_ledger


def offset_edge(edge: Edge, winding: int, offset: float) -> tuple[Point, Point]:
    if offset == 0:
        return edge.start, edge.end
    normal = inward_normal(edge.start, edge.end, winding)
    if normal is None:
        return edge.start, edge.end
    return edge.start.offset(normal, offset), edge.end.offset(normal, offset)


def generate_beam_outline(
    shape: NormalizedShape,
    ledger_indices: list[int],
    is_wall_horizontal: bool,
    offset: float,
    winding: int,
) -> list[OutlineSegment]:
    if shape.num_edges < 3 or winding == 0:
        return []

    kept = {
        e.index for e in shape.edges
        if needs_outline_beam(e, ledger_indices, is_wall_horizontal)
    }
    offsets = {i: offset_edge(shape.edge(i), winding, offset) for i in kept}

    segments: list[OutlineSegment] = []
    for index in sorted(kept):
        edge = shape.edge(index)
        a, b = offsets[index]
        start = _stitch(a, b, shape.previous_edge(index), kept, offsets) or a
        end = _stitch(a, b, shape.next_edge(index), kept, offsets) or b
        if distance(start, end) <= EPSILON:
            continue
        segments.append(OutlineSegment(
            edge_index=index,
            p1=start,
            p2=end,
            is_diagonal=edge.kind == EdgeKind.DIAGONAL,
        ))
    return segments


def _stitch(
    a: Point, b: Point,
    neighbour: Edge,
    kept: set[int],
    offsets: dict[int, tuple[Point, Point]],
) -> Point | None:
    """Corner between an offset segment and the neighbouring edge."""
    if neighbour.index in kept:
        n1, n2 = offsets[neighbour.index]
    else:
        n1, n2 = neighbour.start, neighbour.end
    return line_intersection(a, b, n1, n2)

"""Tests for the stitched perimeter beam outline."""

import math

from deckframe.core.geometry import normalize_shape, winding_sign
from deckframe.models import EdgeKind
from deckframe.rules.beams.outline import generate_beam_outline, needs_outline_beam

from conftest import PPF, ft, footprint, rectangle


def outline(points, ledger_indices, offset=0.0):
    return generate_beam_outline(
        normalize_shape(points), ledger_indices, True, offset, winding_sign(points),
    )


class TestOutlineEdges:
    def test_only_outer_and_diagonal_edges_carry_beams(self, clipped_corner) -> None:
        shape = normalize_shape(clipped_corner)
        kept = [e.index for e in shape.edges if needs_outline_beam(e, [0], True)]
        # Edge 2 is the diagonal, edge 3 the outer edge; side edges are skipped
        assert kept == [2, 3]

    def test_ledger_edges_are_excluded(self, bay_window) -> None:
        segments = outline(bay_window, [0, 1])
        assert [s.edge_index for s in segments] == [3]
        assert not any(s.is_diagonal for s in segments)


class TestStitching:
    def test_corners_meet(self, clipped_corner) -> None:
        diagonal, outer = outline(clipped_corner, [0])
        assert diagonal.is_diagonal and not outer.is_diagonal
        # Unbeamed side edge: the diagonal runs to that edge's line
        assert diagonal.p1.is_close(ft(16, 8))
        # Shared corner with the outer beam
        assert diagonal.p2.is_close(outer.p1)
        assert outer.p1.is_close(ft(12, 12))
        assert outer.p2.is_close(ft(0, 12))

    def test_offset_moves_segments_inward(self, clipped_corner) -> None:
        offset = 2 * PPF
        diagonal, outer = outline(clipped_corner, [0], offset)
        assert math.isclose(outer.p1.y, ft(0, 10).y, abs_tol=1e-6)
        assert math.isclose(outer.p2.x, 0, abs_tol=1e-6)
        assert math.isclose(diagonal.p1.x, ft(16, 0).x, abs_tol=1e-6)
        assert diagonal.p2.is_close(outer.p1, 1e-6)
        assert normalize_shape([diagonal.p1, diagonal.p2]).edges[0].kind == EdgeKind.DIAGONAL

    def test_open_and_closed_forms_match(self, clipped_corner) -> None:
        closed = clipped_corner + [clipped_corner[0]]
        a = outline(clipped_corner, [0], 48)
        b = outline(closed, [0], 48)
        assert [s.model_dump() for s in a] == [s.model_dump() for s in b]


class TestDegenerateOutline:
    def test_too_few_edges(self) -> None:
        assert outline(footprint((0, 0), (10, 0)), [0]) == []

    def test_rectangle_outer_edge_only(self) -> None:
        segments = outline(rectangle(16, 12), [0], 24)
        assert len(segments) == 1
        assert math.isclose(segments[0].p1.y, ft(0, 11).y, abs_tol=1e-6)
        assert math.isclose(abs(segments[0].p2.x - segments[0].p1.x), 16 * PPF, abs_tol=1e-6)

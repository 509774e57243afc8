"""End-to-end framing scenarios and structural invariants."""

import math

import pytest

from deckframe.advisory import DEFAULT_SPAN_TABLES, JoistSpanRule
from deckframe.core.geometry import distance, point_to_segment_distance
from deckframe.models import (
    DeckDimensions, DeckInputs, GenerationConfig, MemberUsage, AttachmentType,
    BeamType, FootingType,
)

from conftest import PPF, ft, footprint, rectangle, run_structure

EPS = 0.01


def feet(pixels: float) -> float:
    return pixels / PPF


class TestRectangleWithLedger:
    """16' x 12' deck on a house rim, 16" joists, 36" high."""

    @pytest.fixture
    def result(self):
        return run_structure(rectangle(16, 12), 0, DeckInputs(joist_spacing=16, deck_height=36))

    def test_no_error(self, result) -> None:
        assert result.error is None
        assert not result.requires_mid_beam
        assert result.joist_size == "2x10"
        assert math.isclose(result.total_depth_feet, 12)

    def test_ledger(self, result) -> None:
        assert result.ledger is not None
        assert math.isclose(result.ledger.length_feet, 16)
        assert result.ledger.size == result.joist_size

    def test_single_outer_beam(self, result) -> None:
        assert len(result.beams) == 1
        beam = result.beams[0]
        assert beam.usage == MemberUsage.OUTER_BEAM
        assert 16 - EPS <= beam.length_feet <= 18 + EPS
        # Drop beam sits one foot in from the outer edge
        assert math.isclose(beam.p1.y, ft(0, 11).y)

    def test_joists_span_full_depth(self, result) -> None:
        assert len(result.joists) == 11
        positions = [j.p1.x for j in result.joists]
        assert positions == sorted(positions)
        for a, b in zip(positions, positions[1:]):
            assert math.isclose(b - a, ft(16 / 12, 0).x)
        for joist in result.joists:
            assert math.isclose(joist.length_feet, 12)
            assert math.isclose(joist.p1.y, 0)

    def test_rim_joists(self, result) -> None:
        ends = [r for r in result.rim_joists if r.usage == MemberUsage.END_JOIST]
        outer = [r for r in result.rim_joists if r.usage == MemberUsage.OUTER_RIM_JOIST]
        walls = [r for r in result.rim_joists if r.usage == MemberUsage.WALL_RIM_JOIST]
        assert len(ends) == 2
        assert all(math.isclose(r.length_feet, 12) for r in ends)
        assert len(outer) == 1 and math.isclose(outer[0].length_feet, 16)
        assert walls == []

    def test_blocking_row_at_mid_span(self, result) -> None:
        # 12' exceeds the 8' maximum unblocked span
        rows = {round(b.p1.y, 6) for b in result.mid_span_blocking}
        assert rows == {ft(0, 6).y}

    def test_posts_and_footings(self, result) -> None:
        assert len(result.posts) == 3
        assert len(result.footings) == len(result.posts)
        assert all(p.size == "4x4" for p in result.posts)
        # Corner posts carry half the tributary area of the middle post
        corner, middle = result.footings[0], result.footings[1]
        assert math.isclose(corner.tributary_area * 2, middle.tributary_area)

    def test_validation_is_not_attached_by_engine(self, result) -> None:
        assert result.validation is None


class TestDeepDeckWithMidBeam:
    """22' deep deck where no joist spans more than 12'."""

    @pytest.fixture
    def result(self):
        tables = DEFAULT_SPAN_TABLES.model_copy(update={"max_joist_spans": [
            JoistSpanRule(size=size, spacing=16, max_span_ft=12)
            for size in ("2x6", "2x8", "2x10", "2x12")
        ]})
        return run_structure(rectangle(16, 22), 0, DeckInputs(joist_spacing=16), tables=tables)

    def test_mid_beam_inserted(self, result) -> None:
        assert result.error is None
        assert result.requires_mid_beam
        assert result.number_of_mid_beams == 1
        mids = [b for b in result.beams if b.usage == MemberUsage.MID_BEAM]
        assert len(mids) == 1
        assert math.isclose(mids[0].centerline_p1.y, ft(0, 11).y)

    def test_joists_split_at_mid_beam(self, result) -> None:
        assert len(result.joists) == 22
        for joist in result.joists:
            assert joist.span_count == 2
            assert math.isclose(joist.length_feet, 11)

    def test_beams_sorted_mid_before_outer(self, result) -> None:
        assert [b.usage for b in result.beams] == [MemberUsage.MID_BEAM, MemberUsage.OUTER_BEAM]

    def test_end_joists_follow_segmentation(self, result) -> None:
        ends = [r for r in result.rim_joists if r.usage == MemberUsage.END_JOIST]
        assert len(ends) == 4
        assert all(r.full_edge_p1 is not None for r in ends)


class TestForcedSingleSpan:
    """2x8 joists between 18' and 20' of depth stay continuous over the mid-beam."""

    def test_continuous_joists(self) -> None:
        result = run_structure(rectangle(16, 19), 0, DeckInputs(joist_spacing=16))
        assert result.error is None
        assert result.joist_size == "2x8"
        assert result.requires_mid_beam
        assert any(b.usage == MemberUsage.MID_BEAM for b in result.beams)
        assert all(j.span_count == 1 for j in result.joists)
        assert all(math.isclose(j.length_feet, 19) for j in result.joists)


class TestBayWindow:
    """Pentagon with the 45 degree bay wall selected as a second ledger."""

    def test_diagonal_ledger(self, bay_window) -> None:
        result = run_structure(bay_window, [0, 1])
        assert result.error is None
        assert len(result.diagonal_ledgers) == 1
        assert result.diagonal_ledgers[0].usage == MemberUsage.DIAGONAL_LEDGER
        assert not any(b.is_diagonal for b in result.beams)

    def test_joists_extend_to_the_bay_wall(self, bay_window) -> None:
        result = run_structure(bay_window, [0, 1])
        baseline = run_structure(
            bay_window, [0, 1],
            config=GenerationConfig(disabled_rules=["joists.diagonal_ledger"]),
        )
        start = {round(j.p1.x, 6): j.p1.y for j in baseline.joists if j.is_innermost}

        under_bay = [
            j for j in result.joists
            if j.is_innermost and ft(12, 0).x + EPS < j.p1.x < ft(16, 0).x - EPS
        ]
        assert under_bay
        for joist in under_bay:
            # The house is towards -y
            assert joist.p1.y < start[round(joist.p1.x, 6)] - EPS
            assert joist.trimmed_at_diagonal
            assert joist.cut_angle == 45

    def test_diagonal_primary_ledger_is_rejected(self, bay_window) -> None:
        result = run_structure(bay_window, [1, 0])
        assert result.error == "Primary ledger edge must be horizontal or vertical."


class TestDiagonalRim:
    def test_joists_cut_at_corner(self, clipped_corner) -> None:
        result = run_structure(clipped_corner, 0)
        assert result.error is None
        diagonal_rims = [r for r in result.rim_joists if r.usage == MemberUsage.DIAGONAL_RIM_JOIST]
        assert len(diagonal_rims) == 1
        cut = [j for j in result.joists if j.trimmed_at_diagonal]
        assert cut
        for joist in cut:
            # Diagonal runs through (16,8) and (12,12): x + y = 24 ft
            assert math.isclose(feet(joist.p2.x) + feet(joist.p2.y), 24, abs_tol=1e-6)

    def test_side_and_outer_rims_trimmed(self, clipped_corner) -> None:
        result = run_structure(clipped_corner, 0)
        outer = [r for r in result.rim_joists if r.usage == MemberUsage.OUTER_RIM_JOIST]
        assert len(outer) == 1
        assert math.isclose(outer[0].length_feet, 12)
        right_end = [
            r for r in result.rim_joists
            if r.usage == MemberUsage.END_JOIST and math.isclose(r.p1.x, ft(16, 0).x)
        ]
        assert right_end
        assert max(max(r.p1.y, r.p2.y) for r in right_end) <= ft(0, 8).y + EPS

    def test_diagonal_beam(self, clipped_corner) -> None:
        result = run_structure(clipped_corner, 0)
        assert [b.usage for b in result.beams] == [MemberUsage.OUTER_BEAM, MemberUsage.DIAGONAL_BEAM]


def unframed_edges(result, points, ledger_indices) -> dict[int, list]:
    """Sample points on non-ledger edges that no rim joist lies over, by edge index."""
    missing: dict[int, list] = {}
    n = len(points)
    for i in range(n):
        if i in ledger_indices:
            continue
        a, b = points[i], points[(i + 1) % n]
        for k in range(1, 20):
            sample = a.lerp(b, k / 20)
            if not any(point_to_segment_distance(sample, r.p1, r.p2) < 0.5 for r in result.rim_joists):
                missing.setdefault(i, []).append((feet(sample.x), feet(sample.y)))
    return missing


class TestNotchedFootprint:
    def test_every_edge_is_framed(self, notched) -> None:
        result = run_structure(notched, 0)
        assert result.error is None
        assert unframed_edges(result, notched, [0]) == {}

    def test_notch_rims(self, notched) -> None:
        result = run_structure(notched, 0)
        notch_y = ft(0, 8).y
        notch_x = ft(12, 0).x
        across = [r for r in result.rim_joists if math.isclose(r.p1.y, notch_y) and math.isclose(r.p2.y, notch_y)]
        side = [r for r in result.rim_joists if math.isclose(r.p1.x, notch_x) and math.isclose(r.p2.x, notch_x)]
        assert [r.usage for r in across] == [MemberUsage.OUTER_RIM_JOIST]
        assert math.isclose(across[0].length_feet, 8)
        assert side and all(r.usage == MemberUsage.END_JOIST for r in side)
        assert math.isclose(sum(r.length_feet for r in side), 6)

    def test_joists_under_notch_stop_at_notch_rim(self, notched) -> None:
        result = run_structure(notched, 0)
        short = [j for j in result.joists if j.p1.x > ft(12, 0).x + EPS]
        assert short
        assert all(math.isclose(j.p2.y, ft(0, 8).y) for j in short)

    def test_bay_window_side_runs_to_the_bay(self, bay_window) -> None:
        result = run_structure(bay_window, [0, 1])
        assert unframed_edges(result, bay_window, [0, 1]) == {}

    def test_rim_clip_alone_leaves_notch_open(self, notched) -> None:
        result = run_structure(
            notched, 0, config=GenerationConfig(disabled_rules=["rim_joists.perimeter"]),
        )
        assert set(unframed_edges(result, notched, [0])) == {2, 3}


class TestInvariants:
    def test_closed_shape_idempotence(self, clipped_corner) -> None:
        closed = clipped_corner + [clipped_corner[0]]
        a = run_structure(clipped_corner, 0)
        b = run_structure(closed, 0)
        assert a.model_dump() == b.model_dump()

    def test_calls_share_no_state(self, clipped_corner) -> None:
        from deckframe.core import generator as generator_module

        first = run_structure(clipped_corner, 0)
        run_structure(clipped_corner, 0, config=GenerationConfig(disabled_rules=["joists.diagonal_rim"]))
        again = run_structure(clipped_corner, 0)
        assert first.model_dump() == again.model_dump()
        assert not any(
            isinstance(value, generator_module.StructureGenerator)
            for value in vars(generator_module).values()
        )

    @pytest.mark.parametrize("points,ledger", [
        (rectangle(16, 12), 0),
        (rectangle(16, 22), 0),
        (footprint((0, 0), (0, 14), (-10, 14), (-10, 0)), 0),
        (footprint((0, 0), (16, 0), (16, 8), (12, 12), (0, 12)), 0),
    ])
    def test_joists_perpendicular_to_ledger(self, points, ledger) -> None:
        result = run_structure(points, ledger)
        assert result.error is None
        wall = (points[ledger], points[(ledger + 1) % len(points)])
        wx, wy = wall[1].x - wall[0].x, wall[1].y - wall[0].y
        for joist in result.joists:
            jx, jy = joist.p2.x - joist.p1.x, joist.p2.y - joist.p1.y
            assert abs(wx * jx + wy * jy) / math.hypot(wx, wy) < EPS

    def test_ledger_only_moves_wall_end(self, bay_window) -> None:
        with_rule = run_structure(bay_window, [0, 1])
        without = run_structure(
            bay_window, [0, 1],
            config=GenerationConfig(disabled_rules=["joists.diagonal_ledger"]),
        )
        assert [j.p2 for j in with_rule.joists] == [j.p2 for j in without.joists]

    def test_rim_only_moves_outer_end(self, clipped_corner) -> None:
        with_rule = run_structure(clipped_corner, 0)
        without = run_structure(
            clipped_corner, 0,
            config=GenerationConfig(disabled_rules=["joists.diagonal_rim"]),
        )
        assert [j.p1 for j in with_rule.joists] == [j.p1 for j in without.joists]

    @pytest.mark.parametrize("width,depth", [(16, 12), (30, 12), (9, 22), (41, 40)])
    def test_post_spacing_bound(self, generator, width, depth) -> None:
        points = rectangle(width, depth)
        context = generator.build_context(
            points, 0, DeckInputs(attachment_type=AttachmentType.FLOATING),
            DeckDimensions.from_points(points, PPF),
        )
        components = generator.run(context)
        assert components.error is None
        for layout in context.beam_layouts:
            posts = [p.point for p in layout.posts]
            for a, b in zip(posts, posts[1:]):
                assert feet(distance(a, b)) <= context.constants.max_post_spacing_feet + EPS


class TestAttachmentTypes:
    def test_floating_deck_has_wall_side_beam_and_wall_rim(self) -> None:
        result = run_structure(rectangle(16, 12), 0, DeckInputs(attachment_type=AttachmentType.FLOATING))
        assert result.error is None
        assert result.ledger is None
        assert result.beams[0].usage == MemberUsage.WALL_SIDE_BEAM
        assert any(r.usage == MemberUsage.WALL_RIM_JOIST for r in result.rim_joists)

    def test_flush_beam_shortens_joists(self) -> None:
        result = run_structure(rectangle(16, 12), 0, DeckInputs(beam_type=BeamType.FLUSH))
        thickness = 1.5 / 12
        assert all(math.isclose(j.length_feet, 12 - thickness) for j in result.joists)
        assert result.beams[0].is_flush

    def test_helical_footings_have_no_diameter(self) -> None:
        result = run_structure(rectangle(16, 12), 0, DeckInputs(footing_type=FootingType.HELICAL))
        assert result.footings
        assert all(f.diameter == 0 and f.load > 0 for f in result.footings)

    def test_tall_deck_uses_6x6_posts_and_3_ply(self) -> None:
        result = run_structure(rectangle(16, 12), 0, DeckInputs(deck_height=72))
        assert result.post_size == "6x6"
        assert all(b.ply == 3 for b in result.beams)


class TestFatalErrors:
    def test_degenerate_shape(self) -> None:
        points = footprint((0, 0), (10, 0), (0, 0))
        result = run_structure(points, 0)
        assert result.error is not None
        assert result.joists == [] and result.beams == []

    def test_missing_ledger(self) -> None:
        assert run_structure(rectangle(16, 12), []).error == "No ledger edge selected."

    def test_ledger_out_of_range(self) -> None:
        assert "out of range" in run_structure(rectangle(16, 12), 7).error

    def test_unsizable_joists(self) -> None:
        result = run_structure(rectangle(16, 12), 0, DeckInputs(joist_spacing=24))
        assert result.error is not None
        assert result.joists == []

    def test_off_angle_edge(self) -> None:
        # 60 degree edge from (16, 6) to (12, 12.93)
        points = footprint((0, 0), (16, 0), (16, 6), (12, 12.93), (0, 12.93))
        result = run_structure(points, 0)
        assert result.error == "Edge 3 must be horizontal, vertical or at 45 degrees."
        assert result.joists == [] and result.rim_joists == []

    def test_self_intersecting_shape(self) -> None:
        points = footprint((0, 0), (12, 0), (12, 8), (4, 8), (4, -4), (0, -4))
        result = run_structure(points, 0)
        assert result.error == "Shape has self-intersecting lines. Edge 1 intersects with edge 4."
        assert result.joists == []

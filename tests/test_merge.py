"""Tests for colinear beam merging."""

import math

import pytest

from deckframe.models import FramingConstants, FootingType, MemberUsage
from deckframe.rules.beams.layout import BeamSpec, layout_posts, place_beam
from deckframe.rules.merge import are_collinear, merged_axis, should_merge

from conftest import ft, footprint, run_structure


@pytest.fixture
def spec():
    return BeamSpec(
        size="2x10", ply=2, post_size="4x4", height_feet=3,
        footing_type=FootingType.GH_LEVELLERS, usage=MemberUsage.OUTER_BEAM,
        is_flush=False, joist_span_feet=10,
    )


@pytest.fixture
def constants():
    return FramingConstants()


class TestMergeCriteria:
    def test_touching_colinear_beams_merge(self, spec, constants) -> None:
        a = place_beam(ft(0, 10), ft(8, 10), spec, constants).beam
        b = place_beam(ft(8, 10), ft(20, 10), spec, constants).beam
        assert are_collinear(a, b)
        assert should_merge(a, b, constants.epsilon)

    def test_gap_prevents_merge(self, spec, constants) -> None:
        a = place_beam(ft(0, 10), ft(8, 10), spec, constants).beam
        b = place_beam(ft(10, 10), ft(20, 10), spec, constants).beam
        assert not should_merge(a, b, constants.epsilon)

    def test_parallel_offset_beams_do_not_merge(self, spec, constants) -> None:
        a = place_beam(ft(0, 10), ft(8, 10), spec, constants).beam
        b = place_beam(ft(8, 11), ft(20, 11), spec, constants).beam
        assert not are_collinear(a, b)
        assert not should_merge(a, b, constants.epsilon)

    def test_different_size_does_not_merge(self, spec, constants) -> None:
        a = place_beam(ft(0, 10), ft(8, 10), spec, constants).beam
        other = spec.model_copy(update={"size": "2x12"})
        b = place_beam(ft(8, 10), ft(20, 10), other, constants).beam
        assert not should_merge(a, b, constants.epsilon)

    def test_merged_axis_is_union(self, spec, constants) -> None:
        a = place_beam(ft(0, 10), ft(8, 10), spec, constants).beam
        b = place_beam(ft(20, 10), ft(6, 10), spec, constants).beam
        start, end = merged_axis([a, b])
        assert start.is_close(ft(0, 10)) and end.is_close(ft(20, 10))


class TestBeamLayout:
    def test_short_axis_gets_centre_post(self, constants) -> None:
        posts = layout_posts(ft(0, 0), ft(1.5, 0), constants)
        assert len(posts) == 1
        assert posts[0].is_close(ft(0.75, 0))

    def test_posts_inset_from_ends(self, constants) -> None:
        posts = layout_posts(ft(0, 0), ft(6, 0), constants)
        assert [round(p.x / ft(1, 0).x, 6) for p in posts] == [1, 5]

    def test_material_cantilevers_past_end_posts(self, spec, constants) -> None:
        layout = place_beam(ft(0, 0), ft(20, 0), spec, constants)
        assert math.isclose(layout.beam.length_feet, 20)
        assert len(layout.footings) == len(layout.posts)


class TestMergeInPipeline:
    def test_notched_outer_edge_becomes_one_beam(self) -> None:
        # Redundant vertex on the outer edge splits it into two colinear edges
        points = footprint((0, 0), (24, 0), (24, 12), (12, 12), (0, 12))
        result = run_structure(points, 0)
        assert result.error is None
        outer = [b for b in result.beams if b.usage == MemberUsage.OUTER_BEAM]
        assert len(outer) == 1
        assert math.isclose(outer[0].centerline_p1.y, outer[0].centerline_p2.y)
        span = abs(outer[0].centerline_p2.x - outer[0].centerline_p1.x)
        assert math.isclose(span, ft(24, 0).x)

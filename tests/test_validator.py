"""Tests for the boundary validation report."""

from deckframe.core.validator import (
    validate_beam, validate_components, validate_joist, validate_post, validate_rim_joist,
)
from deckframe.models import (
    Beam, Joist, MemberUsage, Post, RimJoist, StructureComponents,
)

from conftest import ft, rectangle, run_structure

DECK = rectangle(16, 12)


def joist(p1, p2):
    return Joist(p1=p1, p2=p2, size="2x10", length_feet=0, usage=MemberUsage.JOIST)


def beam(p1, p2):
    return Beam(
        p1=p1, p2=p2, centerline_p1=p1, centerline_p2=p2,
        position_coordinate_line_p1=p1, position_coordinate_line_p2=p2,
        size="2x10", length_feet=0, usage=MemberUsage.OUTER_BEAM, ply=2, is_flush=False,
    )


class TestMemberChecks:
    def test_joist_inside_is_valid(self) -> None:
        assert validate_joist(joist(ft(4, 0), ft(4, 12)), DECK) == []

    def test_joist_outside(self) -> None:
        issues = validate_joist(joist(ft(4, 0), ft(4, 14)), DECK)
        assert issues == ["Joist p2 (96.0, 336.0) is outside deck boundary"]

    def test_joist_near_zero_length(self) -> None:
        issues = validate_joist(joist(ft(4, 4), ft(4, 4)), DECK)
        assert issues == ["Joist has near-zero length (0.00 ft)"]

    def test_joist_too_long(self) -> None:
        big = rectangle(40, 40)
        issues = validate_joist(joist(ft(1, 0), ft(1, 31)), big)
        assert issues == ["Joist is unusually long (31.0 ft) - possible calculation error"]

    def test_beam_cantilever_allowance(self) -> None:
        assert validate_beam(beam(ft(-1.5, 11), ft(17.5, 11)), DECK) == []
        issues = validate_beam(beam(ft(-3, 11), ft(16, 11)), DECK)
        assert len(issues) == 1 and issues[0].startswith("Beam p1")

    def test_rim_joist_on_edge(self) -> None:
        rim = RimJoist(p1=ft(0, 12), p2=ft(16, 12), size="2x10", length_feet=16, usage=MemberUsage.OUTER_RIM_JOIST)
        assert validate_rim_joist(rim, DECK) == []
        rim.p2 = ft(18, 12)
        assert validate_rim_joist(rim, DECK) == ["Rim joist p2 (432.0, 288.0) is outside deck boundary"]

    def test_post_tolerance(self) -> None:
        assert validate_post(Post(x=-10, y=100, size="4x4", height_feet=3), DECK) == []
        assert validate_post(Post(x=-20, y=100, size="4x4", height_feet=3), DECK) == [
            "Post at (-20.0, 100.0) is outside deck boundary"
        ]


class TestReport:
    def test_generated_structure_is_valid(self) -> None:
        result = run_structure(DECK, 0)
        report = validate_components(result, DECK)
        assert report.valid
        assert report.summary == "All structural components validated successfully"

    def test_summary_counts(self) -> None:
        components = StructureComponents(
            joists=[joist(ft(4, 0), ft(4, 14)), joist(ft(6, 0), ft(6, 12))],
            posts=[Post(x=1000, y=1000, size="4x4", height_feet=3)],
        )
        report = validate_components(components, DECK)
        assert not report.valid
        assert [i.index for i in report.joist_issues] == [0]
        assert report.summary == (
            "Found 2 component(s) with boundary issues: 1 joists, 0 beams, 0 rim joists, 1 posts"
        )

    def test_degenerate_polygon(self) -> None:
        report = validate_components(StructureComponents(), DECK[:2])
        assert not report.valid
        assert report.summary == "Invalid components or deck points"

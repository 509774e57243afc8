"""Span tables consumed by the sizing functions.

Joist spans follow IRC Table R507.5 and beam spans IRC Table R507.6
(Southern Pine #2, 40 psf live + 10 psf dead). The tables are read-only
during a calculation; callers may supply their own SpanTables instance.
"""

from __future__ import annotations
from pydantic import BaseModel, Field

from deckframe import config


class JoistSpanRule(BaseModel):
    size: str
    spacing: float      # Inches on-center
    max_span_ft: float


class BeamSpanEntry(BaseModel):
    joist_span_ft: float
    max_beam_span_ft: float


def _ft(feet: int, inches: int = 0) -> float:
    return feet + inches / 12


class SpanTables(BaseModel):
    max_joist_spans: list[JoistSpanRule] = []
    # ply -> beam size -> entries ordered by joist span
    max_beam_spans: dict[int, dict[str, list[BeamSpanEntry]]] = {}
    beam_size_order: list[str] = Field(default_factory=lambda: list(config.JOIST_SIZE_ORDER))

    def max_joist_span(self, size: str, spacing: float) -> float | None:
        for rule in self.max_joist_spans:
            if rule.size == size and abs(rule.spacing - spacing) < 1e-9:
                return rule.max_span_ft
        return None


def _beam_rows(*rows: tuple[float, float]) -> list[BeamSpanEntry]:
    return [BeamSpanEntry(joist_span_ft=j, max_beam_span_ft=b) for j, b in rows]


DEFAULT_SPAN_TABLES = SpanTables(
    max_joist_spans=[
        JoistSpanRule(size="2x6", spacing=12, max_span_ft=_ft(9, 10)),
        JoistSpanRule(size="2x6", spacing=16, max_span_ft=_ft(9, 1)),
        JoistSpanRule(size="2x8", spacing=12, max_span_ft=_ft(13, 2)),
        JoistSpanRule(size="2x8", spacing=16, max_span_ft=_ft(10, 6)),
        JoistSpanRule(size="2x10", spacing=12, max_span_ft=_ft(16)),
        JoistSpanRule(size="2x10", spacing=16, max_span_ft=_ft(15, 2)),
        JoistSpanRule(size="2x12", spacing=12, max_span_ft=_ft(16)),
        JoistSpanRule(size="2x12", spacing=16, max_span_ft=_ft(16)),
    ],
    max_beam_spans={
        # 2-ply beams (4x4 posts)
        2: {
            "2x6": _beam_rows((6, _ft(6, 2)), (8, _ft(5, 4)), (10, _ft(4, 9)), (12, _ft(4, 4))),
            "2x8": _beam_rows((6, _ft(8, 2)), (8, _ft(7, 1)), (10, _ft(6, 4)), (12, _ft(5, 9))),
            "2x10": _beam_rows((6, _ft(10, 5)), (8, _ft(9)), (10, _ft(8, 1)), (12, _ft(7, 4))),
            "2x12": _beam_rows((6, _ft(12, 8)), (8, _ft(11)), (10, _ft(9, 10)), (12, _ft(8, 11))),
        },
        # 3-ply beams (6x6 posts)
        3: {
            "2x6": _beam_rows((6, _ft(7, 9)), (8, _ft(6, 9)), (10, _ft(6)), (12, _ft(5, 6))),
            "2x8": _beam_rows((6, _ft(10, 2)), (8, _ft(8, 10)), (10, _ft(7, 11)), (12, _ft(7, 3))),
            "2x10": _beam_rows((6, _ft(13)), (8, _ft(11, 3)), (10, _ft(10, 1)), (12, _ft(9, 2))),
            "2x12": _beam_rows((6, _ft(15, 10)), (8, _ft(13, 8)), (10, _ft(12, 3)), (12, _ft(11, 2))),
        },
    },
)

# Footing design values (IRC R403.1)
STANDARD_FOOTING_DIAMETERS = [12, 16, 18, 20, 24]   # Inches
DEFAULT_SOIL_BEARING_CAPACITY = 1500                 # psf
DECK_DESIGN_LOAD_PSF = 50                            # 40 live + 10 dead

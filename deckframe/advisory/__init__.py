from .tables import SpanTables, JoistSpanRule, BeamSpanEntry, DEFAULT_SPAN_TABLES
from .sizing import (
    JoistSizing, BeamSizing, BeamSpanCheck, FootingSizing,
    size_joists, mid_beam_count, plan_mid_beams,
    max_beam_span, validate_beam_span, size_beam,
    tributary_area, size_footing,
)

__all__ = [
    "SpanTables", "JoistSpanRule", "BeamSpanEntry", "DEFAULT_SPAN_TABLES",
    "JoistSizing", "BeamSizing", "BeamSpanCheck", "FootingSizing",
    "size_joists", "mid_beam_count", "plan_mid_beams",
    "max_beam_span", "validate_beam_span", "size_beam",
    "tributary_area", "size_footing",
]

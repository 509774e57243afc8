from .geometry import Point, Vector2D, direction_from_points
from .footprint import Edge, EdgeKind, NormalizedShape, DeckDimensions
from .framing import (
    MemberUsage, BEAM_ORDER, StructuralMember, Ledger, Beam, Joist, RimJoist,
    Blocking, Post, Footing, BeamLayout, NoMidBeam, SingleMidBeam,
    MultipleMidBeams, BeamPlan, ValidationIssue, ValidationReport,
    StructureComponents,
)
from .parameters import (
    AttachmentType, BeamType, PictureFrame, FootingType, PostSize,
    DeckInputs, FramingConstants, GenerationConfig,
)
from .context import StructureContext

__all__ = [
    "Point", "Vector2D", "direction_from_points",
    "Edge", "EdgeKind", "NormalizedShape", "DeckDimensions",
    "MemberUsage", "BEAM_ORDER", "StructuralMember", "Ledger", "Beam", "Joist",
    "RimJoist", "Blocking", "Post", "Footing", "BeamLayout", "NoMidBeam",
    "SingleMidBeam", "MultipleMidBeams", "BeamPlan", "ValidationIssue",
    "ValidationReport", "StructureComponents",
    "AttachmentType", "BeamType", "PictureFrame", "FootingType", "PostSize",
    "DeckInputs", "FramingConstants", "GenerationConfig",
    "StructureContext",
]

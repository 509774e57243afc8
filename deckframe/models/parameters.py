"""Deck inputs, framing constants and generation configuration."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, Field

from deckframe import config


class AttachmentType(str, Enum):
    HOUSE_RIM = "house_rim"
    FLOATING = "floating"
    CONCRETE = "concrete"


class BeamType(str, Enum):
    FLUSH = "flush"
    DROP = "drop"


class PictureFrame(str, Enum):
    NONE = "none"
    SINGLE = "single"
    DOUBLE = "double"


class FootingType(str, Enum):
    GH_LEVELLERS = "gh_levellers"
    PYLEX = "pylex"
    HELICAL = "helical"
    SONO_TUBE = "sono_tube"


class PostSize(str, Enum):
    AUTO = "auto"
    FOUR_BY_FOUR = "4x4"
    SIX_BY_SIX = "6x6"


class DeckInputs(BaseModel):
    """User construction choices for one deck."""
    attachment_type: AttachmentType = AttachmentType.HOUSE_RIM
    beam_type: BeamType = BeamType.DROP
    joist_spacing: float = Field(16, gt=0)   # Inches on-center
    deck_height: float = Field(36, ge=0)     # Inches
    picture_frame: PictureFrame = PictureFrame.NONE
    footing_type: FootingType = FootingType.GH_LEVELLERS
    post_size: PostSize = PostSize.AUTO


class FramingConstants(BaseModel):
    """Scale factors and design-rule constants, overridable per call."""
    pixels_per_foot: float = config.PIXELS_PER_FOOT
    epsilon: float = config.EPSILON
    post_inset_feet: float = config.POST_INSET_FEET
    max_post_spacing_feet: float = config.MAX_POST_SPACING_FEET
    beam_cantilever_feet: float = config.BEAM_CANTILEVER_FEET
    drop_beam_setback_feet: float = config.DROP_BEAM_CENTERLINE_SETBACK_FEET
    joist_cantilever_feet: dict[str, float] = Field(
        default_factory=lambda: dict(config.JOIST_CANTILEVER_FEET)
    )
    min_height_for_no_2x6_inches: float = config.MIN_HEIGHT_FOR_NO_2X6_INCHES
    six_by_six_min_height_inches: float = config.SIX_BY_SIX_MIN_HEIGHT_INCHES
    picture_frame_single_inset_inches: float = config.PICTURE_FRAME_SINGLE_INSET_INCHES
    picture_frame_double_inset_inches: float = config.PICTURE_FRAME_DOUBLE_INSET_INCHES
    max_blocking_spacing_feet: float = config.MAX_BLOCKING_SPACING_FEET
    lumber_thickness_inches: float = config.ACTUAL_LUMBER_THICKNESS_INCHES
    joist_size_order: list[str] = Field(default_factory=lambda: list(config.JOIST_SIZE_ORDER))

    def feet_to_pixels(self, feet: float) -> float:
        return feet * self.pixels_per_foot

    def inches_to_pixels(self, inches: float) -> float:
        return inches / 12 * self.pixels_per_foot

    def pixels_to_feet(self, pixels: float) -> float:
        return pixels / self.pixels_per_foot

    @property
    def lumber_thickness_pixels(self) -> float:
        return self.inches_to_pixels(self.lumber_thickness_inches)

    def joist_cantilever_pixels(self, joist_size: str) -> float:
        feet = self.joist_cantilever_feet.get(joist_size, self.beam_cantilever_feet)
        return self.feet_to_pixels(feet)


class GenerationConfig(BaseModel):
    """Controls which rules are applied."""
    enabled_rules: list[str] = []        # Empty = use all registered defaults
    disabled_rules: list[str] = []       # Explicitly disable specific rules

"""Default constants for deck framing.

All plan coordinates are pixels at a fixed scale; lengths reported on
members are feet. FramingConstants (models.parameters) copies these values
so a caller can override them per calculation.
"""

PIXELS_PER_FOOT = 24
EPSILON = 0.01  # Tolerance for float comparisons, in pixels

POST_INSET_FEET = 1.0
MAX_POST_SPACING_FEET = 8.0
BEAM_CANTILEVER_FEET = 1.0
DROP_BEAM_CENTERLINE_SETBACK_FEET = 1.0

# Distance joists may run past a drop beam, by joist size
JOIST_CANTILEVER_FEET = {
    "2x6": 1.0,
    "2x8": 1.5,
    "2x10": 2.0,
    "2x12": 2.0,
}

MIN_HEIGHT_FOR_NO_2X6_INCHES = 24
SIX_BY_SIX_MIN_HEIGHT_INCHES = 60

PICTURE_FRAME_SINGLE_INSET_INCHES = 5
PICTURE_FRAME_DOUBLE_INSET_INCHES = 10
MAX_BLOCKING_SPACING_FEET = 8.0

ACTUAL_LUMBER_THICKNESS_INCHES = 1.5

JOIST_SIZE_ORDER = ["2x6", "2x8", "2x10", "2x12"]

# Continuous 2x8 boards are required between these depths when a mid-beam
# is present. Historical rule, kept literally.
FORCED_SINGLE_SPAN_JOIST_SIZE = "2x8"
FORCED_SINGLE_SPAN_MIN_DEPTH_FEET = 18.0
FORCED_SINGLE_SPAN_MAX_DEPTH_FEET = 20.0

ANGLE_TOLERANCE_DEGREES = 2.0
BOUNDARY_TOLERANCE_PIXELS = 5.0

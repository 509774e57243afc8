"""Errors raised inside the framing pipeline."""


class StructureError(Exception):
    """
    A fatal condition in one pipeline stage.

    The generator catches it and reports the message on
    StructureComponents.error; it never escapes calculate_structure.
    """

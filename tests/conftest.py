# tests/conftest.py
import pytest

from deckframe.models import Point, DeckDimensions, DeckInputs
from deckframe.core.generator import StructureGenerator, calculate_structure
from deckframe.core.registry import create_default_registry

PPF = 24  # Pixels per foot, matches the default FramingConstants


def ft(x: float, y: float) -> Point:
    """Plan point given in feet."""
    return Point(x=x * PPF, y=y * PPF)


def footprint(*coords) -> list[Point]:
    return [ft(x, y) for x, y in coords]


def rectangle(width_ft: float, depth_ft: float) -> list[Point]:
    """Rectangle with the ledger on edge 0 along y=0, growing towards +y."""
    return footprint((0, 0), (width_ft, 0), (width_ft, depth_ft), (0, depth_ft))


def run_structure(points, ledger_indices=0, inputs=None, **kwargs):
    dims = DeckDimensions.from_points(points, PPF)
    return calculate_structure(points, ledger_indices, inputs or DeckInputs(), dims, **kwargs)


@pytest.fixture
def generator():
    return StructureGenerator(create_default_registry())


@pytest.fixture
def bay_window():
    """Pentagon with a 45 degree bay wall; edges 0 and 1 are ledgers."""
    return footprint((0, 0), (12, 0), (16, -4), (16, 12), (0, 12))


@pytest.fixture
def clipped_corner():
    """Rectangle with the outer right corner cut at 45 degrees (a diagonal rim)."""
    return footprint((0, 0), (16, 0), (16, 8), (12, 12), (0, 12))


@pytest.fixture
def notched():
    """L-shaped deck: the outer right corner is cut away by a 6' x 8' notch."""
    return footprint((0, 0), (20, 0), (20, 8), (12, 8), (12, 14), (0, 14))

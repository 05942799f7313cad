"""Shared fixtures for the ADU planner tests."""
import pytest

from aduplanner.config import CANVAS_DEFAULTS, create_canvas_config
from aduplanner.core.model import Lot, Point, Scene, Setbacks
from aduplanner.engine.api import apply_operations
from aduplanner.engine.ops import empty_scene


@pytest.fixture
def config():
    """Default canvas: 36 ft across 800 px."""
    return CANVAS_DEFAULTS


@pytest.fixture
def config24():
    """Canvas with exactly 24 px per foot (half grid = 12 px)."""
    return create_canvas_config(36, 864)


@pytest.fixture
def square():
    """10 x 10 square in arbitrary units."""
    return [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]


@pytest.fixture
def scene24(config24):
    """Two 10 ft rooms far apart, a door, a window and a sofa on a 24 px/ft canvas."""
    return apply_operations(
        empty_scene(config24),
        [
            {"op": "add_room", "id": "r1", "type": "bedroom", "x": 240, "y": 240, "width": 240, "height": 240},
            {"op": "add_room", "id": "r2", "type": "kitchen", "x": 1200, "y": 1200, "width": 240, "height": 240},
            {"op": "add_door", "id": "d1", "type": "single", "position": (360, 240)},
            {"op": "add_window", "id": "w1", "type": "standard", "position": (1320, 1440)},
            {"op": "add_furniture", "id": "f1", "type": "sofa-3seat", "position": (360, 360)},
        ],
        config24,
    )


@pytest.fixture
def lot():
    """A 50 x 100 ft lot without a surveyed boundary."""
    return Lot(
        geo_lat=37.7749,
        geo_lng=-122.4194,
        lot_width_feet=50,
        lot_depth_feet=100,
        setbacks=Setbacks(front=0, back=4, left=4, right=4),
    )


@pytest.fixture
def make_scene():
    """Factory for distinct minimal scenes."""

    def _make(i):
        return Scene(adu_boundary=(Point(0, 0), Point(10 + i, 0), Point(0, 10)))

    return _make

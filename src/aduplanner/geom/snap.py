"""Grid snapping and canvas clamping.

Callers pick a granularity per entity type: full grid (one foot), half grid
(half a foot), or free placement for furniture.
"""

from __future__ import annotations

import math
from enum import Enum

from ..core.model import Point


class SnapMode(str, Enum):
    """Snapping granularity."""

    GRID = "grid"
    HALF = "half"
    FREE = "free"


def snap_to_grid(value: float, unit: float) -> float:
    """Round a value to the nearest multiple of unit.

    Halves round up, matching the browser client.

    Args:
        value: Coordinate to snap.
        unit: Grid unit, must be positive.

    Returns:
        The snapped coordinate.

    Raises:
        ValueError: If unit is not positive.
    """
    if unit <= 0:
        raise ValueError(f"Snap unit must be positive, got {unit}")
    return math.floor(value / unit + 0.5) * unit


def snap_unit(mode: SnapMode, grid_size: float) -> float | None:
    """Return the snapping unit for a mode, or None for free placement."""
    mode = SnapMode(mode)
    if mode is SnapMode.GRID:
        return grid_size
    if mode is SnapMode.HALF:
        return grid_size / 2
    return None


def snap_value(value: float, mode: SnapMode, grid_size: float) -> float:
    unit = snap_unit(mode, grid_size)
    if unit is None:
        return value
    return snap_to_grid(value, unit)


def snap_point(point: Point, mode: SnapMode, grid_size: float) -> Point:
    """Snap both axes of a point with the given mode."""
    return Point(snap_value(point.x, mode, grid_size), snap_value(point.y, mode, grid_size))


def constrain_to_canvas(point: Point, extended_canvas_size: float) -> Point:
    """Clamp a point into [0, extended_canvas_size] on both axes."""
    return Point(
        max(0.0, min(point.x, extended_canvas_size)),
        max(0.0, min(point.y, extended_canvas_size)),
    )

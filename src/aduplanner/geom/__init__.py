"""Geometry utilities for ADU planning.

This module provides the stateless geometry kernel: polygon area, label
placement, wall segments with opening cutouts, and grid snapping.
"""

from .polygon import (
    best_interior_label_point,
    distance_to_segment,
    point_in_polygon,
    polygon_area,
    polygon_area_sqft,
)
from .snap import SnapMode, constrain_to_canvas, snap_to_grid
from .walls import wall_segments_excluding_openings, wall_segments_with_opening_metadata

__all__ = [
    "SnapMode",
    "best_interior_label_point",
    "constrain_to_canvas",
    "distance_to_segment",
    "point_in_polygon",
    "polygon_area",
    "polygon_area_sqft",
    "snap_to_grid",
    "wall_segments_excluding_openings",
    "wall_segments_with_opening_metadata",
]

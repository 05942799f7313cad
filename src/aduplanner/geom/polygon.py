"""Polygon geometry utilities.

This module provides the stateless geometry used by every editor interaction:
shoelace area, point-in-polygon, label placement, point-to-segment distance
and bounding boxes. Functions are unit-agnostic unless their name says
otherwise; callers decide whether vertices are pixels or feet.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from shapely.geometry import Polygon, box

from ..core.model import Point

# Samples per axis for the interior label search
LABEL_GRID_STEPS = 10

# (cos, sin) for 0, 90, 180 and 270 degrees
_QUARTER_TURNS = ((1, 0), (0, 1), (-1, 0), (0, -1))


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def to_shapely(self) -> Polygon:
        return box(self.min_x, self.min_y, self.max_x, self.max_y)

    def intersects(self, other: BoundingBox) -> bool:
        """Check overlap; touching edges count as intersecting."""
        return self.to_shapely().intersects(other.to_shapely())


def polygon_area(vertices: Sequence[Point]) -> float:
    """Calculate polygon area with the shoelace formula.

    Works for either winding order. Fewer than three vertices yield 0.
    """
    n = len(vertices)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        j = (i + 1) % n
        total += vertices[i].x * vertices[j].y
        total -= vertices[j].x * vertices[i].y
    return abs(total) / 2


def polygon_area_sqft(vertices: Sequence[Point], pixels_per_foot: float) -> float:
    """Area of a pixel-space polygon in square feet."""
    return polygon_area(vertices) / (pixels_per_foot * pixels_per_foot)


def centroid(vertices: Sequence[Point]) -> Point:
    """Vertex mean of a polygon.

    This is the label/rotation anchor used by the editor, not the area
    centroid.
    """
    if not vertices:
        return Point(0.0, 0.0)
    n = len(vertices)
    return Point(sum(v.x for v in vertices) / n, sum(v.y for v in vertices) / n)


def bounding_box(vertices: Sequence[Point]) -> BoundingBox:
    xs = [v.x for v in vertices]
    ys = [v.y for v in vertices]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))


def point_in_polygon(point: Point, vertices: Sequence[Point]) -> bool:
    """Ray-casting parity test.

    Args:
        point: Point to test.
        vertices: Polygon vertices.

    Returns:
        True if the point is strictly inside the polygon.
    """
    inside = False
    n = len(vertices)
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i].x, vertices[i].y
        xj, yj = vertices[j].x, vertices[j].y
        if (yi > point.y) != (yj > point.y):
            x_cross = (xj - xi) * (point.y - yi) / (yj - yi) + xi
            if point.x < x_cross:
                inside = not inside
        j = i
    return inside


def distance_to_segment(point: Point, start: Point, end: Point) -> float:
    """Distance from a point to a line segment.

    The projection parameter is clamped to [0, 1]; a zero-length segment is
    treated as a point.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return math.hypot(point.x - start.x, point.y - start.y)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def _min_edge_distance(point: Point, vertices: Sequence[Point]) -> float:
    n = len(vertices)
    return min(
        distance_to_segment(point, vertices[i], vertices[(i + 1) % n]) for i in range(n)
    )


def best_interior_label_point(vertices: Sequence[Point]) -> Point:
    """Find a point inside the polygon suitable for a label.

    Returns the centroid when it lies inside. For concave shapes, samples an
    interior grid over the bounding box and keeps the sample farthest from
    every edge (an approximate pole of inaccessibility). Degenerate polygons
    with no interior sample fall back to the centroid.

    Args:
        vertices: Polygon vertices.

    Returns:
        The label anchor point.
    """
    center = centroid(vertices)
    if len(vertices) < 3 or point_in_polygon(center, vertices):
        return center

    bbox = bounding_box(vertices)
    step_x = bbox.width / LABEL_GRID_STEPS
    step_y = bbox.height / LABEL_GRID_STEPS

    best_point = None
    best_distance = 0.0
    for row in range(1, LABEL_GRID_STEPS):
        y = bbox.min_y + row * step_y
        for col in range(1, LABEL_GRID_STEPS):
            sample = Point(bbox.min_x + col * step_x, y)
            if not point_in_polygon(sample, vertices):
                continue
            distance = _min_edge_distance(sample, vertices)
            if best_point is None or distance > best_distance:
                best_point = sample
                best_distance = distance

    return best_point if best_point is not None else center


def closest_edge_index(point: Point, vertices: Sequence[Point]) -> int:
    """Index i of the polygon edge (i, i+1) nearest to a point.

    Used to insert a boundary vertex where the user clicked a boundary line.

    Raises:
        ValueError: If the polygon has fewer than two vertices.
    """
    n = len(vertices)
    if n < 2:
        raise ValueError("Polygon must have at least two vertices")
    return min(
        range(n),
        key=lambda i: distance_to_segment(point, vertices[i], vertices[(i + 1) % n]),
    )


def rotate_point(point: Point, origin: Point, degrees: float) -> Point:
    """Rotate a point about an origin.

    Positive angles turn clockwise on screen, since canvas Y points down.
    Quarter turns are exact.
    """
    if degrees % 90 == 0:
        cos_a, sin_a = _QUARTER_TURNS[int(degrees % 360) // 90]
    else:
        radians = math.radians(degrees)
        cos_a = math.cos(radians)
        sin_a = math.sin(radians)
    dx = point.x - origin.x
    dy = point.y - origin.y
    return Point(origin.x + dx * cos_a - dy * sin_a, origin.y + dx * sin_a + dy * cos_a)


def translate(vertices: Sequence[Point], dx: float, dy: float) -> tuple[Point, ...]:
    return tuple(Point(v.x + dx, v.y + dy) for v in vertices)


def rectangle_vertices(x: float, y: float, width: float, height: float) -> tuple[Point, ...]:
    """Corners of an axis-aligned rectangle: top-left, top-right, bottom-right, bottom-left."""
    return (
        Point(x, y),
        Point(x + width, y),
        Point(x + width, y + height),
        Point(x, y + height),
    )


def to_shapely(vertices: Sequence[Point]) -> Polygon | None:
    """Create a Shapely polygon, or None for fewer than three vertices."""
    if len(vertices) < 3:
        return None
    return Polygon([(v.x, v.y) for v in vertices])

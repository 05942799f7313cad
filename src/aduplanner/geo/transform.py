"""Conversions between geographic coordinates, feet and canvas pixels.

The lot stays fixed at the canvas center. Lot boundaries given as lat/lng are
converted with a flat-earth approximation (364,000 ft per degree of latitude,
scaled by cos(lat) for longitude), which is accurate at residential-lot scale
and must not be used for distances beyond roughly a mile.

The ADU content is not re-expressed in this frame. It is drawn inside a group
offset by ``adu_offset`` feet and rotated by ``adu_rotation`` about the canvas
center; hit-testing against scene entities maps screen points back through
that transform with an ``AduLocalFrame``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Protocol, Sequence

from shapely.geometry import box

from ..config import FEET_PER_DEGREE_LAT
from ..core.model import GeoVertex, Lot, Point, Setbacks
from ..geom.polygon import bounding_box, centroid, rectangle_vertices, rotate_point


def feet_per_degree(lat: float) -> tuple[float, float]:
    """Feet per degree of (latitude, longitude) at the given latitude."""
    return FEET_PER_DEGREE_LAT, FEET_PER_DEGREE_LAT * math.cos(math.radians(lat))


def geo_to_feet(vertex: GeoVertex, center: GeoVertex) -> Point:
    """Offset of a geo vertex from the center in feet, canvas orientation (Y down)."""
    ft_lat, ft_lng = feet_per_degree(center.lat)
    return Point((vertex.lng - center.lng) * ft_lng, -(vertex.lat - center.lat) * ft_lat)


def feet_to_geo(offset: Point, center: GeoVertex) -> GeoVertex:
    """Inverse of ``geo_to_feet``."""
    ft_lat, ft_lng = feet_per_degree(center.lat)
    return GeoVertex(lat=center.lat - offset.y / ft_lat, lng=center.lng + offset.x / ft_lng)


def geo_to_canvas(
    vertices: Sequence[GeoVertex],
    center: GeoVertex,
    rotation: float,
    pixels_per_foot: float,
    canvas_center: Point,
) -> List[Point]:
    """Convert geo vertices to canvas pixels.

    Args:
        vertices: Boundary vertices in degrees.
        center: Lot center in degrees.
        rotation: Lot rotation in degrees, applied about the lot center.
        pixels_per_foot: Canvas scale.
        canvas_center: Canvas point the lot center maps to.

    Returns:
        Canvas points in input order.
    """
    origin = Point(0.0, 0.0)
    points = []
    for vertex in vertices:
        feet = geo_to_feet(vertex, center)
        if rotation:
            feet = rotate_point(feet, origin, rotation)
        points.append(
            Point(canvas_center.x + feet.x * pixels_per_foot, canvas_center.y + feet.y * pixels_per_foot)
        )
    return points


def canvas_to_geo(
    points: Sequence[Point],
    center: GeoVertex,
    rotation: float,
    pixels_per_foot: float,
    canvas_center: Point,
) -> List[GeoVertex]:
    """Exact inverse of ``geo_to_canvas``."""
    origin = Point(0.0, 0.0)
    vertices = []
    for point in points:
        feet = Point(
            (point.x - canvas_center.x) / pixels_per_foot,
            (point.y - canvas_center.y) / pixels_per_foot,
        )
        if rotation:
            feet = rotate_point(feet, origin, -rotation)
        vertices.append(feet_to_geo(feet, center))
    return vertices


def lot_boundary_pixels(lot: Lot, pixels_per_foot: float, canvas_center: Point) -> List[Point]:
    """Lot outline in canvas pixels.

    Uses the geo boundary when it has at least three vertices, otherwise a
    rectangle centered on the canvas from the lot width and depth, otherwise
    nothing.
    """
    if len(lot.boundary_vertices) >= 3:
        return geo_to_canvas(
            lot.boundary_vertices,
            GeoVertex(lot.geo_lat, lot.geo_lng),
            lot.geo_rotation,
            pixels_per_foot,
            canvas_center,
        )

    if lot.lot_width_feet and lot.lot_depth_feet:
        half_width = lot.lot_width_feet / 2 * pixels_per_foot
        half_depth = lot.lot_depth_feet / 2 * pixels_per_foot
        return list(
            rectangle_vertices(
                canvas_center.x - half_width,
                canvas_center.y - half_depth,
                half_width * 2,
                half_depth * 2,
            )
        )

    return []


def adu_boundary_to_geo(adu_boundary: Sequence[Point], lot: Lot, pixels_per_foot: float) -> List[GeoVertex]:
    """Place the ADU footprint on the map.

    The footprint is taken relative to its own centroid and shifted by the
    lot's ADU offset before conversion to degrees.
    """
    if not adu_boundary:
        return []
    center = centroid(adu_boundary)
    lot_center = GeoVertex(lot.geo_lat, lot.geo_lng)
    return [
        feet_to_geo(
            Point(
                (p.x - center.x) / pixels_per_foot + lot.adu_offset_x,
                (p.y - center.y) / pixels_per_foot + lot.adu_offset_y,
            ),
            lot_center,
        )
        for p in adu_boundary
    ]


class Frame(Protocol):
    """A coordinate frame that scene geometry is expressed in."""

    def to_local(self, point: Point) -> Point:
        ...

    def to_canvas(self, point: Point) -> Point:
        ...


class CanvasFrame:
    """Identity frame, used when no lot is active."""

    def to_local(self, point: Point) -> Point:
        return point

    def to_canvas(self, point: Point) -> Point:
        return point


@dataclass(frozen=True)
class AduLocalFrame:
    """Frame of the ADU group when it is placed on a lot.

    A local point is rotated by ``rotation`` degrees about the canvas center,
    then shifted by the offset converted to pixels.

    Attributes:
        offset_x: ADU offset from the lot center in feet.
        offset_y: ADU offset from the lot center in feet (canvas down).
        rotation: ADU rotation in degrees.
        pixels_per_foot: Canvas scale.
        canvas_center: Pivot of the rotation.
    """

    offset_x: float
    offset_y: float
    rotation: float
    pixels_per_foot: float
    canvas_center: Point

    @classmethod
    def for_lot(cls, lot: Lot, pixels_per_foot: float, canvas_center: Point) -> AduLocalFrame:
        return cls(lot.adu_offset_x, lot.adu_offset_y, lot.adu_rotation, pixels_per_foot, canvas_center)

    def to_canvas(self, point: Point) -> Point:
        rotated = rotate_point(point, self.canvas_center, self.rotation)
        return Point(
            rotated.x + self.offset_x * self.pixels_per_foot,
            rotated.y + self.offset_y * self.pixels_per_foot,
        )

    def to_local(self, point: Point) -> Point:
        shifted = Point(
            point.x - self.offset_x * self.pixels_per_foot,
            point.y - self.offset_y * self.pixels_per_foot,
        )
        return rotate_point(shifted, self.canvas_center, -self.rotation)


def frame_for(lot: Lot | None, pixels_per_foot: float, canvas_center: Point) -> Frame:
    """The frame scene geometry lives in: ADU-local with a lot, canvas without."""
    if lot is None:
        return CanvasFrame()
    return AduLocalFrame.for_lot(lot, pixels_per_foot, canvas_center)


def setback_boundary(lot_pixels: Sequence[Point], setbacks: Setbacks, pixels_per_foot: float) -> List[Point]:
    """Buildable rectangle after applying setbacks to the lot's bounding box.

    Canvas Y grows downward, so the back setback insets from the top (min Y)
    and the front (street) setback from the bottom (max Y).

    Args:
        lot_pixels: Lot outline in canvas pixels.
        setbacks: Per-side setbacks in feet.
        pixels_per_foot: Canvas scale.

    Returns:
        Four corners (TL, TR, BR, BL), or an empty list when the lot has fewer
        than three vertices or the insets cross.
    """
    if len(lot_pixels) < 3:
        return []

    bbox = bounding_box(lot_pixels)
    min_x = bbox.min_x + setbacks.left * pixels_per_foot
    max_x = bbox.max_x - setbacks.right * pixels_per_foot
    min_y = bbox.min_y + setbacks.back * pixels_per_foot
    max_y = bbox.max_y - setbacks.front * pixels_per_foot

    if min_x >= max_x or min_y >= max_y:
        return []

    return list(rectangle_vertices(min_x, min_y, max_x - min_x, max_y - min_y))


@dataclass(frozen=True)
class AduFit:
    """Result of checking the ADU against the setback area.

    Attributes:
        fits: True when the ADU bounding box lies inside the setback box.
        overlap_area: Area of the ADU bounding box outside the setback box,
            in square pixels; 0 when it fits.
    """

    fits: bool
    overlap_area: float


def check_adu_fit(adu_boundary: Sequence[Point], setback: Sequence[Point]) -> AduFit:
    """Check whether the ADU footprint lies within the setback boundary.

    Either polygon having fewer than three vertices counts as fitting.
    """
    if len(adu_boundary) < 3 or len(setback) < 3:
        return AduFit(True, 0.0)

    adu_box = bounding_box(adu_boundary).to_shapely()
    setback_bbox = bounding_box(setback)
    setback_box = box(setback_bbox.min_x, setback_bbox.min_y, setback_bbox.max_x, setback_bbox.max_y)

    if setback_box.covers(adu_box):
        return AduFit(True, 0.0)
    return AduFit(False, adu_box.area - adu_box.intersection(setback_box).area)

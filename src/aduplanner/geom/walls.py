"""Wall segment extraction with opening cutouts.

Room outlines are drawn as wall segments. Openings (doorless passages, or any
opening the caller passes in) that sit on an edge cut that edge into
sub-segments. This is the only place wall cutting happens; renderers consume
the resulting segments directly.

Only axis-aligned edges can hold openings. An opening is on an edge when:
- the edge is horizontal and the opening is not rotated by 90/270, or the
  edge is vertical and the opening is rotated by 90/270;
- its center lies within ``grid_size / 4`` of the edge line;
- its center lies inside the edge extent, widened by the same tolerance.
Openings never match diagonal edges; those edges are returned uncut.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..core.model import Door, EntityKind, Opening, Point, Room, Window


@dataclass(frozen=True)
class WallSegment:
    """A drawable piece of wall between two canvas points."""

    start: Point
    end: Point

    @property
    def length(self) -> float:
        return math.hypot(self.end.x - self.start.x, self.end.y - self.start.y)


@dataclass(frozen=True)
class WallOpening:
    """An opening found on a wall edge."""

    kind: EntityKind
    id: str
    width_feet: float
    position: Point


@dataclass(frozen=True)
class AnnotatedWallSegment:
    """A room edge with its openings, used for dimension labels.

    Attributes:
        start: Edge start in canvas pixels.
        end: Edge end in canvas pixels.
        length_feet: Full edge length.
        openings: Openings found on the edge.
        effective_length_feet: Length minus opening widths, floored at 0.
    """

    start: Point
    end: Point
    length_feet: float
    openings: Tuple[WallOpening, ...]
    effective_length_feet: float


def opening_tolerance(grid_size: float) -> float:
    return grid_size / 4


def _is_vertical_opening(opening: Opening) -> bool:
    return opening.rotation % 180 == 90


def _is_horizontal_opening(opening: Opening) -> bool:
    return opening.rotation % 180 == 0


def is_opening_on_wall(start: Point, end: Point, opening: Opening, tolerance: float) -> bool:
    """Check whether an opening sits on the wall edge start-end.

    Openings at 0 or 180 degrees lie along horizontal edges, those at 90 or
    270 along vertical ones. Any other angle matches no edge.

    Args:
        start: Edge start point.
        end: Edge end point.
        opening: Door or window to test.
        tolerance: Alignment tolerance in pixels.

    Returns:
        True if the opening is aligned with and within the edge.
    """
    pos = opening.position

    if abs(start.y - end.y) < tolerance:
        y_aligned = abs(pos.y - start.y) < tolerance
        in_range = min(start.x, end.x) - tolerance <= pos.x <= max(start.x, end.x) + tolerance
        return _is_horizontal_opening(opening) and y_aligned and in_range

    if abs(start.x - end.x) < tolerance:
        x_aligned = abs(pos.x - start.x) < tolerance
        in_range = min(start.y, end.y) - tolerance <= pos.y <= max(start.y, end.y) + tolerance
        return _is_vertical_opening(opening) and x_aligned and in_range

    return False


def _subtract_intervals(
    edge_start: float, edge_end: float, cuts: List[Tuple[float, float]]
) -> List[Tuple[float, float]]:
    """Remove sorted cut intervals from [edge_start, edge_end]."""
    pieces = []
    current = edge_start
    for cut_start, cut_end in sorted(cuts):
        if cut_start > current:
            pieces.append((current, min(cut_start, edge_end)))
        current = max(current, cut_end)
    if current < edge_end:
        pieces.append((current, edge_end))
    return pieces


def wall_segments_excluding_openings(
    vertices: Sequence[Point],
    openings: Iterable[Opening],
    grid_size: float,
    pixels_per_foot: float,
) -> List[WallSegment]:
    """Split a polygon outline into wall segments around openings.

    Args:
        vertices: Room polygon in canvas pixels.
        openings: Openings that cut the wall (widths in feet).
        grid_size: Grid cell size in pixels; sets the alignment tolerance.
        pixels_per_foot: Scale used to convert opening widths to pixels.

    Returns:
        Wall segments, edge by edge. Edges without openings are returned
        unmodified; cut edges yield zero or more pieces ordered along the axis.
    """
    openings = list(openings)
    tolerance = opening_tolerance(grid_size)
    segments: List[WallSegment] = []
    n = len(vertices)

    for i in range(n):
        start = vertices[i]
        end = vertices[(i + 1) % n]

        is_horizontal = abs(start.y - end.y) < tolerance
        cuts: List[Tuple[float, float]] = []
        for opening in openings:
            if not is_opening_on_wall(start, end, opening, tolerance):
                continue
            half_width = opening.width * pixels_per_foot / 2
            center = opening.position.x if is_horizontal else opening.position.y
            cuts.append((center - half_width, center + half_width))

        if not cuts:
            segments.append(WallSegment(start, end))
        elif is_horizontal:
            y = start.y
            for a, b in _subtract_intervals(min(start.x, end.x), max(start.x, end.x), cuts):
                segments.append(WallSegment(Point(a, y), Point(b, y)))
        else:
            x = start.x
            for a, b in _subtract_intervals(min(start.y, end.y), max(start.y, end.y), cuts):
                segments.append(WallSegment(Point(x, a), Point(x, b)))

    return segments


def open_passages(doors: Iterable[Door]) -> List[Door]:
    """Doors of type "opening", which remove the wall instead of covering it."""
    return [door for door in doors if door.type == "opening"]


def room_outline_segments(
    room: Room, doors: Iterable[Door], grid_size: float, pixels_per_foot: float
) -> List[WallSegment]:
    """Outline segments for a room, cut by the open passages on its walls."""
    return wall_segments_excluding_openings(
        room.vertices, open_passages(doors), grid_size, pixels_per_foot
    )


def wall_segments_with_opening_metadata(
    room: Room,
    doors: Iterable[Door],
    windows: Iterable[Window],
    grid_size: float,
    pixels_per_foot: float,
) -> List[AnnotatedWallSegment]:
    """Annotate every room edge with the openings found on it.

    Args:
        room: Room whose edges are annotated.
        doors: All doors in the scene.
        windows: All windows in the scene.
        grid_size: Grid cell size in pixels; sets the alignment tolerance.
        pixels_per_foot: Scale for converting edge lengths to feet.

    Returns:
        One AnnotatedWallSegment per edge, in vertex order.
    """
    doors = list(doors)
    windows = list(windows)
    tolerance = opening_tolerance(grid_size)
    vertices = room.vertices
    n = len(vertices)
    annotated = []

    for i in range(n):
        start = vertices[i]
        end = vertices[(i + 1) % n]
        length_feet = math.hypot(end.x - start.x, end.y - start.y) / pixels_per_foot

        found = [
            WallOpening(EntityKind.DOOR, door.id, door.width, door.position)
            for door in doors
            if is_opening_on_wall(start, end, door, tolerance)
        ]
        found += [
            WallOpening(EntityKind.WINDOW, window.id, window.width, window.position)
            for window in windows
            if is_opening_on_wall(start, end, window, tolerance)
        ]

        total_opening = sum(o.width_feet for o in found)
        annotated.append(
            AnnotatedWallSegment(
                start=start,
                end=end,
                length_feet=length_feet,
                openings=tuple(found),
                effective_length_feet=max(0.0, length_feet - total_opening),
            )
        )

    return annotated


def format_feet_inches(feet: float) -> str:
    """Format a length for dimension labels, e.g. 10.5 -> 10'-6"."""
    whole_feet = math.floor(feet)
    inches = round((feet - whole_feet) * 12)
    if inches == 12:
        whole_feet += 1
        inches = 0
    return f"{whole_feet}'-{inches}\""

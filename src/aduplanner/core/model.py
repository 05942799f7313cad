"""Core data models for ADU floor planning.

This module defines the fundamental data structures used to represent an
editable ADU floor plan: rooms, openings (doors and windows), furniture, the
ADU boundary polygon, and the lot the footprint is placed on.

All models are immutable. Editing operations build new instances, so a scene
captured for undo/redo can be kept as-is without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Union

RoomType = Literal["bedroom", "bathroom", "kitchen", "living", "dining", "corridor", "other"]
DoorType = Literal["single", "double", "sliding", "french", "opening"]
WindowType = Literal["standard", "bay", "picture", "sliding"]
SnapshotKind = Literal["auto", "manual"]
PlacementMode = Literal["select", "room", "door", "window", "furniture"]


class EntityKind(str, Enum):
    """The four kinds of selectable scene entities."""

    ROOM = "room"
    DOOR = "door"
    WINDOW = "window"
    FURNITURE = "furniture"


@dataclass(frozen=True)
class Point:
    """Represents a 2D point in space.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point.
    """

    x: float
    y: float


@dataclass(frozen=True)
class Room:
    """Represents a room drawn on the canvas.

    Attributes:
        id: Unique identifier for the room.
        type: Semantic room category.
        name: Human-readable name of the room.
        vertices: Polygon vertices in canvas pixels (at least three).
        area: Area in square feet, rounded to an integer.
        color: Fill color (e.g., "#dbeafe").
        description: Free-text description, only meaningful for type "other".
    """

    id: str
    type: RoomType
    name: str
    vertices: tuple[Point, ...]
    area: int
    color: str
    description: Optional[str] = None

    @property
    def is_rectangle(self) -> bool:
        """Four-vertex rooms are handled as axis-aligned rectangles."""
        return len(self.vertices) == 4


@dataclass(frozen=True)
class Door:
    """Represents a door placed on a wall.

    Attributes:
        id: Unique identifier for the door.
        type: Door style; "opening" is a doorless passage that cuts the wall.
        position: Center of the door in canvas pixels.
        rotation: Rotation in degrees (0, 90, 180 or 270).
        width: Door width in feet.
    """

    id: str
    type: DoorType
    position: Point
    rotation: float
    width: float


@dataclass(frozen=True)
class Window:
    """Represents a window placed on a wall.

    Attributes:
        id: Unique identifier for the window.
        type: Window style.
        position: Center of the window in canvas pixels.
        rotation: Rotation in degrees (0, 90, 180 or 270).
        width: Window width in feet.
        height: Window height in feet.
    """

    id: str
    type: WindowType
    position: Point
    rotation: float
    width: float
    height: float


Opening = Union[Door, Window]


@dataclass(frozen=True)
class Furniture:
    """Represents a piece of furniture.

    Attributes:
        id: Unique identifier for the item.
        type: Catalog key (e.g., "bed-double").
        position: Center of the item in canvas pixels.
        rotation: Rotation in degrees (0, 90, 180 or 270).
        width: Nominal width in feet, copied from the catalog.
        height: Nominal depth in feet, copied from the catalog.
    """

    id: str
    type: str
    position: Point
    rotation: float
    width: float
    height: float


@dataclass(frozen=True)
class GeoVertex:
    """A geographic coordinate in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class Setbacks:
    """Minimum distances in feet from each lot edge.

    Front is the street-facing edge (bottom of the canvas), back is the top.
    """

    front: float = 0.0
    back: float = 4.0
    left: float = 4.0
    right: float = 4.0


@dataclass(frozen=True)
class Lot:
    """Represents the real-world lot the ADU is placed on.

    Attributes:
        geo_lat: Latitude of the lot center.
        geo_lng: Longitude of the lot center.
        geo_rotation: Lot rotation in degrees.
        boundary_vertices: Explicit lot boundary, if known.
        lot_width_feet: Lot width, used when no boundary is known.
        lot_depth_feet: Lot depth, used when no boundary is known.
        setbacks: Per-side setback distances.
        adu_offset_x: ADU offset from the lot center in feet (east).
        adu_offset_y: ADU offset from the lot center in feet (canvas down).
        adu_rotation: ADU rotation in degrees about the canvas center.
    """

    geo_lat: float
    geo_lng: float
    geo_rotation: float = 0.0
    boundary_vertices: tuple[GeoVertex, ...] = ()
    lot_width_feet: Optional[float] = None
    lot_depth_feet: Optional[float] = None
    setbacks: Setbacks = field(default_factory=Setbacks)
    adu_offset_x: float = 0.0
    adu_offset_y: float = 0.0
    adu_rotation: float = 0.0
    parcel_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    lot_area_sq_ft: Optional[float] = None
    data_source: Optional[str] = None


@dataclass(frozen=True)
class EditorViewSettings:
    """View state saved alongside snapshots and per project."""

    show_lot_overlay: bool = True
    show_satellite_view: bool = False
    show_lot_boundary: bool = True
    show_grid: bool = True
    zoom: float = 1.0
    pan_offset_x: float = 0.0
    pan_offset_y: float = 0.0


@dataclass(frozen=True)
class Scene:
    """The editable floor plan.

    Attributes:
        rooms: Rooms in drawing order.
        doors: Doors in placement order.
        windows: Windows in placement order.
        furniture: Furniture in placement order.
        adu_boundary: Closed polygon of the buildable footprint.
    """

    rooms: tuple[Room, ...] = ()
    doors: tuple[Door, ...] = ()
    windows: tuple[Window, ...] = ()
    furniture: tuple[Furniture, ...] = ()
    adu_boundary: tuple[Point, ...] = ()

    def entities(self, kind: EntityKind) -> tuple:
        """Return the entity tuple for a kind."""
        return {
            EntityKind.ROOM: self.rooms,
            EntityKind.DOOR: self.doors,
            EntityKind.WINDOW: self.windows,
            EntityKind.FURNITURE: self.furniture,
        }[EntityKind(kind)]

    def find(self, kind: EntityKind, entity_id: str):
        """Return the entity of the given kind and id, or None."""
        for entity in self.entities(kind):
            if entity.id == entity_id:
                return entity
        return None

    def ids(self, kind: EntityKind) -> set[str]:
        return {entity.id for entity in self.entities(kind)}


@dataclass(frozen=True)
class SceneSnapshot:
    """A point-in-time copy of the scene, optionally with view and lot data."""

    scene: Scene
    view_settings: Optional[EditorViewSettings] = None
    lot: Optional[Lot] = None


@dataclass(frozen=True)
class SavedSnapshot:
    """A labeled, persisted recovery point.

    Attributes:
        id: Identifier assigned by the remote store or generated locally.
        timestamp: ISO-8601 creation time.
        kind: "auto" or "manual".
        data: The captured scene and optional settings.
        label: Optional user label (manual saves).
    """

    id: str
    timestamp: str
    kind: SnapshotKind
    data: SceneSnapshot
    label: Optional[str] = None

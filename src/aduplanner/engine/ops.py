"""Operations engine for ADU floor planning.

This module provides the scene mutators: creating, updating, moving, rotating
and deleting rooms, doors, windows and furniture, editing the ADU boundary,
and the batch operations used by multi-selection.

Every operation takes the current Scene and returns a new one. Operations
raise InvalidOperation when a request would break a scene invariant (unknown
id, polygon below three vertices); ``engine.api.apply`` turns that into a
no-op.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import replace
from typing import Any, Dict, Iterable, Protocol, Sequence

from ..config import CanvasConfig
from ..core.catalog import (
    ADU_DEFAULT_AREA,
    ADU_MAX_AREA,
    ADU_MIN_AREA,
    door_config,
    furniture_config,
    room_config,
    window_config,
)
from ..core.model import Door, EntityKind, Furniture, Point, Room, Scene, Window
from ..geom.polygon import (
    bounding_box,
    centroid,
    closest_edge_index,
    polygon_area_sqft,
    rectangle_vertices,
    rotate_point,
    translate,
)
from ..geom.snap import SnapMode, constrain_to_canvas, snap_point, snap_to_grid
from .validators import MIN_POLYGON_VERTICES, InvalidOperation

_SCENE_FIELDS = {
    EntityKind.ROOM: "rooms",
    EntityKind.DOOR: "doors",
    EntityKind.WINDOW: "windows",
    EntityKind.FURNITURE: "furniture",
}

# Doors and windows always snap to half a foot
OPENING_SNAP = SnapMode.HALF
ROOM_SNAP = SnapMode.HALF
DEFAULT_FURNITURE_SNAP = SnapMode.GRID


class Operation(Protocol):
    """Protocol for scene operations.

    All operations must implement this interface to be compatible
    with the operation registry and execution engine.
    """

    def precheck(self, scene: Scene, config: CanvasConfig, **kwargs: Any) -> bool:
        """Validate that the operation can be applied to the scene.

        Args:
            scene: The scene to validate against.
            config: Canvas dimensions used for snapping and clamping.
            **kwargs: Operation-specific parameters.

        Returns:
            True if the operation can be applied.

        Raises:
            InvalidOperation: If the operation would violate scene invariants.
            ValueError: If a parameter is malformed.
        """
        ...

    def apply(self, scene: Scene, config: CanvasConfig, **kwargs: Any) -> Scene:
        """Apply the operation to the scene.

        Args:
            scene: The scene to modify.
            config: Canvas dimensions used for snapping and clamping.
            **kwargs: Operation-specific parameters.

        Returns:
            A new Scene with the operation applied.
        """
        ...


def new_id() -> str:
    return str(uuid.uuid4())


def as_point(value: Any) -> Point:
    """Coerce a Point, an (x, y) pair or an {"x", "y"} mapping to a Point."""
    if isinstance(value, Point):
        return value
    if isinstance(value, dict):
        return Point(float(value["x"]), float(value["y"]))
    x, y = value
    return Point(float(x), float(y))


def _require(scene: Scene, kind: EntityKind, entity_id: str):
    entity = scene.find(kind, entity_id)
    if entity is None:
        raise InvalidOperation(f"{EntityKind(kind).value.capitalize()} '{entity_id}' does not exist")
    return entity


def _require_new_id(scene: Scene, kind: EntityKind, entity_id: str) -> None:
    if entity_id in scene.ids(kind):
        raise InvalidOperation(f"{EntityKind(kind).value.capitalize()} id '{entity_id}' already in use")


def _replace_entity(scene: Scene, kind: EntityKind, entity) -> Scene:
    field_name = _SCENE_FIELDS[EntityKind(kind)]
    updated = tuple(entity if e.id == entity.id else e for e in scene.entities(kind))
    return replace(scene, **{field_name: updated})


def _append_entity(scene: Scene, kind: EntityKind, entity) -> Scene:
    field_name = _SCENE_FIELDS[EntityKind(kind)]
    return replace(scene, **{field_name: scene.entities(kind) + (entity,)})


def _remove_entities(scene: Scene, kind: EntityKind, ids: Iterable[str]) -> Scene:
    ids = set(ids)
    if not ids:
        return scene
    field_name = _SCENE_FIELDS[EntityKind(kind)]
    kept = tuple(e for e in scene.entities(kind) if e.id not in ids)
    return replace(scene, **{field_name: kept})


def _check_index(vertices: Sequence[Point], index: int) -> None:
    if not 0 <= index < len(vertices):
        raise InvalidOperation(f"Vertex index {index} out of range (0..{len(vertices) - 1})")


def _snap_and_clamp(point: Point, config: CanvasConfig, mode: SnapMode = ROOM_SNAP) -> Point:
    return constrain_to_canvas(
        snap_point(point, mode, config.grid_size), config.extended_canvas_size
    )


def room_area(vertices: Sequence[Point], config: CanvasConfig) -> int:
    """Integer square-foot area of a pixel-space polygon."""
    return round(polygon_area_sqft(vertices, config.pixels_per_foot))


def _with_vertices(room: Room, vertices: Sequence[Point], config: CanvasConfig) -> Room:
    vertices = tuple(vertices)
    return replace(room, vertices=vertices, area=room_area(vertices, config))


def default_adu_boundary(config: CanvasConfig, area: float = ADU_DEFAULT_AREA) -> tuple[Point, ...]:
    """Square boundary of the given area, centered on the extended canvas."""
    side = math.sqrt(area) * config.pixels_per_foot
    offset = (config.extended_canvas_size - side) / 2
    return rectangle_vertices(offset, offset, side, side)


def empty_scene(config: CanvasConfig) -> Scene:
    """A scene with no entities and the default ADU boundary."""
    return Scene(adu_boundary=default_adu_boundary(config))


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------


class AddRoomOp:
    """Create a room from a rectangle (x, y, width, height) or explicit vertices.

    Coordinates are canvas pixels and snap to half a foot. When no name is
    given the catalog label is numbered after the existing rooms of that type.
    """

    def precheck(
        self,
        scene: Scene,
        config: CanvasConfig,
        type: str,
        vertices: Sequence[Any] = None,
        width: float = None,
        height: float = None,
        id: str = None,
        **kwargs: Any,
    ) -> bool:
        room_config(type)
        if id is not None:
            _require_new_id(scene, EntityKind.ROOM, id)
        if vertices is not None:
            if len(vertices) < MIN_POLYGON_VERTICES:
                raise InvalidOperation("A room needs at least three vertices")
        elif width is None or height is None:
            raise ValueError("add_room needs either vertices or width and height")
        elif width <= 0 or height <= 0:
            raise InvalidOperation(f"Room size must be positive, got {width}x{height}")
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        type: str,
        x: float = 0.0,
        y: float = 0.0,
        width: float = None,
        height: float = None,
        vertices: Sequence[Any] = None,
        name: str = None,
        color: str = None,
        description: str = None,
        id: str = None,
        **kwargs: Any,
    ) -> Scene:
        cfg = room_config(type)
        if vertices is not None:
            points = tuple(_snap_and_clamp(as_point(v), config) for v in vertices)
        else:
            half = config.half_grid
            points = tuple(
                constrain_to_canvas(p, config.extended_canvas_size)
                for p in rectangle_vertices(
                    snap_to_grid(x, half),
                    snap_to_grid(y, half),
                    snap_to_grid(width, half),
                    snap_to_grid(height, half),
                )
            )

        if name is None:
            same_type = sum(1 for r in scene.rooms if r.type == type)
            name = f"{cfg.label} {same_type + 1}"

        room = Room(
            id=id or new_id(),
            type=type,
            name=name,
            vertices=points,
            area=room_area(points, config),
            color=color or cfg.color,
            description=description if type == "other" else None,
        )
        return _append_entity(scene, EntityKind.ROOM, room)


class UpdateRoomOp:
    """Change a room's name, type, color or description.

    Changing the type without a color picks the new type's catalog color.
    Descriptions are kept only for rooms of type "other".
    """

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, type: str = None, **kwargs: Any) -> bool:
        _require(scene, EntityKind.ROOM, id)
        if type is not None:
            room_config(type)
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        id: str,
        name: str = None,
        type: str = None,
        color: str = None,
        description: str = None,
        **kwargs: Any,
    ) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        new_type = type or room.type
        new_color = color or (room_config(new_type).color if type and type != room.type else room.color)
        new_description = description if description is not None else room.description
        updated = replace(
            room,
            name=name if name is not None else room.name,
            type=new_type,
            color=new_color,
            description=new_description if new_type == "other" else None,
        )
        return _replace_entity(scene, EntityKind.ROOM, updated)


class DeleteRoomOp:
    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, EntityKind.ROOM, id)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> Scene:
        return _remove_entities(scene, EntityKind.ROOM, [id])


class MoveRoomOp:
    """Translate a room by (dx, dy) pixels; the delta snaps to half a foot."""

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, EntityKind.ROOM, id)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, dx: float = 0.0, dy: float = 0.0, **kwargs: Any) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        half = config.half_grid
        moved = replace(
            room, vertices=translate(room.vertices, snap_to_grid(dx, half), snap_to_grid(dy, half))
        )
        return _replace_entity(scene, EntityKind.ROOM, moved)


class ResizeRoomOp:
    """Set a rectangular room's four corners from origin and size.

    The area becomes round(width_ft * height_ft).
    """

    def precheck(
        self,
        scene: Scene,
        config: CanvasConfig,
        id: str,
        width: float,
        height: float,
        **kwargs: Any,
    ) -> bool:
        room: Room = _require(scene, EntityKind.ROOM, id)
        if not room.is_rectangle:
            raise InvalidOperation(f"Room '{id}' is not a rectangle")
        half = config.half_grid
        if snap_to_grid(width, half) <= 0 or snap_to_grid(height, half) <= 0:
            raise InvalidOperation(f"Room size must be positive, got {width}x{height}")
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        id: str,
        x: float,
        y: float,
        width: float,
        height: float,
        **kwargs: Any,
    ) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        half = config.half_grid
        w = snap_to_grid(width, half)
        h = snap_to_grid(height, half)
        vertices = rectangle_vertices(snap_to_grid(x, half), snap_to_grid(y, half), w, h)
        area = round((w / config.pixels_per_foot) * (h / config.pixels_per_foot))
        return _replace_entity(scene, EntityKind.ROOM, replace(room, vertices=vertices, area=area))


class MoveVertexOp:
    def precheck(self, scene: Scene, config: CanvasConfig, id: str, index: int, **kwargs: Any) -> bool:
        room: Room = _require(scene, EntityKind.ROOM, id)
        _check_index(room.vertices, index)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, index: int, point: Any, **kwargs: Any) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        vertices = list(room.vertices)
        vertices[index] = _snap_and_clamp(as_point(point), config)
        return _replace_entity(scene, EntityKind.ROOM, _with_vertices(room, vertices, config))


class InsertVertexOp:
    """Insert a vertex after ``index``; defaults to the midpoint of that edge."""

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, index: int, **kwargs: Any) -> bool:
        room: Room = _require(scene, EntityKind.ROOM, id)
        _check_index(room.vertices, index)
        return True

    def apply(
        self, scene: Scene, config: CanvasConfig, id: str, index: int, point: Any = None, **kwargs: Any
    ) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        vertices = list(room.vertices)
        if point is None:
            a = vertices[index]
            b = vertices[(index + 1) % len(vertices)]
            new_vertex = Point((a.x + b.x) / 2, (a.y + b.y) / 2)
        else:
            new_vertex = _snap_and_clamp(as_point(point), config)
        vertices.insert(index + 1, new_vertex)
        return _replace_entity(scene, EntityKind.ROOM, _with_vertices(room, vertices, config))


class RemoveVertexOp:
    def precheck(self, scene: Scene, config: CanvasConfig, id: str, index: int, **kwargs: Any) -> bool:
        room: Room = _require(scene, EntityKind.ROOM, id)
        _check_index(room.vertices, index)
        if len(room.vertices) <= MIN_POLYGON_VERTICES:
            raise InvalidOperation(f"Room '{id}' must keep at least {MIN_POLYGON_VERTICES} vertices")
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, index: int, **kwargs: Any) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        vertices = [v for i, v in enumerate(room.vertices) if i != index]
        return _replace_entity(scene, EntityKind.ROOM, _with_vertices(room, vertices, config))


def rotate_room_vertices(vertices: Sequence[Point]) -> tuple[Point, ...]:
    """Rotate a room outline by 90 degrees about its vertex centroid.

    Four-vertex rooms come back in top-left, top-right, bottom-right,
    bottom-left order, built from the rotated bounding box.
    """
    center = centroid(vertices)
    rotated = tuple(rotate_point(v, center, 90) for v in vertices)
    if len(rotated) != 4:
        return rotated
    bbox = bounding_box(rotated)
    return rectangle_vertices(bbox.min_x, bbox.min_y, bbox.width, bbox.height)


class RotateRoomOp:
    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, EntityKind.ROOM, id)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> Scene:
        room: Room = _require(scene, EntityKind.ROOM, id)
        return _replace_entity(
            scene, EntityKind.ROOM, _with_vertices(room, rotate_room_vertices(room.vertices), config)
        )


# ---------------------------------------------------------------------------
# Doors, windows and furniture
# ---------------------------------------------------------------------------


def _item_snap_mode(kind: EntityKind, snap_mode: Any = None) -> SnapMode:
    if EntityKind(kind) is EntityKind.FURNITURE:
        return SnapMode(snap_mode) if snap_mode is not None else DEFAULT_FURNITURE_SNAP
    return OPENING_SNAP


class AddDoorOp:
    def precheck(self, scene: Scene, config: CanvasConfig, type: str, id: str = None, **kwargs: Any) -> bool:
        door_config(type)
        if id is not None:
            _require_new_id(scene, EntityKind.DOOR, id)
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        type: str,
        position: Any,
        rotation: float = 0,
        id: str = None,
        **kwargs: Any,
    ) -> Scene:
        door = Door(
            id=id or new_id(),
            type=type,
            position=_snap_and_clamp(as_point(position), config, OPENING_SNAP),
            rotation=rotation % 360,
            width=door_config(type).width,
        )
        return _append_entity(scene, EntityKind.DOOR, door)


class AddWindowOp:
    def precheck(self, scene: Scene, config: CanvasConfig, type: str, id: str = None, **kwargs: Any) -> bool:
        window_config(type)
        if id is not None:
            _require_new_id(scene, EntityKind.WINDOW, id)
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        type: str,
        position: Any,
        rotation: float = 0,
        id: str = None,
        **kwargs: Any,
    ) -> Scene:
        cfg = window_config(type)
        window = Window(
            id=id or new_id(),
            type=type,
            position=_snap_and_clamp(as_point(position), config, OPENING_SNAP),
            rotation=rotation % 360,
            width=cfg.width,
            height=cfg.height,
        )
        return _append_entity(scene, EntityKind.WINDOW, window)


class AddFurnitureOp:
    def precheck(self, scene: Scene, config: CanvasConfig, type: str, id: str = None, **kwargs: Any) -> bool:
        furniture_config(type)
        if id is not None:
            _require_new_id(scene, EntityKind.FURNITURE, id)
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        type: str,
        position: Any,
        rotation: float = 0,
        snap_mode: Any = None,
        id: str = None,
        **kwargs: Any,
    ) -> Scene:
        cfg = furniture_config(type)
        mode = _item_snap_mode(EntityKind.FURNITURE, snap_mode)
        item = Furniture(
            id=id or new_id(),
            type=type,
            position=_snap_and_clamp(as_point(position), config, mode),
            rotation=rotation % 360,
            width=cfg.width,
            height=cfg.height,
        )
        return _append_entity(scene, EntityKind.FURNITURE, item)


class UpdateItemOp:
    """Change the type, position or rotation of a door, window or furniture item.

    A type change re-reads the nominal size from the catalog.
    """

    def __init__(self, kind: EntityKind):
        self.kind = EntityKind(kind)

    def _sized(self, item, new_type: str):
        if self.kind is EntityKind.DOOR:
            return replace(item, type=new_type, width=door_config(new_type).width)
        if self.kind is EntityKind.WINDOW:
            cfg = window_config(new_type)
        else:
            cfg = furniture_config(new_type)
        return replace(item, type=new_type, width=cfg.width, height=cfg.height)

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, type: str = None, **kwargs: Any) -> bool:
        item = _require(scene, self.kind, id)
        if type is not None:
            self._sized(item, type)
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        id: str,
        type: str = None,
        position: Any = None,
        rotation: float = None,
        **kwargs: Any,
    ) -> Scene:
        item = _require(scene, self.kind, id)
        if type is not None and type != item.type:
            item = self._sized(item, type)
        if position is not None:
            item = replace(item, position=as_point(position))
        if rotation is not None:
            item = replace(item, rotation=rotation % 360)
        return _replace_entity(scene, self.kind, item)


class MoveItemOp:
    """Move a door, window or furniture item to a new center position.

    Doors and windows snap to half a foot; furniture snaps per ``snap_mode``.
    """

    def __init__(self, kind: EntityKind):
        self.kind = EntityKind(kind)

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, self.kind, id)
        return True

    def apply(
        self, scene: Scene, config: CanvasConfig, id: str, position: Any, snap_mode: Any = None, **kwargs: Any
    ) -> Scene:
        item = _require(scene, self.kind, id)
        mode = _item_snap_mode(self.kind, snap_mode)
        moved = replace(item, position=_snap_and_clamp(as_point(position), config, mode))
        return _replace_entity(scene, self.kind, moved)


class RotateItemOp:
    """Turn a door, window or furniture item by 90 degrees."""

    def __init__(self, kind: EntityKind):
        self.kind = EntityKind(kind)

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, self.kind, id)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> Scene:
        item = _require(scene, self.kind, id)
        return _replace_entity(scene, self.kind, replace(item, rotation=(item.rotation + 90) % 360))


class DeleteItemOp:
    def __init__(self, kind: EntityKind):
        self.kind = EntityKind(kind)

    def precheck(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> bool:
        _require(scene, self.kind, id)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, id: str, **kwargs: Any) -> Scene:
        return _remove_entities(scene, self.kind, [id])


# ---------------------------------------------------------------------------
# ADU boundary
# ---------------------------------------------------------------------------


class SetAduAreaOp:
    """Replace the boundary with a square of the target area.

    The side is snapped to the grid and the square stays centered on the
    current boundary's centroid, so repeating the same area is a no-op.
    """

    def precheck(self, scene: Scene, config: CanvasConfig, area: float, **kwargs: Any) -> bool:
        if not ADU_MIN_AREA <= area <= ADU_MAX_AREA:
            raise InvalidOperation(
                f"ADU area must be between {ADU_MIN_AREA} and {ADU_MAX_AREA} sq ft, got {area}"
            )
        return True

    def apply(self, scene: Scene, config: CanvasConfig, area: float, **kwargs: Any) -> Scene:
        side = snap_to_grid(math.sqrt(area) * config.pixels_per_foot, config.grid_size)
        if scene.adu_boundary:
            center = centroid(scene.adu_boundary)
        else:
            center = config.canvas_center
        half = side / 2
        corners = rectangle_vertices(center.x - half, center.y - half, side, side)
        boundary = tuple(constrain_to_canvas(p, config.extended_canvas_size) for p in corners)
        return replace(scene, adu_boundary=boundary)


class UpdateBoundaryPointOp:
    def precheck(self, scene: Scene, config: CanvasConfig, index: int, **kwargs: Any) -> bool:
        _check_index(scene.adu_boundary, index)
        return True

    def apply(self, scene: Scene, config: CanvasConfig, index: int, point: Any, **kwargs: Any) -> Scene:
        boundary = list(scene.adu_boundary)
        boundary[index] = _snap_and_clamp(as_point(point), config, SnapMode.GRID)
        return replace(scene, adu_boundary=tuple(boundary))


class InsertBoundaryPointOp:
    """Insert a boundary vertex after ``index``, or on the edge nearest ``point``."""

    def precheck(self, scene: Scene, config: CanvasConfig, point: Any, index: int = None, **kwargs: Any) -> bool:
        if index is not None:
            _check_index(scene.adu_boundary, index)
        elif len(scene.adu_boundary) < 2:
            raise InvalidOperation("Boundary has no edges to insert on")
        return True

    def apply(self, scene: Scene, config: CanvasConfig, point: Any, index: int = None, **kwargs: Any) -> Scene:
        point = as_point(point)
        boundary = list(scene.adu_boundary)
        if index is None:
            index = closest_edge_index(point, boundary)
        boundary.insert(index + 1, _snap_and_clamp(point, config, SnapMode.GRID))
        return replace(scene, adu_boundary=tuple(boundary))


class RemoveBoundaryPointOp:
    def precheck(self, scene: Scene, config: CanvasConfig, index: int, **kwargs: Any) -> bool:
        _check_index(scene.adu_boundary, index)
        if len(scene.adu_boundary) <= MIN_POLYGON_VERTICES:
            raise InvalidOperation(f"Boundary must keep at least {MIN_POLYGON_VERTICES} vertices")
        return True

    def apply(self, scene: Scene, config: CanvasConfig, index: int, **kwargs: Any) -> Scene:
        boundary = tuple(p for i, p in enumerate(scene.adu_boundary) if i != index)
        return replace(scene, adu_boundary=boundary)


# ---------------------------------------------------------------------------
# Batch operations
# ---------------------------------------------------------------------------


class DeleteBatchOp:
    """Delete ids of several kinds in one request; unknown ids are ignored."""

    def precheck(self, scene: Scene, config: CanvasConfig, **kwargs: Any) -> bool:
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        rooms: Iterable[str] = (),
        doors: Iterable[str] = (),
        windows: Iterable[str] = (),
        furniture: Iterable[str] = (),
        **kwargs: Any,
    ) -> Scene:
        scene = _remove_entities(scene, EntityKind.ROOM, rooms)
        scene = _remove_entities(scene, EntityKind.DOOR, doors)
        scene = _remove_entities(scene, EntityKind.WINDOW, windows)
        return _remove_entities(scene, EntityKind.FURNITURE, furniture)


class MoveBatchOp:
    """Apply one drag delta to a heterogeneous set of entities.

    Rooms translate by the delta snapped to half a foot. Doors and windows
    land on the half-foot grid, furniture on ``furniture_snap_mode``.
    """

    def precheck(self, scene: Scene, config: CanvasConfig, **kwargs: Any) -> bool:
        return True

    def apply(
        self,
        scene: Scene,
        config: CanvasConfig,
        dx: float,
        dy: float,
        rooms: Iterable[str] = (),
        doors: Iterable[str] = (),
        windows: Iterable[str] = (),
        furniture: Iterable[str] = (),
        furniture_snap_mode: Any = None,
        **kwargs: Any,
    ) -> Scene:
        half = config.half_grid
        room_dx = snap_to_grid(dx, half)
        room_dy = snap_to_grid(dy, half)
        room_ids = set(rooms)
        moved_rooms = tuple(
            replace(r, vertices=translate(r.vertices, room_dx, room_dy)) if r.id in room_ids else r
            for r in scene.rooms
        )

        def shift(items, ids, mode):
            ids = set(ids)
            return tuple(
                replace(
                    item,
                    position=_snap_and_clamp(
                        Point(item.position.x + dx, item.position.y + dy), config, mode
                    ),
                )
                if item.id in ids
                else item
                for item in items
            )

        return replace(
            scene,
            rooms=moved_rooms,
            doors=shift(scene.doors, doors, OPENING_SNAP),
            windows=shift(scene.windows, windows, OPENING_SNAP),
            furniture=shift(
                scene.furniture,
                furniture,
                _item_snap_mode(EntityKind.FURNITURE, furniture_snap_mode),
            ),
        )


# Registry of available operations
_OPERATIONS: Dict[str, Operation] = {
    "add_room": AddRoomOp(),
    "update_room": UpdateRoomOp(),
    "delete_room": DeleteRoomOp(),
    "move_room": MoveRoomOp(),
    "resize_room": ResizeRoomOp(),
    "move_vertex": MoveVertexOp(),
    "insert_vertex": InsertVertexOp(),
    "remove_vertex": RemoveVertexOp(),
    "rotate_room": RotateRoomOp(),
    "add_door": AddDoorOp(),
    "add_window": AddWindowOp(),
    "add_furniture": AddFurnitureOp(),
    "set_adu_area": SetAduAreaOp(),
    "update_boundary_point": UpdateBoundaryPointOp(),
    "insert_boundary_point": InsertBoundaryPointOp(),
    "remove_boundary_point": RemoveBoundaryPointOp(),
    "delete_batch": DeleteBatchOp(),
    "move_batch": MoveBatchOp(),
}

for _kind in (EntityKind.DOOR, EntityKind.WINDOW, EntityKind.FURNITURE):
    _OPERATIONS[f"update_{_kind.value}"] = UpdateItemOp(_kind)
    _OPERATIONS[f"delete_{_kind.value}"] = DeleteItemOp(_kind)
    _OPERATIONS[f"move_{_kind.value}"] = MoveItemOp(_kind)
    _OPERATIONS[f"rotate_{_kind.value}"] = RotateItemOp(_kind)


def register_operation(name: str, operation: Operation) -> None:
    """Register a new operation in the registry.

    Args:
        name: Name of the operation.
        operation: Operation instance to register.
    """
    _OPERATIONS[name] = operation


def get_operation(name: str) -> Operation:
    """Get an operation by name.

    Args:
        name: Name of the operation.

    Returns:
        The operation instance.

    Raises:
        KeyError: If the operation is not registered.
    """
    if name not in _OPERATIONS:
        raise KeyError(f"Operation '{name}' is not registered")
    return _OPERATIONS[name]


def list_operations() -> list[str]:
    """List all registered operations.

    Returns:
        List of operation names.
    """
    return list(_OPERATIONS.keys())

"""Parser for floor plan JSON data.

This module converts between the JSON shape used by the web client
(camelCase keys) and the scene, lot and snapshot models. Malformed input
raises ValueError.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.model import (
    Door,
    EditorViewSettings,
    Furniture,
    GeoVertex,
    Lot,
    Point,
    Room,
    SavedSnapshot,
    Scene,
    SceneSnapshot,
    Setbacks,
    Window,
)
from ..config import (
    DEFAULT_SETBACK_BACK,
    DEFAULT_SETBACK_FRONT,
    DEFAULT_SETBACK_LEFT,
    DEFAULT_SETBACK_RIGHT,
)


def _point(data: Any) -> Point:
    return Point(float(data["x"]), float(data["y"]))


def _point_dict(point: Point) -> Dict[str, float]:
    return {"x": point.x, "y": point.y}


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _room(data: dict) -> Room:
    return Room(
        id=str(data["id"]),
        type=data["type"],
        name=data.get("name", ""),
        vertices=tuple(_point(v) for v in data["vertices"]),
        area=int(round(float(data.get("area", 0)))),
        color=data.get("color", "#f3f4f6"),
        description=data.get("description"),
    )


def _door(data: dict) -> Door:
    return Door(
        id=str(data["id"]),
        type=data["type"],
        position=_point(data["position"]),
        rotation=float(data.get("rotation", 0)),
        width=float(data["width"]),
    )


def _window(data: dict) -> Window:
    return Window(
        id=str(data["id"]),
        type=data["type"],
        position=_point(data["position"]),
        rotation=float(data.get("rotation", 0)),
        width=float(data["width"]),
        height=float(data["height"]),
    )


def _furniture(data: dict) -> Furniture:
    return Furniture(
        id=str(data["id"]),
        type=data["type"],
        position=_point(data["position"]),
        rotation=float(data.get("rotation", 0)),
        width=float(data["width"]),
        height=float(data["height"]),
    )


def scene_from_dict(data: dict) -> Scene:
    """Build a Scene from its JSON form.

    Args:
        data: Mapping with ``rooms``, ``doors``, ``windows``, ``furniture`` and
            ``aduBoundary`` lists.

    Returns:
        The parsed Scene.

    Raises:
        ValueError: If the data is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Scene data must be an object, got {type(data).__name__}")
    try:
        return Scene(
            rooms=tuple(_room(r) for r in data.get("rooms", [])),
            doors=tuple(_door(d) for d in data.get("doors", [])),
            windows=tuple(_window(w) for w in data.get("windows", [])),
            furniture=tuple(_furniture(f) for f in data.get("furniture", [])),
            adu_boundary=tuple(_point(p) for p in data.get("aduBoundary", [])),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid scene data: {e}") from e


def scene_to_dict(scene: Scene) -> dict:
    rooms = []
    for room in scene.rooms:
        room_data = {
            "id": room.id,
            "type": room.type,
            "name": room.name,
            "vertices": [_point_dict(v) for v in room.vertices],
            "area": room.area,
            "color": room.color,
        }
        if room.description is not None:
            room_data["description"] = room.description
        rooms.append(room_data)

    return {
        "rooms": rooms,
        "doors": [
            {
                "id": d.id,
                "type": d.type,
                "position": _point_dict(d.position),
                "rotation": d.rotation,
                "width": d.width,
            }
            for d in scene.doors
        ],
        "windows": [
            {
                "id": w.id,
                "type": w.type,
                "position": _point_dict(w.position),
                "rotation": w.rotation,
                "width": w.width,
                "height": w.height,
            }
            for w in scene.windows
        ],
        "furniture": [
            {
                "id": f.id,
                "type": f.type,
                "position": _point_dict(f.position),
                "rotation": f.rotation,
                "width": f.width,
                "height": f.height,
            }
            for f in scene.furniture
        ],
        "aduBoundary": [_point_dict(p) for p in scene.adu_boundary],
    }


def lot_from_dict(data: dict) -> Lot:
    """Build a Lot from its JSON form; missing setbacks take the defaults.

    Raises:
        ValueError: If the data is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Lot data must be an object, got {type(data).__name__}")
    try:
        setbacks = Setbacks(
            front=float(data.get("setbackFrontFeet", DEFAULT_SETBACK_FRONT)),
            back=float(data.get("setbackBackFeet", DEFAULT_SETBACK_BACK)),
            left=float(data.get("setbackLeftFeet", DEFAULT_SETBACK_LEFT)),
            right=float(data.get("setbackRightFeet", DEFAULT_SETBACK_RIGHT)),
        )
        return Lot(
            geo_lat=float(data["geoLat"]),
            geo_lng=float(data["geoLng"]),
            geo_rotation=float(data.get("geoRotation", 0)),
            boundary_vertices=tuple(
                GeoVertex(float(v["lat"]), float(v["lng"])) for v in data.get("boundaryVertices") or []
            ),
            lot_width_feet=_optional_float(data.get("lotWidthFeet")),
            lot_depth_feet=_optional_float(data.get("lotDepthFeet")),
            setbacks=setbacks,
            adu_offset_x=float(data.get("aduOffsetX", 0)),
            adu_offset_y=float(data.get("aduOffsetY", 0)),
            adu_rotation=float(data.get("aduRotation", 0)),
            parcel_number=data.get("parcelNumber"),
            address=data.get("address"),
            city=data.get("city"),
            state=data.get("state"),
            zip_code=data.get("zipCode"),
            lot_area_sq_ft=_optional_float(data.get("lotAreaSqFt")),
            data_source=data.get("dataSource"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid lot data: {e}") from e


def lot_to_dict(lot: Lot) -> dict:
    """JSON form of a lot; optional fields that are unset are omitted."""
    data = {
        "geoLat": lot.geo_lat,
        "geoLng": lot.geo_lng,
        "geoRotation": lot.geo_rotation,
        "aduOffsetX": lot.adu_offset_x,
        "aduOffsetY": lot.adu_offset_y,
        "aduRotation": lot.adu_rotation,
        "setbackFrontFeet": lot.setbacks.front,
        "setbackBackFeet": lot.setbacks.back,
        "setbackLeftFeet": lot.setbacks.left,
        "setbackRightFeet": lot.setbacks.right,
    }
    if lot.boundary_vertices:
        data["boundaryVertices"] = [{"lat": v.lat, "lng": v.lng} for v in lot.boundary_vertices]
    optional = {
        "lotWidthFeet": lot.lot_width_feet,
        "lotDepthFeet": lot.lot_depth_feet,
        "parcelNumber": lot.parcel_number,
        "address": lot.address,
        "city": lot.city,
        "state": lot.state,
        "zipCode": lot.zip_code,
        "lotAreaSqFt": lot.lot_area_sq_ft,
        "dataSource": lot.data_source,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


def _flag(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be true or false, got {value!r}")
    return value


def view_settings_from_dict(data: dict) -> EditorViewSettings:
    defaults = EditorViewSettings()
    try:
        return EditorViewSettings(
            show_lot_overlay=_flag(data, "showLotOverlay", defaults.show_lot_overlay),
            show_satellite_view=_flag(data, "showSatelliteView", defaults.show_satellite_view),
            show_lot_boundary=_flag(data, "showLotBoundary", defaults.show_lot_boundary),
            show_grid=_flag(data, "showGrid", defaults.show_grid),
            zoom=float(data.get("zoom", defaults.zoom)),
            pan_offset_x=float(data.get("panOffsetX", defaults.pan_offset_x)),
            pan_offset_y=float(data.get("panOffsetY", defaults.pan_offset_y)),
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid editor settings: {e}") from e


def view_settings_to_dict(settings: EditorViewSettings) -> dict:
    return {
        "showLotOverlay": settings.show_lot_overlay,
        "showSatelliteView": settings.show_satellite_view,
        "showLotBoundary": settings.show_lot_boundary,
        "showGrid": settings.show_grid,
        "zoom": settings.zoom,
        "panOffsetX": settings.pan_offset_x,
        "panOffsetY": settings.pan_offset_y,
    }


def snapshot_data_from_dict(data: dict) -> SceneSnapshot:
    """Parse snapshot data: the scene plus optional ``editorSettings`` and ``lotData``."""
    scene = scene_from_dict(data)
    settings = data.get("editorSettings")
    lot = data.get("lotData")
    return SceneSnapshot(
        scene=scene,
        view_settings=view_settings_from_dict(settings) if settings is not None else None,
        lot=lot_from_dict(lot) if lot is not None else None,
    )


def snapshot_data_to_dict(snapshot: SceneSnapshot) -> dict:
    data = scene_to_dict(snapshot.scene)
    if snapshot.view_settings is not None:
        data["editorSettings"] = view_settings_to_dict(snapshot.view_settings)
    if snapshot.lot is not None:
        data["lotData"] = lot_to_dict(snapshot.lot)
    return data


def saved_snapshot_from_dict(data: dict) -> SavedSnapshot:
    """Parse a saved snapshot record.

    Raises:
        ValueError: If the record or its data is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Snapshot must be an object, got {type(data).__name__}")
    try:
        kind = data["type"]
        if kind not in ("auto", "manual"):
            raise ValueError(f"Unknown snapshot type: {kind}")
        return SavedSnapshot(
            id=str(data["id"]),
            timestamp=str(data["timestamp"]),
            kind=kind,
            data=snapshot_data_from_dict(data["data"]),
            label=data.get("label"),
        )
    except KeyError as e:
        raise ValueError(f"Invalid snapshot record: missing {e}") from e


def saved_snapshot_to_dict(snapshot: SavedSnapshot) -> dict:
    data = {
        "id": snapshot.id,
        "timestamp": snapshot.timestamp,
        "type": snapshot.kind,
        "data": snapshot_data_to_dict(snapshot.data),
    }
    if snapshot.label is not None:
        data["label"] = snapshot.label
    return data


def load_scene(path: str) -> Scene:
    """Load a scene from a JSON file.

    Args:
        path: Path to the JSON file containing scene data.

    Returns:
        The parsed Scene.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return scene_from_dict(data)


def save_scene(scene: Scene, path: str) -> None:
    """Save a scene to a JSON file, creating parent directories as needed."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(scene_to_dict(scene), f, indent=2)


def load_lot(path: str) -> Lot:
    """Load a lot from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return lot_from_dict(data)

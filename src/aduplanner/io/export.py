"""Export projection of a floor plan.

Export collaborators (PDF, PNG, JSON writers) consume a flat, read-only view
of the scene. Room areas are recomputed from the current vertices when the
projection is built, so the schedule always matches the geometry.
"""

from __future__ import annotations

from typing import List, Optional

from typing_extensions import TypedDict

from ..config import CanvasConfig
from ..core.catalog import DOOR_CONFIGS, FURNITURE_CONFIG, ROOM_CONFIGS, WINDOW_CONFIGS
from ..core.model import Lot, Scene
from ..geom.polygon import bounding_box, polygon_area_sqft
from .parser import lot_to_dict, scene_to_dict


class RoomEntry(TypedDict):
    id: str
    name: str
    type: str
    label: str
    area: int
    width_feet: float
    depth_feet: float


class OpeningEntry(TypedDict):
    id: str
    type: str
    label: str
    width_feet: float


class FurnitureEntry(TypedDict):
    id: str
    type: str
    name: str
    category: str


class ExportSnapshot(TypedDict):
    rooms: List[RoomEntry]
    doors: List[OpeningEntry]
    windows: List[OpeningEntry]
    furniture: List[FurnitureEntry]
    total_room_area: int
    adu_area: int
    lot: Optional[dict]
    scene: dict


def _label(configs: dict, key: str, fallback: str) -> str:
    config = configs.get(key)
    return config.label if config is not None else fallback


def build_export_snapshot(scene: Scene, lot: Optional[Lot], config: CanvasConfig) -> ExportSnapshot:
    """Build the export projection.

    Args:
        scene: Scene to export.
        lot: Lot the ADU sits on, if any.
        config: Canvas dimensions for pixel to feet conversion.

    Returns:
        Schedules of rooms, doors, windows and furniture, area totals, the lot
        summary and the scene itself with refreshed room areas.
    """
    ppf = config.pixels_per_foot

    rooms: List[RoomEntry] = []
    refreshed = []
    for room in scene.rooms:
        area = round(polygon_area_sqft(room.vertices, ppf))
        bbox = bounding_box(room.vertices)
        rooms.append(
            RoomEntry(
                id=room.id,
                name=room.name,
                type=room.type,
                label=_label(ROOM_CONFIGS, room.type, room.type),
                area=area,
                width_feet=bbox.width / ppf,
                depth_feet=bbox.height / ppf,
            )
        )
        refreshed.append(area)

    scene_data = scene_to_dict(scene)
    for room_data, area in zip(scene_data["rooms"], refreshed):
        room_data["area"] = area

    furniture: List[FurnitureEntry] = []
    for item in scene.furniture:
        catalog = FURNITURE_CONFIG.get(item.type)
        furniture.append(
            FurnitureEntry(
                id=item.id,
                type=item.type,
                name=catalog.name if catalog else item.type,
                category=catalog.category if catalog else "other",
            )
        )

    return ExportSnapshot(
        rooms=rooms,
        doors=[
            OpeningEntry(id=d.id, type=d.type, label=_label(DOOR_CONFIGS, d.type, d.type), width_feet=d.width)
            for d in scene.doors
        ],
        windows=[
            OpeningEntry(id=w.id, type=w.type, label=_label(WINDOW_CONFIGS, w.type, w.type), width_feet=w.width)
            for w in scene.windows
        ],
        furniture=furniture,
        total_room_area=sum(refreshed),
        adu_area=round(polygon_area_sqft(scene.adu_boundary, ppf)),
        lot=lot_to_dict(lot) if lot is not None else None,
        scene=scene_data,
    )

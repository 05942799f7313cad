"""Fixed catalogs for rooms, openings and furniture.

Dimensions follow standard architectural sizes in feet; room minimums follow
the California ADU building code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

# ADU size limits in square feet
ADU_MIN_AREA = 300
ADU_MAX_AREA = 1200
ADU_DEFAULT_AREA = 600
MAX_BEDROOMS = 3


@dataclass(frozen=True)
class RoomConfig:
    label: str
    color: str
    min_size: float


@dataclass(frozen=True)
class DoorConfig:
    label: str
    width: float


@dataclass(frozen=True)
class WindowConfig:
    label: str
    width: float
    height: float


@dataclass(frozen=True)
class FurnitureConfig:
    name: str
    width: float
    height: float
    category: str


ROOM_CONFIGS: Dict[str, RoomConfig] = {
    "bedroom": RoomConfig("Bedroom", "#dbeafe", 70),
    "bathroom": RoomConfig("Full Bath", "#fce7f3", 35),
    "kitchen": RoomConfig("Kitchen", "#fef3c7", 50),
    "living": RoomConfig("Living Room", "#dcfce7", 120),
    "dining": RoomConfig("Dining Area", "#fef9c3", 64),
    "corridor": RoomConfig("Hallway", "#e0e7ff", 12),
    "other": RoomConfig("Other", "#f3f4f6", 20),
}

DOOR_CONFIGS: Dict[str, DoorConfig] = {
    "single": DoorConfig("Single Door", 3),
    "double": DoorConfig("Double Door", 6),
    "sliding": DoorConfig("Sliding Door", 6),
    "french": DoorConfig("French Door", 5),
    "opening": DoorConfig("Open Passage", 4),
}

WINDOW_CONFIGS: Dict[str, WindowConfig] = {
    "standard": WindowConfig("Standard Window", 3, 4),
    "bay": WindowConfig("Bay Window", 6, 5),
    "picture": WindowConfig("Picture Window", 5, 5),
    "sliding": WindowConfig("Sliding Window", 4, 3),
}

FURNITURE_CONFIG: Dict[str, FurnitureConfig] = {
    # Bedroom
    "bed-double": FurnitureConfig("Double Bed", 4.5, 6.5, "bedroom"),
    "bed-single": FurnitureConfig("Single Bed", 3, 6.5, "bedroom"),
    # Living room
    "sofa-3seat": FurnitureConfig("3-Seat Sofa", 7, 3, "living"),
    "sofa-2seat": FurnitureConfig("2-Seat Sofa", 5, 3, "living"),
    "armchair": FurnitureConfig("Armchair", 3, 3, "living"),
    "table-dining": FurnitureConfig("Dining Table", 5, 3, "living"),
    "table-coffee": FurnitureConfig("Coffee Table", 4, 2, "living"),
    # Bathroom
    "toilet": FurnitureConfig("Toilet", 1.5, 2.5, "bathroom"),
    "sink": FurnitureConfig("Sink", 2, 1.5, "bathroom"),
    "shower": FurnitureConfig("Shower", 3, 3, "bathroom"),
    "bathtub": FurnitureConfig("Bathtub", 5, 2.5, "bathroom"),
    # Kitchen
    "stove": FurnitureConfig("Stove", 2.5, 2, "kitchen"),
    "refrigerator": FurnitureConfig("Refrigerator", 3, 2.5, "kitchen"),
    "dishwasher": FurnitureConfig("Dishwasher", 2, 2, "kitchen"),
    # Office
    "desk": FurnitureConfig("Desk", 5, 2.5, "office"),
    "chair": FurnitureConfig("Chair", 2, 2, "office"),
}


def _lookup(catalog: Dict, key: str, what: str):
    if key not in catalog:
        raise ValueError(f"Unknown {what} type: {key}")
    return catalog[key]


def room_config(room_type: str) -> RoomConfig:
    return _lookup(ROOM_CONFIGS, room_type, "room")


def door_config(door_type: str) -> DoorConfig:
    return _lookup(DOOR_CONFIGS, door_type, "door")


def window_config(window_type: str) -> WindowConfig:
    return _lookup(WINDOW_CONFIGS, window_type, "window")


def furniture_config(furniture_type: str) -> FurnitureConfig:
    return _lookup(FURNITURE_CONFIG, furniture_type, "furniture")

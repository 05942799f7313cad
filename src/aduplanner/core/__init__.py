"""Core data models for ADU planning."""

from .model import (
    Door,
    EditorViewSettings,
    EntityKind,
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

__all__ = [
    "Door",
    "EditorViewSettings",
    "EntityKind",
    "Furniture",
    "GeoVertex",
    "Lot",
    "Point",
    "Room",
    "SavedSnapshot",
    "Scene",
    "SceneSnapshot",
    "Setbacks",
    "Window",
]

"""ADU Planner - geometry, selection and history engine for ADU floor plans."""

__version__ = "0.1.0"

from .core.model import Door, Furniture, Lot, Point, Room, Scene, Window

__all__ = ["Door", "Furniture", "Lot", "Point", "Room", "Scene", "Window"]

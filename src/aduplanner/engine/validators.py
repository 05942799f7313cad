"""Post-apply validation functions for scene operations.

This module provides validation functions that are executed after applying
operations to ensure the scene keeps its structural invariants.
"""

from __future__ import annotations

from typing import Iterable

from ..core.model import EntityKind, Scene

MIN_POLYGON_VERTICES = 3


class InvalidOperation(Exception):
    """Raised when an operation violates scene invariants."""

    pass


def validate_unique_ids(scene: Scene) -> bool:
    """Validate that ids are unique within each entity kind."""
    for kind in EntityKind:
        ids = [entity.id for entity in scene.entities(kind)]
        if len(ids) != len(set(ids)):
            return False
    return True


def validate_polygons(scene: Scene) -> bool:
    """Validate that every room and the ADU boundary keep at least three vertices."""
    if len(scene.adu_boundary) < MIN_POLYGON_VERTICES:
        return False
    return all(len(room.vertices) >= MIN_POLYGON_VERTICES for room in scene.rooms)


def validate_rotations(scene: Scene) -> bool:
    """Validate that rotations are normalized to [0, 360)."""
    entities: Iterable = (*scene.doors, *scene.windows, *scene.furniture)
    return all(0 <= entity.rotation < 360 for entity in entities)


def validate_all(scene: Scene) -> bool:
    """Run all validators on the scene.

    Args:
        scene: The scene to validate.

    Returns:
        True if all validations pass.

    Raises:
        InvalidOperation: If any validation fails with details about the failure.
    """
    if not validate_unique_ids(scene):
        raise InvalidOperation("Duplicate entity ids detected")

    if not validate_polygons(scene):
        raise InvalidOperation(
            f"Polygon validation failed: fewer than {MIN_POLYGON_VERTICES} vertices"
        )

    if not validate_rotations(scene):
        raise InvalidOperation("Rotation validation failed: rotation outside [0, 360)")

    return True

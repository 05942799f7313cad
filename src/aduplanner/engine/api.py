"""Core API for scene operations.

This module provides the main interface for applying operations to scenes.
Operations that would break a scene invariant are rejected silently: the
caller gets the unchanged scene back.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..config import CANVAS_DEFAULTS, CanvasConfig
from ..core.model import Lot, Scene
from ..io.export import ExportSnapshot
from ..io.export import build_export_snapshot as _build_export_snapshot
from .ops import get_operation
from .validators import InvalidOperation, validate_all

LOGGER = logging.getLogger(__name__)


def apply(scene: Scene, operation: dict, config: CanvasConfig = CANVAS_DEFAULTS) -> Scene:
    """Apply an operation to a scene and return the modified scene.

    Args:
        scene: The scene to modify.
        operation: Dictionary describing the operation, e.g.
            ``{"op": "rotate_room", "id": "r1"}``.
        config: Canvas dimensions used for snapping and clamping.

    Returns:
        A new Scene with the operation applied, or ``scene`` itself when the
        operation was rejected.

    Raises:
        ValueError: If the operation type is not recognized or a parameter is
            malformed.
    """
    if not isinstance(operation, dict):
        raise ValueError(f"Operation must be an object, got {type(operation).__name__}")

    operation_type = operation.get("op")

    if operation_type is None:
        raise ValueError("Operation must have an 'op' field")

    try:
        op = get_operation(operation_type)
    except KeyError:
        raise ValueError(f"Unknown operation type: {operation_type}")

    params = {k: v for k, v in operation.items() if k != "op"}

    try:
        op.precheck(scene, config, **params)
        new_scene = op.apply(scene, config, **params)
        validate_all(new_scene)
    except InvalidOperation as e:
        LOGGER.debug("Rejected %s: %s", operation_type, e)
        return scene
    except (TypeError, KeyError) as e:
        raise ValueError(f"Malformed {operation_type} operation: {e}") from e

    return new_scene


def apply_operations(
    scene: Scene, operations: Iterable[dict], config: CanvasConfig = CANVAS_DEFAULTS
) -> Scene:
    """Apply operations sequentially, each building on the previous result."""
    for operation in operations:
        scene = apply(scene, operation, config)
    return scene


def build_export_snapshot(
    scene: Scene, lot: Optional[Lot] = None, config: CanvasConfig = CANVAS_DEFAULTS
) -> ExportSnapshot:
    """Flattened, read-only projection of the scene for export collaborators.

    Room areas are recomputed from the current vertices.
    """
    return _build_export_snapshot(scene, lot, config)

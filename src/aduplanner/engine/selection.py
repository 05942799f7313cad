"""Selection and multi-entity transform controller.

The controller owns the selection (a single entity, or sets of ids per entity
kind), the marquee rectangle while it is being dragged, and the preview delta
of a multi-drag. A multi-drag only moves the preview while the pointer moves;
the scene is changed once, on release, through the ``move_batch`` operation.

Marquee and multi-drag gestures snapshot the selection when they begin so
that ``cancel`` restores it exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from ..config import CANVAS_DEFAULTS, MARQUEE_MIN_SIZE, CanvasConfig
from ..core.model import EntityKind, Furniture, Opening, Point, Scene
from ..geom.polygon import BoundingBox, bounding_box, rectangle_vertices, rotate_point
from ..geo.transform import Frame
from .api import apply

LOGGER = logging.getLogger(__name__)

# Plan-view depth of doors and windows, used for hit-testing
OPENING_DEPTH_FEET = 0.5


class SelectionState(str, Enum):
    IDLE = "idle"
    SINGLE_SELECTED = "single-selected"
    MULTI_SELECTED = "multi-selected"
    MARQUEE_DRAGGING = "marquee-dragging"
    MULTI_DRAGGING = "multi-dragging"


@dataclass(frozen=True)
class SingleSelection:
    kind: EntityKind
    id: str


@dataclass(frozen=True)
class MultiSelection:
    """Selected ids per entity kind."""

    rooms: FrozenSet[str] = frozenset()
    doors: FrozenSet[str] = frozenset()
    windows: FrozenSet[str] = frozenset()
    furniture: FrozenSet[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not (self.rooms or self.doors or self.windows or self.furniture)

    def ids(self, kind: EntityKind) -> FrozenSet[str]:
        return getattr(self, _FIELD_BY_KIND[EntityKind(kind)])

    def with_ids(self, kind: EntityKind, ids) -> MultiSelection:
        return replace(self, **{_FIELD_BY_KIND[EntityKind(kind)]: frozenset(ids)})

    def as_batch(self) -> Dict[str, list]:
        """Keyword arguments for the batch operations."""
        return {
            "rooms": sorted(self.rooms),
            "doors": sorted(self.doors),
            "windows": sorted(self.windows),
            "furniture": sorted(self.furniture),
        }


_FIELD_BY_KIND = {
    EntityKind.ROOM: "rooms",
    EntityKind.DOOR: "doors",
    EntityKind.WINDOW: "windows",
    EntityKind.FURNITURE: "furniture",
}


@dataclass(frozen=True)
class Marquee:
    """Marquee rectangle corners in canvas pixels."""

    start: Point
    end: Point

    @property
    def is_click(self) -> bool:
        """Releases smaller than the threshold on either axis are clicks."""
        return (
            abs(self.end.x - self.start.x) < MARQUEE_MIN_SIZE
            or abs(self.end.y - self.start.y) < MARQUEE_MIN_SIZE
        )


@dataclass(frozen=True)
class _GestureSnapshot:
    single: Optional[SingleSelection]
    multi: MultiSelection
    preview_delta: Optional[Point]


def item_footprint(item: Opening | Furniture, pixels_per_foot: float) -> BoundingBox:
    """Axis-aligned bounds of a door, window or furniture item on the canvas.

    Furniture uses its width and depth; doors and windows are treated as a
    thin strip of their width along the wall.
    """
    if isinstance(item, Furniture):
        depth = item.height
    else:
        depth = OPENING_DEPTH_FEET
    width_px = item.width * pixels_per_foot
    depth_px = depth * pixels_per_foot
    corners = rectangle_vertices(
        item.position.x - width_px / 2, item.position.y - depth_px / 2, width_px, depth_px
    )
    if item.rotation % 360:
        corners = tuple(rotate_point(c, item.position, item.rotation) for c in corners)
    return bounding_box(corners)


def entities_in_rect(scene: Scene, rect: BoundingBox, pixels_per_foot: float) -> MultiSelection:
    """Ids of every entity whose bounding box intersects ``rect``."""
    return MultiSelection(
        rooms=frozenset(r.id for r in scene.rooms if bounding_box(r.vertices).intersects(rect)),
        doors=frozenset(d.id for d in scene.doors if item_footprint(d, pixels_per_foot).intersects(rect)),
        windows=frozenset(w.id for w in scene.windows if item_footprint(w, pixels_per_foot).intersects(rect)),
        furniture=frozenset(
            f.id for f in scene.furniture if item_footprint(f, pixels_per_foot).intersects(rect)
        ),
    )


@dataclass
class SelectionController:
    """Selection state machine for the editor.

    Attributes:
        config: Canvas dimensions used for footprints and snapping.
        single: The single selected entity, if any.
        multi: The multi-selection sets.
        marquee: The marquee rectangle while dragging.
        preview_delta: Drag offset shown for every multi-selected entity
            while a multi-drag is in progress.
    """

    config: CanvasConfig = CANVAS_DEFAULTS
    single: Optional[SingleSelection] = None
    multi: MultiSelection = field(default_factory=MultiSelection)
    marquee: Optional[Marquee] = None
    preview_delta: Optional[Point] = None
    _drag_start: Optional[Point] = field(default=None, repr=False)
    _saved: Optional[_GestureSnapshot] = field(default=None, repr=False)

    @property
    def state(self) -> SelectionState:
        if self.marquee is not None:
            return SelectionState.MARQUEE_DRAGGING
        if self.preview_delta is not None:
            return SelectionState.MULTI_DRAGGING
        if not self.multi.is_empty:
            return SelectionState.MULTI_SELECTED
        if self.single is not None:
            return SelectionState.SINGLE_SELECTED
        return SelectionState.IDLE

    @property
    def single_transform_enabled(self) -> bool:
        """Resize, rotate and vertex drags act on one entity only when nothing is multi-selected."""
        return self.multi.is_empty

    def _save_gesture(self) -> None:
        self._saved = _GestureSnapshot(self.single, self.multi, self.preview_delta)

    def _end_gesture(self) -> None:
        self.marquee = None
        self.preview_delta = None
        self._drag_start = None
        self._saved = None

    # Direct selection

    def select_single(self, kind: EntityKind, entity_id: str) -> None:
        self.single = SingleSelection(EntityKind(kind), entity_id)
        self.multi = MultiSelection()

    def clear_single(self) -> None:
        self.single = None

    def clear(self) -> None:
        self.single = None
        self.multi = MultiSelection()

    def prune(self, scene: Scene) -> None:
        """Drop selected ids that no longer exist in the scene."""
        if self.single is not None and scene.find(self.single.kind, self.single.id) is None:
            self.single = None
        multi = self.multi
        for kind in EntityKind:
            multi = multi.with_ids(kind, self.multi.ids(kind) & scene.ids(kind))
        self.multi = multi

    # Marquee

    def begin_marquee(self, point: Point, mode: str = "select") -> bool:
        """Start a marquee on empty canvas.

        Returns:
            False when not in select mode or another gesture is running.
        """
        if mode != "select" or self.state in (
            SelectionState.MARQUEE_DRAGGING,
            SelectionState.MULTI_DRAGGING,
        ):
            return False
        self._save_gesture()
        self.marquee = Marquee(point, point)
        return True

    def update_marquee(self, point: Point) -> None:
        if self.marquee is not None:
            self.marquee = Marquee(self.marquee.start, point)

    def end_marquee(self, point: Point, scene: Scene, frame: Frame) -> MultiSelection:
        """Finish the marquee and select what it touches.

        The rectangle is mapped into the scene's frame before testing, so a
        rotated ADU on a lot is hit-tested in its own coordinates.

        Args:
            point: Release point in canvas pixels.
            scene: Scene to hit-test.
            frame: Frame the scene geometry is expressed in.

        Returns:
            The resulting multi-selection. A click-sized marquee selects
            nothing and clears the current selection, like a click on empty
            canvas.
        """
        if self.marquee is None:
            return self.multi

        marquee = Marquee(self.marquee.start, point)
        if marquee.is_click:
            self._end_gesture()
            self.clear()
            return self.multi

        corners = rectangle_vertices(
            min(marquee.start.x, marquee.end.x),
            min(marquee.start.y, marquee.end.y),
            abs(marquee.end.x - marquee.start.x),
            abs(marquee.end.y - marquee.start.y),
        )
        local_rect = bounding_box([frame.to_local(c) for c in corners])

        self.multi = entities_in_rect(scene, local_rect, self.config.pixels_per_foot)
        self.single = None
        self._end_gesture()
        LOGGER.debug("Marquee selected %s", self.multi.as_batch())
        return self.multi

    # Multi-drag

    def begin_multi_drag(self, point: Point) -> bool:
        """Start dragging the multi-selection from ``point``."""
        if self.multi.is_empty or self.state is SelectionState.MULTI_DRAGGING:
            return False
        self._save_gesture()
        self._drag_start = point
        self.preview_delta = Point(0.0, 0.0)
        return True

    def update_multi_drag(self, point: Point) -> Optional[Point]:
        """Move the preview; the scene is untouched."""
        if self._drag_start is None:
            return None
        self.preview_delta = Point(point.x - self._drag_start.x, point.y - self._drag_start.y)
        return self.preview_delta

    def end_multi_drag(self, point: Point, scene: Scene, furniture_snap_mode: Any = None) -> Scene:
        """Commit the drag once for every selected entity.

        Each entity snaps to its own granularity. A release without movement
        cancels the gesture and returns the scene unchanged.
        """
        if self._drag_start is None:
            return scene

        dx = point.x - self._drag_start.x
        dy = point.y - self._drag_start.y
        if dx == 0 and dy == 0:
            self.cancel()
            return scene

        operation = {"op": "move_batch", "dx": dx, "dy": dy, **self.multi.as_batch()}
        if furniture_snap_mode is not None:
            operation["furniture_snap_mode"] = furniture_snap_mode
        new_scene = apply(scene, operation, self.config)
        self._end_gesture()
        return new_scene

    def cancel(self) -> None:
        """Abort the running gesture and restore the selection it started from."""
        saved = self._saved
        self._end_gesture()
        if saved is not None:
            self.single = saved.single
            self.multi = saved.multi
            self.preview_delta = saved.preview_delta

    def preview_position(self, kind: EntityKind, entity_id: str, position: Point) -> Point:
        """Where a renderer should draw an entity during a multi-drag."""
        if self.preview_delta is None or entity_id not in self.multi.ids(kind):
            return position
        return Point(position.x + self.preview_delta.x, position.y + self.preview_delta.y)

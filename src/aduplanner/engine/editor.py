"""Editor state shared by every interaction.

One ``EditorState`` holds the scene, lot, view settings, placement mode,
selection controller and history. Callers pass the current time into the
methods that schedule debounced work and call ``tick`` from their event loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ..config import CANVAS_DEFAULTS, SETTINGS_DEBOUNCE_SECONDS, CanvasConfig
from ..core.model import EditorViewSettings, Lot, PlacementMode, Point, Scene, SceneSnapshot
from ..geo.transform import Frame, frame_for
from ..geom.snap import SnapMode
from ..io.settings import SettingsStore
from . import api
from .history import Debouncer, HistoryManager
from .ops import empty_scene, new_id
from .selection import SelectionController

LOGGER = logging.getLogger(__name__)


@dataclass
class EditorState:
    """Mutable state of one editing session.

    Attributes:
        config: Canvas dimensions.
        scene: Current scene; defaults to an empty scene with the default
            ADU boundary.
        lot: Lot the ADU is placed on, if any.
        view_settings: Grid, overlay, zoom and pan settings.
        placement_mode: Active tool.
        furniture_snap_mode: Granularity used when furniture moves.
        project_id: Key for persisted view settings.
        settings_store: Where view settings are persisted.
    """

    config: CanvasConfig = CANVAS_DEFAULTS
    scene: Optional[Scene] = None
    lot: Optional[Lot] = None
    view_settings: EditorViewSettings = field(default_factory=EditorViewSettings)
    placement_mode: PlacementMode = "select"
    furniture_snap_mode: SnapMode = SnapMode.GRID
    project_id: Optional[str] = None
    settings_store: Optional[SettingsStore] = None
    selection: SelectionController = field(init=False)
    history: HistoryManager = field(init=False)

    def __post_init__(self) -> None:
        if self.scene is None:
            self.scene = empty_scene(self.config)
        self.selection = SelectionController(self.config)
        self.history = HistoryManager(on_restore=self._apply_history_entry)
        self.history.reset(self.scene)
        self._settings_debouncer: Debouncer[EditorViewSettings] = Debouncer(
            SETTINGS_DEBOUNCE_SECONDS, self._persist_view_settings
        )

    @property
    def frame(self) -> Frame:
        """Frame the scene geometry is hit-tested in."""
        return frame_for(self.lot, self.config.pixels_per_foot, self.config.canvas_center)

    def _commit(self, scene: Scene, now: float) -> bool:
        if scene is self.scene:
            return False
        self.scene = scene
        self.selection.prune(scene)
        self.history.notify_change(scene, now)
        return True

    def apply(self, operation: dict, now: float = 0.0) -> bool:
        """Apply a scene operation and schedule a history capture.

        Returns:
            False when the operation was rejected.
        """
        return self._commit(api.apply(self.scene, operation, self.config), now)

    def create(self, operation: dict, now: float = 0.0) -> Optional[str]:
        """Apply an ``add_*`` operation and return the new entity's id."""
        entity_id = operation.get("id") or new_id()
        if self.apply({**operation, "id": entity_id}, now):
            return entity_id
        return None

    def tick(self, now: float) -> None:
        """Run debounced work whose window has elapsed."""
        self.history.poll(now)
        self._settings_debouncer.poll(now)

    def _apply_history_entry(self, scene: Scene) -> None:
        self.scene = scene
        self.selection.clear_single()
        self.selection.prune(scene)

    def undo(self) -> bool:
        return self.history.undo() is not None

    def redo(self) -> bool:
        return self.history.redo() is not None

    def snapshot(self) -> SceneSnapshot:
        return SceneSnapshot(scene=self.scene, view_settings=self.view_settings, lot=self.lot)

    def restore(self, data: SceneSnapshot) -> None:
        """Replace the whole state with a saved snapshot and clear the selection."""
        self.selection.cancel()
        self.selection.clear()
        self.scene = data.scene
        if data.view_settings is not None:
            self.view_settings = data.view_settings
        if data.lot is not None:
            self.lot = data.lot
        self.history.flush()
        self.history.capture(data.scene)
        LOGGER.info("Restored scene with %d rooms", len(data.scene.rooms))

    def rotate_selected(self, now: float = 0.0) -> bool:
        """Rotate the single selected entity by 90 degrees."""
        single = self.selection.single
        if single is None or not self.selection.single_transform_enabled:
            return False
        return self.apply({"op": f"rotate_{single.kind.value}", "id": single.id}, now)

    def delete_selected(self, now: float = 0.0) -> bool:
        """Delete the multi-selection, or the single selection when there is none."""
        if not self.selection.multi.is_empty:
            operation = {"op": "delete_batch", **self.selection.multi.as_batch()}
        elif self.selection.single is not None:
            single = self.selection.single
            operation = {"op": f"delete_{single.kind.value}", "id": single.id}
        else:
            return False
        changed = self.apply(operation, now)
        self.selection.clear()
        return changed

    def commit_multi_drag(self, point: Point, now: float = 0.0) -> bool:
        scene = self.selection.end_multi_drag(point, self.scene, self.furniture_snap_mode)
        return self._commit(scene, now)

    def end_marquee(self, point: Point) -> None:
        self.selection.end_marquee(point, self.scene, self.frame)

    def set_lot(self, lot: Optional[Lot]) -> None:
        self.lot = lot

    def update_view_settings(self, settings: EditorViewSettings, now: float) -> None:
        """Change view settings; persistence is debounced."""
        self.view_settings = settings
        self._settings_debouncer.notify(settings, now)

    def load_view_settings(self) -> None:
        if self.settings_store is None or self.project_id is None:
            return
        stored = self.settings_store.get(self.project_id)
        if stored is not None:
            self.view_settings = stored

    def _persist_view_settings(self, settings: Any) -> None:
        if self.settings_store is None or self.project_id is None:
            return
        self.settings_store.set(self.project_id, settings)

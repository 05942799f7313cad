"""Version snapshots with a remote store and a local cache.

Saved snapshots are explicit recovery points, separate from undo history.
Two capped lists are kept, newest first: periodic auto-saves and labeled
manual saves. Every remote call is tried first; when it fails the bridge
falls back to the local cache so the list the user sees still changes.
Remote failures are logged and never reach the scene.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol

from ..config import AUTO_SAVE_INTERVAL_SECONDS, MAX_AUTO_SAVES, MAX_MANUAL_SAVES
from ..core.model import Lot, SavedSnapshot, SceneSnapshot, SnapshotKind
from ..engine.validators import InvalidOperation, validate_all
from .parser import (
    lot_to_dict,
    saved_snapshot_from_dict,
    saved_snapshot_to_dict,
    snapshot_data_from_dict,
    snapshot_data_to_dict,
)

LOGGER = logging.getLogger(__name__)


class RemoteSnapshotStore(Protocol):
    """Remote snapshot API. Every method raises on failure."""

    async def create_snapshot(self, kind: SnapshotKind, data: dict, label: Optional[str] = None) -> dict:
        """Store a snapshot and return its record (``id``, ``createdAt``)."""
        ...

    async def list_snapshots(self) -> dict:
        """Return ``{"autoSaves": [...], "manualSaves": [...]}`` of records."""
        ...

    async def get_snapshot(self, snapshot_id: str) -> dict:
        ...

    async def delete_snapshot(self, snapshot_id: str) -> None:
        ...


class LotStore(Protocol):
    async def save(self, lot_fields: dict) -> Lot:
        ...


@dataclass(frozen=True)
class VersionHistory:
    """Saved snapshots, newest first."""

    auto_saves: tuple[SavedSnapshot, ...] = ()
    manual_saves: tuple[SavedSnapshot, ...] = ()

    def find(self, snapshot_id: str) -> Optional[SavedSnapshot]:
        for snapshot in (*self.auto_saves, *self.manual_saves):
            if snapshot.id == snapshot_id:
                return snapshot
        return None

    def with_snapshot(self, snapshot: SavedSnapshot) -> VersionHistory:
        """Prepend a snapshot to its list and trim the list to its cap."""
        if snapshot.kind == "auto":
            return replace(self, auto_saves=((snapshot,) + self.auto_saves)[:MAX_AUTO_SAVES])
        return replace(self, manual_saves=((snapshot,) + self.manual_saves)[:MAX_MANUAL_SAVES])

    def without(self, snapshot_id: str) -> VersionHistory:
        return VersionHistory(
            auto_saves=tuple(s for s in self.auto_saves if s.id != snapshot_id),
            manual_saves=tuple(s for s in self.manual_saves if s.id != snapshot_id),
        )


def history_to_dict(history: VersionHistory) -> dict:
    return {
        "autoSaves": [saved_snapshot_to_dict(s) for s in history.auto_saves],
        "manualSaves": [saved_snapshot_to_dict(s) for s in history.manual_saves],
    }


def _parse_records(records: List[Any], source: str) -> tuple[SavedSnapshot, ...]:
    parsed = []
    for record in records:
        try:
            parsed.append(saved_snapshot_from_dict(record))
        except ValueError as e:
            LOGGER.warning("Skipping malformed snapshot from %s: %s", source, e)
    return tuple(parsed)


def history_from_dict(data: dict, source: str = "cache") -> VersionHistory:
    """Parse a history mapping, skipping malformed records."""
    return VersionHistory(
        auto_saves=_parse_records(data.get("autoSaves", []), source),
        manual_saves=_parse_records(data.get("manualSaves", []), source),
    )


def _remote_record(record: dict, kind: SnapshotKind) -> dict:
    """Normalize a remote record (``createdAt``) to the local record shape."""
    return {
        "id": record["id"],
        "timestamp": record.get("createdAt") or record.get("timestamp"),
        "type": kind,
        "label": record.get("label"),
        "data": record.get("data"),
    }


class JsonFileCache:
    """Local snapshot cache stored as one JSON file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load(self) -> VersionHistory:
        if not self.path.exists():
            return VersionHistory()
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            LOGGER.error("Error loading snapshot cache %s: %s", self.path, e)
            return VersionHistory()
        if not isinstance(data, dict):
            LOGGER.error("Snapshot cache %s is not an object", self.path)
            return VersionHistory()
        return history_from_dict(data)

    def store(self, history: VersionHistory) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(history_to_dict(history), f, indent=2)
        except OSError as e:
            LOGGER.warning("Could not write snapshot cache %s: %s", self.path, e)


class SnapshotBridge:
    """Save, list, restore and delete version snapshots.

    Args:
        capture: Returns the current scene with view settings and lot.
        on_restore: Replaces the editor state with a restored snapshot.
        cache: Local cache (``load``/``store``).
        remote: Remote store; None works from the cache alone.
        lot_store: Receives the lot fields of a restored snapshot.
        auto_save_interval: Minimum seconds between auto-saves.
    """

    def __init__(
        self,
        capture: Callable[[], SceneSnapshot],
        on_restore: Callable[[SceneSnapshot], None],
        cache: JsonFileCache,
        remote: Optional[RemoteSnapshotStore] = None,
        lot_store: Optional[LotStore] = None,
        auto_save_interval: float = AUTO_SAVE_INTERVAL_SECONDS,
    ):
        self.capture = capture
        self.on_restore = on_restore
        self.cache = cache
        self.remote = remote
        self.lot_store = lot_store
        self.auto_save_interval = auto_save_interval
        self.history = VersionHistory()
        self.last_auto_save: Optional[float] = None

    def _record(self, snapshot: SavedSnapshot) -> SavedSnapshot:
        self.history = self.history.with_snapshot(snapshot)
        self.cache.store(self.history)
        return snapshot

    async def _save(self, kind: SnapshotKind, label: Optional[str] = None) -> SavedSnapshot:
        data = self.capture()

        if self.remote is not None:
            try:
                created = await self.remote.create_snapshot(kind, snapshot_data_to_dict(data), label)
                snapshot = SavedSnapshot(
                    id=str(created["id"]),
                    timestamp=str(created.get("createdAt") or _now_iso()),
                    kind=kind,
                    data=data,
                    label=label,
                )
                LOGGER.info("Saved %s snapshot %s (remote)", kind, snapshot.id)
            except Exception as e:
                LOGGER.error("Error saving %s snapshot to remote store: %s", kind, e)
            else:
                return self._record(snapshot)

        snapshot = SavedSnapshot(id=str(uuid.uuid4()), timestamp=_now_iso(), kind=kind, data=data, label=label)
        LOGGER.info("Saved %s snapshot %s (local)", kind, snapshot.id)
        return self._record(snapshot)

    async def save_auto(self, now: float) -> bool:
        """Save an auto snapshot if the auto-save interval has elapsed.

        Args:
            now: Current time in seconds.

        Returns:
            True if a snapshot was saved.
        """
        if self.last_auto_save is not None and now - self.last_auto_save < self.auto_save_interval:
            return False
        await self._save("auto")
        self.last_auto_save = now
        return True

    async def save_manual(self, label: Optional[str] = None) -> SavedSnapshot:
        return await self._save("manual", label)

    async def load(self) -> VersionHistory:
        """Load the snapshot lists, from the remote store when it answers."""
        if self.remote is not None:
            try:
                response = await self.remote.list_snapshots()
                self.history = VersionHistory(
                    auto_saves=_parse_records(
                        [_remote_record(r, "auto") for r in response.get("autoSaves", [])], "remote"
                    ),
                    manual_saves=_parse_records(
                        [_remote_record(r, "manual") for r in response.get("manualSaves", [])], "remote"
                    ),
                )
                self.cache.store(self.history)
                return self.history
            except Exception as e:
                LOGGER.error("Error loading snapshots from remote store, using local cache: %s", e)

        self.history = self.cache.load()
        return self.history

    async def _fetch(self, snapshot_id: str) -> Optional[SceneSnapshot]:
        local = self.history.find(snapshot_id) or self.cache.load().find(snapshot_id)
        if local is not None:
            return local.data
        if self.remote is None:
            return None
        try:
            record = await self.remote.get_snapshot(snapshot_id)
        except Exception as e:
            LOGGER.error("Error fetching snapshot %s: %s", snapshot_id, e)
            return None
        try:
            return snapshot_data_from_dict(record["data"] if "data" in record else record)
        except (TypeError, ValueError) as e:
            LOGGER.error("Snapshot %s is malformed: %s", snapshot_id, e)
            return None

    async def restore(self, snapshot_id: str) -> bool:
        """Replace the editor state with a saved snapshot.

        The snapshot is looked up in the loaded history and the local cache,
        then remotely. A missing or
        malformed snapshot leaves the scene untouched. When the snapshot
        carries lot data it is also written to the lot store.

        Returns:
            True if the snapshot was restored.
        """
        data = await self._fetch(snapshot_id)
        if data is None:
            return False

        try:
            validate_all(data.scene)
        except InvalidOperation as e:
            LOGGER.error("Snapshot %s has an invalid scene: %s", snapshot_id, e)
            return False

        self.on_restore(data)
        LOGGER.info("Restored snapshot %s", snapshot_id)

        if data.lot is not None and self.lot_store is not None:
            try:
                await self.lot_store.save(lot_to_dict(data.lot))
            except Exception as e:
                LOGGER.error("Error saving restored lot data: %s", e)
        return True

    async def delete(self, snapshot_id: str) -> None:
        """Delete a snapshot remotely (best effort) and locally."""
        if self.remote is not None:
            try:
                await self.remote.delete_snapshot(snapshot_id)
            except Exception as e:
                LOGGER.error("Error deleting snapshot %s from remote store: %s", snapshot_id, e)

        self.history = self.history.without(snapshot_id)
        self.cache.store(self.history)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

"""Tests for io/snapshots.py with in-memory remote and lot stores."""
import asyncio
import json

import pytest

from aduplanner.config import MAX_AUTO_SAVES, MAX_MANUAL_SAVES
from aduplanner.core.model import EditorViewSettings, Point, SavedSnapshot, Scene, SceneSnapshot
from aduplanner.engine.ops import empty_scene
from aduplanner.io.parser import lot_to_dict, snapshot_data_to_dict
from aduplanner.io.snapshots import JsonFileCache, SnapshotBridge, VersionHistory


class FakeRemote:
    def __init__(self, failing=False):
        self.failing = failing
        self.records = {}
        self.created = 0
        self.deleted = []

    def _check(self):
        if self.failing:
            raise ConnectionError("remote store unavailable")

    async def create_snapshot(self, kind, data, label=None):
        self._check()
        self.created += 1
        record_id = f"remote-{self.created}"
        self.records[record_id] = {"id": record_id, "createdAt": "2026-01-01T00:00:00Z",
                                   "kind": kind, "label": label, "data": data}
        return {"id": record_id, "createdAt": "2026-01-01T00:00:00Z"}

    async def list_snapshots(self):
        self._check()
        autos = [r for r in self.records.values() if r["kind"] == "auto"]
        manuals = [r for r in self.records.values() if r["kind"] == "manual"]
        return {"autoSaves": autos[::-1], "manualSaves": manuals[::-1]}

    async def get_snapshot(self, snapshot_id):
        self._check()
        return self.records[snapshot_id]

    async def delete_snapshot(self, snapshot_id):
        self._check()
        self.deleted.append(snapshot_id)
        self.records.pop(snapshot_id, None)


class FakeLotStore:
    def __init__(self):
        self.saved = []

    async def save(self, lot_fields):
        self.saved.append(lot_fields)
        return lot_fields


@pytest.fixture
def current(config24):
    return {"data": SceneSnapshot(scene=empty_scene(config24), view_settings=EditorViewSettings(zoom=1.5))}


@pytest.fixture
def restored():
    return []


def _bridge(tmp_path, current, restored, remote=None, lot_store=None):
    return SnapshotBridge(
        capture=lambda: current["data"],
        on_restore=restored.append,
        cache=JsonFileCache(str(tmp_path / "snapshots.json")),
        remote=remote,
        lot_store=lot_store,
    )


def run(coro):
    return asyncio.run(coro)


class TestSave:
    def test_remote_success(self, tmp_path, current, restored):
        remote = FakeRemote()
        bridge = _bridge(tmp_path, current, restored, remote)
        saved = run(bridge.save_manual("Before kitchen"))

        assert saved.id == "remote-1"
        assert saved.label == "Before kitchen"
        assert saved.timestamp == "2026-01-01T00:00:00Z"
        assert bridge.history.manual_saves == (saved,)

        cached = json.loads((tmp_path / "snapshots.json").read_text())
        assert [s["id"] for s in cached["manualSaves"]] == ["remote-1"]
        assert cached["manualSaves"][0]["data"]["editorSettings"]["zoom"] == 1.5

    def test_remote_failure_saves_locally(self, tmp_path, current, restored):
        bridge = _bridge(tmp_path, current, restored, FakeRemote(failing=True))
        saved = run(bridge.save_manual("Offline"))

        assert not saved.id.startswith("remote-")
        assert bridge.history.manual_saves == (saved,)
        assert JsonFileCache(str(tmp_path / "snapshots.json")).load().manual_saves[0].id == saved.id

    def test_manual_saves_capped_newest_first(self, tmp_path, current, restored):
        bridge = _bridge(tmp_path, current, restored)
        for i in range(MAX_MANUAL_SAVES + 2):
            run(bridge.save_manual(f"v{i}"))
        labels = [s.label for s in bridge.history.manual_saves]
        assert len(labels) == MAX_MANUAL_SAVES
        assert labels[0] == f"v{MAX_MANUAL_SAVES + 1}"
        assert "v0" not in labels and "v1" not in labels

    def test_auto_save_interval(self, tmp_path, current, restored):
        bridge = _bridge(tmp_path, current, restored)
        assert run(bridge.save_auto(0))
        assert not run(bridge.save_auto(60))
        assert run(bridge.save_auto(600))
        assert len(bridge.history.auto_saves) == 2

    def test_auto_saves_capped(self, tmp_path, current, restored):
        bridge = _bridge(tmp_path, current, restored)
        for i in range(MAX_AUTO_SAVES + 3):
            run(bridge.save_auto(i * 600))
        assert len(bridge.history.auto_saves) == MAX_AUTO_SAVES
        assert bridge.history.manual_saves == ()


class TestLoad:
    def test_from_remote(self, tmp_path, current, restored):
        remote = FakeRemote()
        writer = _bridge(tmp_path / "a", current, restored, remote)
        run(writer.save_manual("one"))
        run(writer.save_auto(0))
        remote.records["broken"] = {"id": "broken", "kind": "manual", "createdAt": "x", "data": "nope"}

        reader = _bridge(tmp_path / "b", current, restored, remote)
        history = run(reader.load())
        assert [s.id for s in history.manual_saves] == ["remote-1"]
        assert [s.id for s in history.auto_saves] == ["remote-2"]
        assert (tmp_path / "b" / "snapshots.json").exists()

    def test_falls_back_to_cache(self, tmp_path, current, restored):
        offline = _bridge(tmp_path, current, restored)
        saved = run(offline.save_manual("cached"))

        bridge = _bridge(tmp_path, current, restored, FakeRemote(failing=True))
        history = run(bridge.load())
        assert history.manual_saves[0].id == saved.id

    def test_missing_or_corrupt_cache(self, tmp_path):
        assert JsonFileCache(str(tmp_path / "none.json")).load() == VersionHistory()
        corrupt = tmp_path / "corrupt.json"
        corrupt.write_text("{not json")
        assert JsonFileCache(str(corrupt)).load() == VersionHistory()


class TestRestore:
    def test_local_snapshot(self, tmp_path, current, restored, lot):
        lot_store = FakeLotStore()
        current["data"] = SceneSnapshot(scene=current["data"].scene, lot=lot)
        bridge = _bridge(tmp_path, current, restored, lot_store=lot_store)
        saved = run(bridge.save_manual())

        assert run(bridge.restore(saved.id))
        assert restored == [saved.data]
        assert lot_store.saved == [lot_to_dict(lot)]

    def test_from_cache_before_load(self, tmp_path, current, restored):
        saved = run(_bridge(tmp_path, current, restored).save_manual("cached"))

        fresh = _bridge(tmp_path, current, restored)
        assert fresh.history == VersionHistory()
        assert run(fresh.restore(saved.id))
        assert restored == [saved.data]

    def test_remote_snapshot(self, tmp_path, current, restored):
        remote = FakeRemote()
        remote.records["r9"] = {"id": "r9", "kind": "manual",
                                "data": snapshot_data_to_dict(current["data"])}
        bridge = _bridge(tmp_path, current, restored, remote)

        assert run(bridge.restore("r9"))
        assert restored[0].scene == current["data"].scene
        assert restored[0].view_settings.zoom == 1.5

    def test_malformed_payload_leaves_scene_untouched(self, tmp_path, current, restored):
        remote = FakeRemote()
        remote.records["bad"] = {"id": "bad", "data": {"rooms": [{"id": "x"}]}}
        bridge = _bridge(tmp_path, current, restored, remote)

        assert not run(bridge.restore("bad"))
        assert restored == []

    def test_invalid_scene_is_rejected(self, tmp_path, current, restored):
        broken = SceneSnapshot(scene=Scene(adu_boundary=(Point(0, 0), Point(1, 1))))
        bridge = _bridge(tmp_path, current, restored)
        bridge.history = bridge.history.with_snapshot(
            SavedSnapshot(id="s1", timestamp="t", kind="manual", data=broken)
        )
        assert not run(bridge.restore("s1"))
        assert restored == []

    def test_unknown_id(self, tmp_path, current, restored):
        assert not run(_bridge(tmp_path, current, restored).restore("nope"))
        assert not run(_bridge(tmp_path, current, restored, FakeRemote(failing=True)).restore("nope"))
        assert restored == []


class TestDelete:
    def test_deletes_remote_and_local(self, tmp_path, current, restored):
        remote = FakeRemote()
        bridge = _bridge(tmp_path, current, restored, remote)
        saved = run(bridge.save_manual("gone"))
        run(bridge.delete(saved.id))
        assert remote.deleted == [saved.id]
        assert bridge.history.find(saved.id) is None

    def test_remote_failure_still_deletes_locally(self, tmp_path, current, restored):
        remote = FakeRemote()
        bridge = _bridge(tmp_path, current, restored, remote)
        saved = run(bridge.save_manual("gone"))
        remote.failing = True
        run(bridge.delete(saved.id))
        assert bridge.history.manual_saves == ()
        assert JsonFileCache(str(tmp_path / "snapshots.json")).load().manual_saves == ()

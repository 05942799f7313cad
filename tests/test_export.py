"""Tests for the export projection."""
from dataclasses import replace

import pytest

from aduplanner.engine.api import apply, build_export_snapshot


class TestExportSnapshot:
    def test_schedules(self, scene24, config24):
        snapshot = build_export_snapshot(scene24, None, config24)
        assert [r["id"] for r in snapshot["rooms"]] == ["r1", "r2"]
        assert snapshot["rooms"][0]["label"] == "Bedroom"
        assert snapshot["rooms"][0]["width_feet"] == 10
        assert snapshot["doors"] == [{"id": "d1", "type": "single", "label": "Single Door", "width_feet": 3}]
        assert snapshot["windows"][0]["label"] == "Standard Window"
        assert snapshot["furniture"] == [
            {"id": "f1", "type": "sofa-3seat", "name": "3-Seat Sofa", "category": "living"}
        ]
        assert snapshot["total_room_area"] == 200
        assert snapshot["lot"] is None

    def test_room_areas_recomputed(self, scene24, config24):
        stale = replace(scene24, rooms=tuple(replace(r, area=999) for r in scene24.rooms))
        snapshot = build_export_snapshot(stale, None, config24)
        assert [r["area"] for r in snapshot["rooms"]] == [100, 100]
        assert [r["area"] for r in snapshot["scene"]["rooms"]] == [100, 100]

    def test_adu_area(self, scene24, config24):
        scene = apply(scene24, {"op": "set_adu_area", "area": 400}, config24)
        assert build_export_snapshot(scene, None, config24)["adu_area"] == 400

    def test_lot_summary(self, scene24, config24, lot):
        snapshot = build_export_snapshot(scene24, lot, config24)
        assert snapshot["lot"]["geoLat"] == pytest.approx(37.7749)
        assert snapshot["lot"]["lotDepthFeet"] == 100

    def test_unknown_furniture_type_still_exports(self, scene24, config24):
        odd = replace(scene24, furniture=(replace(scene24.furniture[0], type="piano"),))
        entry = build_export_snapshot(odd, None, config24)["furniture"][0]
        assert (entry["name"], entry["category"]) == ("piano", "other")

"""Tests for the adu-planner CLI."""
import json

import pytest
from typer.testing import CliRunner

from aduplanner.cli import app
from aduplanner.engine.api import apply
from aduplanner.io.parser import load_scene, lot_to_dict, save_scene

runner = CliRunner()


@pytest.fixture
def scene_file(tmp_path, scene24):
    path = tmp_path / "scene.json"
    save_scene(scene24, str(path))
    return path


@pytest.fixture
def lot_file(tmp_path, lot):
    path = tmp_path / "lot.json"
    path.write_text(json.dumps(lot_to_dict(lot)))
    return path


class TestSummary:
    def test_lists_rooms(self, scene_file):
        result = runner.invoke(app, ["summary", "--scene", str(scene_file)])
        assert result.exit_code == 0
        assert "Bedroom 1" in result.output
        assert "Kitchen 1" in result.output
        assert "Doors: 1" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["summary", "--scene", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestWalls:
    def test_prints_segments(self, scene_file):
        result = runner.invoke(app, ["walls", "-s", str(scene_file)])
        assert result.exit_code == 0
        assert "r1" in result.output
        assert "door" in result.output


class TestExport:
    def test_writes_json(self, tmp_path, scene_file, lot_file):
        out = tmp_path / "out" / "export.json"
        result = runner.invoke(
            app, ["export", "--scene", str(scene_file), "--lot", str(lot_file), "--out", str(out)]
        )
        assert result.exit_code == 0
        data = json.loads(out.read_text())
        assert [r["id"] for r in data["rooms"]] == ["r1", "r2"]
        assert data["lot"]["lotWidthFeet"] == 50

    def test_invalid_scene(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[]")
        result = runner.invoke(app, ["export", "--scene", str(bad), "--out", str(tmp_path / "x.json")])
        assert result.exit_code == 1
        assert not (tmp_path / "x.json").exists()


class TestLot:
    def test_boundary_and_setbacks(self, lot_file):
        result = runner.invoke(app, ["lot", "--lot", str(lot_file)])
        assert result.exit_code == 0
        assert "boundary" in result.output
        assert "setback" in result.output

    def test_fit_check(self, lot_file, scene_file):
        result = runner.invoke(app, ["lot", "--lot", str(lot_file), "--scene", str(scene_file)])
        assert result.exit_code == 0
        assert "ADU" in result.output


class TestApply:
    def test_applies_operation(self, tmp_path, scene_file, scene24):
        op = tmp_path / "op.json"
        op.write_text(json.dumps({"op": "rotate_door", "id": "d1"}))
        out = tmp_path / "rotated.json"
        result = runner.invoke(app, ["apply", "-s", str(scene_file), "--op", str(op), "--out", str(out)])
        assert result.exit_code == 0
        assert load_scene(str(out)) == apply(scene24, {"op": "rotate_door", "id": "d1"})

    def test_unknown_operation(self, tmp_path, scene_file):
        op = tmp_path / "op.json"
        op.write_text(json.dumps({"op": "explode"}))
        result = runner.invoke(app, ["apply", "-s", str(scene_file), "--op", str(op), "--out", str(tmp_path / "o.json")])
        assert result.exit_code == 1
        assert "Unknown operation" in result.output

    def test_missing_parameter(self, tmp_path, scene_file):
        op = tmp_path / "op.json"
        op.write_text(json.dumps({"op": "move_vertex", "id": "r1", "index": 0}))
        out = tmp_path / "o.json"
        result = runner.invoke(app, ["apply", "-s", str(scene_file), "--op", str(op), "--out", str(out)])
        assert result.exit_code == 1
        assert "Malformed move_vertex operation" in result.output
        assert not out.exists()

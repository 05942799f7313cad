"""Tests for geom/snap.py."""
import pytest

from aduplanner.core.model import Point
from aduplanner.geom.snap import SnapMode, constrain_to_canvas, snap_point, snap_to_grid, snap_unit


class TestSnapToGrid:
    def test_rounds_to_nearest(self):
        assert snap_to_grid(12, 10) == 10
        assert snap_to_grid(17, 10) == 20

    def test_halves_round_up(self):
        assert snap_to_grid(15, 10) == 20
        assert snap_to_grid(-15, 10) == -10

    @pytest.mark.parametrize("value", [0, 3.3, 11.9, 12, 100.01, 587.87, -40.5])
    @pytest.mark.parametrize("unit", [12, 24, 800 / 36 / 2])
    def test_idempotent(self, value, unit):
        once = snap_to_grid(value, unit)
        assert snap_to_grid(once, unit) == once

    @pytest.mark.parametrize("unit", [0, -1])
    def test_rejects_non_positive_unit(self, unit):
        with pytest.raises(ValueError):
            snap_to_grid(5, unit)


class TestSnapModes:
    def test_units(self):
        assert snap_unit(SnapMode.GRID, 24) == 24
        assert snap_unit(SnapMode.HALF, 24) == 12
        assert snap_unit(SnapMode.FREE, 24) is None
        assert snap_unit("half", 24) == 12

    def test_snap_point(self):
        p = Point(13, 29)
        assert snap_point(p, SnapMode.GRID, 24) == Point(24, 24)
        assert snap_point(p, SnapMode.HALF, 24) == Point(12, 24)
        assert snap_point(p, SnapMode.FREE, 24) == p


class TestConstrainToCanvas:
    def test_clamps_both_axes(self):
        assert constrain_to_canvas(Point(-5, 50), 100) == Point(0, 50)
        assert constrain_to_canvas(Point(150, 120), 100) == Point(100, 100)

    def test_inside_unchanged(self):
        assert constrain_to_canvas(Point(20, 30), 100) == Point(20, 30)

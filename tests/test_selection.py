"""Tests for engine/selection.py."""
import pytest

from aduplanner.core.model import Door, EntityKind, Furniture, Point
from aduplanner.engine.selection import (
    MultiSelection,
    SelectionController,
    SelectionState,
    entities_in_rect,
    item_footprint,
)
from aduplanner.geo.transform import AduLocalFrame, CanvasFrame
from aduplanner.geom.polygon import BoundingBox


@pytest.fixture
def controller(config24):
    return SelectionController(config24)


def _marquee(controller, scene, start, end, frame=None):
    assert controller.begin_marquee(start)
    controller.update_marquee(end)
    return controller.end_marquee(end, scene, frame or CanvasFrame())


class TestFootprints:
    def test_door_is_a_thin_strip(self):
        door = Door(id="d1", type="single", position=Point(100, 100), rotation=0, width=3)
        bbox = item_footprint(door, 24)
        assert (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y) == (64, 94, 136, 106)

    def test_rotated_furniture_swaps_extent(self):
        sofa = Furniture(id="f1", type="sofa-3seat", position=Point(0, 0), rotation=90, width=7, height=3)
        bbox = item_footprint(sofa, 24)
        assert bbox.width == pytest.approx(72)
        assert bbox.height == pytest.approx(168)

    def test_entities_in_rect(self, scene24):
        selected = entities_in_rect(scene24, BoundingBox(300, 200, 420, 380), 24)
        assert selected.rooms == {"r1"}
        assert selected.doors == {"d1"}
        assert selected.furniture == {"f1"}
        assert selected.windows == frozenset()


class TestMarquee:
    def test_selects_intersecting_entities(self, controller, scene24):
        selected = _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        assert selected.rooms == {"r1"}
        assert selected.doors == frozenset()
        assert controller.state is SelectionState.MULTI_SELECTED
        assert controller.marquee is None

    def test_reverse_drag_direction(self, controller, scene24):
        selected = _marquee(controller, scene24, Point(1500, 1500), Point(1300, 1300))
        assert selected.rooms == {"r2"}
        assert selected.windows == {"w1"}

    def test_click_selects_nothing(self, controller, scene24):
        controller.select_single(EntityKind.ROOM, "r2")
        selected = _marquee(controller, scene24, Point(200, 200), Point(203, 400))
        assert selected.is_empty
        assert controller.single is None
        assert controller.state is SelectionState.IDLE

    def test_click_clears_multi_selection(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        selected = _marquee(controller, scene24, Point(600, 600), Point(800, 602))
        assert selected.is_empty
        assert controller.multi.is_empty
        assert controller.state is SelectionState.IDLE

    def test_state_while_dragging(self, controller):
        controller.begin_marquee(Point(0, 0))
        controller.update_marquee(Point(50, 50))
        assert controller.state is SelectionState.MARQUEE_DRAGGING
        assert controller.marquee.end == Point(50, 50)

    def test_only_in_select_mode(self, controller):
        assert not controller.begin_marquee(Point(0, 0), mode="room")
        assert controller.state is SelectionState.IDLE

    def test_replaces_previous_multi_selection(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        selected = _marquee(controller, scene24, Point(1300, 1300), Point(1500, 1500))
        assert selected.rooms == {"r2"}

    def test_mapped_through_adu_frame(self, config24, scene24):
        frame = AduLocalFrame(10, 0, 0, 24, config24.canvas_center)
        # r1 spans 240..480 locally and is drawn at 480..720
        on_screen = _marquee(SelectionController(config24), scene24, Point(500, 300), Point(600, 400), frame)
        assert on_screen.rooms == {"r1"}

        unshifted = _marquee(SelectionController(config24), scene24, Point(500, 300), Point(600, 400))
        assert unshifted.rooms == frozenset()

    def test_cancel_restores_selection(self, controller, scene24):
        controller.select_single(EntityKind.DOOR, "d1")
        controller.begin_marquee(Point(0, 0))
        controller.update_marquee(Point(400, 400))
        controller.cancel()
        assert controller.marquee is None
        assert controller.single.id == "d1"
        assert controller.multi.is_empty


class TestMultiDrag:
    def test_drag_scenario(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        assert controller.begin_multi_drag(Point(250, 250))
        assert controller.preview_delta == Point(0, 0)

        assert controller.update_multi_drag(Point(274, 250)) == Point(24, 0)
        assert controller.state is SelectionState.MULTI_DRAGGING
        assert controller.preview_position(EntityKind.ROOM, "r1", Point(240, 240)) == Point(264, 240)
        assert controller.preview_position(EntityKind.ROOM, "r2", Point(1200, 1200)) == Point(1200, 1200)

        moved = controller.end_multi_drag(Point(274, 250), scene24)
        r1 = moved.find(EntityKind.ROOM, "r1")
        assert r1.vertices[0] == Point(264, 240)
        assert r1.area == 100
        assert moved.find(EntityKind.ROOM, "r2") == scene24.find(EntityKind.ROOM, "r2")
        assert controller.preview_delta is None
        assert controller.multi.rooms == {"r1"}

    def test_drag_rooms_and_furniture_together(self, controller, scene24):
        selected = _marquee(controller, scene24, Point(100, 100), Point(1500, 1500))
        assert selected.rooms == {"r1", "r2"}
        assert selected.furniture == {"f1"}

        controller.begin_multi_drag(Point(700, 700))
        controller.update_multi_drag(Point(724, 700))
        moved = controller.end_multi_drag(Point(724, 700), scene24)

        assert moved.find(EntityKind.ROOM, "r1").vertices[0] == Point(264, 240)
        assert moved.find(EntityKind.ROOM, "r2").vertices[0] == Point(1224, 1200)
        assert moved.find(EntityKind.FURNITURE, "f1").position == Point(384, 360)
        assert moved.find(EntityKind.DOOR, "d1").position == Point(384, 240)
        assert moved.find(EntityKind.WINDOW, "w1").position == Point(1344, 1440)
        assert [r.area for r in moved.rooms] == [100, 100]

    def test_update_does_not_touch_scene(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        controller.begin_multi_drag(Point(250, 250))
        controller.update_multi_drag(Point(400, 400))
        assert scene24.find(EntityKind.ROOM, "r1").vertices[0] == Point(240, 240)

    def test_zero_delta_cancels(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        controller.begin_multi_drag(Point(250, 250))
        assert controller.end_multi_drag(Point(250, 250), scene24) is scene24
        assert controller.preview_delta is None
        assert controller.multi.rooms == {"r1"}

    def test_cancel_restores_preview(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        controller.begin_multi_drag(Point(250, 250))
        controller.update_multi_drag(Point(300, 260))
        controller.cancel()
        assert controller.preview_delta is None
        assert controller.multi.rooms == {"r1"}
        assert controller.state is SelectionState.MULTI_SELECTED

    def test_needs_a_multi_selection(self, controller):
        assert not controller.begin_multi_drag(Point(0, 0))


class TestDirectSelection:
    def test_select_single_clears_multi(self, controller, scene24):
        _marquee(controller, scene24, Point(200, 200), Point(300, 300))
        assert not controller.single_transform_enabled
        controller.select_single(EntityKind.FURNITURE, "f1")
        assert controller.multi.is_empty
        assert controller.single_transform_enabled

    def test_prune_drops_missing_ids(self, controller, scene24):
        controller.multi = MultiSelection(rooms=frozenset({"r1", "gone"}), doors=frozenset({"d1"}))
        controller.prune(scene24)
        assert controller.multi.rooms == {"r1"}
        assert controller.multi.doors == {"d1"}

        controller.select_single(EntityKind.WINDOW, "gone")
        controller.prune(scene24)
        assert controller.single is None

    def test_as_batch_is_sorted(self):
        multi = MultiSelection(rooms=frozenset({"b", "a"}))
        assert multi.as_batch() == {"rooms": ["a", "b"], "doors": [], "windows": [], "furniture": []}

"""Tests for geo/tiles.py tile math and the async tile layer."""
import asyncio

import pytest

from aduplanner.core.model import GeoVertex, Lot, Point
from aduplanner.geo.tiles import (
    GeoBounds,
    TileLayer,
    TileRef,
    lat_lng_to_tile,
    meters_per_pixel,
    padded_geo_bounds,
    tile_bounds,
    tile_placement,
    tile_to_lat_lng,
    tiles_to_load,
)
from aduplanner.geo.transform import lot_boundary_pixels

CANVAS_CENTER = Point(1296, 1296)


class FakeFetcher:
    """Returns fixed bytes; fails for URLs listed in ``failing``."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.requested = []

    async def fetch(self, url):
        self.requested.append(url)
        if url in self.failing:
            raise ConnectionError(f"cannot reach {url}")
        return b"tile"


class TestTileMath:
    def test_origin_tiles(self):
        assert lat_lng_to_tile(0, 0, 1) == (1, 1)
        assert lat_lng_to_tile(10, -170, 1) == (0, 0)

    def test_tile_corner(self):
        corner = tile_to_lat_lng(0, 0, 3)
        assert corner.lng == -180
        assert corner.lat == pytest.approx(85.0511, abs=1e-4)

    def test_point_lies_in_its_tile(self):
        x, y = lat_lng_to_tile(37.7749, -122.4194, 19)
        bounds = tile_bounds(x, y, 19)
        assert bounds.south <= 37.7749 <= bounds.north
        assert bounds.west <= -122.4194 <= bounds.east

    def test_meters_per_pixel(self):
        assert meters_per_pixel(0, 0) == pytest.approx(156543.03, abs=0.01)
        assert meters_per_pixel(60, 19) == pytest.approx(meters_per_pixel(0, 19) / 2)

    def test_tile_url(self):
        tile = TileRef(x=84, y=198, zoom=19)
        assert tile.url.endswith("/tile/19/198/84")
        assert tile.key == "19/84/198"


class TestBounds:
    def test_padded_bounds_contain_center(self, lot):
        center = GeoVertex(lot.geo_lat, lot.geo_lng)
        pixels = lot_boundary_pixels(lot, 24, CANVAS_CENTER)
        bounds = padded_geo_bounds(pixels, center, 24)
        assert bounds.south < center.lat < bounds.north
        assert bounds.west < center.lng < bounds.east
        # 100 ft deep lot padded by 50 ft on each side
        assert (bounds.north - bounds.south) * 364000 == pytest.approx(200)

    def test_degenerate_outline(self):
        assert padded_geo_bounds([], GeoVertex(0, 0), 24) is None

    def test_tiles_to_load_skips_requested(self):
        bounds = GeoBounds(north=37.7752, south=37.7746, east=-122.4189, west=-122.4199)
        requested = set()
        first = tiles_to_load(bounds, 19, requested)
        assert first
        assert {t.key for t in first} == requested
        assert tiles_to_load(bounds, 19, requested) == []

    def test_placement_is_positive_rectangle(self):
        center = GeoVertex(37.7749, -122.4194)
        x, y = lat_lng_to_tile(center.lat, center.lng, 19)
        left, top, width, height = tile_placement(TileRef(x, y, 19), center, 24, CANVAS_CENTER)
        assert width > 0 and height > 0
        assert left <= CANVAS_CENTER.x <= left + width
        assert top <= CANVAS_CENTER.y <= top + height


class TestTileLayer:
    def _load(self, layer, lot):
        pixels = lot_boundary_pixels(lot, 24, CANVAS_CENTER)
        return asyncio.run(layer.load(lot, pixels, 24, CANVAS_CENTER))

    def test_loads_every_tile_once(self, lot):
        fetcher = FakeFetcher()
        layer = TileLayer(fetcher)
        loaded = self._load(layer, lot)
        assert loaded
        assert len(loaded) == len(fetcher.requested)
        assert layer.tiles == loaded
        assert all(t.image == b"tile" for t in loaded)

        assert self._load(layer, lot) == []
        assert len(fetcher.requested) == len(loaded)

    def test_failed_tiles_are_omitted(self, lot):
        probe = FakeFetcher()
        self._load(TileLayer(probe), lot)
        failing = probe.requested[0]

        fetcher = FakeFetcher(failing=[failing])
        layer = TileLayer(fetcher)
        loaded = self._load(layer, lot)
        assert len(loaded) == len(fetcher.requested) - 1
        assert failing not in {t.tile.url for t in loaded}

    def test_lot_without_outline(self):
        layer = TileLayer(FakeFetcher())
        assert asyncio.run(layer.load(Lot(geo_lat=0, geo_lng=0), [], 24, CANVAS_CENTER)) == []

"""Web-Mercator tile math and the satellite tile layer.

Tiles are placed on the canvas with the same feet-per-degree conversion as
the lot boundary, so imagery and boundary stay pixel-aligned at any zoom.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import List, MutableSet, Optional, Protocol, Sequence

from ..config import (
    EARTH_CIRCUMFERENCE_METERS,
    SATELLITE_PADDING_RATIO,
    SATELLITE_TILE_URL,
    SATELLITE_ZOOM,
)
from ..core.model import GeoVertex, Lot, Point
from ..geom.polygon import bounding_box
from .transform import feet_per_degree, geo_to_feet

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileRef:
    x: int
    y: int
    zoom: int

    @property
    def key(self) -> str:
        return f"{self.zoom}/{self.x}/{self.y}"

    @property
    def url(self) -> str:
        return f"{SATELLITE_TILE_URL}/{self.zoom}/{self.y}/{self.x}"


@dataclass(frozen=True)
class GeoBounds:
    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class PlacedTile:
    """A loaded tile with its canvas rectangle.

    Attributes:
        tile: Tile coordinates.
        image: Raw image bytes returned by the fetcher.
        x: Canvas x of the north-west corner.
        y: Canvas y of the north-west corner.
        width: Canvas width in pixels.
        height: Canvas height in pixels.
    """

    tile: TileRef
    image: bytes
    x: float
    y: float
    width: float
    height: float


def lat_lng_to_tile(lat: float, lng: float, zoom: int) -> tuple[int, int]:
    """Tile indices containing a geo point."""
    n = 2**zoom
    x = math.floor((lng + 180) / 360 * n)
    lat_rad = math.radians(lat)
    y = math.floor((1 - math.log(math.tan(lat_rad) + 1 / math.cos(lat_rad)) / math.pi) / 2 * n)
    return x, y


def tile_to_lat_lng(x: float, y: float, zoom: int) -> GeoVertex:
    """North-west corner of a tile."""
    n = 2**zoom
    lng = x / n * 360 - 180
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / n))))
    return GeoVertex(lat=lat, lng=lng)


def tile_bounds(x: int, y: int, zoom: int) -> GeoBounds:
    nw = tile_to_lat_lng(x, y, zoom)
    se = tile_to_lat_lng(x + 1, y + 1, zoom)
    return GeoBounds(north=nw.lat, south=se.lat, east=se.lng, west=nw.lng)


def meters_per_pixel(lat: float, zoom: int) -> float:
    """Ground resolution of a 256 px tile image at a latitude."""
    return EARTH_CIRCUMFERENCE_METERS * math.cos(math.radians(lat)) / 2 ** (zoom + 8)


def padded_geo_bounds(
    lot_pixels: Sequence[Point],
    center: GeoVertex,
    pixels_per_foot: float,
    padding_ratio: float = SATELLITE_PADDING_RATIO,
) -> Optional[GeoBounds]:
    """Geo bounds of the lot extent plus a margin on every side.

    The margin is ``padding_ratio`` times the larger lot dimension. Returns
    None for a lot outline with fewer than three vertices.
    """
    if len(lot_pixels) < 3:
        return None

    bbox = bounding_box(lot_pixels)
    width_feet = bbox.width / pixels_per_foot
    height_feet = bbox.height / pixels_per_foot
    padding_feet = max(width_feet, height_feet) * padding_ratio

    ft_lat, ft_lng = feet_per_degree(center.lat)
    half_width_deg = (width_feet / 2 + padding_feet) / ft_lng
    half_height_deg = (height_feet / 2 + padding_feet) / ft_lat
    return GeoBounds(
        north=center.lat + half_height_deg,
        south=center.lat - half_height_deg,
        east=center.lng + half_width_deg,
        west=center.lng - half_width_deg,
    )


def tiles_to_load(bounds: GeoBounds, zoom: int, requested: MutableSet[str]) -> List[TileRef]:
    """Tiles covering the bounds that have not been requested yet.

    Returned tiles are marked in ``requested`` so repeated calls do not
    schedule them again.
    """
    nw_x, nw_y = lat_lng_to_tile(bounds.north, bounds.west, zoom)
    se_x, se_y = lat_lng_to_tile(bounds.south, bounds.east, zoom)

    tiles = []
    for x in range(nw_x, se_x + 1):
        for y in range(nw_y, se_y + 1):
            tile = TileRef(x, y, zoom)
            if tile.key not in requested:
                requested.add(tile.key)
                tiles.append(tile)
    return tiles


def tile_placement(
    tile: TileRef, center: GeoVertex, pixels_per_foot: float, canvas_center: Point
) -> tuple[float, float, float, float]:
    """Canvas rectangle (x, y, width, height) of a tile.

    Imagery stays fixed with the lot; no ADU offset is applied.
    """
    bounds = tile_bounds(tile.x, tile.y, tile.zoom)
    nw = geo_to_feet(GeoVertex(bounds.north, bounds.west), center)
    se = geo_to_feet(GeoVertex(bounds.south, bounds.east), center)
    nw_x = canvas_center.x + nw.x * pixels_per_foot
    nw_y = canvas_center.y + nw.y * pixels_per_foot
    se_x = canvas_center.x + se.x * pixels_per_foot
    se_y = canvas_center.y + se.y * pixels_per_foot
    return nw_x, nw_y, se_x - nw_x, se_y - nw_y


class TileFetcher(Protocol):
    async def fetch(self, url: str) -> bytes:
        ...


class TileLayer:
    """Satellite imagery under the lot.

    Loads are not cancelled: tiles requested for a lot that has since been
    replaced still land in ``tiles`` when they resolve.
    """

    def __init__(self, fetcher: TileFetcher, zoom: int = SATELLITE_ZOOM):
        self.fetcher = fetcher
        self.zoom = zoom
        self.tiles: List[PlacedTile] = []
        self._requested: set[str] = set()

    async def load(
        self, lot: Lot, lot_pixels: Sequence[Point], pixels_per_foot: float, canvas_center: Point
    ) -> List[PlacedTile]:
        """Fetch every uncached tile covering the padded lot extent.

        Args:
            lot: Lot providing the geo center.
            lot_pixels: Lot outline in canvas pixels.
            pixels_per_foot: Canvas scale.
            canvas_center: Canvas point of the lot center.

        Returns:
            The tiles loaded by this call. Failed fetches are logged and
            omitted.
        """
        center = GeoVertex(lot.geo_lat, lot.geo_lng)
        bounds = padded_geo_bounds(lot_pixels, center, pixels_per_foot)
        if bounds is None:
            return []

        pending = tiles_to_load(bounds, self.zoom, self._requested)
        if not pending:
            return []

        results = await asyncio.gather(
            *(self._load_tile(tile, center, pixels_per_foot, canvas_center) for tile in pending)
        )
        loaded = [tile for tile in results if tile is not None]
        self.tiles.extend(loaded)
        LOGGER.debug("Loaded %d of %d satellite tiles", len(loaded), len(pending))
        return loaded

    async def _load_tile(
        self, tile: TileRef, center: GeoVertex, pixels_per_foot: float, canvas_center: Point
    ) -> Optional[PlacedTile]:
        try:
            image = await self.fetcher.fetch(tile.url)
        except Exception as e:
            LOGGER.warning("Failed to load tile %s: %s", tile.key, e)
            return None
        x, y, width, height = tile_placement(tile, center, pixels_per_foot, canvas_center)
        return PlacedTile(tile, image, x, y, width, height)

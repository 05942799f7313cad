"""Geo-canvas transform and satellite tile placement."""

from .tiles import TileLayer, lat_lng_to_tile, tile_bounds, tile_to_lat_lng
from .transform import (
    AduLocalFrame,
    CanvasFrame,
    canvas_to_geo,
    check_adu_fit,
    frame_for,
    geo_to_canvas,
    lot_boundary_pixels,
    setback_boundary,
)

__all__ = [
    "AduLocalFrame",
    "CanvasFrame",
    "TileLayer",
    "canvas_to_geo",
    "check_adu_fit",
    "frame_for",
    "geo_to_canvas",
    "lat_lng_to_tile",
    "lot_boundary_pixels",
    "setback_boundary",
    "tile_bounds",
    "tile_to_lat_lng",
]

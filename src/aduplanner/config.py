"""Configuration for the ADU planner engine.

Module-level constants tune the editor behaviour (history size, debounce
windows, snapshot caps, geo conversion). Canvas dimensions are grouped in a
frozen ``CanvasConfig`` so that every geometry call receives them explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass

from .core.model import Point

# History
MAX_HISTORY = 50
HISTORY_DEBOUNCE_SECONDS = 0.3

# Version snapshots
MAX_AUTO_SAVES = 6  # 1 hour at 10-min intervals
MAX_MANUAL_SAVES = 10
AUTO_SAVE_INTERVAL_SECONDS = 10 * 60

# View settings persistence
SETTINGS_DEBOUNCE_SECONDS = 0.5

# Selection
MARQUEE_MIN_SIZE = 5.0  # canvas pixels, per axis

# Geo conversion (flat-earth, residential lot scale)
FEET_PER_DEGREE_LAT = 364000.0
EARTH_CIRCUMFERENCE_METERS = 40075016.686
SATELLITE_ZOOM = 19
SATELLITE_PADDING_RATIO = 0.5
SATELLITE_TILE_URL = (
    "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile"
)

# Setback defaults in feet when a lot leaves them unset
DEFAULT_SETBACK_FRONT = 0.0
DEFAULT_SETBACK_BACK = 4.0
DEFAULT_SETBACK_LEFT = 4.0
DEFAULT_SETBACK_RIGHT = 4.0


@dataclass(frozen=True)
class CanvasConfig:
    """Dimensions of the virtual drawing canvas.

    Attributes:
        max_canvas_feet: Feet visible across the display.
        display_size: Display size in pixels.
        extended_grid_feet: Feet covered by the extended (scrollable) canvas.
        pixels_per_foot: Canvas pixels per real-world foot.
        grid_size: Size of one grid cell in pixels (one foot).
        extended_canvas_size: Side of the extended canvas in pixels.
    """

    max_canvas_feet: float
    display_size: float
    extended_grid_feet: float
    pixels_per_foot: float
    grid_size: float
    extended_canvas_size: float

    @property
    def half_grid(self) -> float:
        return self.grid_size / 2

    @property
    def canvas_center(self) -> Point:
        half = self.extended_canvas_size / 2
        return Point(half, half)


def create_canvas_config(max_canvas_feet: float = 36, display_size: float = 800) -> CanvasConfig:
    """Build a canvas configuration.

    The extended canvas is three times the visible area on each axis and the
    grid is one foot.

    Args:
        max_canvas_feet: Feet visible across the display.
        display_size: Display size in pixels.

    Returns:
        The derived CanvasConfig.
    """
    extended_grid_feet = max_canvas_feet * 3
    pixels_per_foot = display_size / max_canvas_feet
    grid_size = pixels_per_foot
    return CanvasConfig(
        max_canvas_feet=max_canvas_feet,
        display_size=display_size,
        extended_grid_feet=extended_grid_feet,
        pixels_per_foot=pixels_per_foot,
        grid_size=grid_size,
        extended_canvas_size=extended_grid_feet * grid_size,
    )


CANVAS_DEFAULTS = create_canvas_config()

"""Geographic to pixel projection for the map viewport."""

import logging

import numpy as np

from src.grid_overlay.model import Coordinates, PixelPoint, Viewport

logger = logging.getLogger(__name__)


def mercator_y(lat_degrees: float | np.ndarray) -> float | np.ndarray:
    """
    Web Mercator northing for a latitude, in radians of arc.

    Args:
        lat_degrees: Latitude in degrees (scalar or array)

    Returns:
        ln(tan(pi/4 + lat/2)) for each latitude
    """
    lat = np.radians(lat_degrees)
    return np.log(np.tan(np.pi / 4 + lat / 2))


def project(coordinates: Coordinates, viewport: Viewport) -> PixelPoint:
    """
    Project a coordinate onto the viewport's pixel grid.

    Longitude maps linearly onto x, latitude through Web Mercator onto y,
    with y growing downwards. Points outside the bounds are still projected
    (they land off-screen).

    Args:
        coordinates: Geographic position
        viewport: Pixel size and geographic bounds

    Returns:
        Integer pixel position, rounded to the nearest pixel

    Raises:
        ValueError: If the point has no finite pixel position (empty bounds,
            a pole, or non-finite coordinates)
    """
    bounds = viewport.bounds
    with np.errstate(divide="ignore", invalid="ignore"):
        x = np.float64(coordinates.lng - bounds.west) / np.float64(bounds.east - bounds.west) * viewport.width

        top, bottom = mercator_y(np.array([bounds.north, bounds.south]))
        y = (top - mercator_y(coordinates.lat)) / (top - bottom) * viewport.height

    if not (np.isfinite(x) and np.isfinite(y)):
        raise ValueError(f"Cannot project {coordinates} into {bounds}")
    return PixelPoint(int(np.rint(x)), int(np.rint(y)))


class ViewportProjector:
    """Projector bound to one viewport; what layers receive per repaint."""

    def __init__(self, viewport: Viewport):
        self.viewport = viewport

    def to_pixel(self, coordinates: Coordinates) -> PixelPoint:
        return project(coordinates, self.viewport)

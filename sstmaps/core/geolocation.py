"""Latitude/longitude grids for the pixels of a projected raster."""

from pathlib import Path

import numpy as np
import rasterio
from pyproj import Transformer
from rasterio.transform import Affine


def pixel_latlon(
    transform: Affine, crs, height: int, width: int
) -> tuple[np.ndarray, np.ndarray]:
    """Compute the geographic coordinates of every pixel centre.

    Args:
        transform (Affine): Pixel to map transform of the raster.
        crs: Coordinate reference system of the map coordinates.
        height (int): Number of rows.
        width (int): Number of columns.

    Returns:
        tuple[np.ndarray, np.ndarray]: Latitude and longitude grids of shape
        ``(height, width)`` in degrees (EPSG:4326).
    """
    # (1, width) and (height, 1) broadcast so only x and y are full size
    cols = np.arange(width, dtype=np.float64)[np.newaxis, :] + 0.5
    rows = np.arange(height, dtype=np.float64)[:, np.newaxis] + 0.5
    x = transform.a * cols + transform.b * rows + transform.c
    y = transform.d * cols + transform.e * rows + transform.f

    transformer = Transformer.from_crs(crs, "EPSG:4326", always_xy=True)
    lon, lat = transformer.transform(x, y, inplace=True)
    return lat, lon


def raster_latlon(path: str | Path) -> tuple[np.ndarray, np.ndarray]:
    """Latitude and longitude grids for the pixel grid of a GeoTIFF."""
    with rasterio.open(path) as src:
        return pixel_latlon(src.transform, src.crs, src.height, src.width)

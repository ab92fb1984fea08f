"""Raster utility helpers for band reading, writing and diagnostics."""

import logging
from pathlib import Path

import numpy as np
import rasterio

from sstmaps.errors import ShapeMismatchError


def init_logger(log_path: str = "process_log.txt") -> None:
    """Configure a process-aware logger that writes to disk and stdout.

    Args:
        log_path (str): File path where log messages will be appended.

    Returns:
        None: Logging is configured as a side effect.
    """

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(process)d] %(levelname)s: %(message)s",
        handlers=[logging.FileHandler(log_path, mode="a"), logging.StreamHandler()],
    )


def read_band(path: str | Path, band: int = 1) -> tuple[np.ndarray, dict]:
    """Read one band of a GeoTIFF.

    Args:
        path (str | Path): Raster to open.
        band (int): One-based band index.

    Returns:
        tuple[np.ndarray, dict]: Band samples in their stored dtype and the
        rasterio profile of the file.
    """
    with rasterio.open(path) as src:
        data = src.read(band)
        profile = src.profile.copy()
    return data, profile


def write_band(
    path: str | Path,
    data: np.ndarray,
    profile: dict,
    nodata: float | int | None = np.nan,
) -> Path:
    """Write a single-band GeoTIFF using ``profile`` for the grid and CRS.

    Args:
        path (str | Path): Output path.
        data (np.ndarray): 2-D array to write.
        profile (dict): Rasterio profile of the source grid.
        nodata (float | int | None): Nodata value declared in the output.

    Returns:
        Path: The written path.
    """
    out_profile = profile.copy()
    out_profile.update(
        {
            "driver": "GTiff",
            "count": 1,
            "dtype": data.dtype.name,
            "nodata": nodata,
            "height": data.shape[0],
            "width": data.shape[1],
            "compress": "deflate",
        }
    )
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with rasterio.open(path, "w", **out_profile) as dst:
        dst.write(data, 1)
    return path


def check_same_shape(**grids: np.ndarray) -> tuple[int, ...]:
    """Ensure all named grids share one shape.

    Args:
        **grids (np.ndarray): Arrays keyed by a name used in the error.

    Returns:
        tuple[int, ...]: The common shape.

    Raises:
        ShapeMismatchError: If any two grids differ in shape.
    """
    shapes = {name: np.shape(grid) for name, grid in grids.items()}
    if len(set(shapes.values())) > 1:
        detail = ", ".join(f"{name}={shape}" for name, shape in shapes.items())
        raise ShapeMismatchError(f"Scene rasters differ in shape: {detail}")
    return next(iter(shapes.values()), ())

"""Tests for pixel centre latitude/longitude grids."""

import tracemalloc

import numpy as np
import pytest

rasterio = pytest.importorskip("rasterio")
pyproj = pytest.importorskip("pyproj")
from rasterio.transform import Affine, from_origin, xy  # noqa: E402

from sstmaps.core.geolocation import pixel_latlon, raster_latlon  # noqa: E402


def test_geographic_grid_is_pixel_centres() -> None:
    transform = from_origin(-75.0, 38.0, 0.1, 0.1)

    lat, lon = pixel_latlon(transform, "EPSG:4326", height=3, width=4)

    assert lat.shape == lon.shape == (3, 4)
    assert lat[0, 0] == pytest.approx(37.95)
    assert lon[0, 0] == pytest.approx(-74.95)
    assert lat[2, 0] == pytest.approx(37.75)
    assert lon[0, 3] == pytest.approx(-74.65)
    # rows share a latitude, columns share a longitude
    np.testing.assert_allclose(lat[:, 0], lat[:, 3])
    np.testing.assert_allclose(lon[0, :], lon[2, :])


def test_projected_grid_matches_pyproj() -> None:
    transform = from_origin(400000.0, 4200000.0, 30.0, 30.0)

    lat, lon = pixel_latlon(transform, "EPSG:32618", height=5, width=6)

    transformer = pyproj.Transformer.from_crs(
        "EPSG:32618", "EPSG:4326", always_xy=True
    )
    # centre of row 4, column 5
    x, y = 400000.0 + 30 * 5 + 15, 4200000.0 - 30 * 4 - 15
    expected_lon, expected_lat = transformer.transform(x, y)
    assert lat[4, 5] == pytest.approx(expected_lat)
    assert lon[4, 5] == pytest.approx(expected_lon)
    assert 37.0 < lat.mean() < 38.5
    assert -77.0 < lon.mean() < -75.0


def test_raster_latlon(tmp_path) -> None:
    path = tmp_path / "band.tif"
    transform = from_origin(-75.0, 38.0, 0.1, 0.1)
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=2,
        width=3,
        count=1,
        dtype="uint16",
        crs="EPSG:4326",
        transform=transform,
    ) as dst:
        dst.write(np.zeros((2, 3), dtype=np.uint16), 1)

    lat, lon = raster_latlon(path)

    assert lat.shape == (2, 3)
    assert lat[1, 2] == pytest.approx(37.85)
    assert lon[1, 2] == pytest.approx(-74.75)


def test_rotated_grid_matches_rasterio_centres() -> None:
    """Any affine transform gives the same centres as rasterio's xy."""
    transform = Affine(0.1, 0.02, -75.0, 0.01, -0.1, 38.0)

    lat, lon = pixel_latlon(transform, "EPSG:4326", height=4, width=5)

    rows, cols = np.meshgrid(np.arange(4), np.arange(5), indexing="ij")
    x, y = xy(transform, rows.ravel(), cols.ravel(), offset="center")
    np.testing.assert_allclose(lon, np.asarray(x).reshape(4, 5))
    np.testing.assert_allclose(lat, np.asarray(y).reshape(4, 5))
    assert lat.dtype == lon.dtype == np.float64


def test_grid_memory_stays_near_output_size() -> None:
    """Peak allocation stays well below the size of index grids per pixel."""
    height, width = 500, 600
    transform = from_origin(400000.0, 4200000.0, 30.0, 30.0)

    tracemalloc.start()
    try:
        lat, lon = pixel_latlon(transform, "EPSG:32618", height, width)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    assert lat.shape == (height, width)
    # lat and lon alone take 16 bytes per pixel
    assert peak / (height * width) < 48

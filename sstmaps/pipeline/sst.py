"""Surface temperature inversion of Landsat Collection 2 Level 2 scenes."""

from __future__ import annotations

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Sequence

import numpy as np
import xarray as xr
from tqdm import tqdm

from sstmaps.config import get_settings
from sstmaps.core.calibration import calibrate, calibration_keys
from sstmaps.core.filtering import FilterReport, filter_temperature
from sstmaps.core.geolocation import raster_latlon
from sstmaps.core.metadata import (
    DATE_KEY,
    SPACECRAFT_KEY,
    TIME_KEY,
    SceneMetadata,
    read_mtl,
)
from sstmaps.core.missions import Spacecraft
from sstmaps.core.quality import classify
from sstmaps.core.raster_utils import check_same_shape, read_band, write_band

__all__ = [
    "SceneFiles",
    "SSTResult",
    "find_scene_files",
    "invert_arrays",
    "invert_scene",
    "save_result",
    "process_scenes",
]

QA_SUFFIX = "_QA_PIXEL.TIF"
MTL_SUFFIX = "_MTL.TXT"


@dataclass(frozen=True)
class SceneFiles:
    """Files of one scene needed for the inversion."""

    mtl: Path
    thermal: Path
    qa: Path


@dataclass
class SSTResult:
    """Quality controlled surface temperature of one scene.

    Attributes:
        acquired (datetime): Scene centre time (UTC).
        lat (np.ndarray): Latitude of each pixel centre.
        lon (np.ndarray): Longitude of each pixel centre.
        temperature (np.ndarray): Temperature in Celsius, NaN where rejected.
        quality (np.ndarray): :class:`~sstmaps.core.quality.QualityCategory`
            codes.
        spacecraft (Spacecraft): Mission that acquired the scene.
        report (FilterReport): Percentile clip diagnostic.
        name (str): Scene identifier used for output file names.
        profile (dict | None): Rasterio profile of the thermal band.
    """

    acquired: datetime
    lat: np.ndarray
    lon: np.ndarray
    temperature: np.ndarray
    quality: np.ndarray
    spacecraft: Spacecraft
    report: FilterReport
    name: str = "scene"
    profile: dict | None = field(default=None, repr=False)

    def to_xarray(self) -> xr.Dataset:
        """Return the result as a dataset with 2-D lat/lon coordinates."""
        acquired = self.acquired
        if acquired.tzinfo is not None:
            acquired = acquired.replace(tzinfo=None)
        return xr.Dataset(
            data_vars={
                "temperature": (
                    ("y", "x"),
                    self.temperature,
                    {"units": "degC", "long_name": "surface temperature"},
                ),
                "quality": (
                    ("y", "x"),
                    self.quality,
                    {
                        "long_name": "surface category",
                        "flag_values": [0, 1, 2, 3, 4, 5],
                        "flag_meanings": "land water cloud_shadow snow cloud outside",
                    },
                ),
            },
            coords={
                "lat": (("y", "x"), self.lat, {"units": "degrees_north"}),
                "lon": (("y", "x"), self.lon, {"units": "degrees_east"}),
                "time": np.datetime64(acquired, "ns"),
            },
            attrs={
                "spacecraft": self.spacecraft.value,
                "scene": self.name,
                "percentile_low": self.report.low_percentile,
                "percentile_high": self.report.high_percentile,
                "percentile_removed": self.report.removed,
            },
        )


def _match_suffix(files: Sequence[Path], suffix: str, folder: Path) -> Path:
    matches = [f for f in files if f.name.upper().endswith(suffix.upper())]
    if not matches:
        raise FileNotFoundError(f"No *{suffix} file found in {folder}")
    if len(matches) > 1:
        logging.warning(
            "Multiple *%s files found in %s; defaulting to '%s'.",
            suffix,
            folder,
            matches[0].name,
        )
    return matches[0]


def _level2_files(folder: Path) -> list[Path]:
    return sorted(p for p in folder.iterdir() if p.is_file() and "L2" in p.name)


def find_mtl(folder: str | Path) -> Path:
    """Return the ``_MTL.txt`` file of a Level 2 scene folder."""
    folder = Path(folder)
    return _match_suffix(_level2_files(folder), MTL_SUFFIX, folder)


def find_scene_files(folder: str | Path, spacecraft: Spacecraft) -> SceneFiles:
    """Locate the MTL, thermal and QA_PIXEL files of a scene folder.

    Args:
        folder (str | Path): Folder holding the extracted Level 2 product.
        spacecraft (Spacecraft): Mission, selects the thermal band file.

    Returns:
        SceneFiles: Paths of the three inputs.

    Raises:
        FileNotFoundError: If any of the files is missing.
    """
    folder = Path(folder)
    files = _level2_files(folder)
    return SceneFiles(
        mtl=_match_suffix(files, MTL_SUFFIX, folder),
        thermal=_match_suffix(files, spacecraft.thermal_band_suffix, folder),
        qa=_match_suffix(files, QA_SUFFIX, folder),
    )


def _resolve_options(
    retrieve_land: bool | None,
    percentile_bounds: tuple[float, float] | None,
    min_temperature: float | None,
) -> tuple[bool, tuple[float, float], float]:
    cfg = get_settings()
    return (
        cfg.retrieve_land if retrieve_land is None else retrieve_land,
        cfg.percentile_bounds if percentile_bounds is None else percentile_bounds,
        cfg.min_temperature if min_temperature is None else min_temperature,
    )


def invert_arrays(
    metadata: SceneMetadata,
    thermal_dn: np.ndarray,
    qa: np.ndarray,
    lat: np.ndarray,
    lon: np.ndarray,
    retrieve_land: bool | None = None,
    percentile_bounds: tuple[float, float] | None = None,
    min_temperature: float | None = None,
    on_report: Callable[[FilterReport], None] | None = None,
    name: str = "scene",
) -> SSTResult:
    """Invert surface temperature from in-memory scene rasters.

    Every fatal condition (unknown spacecraft, missing metadata, grids of
    different shape) is raised before any grid is computed.

    Args:
        metadata (SceneMetadata): Metadata with the spacecraft id, date,
            time and calibration constants.
        thermal_dn (np.ndarray): Thermal band digital numbers.
        qa (np.ndarray): QA_PIXEL values.
        lat (np.ndarray): Pixel latitudes.
        lon (np.ndarray): Pixel longitudes.
        retrieve_land (bool | None): Keep land pixels; ``None`` uses settings.
        percentile_bounds (tuple[float, float] | None): Clip percentiles;
            ``None`` uses settings.
        min_temperature (float | None): Physical floor; ``None`` uses
            settings.
        on_report (Callable | None): Receives the clip diagnostic.
        name (str): Scene identifier.

    Returns:
        SSTResult: Filtered temperature and its companions.
    """
    retrieve_land, percentile_bounds, min_temperature = _resolve_options(
        retrieve_land, percentile_bounds, min_temperature
    )
    spacecraft = Spacecraft.from_id(metadata.text(SPACECRAFT_KEY))
    acquired = metadata.acquisition_datetime()
    check_same_shape(thermal=thermal_dn, qa=qa, lat=lat, lon=lon)

    logging.info(f"Loading thermal band B{spacecraft.thermal_band} from {name}")
    temperature = calibrate(thermal_dn, spacecraft, metadata)
    quality = classify(qa)
    temperature, report = filter_temperature(
        temperature,
        quality,
        retrieve_land=retrieve_land,
        percentile_bounds=percentile_bounds,
        min_temperature=min_temperature,
        on_report=on_report,
        label=name,
    )
    return SSTResult(
        acquired=acquired,
        lat=np.asarray(lat, dtype=np.float64),
        lon=np.asarray(lon, dtype=np.float64),
        temperature=temperature,
        quality=quality,
        spacecraft=spacecraft,
        report=report,
        name=name,
    )


def invert_scene(
    folder: str | Path,
    retrieve_land: bool | None = None,
    percentile_bounds: tuple[float, float] | None = None,
    min_temperature: float | None = None,
    on_report: Callable[[FilterReport], None] | None = None,
) -> SSTResult:
    """Invert surface temperature of the Level 2 scene stored in ``folder``.

    Args:
        folder (str | Path): Folder of an extracted Landsat 4, 5, 7, 8 or 9
            Collection 2 Level 2 product.
        retrieve_land (bool | None): Also retrieve land, small lake and river
            temperature; ``None`` uses settings (default ``False``).
        percentile_bounds (tuple[float, float] | None): Percentiles outside
            which values are removed; ``None`` uses settings (default
            ``(2.5, 99)``).
        min_temperature (float | None): Physical floor; ``None`` uses
            settings.
        on_report (Callable | None): Receives the clip diagnostic.

    Returns:
        SSTResult: Acquisition time, lat/lon, temperature and categories.
    """
    folder = Path(folder)
    name = folder.name

    mtl_path = find_mtl(folder)
    spacecraft_id = read_mtl(mtl_path, [SPACECRAFT_KEY]).text(SPACECRAFT_KEY)
    spacecraft = Spacecraft.from_id(spacecraft_id)
    files = find_scene_files(folder, spacecraft)
    metadata = read_mtl(
        files.mtl,
        [SPACECRAFT_KEY, DATE_KEY, TIME_KEY, *calibration_keys(spacecraft)],
    )

    thermal_dn, profile = read_band(files.thermal)
    qa, _ = read_band(files.qa)
    logging.info(f"Recovering latitude and longitude from {name}")
    lat, lon = raster_latlon(files.thermal)

    result = invert_arrays(
        metadata,
        thermal_dn,
        qa,
        lat,
        lon,
        retrieve_land=retrieve_land,
        percentile_bounds=percentile_bounds,
        min_temperature=min_temperature,
        on_report=on_report,
        name=name,
    )
    result.profile = profile
    return result


def save_result(
    result: SSTResult, out_dir: str | Path, profile: dict | None = None
) -> dict[str, Path]:
    """Write temperature and quality GeoTIFFs of a result.

    Args:
        result (SSTResult): Inverted scene.
        out_dir (str | Path): Output directory.
        profile (dict | None): Rasterio profile of the scene grid; defaults
            to the profile captured by :func:`invert_scene`.

    Returns:
        dict[str, Path]: Written paths keyed ``"temperature"`` and
        ``"quality"``.
    """
    profile = profile if profile is not None else result.profile
    if profile is None:
        raise ValueError(f"No raster profile available to write {result.name}")

    out_dir = Path(out_dir)
    return {
        "temperature": write_band(
            out_dir / f"{result.name}_sst.tif",
            result.temperature.astype(np.float32),
            profile,
            nodata=np.nan,
        ),
        "quality": write_band(
            out_dir / f"{result.name}_quality.tif",
            result.quality,
            profile,
            nodata=None,
        ),
    }


def _process_one(
    folder: str,
    out_dir: str,
    retrieve_land: bool | None,
    percentile_bounds: tuple[float, float] | None,
) -> list[str]:
    result = invert_scene(
        folder, retrieve_land=retrieve_land, percentile_bounds=percentile_bounds
    )
    return [str(p) for p in save_result(result, out_dir).values()]


def process_scenes(
    folders: Sequence[str | Path],
    out_dir: str | Path,
    retrieve_land: bool | None = None,
    percentile_bounds: tuple[float, float] | None = None,
    n_workers: int = 1,
) -> dict[str, object]:
    """Invert and save several scenes, optionally in parallel processes.

    A failing scene is logged and recorded; the remaining scenes still run.

    Args:
        folders (Sequence[str | Path]): Scene folders.
        out_dir (str | Path): Directory receiving the GeoTIFFs.
        retrieve_land (bool | None): See :func:`invert_scene`.
        percentile_bounds (tuple[float, float] | None): See
            :func:`invert_scene`.
        n_workers (int): Worker processes; ``1`` runs in this process.

    Returns:
        dict[str, object]: ``"written"`` list of output paths and
        ``"errors"`` mapping of scene folder to error message.
    """
    written: list[str] = []
    errors: dict[str, str] = {}
    args = [(str(f), str(out_dir), retrieve_land, percentile_bounds) for f in folders]

    if n_workers <= 1:
        for a in tqdm(args, desc="Inverting scenes"):
            try:
                written.extend(_process_one(*a))
            except Exception as e:
                logging.error(f"[ERROR] {a[0]}: {e}")
                errors[a[0]] = str(e)
        return {"written": written, "errors": errors}

    with ProcessPoolExecutor(max_workers=n_workers) as pool:
        futures = {pool.submit(_process_one, *a): a[0] for a in args}
        for fut in tqdm(
            as_completed(futures), total=len(futures), desc="Inverting scenes"
        ):
            folder = futures[fut]
            try:
                written.extend(fut.result())
            except Exception as e:
                logging.error(f"[ERROR] {folder}: {e}")
                errors[folder] = str(e)
    return {"written": written, "errors": errors}

"""Quality masking and robust outlier rejection of temperature grids."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from sstmaps.core.quality import QualityCategory
from sstmaps.errors import ShapeMismatchError

__all__ = [
    "FilterReport",
    "apply_quality_mask",
    "apply_temperature_floor",
    "percentile_clip",
    "filter_temperature",
]

DEFAULT_PERCENTILES = (2.5, 99.0)
MIN_TEMPERATURE = -60.0


@dataclass(frozen=True)
class FilterReport:
    """Outcome of the percentile clip.

    Attributes:
        removed (int): Pixels nulled by the clip only.
        valid_before (int): Non-NaN pixels entering the clip.
        total (int): Pixels in the grid.
        low_percentile (float): Requested lower percentile.
        high_percentile (float): Requested upper percentile.
        low_value (float): Temperature at the lower percentile, NaN when the
            clip was skipped.
        high_value (float): Temperature at the upper percentile, NaN when the
            clip was skipped.
    """

    removed: int
    valid_before: int
    total: int
    low_percentile: float
    high_percentile: float
    low_value: float = float("nan")
    high_value: float = float("nan")

    @property
    def removed_fraction(self) -> float:
        """Share of the pixels valid before the clip that it removed."""
        if self.valid_before == 0:
            return 0.0
        return self.removed / self.valid_before

    @property
    def percent_of_scene(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.removed / self.total

    @property
    def skipped(self) -> bool:
        return self.valid_before == 0


def _check_bounds(percentile_bounds: tuple[float, float]) -> tuple[float, float]:
    low, high = (float(p) for p in percentile_bounds)
    if not 0.0 <= low < high <= 100.0:
        raise ValueError(
            f"Percentile bounds must satisfy 0 <= low < high <= 100, got {low}, {high}"
        )
    return low, high


def apply_quality_mask(
    temperature: np.ndarray, quality: np.ndarray, retrieve_land: bool = False
) -> np.ndarray:
    """Null every pixel whose quality category is not retained.

    Water-only keeps :attr:`QualityCategory.WATER`; with ``retrieve_land``
    land is kept as well. Operates in place and returns ``temperature``.
    """
    if temperature.shape != quality.shape:
        raise ShapeMismatchError(
            f"Temperature grid {temperature.shape} and quality mask "
            f"{quality.shape} differ in shape"
        )
    if retrieve_land:
        temperature[quality > QualityCategory.WATER] = np.nan
    else:
        temperature[quality != QualityCategory.WATER] = np.nan
    return temperature


def apply_temperature_floor(
    temperature: np.ndarray, min_temperature: float = MIN_TEMPERATURE
) -> np.ndarray:
    """Null temperatures below ``min_temperature`` (Celsius) in place."""
    with np.errstate(invalid="ignore"):
        temperature[temperature < min_temperature] = np.nan
    return temperature


def percentile_clip(
    temperature: np.ndarray,
    percentile_bounds: tuple[float, float] = DEFAULT_PERCENTILES,
) -> FilterReport:
    """Null values outside the percentile range of the valid temperatures.

    Percentiles follow the Hazen definition used by MATLAB ``prctile``.
    Values equal to a bound are kept. A grid without any valid value is left
    unchanged.

    Args:
        temperature (np.ndarray): Float grid modified in place.
        percentile_bounds (tuple[float, float]): Lower and upper percentile.

    Returns:
        FilterReport: Number of pixels removed and the computed bounds.
    """
    low, high = _check_bounds(percentile_bounds)
    valid = ~np.isnan(temperature)
    valid_before = int(valid.sum())
    if valid_before == 0:
        return FilterReport(0, 0, temperature.size, low, high)

    low_value, high_value = np.percentile(
        temperature[valid], [low, high], method="hazen"
    )
    outside = valid & ((temperature < low_value) | (temperature > high_value))
    temperature[outside] = np.nan
    return FilterReport(
        removed=int(outside.sum()),
        valid_before=valid_before,
        total=temperature.size,
        low_percentile=low,
        high_percentile=high,
        low_value=float(low_value),
        high_value=float(high_value),
    )


def filter_temperature(
    temperature: np.ndarray,
    quality: np.ndarray,
    retrieve_land: bool = False,
    percentile_bounds: tuple[float, float] = DEFAULT_PERCENTILES,
    min_temperature: float = MIN_TEMPERATURE,
    on_report: Callable[[FilterReport], None] | None = None,
    label: str = "scene",
) -> tuple[np.ndarray, FilterReport]:
    """Apply quality masking, the physical floor and the percentile clip.

    Args:
        temperature (np.ndarray): Temperature grid in Celsius, modified in
            place when it is already ``float64``.
        quality (np.ndarray): Category mask from :func:`classify`.
        retrieve_land (bool): Keep land pixels as well as water.
        percentile_bounds (tuple[float, float]): Percentile clip bounds.
        min_temperature (float): Physical floor in Celsius.
        on_report (Callable | None): Called with the clip diagnostic.
        label (str): Scene name used in log messages.

    Returns:
        tuple[np.ndarray, FilterReport]: Filtered grid and clip diagnostic.
    """
    bounds = _check_bounds(percentile_bounds)
    temperature = np.asarray(temperature, dtype=np.float64)

    apply_quality_mask(temperature, quality, retrieve_land)
    apply_temperature_floor(temperature, min_temperature)
    report = percentile_clip(temperature, bounds)

    if report.skipped:
        logging.warning(f"[WARNING] No valid pixel left in {label}; clip skipped")
    else:
        logging.info(
            "%.2f%% pixel deleted from %s: out of [%.1f %.1f] percentiles",
            report.percent_of_scene,
            label,
            report.low_percentile,
            report.high_percentile,
        )
    if on_report is not None:
        on_report(report)
    return temperature, report

"""Conversion of Level-2 surface temperature digital numbers to Celsius."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from sstmaps.core.metadata import SceneMetadata
from sstmaps.core.missions import Spacecraft

KELVIN_OFFSET = 273.15


@dataclass(frozen=True)
class ThermalCalibration:
    """Linear scaling of one thermal band.

    Attributes:
        band (int): Thermal band number (6 or 10).
        slope (float): ``TEMPERATURE_MULT_BAND_ST_B<band>``.
        intercept (float): ``TEMPERATURE_ADD_BAND_ST_B<band>`` in Kelvin.
    """

    band: int
    slope: float
    intercept: float


def calibration_keys(spacecraft: Spacecraft | str) -> list[str]:
    """Return the metadata keys holding the calibration of ``spacecraft``."""
    spacecraft = Spacecraft.from_id(spacecraft)
    return [spacecraft.slope_key, spacecraft.intercept_key]


def resolve_calibration(
    metadata: SceneMetadata, spacecraft: Spacecraft | str
) -> ThermalCalibration:
    """Look up slope and intercept for the spacecraft's thermal band.

    Args:
        metadata (SceneMetadata): Parsed scene metadata.
        spacecraft (Spacecraft | str): Mission that acquired the scene, or
            its ``SPACECRAFT_ID``.

    Returns:
        ThermalCalibration: Band number and its scaling constants.

    Raises:
        UnsupportedSpacecraftError: If the spacecraft is not supported.
        MissingKeyError: If either constant is absent.
        MetadataFormatError: If either constant is not numeric.
    """
    spacecraft = Spacecraft.from_id(spacecraft)
    return ThermalCalibration(
        band=spacecraft.thermal_band,
        slope=metadata.number(spacecraft.slope_key),
        intercept=metadata.number(spacecraft.intercept_key),
    )


def calibrate(
    raw: np.ndarray, spacecraft: Spacecraft | str, metadata: SceneMetadata
) -> np.ndarray:
    """Convert thermal band digital numbers to surface temperature in Celsius.

    No clamping is done; fill and implausible values pass through for the
    outlier filter to reject.

    Args:
        raw (np.ndarray): Digital numbers of the thermal band.
        spacecraft (Spacecraft | str): Mission that acquired the scene.
        metadata (SceneMetadata): Metadata holding the calibration constants.

    Returns:
        np.ndarray: ``raw * slope + intercept - 273.15`` as ``float64``.
    """
    cal = resolve_calibration(metadata, spacecraft)
    dn = np.asarray(raw, dtype=np.float64)
    return dn * cal.slope + cal.intercept - KELVIN_OFFSET

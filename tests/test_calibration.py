"""Tests for spacecraft band selection and thermal calibration."""

import numpy as np
import pytest

from sstmaps.core.calibration import (
    KELVIN_OFFSET,
    calibrate,
    calibration_keys,
    resolve_calibration,
)
from sstmaps.core.metadata import parse_mtl
from sstmaps.core.missions import Spacecraft
from sstmaps.errors import (
    MetadataFormatError,
    MissingKeyError,
    UnsupportedSpacecraftError,
)

SLOPE = 0.00341802
INTERCEPT = 149.0


def _metadata(band: int, slope=SLOPE, intercept=INTERCEPT):
    text = (
        f"    TEMPERATURE_MULT_BAND_ST_B{band} = {slope}\n"
        f"    TEMPERATURE_ADD_BAND_ST_B{band} = {intercept}\n"
    )
    return parse_mtl(
        text, [f"TEMPERATURE_MULT_BAND_ST_B{band}", f"TEMPERATURE_ADD_BAND_ST_B{band}"]
    )


@pytest.mark.parametrize(
    "spacecraft_id, band",
    [
        ("LANDSAT_4", 6),
        ("LANDSAT_5", 6),
        ("LANDSAT_7", 6),
        ("LANDSAT_8", 10),
        ("LANDSAT_9", 10),
    ],
)
def test_thermal_band_selection(spacecraft_id, band) -> None:
    spacecraft = Spacecraft.from_id(spacecraft_id)

    assert spacecraft.thermal_band == band
    assert spacecraft.thermal_band_suffix == f"_ST_B{band}.TIF"
    assert calibration_keys(spacecraft) == [
        f"TEMPERATURE_MULT_BAND_ST_B{band}",
        f"TEMPERATURE_ADD_BAND_ST_B{band}",
    ]


@pytest.mark.parametrize("spacecraft_id", ["LANDSAT_1", "SENTINEL_2A", ""])
def test_unknown_spacecraft(spacecraft_id) -> None:
    with pytest.raises(UnsupportedSpacecraftError):
        Spacecraft.from_id(spacecraft_id)


def test_calibration_is_affine() -> None:
    """Every sample maps to dn * slope + intercept - 273.15."""
    raw = np.array([[0, 1, 40000], [44000, 50000, 65535]], dtype=np.uint16)

    temperature = calibrate(raw, Spacecraft.LANDSAT_8, _metadata(10))

    expected = raw.astype(np.float64) * SLOPE + INTERCEPT - KELVIN_OFFSET
    np.testing.assert_allclose(temperature, expected, rtol=0, atol=1e-12)
    assert temperature.dtype == np.float64


def test_calibration_has_no_spatial_coupling() -> None:
    raw = np.array([[30000, 45000], [45000, 60000]], dtype=np.uint16)
    md = _metadata(6)

    full = calibrate(raw, Spacecraft.LANDSAT_5, md)
    single = calibrate(raw[:1, 1:], Spacecraft.LANDSAT_5, md)

    assert full[0, 1] == single[0, 0]
    assert full[0, 1] == full[1, 0]


def test_no_clamping() -> None:
    """Fill DN and implausible values pass through unchanged."""
    raw = np.zeros((1, 1), dtype=np.uint16)

    temperature = calibrate(raw, Spacecraft.LANDSAT_7, _metadata(6))

    assert temperature[0, 0] == pytest.approx(INTERCEPT - KELVIN_OFFSET)


def test_wrong_band_constants_missing() -> None:
    """Landsat 8 needs band 10 constants, band 6 ones are not enough."""
    with pytest.raises(MissingKeyError):
        calibrate(np.ones((2, 2)), Spacecraft.LANDSAT_8, _metadata(6))


def test_text_constant_rejected() -> None:
    md = _metadata(10, slope="N/A")

    with pytest.raises(MetadataFormatError):
        resolve_calibration(md, Spacecraft.LANDSAT_9)


def test_resolve_calibration() -> None:
    cal = resolve_calibration(_metadata(10), Spacecraft.LANDSAT_8)

    assert cal.band == 10
    assert cal.slope == pytest.approx(SLOPE)
    assert cal.intercept == pytest.approx(INTERCEPT)


def test_spacecraft_id_string_accepted() -> None:
    """A raw SPACECRAFT_ID string calibrates like the enum member."""
    raw = np.array([[40000, 45000]], dtype=np.uint16)
    md = _metadata(10)

    np.testing.assert_array_equal(
        calibrate(raw, "LANDSAT_9", md), calibrate(raw, Spacecraft.LANDSAT_9, md)
    )
    assert resolve_calibration(md, "landsat_8").band == 10
    assert calibration_keys("LANDSAT_5")[0] == "TEMPERATURE_MULT_BAND_ST_B6"


@pytest.mark.parametrize("spacecraft_id", ["LANDSAT_2", "TERRA"])
def test_unknown_spacecraft_string_in_calibrate(spacecraft_id) -> None:
    with pytest.raises(UnsupportedSpacecraftError):
        calibrate(np.ones((2, 2)), spacecraft_id, _metadata(10))

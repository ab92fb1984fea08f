"""Spacecraft identities and their thermal band configuration."""

from __future__ import annotations

from enum import Enum

from sstmaps.errors import UnsupportedSpacecraftError


# --------------------------
# Landsat Collection 2 Level 2
# --------------------------
class Spacecraft(Enum):
    """Landsat missions with a Level-2 surface temperature product."""

    LANDSAT_4 = "LANDSAT_4"
    LANDSAT_5 = "LANDSAT_5"
    LANDSAT_7 = "LANDSAT_7"
    LANDSAT_8 = "LANDSAT_8"
    LANDSAT_9 = "LANDSAT_9"

    @classmethod
    def from_id(cls, spacecraft_id: "str | Spacecraft") -> "Spacecraft":
        """Resolve the ``SPACECRAFT_ID`` metadata value.

        A :class:`Spacecraft` member is returned unchanged.

        Raises:
            UnsupportedSpacecraftError: If the id is not a supported mission.
        """
        if isinstance(spacecraft_id, cls):
            return spacecraft_id
        try:
            return cls(str(spacecraft_id).strip().upper())
        except ValueError:
            raise UnsupportedSpacecraftError(spacecraft_id) from None

    @property
    def thermal_band(self) -> int:
        # TIRS surface temperature is derived from band 10 only
        if self in (Spacecraft.LANDSAT_8, Spacecraft.LANDSAT_9):
            return 10
        return 6

    @property
    def thermal_band_suffix(self) -> str:
        return f"_ST_B{self.thermal_band}.TIF"

    @property
    def slope_key(self) -> str:
        return f"TEMPERATURE_MULT_BAND_ST_B{self.thermal_band}"

    @property
    def intercept_key(self) -> str:
        return f"TEMPERATURE_ADD_BAND_ST_B{self.thermal_band}"

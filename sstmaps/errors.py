"""Exception types raised while inverting a scene."""


class SSTError(Exception):
    """Base class for fatal scene processing errors."""


class MissingKeyError(SSTError, KeyError):
    """A required metadata key is absent from the MTL text."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Required metadata key '{self.key}' not found"


class MetadataFormatError(SSTError, ValueError):
    """A metadata value could not be interpreted as the expected type."""


class UnsupportedSpacecraftError(SSTError, ValueError):
    """The spacecraft is not one of the supported Landsat missions."""

    def __init__(self, spacecraft: str):
        self.spacecraft = spacecraft
        super().__init__(f"Spacecraft {spacecraft} not known")


class ShapeMismatchError(SSTError, ValueError):
    """Rasters of one scene do not share the same pixel grid."""

# sstmaps/__init__.py

from .errors import (
    MetadataFormatError,
    MissingKeyError,
    ShapeMismatchError,
    SSTError,
    UnsupportedSpacecraftError,
)

__version__ = "0.1.0"

__all__ = [
    "MetadataFormatError",
    "MissingKeyError",
    "ShapeMismatchError",
    "SSTError",
    "UnsupportedSpacecraftError",
]

from .calibration import ThermalCalibration, calibrate, resolve_calibration
from .filtering import FilterReport, filter_temperature
from .metadata import MetadataValue, SceneMetadata, parse_mtl, read_mtl
from .missions import Spacecraft
from .quality import QA_RULES, QualityCategory, QualityRule, classify

__all__ = [
    "ThermalCalibration",
    "calibrate",
    "resolve_calibration",
    "FilterReport",
    "filter_temperature",
    "MetadataValue",
    "SceneMetadata",
    "parse_mtl",
    "read_mtl",
    "Spacecraft",
    "QA_RULES",
    "QualityCategory",
    "QualityRule",
    "classify",
]

"""Decoding of the Collection 2 ``QA_PIXEL`` band into surface categories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

import numpy as np

# QA_PIXEL bit positions (0-indexed, USGS Collection 2 numbering)
BIT_FILL = 0
BIT_DILATED_CLOUD = 1
BIT_CIRRUS = 2
BIT_CLOUD = 3
BIT_CLOUD_SHADOW = 4
BIT_SNOW = 5
BIT_CLEAR = 6
BIT_WATER = 7


class QualityCategory(IntEnum):
    """Fmask style surface categories."""

    LAND = 0
    WATER = 1
    CLOUD_SHADOW = 2
    SNOW = 3
    CLOUD = 4
    OUTSIDE = 5


@dataclass(frozen=True)
class QualityRule:
    """Assign ``category`` wherever ``bit`` is set.

    Attributes:
        bit (int): 0-indexed QA_PIXEL bit.
        category (QualityCategory): Category assigned where the bit is set.
        overrides (bool): Overwrite categories set by earlier rules. When
            ``False`` only pixels still classified as land are assigned.
    """

    bit: int
    category: QualityCategory
    overrides: bool = True


# Applied in order, later rules win. Shadow must come after the cloud bits
# and fill must come last.
QA_RULES: tuple[QualityRule, ...] = (
    QualityRule(BIT_WATER, QualityCategory.WATER),
    QualityRule(BIT_DILATED_CLOUD, QualityCategory.CLOUD),
    QualityRule(BIT_CIRRUS, QualityCategory.CLOUD),
    QualityRule(BIT_CLOUD, QualityCategory.CLOUD),
    QualityRule(BIT_CLOUD_SHADOW, QualityCategory.CLOUD_SHADOW),
    QualityRule(BIT_SNOW, QualityCategory.SNOW),
    QualityRule(BIT_FILL, QualityCategory.OUTSIDE),
)


def bit_set(qa: np.ndarray, bit: int) -> np.ndarray:
    """Return a boolean array that is ``True`` where ``bit`` is set."""
    return ((qa >> bit) & 1).astype(bool)


def classify(
    qa: np.ndarray, rules: tuple[QualityRule, ...] = QA_RULES
) -> np.ndarray:
    """Build the category mask of a QA_PIXEL raster.

    Args:
        qa (np.ndarray): Unsigned integer QA_PIXEL values.
        rules (tuple[QualityRule, ...]): Ordered override chain.

    Returns:
        np.ndarray: ``uint8`` array of :class:`QualityCategory` codes with
        the shape of ``qa``.

    Raises:
        TypeError: If ``qa`` is not an integer array.
    """
    qa = np.asarray(qa)
    if not np.issubdtype(qa.dtype, np.integer):
        raise TypeError(f"QA_PIXEL raster must be integer, got {qa.dtype}")

    mask = np.full(qa.shape, QualityCategory.LAND, dtype=np.uint8)
    for rule in rules:
        hit = bit_set(qa, rule.bit)
        if not rule.overrides:
            hit &= mask == QualityCategory.LAND
        mask[hit] = rule.category
    return mask

"""Parsing of Landsat ``_MTL.txt`` metadata into typed key/value pairs."""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType

from sstmaps.errors import MetadataFormatError, MissingKeyError

DATE_KEY = "DATE_ACQUIRED"
TIME_KEY = "SCENE_CENTER_TIME"
SPACECRAFT_KEY = "SPACECRAFT_ID"

# plain decimal or scientific notation, no underscores, nan or inf
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class MetadataValue:
    """A metadata value that is either numeric or text.

    Attributes:
        text (str): Value as written in the file, quotes removed.
        number (float | None): Parsed numeric value, ``None`` for text.
    """

    text: str
    number: float | None = None

    @classmethod
    def from_text(cls, raw: str) -> "MetadataValue":
        """Build a value from raw text, keeping it as text when not numeric."""
        cleaned = raw.replace('"', "").strip()
        if not _NUMBER.fullmatch(cleaned):
            return cls(cleaned)
        number = float(cleaned)
        if not math.isfinite(number):
            return cls(cleaned)
        return cls(cleaned, number)

    @property
    def is_numeric(self) -> bool:
        return self.number is not None

    def as_float(self) -> float:
        if self.number is None:
            raise TypeError(f"Metadata value '{self.text}' is not numeric")
        return self.number

    def as_text(self) -> str:
        return self.text


class SceneMetadata(Mapping):
    """Read-only mapping of MTL keys to :class:`MetadataValue`."""

    def __init__(self, values: Mapping[str, MetadataValue]):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key: str) -> MetadataValue:
        try:
            return self._values[key]
        except KeyError:
            raise MissingKeyError(key) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v.text!r}" for k, v in self._values.items())
        return f"SceneMetadata({items})"

    def number(self, key: str) -> float:
        """Return a numeric value, raising if the stored value is text."""
        value = self[key]
        if not value.is_numeric:
            raise MetadataFormatError(
                f"Metadata key '{key}' holds non-numeric value '{value.text}'"
            )
        return value.as_float()

    def text(self, key: str) -> str:
        return self[key].as_text()

    def acquisition_datetime(self) -> datetime:
        """Combine the acquisition date and scene centre time into a UTC datetime.

        ``SCENE_CENTER_TIME`` carries seven fractional digits
        (``HH:MM:SS.fffffffZ``); digits beyond microseconds are truncated.

        Returns:
            datetime: Timezone-aware acquisition timestamp.

        Raises:
            MissingKeyError: If either key is absent.
            MetadataFormatError: If the date or time cannot be parsed.
        """
        date = self.text(DATE_KEY)
        clock = self.text(TIME_KEY).rstrip("Zz")
        whole, _, fraction = clock.partition(".")
        stamp = f"{date} {whole}"
        if fraction:
            stamp += "." + fraction[:6].ljust(6, "0")
            fmt = "%Y-%m-%d %H:%M:%S.%f"
        else:
            fmt = "%Y-%m-%d %H:%M:%S"
        try:
            parsed = datetime.strptime(stamp, fmt)
        except ValueError as e:
            raise MetadataFormatError(
                f"Cannot parse acquisition time from '{date}' and '{clock}'"
            ) from e
        return parsed.replace(tzinfo=timezone.utc)


def _key_pattern(key: str) -> re.Pattern:
    return re.compile(rf"^[ \t]*{re.escape(key)} = (.*?)[ \t\r]*$", re.MULTILINE)


def parse_mtl(text: str, keys: Iterable[str]) -> SceneMetadata:
    """Extract the requested keys from MTL text.

    Args:
        text (str): Full contents of a ``_MTL.txt`` file.
        keys (Iterable[str]): Keys to resolve, e.g. ``"SPACECRAFT_ID"``.

    Returns:
        SceneMetadata: Mapping holding one value per requested key.

    Raises:
        MissingKeyError: If a requested key does not appear in ``text``.
    """
    values: dict[str, MetadataValue] = {}
    for key in keys:
        match = _key_pattern(key).search(text)
        if match is None:
            raise MissingKeyError(key)
        values[key] = MetadataValue.from_text(match.group(1))

    logging.debug(
        "Resolved metadata: %s",
        {k: v.number if v.is_numeric else v.text for k, v in values.items()},
    )
    return SceneMetadata(values)


def read_mtl(path: str | Path, keys: Iterable[str]) -> SceneMetadata:
    """Read an MTL file from disk and parse the requested keys."""
    text = Path(path).read_text(encoding="utf-8", errors="ignore")
    return parse_mtl(text, keys)

"""Configuration helpers for locating data directories and filter defaults."""

from os import PathLike
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Parameters:
        None

    Attributes:
        data_root (Path): Root directory for scenes and written products.
        retrieve_land (bool): Keep clear land, small lake and river pixels
            in addition to clear water.
        percentile_low (float): Lower percentile of the outlier clip.
        percentile_high (float): Upper percentile of the outlier clip.
        min_temperature (float): Temperatures (Celsius) below this floor are
            discarded before the percentile clip.
    """

    # Can be overridden with SST_DATA_ROOT=/mnt/bucket
    data_root: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent
    )
    retrieve_land: bool = False
    percentile_low: float = 2.5
    percentile_high: float = 99.0
    min_temperature: float = -60.0

    class Config:
        """Pydantic metadata configuring the ``SST_`` environment variable prefix.

        Parameters:
            None

        Attributes:
            env_prefix (str): Prefix applied to environment variables.
        """

        env_prefix = "SST_"

    @property
    def percentile_bounds(self) -> tuple[float, float]:
        return (self.percentile_low, self.percentile_high)


def get_settings() -> Settings:
    """Return a fresh :class:`Settings` instance using current environment values.

    Args:
        None

    Returns:
        Settings: Settings object populated from environment variables.
    """

    return Settings()


settings = Settings()


def data_path(*parts: str | PathLike[str]) -> Path:
    """Convenience for building paths inside the :data:`data_root`.

    Args:
        *parts (str | os.PathLike): Path components joined relative to
            :attr:`Settings.data_root`.

    Returns:
        Path: Absolute path inside the configured data root.
    """

    return settings.data_root.joinpath(*parts)

"""
Configuration management for ParFlow.

Configuration is loaded from environment variables (prefixed with ``PARFLOW_``)
and an optional ``.env`` file, with fallbacks to the layout of a Garmin
DI-GOLF export directory.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .const import (
    CLUB_EXPORT, CLUB_TYPES_EXPORT, DEFAULT_BIN_SIZE, DEFAULT_DATA_DIR,
    DEFAULT_FITCSVTOOL_JAR, DEFAULT_GIR_MIN_HOLES, DEFAULT_HIGH_PERCENTILE,
    DEFAULT_IMPLAUSIBLE_PUTTS_RATIO, DEFAULT_LOW_PERCENTILE,
    DEFAULT_WEDGE_FULL_SWING_PERCENTILE, PUTTER_CLUB_TYPE_ID,
    SCORECARD_EXPORT, SHOT_EXPORT,
)

# Load .env from the current working directory
load_dotenv()


class MetricsConfig(BaseModel):
    """Tunable thresholds of the metrics engine."""
    
    low_percentile: float = Field(default=DEFAULT_LOW_PERCENTILE, ge=0, le=100)
    high_percentile: float = Field(default=DEFAULT_HIGH_PERCENTILE, ge=0, le=100)
    bin_size: float = Field(default=DEFAULT_BIN_SIZE, gt=0)
    implausible_putts_ratio: float = Field(default=DEFAULT_IMPLAUSIBLE_PUTTS_RATIO, ge=0)
    putter_club_type_id: int = Field(default=PUTTER_CLUB_TYPE_ID)
    wedge_full_swing_percentile: float = Field(default=DEFAULT_WEDGE_FULL_SWING_PERCENTILE, ge=0, le=100)
    gir_min_holes: int = Field(default=DEFAULT_GIR_MIN_HOLES, ge=1)
    
    @model_validator(mode="after")
    def check_percentile_order(self) -> "MetricsConfig":
        if self.low_percentile >= self.high_percentile:
            raise ValueError("low_percentile must be lower than high_percentile")
        return self


class Settings(BaseSettings):
    """Main application settings."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PARFLOW_",
        env_nested_delimiter="__",
        extra="ignore"
    )
    
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    
    # Data layout
    data_dir: Path = Field(default=Path(DEFAULT_DATA_DIR))
    fit_json_dirname: str = Field(default="fit-json")
    fit_csv_dirname: str = Field(default="fit-csv")
    derived_dirname: str = Field(default="derived")
    pars_dirname: str = Field(default="hole-pars")
    scorecards_dirname: str = Field(default="scorecards")
    output_filename: str = Field(default="rounds.json")
    scorecard_export: str = Field(default=SCORECARD_EXPORT)
    shot_export: str = Field(default=SHOT_EXPORT)
    club_export: str = Field(default=CLUB_EXPORT)
    club_types_export: str = Field(default=CLUB_TYPES_EXPORT)
    
    # External decoder
    fitcsvtool_jar: Path = Field(default=Path(DEFAULT_FITCSVTOOL_JAR))
    java_bin: str = Field(default="java")
    decode_workers: int = Field(default=4, ge=1)
    decode_timeout: Optional[float] = Field(default=None, gt=0)
    
    # Logging
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)
    
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    
    @property
    def fit_json_dir(self) -> Path:
        return self.data_dir / self.fit_json_dirname
    
    @property
    def fit_csv_dir(self) -> Path:
        return self.data_dir / self.fit_csv_dirname
    
    @property
    def derived_dir(self) -> Path:
        return self.data_dir / self.derived_dirname
    
    @property
    def pars_dir(self) -> Path:
        return self.derived_dir / self.pars_dirname
    
    @property
    def scorecards_dir(self) -> Path:
        return self.derived_dir / self.scorecards_dirname
    
    @property
    def output_file(self) -> Path:
        return self.derived_dir / self.output_filename
    
    def export_path(self, filename: str) -> Path:
        """Get the path of an export file inside the data directory."""
        return self.data_dir / filename


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


def reset_settings() -> None:
    """Clear the settings cache so the next call re-reads the environment."""
    get_settings.cache_clear()

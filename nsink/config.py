"""Configuration and constants for the N-Sink removal core.

This module defines the regression coefficients, physical constants,
layer/column names and runtime configuration for the nitrogen removal
estimators.

Configuration can be overridden via:
1. Environment variables (e.g., NSINK_PARALLEL=false, NSINK_FOCAL_WINDOW_SIZE=5)
2. .env file in the current directory
3. Default values in code
"""

import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical and mathematical constants used in removal calculations.

    These are NOT configurable - they represent fixed conversion factors
    that should never vary.
    """

    PERCENT: float = 100.0

    # Hydrography travel time to years (1 / 365.25)
    TRAVEL_TIME_TO_YEARS: float = 0.002737851


CONSTANTS = PhysicalConstants()


@dataclass(frozen=True)
class RemovalCoefficients:
    """Empirical regression coefficients (Kellogg et al. 2010).

    Attributes:
        HYDRIC_REMOVAL_FACTOR: Removal fraction of a fully hydric soil unit
        STREAM_DECAY_COEFF: First-order decay coefficient of in-channel removal
        STREAM_DEPTH_EXPONENT: Exponent applied to mean reach depth (m)
        LAKE_INTERCEPT: Lake regression intercept (percent)
        LAKE_SLOPE: Lake regression slope on log10(depth / residence time)
    """

    HYDRIC_REMOVAL_FACTOR: float = 0.8
    STREAM_DECAY_COEFF: float = 0.0513
    STREAM_DEPTH_EXPONENT: float = -1.319
    LAKE_INTERCEPT: float = 79.24
    LAKE_SLOPE: float = 33.26


COEFFICIENTS = RemovalCoefficients()


class RemovalConfig(BaseSettings):
    """Runtime configuration for the removal pipeline.

    Can be overridden via environment variables with NSINK_ prefix:
    - NSINK_TRAVEL_TIME_MISSING_SENTINEL
    - NSINK_ARTIFICIAL_FTYPE
    - NSINK_FOCAL_WINDOW_SIZE
    - NSINK_PARALLEL
    - NSINK_MAX_WORKERS

    Attributes:
        travel_time_missing_sentinel: Reserved travel time value meaning "unavailable"
        artificial_ftype: Stream feature type excluded from stream removal
        focal_window_size: Width of the gap-closing maximum filter (cells)
        parallel: Run independent pipeline stages in worker processes
        max_workers: Number of worker processes (None = 80% of cpu_count)
    """

    model_config = SettingsConfigDict(
        env_prefix="NSINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    travel_time_missing_sentinel: float = Field(
        default=-9999.0, description="Travel time value marking missing data"
    )
    artificial_ftype: str = Field(
        default="ArtificialPath",
        description="Stream ftype representing artificial connectors (no removal)",
    )
    focal_window_size: int = Field(
        default=3, ge=1, description="Maximum filter window used to close raster seams"
    )
    parallel: bool = Field(default=True, description="Enable parallel estimator execution")
    max_workers: int | None = Field(
        default=None, ge=1, description="Worker processes (None = auto-detect)"
    )

    @field_validator("focal_window_size")
    @classmethod
    def must_be_odd(cls, v: int) -> int:
        if v % 2 == 0:
            msg = "focal_window_size must be odd so the window is centred"
            raise ValueError(msg)
        return v


DEFAULT_CONFIG = RemovalConfig()


class InputLayers:
    """Keys of the validated input bundle handed over by data preparation."""

    SOILS = "soils"
    IMPERVIOUS = "impervious"
    STREAMS = "streams"
    TRAVEL_TIME = "travel_time"
    DEPTH = "depth"
    LAKES = "lakes"
    LAKE_MORPHOMETRY = "lake_morphometry"
    RASTER_TEMPLATE = "raster_template"
    WATERSHED = "watershed"

    @classmethod
    def all(cls) -> list[str]:
        """Get list of all required bundle keys."""
        return [
            cls.SOILS,
            cls.IMPERVIOUS,
            cls.STREAMS,
            cls.TRAVEL_TIME,
            cls.DEPTH,
            cls.LAKES,
            cls.LAKE_MORPHOMETRY,
            cls.RASTER_TEMPLATE,
            cls.WATERSHED,
        ]

    @classmethod
    def vector_layers(cls) -> list[str]:
        return [cls.SOILS, cls.STREAMS, cls.LAKES, cls.WATERSHED]

    @classmethod
    def tables(cls) -> list[str]:
        return [cls.TRAVEL_TIME, cls.DEPTH, cls.LAKE_MORPHOMETRY]

    @classmethod
    def grids(cls) -> list[str]:
        return [cls.IMPERVIOUS, cls.RASTER_TEMPLATE]


class Columns:
    """Attribute names used on input layers and output vectors."""

    STREAM_ID = "stream_id"
    LAKE_ID = "lake_id"
    NAME = "name"
    FTYPE = "ftype"
    HYDRIC_PCT = "hydric_pct"
    MEAN_REACH_DEPTH = "mean_reach_depth"
    TRAVEL_TIME = "travel_time"
    MEAN_DEPTH = "mean_depth"
    RESIDENCE_TIME = "residence_time_years"
    REMOVAL = "n_removal"
    GEOMETRY = "geometry"

    @classmethod
    def network_output(cls) -> list[str]:
        """Ordered columns of the stream and lake flow-path vector layers."""
        return [cls.STREAM_ID, cls.LAKE_ID, cls.NAME, cls.FTYPE, cls.REMOVAL, cls.GEOMETRY]


# Columns each bundle layer must carry before any computation starts
REQUIRED_LAYER_COLUMNS: dict[str, list[str]] = {
    InputLayers.SOILS: [Columns.HYDRIC_PCT],
    InputLayers.STREAMS: [Columns.STREAM_ID, Columns.FTYPE, Columns.LAKE_ID],
    InputLayers.TRAVEL_TIME: [Columns.STREAM_ID, Columns.TRAVEL_TIME],
    InputLayers.DEPTH: [Columns.STREAM_ID, Columns.MEAN_REACH_DEPTH],
    InputLayers.LAKES: [Columns.LAKE_ID],
    InputLayers.LAKE_MORPHOMETRY: [Columns.LAKE_ID, Columns.MEAN_DEPTH],
}


class BundleFiles:
    """File names of a prepared bundle directory."""

    VECTORS = "inputs.gpkg"
    TRAVEL_TIME = "travel_time.csv"
    DEPTH = "depth.csv"
    LAKE_MORPHOMETRY = "lake_morphometry.csv"
    IMPERVIOUS = "impervious.tif"
    RASTER_TEMPLATE = "raster_template.tif"


class DebugConfig:
    """Debug output configuration.

    WARNING: For local development only.
    - Adds disk I/O overhead
    - Consumes storage space
    """

    def __init__(
        self,
        enabled: bool = False,
        output_dir: Path = Path("/tmp/nsink-debug"),
    ):
        self.enabled = enabled
        self.output_dir = output_dir

    @classmethod
    def from_env(cls) -> "DebugConfig":
        return cls(
            enabled=os.environ.get("NSINK_DEBUG_OUTPUT", "false").lower() == "true",
            output_dir=Path(os.environ.get("NSINK_DEBUG_OUTPUT_DIR", "/tmp/nsink-debug")),
        )

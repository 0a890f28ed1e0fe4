"""Debug output helpers for intermediate removal layers.

WARNING: For local development and debugging only.
"""

import logging
from datetime import UTC, datetime

import geopandas as gpd
import numpy as np
import rasterio

from nsink.config import DebugConfig
from nsink.models.grid import RasterGrid

logger = logging.getLogger(__name__)


def save_debug_gdf(
    gdf: gpd.GeoDataFrame,
    name: str,
    run_id: str,
    config: DebugConfig,
) -> None:
    """Save GeoDataFrame for debugging if debug output is enabled.

    Args:
        gdf: GeoDataFrame to save
        name: Descriptive name (e.g., "stream_segments_joined")
        run_id: Run identifier for organizing output
        config: Debug configuration
    """
    if not config.enabled:
        return

    output_dir = config.output_dir / run_id
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(UTC).strftime("%H%M%S")
    output_path = output_dir / f"{timestamp}_{name}.gpkg"

    try:
        gdf.to_file(output_path, driver="GPKG")
        logger.debug(f"Saved debug output: {output_path} ({len(gdf)} features)")
    except Exception as e:
        logger.warning(f"Failed to save debug output {name}: {e}")


def save_debug_grid(
    grid: RasterGrid,
    name: str,
    run_id: str,
    config: DebugConfig,
) -> None:
    """Save a RasterGrid as GeoTIFF for debugging if debug output is enabled."""
    if not config.enabled:
        return

    output_dir = config.output_dir / run_id
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(UTC).strftime("%H%M%S")
    output_path = output_dir / f"{timestamp}_{name}.tif"

    try:
        with rasterio.open(
            output_path,
            "w",
            driver="GTiff",
            height=grid.height,
            width=grid.width,
            count=1,
            dtype="float64",
            crs=grid.crs,
            transform=grid.transform,
            nodata=np.nan,
        ) as dst:
            dst.write(grid.data, 1)
        logger.debug(f"Saved debug grid: {output_path} {grid.shape}")
    except Exception as e:
        logger.warning(f"Failed to save debug grid {name}: {e}")

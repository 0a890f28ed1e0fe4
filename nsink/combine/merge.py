"""Removal merge engine."""

import logging
import time

import geopandas as gpd

from nsink.combine.precedence import reconcile_layers
from nsink.config import RemovalConfig
from nsink.models.enums import RemovalType
from nsink.models.grid import RasterGrid

logger = logging.getLogger(__name__)


def merge_removal(
    land: RasterGrid,
    stream: RasterGrid,
    lake: RasterGrid,
    template: RasterGrid,
    watershed: gpd.GeoDataFrame,
    config: RemovalConfig | None = None,
) -> RasterGrid:
    """Merge land, stream and lake removal into one watershed removal grid.

    Stream removal takes precedence over lake removal, which takes precedence
    over land removal.

    Args:
        land: Land removal grid
        stream: Stream removal grid
        lake: Lake removal grid
        template: Raster template
        watershed: Watershed boundary
        config: Removal configuration (focal window size)

    Returns:
        Template-aligned removal fraction grid, 0 where no source applies inside
        the watershed and missing outside it
    """
    config = config or RemovalConfig()
    t0 = time.perf_counter()

    merged = reconcile_layers(
        {RemovalType.HYDRIC: land, RemovalType.STREAM: stream, RemovalType.LAKE: lake},
        template,
        watershed,
        focal_size=config.focal_window_size,
    )

    logger.info(f"[timing] merge removal: {time.perf_counter() - t0:.3f}s")
    return merged

"""Removal type classification.

Each source grid is recoded to its RemovalType code and reconciled exactly
as the merge engine reconciles removal values, so the type grid always
explains the merged grid.
"""

import logging
import time

import geopandas as gpd
import numpy as np

from nsink.combine.precedence import reconcile_layers
from nsink.config import RemovalConfig
from nsink.models.enums import RemovalType
from nsink.models.grid import RasterGrid

logger = logging.getLogger(__name__)


def recode_removal(grid: RasterGrid, removal_type: RemovalType) -> RasterGrid:
    """Recode a removal grid to type codes.

    Land cells only count where removal is positive; stream and lake cells
    count wherever they have a value (a clamped lake removal of 0 is still
    lake removal).
    """
    code = float(removal_type.value)
    if removal_type == RemovalType.HYDRIC:
        with np.errstate(invalid="ignore"):
            data = np.where(grid.data > 0, code, np.nan)
    else:
        data = np.where(grid.missing, np.nan, code)
    return grid.with_data(data)


def classify_removal_type(
    land: RasterGrid,
    stream: RasterGrid,
    lake: RasterGrid,
    template: RasterGrid,
    watershed: gpd.GeoDataFrame,
    config: RemovalConfig | None = None,
) -> RasterGrid:
    """Classify which removal source determines each merged cell.

    Args:
        land: Land removal grid
        stream: Stream removal grid
        lake: Lake removal grid
        template: Raster template
        watershed: Watershed boundary
        config: Removal configuration (focal window size)

    Returns:
        Template-aligned grid of RemovalType codes (0 = no removal), missing
        outside the watershed
    """
    config = config or RemovalConfig()
    t0 = time.perf_counter()

    layers = {
        RemovalType.HYDRIC: recode_removal(land, RemovalType.HYDRIC),
        RemovalType.STREAM: recode_removal(stream, RemovalType.STREAM),
        RemovalType.LAKE: recode_removal(lake, RemovalType.LAKE),
    }
    types = reconcile_layers(layers, template, watershed, focal_size=config.focal_window_size)

    logger.info(f"[timing] classify removal type: {time.perf_counter() - t0:.3f}s")
    return types

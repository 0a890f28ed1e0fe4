"""GeoTIFF output strategy for the removal raster stack."""

import logging
from pathlib import Path

import numpy as np
import rasterio

from nsink.models.domain import RemovalResult

logger = logging.getLogger(__name__)

DEFAULT_NODATA = -9999.0


class RasterStackOutputStrategy:
    """Writes removal and removal type as a two-band float32 GeoTIFF.

    Band 1 is the removal fraction, band 2 the RemovalType code. Cells outside
    the watershed are written as the template nodata value.
    """

    BAND_DESCRIPTIONS = ("n_removal", "removal_type")

    def write(self, result: RemovalResult, output_path: Path) -> Path:
        removal = result.removal
        if not removal.same_grid(result.removal_type):
            msg = "Cannot write raster stack: removal and removal type grids are not aligned"
            raise ValueError(msg)

        nodata = removal.nodata if removal.nodata is not None else DEFAULT_NODATA
        stack = result.raster_stack()
        stack = np.where(np.isnan(stack), nodata, stack).astype("float32")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with rasterio.open(
            output_path,
            "w",
            driver="GTiff",
            height=removal.height,
            width=removal.width,
            count=2,
            dtype="float32",
            crs=removal.crs,
            transform=removal.transform,
            nodata=nodata,
            compress="deflate",
        ) as dst:
            dst.write(stack)
            for band, description in enumerate(self.BAND_DESCRIPTIONS, start=1):
                dst.set_band_description(band, description)

        logger.info(f"Wrote removal raster stack: {output_path}")
        return output_path

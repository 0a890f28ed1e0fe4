"""Repository for reading a prepared input bundle from disk.

Data preparation (acquisition, clipping, template building) writes one
directory per watershed:

    inputs.gpkg             layers: soils, streams, lakes, watershed
    travel_time.csv         stream_id, travel_time
    depth.csv               stream_id, mean_reach_depth
    lake_morphometry.csv    lake_id, mean_depth
    impervious.tif
    raster_template.tif
"""

import logging
import time
from pathlib import Path

import geopandas as gpd
import pandas as pd

from nsink.config import BundleFiles, InputLayers
from nsink.spatial import read_raster

logger = logging.getLogger(__name__)


class BundleRepository:
    """Loads the input bundle mapping consumed by calc_removal().

    Files or layers that are absent are left out of the bundle rather than
    raising here, so that validation can report every missing key at once.

    Attributes:
        root: Bundle directory
    """

    TABLE_FILES = {
        InputLayers.TRAVEL_TIME: BundleFiles.TRAVEL_TIME,
        InputLayers.DEPTH: BundleFiles.DEPTH,
        InputLayers.LAKE_MORPHOMETRY: BundleFiles.LAKE_MORPHOMETRY,
    }
    GRID_FILES = {
        InputLayers.IMPERVIOUS: BundleFiles.IMPERVIOUS,
        InputLayers.RASTER_TEMPLATE: BundleFiles.RASTER_TEMPLATE,
    }

    def __init__(self, root: Path):
        self.root = Path(root)

    def load(self) -> dict:
        """Read every available bundle layer.

        Returns:
            Mapping of InputLayers key to GeoDataFrame, DataFrame or RasterGrid

        Raises:
            FileNotFoundError: If the bundle directory does not exist
        """
        if not self.root.is_dir():
            msg = f"Bundle directory not found: {self.root}"
            raise FileNotFoundError(msg)

        t0 = time.perf_counter()
        bundle: dict = {}
        bundle.update(self._load_vectors())

        for key, filename in self.TABLE_FILES.items():
            path = self.root / filename
            if path.exists():
                bundle[key] = pd.read_csv(path)
                logger.info(f"Loaded {key}: {len(bundle[key]):,} rows")
            else:
                logger.warning(f"Bundle table not found: {path}")

        for key, filename in self.GRID_FILES.items():
            path = self.root / filename
            if path.exists():
                bundle[key] = read_raster(path)
                logger.info(f"Loaded {key}: {bundle[key].shape} grid")
            else:
                logger.warning(f"Bundle grid not found: {path}")

        logger.info(f"[timing] load bundle: {time.perf_counter() - t0:.3f}s")
        return bundle

    def _load_vectors(self) -> dict:
        path = self.root / BundleFiles.VECTORS
        if not path.exists():
            logger.warning(f"Bundle vectors not found: {path}")
            return {}

        available = set(gpd.list_layers(path)["name"])
        layers = {}
        for key in InputLayers.vector_layers():
            if key not in available:
                logger.warning(f"Layer '{key}' not found in {path}")
                continue
            layers[key] = gpd.read_file(path, layer=key)
            logger.info(f"Loaded {key}: {len(layers[key]):,} features")
        return layers

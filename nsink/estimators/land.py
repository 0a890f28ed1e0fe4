"""Land (hydric soil) removal estimator.

Converts soil unit polygons into a removal fraction grid, suppressed over
impervious surfaces, plus dissolved removal polygons for reporting.
"""

import logging
import time
from collections.abc import Mapping

import geopandas as gpd

from nsink.calculators import calculate_land_removal, suppress_impervious
from nsink.config import Columns, DebugConfig, InputLayers, RemovalConfig
from nsink.debug import save_debug_gdf, save_debug_grid
from nsink.models.domain import RemovalLayer
from nsink.models.grid import RasterGrid
from nsink.spatial import make_valid_geometries, polygonize, rasterize_max, resample_to

logger = logging.getLogger(__name__)


class LandRemovalEstimator:
    """Hydric soil removal estimator.

    Pipeline:
    1. Removal per soil unit from hydric percentage (0 becomes missing)
    2. Collapse soil units sharing a hydric percentage
    3. Rasterize by per-pixel maximum (background 0)
    4. Suppress removal on impervious cells
    5. Polygonize the suppressed grid
    """

    required_layers = (InputLayers.SOILS, InputLayers.IMPERVIOUS, InputLayers.RASTER_TEMPLATE)

    def __init__(self, inputs: Mapping, run_id: str, config: RemovalConfig | None = None):
        self.soils: gpd.GeoDataFrame = inputs[InputLayers.SOILS]
        self.impervious: RasterGrid = inputs[InputLayers.IMPERVIOUS]
        self.template: RasterGrid = inputs[InputLayers.RASTER_TEMPLATE]
        self.run_id = run_id
        self.config = config or RemovalConfig()
        self._debug_config = DebugConfig.from_env()

    def run(self) -> RemovalLayer:
        logger.info("Estimating land removal")
        t0 = time.perf_counter()

        soils = self._calculate_unit_removal(self.soils)
        soils = self._dissolve_by_hydric_class(soils)
        save_debug_gdf(soils, "land_removal_classes", self.run_id, self._debug_config)

        grid = rasterize_max(soils, Columns.REMOVAL, self.template, fill=0.0)
        grid = self._suppress_impervious(grid)
        save_debug_grid(grid, "land_removal", self.run_id, self._debug_config)

        vectors = polygonize(grid, Columns.REMOVAL)

        logger.info(f"[timing] land removal: {time.perf_counter() - t0:.3f}s")
        return RemovalLayer(grid=grid, vectors=vectors)

    def _calculate_unit_removal(self, soils: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        soils = gpd.GeoDataFrame(
            {Columns.HYDRIC_PCT: soils[Columns.HYDRIC_PCT].to_numpy()},
            geometry=soils.geometry.to_numpy(),
            crs=soils.crs,
        )
        soils = make_valid_geometries(soils)
        soils[Columns.REMOVAL] = calculate_land_removal(soils[Columns.HYDRIC_PCT])
        return soils

    def _dissolve_by_hydric_class(self, soils: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        """One feature per hydric percentage; equal percentages have equal removal."""
        if soils.empty:
            return soils
        dissolved = soils.dissolve(by=Columns.HYDRIC_PCT, as_index=False, dropna=False)
        logger.info(f"Collapsed {len(soils):,} soil units into {len(dissolved):,} hydric classes")
        return dissolved

    def _suppress_impervious(self, grid: RasterGrid) -> RasterGrid:
        impervious = resample_to(self.impervious, self.template)
        return grid.with_data(suppress_impervious(grid.data, impervious.data))

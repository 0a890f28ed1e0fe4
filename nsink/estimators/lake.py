"""Lake (residence time) removal estimator.

Residence time is accumulated from the stream segments that flow through each
lake; removal then follows the depth / residence time regression. Besides the
lake grid the estimator reports a flow-path view: every contributing segment
carrying its lake's removal.
"""

import logging
import time
from collections.abc import Mapping

import geopandas as gpd
import pandas as pd

from nsink.calculators import calculate_lake_removal, calculate_residence_time
from nsink.config import Columns, DebugConfig, InputLayers, RemovalConfig
from nsink.debug import save_debug_gdf, save_debug_grid
from nsink.estimators.network import network_vectors
from nsink.models.domain import RemovalLayer
from nsink.models.grid import RasterGrid
from nsink.spatial import join_attributes, make_valid_geometries, rasterize_max, replace_sentinel

logger = logging.getLogger(__name__)


class LakeRemovalEstimator:
    """Lake removal estimator.

    Pipeline:
    1. Travel time onto stream segments, keep segments inside a lake
    2. Sum segment travel time per lake into residence time (years)
    3. Mean depth and residence time onto lake polygons
    4. Regression removal (negative clamped to 0)
    5. Rasterize lakes by per-pixel maximum (background missing)
    6. Flow-path vectors from contributing segments
    """

    required_layers = (
        InputLayers.STREAMS,
        InputLayers.TRAVEL_TIME,
        InputLayers.LAKES,
        InputLayers.LAKE_MORPHOMETRY,
        InputLayers.RASTER_TEMPLATE,
    )

    def __init__(self, inputs: Mapping, run_id: str, config: RemovalConfig | None = None):
        self.streams: gpd.GeoDataFrame = inputs[InputLayers.STREAMS]
        self.travel_time: pd.DataFrame = inputs[InputLayers.TRAVEL_TIME]
        self.lakes: gpd.GeoDataFrame = inputs[InputLayers.LAKES]
        self.morphometry: pd.DataFrame = inputs[InputLayers.LAKE_MORPHOMETRY]
        self.template: RasterGrid = inputs[InputLayers.RASTER_TEMPLATE]
        self.run_id = run_id
        self.config = config or RemovalConfig()
        self._debug_config = DebugConfig.from_env()

    def run(self) -> RemovalLayer:
        logger.info("Estimating lake removal")
        t0 = time.perf_counter()

        segments = self._lake_segments()
        residence = calculate_residence_time(
            segments[Columns.TRAVEL_TIME], segments[Columns.LAKE_ID]
        )
        logger.info(
            f"Residence time derived for {len(residence):,} lakes "
            f"from {len(segments):,} flow-path segments"
        )

        lakes = self._annotate_lakes(residence)
        lakes[Columns.REMOVAL] = calculate_lake_removal(
            lakes[Columns.MEAN_DEPTH], lakes[Columns.RESIDENCE_TIME]
        )
        save_debug_gdf(lakes, "lake_removal_polygons", self.run_id, self._debug_config)

        grid = rasterize_max(lakes, Columns.REMOVAL, self.template)
        save_debug_grid(grid, "lake_removal", self.run_id, self._debug_config)

        flow_paths = self._flow_paths(segments, lakes)

        logger.info(f"[timing] lake removal: {time.perf_counter() - t0:.3f}s")
        return RemovalLayer(grid=grid, vectors=flow_paths)

    def _lake_segments(self) -> gpd.GeoDataFrame:
        """Stream segments flowing through a lake, with travel time attached."""
        segments = join_attributes(
            self.streams, self.travel_time, key=Columns.STREAM_ID, columns=[Columns.TRAVEL_TIME]
        )
        # 0, missing and negative placeholder ids mean "not in a lake"
        lake_ids = pd.to_numeric(segments[Columns.LAKE_ID], errors="coerce")
        segments = segments[lake_ids > 0].copy()
        travel_time = replace_sentinel(
            segments[Columns.TRAVEL_TIME], self.config.travel_time_missing_sentinel
        )
        segments[Columns.TRAVEL_TIME] = travel_time.mask(travel_time < 0)
        return segments

    def _annotate_lakes(self, residence: pd.Series) -> gpd.GeoDataFrame:
        lakes = make_valid_geometries(self.lakes)
        lakes = join_attributes(
            lakes, self.morphometry, key=Columns.LAKE_ID, columns=[Columns.MEAN_DEPTH]
        )
        depth = pd.to_numeric(lakes[Columns.MEAN_DEPTH], errors="coerce").astype("float64")
        lakes[Columns.MEAN_DEPTH] = depth.mask(depth < 0)

        residence_table = residence.rename(Columns.RESIDENCE_TIME).rename_axis(Columns.LAKE_ID)
        return join_attributes(
            lakes,
            residence_table.reset_index(),
            key=Columns.LAKE_ID,
            columns=[Columns.RESIDENCE_TIME],
        )

    def _flow_paths(
        self, segments: gpd.GeoDataFrame, lakes: gpd.GeoDataFrame
    ) -> gpd.GeoDataFrame:
        """Contributing segments carrying the name, type and removal of their lake."""
        lake_columns = [Columns.NAME, Columns.FTYPE, Columns.REMOVAL]
        lake_attributes = pd.DataFrame(lakes.drop(columns=lakes.geometry.name)).reindex(
            columns=[Columns.LAKE_ID, *lake_columns]
        )
        paths = join_attributes(
            segments[[Columns.STREAM_ID, Columns.LAKE_ID, segments.geometry.name]],
            lake_attributes,
            key=Columns.LAKE_ID,
            columns=lake_columns,
        )
        return network_vectors(paths)

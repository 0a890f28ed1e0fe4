"""Stream (in-channel) removal estimator."""

import logging
import time
from collections.abc import Mapping

import geopandas as gpd
import pandas as pd

from nsink.calculators import calculate_stream_removal
from nsink.config import Columns, DebugConfig, InputLayers, RemovalConfig
from nsink.debug import save_debug_gdf, save_debug_grid
from nsink.estimators.network import network_vectors
from nsink.models.domain import RemovalLayer
from nsink.models.grid import RasterGrid
from nsink.spatial import join_attributes, rasterize_max, replace_sentinel

logger = logging.getLogger(__name__)


class StreamRemovalEstimator:
    """Stream segment removal estimator.

    Joins depth and travel time onto stream segments, drops artificial
    connectors, applies the exponential decay model and rasterizes the
    result by per-pixel maximum.
    """

    required_layers = (
        InputLayers.STREAMS,
        InputLayers.TRAVEL_TIME,
        InputLayers.DEPTH,
        InputLayers.RASTER_TEMPLATE,
    )

    def __init__(self, inputs: Mapping, run_id: str, config: RemovalConfig | None = None):
        self.streams: gpd.GeoDataFrame = inputs[InputLayers.STREAMS]
        self.travel_time: pd.DataFrame = inputs[InputLayers.TRAVEL_TIME]
        self.depth: pd.DataFrame = inputs[InputLayers.DEPTH]
        self.template: RasterGrid = inputs[InputLayers.RASTER_TEMPLATE]
        self.run_id = run_id
        self.config = config or RemovalConfig()
        self._debug_config = DebugConfig.from_env()

    def run(self) -> RemovalLayer:
        logger.info("Estimating stream removal")
        t0 = time.perf_counter()

        segments = self._join_attributes(self.streams)
        segments = self._drop_artificial_connectors(segments)
        segments[Columns.TRAVEL_TIME] = replace_sentinel(
            segments[Columns.TRAVEL_TIME], self.config.travel_time_missing_sentinel
        )
        segments[Columns.REMOVAL] = calculate_stream_removal(
            segments[Columns.MEAN_REACH_DEPTH], segments[Columns.TRAVEL_TIME]
        )
        save_debug_gdf(segments, "stream_segments", self.run_id, self._debug_config)

        missing = int(segments[Columns.REMOVAL].isna().sum())
        if missing:
            logger.info(f"{missing:,} of {len(segments):,} stream segments have undefined removal")

        grid = rasterize_max(segments, Columns.REMOVAL, self.template)
        save_debug_grid(grid, "stream_removal", self.run_id, self._debug_config)

        logger.info(f"[timing] stream removal: {time.perf_counter() - t0:.3f}s")
        return RemovalLayer(grid=grid, vectors=network_vectors(segments))

    def _join_attributes(self, streams: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        segments = join_attributes(
            streams, self.depth, key=Columns.STREAM_ID, columns=[Columns.MEAN_REACH_DEPTH]
        )
        return join_attributes(
            segments, self.travel_time, key=Columns.STREAM_ID, columns=[Columns.TRAVEL_TIME]
        )

    def _drop_artificial_connectors(self, segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        artificial = segments[Columns.FTYPE] == self.config.artificial_ftype
        if artificial.any():
            logger.info(f"Excluding {int(artificial.sum()):,} artificial connector segments")
        return segments[~artificial].copy()

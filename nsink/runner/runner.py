"""Removal pipeline execution

This module provides the entry point that turns a validated input bundle into
a RemovalResult:

1. Validate the bundle (nothing is computed for an invalid bundle)
2. Fan out the land, stream and lake estimators, each on its own slice
3. Fan in: merge and classify the three grids (independent of each other)
"""

import logging
import os
import time
from collections.abc import Callable, Mapping
from concurrent.futures import ProcessPoolExecutor
from uuid import uuid4

import geopandas as gpd
import pandas as pd

from nsink.combine import classify_removal_type, merge_removal
from nsink.config import Columns, InputLayers, RemovalConfig
from nsink.estimators import LakeRemovalEstimator, LandRemovalEstimator, StreamRemovalEstimator
from nsink.models.domain import RemovalLayer, RemovalResult
from nsink.validation import validate_bundle

logger = logging.getLogger(__name__)


ESTIMATORS: dict[str, type] = {
    "land": LandRemovalEstimator,
    "stream": StreamRemovalEstimator,
    "lake": LakeRemovalEstimator,
}


def calc_removal(
    bundle: Mapping,
    config: RemovalConfig | None = None,
    run_id: str | None = None,
) -> RemovalResult:
    """Estimate nitrogen removal for a watershed.

    Args:
        bundle: Validated input layers keyed by InputLayers names (extra keys ignored)
        config: Runtime configuration (defaults read from the environment)
        run_id: Identifier used for debug output (generated when omitted)

    Returns:
        RemovalResult with merged removal, removal type, land polygons and
        stream/lake network segments

    Raises:
        InvalidBundleError: If the bundle is incomplete or malformed
        ValueError: If an estimator fails
    """
    config = config or RemovalConfig()
    run_id = run_id or str(uuid4())
    logger.info(f"Running removal estimation (run {run_id})")
    t0 = time.perf_counter()

    validate_bundle(bundle)

    t1 = time.perf_counter()
    land, stream, lake = _fan_out(
        [
            (run_estimator, (name, estimator_slice(name, bundle), run_id, config))
            for name in ("land", "stream", "lake")
        ],
        parallel=config.parallel,
        max_workers=config.max_workers,
    )
    logger.info(f"[timing] estimators: {time.perf_counter() - t1:.3f}s")

    t1 = time.perf_counter()
    grids = (
        land.grid,
        stream.grid,
        lake.grid,
        bundle[InputLayers.RASTER_TEMPLATE],
        bundle[InputLayers.WATERSHED],
        config,
    )
    removal, removal_type = _fan_out(
        [(merge_removal, grids), (classify_removal_type, grids)],
        parallel=config.parallel,
        max_workers=config.max_workers,
    )
    logger.info(f"[timing] merge and classify: {time.perf_counter() - t1:.3f}s")

    result = RemovalResult(
        removal=removal,
        removal_type=removal_type,
        land_removal=land.vectors,
        network_removal=_combine_network(stream.vectors, lake.vectors),
    )

    logger.info(f"[timing] total removal estimation: {time.perf_counter() - t0:.3f}s")
    return result


def estimator_slice(name: str, bundle: Mapping) -> dict:
    """Select only the bundle layers the named estimator reads."""
    return {key: bundle[key] for key in ESTIMATORS[name].required_layers}


def run_estimator(
    name: str, inputs: Mapping, run_id: str, config: RemovalConfig
) -> RemovalLayer:
    """Instantiate and run a registered estimator.

    Module-level so it can be submitted to a process pool.

    Raises:
        KeyError: If the estimator is not registered
        ValueError: If instantiation or execution fails
    """
    estimator_class = ESTIMATORS.get(name)
    if estimator_class is None:
        msg = f"Estimator {name} not supported"
        raise KeyError(msg)

    try:
        estimator = estimator_class(inputs, run_id, config)
    except Exception as e:
        logger.error(f"Estimator instantiation failed: {e}")
        msg = f"Failed to instantiate estimator '{name}'"
        raise ValueError(msg) from e

    try:
        layer = estimator.run()
    except Exception as e:
        logger.error(f"Estimator execution failed: {e}")
        msg = f"Estimator '{name}' execution failed"
        raise ValueError(msg) from e

    if not isinstance(layer, RemovalLayer):
        msg = f"Estimator '{name}'.run() must return a RemovalLayer, got {type(layer).__name__}"
        raise ValueError(msg)

    return layer


def _fan_out(
    tasks: list[tuple[Callable, tuple]],
    parallel: bool = True,
    max_workers: int | None = None,
) -> list:
    """Run independent tasks, in worker processes when enabled.

    Results are returned in task order. Falls back to sequential execution
    where process pools are unavailable.
    """
    if not parallel or len(tasks) <= 1:
        return _run_sequential(tasks)

    if max_workers is None:
        # Cap at 80% of available CPUs to avoid saturating the host
        max_workers = max(1, int((os.cpu_count() or 4) * 0.8))
    max_workers = min(max_workers, len(tasks))

    try:
        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(func, *args) for func, args in tasks]
            return [f.result() for f in futures]
    except (NotImplementedError, PermissionError, OSError) as exc:
        logger.warning(f"Parallel execution unavailable ({exc}); falling back to sequential")
        return _run_sequential(tasks)


def _run_sequential(tasks: list[tuple[Callable, tuple]]) -> list:
    return [func(*args) for func, args in tasks]


def _combine_network(
    streams: gpd.GeoDataFrame, lake_paths: gpd.GeoDataFrame
) -> gpd.GeoDataFrame:
    """Stack stream segments and lake flow-path segments into one layer."""
    crs = streams.crs or lake_paths.crs
    frames = [gdf for gdf in (streams, lake_paths) if not gdf.empty]
    if not frames:
        return gpd.GeoDataFrame(
            {col: [] for col in Columns.network_output() if col != Columns.GEOMETRY},
            geometry=[],
            crs=crs,
        )
    return gpd.GeoDataFrame(pd.concat(frames, ignore_index=True), crs=crs)

"""Unit tests for the removal runner."""

import logging
from unittest.mock import Mock, patch

import geopandas as gpd
import numpy as np
import pytest

from nsink.config import Columns, InputLayers, RemovalConfig
from nsink.models import RemovalLayer, RemovalResult
from nsink.runner import runner
from nsink.runner.runner import calc_removal, estimator_slice, run_estimator
from nsink.validation import InvalidBundleError
from tests.utils import CRS, make_grid

SERIAL = RemovalConfig(parallel=False)


def test_calc_removal_result(bundle):
    result = calc_removal(bundle, config=SERIAL, run_id="test-run")

    assert isinstance(result, RemovalResult)
    template = bundle[InputLayers.RASTER_TEMPLATE]
    assert result.removal.same_grid(template)
    assert result.removal_type.same_grid(template)
    assert result.raster_stack().shape == (2, 10, 10)


def test_network_removal_combines_streams_and_lake_paths(bundle):
    result = calc_removal(bundle, config=SERIAL)
    network = result.network_removal

    assert isinstance(network, gpd.GeoDataFrame)
    assert list(network.columns) == Columns.network_output()
    assert sorted(network[Columns.STREAM_ID]) == [1, 2, 3]
    assert network.crs == bundle[InputLayers.STREAMS].crs
    assert sorted(result.land_removal[Columns.REMOVAL].round(6)) == [0.0, 0.4, 0.8]


def test_negative_travel_time_codes_never_give_negative_removal(bundle, travel_time):
    bundle[InputLayers.TRAVEL_TIME] = travel_time.assign(travel_time=-9998.0)
    result = calc_removal(bundle, config=SERIAL)

    removal = result.removal
    assert (removal.data[~removal.missing] >= 0).all()
    assert result.network_removal[Columns.REMOVAL].isna().all()


def test_invalid_bundle_computes_nothing(bundle):
    del bundle[InputLayers.SOILS]

    with patch.object(runner, "run_estimator") as mock_run:
        with pytest.raises(InvalidBundleError) as exc_info:
            calc_removal(bundle, config=SERIAL)

    assert exc_info.value.missing_keys == [InputLayers.SOILS]
    mock_run.assert_not_called()


def test_estimator_slice_only_contains_required_layers(bundle):
    inputs = estimator_slice("land", bundle)

    assert set(inputs) == {InputLayers.SOILS, InputLayers.IMPERVIOUS, InputLayers.RASTER_TEMPLATE}


def test_parallel_falls_back_to_sequential(bundle, caplog):
    """Process pools unavailable on the host degrade to sequential execution."""
    serial = calc_removal(bundle, config=SERIAL)

    with patch.object(runner, "ProcessPoolExecutor", side_effect=OSError("no semaphores")):
        with caplog.at_level(logging.WARNING):
            fallback = calc_removal(bundle, config=RemovalConfig(parallel=True))

    assert "falling back to sequential" in caplog.text
    np.testing.assert_array_equal(serial.removal.data, fallback.removal.data)
    np.testing.assert_array_equal(serial.removal_type.data, fallback.removal_type.data)


def test_parallel_matches_serial(bundle):
    serial = calc_removal(bundle, config=SERIAL)
    parallel = calc_removal(bundle, config=RemovalConfig(parallel=True, max_workers=2))

    np.testing.assert_array_equal(serial.removal.data, parallel.removal.data)
    np.testing.assert_array_equal(serial.removal_type.data, parallel.removal_type.data)
    assert len(serial.network_removal) == len(parallel.network_removal)


@pytest.fixture
def registered_estimator():
    """Register a mock estimator for the duration of a test."""
    mock_class = Mock(__name__="MockEstimator")
    original_registry = runner.ESTIMATORS.copy()
    runner.ESTIMATORS["mock"] = mock_class
    yield mock_class
    runner.ESTIMATORS.clear()
    runner.ESTIMATORS.update(original_registry)


def test_run_estimator_success(registered_estimator):
    layer = RemovalLayer(
        grid=make_grid([[0.1]]),
        vectors=gpd.GeoDataFrame({"n_removal": []}, geometry=[], crs=CRS),
    )
    registered_estimator.return_value.run.return_value = layer

    result = run_estimator("mock", {"soils": None}, "run-1", SERIAL)

    assert result is layer
    registered_estimator.assert_called_once_with({"soils": None}, "run-1", SERIAL)


def test_run_estimator_unknown():
    with pytest.raises(KeyError, match="not supported"):
        run_estimator("groundwater", {}, "run-1", SERIAL)


def test_run_estimator_instantiation_failure(registered_estimator):
    registered_estimator.side_effect = KeyError("soils")

    with pytest.raises(ValueError, match="Failed to instantiate estimator 'mock'") as exc_info:
        run_estimator("mock", {}, "run-1", SERIAL)

    assert isinstance(exc_info.value.__cause__, KeyError)


def test_run_estimator_execution_failure(registered_estimator):
    registered_estimator.return_value.run.side_effect = RuntimeError("rasterize failed")

    with pytest.raises(ValueError, match="execution failed") as exc_info:
        run_estimator("mock", {}, "run-1", SERIAL)

    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_run_estimator_invalid_return(registered_estimator):
    registered_estimator.return_value.run.return_value = {"grid": None}

    with pytest.raises(ValueError, match="must return a RemovalLayer"):
        run_estimator("mock", {}, "run-1", SERIAL)


def test_estimator_failure_propagates_from_calc_removal(bundle):
    failing = Mock(__name__="FailingEstimator", required_layers=(InputLayers.LAKES,))
    failing.return_value.run.side_effect = RuntimeError("boom")

    with patch.dict(runner.ESTIMATORS, {"lake": failing}):
        with pytest.raises(ValueError, match="Estimator 'lake' execution failed"):
            calc_removal(bundle, config=SERIAL)

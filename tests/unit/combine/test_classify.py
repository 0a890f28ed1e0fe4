"""Unit tests for removal type classification."""

import numpy as np
import pytest

from nsink.combine import classify_removal_type, merge_removal, recode_removal
from nsink.config import InputLayers
from nsink.estimators import LakeRemovalEstimator, LandRemovalEstimator, StreamRemovalEstimator
from nsink.models import RemovalType
from tests.utils import make_grid

NAN = np.nan


def test_recode_land_only_counts_positive_removal():
    grid = make_grid([[0.4, 0.0, NAN]])

    recoded = recode_removal(grid, RemovalType.HYDRIC)

    assert recoded.data[0, 0] == 1.0
    assert recoded.missing[0, 1:].all()


@pytest.mark.parametrize("removal_type", [RemovalType.STREAM, RemovalType.LAKE])
def test_recode_network_counts_any_value(removal_type):
    grid = make_grid([[0.4, 0.0, NAN]])

    recoded = recode_removal(grid, removal_type)

    np.testing.assert_array_equal(recoded.data[0, :2], float(removal_type))
    assert recoded.missing[0, 2]


@pytest.fixture
def watershed_layers(bundle):
    layers = {}
    for name, estimator_class in [
        ("land", LandRemovalEstimator),
        ("stream", StreamRemovalEstimator),
        ("lake", LakeRemovalEstimator),
    ]:
        inputs = {key: bundle[key] for key in estimator_class.required_layers}
        layers[name] = estimator_class(inputs, run_id="test-run").run().grid
    return layers


@pytest.fixture
def merged_and_types(bundle, watershed_layers):
    args = (
        watershed_layers["land"],
        watershed_layers["stream"],
        watershed_layers["lake"],
        bundle[InputLayers.RASTER_TEMPLATE],
        bundle[InputLayers.WATERSHED],
    )
    return merge_removal(*args), classify_removal_type(*args)


def test_types_on_synthetic_watershed(merged_and_types):
    _, types = merged_and_types

    assert types.data[7, 3] == RemovalType.STREAM
    assert types.data[2, 2] == RemovalType.LAKE
    assert types.data[8, 0] == RemovalType.HYDRIC
    assert types.data[1, 7] == RemovalType.NONE
    assert types.missing[:, 8:].all()


def test_cross_consistency(merged_and_types):
    """Positive removal always has a type, and type NONE always has zero removal."""
    merged, types = merged_and_types

    np.testing.assert_array_equal(merged.missing, types.missing)
    inside = ~merged.missing
    assert (types.data[inside & (merged.data > 0)] != RemovalType.NONE).all()
    assert (merged.data[inside & (types.data == RemovalType.NONE)] == 0).all()

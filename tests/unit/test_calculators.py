"""Unit tests for removal calculators.

Tests all calculator functions with hand-computed inputs/outputs.
"""

import math

import numpy as np
import pandas as pd
import pytest

from nsink.calculators import (
    calculate_lake_removal,
    calculate_land_removal,
    calculate_residence_time,
    calculate_stream_removal,
    suppress_impervious,
)


class TestLandRemovalCalculator:
    """Tests for hydric soil removal."""

    def test_partial_hydric(self):
        assert calculate_land_removal(50.0) == pytest.approx(0.4)

    def test_fully_hydric(self):
        assert calculate_land_removal(100.0) == pytest.approx(0.8)

    def test_zero_hydric_is_missing(self):
        """A non-hydric unit carries no removal signal, not a removal of 0."""
        assert math.isnan(calculate_land_removal(0.0))

    def test_vectorized_with_missing(self):
        removal = calculate_land_removal(pd.Series([0.0, 25.0, np.nan]))

        assert np.isnan(removal[0])
        assert removal[1] == pytest.approx(0.2)
        assert np.isnan(removal[2])


class TestImperviousSuppression:
    """Tests for impervious surface suppression."""

    def test_negative_and_missing_are_impervious(self):
        removal = np.array([[0.4, 0.4, 0.4]])
        impervious = np.array([[1.0, -1.0, np.nan]])

        result = suppress_impervious(removal, impervious)

        np.testing.assert_array_equal(result, [[0.4, 0.0, 0.0]])

    def test_zero_impervious_value_is_pervious(self):
        result = suppress_impervious(np.array([[0.8]]), np.array([[0.0]]))

        assert result[0, 0] == 0.8

    def test_missing_removal_on_pervious_cell_stays_missing(self):
        result = suppress_impervious(np.array([[np.nan]]), np.array([[1.0]]))

        assert np.isnan(result[0, 0])

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Shape mismatch"):
            suppress_impervious(np.zeros((2, 2)), np.zeros((3, 3)))


class TestStreamRemovalCalculator:
    """Tests for the in-channel decay model."""

    def test_known_value(self):
        expected = (1 - math.exp(-0.0513 * 1.0**-1.319 * 10.0)) / 100

        assert calculate_stream_removal(1.0, 10.0) == pytest.approx(expected)

    def test_increasing_in_travel_time(self):
        removal = calculate_stream_removal(np.full(3, 2.0), np.array([1.0, 10.0, 100.0]))

        assert removal[0] < removal[1] < removal[2]

    def test_decreasing_in_depth(self):
        removal = calculate_stream_removal(np.array([0.5, 1.0, 4.0]), np.full(3, 10.0))

        assert removal[0] > removal[1] > removal[2]

    @pytest.mark.parametrize(
        "depth,travel_time",
        [
            (0.0, 10.0),
            (-1.0, 10.0),
            (np.nan, 10.0),
            (1.0, np.nan),
            (1.0, -9998.0),
            (1.0, -0.5),
        ],
    )
    def test_undefined_removal(self, depth, travel_time):
        assert math.isnan(calculate_stream_removal(depth, travel_time))

    def test_zero_travel_time_removes_nothing(self):
        assert calculate_stream_removal(1.0, 0.0) == 0.0


class TestResidenceTime:
    """Tests for lake residence time accumulation."""

    def test_sums_segments_per_lake(self):
        residence = calculate_residence_time(
            pd.Series([100.0, 265.25, 36.525]), pd.Series([10, 10, 20])
        )

        assert residence.loc[10] == pytest.approx(365.25 * 0.002737851)
        assert residence.loc[20] == pytest.approx(0.1, rel=1e-6)

    def test_missing_segment_makes_lake_missing(self):
        residence = calculate_residence_time(
            pd.Series([100.0, np.nan, 50.0]), pd.Series([10, 10, 20])
        )

        assert np.isnan(residence.loc[10])
        assert residence.loc[20] == pytest.approx(50.0 * 0.002737851)


class TestLakeRemovalCalculator:
    """Tests for the lake depth / residence time regression."""

    def test_known_value(self):
        # log10(1 / 1) = 0
        assert calculate_lake_removal(1.0, 1.0) == pytest.approx(0.7924)

    def test_short_residence_clamped_to_zero(self):
        # 79.24 - 33.26 * log10(10 / 0.01) = -20.54
        assert calculate_lake_removal(10.0, 0.01) == 0.0

    def test_long_residence(self):
        expected = (79.24 - 33.26 * math.log10(2.0 / 5.0)) / 100

        assert calculate_lake_removal(2.0, 5.0) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "depth,residence",
        [(1.0, 0.0), (0.0, 1.0), (-3.0, 1.0), (np.nan, 1.0), (1.0, np.nan)],
    )
    def test_undefined_removal(self, depth, residence):
        assert math.isnan(calculate_lake_removal(depth, residence))

    def test_vectorized(self):
        removal = calculate_lake_removal(np.array([1.0, 10.0, np.nan]), np.array([1.0, 0.01, 1.0]))

        assert removal[0] == pytest.approx(0.7924)
        assert removal[1] == 0.0
        assert np.isnan(removal[2])

"""Shared fixtures: a small synthetic watershed in EPSG:5070.

The raster template is 10 x 10 cells of 10 m with its lower-left corner at
the origin, so row r / column c has its centre at (10c + 5, 95 - 10r).

Layout:
- Watershed covers columns 0-7 (x < 80); columns 8-9 lie outside
- Soils: 50% hydric in rows 0-4 / cols 0-4, 0% hydric in rows 0-4 / cols 5-9,
  100% hydric in rows 5-9
- Impervious cells at (8, 3) (negative) and (9, 3) (missing)
- Lake 10 covers rows 1-3 / cols 1-3; two artificial flow paths run through it
- Stream 1 runs along row 7 across the whole grid
"""

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import LineString, box

from nsink.config import InputLayers
from tests.utils import CRS, make_grid

ROWS = COLS = 10


@pytest.fixture
def template():
    return make_grid(np.zeros((ROWS, COLS)))


@pytest.fixture
def watershed():
    return gpd.GeoDataFrame({"name": ["Test Creek"]}, geometry=[box(0, 0, 80, 100)], crs=CRS)


@pytest.fixture
def soils():
    return gpd.GeoDataFrame(
        {"mukey": ["A", "B", "C"], "hydric_pct": [50.0, 0.0, 100.0]},
        geometry=[box(0, 50, 50, 100), box(50, 50, 100, 100), box(0, 0, 100, 50)],
        crs=CRS,
    )


@pytest.fixture
def impervious():
    data = np.ones((ROWS, COLS))
    data[8, 3] = -1.0
    data[9, 3] = np.nan
    return make_grid(data)


@pytest.fixture
def streams():
    return gpd.GeoDataFrame(
        {
            "stream_id": [1, 2, 3],
            "name": ["Mill Brook", None, None],
            "ftype": ["StreamRiver", "ArtificialPath", "ArtificialPath"],
            "lake_id": [0, 10, 10],
        },
        geometry=[
            LineString([(2, 25), (98, 25)]),
            LineString([(12, 75), (38, 75)]),
            LineString([(15, 65), (35, 65)]),
        ],
        crs=CRS,
    )


@pytest.fixture
def travel_time():
    # Lake 10 accumulates 365.25 time units, i.e. one year of residence
    return pd.DataFrame({"stream_id": [1, 2, 3], "travel_time": [1.0, 200.0, 165.25]})


@pytest.fixture
def depth():
    return pd.DataFrame({"stream_id": [1, 2, 3], "mean_reach_depth": [1.0, 2.0, 2.0]})


@pytest.fixture
def lakes():
    return gpd.GeoDataFrame(
        {"lake_id": [10], "name": ["Mill Pond"], "ftype": ["LakePond"]},
        geometry=[box(10, 60, 40, 90)],
        crs=CRS,
    )


@pytest.fixture
def lake_morphometry():
    return pd.DataFrame({"lake_id": [10], "mean_depth": [1.0]})


@pytest.fixture
def bundle(
    soils, impervious, streams, travel_time, depth, lakes, lake_morphometry, template, watershed
):
    return {
        InputLayers.SOILS: soils,
        InputLayers.IMPERVIOUS: impervious,
        InputLayers.STREAMS: streams,
        InputLayers.TRAVEL_TIME: travel_time,
        InputLayers.DEPTH: depth,
        InputLayers.LAKES: lakes,
        InputLayers.LAKE_MORPHOMETRY: lake_morphometry,
        InputLayers.RASTER_TEMPLATE: template,
        InputLayers.WATERSHED: watershed,
    }

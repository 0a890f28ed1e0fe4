"""Per-segment network removal vectors shared by the stream and lake estimators."""

import geopandas as gpd
import pandas as pd

from nsink.config import Columns


def network_vectors(segments: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Select the per-segment attribution columns shared by stream and lake outputs.

    Columns absent from the input (e.g. an unnamed network) are filled with missing values.
    """
    columns = Columns.network_output()
    attributes = pd.DataFrame(segments.drop(columns=segments.geometry.name)).reindex(
        columns=[col for col in columns if col != Columns.GEOMETRY]
    )
    return gpd.GeoDataFrame(
        attributes.reset_index(drop=True),
        geometry=segments.geometry.to_numpy(),
        crs=segments.crs,
    )[columns]

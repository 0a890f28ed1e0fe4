"""Attribute and geometry operations for estimators.

This module provides the vector-side operations used across estimators:
- Key-indexed attribute joins from lookup tables
- Conversion of reserved sentinel values to explicit missing values
- Geometry validation and repair
"""

import logging

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.validation import make_valid

logger = logging.getLogger(__name__)

# Temporary merge column holding dtype-aligned join keys
JOIN_KEY = "_join_key"


def join_attributes(
    features: gpd.GeoDataFrame,
    table: pd.DataFrame,
    key: str,
    columns: list[str],
) -> gpd.GeoDataFrame:
    """Left-join lookup columns onto features by key.

    Lookup semantics:
    - Unmatched keys produce missing values (never an error)
    - Keys of differing dtypes are compared by value (see align_keys)
    - Duplicate keys in the lookup table: first occurrence wins, a warning is logged
    - Columns already present on the features are kept where the lookup has
      no value, and replaced where it does

    Args:
        features: Features to annotate (must contain key)
        table: Lookup table keyed by key
        key: Join key column
        columns: Lookup columns to bring across

    Returns:
        GeoDataFrame with the same rows (and order) as features plus lookup columns

    Raises:
        ValueError: If the key or a lookup column is missing
    """
    if key not in features.columns:
        msg = f"Join key '{key}' missing from features"
        raise ValueError(msg)

    missing_cols = [col for col in [key, *columns] if col not in table.columns]
    if missing_cols:
        msg = f"Lookup table missing columns: {missing_cols}"
        raise ValueError(msg)

    left_key, right_key = align_keys(features[key], table[key])
    lookup = pd.DataFrame(table[columns]).assign(**{JOIN_KEY: right_key.to_numpy()})
    lookup = lookup[lookup[JOIN_KEY].notna()]
    duplicated = lookup[JOIN_KEY].duplicated(keep="first")
    if duplicated.any():
        logger.warning(
            f"Lookup table has {int(duplicated.sum())} duplicate '{key}' values; "
            f"keeping first occurrence"
        )
        lookup = lookup[~duplicated]

    existing = [col for col in columns if col in features.columns]
    joined = features.assign(**{JOIN_KEY: left_key.to_numpy()}).merge(
        lookup, on=JOIN_KEY, how="left", suffixes=("", "_lookup")
    )
    for col in existing:
        joined[col] = joined[f"{col}_lookup"].combine_first(joined[col])
    joined = joined.drop(columns=[JOIN_KEY, *[f"{col}_lookup" for col in existing]])

    joined.index = features.index
    return joined


def align_keys(left: pd.Series, right: pd.Series) -> tuple[pd.Series, pd.Series]:
    """Bring two join key columns to a common dtype.

    Keys compare as numbers when every present value on both sides parses as
    a number (e.g. text ids "10" from a GeoPackage against integer ids from a
    CSV), and as stripped text otherwise.

    Args:
        left: Feature keys
        right: Lookup keys

    Returns:
        Tuple of (left, right) keys with matching dtypes
    """
    if left.dtype == right.dtype:
        return left, right

    left_num = pd.to_numeric(left, errors="coerce")
    right_num = pd.to_numeric(right, errors="coerce")
    if left_num.count() == left.count() and right_num.count() == right.count():
        return left_num.astype("float64"), right_num.astype("float64")

    logger.debug(f"Comparing join keys as text ({left.dtype} vs {right.dtype})")
    return _keys_as_text(left), _keys_as_text(right)


def _keys_as_text(values: pd.Series) -> pd.Series:
    if pd.api.types.is_float_dtype(values) and (values.dropna() % 1 == 0).all():
        values = values.astype("Int64")
    return values.astype("string").str.strip()

def replace_sentinel(values: pd.Series, sentinel: float) -> pd.Series:
    """Convert a reserved "unavailable" marker to an explicit missing value.

    Args:
        values: Numeric series possibly containing the sentinel
        sentinel: Reserved value meaning "unavailable"

    Returns:
        Float series with sentinel values replaced by NaN
    """
    values = pd.to_numeric(values, errors="coerce").astype("float64")
    return values.mask(np.isclose(values, sentinel))


def make_valid_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Repair invalid geometries using Shapely's make_valid.

    Fixes common geometry issues like self-intersections, unclosed rings,
    etc. Dissolve and rasterization fail or misbehave on invalid input.

    Args:
        gdf: Input GeoDataFrame (may contain invalid geometries)

    Returns:
        GeoDataFrame with repaired geometries
    """
    gdf = gdf.copy()
    gdf["geometry"] = gdf.geometry.apply(
        lambda geom: make_valid(geom) if geom is not None and not geom.is_empty else geom
    )

    return gdf

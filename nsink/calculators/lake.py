"""Lake nitrogen removal calculations.

Lake removal is driven by hydraulic residence time, accumulated from the
travel time of the stream segments flowing through each lake.
"""

import numpy as np
import pandas as pd

from nsink.config import COEFFICIENTS, CONSTANTS


def calculate_residence_time(travel_time: pd.Series, lake_ids: pd.Series) -> pd.Series:
    """Accumulate segment travel time into lake residence time (years).

    A lake with any contributing segment of unknown travel time has unknown
    residence time.

    Args:
        travel_time: Travel time per contributing segment (NaN = missing)
        lake_ids: Owning lake id per segment (aligned with travel_time)

    Returns:
        Series of residence time in years indexed by lake id.
    """
    years = travel_time.astype("float64") * CONSTANTS.TRAVEL_TIME_TO_YEARS
    residence = years.groupby(lake_ids.to_numpy(), sort=True).agg(lambda s: s.sum(skipna=False))
    return residence.astype("float64")


def calculate_lake_removal(mean_depth, residence_time_years):
    """Calculate lake removal fraction from depth and residence time.

    Formula:
        removal = (79.24 - 33.26 * log10(mean_depth / residence_time_years)) / 100

    Negative regression output is clamped to 0 (very short residence times).
    Missing, zero or negative depth or residence time yields NaN.

    Args:
        mean_depth: Mean lake depth in metres
        residence_time_years: Hydraulic residence time in years

    Returns:
        Removal fraction with the broadcast shape of the inputs (float for scalars).
    """
    depth = np.asarray(mean_depth, dtype="float64")
    residence = np.asarray(residence_time_years, dtype="float64")

    valid = (depth > 0) & (residence > 0) & np.isfinite(depth) & np.isfinite(residence)
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.where(valid, depth / residence, np.nan)
        removal = (
            COEFFICIENTS.LAKE_INTERCEPT - COEFFICIENTS.LAKE_SLOPE * np.log10(ratio)
        ) / CONSTANTS.PERCENT

    # NaN < 0 is False, so missing values pass through untouched
    removal = np.where(removal < 0, 0.0, removal)

    if removal.ndim == 0:
        return float(removal)
    return removal

"""Land (hydric soil) nitrogen removal calculations."""

import numpy as np

from nsink.config import COEFFICIENTS, CONSTANTS


def calculate_land_removal(hydric_pct):
    """Calculate land-based removal fraction from hydric soil percentage.

    A computed removal of exactly 0 is returned as missing (NaN): a non-hydric
    soil unit carries no land-based removal signal and must not win a
    maximum-combine against better data.

    Formula:
        removal = 0.8 * (hydric_pct / 100)

    Args:
        hydric_pct: Percent of the soil unit classified hydric (0-100),
            scalar or array-like

    Returns:
        Removal fraction with the same shape as the input (float for scalars).
    """
    hydric = np.asarray(hydric_pct, dtype="float64")
    removal = COEFFICIENTS.HYDRIC_REMOVAL_FACTOR * (hydric / CONSTANTS.PERCENT)
    removal = np.where(removal == 0, np.nan, removal)

    if removal.ndim == 0:
        return float(removal)
    return removal


def suppress_impervious(removal: np.ndarray, impervious: np.ndarray) -> np.ndarray:
    """Set removal to exactly 0 on impervious cells.

    Impervious cells are those whose impervious value is negative or missing;
    non-negative values are pervious and keep their removal unchanged.

    Args:
        removal: Land removal grid values
        impervious: Impervious indicator grid values (same shape)

    Returns:
        Removal grid with impervious cells set to 0.
    """
    if removal.shape != impervious.shape:
        msg = f"Shape mismatch: removal {removal.shape} vs impervious {impervious.shape}"
        raise ValueError(msg)

    is_impervious = np.isnan(impervious) | (impervious < 0)
    return np.where(is_impervious, 0.0, removal)

"""In-channel stream nitrogen removal calculations."""

import numpy as np

from nsink.config import COEFFICIENTS, CONSTANTS


def calculate_stream_removal(mean_reach_depth, travel_time):
    """Calculate stream removal fraction with a first-order decay model.

    Formula:
        removal = (1 - exp(-0.0513 * depth^-1.319 * travel_time)) / 100

    Removal is undefined (NaN) wherever depth or travel time is missing,
    depth is not positive, or travel time is negative (no-data codes).

    Args:
        mean_reach_depth: Mean reach depth in metres
        travel_time: Reach travel time (sentinels already converted to NaN)

    Returns:
        Removal fraction with the broadcast shape of the inputs (float for scalars).
    """
    depth = np.asarray(mean_reach_depth, dtype="float64")
    time = np.asarray(travel_time, dtype="float64")

    depth = np.where(depth > 0, depth, np.nan)
    time = np.where(time >= 0, time, np.nan)
    with np.errstate(invalid="ignore", over="ignore"):
        decay = COEFFICIENTS.STREAM_DECAY_COEFF * depth**COEFFICIENTS.STREAM_DEPTH_EXPONENT
        removal = (1 - np.exp(-decay * time)) / CONSTANTS.PERCENT

    if removal.ndim == 0:
        return float(removal)
    return removal

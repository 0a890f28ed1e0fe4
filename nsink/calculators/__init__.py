"""Nitrogen removal calculators.

This package contains pure functions implementing the empirical removal
regressions. All calculators are stateless and testable without spatial data.
"""

from nsink.calculators.lake import calculate_lake_removal, calculate_residence_time
from nsink.calculators.land import calculate_land_removal, suppress_impervious
from nsink.calculators.stream import calculate_stream_removal

__all__ = [
    "calculate_land_removal",
    "suppress_impervious",
    "calculate_stream_removal",
    "calculate_residence_time",
    "calculate_lake_removal",
]

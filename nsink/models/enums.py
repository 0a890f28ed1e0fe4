"""Enums for removal classification."""

from enum import IntEnum


class RemovalType(IntEnum):
    """Categorical removal source codes written to the removal-type grid."""

    NONE = 0
    HYDRIC = 1
    STREAM = 2
    LAKE = 3

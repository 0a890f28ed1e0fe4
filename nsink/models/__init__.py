"""Domain models for nitrogen removal."""

from nsink.models.domain import RemovalLayer, RemovalResult
from nsink.models.enums import RemovalType
from nsink.models.grid import RasterGrid

__all__ = [
    "RasterGrid",
    "RemovalType",
    "RemovalLayer",
    "RemovalResult",
]

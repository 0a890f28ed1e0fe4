"""Result models for the removal pipeline.

These models are immutable value objects handed between pipeline stages and
back to the caller.
"""

import geopandas as gpd
import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from nsink.models.grid import RasterGrid


class RemovalLayer(BaseModel):
    """Output of a single removal estimator.

    Attributes:
        grid: Removal fraction grid aligned with the raster template
        vectors: Annotated vector layer (dissolved polygons or per-segment lines)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    grid: RasterGrid = Field(description="Removal fraction grid")
    vectors: gpd.GeoDataFrame = Field(description="Vector representation of the removal")


class RemovalResult(BaseModel):
    """Complete watershed removal result.

    Attributes:
        removal: Combined removal fraction grid (missing outside the watershed)
        removal_type: Removal type codes (see RemovalType), same alignment as removal
        land_removal: Dissolved land removal polygons
        network_removal: Stream segments and lake flow-path segments with removal
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    removal: RasterGrid = Field(description="Combined nitrogen removal fraction")
    removal_type: RasterGrid = Field(description="Removal type code per pixel")
    land_removal: gpd.GeoDataFrame = Field(description="Land removal polygons")
    network_removal: gpd.GeoDataFrame = Field(description="Stream and lake removal segments")

    def raster_stack(self) -> np.ndarray:
        """Stack removal and removal type as a (2, rows, cols) array."""
        return np.stack([self.removal.data, self.removal_type.data])

"""In-memory raster grid model."""

from dataclasses import dataclass, field

import numpy as np
from pyproj import CRS
from rasterio.transform import Affine


@dataclass(frozen=True)
class RasterGrid:
    """A single-band raster held in memory.

    Missing cells are always represented as NaN in ``data``; ``nodata`` is only
    the sentinel used when the grid is written to disk.

    Attributes:
        data: 2-D float64 array of cell values
        transform: Affine transform of the upper-left corner
        crs: Coordinate reference system
        nodata: No-data sentinel for serialization (None = NaN)
    """

    data: np.ndarray
    transform: Affine
    crs: CRS | None
    nodata: float | None = field(default=None)

    def __post_init__(self):
        data = np.asarray(self.data, dtype="float64")
        if data.ndim != 2:
            msg = f"RasterGrid data must be 2-D, got {data.ndim} dimensions"
            raise ValueError(msg)
        object.__setattr__(self, "data", data)
        if self.crs is not None and not isinstance(self.crs, CRS):
            object.__setattr__(self, "crs", CRS.from_user_input(self.crs))

    @property
    def shape(self) -> tuple[int, int]:
        return self.data.shape

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def missing(self) -> np.ndarray:
        """Boolean mask of missing cells."""
        return np.isnan(self.data)

    def same_grid(self, other: "RasterGrid") -> bool:
        """Whether both grids share shape, transform and CRS (pixel-aligned)."""
        return (
            self.shape == other.shape
            and self.transform.almost_equals(other.transform)
            and self.crs == other.crs
        )

    def with_data(self, data: np.ndarray) -> "RasterGrid":
        """Return a new grid on the same georeferencing with different values."""
        return RasterGrid(data=data, transform=self.transform, crs=self.crs, nodata=self.nodata)

    def filled(self, value: float) -> "RasterGrid":
        """Return a grid of the same georeferencing filled with a constant."""
        return self.with_data(np.full(self.shape, value, dtype="float64"))

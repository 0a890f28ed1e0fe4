import numpy as np
from rasterio.transform import from_origin

from nsink.models.grid import RasterGrid

CRS = "EPSG:5070"
CELL_SIZE = 10.0


def make_grid(
    data,
    cell_size: float = CELL_SIZE,
    origin: tuple[float, float] | None = None,
    crs: str = CRS,
    nodata: float | None = -9999.0,
) -> RasterGrid:
    """Build a RasterGrid whose lower-left corner sits at (0, 0) by default.

    Args:
        data: 2-D array-like of cell values (NaN = missing)
        cell_size: Square cell size in CRS units
        origin: Upper-left corner (x, y); defaults to (0, rows * cell_size)
        crs: Coordinate reference system
        nodata: No-data sentinel used when the grid is written

    Returns:
        RasterGrid
    """
    data = np.asarray(data, dtype="float64")
    if origin is None:
        origin = (0.0, data.shape[0] * cell_size)
    transform = from_origin(origin[0], origin[1], cell_size, cell_size)
    return RasterGrid(data=data, transform=transform, crs=crs, nodata=nodata)


"""Raster operations for removal grids.

This module provides the grid-side operations shared by the estimators and
the merge/classify pipeline:
- Reading grids from disk
- Rasterizing vector features by per-pixel maximum
- Masking to a watershed boundary and gap filling
- Neighbourhood maximum filtering
- Nearest-neighbour resampling onto a template grid
- First-non-missing combination and overlay of grids
- Polygonizing grids into dissolved equal-value regions

Missing cells are NaN throughout; nodata sentinels are only applied on write.
"""

import logging
from pathlib import Path

import geopandas as gpd
import numpy as np
import rasterio
from pyproj import CRS
from rasterio import features
from rasterio.enums import Resampling
from rasterio.warp import reproject
from scipy.ndimage import maximum_filter
from shapely.geometry import shape

from nsink.models.grid import RasterGrid
from nsink.spatial.utils import boundary_geometry, ensure_crs

logger = logging.getLogger(__name__)


def read_raster(path: Path) -> RasterGrid:
    """Read band 1 of a raster file into a RasterGrid (nodata cells become NaN)."""
    with rasterio.open(path) as src:
        data = src.read(1, masked=True).astype("float64").filled(np.nan)
        crs = CRS.from_user_input(src.crs.to_wkt()) if src.crs else None
        return RasterGrid(data=data, transform=src.transform, crs=crs, nodata=src.nodata)


def rasterize_max(
    gdf: gpd.GeoDataFrame,
    column: str,
    template: RasterGrid,
    fill: float = np.nan,
    all_touched: bool = False,
) -> RasterGrid:
    """Burn feature values onto the template grid keeping the per-pixel maximum.

    Features are burned in ascending value order so the last (largest) value
    wins. Missing-valued features are burned first: a pixel covered only by
    missing-valued features is missing, while any real value overrides them.

    Args:
        gdf: Features to burn
        column: Value column
        template: Target grid
        fill: Background value for pixels not covered by any feature
        all_touched: Burn every pixel touched by a geometry

    Returns:
        RasterGrid aligned with the template
    """
    gdf = ensure_crs(gdf, template.crs)
    gdf = gdf[gdf.geometry.notna() & ~gdf.geometry.is_empty]
    if gdf.empty:
        return template.filled(fill)

    values = gdf[column].astype("float64").to_numpy()
    order = np.argsort(np.where(np.isnan(values), -np.inf, values), kind="stable")
    geoms = gdf.geometry.to_numpy()
    shapes = [(geoms[i], float(values[i])) for i in order]

    data = features.rasterize(
        shapes,
        out_shape=template.shape,
        transform=template.transform,
        fill=fill,
        all_touched=all_touched,
        dtype="float64",
    )
    return template.with_data(data)


def boundary_mask(grid: RasterGrid, boundary: gpd.GeoDataFrame) -> np.ndarray:
    """Boolean mask of cells whose centre falls inside the boundary."""
    geom = boundary_geometry(boundary, grid.crs)
    if geom.is_empty:
        return np.zeros(grid.shape, dtype=bool)
    return features.geometry_mask(
        [geom], out_shape=grid.shape, transform=grid.transform, invert=True
    )


def mask_to_boundary(grid: RasterGrid, boundary: gpd.GeoDataFrame) -> RasterGrid:
    """Set cells outside the boundary to missing."""
    inside = boundary_mask(grid, boundary)
    return grid.with_data(np.where(inside, grid.data, np.nan))


def fill_missing(grid: RasterGrid, value: float, where: np.ndarray | None = None) -> RasterGrid:
    """Replace missing cells with value, optionally only within a boolean mask."""
    target = grid.missing if where is None else grid.missing & where
    return grid.with_data(np.where(target, value, grid.data))


def focal_max(grid: RasterGrid, size: int = 3) -> RasterGrid:
    """Apply a size x size neighbourhood maximum filter.

    Missing cells do not contribute to their neighbours and stay missing.
    """
    if size <= 1:
        return grid

    missing = grid.missing
    filled = np.where(missing, -np.inf, grid.data)
    filtered = maximum_filter(filled, size=size, mode="nearest")
    filtered = np.where(np.isneginf(filtered) | missing, np.nan, filtered)
    return grid.with_data(filtered)


def resample_to(grid: RasterGrid, template: RasterGrid) -> RasterGrid:
    """Resample a grid onto the template grid with nearest-neighbour.

    Nearest-neighbour keeps discrete removal-source boundaries intact. Grids
    already aligned with the template are returned unchanged.
    """
    if grid.same_grid(template):
        return grid

    logger.debug(f"Resampling grid {grid.shape} onto template {template.shape}")
    destination = np.full(template.shape, np.nan, dtype="float64")
    reproject(
        source=grid.data,
        destination=destination,
        src_transform=grid.transform,
        src_crs=grid.crs or template.crs,
        dst_transform=template.transform,
        dst_crs=template.crs or grid.crs,
        src_nodata=np.nan,
        dst_nodata=np.nan,
        resampling=Resampling.nearest,
    )
    return RasterGrid(
        data=destination, transform=template.transform, crs=template.crs, nodata=template.nodata
    )


def combine_first(grids: list[RasterGrid]) -> RasterGrid:
    """Combine grids cell by cell taking the first non-missing value.

    Later grids are aligned onto the first grid when their grids differ.
    """
    if not grids:
        msg = "combine_first requires at least one grid"
        raise ValueError(msg)

    base = grids[0]
    data = base.data.copy()
    for grid in grids[1:]:
        other = resample_to(grid, base).data
        data = np.where(np.isnan(data), other, data)
    return base.with_data(data)


def overlay(base: RasterGrid, top: RasterGrid) -> RasterGrid:
    """Place top's non-missing values over base (top wins wherever present)."""
    top = resample_to(top, base)
    return base.with_data(np.where(top.missing, base.data, top.data))


def polygonize(grid: RasterGrid, column: str) -> gpd.GeoDataFrame:
    """Dissolve contiguous equal-value cells into polygons, one feature per value.

    Missing cells are not polygonized.

    Args:
        grid: Grid to polygonize
        column: Name of the value column in the output

    Returns:
        GeoDataFrame with columns [column, geometry]
    """
    valid = ~grid.missing
    if not valid.any():
        return gpd.GeoDataFrame({column: []}, geometry=[], crs=grid.crs)

    # Label by unique value so float values survive polygonization exactly
    uniques, labels = np.unique(grid.data[valid], return_inverse=True)
    label_grid = np.zeros(grid.shape, dtype="int32")
    label_grid[valid] = labels.ravel() + 1

    values = []
    geoms = []
    for geom, label in features.shapes(label_grid, mask=valid, transform=grid.transform):
        values.append(float(uniques[int(label) - 1]))
        geoms.append(shape(geom))

    polygons = gpd.GeoDataFrame({column: values}, geometry=geoms, crs=grid.crs)
    return polygons.dissolve(by=column, as_index=False)[[column, "geometry"]]

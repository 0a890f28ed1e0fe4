"""General spatial utilities.

This module provides common spatial utilities used across estimators:
- CRS validation and transformation
- Polygon boundary handling
"""

import geopandas as gpd
from pyproj import CRS
from shapely.ops import unary_union


def ensure_crs(gdf: gpd.GeoDataFrame, target_crs: CRS | str | None) -> gpd.GeoDataFrame:
    """Ensure GeoDataFrame is in the target CRS, transforming if necessary.

    Args:
        gdf: Input GeoDataFrame
        target_crs: Target coordinate reference system (None leaves the input untouched)

    Returns:
        GeoDataFrame in target CRS (transformed if necessary, original if
        already correct)

    Raises:
        ValueError: If input GeoDataFrame has no CRS defined
    """
    if target_crs is None:
        return gdf

    if gdf.crs is None:
        msg = "Input GeoDataFrame has no CRS defined"
        raise ValueError(msg)

    if gdf.crs != target_crs:
        return gdf.to_crs(target_crs)

    return gdf


def boundary_geometry(boundary: gpd.GeoDataFrame, target_crs: CRS | str | None):
    """Dissolve a (multi)polygon boundary layer into a single geometry.

    Args:
        boundary: Boundary GeoDataFrame (one or more polygonal features)
        target_crs: CRS the geometry should be expressed in

    Returns:
        Shapely geometry of the dissolved boundary.
    """
    boundary = ensure_crs(boundary, target_crs)
    geoms = [geom for geom in boundary.geometry if geom is not None and not geom.is_empty]
    return unary_union(geoms)

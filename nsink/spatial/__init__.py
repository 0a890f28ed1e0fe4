"""Spatial operations for removal estimation.

This package provides spatial operations including:
- Attribute operations (keyed lookups, sentinel handling, geometry repair)
- Raster operations (rasterize, mask, fill, focal max, resample, combine, polygonize)
- General utilities (CRS handling, boundary dissolve)
"""

# Attribute operations
from nsink.spatial.operations import (
    join_attributes,
    make_valid_geometries,
    replace_sentinel,
)

# Raster operations
from nsink.spatial.raster import (
    boundary_mask,
    combine_first,
    fill_missing,
    focal_max,
    mask_to_boundary,
    overlay,
    polygonize,
    rasterize_max,
    read_raster,
    resample_to,
)

# General utilities
from nsink.spatial.utils import boundary_geometry, ensure_crs

__all__ = [
    "join_attributes",
    "make_valid_geometries",
    "replace_sentinel",
    "boundary_mask",
    "combine_first",
    "fill_missing",
    "focal_max",
    "mask_to_boundary",
    "overlay",
    "polygonize",
    "rasterize_max",
    "read_raster",
    "resample_to",
    "boundary_geometry",
    "ensure_crs",
]

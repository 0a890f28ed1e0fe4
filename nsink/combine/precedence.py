"""Removal source precedence and the shared reconciliation pipeline.

Merge and classification both reconcile the three per-source grids with the
same steps and the same precedence, declared once here:

1. Combine the base sources cell by cell, first non-missing wins
2. Mask to the watershed; missing cells inside become 0
3. Neighbourhood maximum filter to close seams between sources
4. Nearest-neighbour resample onto the raster template
5. Overlay sources that take precedence wherever they have a value
6. Re-mask to the watershed on the template grid (inside missing becomes 0)
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import geopandas as gpd

from nsink.models.enums import RemovalType
from nsink.models.grid import RasterGrid
from nsink.spatial import (
    boundary_mask,
    combine_first,
    fill_missing,
    focal_max,
    mask_to_boundary,
    overlay,
    resample_to,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrecedenceRule:
    """One removal source in the precedence list.

    Attributes:
        removal_type: Source the rule applies to
        overlay: Placed over the filtered base grid instead of combined into it
    """

    removal_type: RemovalType
    overlay: bool = False


# Highest precedence first: stream > lake > land
REMOVAL_PRECEDENCE: tuple[PrecedenceRule, ...] = (
    PrecedenceRule(RemovalType.STREAM, overlay=True),
    PrecedenceRule(RemovalType.LAKE),
    PrecedenceRule(RemovalType.HYDRIC),
)


def reconcile_layers(
    layers: Mapping[RemovalType, RasterGrid],
    template: RasterGrid,
    watershed: gpd.GeoDataFrame,
    focal_size: int = 3,
    precedence: tuple[PrecedenceRule, ...] = REMOVAL_PRECEDENCE,
) -> RasterGrid:
    """Reconcile per-source grids into one template-aligned grid.

    Args:
        layers: Grid per removal source (every source named in precedence)
        template: Raster template defining the output grid
        watershed: Watershed boundary polygons
        focal_size: Maximum filter window width in cells
        precedence: Ordered rules, highest precedence first

    Returns:
        Grid aligned with the template; no missing cells inside the watershed,
        missing cells outside it

    Raises:
        ValueError: If a source named in the precedence has no grid
    """
    missing = [rule.removal_type.name for rule in precedence if rule.removal_type not in layers]
    if missing:
        msg = f"No grid supplied for removal sources: {', '.join(missing)}"
        raise ValueError(msg)

    base_rules = [rule for rule in precedence if not rule.overlay]
    overlay_rules = [rule for rule in precedence if rule.overlay]

    grid = combine_first([layers[rule.removal_type] for rule in base_rules])
    grid = _mask_and_fill(grid, watershed)
    grid = focal_max(grid, size=focal_size)
    grid = resample_to(grid, template)

    # Lowest precedence first so the highest is placed last
    for rule in reversed(overlay_rules):
        grid = overlay(grid, layers[rule.removal_type])

    return _mask_and_fill(template.with_data(grid.data), watershed)


def _mask_and_fill(grid: RasterGrid, watershed: gpd.GeoDataFrame) -> RasterGrid:
    inside = boundary_mask(grid, watershed)
    grid = mask_to_boundary(grid, watershed)
    return fill_missing(grid, 0.0, where=inside)

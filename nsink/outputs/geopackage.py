"""GeoPackage output strategy for removal vectors."""

import logging
from pathlib import Path

from nsink.models.domain import RemovalResult

logger = logging.getLogger(__name__)


class VectorOutputStrategy:
    """Writes land removal polygons and network removal segments to a GeoPackage.

    Layers:
    - land_removal: dissolved land removal polygons
    - network_removal: stream segments and lake flow-path segments

    Empty layers are skipped.
    """

    LAND_LAYER = "land_removal"
    NETWORK_LAYER = "network_removal"

    def write(self, result: RemovalResult, output_path: Path) -> Path:
        layers = {
            self.LAND_LAYER: result.land_removal,
            self.NETWORK_LAYER: result.network_removal,
        }
        if all(gdf.empty for gdf in layers.values()):
            msg = "Cannot write GeoPackage: no removal vectors to write"
            raise ValueError(msg)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        if output_path.exists():
            output_path.unlink()

        for name, gdf in layers.items():
            if gdf.empty:
                logger.warning(f"Skipping empty layer '{name}'")
                continue
            gdf.to_file(output_path, layer=name, driver="GPKG")
            logger.info(f"Wrote {len(gdf):,} features to {output_path}:{name}")

        return output_path

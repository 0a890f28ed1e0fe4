"""Output strategies for removal results."""

from nsink.outputs.base import OutputStrategy
from nsink.outputs.geopackage import VectorOutputStrategy
from nsink.outputs.geotiff import RasterStackOutputStrategy

__all__ = ["OutputStrategy", "RasterStackOutputStrategy", "VectorOutputStrategy"]

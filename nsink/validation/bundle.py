"""Input bundle validation."""

from collections.abc import Mapping

import geopandas as gpd
import pandas as pd

from nsink.config import REQUIRED_LAYER_COLUMNS, InputLayers
from nsink.models.grid import RasterGrid
from nsink.validation.errors import InvalidBundleError, ValidationError


class BundleValidator:
    """Validates the bundle handed over by data preparation.

    Checks:
    - All required keys present (fails fast, nothing else is checked otherwise)
    - Vector layers are GeoDataFrames with a CRS
    - Lookup tables are DataFrames
    - Grids are RasterGrids
    - Required attribute columns present on each layer
    - Watershed boundary is non-empty and polygonal
    """

    def missing_keys(self, bundle: Mapping) -> list[str]:
        """Return required bundle keys that are absent."""
        return [key for key in InputLayers.all() if key not in bundle]

    def validate(self, bundle: Mapping) -> list[ValidationError]:
        """Validate the bundle structure.

        Args:
            bundle: Mapping of layer name to layer

        Returns:
            List of validation errors (empty if valid)
        """
        missing = self.missing_keys(bundle)
        if missing:
            return [
                ValidationError(
                    message=f"Missing required input layers: {', '.join(missing)}",
                    field="bundle",
                )
            ]

        errors = []
        errors.extend(self._validate_types(bundle))
        if errors:
            return errors

        errors.extend(self._validate_columns(bundle))
        errors.extend(self._validate_watershed(bundle[InputLayers.WATERSHED]))
        return errors

    def _validate_types(self, bundle: Mapping) -> list[ValidationError]:
        errors = []

        for key in InputLayers.vector_layers():
            layer = bundle[key]
            if not isinstance(layer, gpd.GeoDataFrame):
                errors.append(
                    ValidationError(
                        message=f"Layer '{key}' must be a GeoDataFrame, got {type(layer).__name__}",
                        field=key,
                    )
                )
            elif layer.crs is None:
                errors.append(ValidationError(message=f"Layer '{key}' has no defined CRS", field=key))

        for key in InputLayers.tables():
            if not isinstance(bundle[key], pd.DataFrame):
                errors.append(
                    ValidationError(
                        message=f"Table '{key}' must be a DataFrame, got {type(bundle[key]).__name__}",
                        field=key,
                    )
                )

        for key in InputLayers.grids():
            if not isinstance(bundle[key], RasterGrid):
                errors.append(
                    ValidationError(
                        message=f"Grid '{key}' must be a RasterGrid, got {type(bundle[key]).__name__}",
                        field=key,
                    )
                )

        return errors

    def _validate_columns(self, bundle: Mapping) -> list[ValidationError]:
        errors = []
        for key, columns in REQUIRED_LAYER_COLUMNS.items():
            missing_cols = [col for col in columns if col not in bundle[key].columns]
            if missing_cols:
                errors.append(
                    ValidationError(
                        message=f"Layer '{key}' missing required columns: {', '.join(missing_cols)}",
                        field=key,
                    )
                )
        return errors

    def _validate_watershed(self, watershed: gpd.GeoDataFrame) -> list[ValidationError]:
        if watershed.empty:
            return [ValidationError(message="Watershed boundary is empty", field="watershed")]

        invalid_types = set(watershed.geometry.geom_type.dropna().unique()) - {
            "Polygon",
            "MultiPolygon",
        }
        if invalid_types:
            return [
                ValidationError(
                    message=f"Invalid watershed geometry types: {', '.join(sorted(invalid_types))}. "
                    f"Expected: Polygon or MultiPolygon",
                    field="watershed",
                )
            ]
        return []


def validate_bundle(bundle: Mapping) -> None:
    """Validate a bundle and raise if it cannot be processed.

    Raises:
        InvalidBundleError: Listing every problem found and any missing keys
    """
    validator = BundleValidator()
    errors = validator.validate(bundle)
    if errors:
        raise InvalidBundleError(errors, missing_keys=validator.missing_keys(bundle))

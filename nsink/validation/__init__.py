"""Validation of the input bundle handed over by data preparation."""

from nsink.validation.bundle import BundleValidator, validate_bundle
from nsink.validation.errors import InvalidBundleError, ValidationError

__all__ = [
    "BundleValidator",
    "InvalidBundleError",
    "ValidationError",
    "validate_bundle",
]

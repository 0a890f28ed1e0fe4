"""Validation error definitions."""

from dataclasses import dataclass


@dataclass
class ValidationError:
    """Represents a validation error with descriptive message."""

    message: str
    field: str | None = None


class InvalidBundleError(ValueError):
    """Raised when the input bundle is structurally invalid.

    Attributes:
        errors: Every validation problem found
        missing_keys: Required bundle keys that were absent
    """

    def __init__(self, errors: list[ValidationError], missing_keys: list[str] | None = None):
        self.errors = errors
        self.missing_keys = missing_keys or []
        super().__init__("Invalid input bundle: " + "; ".join(e.message for e in errors))

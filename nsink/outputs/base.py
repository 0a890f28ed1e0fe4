"""Base output strategy interface for removal results."""

from pathlib import Path
from typing import Protocol

from nsink.models.domain import RemovalResult


class OutputStrategy(Protocol):
    """Protocol for output strategies that serialize removal results.

    Output strategies are separate from the pipeline: calc_removal() returns
    a RemovalResult and the caller decides when and where to write it.
    """

    def write(self, result: RemovalResult, output_path: Path) -> Path:
        """Write a removal result to a file.

        Args:
            result: Removal result
            output_path: Path where output file should be written

        Returns:
            Path to the written output file

        Raises:
            IOError: If writing fails
            ValueError: If the result cannot be serialized
        """
        ...

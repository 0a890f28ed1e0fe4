#!/usr/bin/env python

"""Estimate nitrogen removal for a prepared watershed bundle.

Reads a bundle directory written by data preparation, runs the removal
pipeline and writes:

    <output_dir>/n_removal.tif     band 1 removal fraction, band 2 removal type
    <output_dir>/n_removal.gpkg    layers land_removal, network_removal

Usage:
    uv run python scripts/calc_removal.py <bundle_dir> <output_dir>
    uv run python scripts/calc_removal.py <bundle_dir> <output_dir> --serial
    uv run python scripts/calc_removal.py --help
"""

import logging
from pathlib import Path
from uuid import uuid4

import typer
from pydantic import ValidationError

from nsink.config import RemovalConfig
from nsink.outputs import RasterStackOutputStrategy, VectorOutputStrategy
from nsink.repositories import BundleRepository
from nsink.runner import calc_removal
from nsink.validation import InvalidBundleError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Estimate watershed nitrogen removal from a prepared bundle")


@app.command()
def run(
    bundle_dir: Path = typer.Argument(
        ...,
        help="Prepared bundle directory (inputs.gpkg, lookup CSVs, grids)",
        exists=True,
        file_okay=False,
    ),
    output_dir: Path = typer.Argument(
        ...,
        help="Directory for the removal raster stack and vectors",
    ),
    serial: bool = typer.Option(
        False,
        "--serial",
        help="Run estimators sequentially instead of in worker processes",
    ),
    focal_window_size: int | None = typer.Option(
        None,
        "--focal-window",
        help="Override the gap-closing maximum filter width (odd, cells)",
    ),
):
    """Run the removal pipeline for one watershed bundle."""
    overrides = {}
    if serial:
        overrides["parallel"] = False
    if focal_window_size is not None:
        overrides["focal_window_size"] = focal_window_size
    try:
        config = RemovalConfig(**overrides)
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise typer.BadParameter(messages, param_hint="--focal-window") from e

    run_id = str(uuid4())
    logger.info("=== N-Sink Removal Estimation ===")
    logger.info(f"Bundle: {bundle_dir}")
    logger.info(f"Output: {output_dir}")
    logger.info(f"Run ID: {run_id}")

    bundle = BundleRepository(bundle_dir).load()

    try:
        result = calc_removal(bundle, config=config, run_id=run_id)
    except InvalidBundleError as e:
        for error in e.errors:
            logger.error(f"  {error.field}: {error.message}")
        raise typer.Exit(1)

    raster_path = RasterStackOutputStrategy().write(result, output_dir / "n_removal.tif")
    logger.info("✓ Removal estimation complete")
    logger.info(f"  Raster stack: {raster_path}")

    if result.land_removal.empty and result.network_removal.empty:
        logger.warning("No removal vectors produced; skipping GeoPackage output")
        return
    vector_path = VectorOutputStrategy().write(result, output_dir / "n_removal.gpkg")
    logger.info(f"  Vectors: {vector_path}")


if __name__ == "__main__":
    app()

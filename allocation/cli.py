"""Command line entry point for parcel allocation.

Reads a parcel layer with geopandas, resolves overlaps by category priority,
dissolves by category, and writes both outputs as GeoJSON.

Usage:
    allocate parcels.geojson out/ -p residential=3 -p retail=2 -p open_space=1
    allocate parcels.gpkg out/ --category-attribute landuse --skip-failed-categories
    allocate --help
"""

import logging
from pathlib import Path

import geopandas as gpd
import typer

from allocation.common.log_utils import configure_logging
from allocation.config import AllocationConfig
from allocation.errors import AllocationError
from allocation.models.enums import FailurePolicy
from allocation.runner import run_allocation

logger = logging.getLogger(__name__)

app = typer.Typer(help="Resolve overlapping land-use parcels by priority and dissolve by category")


def parse_priorities(values: list[str]) -> dict[str, int]:
    """Parse CATEGORY=RANK pairs into a priority order."""
    priority_order = {}
    for value in values:
        category, sep, rank = value.rpartition("=")
        if not sep or not category:
            msg = f"Expected CATEGORY=RANK, got '{value}'"
            raise typer.BadParameter(msg)
        try:
            priority_order[category] = int(rank)
        except ValueError:
            msg = f"Rank for '{category}' must be an integer, got '{rank}'"
            raise typer.BadParameter(msg) from None
    return priority_order


@app.command()
def allocate(
    parcels_file: Path = typer.Argument(
        ...,
        help="Parcel layer readable by geopandas (GeoJSON, GeoPackage, shapefile, ...)",
        exists=True,
    ),
    output_dir: Path = typer.Argument(..., help="Directory for resolved/dissolved GeoJSON"),
    priority: list[str] = typer.Option(
        [],
        "--priority",
        "-p",
        help="Category priority as CATEGORY=RANK (higher rank wins); repeatable",
    ),
    category_attribute: str = typer.Option(
        "category", "--category-attribute", "-c", help="Attribute holding the category"
    ),
    id_column: str = typer.Option("id", "--id-column", help="Column holding the parcel id"),
    dissolve_category: list[str] = typer.Option(
        [],
        "--dissolve-category",
        "-d",
        help="Category to dissolve; repeatable (default: every category present)",
    ),
    skip_failed_categories: bool = typer.Option(
        False,
        "--skip-failed-categories",
        help="Continue dissolving remaining categories when one fails",
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit structured JSON logs"),
):
    """Allocate a parcel layer and write resolved and dissolved outputs."""
    configure_logging(json_logs=json_logs)

    config = AllocationConfig(
        category_attribute=category_attribute,
        id_column=id_column,
        priority_order=parse_priorities(priority),
        dissolve_categories=set(dissolve_category) or None,
        dissolve_failure_policy=(
            FailurePolicy.SKIP if skip_failed_categories else FailurePolicy.RAISE
        ),
    )

    logger.info(f"Reading parcels from {parcels_file}")
    try:
        parcels = gpd.read_file(parcels_file)
    except (OSError, RuntimeError, ValueError) as e:
        logger.error(f"Failed to read parcels from {parcels_file}: {e}")
        raise typer.Exit(1) from e

    try:
        result = run_allocation(parcels, config)
    except (AllocationError, ValueError) as e:
        logger.error(f"Allocation failed: {e}")
        raise typer.Exit(1) from e

    output_dir.mkdir(parents=True, exist_ok=True)
    for name, frame in result.to_frames().items():
        path = output_dir / f"{name}.geojson"
        frame.to_file(path, driver="GeoJSON")
        logger.info(f"Wrote {len(frame)} features to {path}")

    if not result.complete:
        logger.error("Allocation incomplete; see errors above")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

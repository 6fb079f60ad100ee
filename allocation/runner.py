"""Allocation execution.

This module provides the main entry point for allocating a parcel layer:
validate, resolve overlaps by priority, then dissolve the resolved parcels
by category.
"""

import logging
from dataclasses import dataclass
from uuid import uuid4

import geopandas as gpd

from allocation.common.log_utils import ctx_run_id
from allocation.config import DEFAULT_CONFIG, AllocationConfig
from allocation.dissolver import dissolve_by_category
from allocation.models.feature import FeatureSet
from allocation.models.results import DissolveResult, ResolutionResult
from allocation.resolver import prioritise_overlap
from allocation.spatial.utils import apply_precision, make_valid_geometries
from allocation.validation.features import FeatureSetValidator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationResult:
    """Outputs of one allocation run.

    Attributes:
        run_id: Identifier stamped on every log line of the run
        resolution: Priority overlap resolution output
        dissolve: Category dissolve output (computed on the resolved parcels)
    """

    run_id: str
    resolution: ResolutionResult
    dissolve: DissolveResult

    @property
    def complete(self) -> bool:
        return self.resolution.complete and self.dissolve.complete

    def to_frames(self) -> dict[str, gpd.GeoDataFrame]:
        resolved = self.resolution.features
        return {
            "resolved": resolved.to_geodataframe(),
            "dissolved": self.dissolve.to_geodataframe(
                resolved.schema, id_column=resolved.id_column, crs=resolved.crs
            ),
        }


def run_allocation(
    parcels_gdf: gpd.GeoDataFrame,
    config: AllocationConfig = DEFAULT_CONFIG,
) -> AllocationResult:
    """Run overlap resolution and category dissolve over a parcel layer.

    Args:
        parcels_gdf: Parcel GeoDataFrame with id, category and geometry columns
        config: Allocation configuration (attribute names, priority order, policies)

    Returns:
        AllocationResult holding both stages' results

    Raises:
        ValueError: If the parcels fail validation
        DissolveError: If a category fails under the raise failure policy
        GeometryOperationError: If a geometry operation fails
    """
    run_id = uuid4().hex[:12]
    token = ctx_run_id.set(run_id)
    try:
        return _run(parcels_gdf, config, run_id)
    finally:
        ctx_run_id.reset(token)


def _run(parcels_gdf: gpd.GeoDataFrame, config: AllocationConfig, run_id: str) -> AllocationResult:
    logger.info(f"Running allocation for {len(parcels_gdf)} parcels")

    if config.repair_geometries:
        parcels_gdf = make_valid_geometries(parcels_gdf)
    if config.precision_grid_size is not None:
        parcels_gdf = apply_precision(parcels_gdf, grid_size=config.precision_grid_size)

    parcels = FeatureSet(parcels_gdf, id_column=config.id_column, name=config.source_set_id)

    errors = FeatureSetValidator(config.category_attribute).validate(parcels)
    if errors:
        for error in errors:
            logger.error(f"Validation failed ({error.field}): {error.message}")
        msg = "; ".join(error.message for error in errors)
        raise ValueError(msg)

    if not config.priority_order:
        logger.warning("No priority order configured; overlaps will be left unresolved")

    resolution = prioritise_overlap(
        parcels,
        config.category_attribute,
        config.priority_order,
        grid_size=config.precision_grid_size,
    )
    if not resolution.complete:
        logger.warning("Overlap resolution incomplete; dissolving partial result")

    resolved = resolution.features
    categories = config.dissolve_categories
    if categories is None:
        column = resolved.to_geodataframe()[config.category_attribute]
        categories = set(column.dropna().tolist())

    dissolved = dissolve_by_category(
        resolved,
        config.category_attribute,
        categories,
        failure_policy=config.dissolve_failure_policy,
        grid_size=config.precision_grid_size,
    )
    logger.info(
        f"Allocation produced {len(resolved)} resolved and "
        f"{len(dissolved.features)} dissolved features"
    )

    return AllocationResult(run_id=run_id, resolution=resolution, dissolve=dissolved)

"""Priority overlap resolution.

Trims overlapping parcels so that the higher-ranked category keeps the
contested area. Resolution is a single pass over the parcels in input order:

- each parcel's intersecting neighbours are fetched from the store using the
  parcel's original geometry;
- a parcel is trimmed by the *original* geometry of every neighbour whose
  category outranks its own;
- pairs with equal ranks, or with a category missing from the priority
  order, are left overlapping.

Because neighbours are subtracted in their original (untrimmed) form, a
parcel's final geometry is its original geometry minus the union of every
higher-ranked neighbour. The pass is not repeated until stable.
"""

import logging
from collections.abc import Mapping

from shapely.geometry.base import BaseGeometry

from allocation.errors import StoreAccessError
from allocation.features.builder import build_feature_from_geometry
from allocation.models.feature import Feature, FeatureSet
from allocation.models.results import ResolutionResult
from allocation.spatial.kernel import difference
from allocation.spatial.query import intersecting_features
from allocation.store.base import FeatureStore
from allocation.store.memory import GeoDataFrameStore

logger = logging.getLogger(__name__)


def prioritise_overlap(
    parcels: FeatureSet,
    category_attribute: str,
    priority_order: Mapping[str, int],
    *,
    store: FeatureStore | None = None,
    grid_size: float | None = None,
) -> ResolutionResult:
    """Resolve overlaps between parcels by category priority.

    Args:
        parcels: Parcels to resolve, visited in set order
        category_attribute: Attribute holding each parcel's category
        priority_order: Category label to rank; higher rank wins
        store: Store queried for intersecting neighbours
            (default: in-memory store over ``parcels``)
        grid_size: Optional precision grid for the difference operations

    Returns:
        ResolutionResult with one feature per parcel id. If the store failed
        part way, ``complete`` is False and the result holds only the parcels
        visited before the failure.

    Raises:
        GeometryOperationError: If a difference operation fails
    """
    store = store or GeoDataFrameStore(parcels)
    originals: dict[str, Feature] = {}
    resolved: dict[str, BaseGeometry] = {}
    error = None

    logger.info(
        f"Prioritising overlap for {len(parcels)} parcels "
        f"({len(priority_order)} ranked categories)"
    )
    try:
        _accumulate(
            parcels, store, category_attribute, priority_order, originals, resolved, grid_size
        )
    except StoreAccessError as e:
        logger.error(f"Failed at performing overlap removal process: {e}")
        error = e

    features = [
        build_feature_from_geometry(originals[feature_id], geometry)
        for feature_id, geometry in resolved.items()
    ]
    logger.info(f"Resolved {len(features)} of {len(parcels)} parcels")

    return ResolutionResult(
        features=FeatureSet.from_features(
            features,
            parcels.schema,
            id_column=parcels.id_column,
            name=parcels.name,
            crs=parcels.crs,
        ),
        error=error,
    )


def _accumulate(
    parcels: FeatureSet,
    store: FeatureStore,
    category_attribute: str,
    priority_order: Mapping[str, int],
    originals: dict[str, Feature],
    resolved: dict[str, BaseGeometry],
    grid_size: float | None,
) -> None:
    """Run the single resolution pass, updating ``resolved`` in place.

    ``resolved`` maps feature id to the best-known geometry. Ids are added on
    first visit and never removed, so a failure leaves a usable partial table.
    """
    with parcels.features() as iterator:
        for parcel in iterator:
            logger.debug(f"Prioritising parcel {parcel.id}")
            candidates = intersecting_features(store, parcel.geometry)

            if parcel.id not in resolved:
                originals[parcel.id] = parcel
                resolved[parcel.id] = parcel.geometry

            rank = priority_order.get(parcel.get(category_attribute))
            if rank is None:
                continue

            with candidates.features() as neighbours:
                for neighbour in neighbours:
                    if neighbour.id == parcel.id:
                        continue
                    neighbour_rank = priority_order.get(neighbour.get(category_attribute))
                    if neighbour_rank is None or neighbour_rank <= rank:
                        continue
                    resolved[parcel.id] = difference(
                        resolved[parcel.id], neighbour.geometry, grid_size=grid_size
                    )

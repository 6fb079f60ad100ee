"""Dissolve parcels by category.

For each requested category, the matching parcels are unioned and the result
is split into its connected parts; each part becomes one output feature.
Dissolved features take their attributes from the last parcel of the
category, so only the category attribute is meaningful on the output.

Synthesized ids have the form ``<source_set_id>.<category>.<part_index>`` and
depend only on the category label and the kernel's part order, so they are
reproducible across runs.
"""

import logging
from collections.abc import Iterable

from allocation.errors import DissolveError, StoreAccessError
from allocation.features.builder import build_feature_with_schema
from allocation.models.enums import FailurePolicy
from allocation.models.feature import Feature, FeatureSet
from allocation.models.results import DissolveResult
from allocation.spatial.kernel import decompose_into_parts, union
from allocation.store.base import FeatureStore
from allocation.store.memory import GeoDataFrameStore

logger = logging.getLogger(__name__)


def dissolve_by_category(
    parcels: FeatureSet,
    category_attribute: str,
    categories: Iterable[str],
    *,
    store: FeatureStore | None = None,
    failure_policy: FailurePolicy = FailurePolicy.RAISE,
    grid_size: float | None = None,
) -> DissolveResult:
    """Dissolve parcels of each category into connected regions.

    Categories are processed sorted by their string form, so mixed label
    types still order deterministically. A category with no matching parcels
    contributes nothing and is not an error.

    Args:
        parcels: Parcels to dissolve
        category_attribute: Attribute holding each parcel's category
        categories: Category labels to dissolve
        store: Store used for the per-category selection
            (default: in-memory store over ``parcels``)
        failure_policy: RAISE aborts on the first failed category; SKIP
            records the failure and continues
        grid_size: Optional precision grid for the union

    Returns:
        DissolveResult with dissolved features across all categories

    Raises:
        DissolveError: If a category selection fails under the RAISE policy
        GeometryOperationError: If a union fails (regardless of policy)
    """
    store = store or GeoDataFrameStore(parcels)
    dissolved: list[Feature] = []
    failures: dict[str, DissolveError] = {}

    for category in sorted(set(categories), key=str):
        try:
            members = store.features_where(category_attribute, category)
        except StoreAccessError as e:
            if failure_policy == FailurePolicy.RAISE:
                logger.error(f"Failed dissolve by category process at '{category}': {e}")
                raise DissolveError(category) from e
            logger.warning(f"Skipping category '{category}' after selection failure: {e}")
            error = DissolveError(category)
            error.__cause__ = e
            failures[category] = error
            continue

        if len(members) == 0:
            logger.debug(f"No parcels for category '{category}'")
            continue

        parts = dissolve(members, category, source_set_id=parcels.name, grid_size=grid_size)
        logger.info(f"Dissolved {len(members)} '{category}' parcels into {len(parts)} part(s)")
        dissolved.extend(parts)

    return DissolveResult(features=dissolved, failures=failures)


def dissolve(
    collection: FeatureSet,
    category: str,
    *,
    source_set_id: str = "id",
    grid_size: float | None = None,
) -> list[Feature]:
    """Union a collection and split it into one feature per connected part.

    Args:
        collection: Features to dissolve (all of one category)
        category: Category label, used in the synthesized ids
        source_set_id: Prefix of the synthesized ids
        grid_size: Optional precision grid for the union

    Returns:
        One feature per connected part, numbered from 0
    """
    geometries = []
    template = None
    with collection.features() as iterator:
        for feature in iterator:
            geometries.append(feature.geometry)
            template = feature

    if template is None:
        return []

    parts = decompose_into_parts(union(geometries, grid_size=grid_size))
    return [
        build_feature_with_schema(
            template,
            template.schema,
            part,
            [],
            f"{source_set_id}.{category}.{n}",
        )
        for n, part in enumerate(parts)
    ]

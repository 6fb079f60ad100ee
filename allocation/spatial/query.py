"""Spatial intersection query.

The intersects predicate is always delegated to the store so that it can use
a spatial index (GeoDataFrame sindex, PostGIS GiST) instead of a pairwise scan
of the whole collection in Python.
"""

import logging

from shapely.geometry.base import BaseGeometry

from allocation.models.feature import FeatureSet
from allocation.store.base import FeatureStore

logger = logging.getLogger(__name__)


def intersecting_features(store: FeatureStore, geometry: BaseGeometry) -> FeatureSet:
    """Return every feature in ``store`` whose geometry intersects ``geometry``.

    Touching counts as intersecting. If ``geometry`` was taken from a feature
    in the store, that feature is part of the result; filtering it out is the
    caller's job.

    Args:
        store: Feature store to query
        geometry: Reference geometry

    Returns:
        FeatureSet of intersecting features

    Raises:
        StoreAccessError: If the store cannot be read (no partial result)
    """
    matches = store.features_intersecting(geometry)
    logger.debug(f"Spatial query matched {len(matches)} features")
    return matches

"""In-memory feature store over a FeatureSet."""

import logging
from typing import Any

from shapely.geometry.base import BaseGeometry

from allocation.errors import StoreAccessError
from allocation.models.feature import FeatureSet

logger = logging.getLogger(__name__)


class GeoDataFrameStore:
    """Feature store backed by an in-memory FeatureSet.

    Spatial queries go through the GeoDataFrame spatial index. Any failure
    raised while querying the frame is reported as StoreAccessError.
    """

    def __init__(self, feature_set: FeatureSet):
        self.feature_set = feature_set

    def features_intersecting(self, geometry: BaseGeometry) -> FeatureSet:
        try:
            return self.feature_set.intersecting(geometry)
        except Exception as e:
            logger.error(f"Spatial query on '{self.feature_set.name}' failed: {e}")
            msg = f"Failed to query features intersecting geometry in '{self.feature_set.name}'"
            raise StoreAccessError(msg) from e

    def features_where(self, attribute: str, value: Any) -> FeatureSet:
        try:
            return self.feature_set.where_equals(attribute, value)
        except Exception as e:
            logger.error(f"Attribute query {attribute}={value!r} failed: {e}")
            msg = f"Failed to query features where {attribute}={value!r}"
            raise StoreAccessError(msg) from e

    def all_features(self) -> FeatureSet:
        return self.feature_set

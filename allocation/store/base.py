"""Feature store protocol."""

from typing import Any, Protocol

from shapely.geometry.base import BaseGeometry

from allocation.models.feature import FeatureSet


class FeatureStore(Protocol):
    """Protocol for indexed feature collections queried by the resolver and dissolver.

    Implementations must push predicates down into their own query layer and
    raise StoreAccessError when the underlying data cannot be read.
    """

    def features_intersecting(self, geometry: BaseGeometry) -> FeatureSet:
        """Return features whose geometry intersects ``geometry``."""
        ...

    def features_where(self, attribute: str, value: Any) -> FeatureSet:
        """Return features whose ``attribute`` equals ``value``."""
        ...

    def all_features(self) -> FeatureSet:
        """Return every feature in the store."""
        ...

"""Feature stores.

A store answers spatial and attribute predicate queries over one collection
of parcels and reports read failures as StoreAccessError.
"""

from allocation.store.base import FeatureStore
from allocation.store.memory import GeoDataFrameStore
from allocation.store.postgis import PostgisFeatureStore

__all__ = [
    "FeatureStore",
    "GeoDataFrameStore",
    "PostgisFeatureStore",
]

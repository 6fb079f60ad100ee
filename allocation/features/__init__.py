"""Feature construction and attribute lookup."""

from allocation.features.builder import (
    build_feature,
    build_feature_from_geometry,
    build_feature_with_schema,
)
from allocation.features.lookup import classify, create_lookup

__all__ = [
    "build_feature",
    "build_feature_from_geometry",
    "build_feature_with_schema",
    "create_lookup",
    "classify",
]

"""Priority allocation of overlapping land-use parcels.

Resolves contested area between overlapping parcels by category priority and
dissolves same-category parcels into contiguous regions, ahead of
land-use/walkability scoring.

Commonly used exports:
- prioritise_overlap: Trim lower-priority parcels where they overlap higher ones
- dissolve_by_category: Union parcels per category and split into connected parts
- run_allocation: Validate, resolve and dissolve a parcel GeoDataFrame in one call
"""

from allocation.dissolver import dissolve, dissolve_by_category
from allocation.errors import (
    AllocationError,
    DissolveError,
    GeometryOperationError,
    StoreAccessError,
)
from allocation.models.feature import AttributeField, Feature, FeatureSchema, FeatureSet
from allocation.resolver import prioritise_overlap
from allocation.runner import run_allocation

__all__ = [
    "prioritise_overlap",
    "dissolve_by_category",
    "dissolve",
    "run_allocation",
    "Feature",
    "FeatureSchema",
    "FeatureSet",
    "AttributeField",
    "AllocationError",
    "StoreAccessError",
    "DissolveError",
    "GeometryOperationError",
]

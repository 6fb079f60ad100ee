"""Domain models for parcel allocation."""

from allocation.models.enums import FailurePolicy
from allocation.models.feature import AttributeField, Feature, FeatureSchema, FeatureSet
from allocation.models.results import DissolveResult, ResolutionResult

__all__ = [
    "AttributeField",
    "Feature",
    "FeatureSchema",
    "FeatureSet",
    "FailurePolicy",
    "ResolutionResult",
    "DissolveResult",
]

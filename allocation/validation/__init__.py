"""Validation of parcel feature sets before allocation.

Validators return a list of ValidationError rather than raising, so every
problem in an input can be reported at once.
"""

from allocation.validation.errors import ValidationError
from allocation.validation.features import FeatureSetValidator

__all__ = [
    "ValidationError",
    "FeatureSetValidator",
]

"""Shared test fixtures."""

import pytest
from shapely.geometry import box

from tests.utils import parcel_set


@pytest.fixture
def priority_order() -> dict[str, int]:
    """Priority order used across resolver tests (higher rank wins)."""
    return {"residential": 3, "retail": 2, "open_space": 1}


@pytest.fixture
def overlapping_pair():
    """P (rank 2) on [0,2]x[0,2] overlapping Q (rank 1) on [1,3]x[0,2]."""
    return parcel_set(
        [
            ("P", "retail", box(0, 0, 2, 2)),
            ("Q", "open_space", box(1, 0, 3, 2)),
        ]
    )


@pytest.fixture
def mixed_parcels():
    """Parcels of several categories, some overlapping, some isolated."""
    return parcel_set(
        [
            ("r1", "residential", box(0, 0, 4, 4)),
            ("s1", "retail", box(3, 0, 6, 4)),
            ("o1", "open_space", box(5, 0, 8, 4)),
            ("o2", "open_space", box(20, 20, 22, 22)),
        ],
        name="parcels",
        label=["house", "shop", "park", "park"],
    )

"""Regression test fixtures.

Three mutually overlapping parcels of three distinct ranks:

    A (rank 3) [0,2]   x [0,2]
    B (rank 2) [1,3]   x [0,2]
    C (rank 1) [0.5,2.5] x [1,3]
"""

import pytest
from shapely.geometry import box


@pytest.fixture
def ranks() -> dict[str, int]:
    return {"A": 3, "B": 2, "C": 1}


@pytest.fixture
def mutually_overlapping_rows():
    return [
        ("a", "A", box(0, 0, 2, 2)),
        ("b", "B", box(1, 0, 3, 2)),
        ("c", "C", box(0.5, 1, 2.5, 3)),
    ]

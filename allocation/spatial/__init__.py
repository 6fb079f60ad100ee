"""Spatial operations for parcel allocation.

This package provides:
- Geometry kernel (difference, union, decomposition, intersects) over shapely
- Spatial intersection query pushed down into the feature store
- General utilities (precision model, geometry repair)

Commonly used exports:
- difference: Subtract one geometry from another
- union: Union any number of geometries into one possibly multi-part geometry
- decompose_into_parts: Split a geometry into its connected single parts
- intersects: Topological intersection predicate
- intersecting_features: Features in a store intersecting a geometry
- apply_precision: Snap frame geometries to a grid
- make_valid_geometries: Repair invalid geometries
"""

from allocation.spatial.kernel import decompose_into_parts, difference, intersects, union
from allocation.spatial.query import intersecting_features
from allocation.spatial.utils import apply_precision, make_valid_geometries

__all__ = [
    "difference",
    "union",
    "decompose_into_parts",
    "intersects",
    "intersecting_features",
    "apply_precision",
    "make_valid_geometries",
]

"""Geometry kernel.

Thin wrappers around shapely 2 set operations. Empty inputs give empty
results; GEOS failures are reported as GeometryOperationError because they
indicate malformed input geometry rather than a transient condition.

Each operation accepts an optional ``grid_size`` which snaps the result to a
fixed precision grid (see allocation.spatial.utils.apply_precision).
"""

from collections.abc import Iterable

import shapely
from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from allocation.errors import GeometryOperationError


def difference(
    a: BaseGeometry, b: BaseGeometry, grid_size: float | None = None
) -> BaseGeometry:
    """Return the part of ``a`` not covered by ``b``."""
    try:
        return shapely.difference(a, b, grid_size=grid_size)
    except GEOSException as e:
        msg = f"Geometry difference failed: {e}"
        raise GeometryOperationError(msg) from e


def union(
    geometries: Iterable[BaseGeometry], grid_size: float | None = None
) -> BaseGeometry:
    """Union geometries into a single, possibly multi-part, geometry.

    Disjoint inputs come back as a MultiPolygon; an empty input gives an
    empty polygon.
    """
    geometries = [g for g in geometries if g is not None]
    if not geometries:
        return Polygon()
    try:
        return shapely.union_all(geometries, grid_size=grid_size)
    except GEOSException as e:
        msg = f"Geometry union of {len(geometries)} geometries failed: {e}"
        raise GeometryOperationError(msg) from e


def decompose_into_parts(geometry: BaseGeometry) -> list[BaseGeometry]:
    """Split a geometry into its single-part components, in storage order."""
    if geometry is None or geometry.is_empty:
        return []
    return [part for part in shapely.get_parts(geometry) if not part.is_empty]


def intersects(a: BaseGeometry, b: BaseGeometry) -> bool:
    try:
        return bool(shapely.intersects(a, b))
    except GEOSException as e:
        msg = f"Geometry intersects test failed: {e}"
        raise GeometryOperationError(msg) from e

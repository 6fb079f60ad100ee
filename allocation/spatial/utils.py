"""General spatial utilities.

This module provides:
- Precision model application (grid snapping of geometry coordinates)
- Geometry repair for invalid input parcels
"""

import geopandas as gpd
from shapely import set_precision
from shapely.validation import make_valid


def apply_precision(
    gdf: gpd.GeoDataFrame,
    grid_size: float = 0.0001,
) -> gpd.GeoDataFrame:
    """Snap geometry coordinates to a grid.

    Snapping inputs before trimming/dissolving keeps sliver polygons from
    floating-point noise out of the output. Use the same grid_size for the
    frame and for the kernel operations run on it.

    Args:
        gdf: Input GeoDataFrame
        grid_size: Grid size in map units

    Returns:
        GeoDataFrame with precision-snapped geometries
    """
    gdf = gdf.copy()
    gdf[gdf.geometry.name] = gdf.geometry.apply(
        lambda geom: set_precision(geom, grid_size=grid_size) if geom else geom
    )
    return gdf


def make_valid_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Repair invalid geometries using Shapely's make_valid.

    Fixes common digitising issues like self-intersections and unclosed rings
    so that difference and union do not fail on them.

    Args:
        gdf: Input GeoDataFrame (may contain invalid geometries)

    Returns:
        GeoDataFrame with repaired geometries
    """
    gdf = gdf.copy()
    gdf[gdf.geometry.name] = gdf.geometry.apply(lambda geom: make_valid(geom) if geom else geom)

    return gdf

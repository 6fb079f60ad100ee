import geopandas as gpd
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from allocation.models.feature import FeatureSet


def parcels_gdf(
    rows: list[tuple[str, str | None, BaseGeometry | None]],
    crs: str = "EPSG:27700",
    **extra_columns: list,
) -> gpd.GeoDataFrame:
    """Build a parcel GeoDataFrame from (id, category, geometry) rows."""
    return gpd.GeoDataFrame(
        {
            "id": [row[0] for row in rows],
            "category": [row[1] for row in rows],
            **extra_columns,
        },
        geometry=[row[2] for row in rows],
        crs=crs,
    )


def parcel_set(
    rows: list[tuple[str, str | None, BaseGeometry | None]],
    name: str = "id",
    **extra_columns: list,
) -> FeatureSet:
    """Build a parcel FeatureSet from (id, category, geometry) rows."""
    return FeatureSet(parcels_gdf(rows, **extra_columns), id_column="id", name=name)


def geometries_by_id(feature_set: FeatureSet) -> dict[str, BaseGeometry]:
    with feature_set.features() as iterator:
        return {feature.id: feature.geometry for feature in iterator}


def unit_square(x: float, y: float = 0) -> BaseGeometry:
    return box(x, y, x + 1, y + 1)

"""PostGIS-backed feature store.

Runs the intersects and attribute predicates server side with SQLAlchemy 2.x
query builder patterns, so PostGIS can use its GiST index on the parcel table.
"""

import logging
from typing import Any

import geopandas as gpd
from geoalchemy2.functions import ST_GeomFromText, ST_Intersects, ST_SetSRID
from shapely.geometry.base import BaseGeometry
from sqlalchemy import Select, Table, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from allocation.errors import StoreAccessError
from allocation.models.feature import FeatureSet

logger = logging.getLogger(__name__)


class PostgisFeatureStore:
    """Feature store reading parcels from a PostGIS table.

    Attributes:
        engine: SQLAlchemy engine configured for the PostGIS database
        table: Parcel table (must contain the id and geometry columns)
        id_column: Column holding the stable feature id
        geometry_column: Geometry column name
        srid: SRID of the geometry column
        name: Source-set identifier given to returned feature sets
    """

    def __init__(
        self,
        engine: Engine,
        table: Table,
        id_column: str = "id",
        geometry_column: str = "geometry",
        srid: int = 27700,
        name: str | None = None,
    ):
        for column in (id_column, geometry_column):
            if column not in table.c:
                msg = f"Column '{column}' not found in table '{table.name}'"
                raise ValueError(msg)

        self.engine = engine
        self.table = table
        self.id_column = id_column
        self.geometry_column = geometry_column
        self.srid = srid
        self.name = name or table.name

    def features_intersecting(self, geometry: BaseGeometry) -> FeatureSet:
        reference = ST_SetSRID(ST_GeomFromText(geometry.wkt), self.srid)
        stmt = select(self.table).where(
            ST_Intersects(self.table.c[self.geometry_column], reference)
        )
        return self._read(stmt)

    def features_where(self, attribute: str, value: Any) -> FeatureSet:
        if attribute not in self.table.c:
            msg = f"Attribute '{attribute}' not found in table '{self.table.name}'"
            raise StoreAccessError(msg)
        stmt = select(self.table).where(self.table.c[attribute] == value)
        return self._read(stmt)

    def all_features(self) -> FeatureSet:
        return self._read(select(self.table))

    def _read(self, stmt: Select) -> FeatureSet:
        """Execute a SELECT and wrap the rows as a FeatureSet.

        Rows are ordered by id so iteration order is stable across queries.

        Raises:
            StoreAccessError: If the database cannot be read
        """
        stmt = stmt.order_by(self.table.c[self.id_column])
        try:
            with self.engine.connect() as connection:
                gdf = gpd.read_postgis(
                    stmt,
                    connection,
                    geom_col=self.geometry_column,
                    crs=f"EPSG:{self.srid}",
                )
        except SQLAlchemyError as e:
            logger.error(f"PostGIS query on '{self.table.name}' failed: {e}")
            msg = f"Failed to read features from '{self.table.name}'"
            raise StoreAccessError(msg) from e

        return FeatureSet(gdf, id_column=self.id_column, name=self.name)

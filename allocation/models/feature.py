"""Feature data model.

A Feature is a geometry plus a fixed schema of named attributes and a stable
id. A FeatureSet is a collection of features sharing one schema, backed by a
GeoDataFrame so spatial and attribute predicates run inside geopandas rather
than in application loops.
"""

from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import geopandas as gpd
import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, model_validator
from shapely.geometry.base import BaseGeometry


class AttributeField(BaseModel):
    """A named, typed, non-geometry attribute slot."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Attribute name")
    dtype: str = Field(default="object", description="pandas dtype name")


class FeatureSchema(BaseModel):
    """Ordered attribute layout shared by every feature in a set.

    Attributes:
        attributes: Non-geometry attribute fields, in column order
        geometry_attribute: Name of the geometry column
    """

    model_config = ConfigDict(frozen=True)

    attributes: tuple[AttributeField, ...] = ()
    geometry_attribute: str = "geometry"

    @model_validator(mode="after")
    def _check_names(self) -> "FeatureSchema":
        names = self.names
        if len(names) != len(set(names)):
            msg = f"Duplicate attribute names in schema: {names}"
            raise ValueError(msg)
        if self.geometry_attribute in names:
            msg = f"Geometry attribute '{self.geometry_attribute}' listed as a plain attribute"
            raise ValueError(msg)
        return self

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.attributes]

    def extend(self, *fields: AttributeField) -> "FeatureSchema":
        """Return a new schema with ``fields`` appended after the existing ones."""
        return FeatureSchema(
            attributes=(*self.attributes, *fields),
            geometry_attribute=self.geometry_attribute,
        )

    @classmethod
    def from_frame(cls, frame: gpd.GeoDataFrame, id_column: str) -> "FeatureSchema":
        geometry_attribute = frame.geometry.name
        return cls(
            attributes=tuple(
                AttributeField(name=str(column), dtype=str(frame[column].dtype))
                for column in frame.columns
                if column not in (id_column, geometry_attribute)
            ),
            geometry_attribute=geometry_attribute,
        )


@dataclass(frozen=True)
class Feature:
    """A single parcel: stable id, geometry and schema-ordered attributes."""

    id: str
    geometry: BaseGeometry | None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    schema: FeatureSchema = field(default_factory=FeatureSchema)

    def __getitem__(self, name: str) -> Any:
        if name == self.schema.geometry_attribute:
            return self.geometry
        return self.attributes[name]

    def get(self, name: str, default: Any = None) -> Any:
        try:
            return self[name]
        except KeyError:
            return default


class FeatureSet:
    """Collection of features sharing one schema, backed by a GeoDataFrame.

    Feature ids are read from ``id_column`` and must be unique. The frame is
    re-indexed positionally so spatial index hits map straight onto rows.

    Attributes:
        id_column: Column holding the feature id
        name: Source-set identifier, used as the prefix of synthesized ids
        schema: Attribute layout shared by all features
    """

    def __init__(
        self,
        frame: gpd.GeoDataFrame,
        id_column: str = "id",
        name: str = "id",
        schema: FeatureSchema | None = None,
    ):
        if id_column not in frame.columns:
            msg = f"id_column '{id_column}' not found in GeoDataFrame"
            raise ValueError(msg)

        duplicated = frame[id_column].astype(str).duplicated()
        if duplicated.any():
            dupes = sorted(frame.loc[duplicated, id_column].astype(str).unique())
            msg = f"Feature ids must be unique, found duplicates: {dupes}"
            raise ValueError(msg)

        self._frame = frame.reset_index(drop=True)
        self.id_column = id_column
        self.name = name

        derived = FeatureSchema.from_frame(self._frame, id_column)
        if schema is not None and (
            schema.names != derived.names
            or schema.geometry_attribute != derived.geometry_attribute
        ):
            msg = f"Schema {schema.names} does not match frame columns {derived.names}"
            raise ValueError(msg)
        self.schema = schema or derived

    def __len__(self) -> int:
        return len(self._frame)

    def __repr__(self) -> str:
        return f"FeatureSet(name={self.name!r}, features={len(self)}, schema={self.schema.names})"

    @property
    def crs(self):
        return self._frame.crs

    @property
    def ids(self) -> list[str]:
        return self._frame[self.id_column].astype(str).tolist()

    @contextmanager
    def features(self) -> Iterator[Iterator[Feature]]:
        """Iterate features within a scope that always releases the iterator.

        Example:
            with parcels.features() as iterator:
                for feature in iterator:
                    ...
        """
        iterator = self._iter_features()
        try:
            yield iterator
        finally:
            iterator.close()

    def _iter_features(self) -> Iterator[Feature]:
        geometry_attribute = self.schema.geometry_attribute
        names = self.schema.names
        for record in self._frame.to_dict(orient="records"):
            yield Feature(
                id=str(record[self.id_column]),
                geometry=record[geometry_attribute],
                attributes={name: record[name] for name in names},
                schema=self.schema,
            )

    def intersecting(self, geometry: BaseGeometry) -> "FeatureSet":
        """Features whose geometry intersects ``geometry``, in set order.

        Uses the frame's spatial index: a bounding-box pre-filter confirmed by
        the exact intersects predicate.
        """
        if geometry is None or geometry.is_empty or self._frame.empty:
            return self._subset(self._frame.index[:0])
        positions = self._frame.sindex.query(geometry, predicate="intersects")
        return self._subset(np.sort(positions))

    def where_equals(self, attribute: str, value: Any) -> "FeatureSet":
        """Features whose ``attribute`` equals ``value`` exactly."""
        if attribute not in self._frame.columns:
            msg = f"Attribute '{attribute}' not found in feature set '{self.name}'"
            raise KeyError(msg)
        return self._subset(self._frame.index[self._frame[attribute] == value])

    def _subset(self, positions) -> "FeatureSet":
        return FeatureSet(
            self._frame.iloc[positions], id_column=self.id_column, name=self.name, schema=self.schema
        )

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        return self._frame.copy()

    @classmethod
    def from_features(
        cls,
        features: Iterable[Feature],
        schema: FeatureSchema,
        id_column: str = "id",
        name: str = "id",
        crs: Any = None,
    ) -> "FeatureSet":
        """Build a set from features that all follow ``schema``.

        Columns start as object so missing values stay ``None``, then take the
        dtype each schema field declares.
        """
        features = list(features)
        frame = pd.DataFrame(
            [
                {id_column: f.id, **{n: f.attributes.get(n) for n in schema.names}}
                for f in features
            ],
            columns=[id_column, *schema.names],
            dtype=object,
        ).astype({f.name: f.dtype for f in schema.attributes})
        frame[schema.geometry_attribute] = gpd.GeoSeries(
            [f.geometry for f in features], index=frame.index, crs=crs
        )
        gdf = gpd.GeoDataFrame(frame, geometry=schema.geometry_attribute, crs=crs)
        return cls(gdf, id_column=id_column, name=name, schema=schema)

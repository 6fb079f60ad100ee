"""Unit tests for the feature data model."""

import geopandas as gpd
import pytest
from shapely.geometry import Polygon

from allocation.errors import DissolveError, StoreAccessError
from allocation.models.feature import AttributeField, Feature, FeatureSchema, FeatureSet
from allocation.models.results import DissolveResult, ResolutionResult
from tests.utils import parcel_set, parcels_gdf, unit_square


def test_schema_rejects_duplicate_attribute_names():
    with pytest.raises(ValueError):
        FeatureSchema(attributes=(AttributeField(name="a"), AttributeField(name="a")))


def test_schema_rejects_geometry_as_plain_attribute():
    with pytest.raises(ValueError):
        FeatureSchema(attributes=(AttributeField(name="geometry"),))


def test_schema_extend_appends_fields():
    schema = FeatureSchema(attributes=(AttributeField(name="category"),))

    extended = schema.extend(AttributeField(name="score", dtype="float64"))

    assert extended.names == ["category", "score"]
    assert schema.names == ["category"]
    assert extended.geometry_attribute == "geometry"


def test_schema_from_frame_excludes_id_and_geometry():
    gdf = parcels_gdf([("a", "A", unit_square(0))], label=["x"])

    schema = FeatureSchema.from_frame(gdf, "id")

    assert schema.names == ["category", "label"]
    assert schema.geometry_attribute == "geometry"


def test_feature_set_rejects_duplicate_ids():
    gdf = parcels_gdf([("a", "A", unit_square(0)), ("a", "B", unit_square(1))])

    with pytest.raises(ValueError, match="unique"):
        FeatureSet(gdf)


def test_feature_set_requires_id_column():
    gdf = parcels_gdf([("a", "A", unit_square(0))])

    with pytest.raises(ValueError, match="id_column"):
        FeatureSet(gdf, id_column="parcel_id")


def test_features_yields_typed_features():
    parcels = parcel_set([("a", "A", unit_square(0))], label=["x"])

    with parcels.features() as iterator:
        features = list(iterator)

    assert len(features) == 1
    feature = features[0]
    assert feature.id == "a"
    assert dict(feature.attributes) == {"category": "A", "label": "x"}
    assert feature["geometry"].equals(unit_square(0))
    assert feature.schema == parcels.schema


def test_features_iterator_closed_on_early_exit():
    parcels = parcel_set([("a", "A", unit_square(0)), ("b", "A", unit_square(1))])

    with parcels.features() as iterator:
        for _ in iterator:
            break

    with pytest.raises(StopIteration):
        next(iterator)


def test_features_iterator_closed_on_error():
    parcels = parcel_set([("a", "A", unit_square(0)), ("b", "A", unit_square(1))])

    with pytest.raises(RuntimeError):
        with parcels.features() as iterator:
            next(iterator)
            raise RuntimeError("boom")

    with pytest.raises(StopIteration):
        next(iterator)


def test_intersecting_includes_self_and_touching_in_set_order():
    parcels = parcel_set(
        [
            ("far", "A", unit_square(10)),
            ("touching", "A", unit_square(1)),
            ("self", "A", unit_square(0)),
        ]
    )

    matches = parcels.intersecting(unit_square(0))

    assert matches.ids == ["touching", "self"]


def test_intersecting_empty_geometry_matches_nothing():
    parcels = parcel_set([("a", "A", unit_square(0))])

    assert len(parcels.intersecting(Polygon())) == 0


def test_where_equals_exact_match():
    parcels = parcel_set(
        [("a", "A", unit_square(0)), ("b", "AB", unit_square(1)), ("c", "A", unit_square(2))]
    )

    assert parcels.where_equals("category", "A").ids == ["a", "c"]


def test_where_equals_unknown_attribute():
    parcels = parcel_set([("a", "A", unit_square(0))])

    with pytest.raises(KeyError):
        parcels.where_equals("landuse", "A")


def test_from_features_preserves_schema_and_crs():
    parcels = parcel_set([("a", "A", unit_square(0)), ("b", "B", unit_square(1))])
    with parcels.features() as iterator:
        features = list(iterator)

    rebuilt = FeatureSet.from_features(features, parcels.schema, crs=parcels.crs)

    assert rebuilt.ids == ["a", "b"]
    assert rebuilt.schema == parcels.schema
    assert rebuilt.crs == parcels.crs
    assert isinstance(rebuilt.to_geodataframe(), gpd.GeoDataFrame)


def test_from_features_empty():
    schema = FeatureSchema(attributes=(AttributeField(name="category"),))

    empty = FeatureSet.from_features([], schema)

    assert len(empty) == 0
    assert empty.schema == schema


def test_from_features_applies_schema_dtypes():
    schema = FeatureSchema(
        attributes=(
            AttributeField(name="landuse", dtype="object"),
            AttributeField(name="area_ha", dtype="float64"),
        )
    )
    features = [
        Feature(id="a", geometry=unit_square(0), attributes={"landuse": "retail", "area_ha": 1}),
        Feature(id="b", geometry=unit_square(1), attributes={"landuse": None, "area_ha": 2}),
    ]

    frame = FeatureSet.from_features(features, schema).to_geodataframe().set_index("id")

    assert frame["landuse"].dtype == object
    assert frame.loc["b", "landuse"] is None
    assert frame["area_ha"].dtype == "float64"


def test_feature_get_default():
    feature = Feature(id="a", geometry=unit_square(0), attributes={"category": "A"})

    assert feature.get("category") == "A"
    assert feature.get("missing", "n/a") == "n/a"


def test_resolution_result_completeness():
    parcels = parcel_set([("a", "A", unit_square(0))])

    assert ResolutionResult(features=parcels).complete
    assert not ResolutionResult(features=parcels, error=StoreAccessError("down")).complete


def test_dissolve_result_completeness():
    assert DissolveResult().complete
    assert not DissolveResult(failures={"A": DissolveError("A")}).complete
    assert str(DissolveError("A")) == "Failed to dissolve category 'A'"

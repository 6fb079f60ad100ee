"""Feature builder.

Builds new features from a base feature: attributes are copied by name from
the base, the geometry slot is replaced, and extra values fill any schema
fields the base feature does not have.
"""

from collections.abc import Sequence
from typing import Any

from shapely.geometry.base import BaseGeometry

from allocation.models.feature import Feature, FeatureSchema


def build_feature_from_geometry(
    base: Feature,
    geometry: BaseGeometry,
    feature_id: str | None = None,
) -> Feature:
    """Copy ``base`` with its geometry replaced.

    Args:
        base: Feature supplying schema and attribute values
        geometry: Replacement geometry
        feature_id: New id (default: keep the base id)

    Returns:
        New feature with the base's attributes and the replacement geometry
    """
    return Feature(
        id=base.id if feature_id is None else feature_id,
        geometry=geometry,
        attributes={name: base.attributes.get(name) for name in base.schema.names},
        schema=base.schema,
    )


def build_feature_with_schema(
    base: Feature,
    schema: FeatureSchema,
    geometry: BaseGeometry,
    extra_values: Sequence[Any],
    feature_id: str,
) -> Feature:
    """Build a feature in a target schema that may extend the base's schema.

    Every schema field the base feature also has is copied by name. The
    remaining fields, in schema order, are filled from ``extra_values``.

    Args:
        base: Feature supplying attribute values
        schema: Target schema
        geometry: Geometry for the new feature
        extra_values: Values for schema fields the base does not carry
        feature_id: Id of the new feature

    Returns:
        New feature in ``schema``

    Raises:
        ValueError: If the number of extra values does not match the number
            of schema fields missing from the base
    """
    return Feature(
        id=feature_id,
        geometry=geometry,
        attributes=_merge_attributes(base, schema, extra_values),
        schema=schema,
    )


def build_feature(
    schema: FeatureSchema,
    base: Feature,
    extra_values: Sequence[Any],
) -> Feature:
    """Append attribute values to ``base``, keeping its geometry and id."""
    return Feature(
        id=base.id,
        geometry=base.geometry,
        attributes=_merge_attributes(base, schema, extra_values),
        schema=schema,
    )


def _merge_attributes(
    base: Feature, schema: FeatureSchema, extra_values: Sequence[Any]
) -> dict[str, Any]:
    base_names = set(base.schema.names)
    missing = [name for name in schema.names if name not in base_names]
    if len(missing) != len(extra_values):
        msg = (
            f"Expected {len(missing)} extra value(s) for fields {missing}, "
            f"got {len(extra_values)}"
        )
        raise ValueError(msg)

    extras = dict(zip(missing, extra_values, strict=True))
    return {
        name: base.attributes.get(name) if name in base_names else extras[name]
        for name in schema.names
    }

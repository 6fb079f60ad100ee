"""Parcel feature set validation."""

from allocation.models.feature import FeatureSet
from allocation.validation.errors import ValidationError


class FeatureSetValidator:
    """Validates parcels before overlap resolution and dissolve.

    Checks:
    - Category attribute present
    - Geometry type (Polygon/MultiPolygon)
    - No null geometries
    - No invalid geometries
    """

    VALID_GEOMETRY_TYPES = {"Polygon", "MultiPolygon"}

    def __init__(self, category_attribute: str):
        self.category_attribute = category_attribute

    def validate(self, feature_set: FeatureSet) -> list[ValidationError]:
        """Validate a parcel feature set.

        Args:
            feature_set: Parcels to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.category_attribute not in feature_set.schema.names:
            errors.append(
                ValidationError(
                    message=f"Missing category attribute '{self.category_attribute}'",
                    field=self.category_attribute,
                )
            )

        geometries = feature_set.to_geodataframe().geometry
        geometry_field = feature_set.schema.geometry_attribute

        null_count = int(geometries.isna().sum())
        if null_count > 0:
            errors.append(
                ValidationError(
                    message=f"Found {null_count} null geometries",
                    field=geometry_field,
                )
            )

        present = geometries.dropna()
        geom_types = set(present.geom_type.unique())
        invalid_types = geom_types - self.VALID_GEOMETRY_TYPES
        if invalid_types:
            errors.append(
                ValidationError(
                    message=f"Invalid geometry types found: {', '.join(sorted(invalid_types))}. "
                    f"Expected: Polygon or MultiPolygon",
                    field=geometry_field,
                )
            )

        invalid_count = int((~present.is_valid).sum())
        if invalid_count > 0:
            errors.append(
                ValidationError(
                    message=f"Found {invalid_count} invalid geometries (self-intersections, etc.)",
                    field=geometry_field,
                )
            )

        return errors

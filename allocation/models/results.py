"""Result objects returned by the resolver and dissolver.

Both carry best-effort output alongside an explicit completeness signal, so a
partial result can never be mistaken for a complete one.
"""

from dataclasses import dataclass, field

import geopandas as gpd

from allocation.errors import DissolveError, StoreAccessError
from allocation.models.feature import Feature, FeatureSchema, FeatureSet


@dataclass(frozen=True)
class ResolutionResult:
    """Output of priority overlap resolution.

    Attributes:
        features: One feature per input id seen before any failure
        error: The store failure that stopped accumulation, if any
    """

    features: FeatureSet
    error: StoreAccessError | None = None

    @property
    def complete(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DissolveResult:
    """Output of a dissolve-by-category run.

    Attributes:
        features: Dissolved features, concatenated across categories
        failures: Category label to the error that dropped its contribution
            (only populated under the skip failure policy)
    """

    features: list[Feature] = field(default_factory=list)
    failures: dict[str, DissolveError] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        return not self.failures

    def to_feature_set(
        self, schema: FeatureSchema, id_column: str = "id", name: str = "id", crs=None
    ) -> FeatureSet:
        return FeatureSet.from_features(
            self.features, schema, id_column=id_column, name=name, crs=crs
        )

    def to_geodataframe(
        self, schema: FeatureSchema, id_column: str = "id", crs=None
    ) -> gpd.GeoDataFrame:
        return self.to_feature_set(schema, id_column=id_column, crs=crs).to_geodataframe()

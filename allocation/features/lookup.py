"""Attribute lookup tables.

Land-use source data usually carries a fine-grained code (e.g. a zoning or
mesh-block code) that has to be mapped to the broader category used for
priority resolution. The lookup is read from a feature store and applied by
appending a category attribute to every parcel.
"""

import logging
from typing import Any

from allocation.errors import StoreAccessError
from allocation.features.builder import build_feature
from allocation.models.feature import AttributeField, FeatureSet
from allocation.store.base import FeatureStore

logger = logging.getLogger(__name__)


def create_lookup(store: FeatureStore, key_attribute: str, value_attribute: str) -> dict[str, str]:
    """Build a key -> value table from every feature in ``store``.

    A store read failure is logged and whatever was read before it is
    returned.

    Args:
        store: Store holding the lookup records
        key_attribute: Attribute used as the lookup key
        value_attribute: Attribute used as the lookup value

    Returns:
        Mapping of key to value (later duplicates win)
    """
    lookup: dict[str, str] = {}
    try:
        records = store.all_features()
        with records.features() as iterator:
            for record in iterator:
                lookup[str(record[key_attribute])] = str(record[value_attribute])
    except (StoreAccessError, KeyError) as e:
        logger.error(f"Failed to read lookup table ({key_attribute} -> {value_attribute}): {e}")

    logger.info(f"Loaded {len(lookup)} lookup entries")
    return lookup


def classify(
    parcels: FeatureSet,
    lookup: dict[str, str],
    key_attribute: str,
    category_attribute: str,
) -> FeatureSet:
    """Append ``category_attribute`` to every parcel from its ``key_attribute``.

    Parcels whose key is not in the lookup get a None category, which leaves
    them untracked during priority resolution.

    Raises:
        ValueError: If the category attribute already exists
        KeyError: If the key attribute is missing from the parcels
    """
    if category_attribute in parcels.schema.names:
        msg = f"Attribute '{category_attribute}' already present in '{parcels.name}'"
        raise ValueError(msg)
    if key_attribute not in parcels.schema.names:
        msg = f"Attribute '{key_attribute}' not found in '{parcels.name}'"
        raise KeyError(msg)

    schema = parcels.schema.extend(AttributeField(name=category_attribute, dtype="object"))
    classified = []
    unmatched = 0
    with parcels.features() as iterator:
        for parcel in iterator:
            category: Any = lookup.get(str(parcel[key_attribute]))
            if category is None:
                unmatched += 1
            classified.append(build_feature(schema, parcel, [category]))

    if unmatched:
        logger.warning(f"{unmatched} parcel(s) had no '{category_attribute}' lookup match")

    return FeatureSet.from_features(
        classified, schema, id_column=parcels.id_column, name=parcels.name, crs=parcels.crs
    )

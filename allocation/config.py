"""Configuration for parcel priority allocation.

Includes configuration for:
- Category attribute and id column naming
- Priority order (category label -> integer rank, higher wins)
- Dissolve category selection and failure policy
- Geometry precision and repair

Configuration can be overridden via:
1. Environment variables (e.g., ALLOC_CATEGORY_ATTRIBUTE=landuse,
   ALLOC_PRIORITY_ORDER='{"residential": 3, "retail": 2}')
2. .env file in the current directory
3. Default values in code
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from allocation.models.enums import FailurePolicy


class AllocationConfig(BaseSettings):
    """Main configuration for overlap resolution and category dissolve.

    Can be overridden via environment variables with ALLOC_ prefix:
    - ALLOC_CATEGORY_ATTRIBUTE
    - ALLOC_ID_COLUMN
    - ALLOC_SOURCE_SET_ID
    - ALLOC_PRIORITY_ORDER (JSON object)
    - ALLOC_DISSOLVE_CATEGORIES (JSON array)
    - ALLOC_DISSOLVE_FAILURE_POLICY (raise | skip)
    - ALLOC_PRECISION_GRID_SIZE
    - ALLOC_REPAIR_GEOMETRIES

    Attributes:
        category_attribute: Attribute holding each parcel's land-use category
        id_column: Column holding the stable feature id
        source_set_id: Prefix used when synthesizing dissolved feature ids
        priority_order: Category label to rank; categories not listed are untracked
        dissolve_categories: Categories to dissolve (None = every category present)
        dissolve_failure_policy: Whether a failed category aborts the dissolve
        precision_grid_size: Optional grid size for snapping geometry operations
        repair_geometries: Repair invalid geometries before validation
    """

    model_config = SettingsConfigDict(
        env_prefix="ALLOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    category_attribute: str = Field(
        default="category", description="Attribute holding the land-use category"
    )
    id_column: str = Field(default="id", description="Column holding the feature id")
    source_set_id: str = Field(
        default="id", description="Prefix for synthesized dissolved feature ids"
    )
    priority_order: dict[str, int] = Field(
        default_factory=dict,
        description="Category label to priority rank (higher rank wins contested area)",
    )
    dissolve_categories: set[str] | None = Field(
        default=None, description="Categories to dissolve (None = all categories present)"
    )
    dissolve_failure_policy: FailurePolicy = Field(
        default=FailurePolicy.RAISE,
        description="Abort on the first failed category (raise) or continue (skip)",
    )
    precision_grid_size: float | None = Field(
        default=None,
        gt=0,
        description="Grid size for precision snapping of geometry operations (None = exact)",
    )
    repair_geometries: bool = Field(
        default=False, description="Repair invalid geometries before validation"
    )

    @field_validator("category_attribute", "id_column", "source_set_id")
    @classmethod
    def must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Attribute and id names cannot be empty"
            raise ValueError(msg)
        return v

    @property
    def tracked_categories(self) -> set[str]:
        """Categories that take part in overlap resolution."""
        return set(self.priority_order)


DEFAULT_CONFIG = AllocationConfig()

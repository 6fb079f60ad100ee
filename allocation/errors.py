"""Exception hierarchy for parcel allocation."""


class AllocationError(Exception):
    """Base class for all allocation failures."""


class StoreAccessError(AllocationError):
    """The feature store could not be read."""


class GeometryOperationError(AllocationError):
    """The geometry kernel rejected an operation.

    Signals malformed geometry input upstream; never retried.
    """


class DissolveError(AllocationError):
    """Dissolving a single category failed.

    Attributes:
        category: Category label whose contribution was lost
    """

    def __init__(self, category: str, message: str | None = None):
        self.category = category
        super().__init__(message or f"Failed to dissolve category '{category}'")

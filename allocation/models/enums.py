"""Enumerations shared across allocation components."""

from enum import StrEnum


class FailurePolicy(StrEnum):
    """What the category dissolver does when one category fails."""

    RAISE = "raise"  # propagate the DissolveError, abandoning remaining categories
    SKIP = "skip"  # record the failure and continue with the next category

"""Failure types raised by the reconciliation and reporting core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from poisync.domain.model import ElementKey


class SyncError(RuntimeError):
    """Base class for reconciliation cycle failures."""


class DatasetRejectedError(SyncError):
    """Raised when a fetched dataset fails its plausibility checks."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TrustContradictionError(SyncError):
    """Raised when the secondary source disputes a deletion.

    This is fatal: the primary dataset can no longer be trusted, so no writes
    from the current cycle may be committed.
    """

    def __init__(self, element_id: ElementKey) -> None:
        super().__init__(
            f"Element {element_id} is missing upstream but the secondary source "
            "still reports it as accepting bitcoin"
        )
        self.element_id = element_id


class BoundaryParseError(ValueError):
    """Raised when a region boundary cannot be parsed as GeoJSON."""


class ActorLookupError(RuntimeError):
    """Raised by actor lookup adapters for malformed or failed responses."""

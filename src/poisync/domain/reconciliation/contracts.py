"""Value objects passed between the reconciliation phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from poisync.domain.model import UNKNOWN_ACTOR_ID

if TYPE_CHECKING:
    from poisync.domain.model import ActorId, ElementEvent, ElementKey, Payload
    from poisync.domain.ports import VerifiedElement


@dataclass(slots=True, kw_only=True)
class PlannedDeletion:
    """A live stored element that the fresh dataset no longer contains."""

    element_id: ElementKey
    verified: VerifiedElement | None = None
    actor_id: ActorId = UNKNOWN_ACTOR_ID


@dataclass(slots=True, kw_only=True)
class PlannedCreation:
    element_id: ElementKey
    payload: Payload


@dataclass(slots=True, kw_only=True)
class PlannedUpdate:
    """A stored element whose payload changed, or which reappeared, or both."""

    element_id: ElementKey
    payload: Payload
    payload_changed: bool
    revive: bool


@dataclass(slots=True, kw_only=True)
class ReconciliationPlan:
    deletions: list[PlannedDeletion] = field(default_factory=list[PlannedDeletion])
    creations: list[PlannedCreation] = field(default_factory=list[PlannedCreation])
    updates: list[PlannedUpdate] = field(default_factory=list[PlannedUpdate])
    unchanged: int = 0
    skipped: int = 0
    stored_total: int = 0
    live_total: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.deletions or self.creations or self.updates)


@dataclass(slots=True, kw_only=True)
class ReconciliationSummary:
    """Counts of effective changes plus the audit events staged for them."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    revived: int = 0
    unchanged: int = 0
    events: list[ElementEvent] = field(default_factory=list["ElementEvent"])

    @property
    def changed(self) -> int:
        return self.created + self.updated + self.deleted + self.revived

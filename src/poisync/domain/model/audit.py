"""Append-only audit records of effective element changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from poisync.domain.model.primitives import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from poisync.domain.model.enums import EventKind
    from poisync.domain.model.primitives import ActorId, ElementKey


@dataclass(eq=False, kw_only=True)
class ElementEvent:
    """One effective change to one element, with a snapshot of what it looked like."""

    element_id: ElementKey
    kind: EventKind
    actor_id: ActorId
    element_name: str = ""
    element_lat: float | None = None
    element_lon: float | None = None
    actor_name: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    id: int | None = None

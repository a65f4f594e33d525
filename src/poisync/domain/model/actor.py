"""Cached representations of the upstream users responsible for changes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from poisync.domain.model.primitives import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from poisync.domain.model.primitives import ActorId, Payload

UNKNOWN_ACTOR_ID: Final[int] = 0


@dataclass(eq=False, kw_only=True)
class Actor:
    id: ActorId
    profile: Payload = field(default_factory=dict[str, object])
    tags: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    @property
    def is_unknown(self) -> bool:
        return self.id == UNKNOWN_ACTOR_ID

    @property
    def display_name(self) -> str | None:
        value = self.profile.get("display_name")
        return value if isinstance(value, str) else None


def unknown_actor() -> Actor:
    """Transient stand-in for id 0; never added to a session."""

    return Actor(id=UNKNOWN_ACTOR_ID)

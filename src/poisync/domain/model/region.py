"""Named geographic scopes used to partition reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from poisync.domain.model.primitives import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from poisync.domain.model.primitives import Payload


@dataclass(eq=False, kw_only=True)
class Region:
    """A reporting scope. ``boundary`` is GeoJSON; None means the whole dataset."""

    name: str
    boundary: Payload | None = None
    tags: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None
    id: int | None = None

"""Geotagged points of interest mirrored from the upstream dataset."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from poisync.domain.model import tags as osm
from poisync.domain.model.enums import SourceKind
from poisync.domain.model.primitives import Coordinate, ExternalKey, utcnow

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import date, datetime

    from poisync.domain.model.primitives import ElementKey, Payload


def serialize_payload(payload: Mapping[str, object]) -> str:
    """Canonical JSON form used to decide whether a payload changed."""

    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(eq=False, kw_only=True)
class Element:
    """Local copy of one upstream record.

    ``payload`` is the raw upstream record and is replaced wholesale on change.
    ``tags`` holds local overrides owned by this system (category and the like).
    """

    id: ElementKey
    payload: Payload
    lat: float | None = None
    lon: float | None = None
    tags: dict[str, object] = field(default_factory=dict[str, object])
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    deleted_at: datetime | None = None

    @classmethod
    def from_payload(cls, payload: Payload, *, now: datetime) -> Element:
        element = cls(id=payload_key(payload), payload=payload, created_at=now, updated_at=now)
        element._sync_location()
        return element

    @property
    def coordinate(self) -> Coordinate | None:
        if self.lat is None or self.lon is None:
            return None
        return Coordinate(lat=self.lat, lon=self.lon)

    @property
    def name(self) -> str:
        return osm.display_name(self.payload)

    @property
    def category(self) -> str:
        """Local ``category`` override when set, else derived from the payload tags."""

        override = self.tags.get("category")
        if isinstance(override, str) and override:
            return override
        return osm.category(self.payload)

    @property
    def verification_date(self) -> datetime | None:
        return osm.verification_date(self.payload)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_up_to_date(
        self,
        *,
        as_of: date,
        window_days: int = osm.DEFAULT_FRESHNESS_WINDOW_DAYS,
    ) -> bool:
        return osm.is_up_to_date(self.payload, as_of=as_of, window_days=window_days)

    def serialized_payload(self) -> str:
        return serialize_payload(self.payload)

    def replace_payload(self, payload: Payload, *, now: datetime) -> None:
        self.payload = payload
        self._sync_location()
        self.updated_at = now

    def mark_deleted(self, *, now: datetime) -> None:
        self.deleted_at = now
        self.updated_at = now

    def revive(self, *, now: datetime) -> None:
        self.deleted_at = None
        self.updated_at = now

    def _sync_location(self) -> None:
        point = osm.coordinate(self.payload)
        self.lat = point.lat if point else None
        self.lon = point.lon if point else None


def payload_kind(payload: Mapping[str, object]) -> SourceKind:
    raw = payload.get("type")
    if not isinstance(raw, str):
        raise ValueError("Upstream record is missing its 'type'")
    return SourceKind(raw)


def payload_id(payload: Mapping[str, object]) -> int:
    raw = payload.get("id")
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError("Upstream record is missing a numeric 'id'")
    return raw


def payload_key(payload: Mapping[str, object]) -> ElementKey:
    return str(ExternalKey(kind=payload_kind(payload), source_id=payload_id(payload)))


def payload_actor(payload: Mapping[str, object]) -> tuple[int, str | None]:
    """Attributing actor id (0 when unknown) and display name of an upstream record."""

    raw_uid = payload.get("uid")
    raw_user = payload.get("user")
    actor_id = raw_uid if isinstance(raw_uid, int) and not isinstance(raw_uid, bool) else 0
    return actor_id, raw_user if isinstance(raw_user, str) else None

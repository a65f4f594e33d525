"""Ports for fetching external domain data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from poisync.domain.model import payload_actor, utcnow
from poisync.domain.model import tags as osm

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from poisync.domain.model import ActorId, ExternalKey, Payload


@dataclass(slots=True)
class Dataset:
    """One upstream snapshot: raw records exactly as published."""

    items: tuple[Payload, ...]
    fetched_at: datetime = field(default_factory=utcnow)
    source: str | None = None

    def __len__(self) -> int:
        return len(self.items)


@runtime_checkable
class DatasetFetcher(Protocol):
    """Callable port for retrieving the full upstream dataset."""

    def __call__(self) -> Dataset: ...


@dataclass(frozen=True, slots=True)
class VerifiedElement:
    """Current record for one element according to the secondary source."""

    payload: Payload

    @property
    def accepts_bitcoin(self) -> bool:
        return osm.accepts_bitcoin(self.payload)

    @property
    def actor_id(self) -> ActorId:
        return payload_actor(self.payload)[0]


@runtime_checkable
class ElementVerifier(Protocol):
    """Looks up a single element in the authoritative source; None means not found."""

    def fetch_element(self, key: ExternalKey) -> VerifiedElement | None: ...


@dataclass(frozen=True, slots=True)
class ActorProfile:
    actor_id: ActorId
    profile: Payload


@runtime_checkable
class ActorLookup(Protocol):
    """Looks up an actor profile; None means not found."""

    def fetch_actor(self, actor_id: ActorId) -> ActorProfile | None: ...


@runtime_checkable
class BatchActorLookup(ActorLookup, Protocol):
    """An actor lookup that can resolve many ids in one pass; failures map to None."""

    def fetch_actors(self, actor_ids: Sequence[ActorId]) -> dict[ActorId, ActorProfile | None]: ...


__all__ = [
    "ActorLookup",
    "ActorProfile",
    "BatchActorLookup",
    "Dataset",
    "DatasetFetcher",
    "ElementVerifier",
    "VerifiedElement",
]

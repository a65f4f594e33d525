"""Public domain model surface."""

from __future__ import annotations

from poisync.domain.model.actor import UNKNOWN_ACTOR_ID, Actor, unknown_actor
from poisync.domain.model.audit import ElementEvent
from poisync.domain.model.element import (
    Element,
    payload_actor,
    payload_key,
    serialize_payload,
)
from poisync.domain.model.enums import EventKind, ReportVariant, SourceKind
from poisync.domain.model.primitives import (
    ActorId,
    Coordinate,
    ElementKey,
    ExternalKey,
    Payload,
    utcnow,
)
from poisync.domain.model.region import Region
from poisync.domain.model.report import Report

__all__ = [  # noqa: RUF022
    # elements
    "Element",
    "ElementKey",
    "ExternalKey",
    "Coordinate",
    "Payload",
    "payload_actor",
    "payload_key",
    "serialize_payload",
    # actors
    "Actor",
    "ActorId",
    "UNKNOWN_ACTOR_ID",
    "unknown_actor",
    # audit
    "ElementEvent",
    # reporting
    "Region",
    "Report",
    # enums
    "EventKind",
    "ReportVariant",
    "SourceKind",
    # helpers
    "utcnow",
]

"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceKind(StrEnum):
    """Upstream element kinds, as published by OpenStreetMap."""

    NODE = "node"
    WAY = "way"
    RELATION = "relation"


class EventKind(StrEnum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ReportVariant(StrEnum):
    """Report write semantics, selected by configuration for a whole run."""

    SNAPSHOT = "snapshot"
    CUMULATIVE = "cumulative"

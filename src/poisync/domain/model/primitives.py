"""Domain primitives: scalar aliases + small value objects."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from poisync.domain.model.enums import SourceKind

type ElementKey = str
type ActorId = int
type Payload = dict[str, object]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class ExternalKey:
    """Stable element identity: source kind plus numeric source id."""

    kind: SourceKind
    source_id: int

    def __str__(self) -> str:
        return f"{self.kind}:{self.source_id}"

    @classmethod
    def parse(cls, value: str) -> ExternalKey:
        kind, sep, raw_id = value.partition(":")
        if not sep:
            raise ValueError(f"Invalid element key: {value!r}")
        try:
            return cls(kind=SourceKind(kind), source_id=int(raw_id))
        except ValueError as exc:
            raise ValueError(f"Invalid element key: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Coordinate:
    lat: float
    lon: float

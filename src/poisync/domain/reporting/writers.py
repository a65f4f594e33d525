"""Strategies deciding how a freshly computed report reaches the store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from poisync.domain.model import Report, ReportVariant, utcnow

from .statistics import COUNTER_TAGS, diff_tags

if TYPE_CHECKING:
    from collections.abc import Mapping

    from poisync.domain.ports import ReportRepository

log = getLogger(__name__)


class ReportWriteOutcome(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class ReportWrite:
    region_id: int
    outcome: ReportWriteOutcome
    report: Report


class ReportWriter(Protocol):
    def write(
        self,
        reports: ReportRepository,
        candidate: Report,
        changes: Mapping[str, int] | None = None,
    ) -> ReportWrite: ...


class SnapshotReportWriter:
    """Append a new report whenever the statistics differ from the latest one."""

    def __init__(self, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock

    def write(
        self,
        reports: ReportRepository,
        candidate: Report,
        changes: Mapping[str, int] | None = None,
    ) -> ReportWrite:
        _ = changes
        latest = reports.latest_for_region(candidate.region_id)
        if latest is None:
            log.info("No report history for region %s", candidate.region_id)
            return _insert(reports, candidate, self._clock())
        if latest.tags == candidate.tags:
            return ReportWrite(candidate.region_id, ReportWriteOutcome.UNCHANGED, latest)
        log_diff(candidate.region_id, latest.tags, candidate.tags)
        return _insert(reports, candidate, self._clock())


class CumulativeReportWriter:
    """Keep one report per region and day, accumulating cycle change counters."""

    def __init__(self, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock

    def write(
        self,
        reports: ReportRepository,
        candidate: Report,
        changes: Mapping[str, int] | None = None,
    ) -> ReportWrite:
        increments = {name: (changes or {}).get(name, 0) for name in COUNTER_TAGS}
        existing = reports.latest_for_region_on(candidate.region_id, candidate.date)
        if existing is None:
            candidate.tags = {**candidate.tags, **increments}
            return _insert(reports, candidate, self._clock())

        merged = dict(candidate.tags)
        for name in COUNTER_TAGS:
            previous = existing.tags.get(name, 0)
            merged[name] = (previous if isinstance(previous, int) else 0) + increments[name]
        if merged == existing.tags:
            return ReportWrite(candidate.region_id, ReportWriteOutcome.UNCHANGED, existing)

        log_diff(candidate.region_id, existing.tags, merged)
        existing.tags = merged
        existing.updated_at = self._clock()
        log.info("Updated report %s for region %s", existing.id, candidate.region_id)
        return ReportWrite(candidate.region_id, ReportWriteOutcome.UPDATED, existing)


def writer_for(
    variant: ReportVariant, *, clock: Callable[[], datetime] = utcnow
) -> ReportWriter:
    if variant is ReportVariant.CUMULATIVE:
        return CumulativeReportWriter(clock=clock)
    return SnapshotReportWriter(clock=clock)


def log_diff(region_id: int, old: Mapping[str, object], new: Mapping[str, object]) -> None:
    for key, (before, after) in diff_tags(old, new).items():
        log.info("Region %s report tag %s changed: %r -> %r", region_id, key, before, after)


def _insert(reports: ReportRepository, candidate: Report, now: datetime) -> ReportWrite:
    candidate.created_at = now
    candidate.updated_at = now
    reports.add(candidate)
    log.info("Inserted report for region %s dated %s", candidate.region_id, candidate.date)
    return ReportWrite(candidate.region_id, ReportWriteOutcome.INSERTED, candidate)

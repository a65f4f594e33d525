"""Per-region report generation over the live element set."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

from poisync.domain.errors import BoundaryParseError
from poisync.domain.geometry import region_matcher
from poisync.domain.model import Report, ReportVariant, utcnow
from poisync.domain.model import tags as osm

from .statistics import compute_report_tags, count_changes
from .writers import ReportWrite, ReportWriteOutcome, writer_for

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from poisync.domain.geometry import CoordinatePredicate
    from poisync.domain.model import Element, Region
    from poisync.domain.ports import SyncRepositories
    from poisync.domain.reconciliation import ReconciliationSummary
    from poisync.domain.reporting.writers import ReportWriter

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class ReportRunResult:
    as_of: date
    writes: list[ReportWrite] = field(default_factory=list[ReportWrite])
    skipped_regions: list[int] = field(default_factory=list[int])

    def count(self, outcome: ReportWriteOutcome) -> int:
        return sum(1 for write in self.writes if write.outcome is outcome)

    @property
    def inserted(self) -> int:
        return self.count(ReportWriteOutcome.INSERTED)

    @property
    def updated(self) -> int:
        return self.count(ReportWriteOutcome.UPDATED)


class ReportAggregator:
    def __init__(
        self,
        *,
        variant: ReportVariant = ReportVariant.SNAPSHOT,
        window_days: int = osm.DEFAULT_FRESHNESS_WINDOW_DAYS,
        include_categories: bool = False,
        writer: ReportWriter | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.window_days = window_days
        self.include_categories = include_categories
        self.writer = writer or writer_for(variant, clock=clock)

    def aggregate(self, region: Region, elements: Sequence[Element], as_of: date) -> Report | None:
        """Compute the candidate report for ``region``, or None if its boundary is broken."""

        matches = self._matcher(region)
        if matches is None:
            return None
        return self._candidate(region, matches, elements, as_of)

    def _matcher(self, region: Region) -> CoordinatePredicate | None:
        _region_id(region)
        try:
            return region_matcher(region)
        except BoundaryParseError as exc:
            log.error("Skipping region %s (%s): invalid boundary: %s", region.id, region.name, exc)
            return None

    def _candidate(
        self,
        region: Region,
        matches: CoordinatePredicate,
        elements: Sequence[Element],
        as_of: date,
    ) -> Report:
        region_id = _region_id(region)
        members = [
            element
            for element in elements
            if not element.is_deleted and matches(element.coordinate)
        ]
        log.info("Region %s (%s) has %s elements", region.id, region.name, len(members))
        tags = compute_report_tags(
            members,
            as_of=as_of,
            window_days=self.window_days,
            include_categories=self.include_categories,
        )
        return Report(region_id=region_id, date=as_of, tags=tags)

    def run(
        self,
        repositories: SyncRepositories,
        as_of: date,
        summary: ReconciliationSummary | None = None,
    ) -> ReportRunResult:
        """Write reports for every active region; the caller owns the transaction.

        Cumulative change counters only count ``summary`` events located inside
        the region.
        """

        result = ReportRunResult(as_of=as_of)
        elements = repositories.elements.list_live()
        for region in repositories.regions.list_active():
            matches = self._matcher(region)
            if matches is None:
                if region.id is not None:
                    result.skipped_regions.append(region.id)
                continue
            candidate = self._candidate(region, matches, elements, as_of)
            changes = count_changes(summary.events, matches) if summary is not None else None
            result.writes.append(self.writer.write(repositories.reports, candidate, changes))
        log.info(
            "Report run for %s: inserted=%s, updated=%s, skipped regions=%s",
            as_of,
            result.inserted,
            result.updated,
            len(result.skipped_regions),
        )
        return result


def _region_id(region: Region) -> int:
    if region.id is None:
        raise ValueError("Region must be persisted before it can be reported on")
    return region.id

"""Application services for mirroring the upstream dataset and reporting on it."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from poisync.domain.errors import DatasetRejectedError, TrustContradictionError
from poisync.domain.model import utcnow
from poisync.domain.notifications import (
    describe_contradiction,
    describe_event,
    describe_rejection,
    describe_skipped_regions,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date, datetime

    from poisync.domain.ports import DatasetFetcher, Notifier
    from poisync.domain.reconciliation import (
        Reconciler,
        ReconciliationSummary,
        UnitOfWorkFactory,
    )
    from poisync.domain.reporting import ReportAggregator, ReportRunResult
    from poisync.domain.sanity import SanityGuard

log = getLogger(__name__)


@dataclass(slots=True)
class SyncCycleResult:
    """Outcome of one reconciliation cycle."""

    status: Literal["completed", "rejected"]
    fetched: int
    summary: ReconciliationSummary | None = None
    reports: ReportRunResult | None = None
    reason: str | None = None


def sync_elements(
    *,
    fetcher: DatasetFetcher,
    unit_of_work_factory: UnitOfWorkFactory,
    reconciler: Reconciler,
    guard: SanityGuard,
    aggregator: ReportAggregator,
    notifier: Notifier,
    clock: Callable[[], datetime] = utcnow,
) -> SyncCycleResult:
    """Fetch, validate, reconcile and report in one write transaction.

    A rejected dataset is reported through the notifier and leaves the store
    untouched. ``TrustContradictionError`` is announced and re-raised. Event
    notifications go out only after the transaction commits.
    """

    dataset = fetcher()
    log.info("Fetched %s elements from %s", len(dataset), dataset.source or "upstream")

    with unit_of_work_factory() as uow:
        baseline = uow.repositories.elements.count_live()
    try:
        guard.ensure(dataset, baseline=baseline)
    except DatasetRejectedError as exc:
        notifier.notify(describe_rejection(exc.reason))
        return SyncCycleResult(status="rejected", fetched=len(dataset), reason=exc.reason)

    try:
        plan = reconciler.prepare(dataset, unit_of_work_factory)
    except TrustContradictionError as exc:
        notifier.notify(describe_contradiction(exc))
        raise

    with unit_of_work_factory() as uow:
        summary = reconciler.apply(plan, uow.repositories)
        reports = aggregator.run(uow.repositories, clock().date(), summary)
        uow.commit()

    for event in summary.events:
        notifier.notify(describe_event(event))
    if reports.skipped_regions:
        notifier.notify(describe_skipped_regions(reports.skipped_regions))

    return SyncCycleResult(
        status="completed",
        fetched=len(dataset),
        summary=summary,
        reports=reports,
    )


def generate_reports(
    *,
    unit_of_work_factory: UnitOfWorkFactory,
    aggregator: ReportAggregator,
    as_of: date | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> ReportRunResult:
    """Run the aggregator alone, outside of a reconciliation cycle."""

    with unit_of_work_factory() as uow:
        result = aggregator.run(uow.repositories, as_of or clock().date())
        uow.commit()
    return result

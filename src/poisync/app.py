"""Application orchestration entry points."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, cast

from poisync.adapters.osm import OsmApiClient
from poisync.adapters.overpass import OverpassDatasetFetcher
from poisync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from poisync.adapters.webhook import build_notifier
from poisync.config import get_sync_config
from poisync.domain.actors import ActorResolver
from poisync.domain.data_integration import SyncCycleResult, generate_reports, sync_elements
from poisync.domain.geometry import parse_boundary
from poisync.domain.model import Region
from poisync.domain.reconciliation import Reconciler
from poisync.domain.reporting import ReportAggregator, ReportRunResult
from poisync.domain.sanity import SanityGuard

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

    from poisync.config import SyncConfig
    from poisync.domain.model import Payload
    from poisync.domain.ports import (
        ActorLookup,
        DatasetFetcher,
        ElementVerifier,
        Notifier,
    )
    from poisync.domain.reconciliation import UnitOfWorkFactory

log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_aggregator(config: SyncConfig) -> ReportAggregator:
    return ReportAggregator(
        variant=config.report_variant,
        window_days=config.freshness_window_days,
        include_categories=config.include_category_histogram,
    )


def run_sync(
    *,
    config: SyncConfig | None = None,
    fetcher: DatasetFetcher | None = None,
    verifier: ElementVerifier | None = None,
    actor_lookup: ActorLookup | None = None,
    notifier: Notifier | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncCycleResult:
    """Run one reconciliation cycle using the configured adapters."""

    effective_config = config or get_sync_config()
    if unit_of_work_factory is None:
        _ensure_started()
    osm_client = OsmApiClient() if verifier is None or actor_lookup is None else None
    resolver = ActorResolver(
        lookup=actor_lookup or osm_client,
        max_concurrency=effective_config.actor_lookup_concurrency,
    )
    reconciler = Reconciler(
        resolver=resolver,
        verifier=verifier or osm_client,
        verify_deletions=effective_config.verify_deletions,
    )
    log.info(
        "Starting sync: min_dataset_size=%s, min_retained_ratio=%s, verify_deletions=%s, "
        "report_variant=%s",
        effective_config.min_dataset_size,
        effective_config.min_retained_ratio,
        effective_config.verify_deletions,
        effective_config.report_variant,
    )

    result = sync_elements(
        fetcher=fetcher or OverpassDatasetFetcher(),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        reconciler=reconciler,
        guard=SanityGuard(
            min_dataset_size=effective_config.min_dataset_size,
            min_retained_ratio=effective_config.min_retained_ratio,
        ),
        aggregator=build_aggregator(effective_config),
        notifier=notifier or build_notifier(),
    )

    if result.summary is not None:
        log.info(
            "Finished sync: fetched=%s, created=%s, updated=%s, deleted=%s, revived=%s",
            result.fetched,
            result.summary.created,
            result.summary.updated,
            result.summary.deleted,
            result.summary.revived,
        )
    else:
        log.warning("Sync rejected: %s", result.reason)
    return result


def run_generate_reports(
    *,
    config: SyncConfig | None = None,
    as_of: date | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReportRunResult:
    """Generate reports for every active region without syncing first."""

    effective_config = config or get_sync_config()
    if unit_of_work_factory is None:
        _ensure_started()
    return generate_reports(
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyUnitOfWork,
        aggregator=build_aggregator(effective_config),
        as_of=as_of,
    )


def load_boundary(path: Path) -> Payload:
    with path.open(encoding="utf-8") as handle:
        loaded = json.load(handle)
    if not isinstance(loaded, dict):
        raise ValueError(f"{path} does not contain a GeoJSON object")
    return cast("Payload", loaded)


def create_region(
    *,
    name: str,
    boundary: Payload | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Region:
    """Persist a new reporting region; the boundary must parse."""

    if boundary is not None:
        parse_boundary(boundary)
    if unit_of_work_factory is None:
        _ensure_started()
    region = Region(name=name, boundary=boundary)
    with (unit_of_work_factory or SqlAlchemyUnitOfWork)() as uow:
        uow.repositories.regions.add(region)
        uow.commit()
    log.info("Created region %s (%s)", region.id, region.name)
    return region

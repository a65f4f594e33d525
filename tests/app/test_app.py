from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING

import pytest

from poisync.app import create_region, load_boundary, run_generate_reports, run_sync
from poisync.config import SyncConfig
from poisync.domain.errors import BoundaryParseError
from poisync.domain.model import ReportVariant
from tests.helpers.elements import (
    FakeActorLookup,
    FakeDatasetFetcher,
    FakeVerifier,
    RecordingNotifier,
    make_dataset,
    make_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from poisync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


def test_run_sync_wires_configured_components(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    create_region(name="earth", unit_of_work_factory=sqlite_unit_of_work)
    notifier = RecordingNotifier()

    result = run_sync(
        config=SyncConfig(min_dataset_size=1, report_variant=ReportVariant.CUMULATIVE),
        fetcher=FakeDatasetFetcher(make_dataset(make_payload(1, name="Cafe"))),
        verifier=FakeVerifier(),
        actor_lookup=FakeActorLookup({100: "mapper"}),
        notifier=notifier,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.status == "completed"
    assert result.reports is not None
    assert result.reports.inserted == 1
    assert result.reports.writes[0].report.tags["elements_created"] == 1
    assert notifier.messages == ["mapper added Cafe https://www.openstreetmap.org/node/1"]


def test_run_sync_rejects_small_dataset(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    notifier = RecordingNotifier()

    result = run_sync(
        config=SyncConfig(min_dataset_size=5),
        fetcher=FakeDatasetFetcher(make_dataset(make_payload(1))),
        verifier=FakeVerifier(),
        actor_lookup=FakeActorLookup(),
        notifier=notifier,
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert result.status == "rejected"
    assert result.summary is None
    assert len(notifier.messages) == 1


def test_run_generate_reports_without_sync(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    create_region(name="earth", unit_of_work_factory=sqlite_unit_of_work)

    first = run_generate_reports(
        config=SyncConfig(), as_of=date(2024, 6, 1), unit_of_work_factory=sqlite_unit_of_work
    )
    second = run_generate_reports(
        config=SyncConfig(), as_of=date(2024, 6, 2), unit_of_work_factory=sqlite_unit_of_work
    )

    assert first.inserted == 1
    assert first.writes[0].report.tags["total_elements"] == 0
    assert second.inserted == 0


def test_create_region_rejects_malformed_boundary(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    with pytest.raises(BoundaryParseError):
        create_region(
            name="broken",
            boundary={"type": "FeatureCollection"},
            unit_of_work_factory=sqlite_unit_of_work,
        )

    with sqlite_unit_of_work() as uow:
        assert list(uow.repositories.regions.list_active()) == []


def test_load_boundary_requires_object(tmp_path: Path) -> None:
    path = tmp_path / "list.geojson"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ValueError, match="GeoJSON object"):
        load_boundary(path)

from __future__ import annotations

from datetime import date

import pytest

from poisync.domain.model import Element, ElementEvent, EventKind, Region, ReportVariant
from poisync.domain.reconciliation import ReconciliationSummary
from poisync.domain.reporting import ReportAggregator, ReportWriteOutcome
from tests.helpers.elements import FIXED_NOW, make_element, make_payload, make_repositories

TODAY = date(2024, 6, 1)

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[0.0, 0.0], [10.0, 0.0], [10.0, 10.0], [0.0, 10.0], [0.0, 0.0]]],
}


def _elements() -> list[Element]:
    return [
        make_element(make_payload(1, lat=5.0, lon=5.0)),
        make_element(make_payload(2, lat=50.0, lon=50.0)),
        make_element(make_payload(3, lat=6.0, lon=6.0), deleted=True),
        make_element(make_payload(4, lat=0.0, lon=5.0)),
    ]


def test_region_without_boundary_counts_all_live_elements() -> None:
    report = ReportAggregator().aggregate(Region(name="earth", id=1), _elements(), TODAY)

    assert report is not None
    assert report.tags["total_elements"] == 3
    assert report.date == TODAY


def test_bounded_region_counts_strictly_contained_live_elements() -> None:
    region = Region(name="square", boundary=SQUARE, id=2)

    report = ReportAggregator().aggregate(region, _elements(), TODAY)

    assert report is not None
    assert report.tags["total_elements"] == 1


def test_broken_boundary_skips_region() -> None:
    region = Region(name="broken", boundary={"type": "FeatureCollection"}, id=3)

    assert ReportAggregator().aggregate(region, _elements(), TODAY) is None


def test_unsaved_region_is_rejected() -> None:
    with pytest.raises(ValueError, match="persisted"):
        ReportAggregator().aggregate(Region(name="new"), [], TODAY)


def test_run_reports_every_active_region_and_skips_broken_ones() -> None:
    retired = Region(name="retired", id=4)
    retired.deleted_at = FIXED_NOW
    repositories = make_repositories(
        elements=_elements(),
        regions=[
            Region(name="earth", id=1),
            Region(name="broken", boundary={"type": "FeatureCollection"}, id=2),
            Region(name="square", boundary=SQUARE, id=3),
            retired,
        ],
    )

    result = ReportAggregator().run(repositories, TODAY)

    assert result.inserted == 2
    assert result.skipped_regions == [2]
    assert [write.region_id for write in result.writes] == [1, 3]
    assert repositories.reports.latest_for_region(4) is None


def test_second_run_with_same_data_writes_nothing() -> None:
    repositories = make_repositories(elements=_elements(), regions=[Region(name="earth", id=1)])
    aggregator = ReportAggregator()
    aggregator.run(repositories, TODAY)

    result = aggregator.run(repositories, date(2024, 6, 2))

    assert [write.outcome for write in result.writes] == [ReportWriteOutcome.UNCHANGED]
    assert len(repositories.reports.list_for_region(1)) == 1


def test_cumulative_variant_updates_same_day_report() -> None:
    repositories = make_repositories(elements=_elements(), regions=[Region(name="earth", id=1)])
    aggregator = ReportAggregator(variant=ReportVariant.CUMULATIVE, include_categories=True)
    aggregator.run(repositories, TODAY)
    repositories.elements.add(make_element(make_payload(9, amenity="atm")))

    result = aggregator.run(repositories, TODAY)

    assert result.updated == 1
    report = repositories.reports.latest_for_region(1)
    assert report is not None
    assert report.tags["total_elements"] == 4
    assert report.tags["elements_by_category"] == {"atm": 1, "other": 3}


def _event(element_id: str, kind: EventKind, lat: float | None, lon: float | None) -> ElementEvent:
    return ElementEvent(
        element_id=element_id,
        kind=kind,
        actor_id=0,
        element_lat=lat,
        element_lon=lon,
        created_at=FIXED_NOW,
    )


def test_cumulative_counters_only_count_changes_inside_each_region() -> None:
    repositories = make_repositories(
        elements=_elements(),
        regions=[Region(name="earth", id=1), Region(name="square", boundary=SQUARE, id=2)],
    )
    summary = ReconciliationSummary(created=2, deleted=1)
    summary.events.extend(
        [
            _event("node:1", EventKind.CREATE, 5.0, 5.0),
            _event("node:2", EventKind.CREATE, 50.0, 50.0),
            _event("node:3", EventKind.DELETE, 6.0, 6.0),
        ]
    )

    ReportAggregator(variant=ReportVariant.CUMULATIVE).run(repositories, TODAY, summary)

    earth = repositories.reports.latest_for_region(1)
    square = repositories.reports.latest_for_region(2)
    assert earth is not None
    assert square is not None
    assert (earth.tags["elements_created"], earth.tags["elements_deleted"]) == (2, 1)
    assert (square.tags["elements_created"], square.tags["elements_deleted"]) == (1, 1)
    assert square.tags["elements_updated"] == 0

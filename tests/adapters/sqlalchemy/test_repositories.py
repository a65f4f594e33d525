from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from poisync.adapters.sqlalchemy import create_all_tables, start_mappers
from poisync.adapters.sqlalchemy.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyElementEventRepository,
    SqlAlchemyElementRepository,
    SqlAlchemyRegionRepository,
    SqlAlchemyReportRepository,
)
from poisync.domain.model import Actor, ElementEvent, EventKind, Region, Report
from tests.helpers.elements import FIXED_NOW, make_element, make_payload

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.orm import Session

    from poisync.domain.model import ActorId


def test_element_repository_round_trips_payload_and_timestamps(sqlite_session: Session) -> None:
    repo = SqlAlchemyElementRepository(sqlite_session)
    payload = make_payload(1, name="Café", currency__XBT="yes")
    repo.add(make_element(payload))
    sqlite_session.commit()
    sqlite_session.expire_all()

    stored = repo.get("node:1")

    assert stored is not None
    assert stored.payload == payload
    assert stored.created_at == FIXED_NOW
    assert stored.created_at.tzinfo is not None
    assert stored.deleted_at is None


def test_element_repository_separates_live_and_deleted(sqlite_session: Session) -> None:
    repo = SqlAlchemyElementRepository(sqlite_session)
    repo.add(make_element(make_payload(1)))
    repo.add(make_element(make_payload(2), deleted=True))
    sqlite_session.flush()

    assert [element.id for element in repo.list_all()] == ["node:1", "node:2"]
    assert [element.id for element in repo.list_live()] == ["node:1"]
    assert repo.count_live() == 1


def test_actor_repository_add_if_absent_keeps_first_actor(sqlite_session: Session) -> None:
    repo = SqlAlchemyActorRepository(sqlite_session)
    first = repo.add_if_absent(Actor(id=5, profile={"display_name": "alice"}))
    sqlite_session.commit()

    second = repo.add_if_absent(Actor(id=5, profile={"display_name": "impostor"}))

    assert second is first
    assert repo.existing_ids([5, 6]) == {5}
    assert repo.existing_ids([]) == set()


@pytest.fixture
def shared_session_factory(tmp_path: Path) -> Iterator[sessionmaker[Session]]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / "store.sqlite"}", future=True)
    start_mappers()
    create_all_tables(engine)
    try:
        yield sessionmaker(bind=engine, future=True)
    finally:
        engine.dispose()


def test_actor_repository_add_if_absent_returns_concurrently_stored_actor(
    shared_session_factory: sessionmaker[Session],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    with shared_session_factory() as session:
        repo = SqlAlchemyActorRepository(session)
        lookup = repo.get
        calls: list[ActorId] = []

        def get_then_lose_race(actor_id: ActorId) -> Actor | None:
            found = lookup(actor_id)
            calls.append(actor_id)
            if len(calls) == 1:
                with shared_session_factory() as winner:
                    winner.add(Actor(id=actor_id, profile={"display_name": "alice"}))
                    winner.commit()
            return found

        monkeypatch.setattr(repo, "get", get_then_lose_race)

        stored = repo.add_if_absent(Actor(id=5, profile={"display_name": "impostor"}))

        assert stored.profile == {"display_name": "alice"}
        assert calls == [5, 5]

        SqlAlchemyElementRepository(session).add(make_element(make_payload(1)))
        session.commit()

    with shared_session_factory() as session:
        assert SqlAlchemyElementRepository(session).get("node:1") is not None
        actors = SqlAlchemyActorRepository(session)
        assert actors.existing_ids([5]) == {5}
        stored_actor = actors.get(5)
        assert stored_actor is not None
        assert stored_actor.profile == {"display_name": "alice"}


def test_event_repository_orders_events_per_element(sqlite_session: Session) -> None:
    elements = SqlAlchemyElementRepository(sqlite_session)
    events = SqlAlchemyElementEventRepository(sqlite_session)
    elements.add(make_element(make_payload(1)))
    later = datetime(2024, 6, 2, tzinfo=UTC)
    events.add(
        ElementEvent(element_id="node:1", kind=EventKind.UPDATE, actor_id=0, created_at=later)
    )
    events.add(
        ElementEvent(element_id="node:1", kind=EventKind.CREATE, actor_id=5, created_at=FIXED_NOW)
    )
    sqlite_session.flush()

    kinds = [event.kind for event in events.list_for_element("node:1")]

    assert kinds == [EventKind.CREATE, EventKind.UPDATE]
    assert events.count() == 2


def test_region_repository_lists_active_regions(sqlite_session: Session) -> None:
    repo = SqlAlchemyRegionRepository(sqlite_session)
    retired = Region(name="retired", deleted_at=FIXED_NOW)
    repo.add(Region(name="earth"))
    repo.add(Region(name="square", boundary={"type": "Polygon", "coordinates": []}))
    repo.add(retired)
    sqlite_session.flush()

    active = repo.list_active()

    assert [region.name for region in active] == ["earth", "square"]
    assert active[0].boundary is None


def test_report_repository_latest_queries(sqlite_session: Session) -> None:
    regions = SqlAlchemyRegionRepository(sqlite_session)
    reports = SqlAlchemyReportRepository(sqlite_session)
    region = Region(name="earth")
    regions.add(region)
    sqlite_session.flush()
    assert region.id is not None
    reports.add(Report(region_id=region.id, date=date(2024, 5, 1), tags={"total_elements": 1}))
    reports.add(Report(region_id=region.id, date=date(2024, 6, 1), tags={"total_elements": 2}))
    sqlite_session.flush()

    latest = reports.latest_for_region(region.id)
    on_day = reports.latest_for_region_on(region.id, date(2024, 5, 1))

    assert latest is not None
    assert latest.tags == {"total_elements": 2}
    assert on_day is not None
    assert on_day.tags == {"total_elements": 1}
    assert reports.latest_for_region_on(region.id, date(2024, 7, 1)) is None
    assert [report.date for report in reports.list_for_region(region.id)] == [
        date(2024, 5, 1),
        date(2024, 6, 1),
    ]

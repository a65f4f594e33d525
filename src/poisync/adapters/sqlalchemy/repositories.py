"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from poisync.adapters.sqlalchemy.mappings import (
    actor_table,
    element_event_table,
    element_table,
    region_table,
    report_table,
)
from poisync.domain.model import Actor, Element, ElementEvent, Region, Report

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

    from sqlalchemy.orm import Session

    from poisync.domain.model import ActorId, ElementKey

log = getLogger(__name__)


class SqlAlchemyElementRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Element) -> None:
        self.session.add(entity)

    def get(self, element_id: ElementKey) -> Element | None:
        return self.session.get(Element, element_id)

    def list_all(self) -> Sequence[Element]:
        stmt = select(Element).order_by(element_table.c.id)
        return self.session.execute(stmt).scalars().all()

    def list_live(self) -> Sequence[Element]:
        stmt = (
            select(Element)
            .where(element_table.c.deleted_at.is_(None))
            .order_by(element_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def count_live(self) -> int:
        stmt = select(func.count()).select_from(element_table).where(
            element_table.c.deleted_at.is_(None)
        )
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyActorRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Actor) -> None:
        self.session.add(entity)

    def get(self, actor_id: ActorId) -> Actor | None:
        return self.session.get(Actor, actor_id)

    def existing_ids(self, actor_ids: Iterable[ActorId]) -> set[ActorId]:
        wanted = set(actor_ids)
        if not wanted:
            return set()
        stmt = select(actor_table.c.id).where(actor_table.c.id.in_(wanted))
        return set(self.session.execute(stmt).scalars().all())

    def add_if_absent(self, actor: Actor) -> Actor:
        existing = self.get(actor.id)
        if existing is not None:
            return existing
        try:
            with self.session.begin_nested():
                self.session.add(actor)
                self.session.flush()
        except IntegrityError:
            log.info("Actor %s was stored concurrently; re-reading", actor.id)
            stored = self.get(actor.id)
            if stored is None:
                raise
            return stored
        return actor


class SqlAlchemyElementEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ElementEvent) -> None:
        self.session.add(entity)

    def list_for_element(self, element_id: ElementKey) -> Sequence[ElementEvent]:
        stmt = (
            select(ElementEvent)
            .where(element_event_table.c.element_id == element_id)
            .order_by(element_event_table.c.created_at, element_event_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

    def count(self) -> int:
        stmt = select(func.count()).select_from(element_event_table)
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyRegionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Region) -> None:
        self.session.add(entity)

    def list_active(self) -> Sequence[Region]:
        stmt = (
            select(Region)
            .where(region_table.c.deleted_at.is_(None))
            .order_by(region_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyReportRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Report) -> None:
        self.session.add(entity)

    def latest_for_region(self, region_id: int) -> Report | None:
        stmt = (
            select(Report)
            .where(report_table.c.region_id == region_id)
            .order_by(report_table.c.date.desc(), report_table.c.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def latest_for_region_on(self, region_id: int, day: date) -> Report | None:
        stmt = (
            select(Report)
            .where(report_table.c.region_id == region_id)
            .where(report_table.c.date == day)
            .order_by(report_table.c.id.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_region(self, region_id: int) -> Sequence[Report]:
        stmt = (
            select(Report)
            .where(report_table.c.region_id == region_id)
            .order_by(report_table.c.date, report_table.c.id)
        )
        return self.session.execute(stmt).scalars().all()

"""SQLAlchemy mapping metadata for the poisync domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers

from poisync.domain.model import Actor, Element, ElementEvent, EventKind, Region, Report

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

element_table = Table(
    "element",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("payload", JSON, nullable=False),
    Column("lat", Float, nullable=True),
    Column("lon", Float, nullable=True),
    Column("tags", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=True),
    Index("ix_element_deleted_at", "deleted_at"),
)

actor_table = Table(
    "actor",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("profile", JSON, nullable=False, default=dict),
    Column("tags", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

# Actor ids are not foreign keys: id 0 (unknown) is never stored.
element_event_table = Table(
    "element_event",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("element_id", String, ForeignKey("element.id"), nullable=False),
    Column("kind", Enum(EventKind, native_enum=False), nullable=False),
    Column("actor_id", Integer, nullable=False),
    Column("actor_name", String, nullable=True),
    Column("element_name", String, nullable=False, default=""),
    Column("element_lat", Float, nullable=True),
    Column("element_lon", Float, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_element_event_element_id", "element_id"),
    Index("ix_element_event_created_at", "created_at"),
)

region_table = Table(
    "region",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("boundary", JSON(none_as_null=True), nullable=True),
    Column("tags", JSON, nullable=False, default=dict),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("deleted_at", UTCDateTime(), nullable=True),
    UniqueConstraint("name"),
)

report_table = Table(
    "report",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("region_id", Integer, ForeignKey("region.id", ondelete="CASCADE"), nullable=False),
    Column("date", Date, nullable=False),
    Column("tags", JSON, nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_report_region_id_date", "region_id", "date"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables; idempotent."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Element, element_table)
    mapper_registry.map_imperatively(Actor, actor_table)
    mapper_registry.map_imperatively(ElementEvent, element_event_table)
    mapper_registry.map_imperatively(Region, region_table)
    mapper_registry.map_imperatively(Report, report_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create any missing tables; existing ones are left alone."""

    log.info("Ensuring element store schema")
    mapper_registry.metadata.create_all(engine)

"""SQLAlchemy adapter package for poisync."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyElementEventRepository,
    SqlAlchemyElementRepository,
    SqlAlchemyRegionRepository,
    SqlAlchemyReportRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyActorRepository",
    "SqlAlchemyElementEventRepository",
    "SqlAlchemyElementRepository",
    "SqlAlchemyRegionRepository",
    "SqlAlchemyReportRepository",
    "SqlAlchemyUnitOfWork",
    "create_all_tables",
    "mapper_registry",
    "start_mappers",
    "shutdown",
    "startup",
]

"""Transactions over the element store.

``startup`` binds the module to one engine and creates the schema; every
``SqlAlchemyUnitOfWork`` then opens its own session on that engine. Leaving the
``with`` block without ``commit()`` discards the work, and an exception rolls
it back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from poisync.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from poisync.adapters.sqlalchemy.repositories import (
    SqlAlchemyActorRepository,
    SqlAlchemyElementEventRepository,
    SqlAlchemyElementRepository,
    SqlAlchemyRegionRepository,
    SqlAlchemyReportRepository,
)
from poisync.config.storage import get_database_uri
from poisync.domain.ports.unit_of_work import RepositoryCollection, SyncRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The store was used before ``startup()`` or configured twice."""


@dataclass(slots=True)
class _StoreBinding:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def session_factory(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError("Element store is not started; call startup() first")
        return self.sessions


_BINDING = _StoreBinding()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the store to ``engine`` (or a new one for ``database_uri``) and create tables."""

    if _BINDING.engine is not None and not force:
        raise StartupError("Element store already started; pass force=True to rebind")
    bound = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    create_all_tables(bound)
    _BINDING.bind(bound)
    log.info("Element store bound to %s", bound.url.render_as_string(hide_password=True))


def configured_engine() -> Engine | None:
    return _BINDING.engine


def is_started() -> bool:
    return _BINDING.engine is not None


def shutdown() -> None:
    if _BINDING.engine is not None:
        _BINDING.engine.dispose()
    _BINDING.bind(None)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block, exposing a repository collection built on it."""

    def __init__(self) -> None:
        self.session_factory = _BINDING.session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
            self.session.close()
        finally:
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[SyncRepositories]):
    def _build_repositories(self, session: Session) -> SyncRepositories:
        return SyncRepositories(
            elements=SqlAlchemyElementRepository(session),
            actors=SqlAlchemyActorRepository(session),
            events=SqlAlchemyElementEventRepository(session),
            regions=SqlAlchemyRegionRepository(session),
            reports=SqlAlchemyReportRepository(session),
        )

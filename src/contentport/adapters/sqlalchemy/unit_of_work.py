"""Engine lifecycle for the SQLAlchemy adapters and the import session unit of work.

The content store, binary store, job service and notifier each open their own
short transactions from the shared session factory; only pending import
sessions go through a unit of work.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from contentport.adapters.sqlalchemy.mappings import start_mappers
from contentport.adapters.sqlalchemy.migrations import upgrade_head
from contentport.adapters.sqlalchemy.repositories import (
    SqlAlchemyPendingImportSessionRepository,
)
from contentport.config import get_database_config
from contentport.domain.ports.unit_of_work import (
    ImportSessionRepositories,
    RepositoryCollection,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapters are used before ``startup()``."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapters not started. Call "
                "contentport.adapters.sqlalchemy.startup() first."
            )
        return self.session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
    migrate: bool = True,
) -> None:
    """Bind the adapters to an engine, map the workflow entities and migrate.

    Sessions do not expire loaded attributes on commit: jobs and pending
    sessions are handed back to the domain after their transaction ends.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("SQLAlchemy adapters already started. Pass force=True to rebind.")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    start_mappers()
    if migrate:
        upgrade_head(engine=bound)

    _STATE.engine = bound
    _STATE.session_factory = sessionmaker(bind=bound, expire_on_commit=False)
    log.debug("SQLAlchemy adapters bound to %s", bound.url)


def shutdown() -> None:
    """Dispose the bound engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.session_factory = None


def is_started() -> bool:
    return _STATE.engine is not None


def configured_engine() -> Engine | None:
    return _STATE.engine


def configured_session_factory() -> sessionmaker[Session]:
    """Session factory shared by the store adapters and units of work."""

    return _STATE.require_session_factory()


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """One session per ``with`` block; leaving the block without ``commit()`` discards changes."""

    def __init__(self) -> None:
        self.session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already in use")
        self._session = self.session_factory()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside of a with block")
        return self._session

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside of a with block")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SqlAlchemyImportSessionUnitOfWork(BaseSqlAlchemyUnitOfWork[ImportSessionRepositories]):
    def _build_repositories(self, session: Session) -> ImportSessionRepositories:
        return ImportSessionRepositories(
            sessions=SqlAlchemyPendingImportSessionRepository(session),
        )


if TYPE_CHECKING:
    from contentport.domain.ports.unit_of_work import ImportSessionUnitOfWork

    _uow_check: ImportSessionUnitOfWork = SqlAlchemyImportSessionUnitOfWork()

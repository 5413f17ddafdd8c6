"""SQLAlchemy adapter package for contentport."""

from __future__ import annotations

from .binaries import FilesystemBinaryStore
from .content_store import (
    SqlAlchemyContentManager,
    SqlAlchemyContentStore,
    SqlAlchemyPageManager,
)
from .jobs import SqlAlchemyJobService
from .mappings import (
    mapper_registry,
    start_mappers,
)
from .notifications import SqlAlchemyNotifier, StoredNotification
from .repositories import SqlAlchemyPendingImportSessionRepository
from .unit_of_work import (
    SqlAlchemyImportSessionUnitOfWork,
    configured_session_factory,
    shutdown,
    startup,
)

__all__ = [
    "FilesystemBinaryStore",
    "SqlAlchemyContentManager",
    "SqlAlchemyContentStore",
    "SqlAlchemyImportSessionUnitOfWork",
    "SqlAlchemyJobService",
    "SqlAlchemyNotifier",
    "SqlAlchemyPageManager",
    "SqlAlchemyPendingImportSessionRepository",
    "StoredNotification",
    "configured_session_factory",
    "mapper_registry",
    "shutdown",
    "startup",
    "start_mappers",
]

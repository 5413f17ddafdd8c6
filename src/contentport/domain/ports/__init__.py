"""Domain port definitions for adapters."""

from __future__ import annotations

from .archive import ArchiveReader, DecodedArchive, StagingCleaner
from .binaries import (
    BinaryDuplicate,
    BinaryFailed,
    BinaryResult,
    BinaryStatus,
    BinaryStore,
    BinaryWritten,
)
from .content import (
    ContentManager,
    PageManager,
    StoreFailed,
    StoreResult,
    StoreStatus,
    StoreUniqueViolation,
    StoreWritten,
)
from .jobs import JobService
from .notifications import NotificationEvent, Notifier
from .persistence import PendingImportSessionRepository, Repository
from .unit_of_work import (
    ImportSessionRepositories,
    ImportSessionUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "ArchiveReader",
    "BinaryDuplicate",
    "BinaryFailed",
    "BinaryResult",
    "BinaryStatus",
    "BinaryStore",
    "BinaryWritten",
    "ContentManager",
    "DecodedArchive",
    "ImportSessionRepositories",
    "ImportSessionUnitOfWork",
    "JobService",
    "NotificationEvent",
    "Notifier",
    "PageManager",
    "PendingImportSessionRepository",
    "Repository",
    "RepositoryCollection",
    "StagingCleaner",
    "StoreFailed",
    "StoreResult",
    "StoreStatus",
    "StoreUniqueViolation",
    "StoreWritten",
    "UnitOfWork",
]

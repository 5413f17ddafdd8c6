"""In-memory fakes for the ports used by the import workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from contentport.domain.model import Job, JobStatus, PendingImportSession
from contentport.domain.ports import (
    BinaryDuplicate,
    BinaryFailed,
    BinaryWritten,
    DecodedArchive,
    ImportSessionRepositories,
    StoreFailed,
    StoreUniqueViolation,
    StoreWritten,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping
    from pathlib import Path

    from contentport.domain.model import (
        AttachmentDescriptor,
        AttachmentFile,
        ContentTypeDefinition,
        DocumentRecord,
        Severity,
    )
    from contentport.domain.ports import BinaryResult, NotificationEvent, StoreResult


@dataclass(frozen=True, slots=True)
class StoreCall:
    method: str
    store_id: str
    set_modified: bool


@dataclass
class FakeContentStore:
    """Documents keyed by store id, shared by every manager it hands out."""

    records: dict[str, DocumentRecord] = field(default_factory=dict[str, "DocumentRecord"])
    calls: list[StoreCall] = field(default_factory=list[StoreCall])
    placements: dict[str, tuple[str, str]] = field(default_factory=dict[str, tuple[str, str]])
    failing: set[str] = field(default_factory=set[str])
    colliding_updates: set[str] = field(default_factory=set[str])
    raising: set[str] = field(default_factory=set[str])

    def manager_for(self, definition: ContentTypeDefinition) -> FakeContentManager:
        if definition.is_page:
            return FakePageManager(self, definition)
        return FakeContentManager(self, definition)

    def seed(self, *documents: DocumentRecord) -> None:
        for document in documents:
            self.records[document.store_id] = document

    def methods(self) -> list[tuple[str, str]]:
        return [(call.method, call.store_id) for call in self.calls]


class FakeContentManager:
    def __init__(self, store: FakeContentStore, definition: ContentTypeDefinition) -> None:
        self.store = store
        self.definition = definition

    def insert(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult:
        self.store.calls.append(StoreCall("insert", document.store_id, set_modified))
        self._raise_if_configured(document)
        if document.store_id in self.store.failing:
            return StoreFailed(store_id=document.store_id, error="boom")
        if self._singleton_id(document) is not None or document.store_id in self.store.records:
            return StoreUniqueViolation(store_id=document.store_id, reason="duplicate key")
        self.store.records[document.store_id] = document
        return StoreWritten(store_id=document.store_id)

    def update(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult:
        self.store.calls.append(StoreCall("update", document.store_id, set_modified))
        self._raise_if_configured(document)
        if document.store_id in self.store.failing:
            return StoreFailed(store_id=document.store_id, error="boom")
        if document.store_id in self.store.colliding_updates:
            return StoreUniqueViolation(store_id=document.store_id, reason="duplicate key")
        target = self._singleton_id(document) or document.store_id
        self.store.records[target] = document
        return StoreWritten(store_id=target)

    def _raise_if_configured(self, document: DocumentRecord) -> None:
        if document.store_id in self.store.raising:
            raise RuntimeError(f"connection lost while writing {document.store_id}")

    def _singleton_id(self, document: DocumentRecord) -> str | None:
        if not self.definition.options.singleton:
            return None
        for store_id, existing in self.store.records.items():
            if (
                existing.type == document.type
                and existing.mode == document.mode
                and existing.locale == document.locale
            ):
                return store_id
        return None


class FakePageManager(FakeContentManager):
    def insert(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult:
        self.store.placements[document.store_id] = (target, position)
        return super().insert(document, set_modified=set_modified)

    def update(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult:
        if document.store_id not in self.store.records:
            self.store.placements[document.store_id] = (target, position)
        return super().update(document, set_modified=set_modified)


@dataclass
class FakeBinaryStore:
    stored: dict[str, AttachmentFile] = field(default_factory=dict[str, "AttachmentFile"])
    metadata: dict[str, AttachmentDescriptor] = field(
        default_factory=dict[str, "AttachmentDescriptor"]
    )
    calls: list[tuple[str, str]] = field(default_factory=list[tuple[str, str]])
    failing: set[str] = field(default_factory=set[str])
    raising: set[str] = field(default_factory=set[str])

    def insert(
        self,
        attachment_id: str,
        file: AttachmentFile,
        *,
        descriptor: AttachmentDescriptor | None = None,
    ) -> BinaryResult:
        self.calls.append(("insert", attachment_id))
        if attachment_id in self.raising:
            raise OSError(f"staging volume gone while copying {attachment_id}")
        if attachment_id in self.failing:
            return BinaryFailed(attachment_id=attachment_id, error="disk full")
        if attachment_id in self.stored:
            return BinaryDuplicate(attachment_id=attachment_id)
        self.stored[attachment_id] = file
        if descriptor is not None:
            self.metadata[attachment_id] = descriptor
        return BinaryWritten(attachment_id=attachment_id)

    def update(
        self,
        attachment_id: str,
        file: AttachmentFile,
        descriptor: AttachmentDescriptor,
    ) -> BinaryResult:
        self.calls.append(("update", attachment_id))
        if attachment_id in self.failing:
            return BinaryFailed(attachment_id=attachment_id, error="disk full")
        self.stored[attachment_id] = file
        self.metadata[attachment_id] = descriptor
        return BinaryWritten(attachment_id=attachment_id)


@dataclass
class FakeJobService:
    jobs: dict[str, Job] = field(default_factory=dict[str, Job])

    def start(self) -> Job:
        job = Job()
        self.jobs[job.id] = job
        return job

    def set_total(self, job: Job, total: int) -> None:
        job.total = total

    def success(self, job: Job, n: int = 1) -> None:
        job.good += n

    def failure(self, job: Job, n: int = 1) -> None:
        job.bad += n

    def end(self, job: Job, ok: bool = True) -> None:  # noqa: FBT001, FBT002
        job.status = JobStatus.COMPLETED if ok else JobStatus.FAILED

    def find_by_id(self, job_id: str) -> Job | None:
        return self.jobs.get(job_id)


@dataclass(frozen=True, slots=True)
class SentNotification:
    id: str
    recipient: str
    message_key: str
    severity: Severity
    interpolate: Mapping[str, Any] | None
    event: NotificationEvent | None
    job_id: str | None
    dismissible: bool


@dataclass
class FakeNotifier:
    sent: list[SentNotification] = field(default_factory=list[SentNotification])
    dismissed: list[str] = field(default_factory=list[str])

    def notify(
        self,
        recipient: str,
        message_key: str,
        *,
        severity: Severity,
        interpolate: Mapping[str, Any] | None = None,
        event: NotificationEvent | None = None,
        job_id: str | None = None,
        dismissible: bool = False,
    ) -> str:
        notification_id = f"note-{len(self.sent) + 1}"
        self.sent.append(
            SentNotification(
                id=notification_id,
                recipient=recipient,
                message_key=message_key,
                severity=severity,
                interpolate=interpolate,
                event=event,
                job_id=job_id,
                dismissible=dismissible,
            )
        )
        return notification_id

    def dismiss(self, recipient: str, notification_id: str) -> None:
        _ = recipient
        self.dismissed.append(notification_id)

    def keys(self) -> list[str]:
        return [notification.message_key for notification in self.sent]

    def last(self, message_key: str) -> SentNotification:
        return next(
            notification
            for notification in reversed(self.sent)
            if notification.message_key == message_key
        )


@dataclass
class FakeArchiveReader:
    """Serves a fixed archive and records the id filters it was called with."""

    archive: DecodedArchive
    calls: list[Collection[str] | None] = field(default_factory=list["Collection[str] | None"])

    def __call__(
        self,
        path: Path,
        *,
        document_ids: Collection[str] | None = None,
    ) -> DecodedArchive:
        self.calls.append(document_ids)
        documents = self.archive.documents
        if document_ids is not None:
            documents = [document for document in documents if document.document_id in document_ids]
        return DecodedArchive(path=path, documents=documents, attachments=self.archive.attachments)


@dataclass
class FakeCleaner:
    removed: list[Path] = field(default_factory=list["Path"])

    def __call__(self, path: Path) -> None:
        self.removed.append(path)


class FakePendingImportSessionRepository:
    def __init__(self, storage: dict[str, PendingImportSession]) -> None:
        self.storage = storage

    def add(self, entity: PendingImportSession) -> None:
        self.storage[entity.id] = entity

    def get(self, session_id: str) -> PendingImportSession | None:
        return self.storage.get(session_id)

    def remove(self, session: PendingImportSession) -> None:
        self.storage.pop(session.id, None)


class FakeImportSessionUnitOfWork:
    """Unit of work over a dict shared between instances."""

    def __init__(self, storage: dict[str, PendingImportSession]) -> None:
        self._repositories = ImportSessionRepositories(
            sessions=FakePendingImportSessionRepository(storage)
        )
        self.committed = False
        self.rollback_called = False

    @property
    def repositories(self) -> ImportSessionRepositories:
        return self._repositories

    def __enter__(self) -> FakeImportSessionUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: object | None,
    ) -> bool:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rollback_called = True


__all__ = [
    "FakeArchiveReader",
    "FakeBinaryStore",
    "FakeCleaner",
    "FakeContentManager",
    "FakeContentStore",
    "FakeImportSessionUnitOfWork",
    "FakeJobService",
    "FakeNotifier",
    "FakePageManager",
    "FakePendingImportSessionRepository",
    "SentNotification",
    "StoreCall",
]

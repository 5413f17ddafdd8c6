"""Application services for importing archives and resolving duplicates.

An import is a two-phase protocol. ``import_archive`` reconciles the whole
archive; when duplicates are found the job stays open, the staged archive is
retained and a ``PendingImportSession`` is persisted. ``override_duplicates``
later force-updates the documents the operator confirmed, and
``close_import_session`` finalizes the job and releases the archive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from contentport.domain.errors import (
    ArchiveUnreadableError,
    ImportForbiddenError,
    ImportSessionNotFoundError,
    JobNotFoundError,
)
from contentport.domain.model import PendingImportSession, Severity
from contentport.domain.ports import NotificationEvent
from contentport.domain.reconciliation import JobReporting

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from contentport.domain.ports import (
        ArchiveReader,
        ImportSessionUnitOfWork,
        JobService,
        Notifier,
        StagingCleaner,
    )
    from contentport.domain.reconciliation import (
        ImportOrchestrator,
        ImportOutcome,
        OverrideOutcome,
    )

log = logging.getLogger(__name__)

IMPORTING = "importing"
IMPORT_SUCCEEDED = "import_succeeded"
IMPORT_FAILED_FOR_SOME = "import_failed_for_some"
IMPORT_DUPLICATES_DETECTED = "import_duplicates_detected"
IMPORT_FILE_ERROR = "import_file_error"

IMPORT_ENDED_EVENT = "import-ended"
IMPORT_DUPLICATES_EVENT = "import-duplicates"


@dataclass(slots=True, kw_only=True)
class ImportServices:
    """Collaborators shared by every import workflow call."""

    reader: ArchiveReader
    cleaner: StagingCleaner
    orchestrator: ImportOrchestrator
    jobs: JobService
    notifier: Notifier
    unit_of_work_factory: Callable[[], ImportSessionUnitOfWork]


@dataclass(slots=True)
class ImportArchiveResult:
    """Outcome of ``import_archive``.

    ``session`` is set only when duplicates await review; the job is still
    running in that case.
    """

    job_id: str
    outcome: ImportOutcome
    notification_id: str | None = None
    session: PendingImportSession | None = None

    @property
    def needs_review(self) -> bool:
        return self.session is not None


def import_archive(
    archive_path: Path,
    *,
    requester: str | None,
    services: ImportServices,
    upload_path: Path | None = None,
    content_type: str | None = None,
) -> ImportArchiveResult:
    """Reconcile a staged archive against the live store."""

    recipient = _require_requester(requester)

    try:
        archive = services.reader(archive_path)
    except ArchiveUnreadableError:
        log.exception("Could not read staged archive %s", archive_path)
        services.notifier.notify(
            recipient,
            IMPORT_FILE_ERROR,
            severity=Severity.DANGER,
            dismissible=True,
        )
        raise

    job = services.jobs.start()
    notification_id = services.notifier.notify(
        recipient,
        IMPORTING,
        severity=Severity.SUCCESS,
        job_id=job.id,
    )
    reporting = JobReporting(services.jobs, job)
    log.info(
        "Importing %s documents and %s attachments from %s (job %s)",
        len(archive.documents),
        len(archive.attachments),
        archive_path,
        job.id,
    )

    outcome = services.orchestrator.run_import(archive.documents, archive.attachments, reporting)
    failed_count = len(outcome.failed_document_ids)

    if not outcome.has_duplicates:
        reporting.end(ok=True)
        services.notifier.notify(
            recipient,
            IMPORT_FAILED_FOR_SOME if failed_count else IMPORT_SUCCEEDED,
            severity=Severity.DANGER if failed_count else Severity.SUCCESS,
            interpolate={"count": failed_count},
            event=NotificationEvent(IMPORT_ENDED_EVENT),
            dismissible=True,
        )
        services.notifier.dismiss(recipient, notification_id)
        services.cleaner(archive_path)
        if upload_path is not None:
            services.cleaner(upload_path)
        return ImportArchiveResult(
            job_id=job.id,
            outcome=outcome,
            notification_id=notification_id,
        )

    if failed_count:
        _notify_failed_for_some(services.notifier, recipient, failed_count)

    session = PendingImportSession(
        job_id=job.id,
        archive_path=str(archive_path),
        duplicate_documents=list(outcome.duplicate_documents),
        imported_attachment_ids=list(outcome.imported_attachment_ids),
        notification_id=notification_id,
        content_type=content_type,
        created_at=datetime.now(UTC),
    )
    with services.unit_of_work_factory() as uow:
        uow.repositories.sessions.add(session)
        uow.commit()

    log.info(
        "Detected %s duplicate documents, awaiting review in session %s",
        len(outcome.duplicate_documents),
        session.id,
    )
    services.notifier.notify(
        recipient,
        IMPORT_DUPLICATES_DETECTED,
        severity=Severity.WARNING,
        event=NotificationEvent(IMPORT_DUPLICATES_EVENT, session.to_payload()),
    )
    if upload_path is not None:
        services.cleaner(upload_path)

    return ImportArchiveResult(
        job_id=job.id,
        outcome=outcome,
        notification_id=notification_id,
        session=session,
    )


def run_override(
    archive_path: Path,
    job_id: str,
    document_ids: Collection[str],
    imported_attachment_ids: Collection[str] = (),
    *,
    requester: str,
    services: ImportServices,
) -> OverrideOutcome:
    """Force-update confirmed duplicates and the attachments they reference."""

    job = services.jobs.find_by_id(job_id)
    if job is None:
        raise JobNotFoundError(f"No job found with id: {job_id}")

    archive = services.reader(archive_path, document_ids=document_ids)
    reporting = JobReporting(services.jobs, job)
    outcome = services.orchestrator.run_override(
        archive.documents,
        archive.attachments,
        reporting,
        imported_attachment_ids=imported_attachment_ids,
    )

    if outcome.failed_document_ids:
        _notify_failed_for_some(services.notifier, requester, len(outcome.failed_document_ids))
    return outcome


def override_duplicates(
    session_id: str,
    document_ids: Collection[str],
    *,
    requester: str | None,
    services: ImportServices,
) -> OverrideOutcome:
    """Run the override pass for a pending session and record its attachments."""

    recipient = _require_requester(requester)

    with services.unit_of_work_factory() as uow:
        session = _get_session(uow, session_id)
        archive_path = session.archive_path
        job_id = session.job_id
        already_imported = tuple(session.imported_attachment_ids)
        known_duplicates = set(session.duplicate_document_ids)

    unknown = set(document_ids) - known_duplicates
    if unknown:
        log.warning(
            "Session %s has no duplicates for %s, overriding anyway",
            session_id,
            sorted(unknown),
        )

    outcome = run_override(
        Path(archive_path),
        job_id,
        document_ids,
        already_imported,
        requester=recipient,
        services=services,
    )

    with services.unit_of_work_factory() as uow:
        session = _get_session(uow, session_id)
        session.record_imported_attachments(outcome.imported_attachment_ids)
        uow.commit()
    return outcome


def close_import_session(
    session_id: str,
    *,
    requester: str | None,
    services: ImportServices,
) -> None:
    """End the session's job, release its archive and delete the session."""

    recipient = _require_requester(requester)

    with services.unit_of_work_factory() as uow:
        session = _get_session(uow, session_id)
        job = services.jobs.find_by_id(session.job_id)
        if job is None:
            log.warning("Job %s for session %s no longer exists", session.job_id, session_id)
        else:
            services.jobs.end(job, ok=True)
        if session.notification_id is not None:
            services.notifier.dismiss(recipient, session.notification_id)
        archive_path = session.archive_path
        uow.repositories.sessions.remove(session)
        uow.commit()

    services.cleaner(Path(archive_path))
    log.info("Closed import session %s", session_id)


def _require_requester(requester: str | None) -> str:
    if not requester:
        raise ImportForbiddenError("An authenticated requester is required")
    return requester


def _get_session(uow: ImportSessionUnitOfWork, session_id: str) -> PendingImportSession:
    session = uow.repositories.sessions.get(session_id)
    if session is None:
        raise ImportSessionNotFoundError(f"No pending import session with id: {session_id}")
    return session


def _notify_failed_for_some(notifier: Notifier, requester: str, count: int) -> None:
    notifier.notify(
        requester,
        IMPORT_FAILED_FOR_SOME,
        severity=Severity.DANGER,
        interpolate={"count": count},
        dismissible=True,
    )

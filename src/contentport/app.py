"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from contentport.adapters.archive import load_archive, remove_path
from contentport.adapters.sqlalchemy import (
    FilesystemBinaryStore,
    SqlAlchemyContentStore,
    SqlAlchemyImportSessionUnitOfWork,
    SqlAlchemyJobService,
    SqlAlchemyNotifier,
    configured_session_factory,
    startup,
)
from contentport.adapters.sqlalchemy.unit_of_work import is_started
from contentport.config import (
    get_content_types_config,
    get_import_config,
    get_storage_config,
)
from contentport.domain import import_export
from contentport.domain.content_types import ContentTypeRegistry
from contentport.domain.reconciliation import (
    AttachmentReconciler,
    DocumentReconciler,
    ImportOrchestrator,
    RelationshipResolver,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path

    from contentport.adapters.sqlalchemy import StoredNotification
    from contentport.config import ContentTypesConfig, ImportConfig, StorageConfig
    from contentport.domain.import_export import ImportArchiveResult, ImportServices
    from contentport.domain.reconciliation import OverrideOutcome


log = getLogger(__name__)


def _ensure_startup() -> None:
    if not is_started():
        startup()


def build_import_services(
    *,
    content_types: ContentTypesConfig | None = None,
    import_config: ImportConfig | None = None,
    storage: StorageConfig | None = None,
) -> ImportServices:
    """Wire the reconciliation core to the SQLAlchemy and filesystem adapters."""

    _ensure_startup()
    session_factory = configured_session_factory()
    effective_types = content_types or get_content_types_config()
    effective_import = import_config or get_import_config()
    effective_storage = storage or get_storage_config()

    content_store = SqlAlchemyContentStore(session_factory)
    registry = ContentTypeRegistry.build(
        effective_types.definitions,
        manager_factory=content_store.manager_for,
        widget_schemas=effective_types.widget_schemas,
    )
    orchestrator = ImportOrchestrator(
        documents=DocumentReconciler(
            registry,
            page_anchor=effective_import.page_anchor,
            page_position=effective_import.page_position,
        ),
        attachments=AttachmentReconciler(
            FilesystemBinaryStore(session_factory, effective_storage.uploads_path()),
        ),
        relationships=RelationshipResolver(registry),
    )
    log.debug("Registered content types: %s", ", ".join(effective_types.names()))

    return import_export.ImportServices(
        reader=load_archive,
        cleaner=remove_path,
        orchestrator=orchestrator,
        jobs=SqlAlchemyJobService(session_factory),
        notifier=SqlAlchemyNotifier(session_factory),
        unit_of_work_factory=SqlAlchemyImportSessionUnitOfWork,
    )


def import_archive(
    archive_path: Path,
    *,
    requester: str | None,
    upload_path: Path | None = None,
    content_type: str | None = None,
    services: ImportServices | None = None,
) -> ImportArchiveResult:
    """Import a staged archive using the configured adapters."""

    effective_services = services or build_import_services()
    log.info("Starting import of %s for %s", archive_path, requester)

    result = import_export.import_archive(
        archive_path,
        requester=requester,
        services=effective_services,
        upload_path=upload_path,
        content_type=content_type,
    )

    log.info(
        "Finished import of %s: succeeded=%s, failed=%s, duplicates=%s",
        archive_path,
        result.outcome.succeeded,
        result.outcome.failed,
        len(result.outcome.duplicate_documents),
    )
    return result


def override_duplicates(
    session_id: str,
    document_ids: Collection[str],
    *,
    requester: str | None,
    services: ImportServices | None = None,
) -> OverrideOutcome:
    """Force-update confirmed duplicates of a pending import session."""

    effective_services = services or build_import_services()
    log.info("Overriding %s duplicates for session %s", len(document_ids), session_id)
    return import_export.override_duplicates(
        session_id,
        document_ids,
        requester=requester,
        services=effective_services,
    )


def close_import_session(
    session_id: str,
    *,
    requester: str | None,
    services: ImportServices | None = None,
) -> None:
    """Finalize a pending import session and release its staged archive."""

    effective_services = services or build_import_services()
    import_export.close_import_session(
        session_id,
        requester=requester,
        services=effective_services,
    )


def active_notifications(recipient: str) -> list[StoredNotification]:
    """Notifications ``recipient`` has not dismissed yet, oldest first."""

    _ensure_startup()
    notifier = SqlAlchemyNotifier(configured_session_factory())
    return notifier.for_recipient(recipient, active_only=True)

"""Drive full import and override passes over a decoded archive.

Documents are always reconciled before attachments and strictly in input
order: published variants depend on the outcome of their draft, and attachment
gating depends on the outcome of every document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .contracts import (
    AttachmentFailed,
    AttachmentImported,
    DocumentDeferred,
    DocumentDuplicate,
    DocumentFailed,
    DocumentFailure,
    DocumentWritten,
    ImportOutcome,
    OverrideOutcome,
    ReconcileMethod,
)

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from contentport.domain.model import AttachmentDescriptor, DocumentRecord

    from .attachments import AttachmentReconciler
    from .contracts import AttachmentOutcome, DocumentOutcome
    from .documents import DocumentReconciler
    from .relationships import RelationshipResolver
    from .reporting import JobReporting

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportOrchestrator:
    documents: DocumentReconciler
    attachments: AttachmentReconciler
    relationships: RelationshipResolver

    def run_import(
        self,
        documents: Sequence[DocumentRecord],
        attachments: Sequence[AttachmentDescriptor],
        reporting: JobReporting,
    ) -> ImportOutcome:
        """Reconcile every document, then every attachment, and aggregate outcomes."""

        reporting.set_total(len(documents) + len(attachments))
        outcome = ImportOutcome()
        duplicate_ids: set[str] = set()
        failed_ids: set[str] = set()
        written_ids: set[str] = set()

        for document in documents:
            result = self._reconcile_document(
                document,
                failed_ids=failed_ids,
                duplicate_ids=duplicate_ids,
            )
            if isinstance(result, DocumentWritten):
                reporting.success()
                outcome.succeeded += 1
                written_ids.add(document.document_id)
            elif isinstance(result, DocumentDuplicate):
                outcome.duplicate_documents.append(result.duplicate)
                duplicate_ids.add(result.document_id)
            elif isinstance(result, DocumentDeferred):
                log.debug("Published %s deferred until its draft is reviewed", document.store_id)
            else:
                reporting.failure()
                outcome.failed += 1
                failed_ids.add(document.document_id)
                if document.document_id not in outcome.failed_document_ids:
                    outcome.failed_document_ids.append(document.document_id)
                log.error(
                    "Failed to import document %s (%s): %s",
                    document.store_id,
                    result.failure,
                    result.detail,
                )

        document_ids = {document.document_id for document in documents}
        not_imported_ids = duplicate_ids | (document_ids - written_ids)

        for descriptor in attachments:
            attachment_result = self._reconcile_attachment(
                descriptor,
                not_imported_ids=not_imported_ids,
                document_ids=document_ids,
            )
            if isinstance(attachment_result, AttachmentImported):
                reporting.success()
                outcome.succeeded += 1
                outcome.imported_attachment_ids.append(descriptor.attachment_id)
            elif isinstance(attachment_result, AttachmentFailed):
                reporting.failure()
                outcome.failed += 1
                log.error(
                    "Failed to import attachment %s: %s",
                    descriptor.attachment_id,
                    attachment_result.detail,
                )

        log.info(
            "Import pass finished: succeeded=%s, failed=%s, duplicates=%s, attachments=%s",
            outcome.succeeded,
            outcome.failed,
            len(outcome.duplicate_documents),
            len(outcome.imported_attachment_ids),
        )
        return outcome

    def run_override(
        self,
        documents: Sequence[DocumentRecord],
        attachments: Sequence[AttachmentDescriptor],
        reporting: JobReporting,
        *,
        imported_attachment_ids: Collection[str] = (),
    ) -> OverrideOutcome:
        """Force-update confirmed documents and import the attachments they need.

        ``imported_attachment_ids`` lists attachments handled by an earlier pass;
        they are not reconciled again. The outcome only lists attachments
        imported by this pass.
        """

        outcome = OverrideOutcome()
        descriptors = {descriptor.attachment_id: descriptor for descriptor in attachments}
        handled = set(imported_attachment_ids)
        failed_ids: set[str] = set()

        for document in documents:
            result = self._reconcile_document(
                document,
                method=ReconcileMethod.UPDATE,
                failed_ids=failed_ids,
            )
            if not isinstance(result, DocumentWritten):
                reporting.failure()
                outcome.failed += 1
                failed_ids.add(document.document_id)
                if document.document_id not in outcome.failed_document_ids:
                    outcome.failed_document_ids.append(document.document_id)
                log.error("Failed to override document %s: %s", document.store_id, result)
                continue

            reporting.success()
            outcome.succeeded += 1
            if document.document_id not in outcome.updated_document_ids:
                outcome.updated_document_ids.append(document.document_id)

            for attachment_id in self.relationships.related_attachment_ids(document):
                if attachment_id in handled:
                    continue
                if self._override_attachment(attachment_id, descriptors, reporting, outcome):
                    handled.add(attachment_id)

        log.info(
            "Override pass finished: updated=%s, failed=%s, attachments=%s",
            len(outcome.updated_document_ids),
            len(outcome.failed_document_ids),
            len(outcome.imported_attachment_ids),
        )
        return outcome

    def _override_attachment(
        self,
        attachment_id: str,
        descriptors: dict[str, AttachmentDescriptor],
        reporting: JobReporting,
        outcome: OverrideOutcome,
    ) -> bool:
        descriptor = descriptors.get(attachment_id)
        if descriptor is None:
            reporting.failure()
            outcome.failed += 1
            log.warning("Attachment %s is referenced but missing from the archive", attachment_id)
            return False

        result = self._reconcile_attachment(descriptor)
        if isinstance(result, AttachmentImported):
            reporting.success()
            outcome.succeeded += 1
            outcome.imported_attachment_ids.append(attachment_id)
            return True

        reporting.failure()
        outcome.failed += 1
        log.error("Failed to override attachment %s: %s", attachment_id, result)
        return False

    def _reconcile_document(
        self,
        document: DocumentRecord,
        *,
        method: ReconcileMethod = ReconcileMethod.INSERT,
        failed_ids: Collection[str] = (),
        duplicate_ids: Collection[str] = (),
    ) -> DocumentOutcome:
        try:
            return self.documents(
                document,
                method=method,
                failed_ids=failed_ids,
                duplicate_ids=duplicate_ids,
            )
        except Exception as exc:  # noqa: BLE001
            log.exception("Unexpected error reconciling document %s", document.store_id)
            return DocumentFailed(
                document_id=document.document_id,
                failure=DocumentFailure.OTHER,
                detail=str(exc),
            )

    def _reconcile_attachment(
        self,
        descriptor: AttachmentDescriptor,
        *,
        not_imported_ids: Collection[str] | None = None,
        document_ids: Collection[str] | None = None,
    ) -> AttachmentOutcome:
        try:
            return self.attachments(
                descriptor,
                not_imported_ids=not_imported_ids,
                document_ids=document_ids,
            )
        except Exception as exc:  # noqa: BLE001
            log.exception("Unexpected error reconciling attachment %s", descriptor.attachment_id)
            return AttachmentFailed(attachment_id=descriptor.attachment_id, detail=str(exc))

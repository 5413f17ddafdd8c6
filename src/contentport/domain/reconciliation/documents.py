"""Per-document insert/update decisions.

Drafts and published variants are reconciled independently, but a published
variant is gated by what happened to its draft earlier in the same pass: it is
never written while its draft failed or awaits duplicate review.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contentport.domain.model import DocumentMode, DuplicateDocument
from contentport.domain.ports import StoreUniqueViolation, StoreWritten

from .contracts import (
    DocumentDeferred,
    DocumentDuplicate,
    DocumentFailed,
    DocumentFailure,
    DocumentOutcome,
    DocumentWritten,
    ReconcileMethod,
)

if TYPE_CHECKING:
    from collections.abc import Collection

    from contentport.domain.content_types import ContentTypeHandler, ContentTypeRegistry
    from contentport.domain.model import DocumentRecord
    from contentport.domain.ports import ContentManager, PageManager, StoreFailed, StoreResult

log = logging.getLogger(__name__)

DEFAULT_PAGE_ANCHOR = "_home"
DEFAULT_PAGE_POSITION = "last_child"
PAGE_POSITIONS = ("first_child", "last_child")


@dataclass(slots=True)
class DocumentReconciler:
    content_types: ContentTypeRegistry
    page_anchor: str = DEFAULT_PAGE_ANCHOR
    page_position: str = DEFAULT_PAGE_POSITION

    def __call__(
        self,
        document: DocumentRecord,
        *,
        method: ReconcileMethod = ReconcileMethod.INSERT,
        failed_ids: Collection[str] = (),
        duplicate_ids: Collection[str] = (),
    ) -> DocumentOutcome:
        handler = self.content_types.resolve(document.type)
        if handler is None:
            return DocumentFailed(
                document_id=document.document_id,
                failure=DocumentFailure.UNSUPPORTED_TYPE,
                detail=f"No manager found for content type: {document.type}",
            )

        if not handler.options.import_enabled:
            return DocumentFailed(
                document_id=document.document_id,
                failure=DocumentFailure.IMPORT_DISABLED,
                detail=f"Import is disabled for content type: {document.type}",
            )

        if document.is_published:
            if document.document_id in failed_ids:
                return DocumentFailed(
                    document_id=document.document_id,
                    failure=DocumentFailure.DEPENDENT_DRAFT_FAILED,
                    detail="Draft variant failed to import",
                )
            if document.document_id in duplicate_ids:
                return DocumentDeferred(document_id=document.document_id)
            if handler.options.autopublish:
                return DocumentWritten(
                    document_id=document.document_id,
                    mode=document.mode,
                    method=method,
                    stored=False,
                )

        result = self._write(handler, document, method)
        if isinstance(result, StoreWritten):
            return self._written(document, method)
        if isinstance(result, StoreUniqueViolation) and method == ReconcileMethod.INSERT:
            return self._resolve_collision(handler, document, result)
        return _store_failure(document, result)

    def _resolve_collision(
        self,
        handler: ContentTypeHandler,
        document: DocumentRecord,
        violation: StoreUniqueViolation,
    ) -> DocumentOutcome:
        if handler.options.singleton:
            log.info(
                "Singleton %s already exists, updating %s instead",
                document.type,
                document.store_id,
            )
            retry = self._write(handler, document, ReconcileMethod.UPDATE)
            if isinstance(retry, StoreWritten):
                return self._written(document, ReconcileMethod.UPDATE)
            return _store_failure(document, retry)

        if document.mode == DocumentMode.DRAFT:
            return DocumentDuplicate(duplicate=DuplicateDocument.from_record(document))

        return _store_failure(document, violation)

    def _write(
        self,
        handler: ContentTypeHandler,
        document: DocumentRecord,
        method: ReconcileMethod,
    ) -> StoreResult:
        if handler.is_page:
            page_manager: PageManager = handler.manager  # pyright: ignore[reportAssignmentType]
            write_page = page_manager.insert
            if method == ReconcileMethod.UPDATE:
                write_page = page_manager.update
            return write_page(
                document,
                target=self.page_anchor,
                position=self.page_position,
                set_modified=False,
            )
        piece_manager: ContentManager = handler.manager  # pyright: ignore[reportAssignmentType]
        if method == ReconcileMethod.UPDATE:
            return piece_manager.update(document, set_modified=False)
        return piece_manager.insert(document, set_modified=False)

    @staticmethod
    def _written(document: DocumentRecord, method: ReconcileMethod) -> DocumentWritten:
        return DocumentWritten(document_id=document.document_id, mode=document.mode, method=method)


def _store_failure(
    document: DocumentRecord,
    result: StoreUniqueViolation | StoreFailed,
) -> DocumentFailed:
    if isinstance(result, StoreUniqueViolation):
        return DocumentFailed(
            document_id=document.document_id,
            failure=DocumentFailure.UNIQUE_CONSTRAINT,
            detail=result.reason,
        )
    return DocumentFailed(
        document_id=document.document_id,
        failure=DocumentFailure.OTHER,
        detail=result.error,
    )

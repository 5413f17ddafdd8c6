"""Typed outcomes produced by the document and attachment reconcilers.

This module intentionally holds only:
- per-item outcome dataclasses and the enums used inside them
- the aggregate outcomes returned by the orchestrator
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from contentport.domain.model import DocumentMode, DuplicateDocument


class ReconcileMethod(StrEnum):
    """Store operation requested for a document."""

    INSERT = "insert"
    UPDATE = "update"


class DocumentFailure(StrEnum):
    UNSUPPORTED_TYPE = "unsupported_type"
    IMPORT_DISABLED = "import_disabled"
    DEPENDENT_DRAFT_FAILED = "dependent_draft_failed"
    UNIQUE_CONSTRAINT = "unique_constraint"
    OTHER = "other"


class DocumentStatus(StrEnum):
    WRITTEN = "written"
    DEFERRED = "deferred"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class DocumentWritten:
    """Document counts as imported.

    ``stored`` is false when the type auto-publishes and the published variant
    is left to the store's own publish flow.
    """

    document_id: str
    mode: DocumentMode
    method: ReconcileMethod
    stored: bool = True
    status: Literal[DocumentStatus.WRITTEN] = DocumentStatus.WRITTEN

    @property
    def inserted(self) -> bool:
        return True


@dataclass(slots=True, kw_only=True)
class DocumentDeferred:
    """Published variant whose draft awaits duplicate review; nothing was written."""

    document_id: str
    status: Literal[DocumentStatus.DEFERRED] = DocumentStatus.DEFERRED

    @property
    def inserted(self) -> bool:
        return False


@dataclass(slots=True, kw_only=True)
class DocumentDuplicate:
    """Draft collided with an existing record and is held for operator review."""

    duplicate: DuplicateDocument
    status: Literal[DocumentStatus.DUPLICATE] = DocumentStatus.DUPLICATE

    @property
    def document_id(self) -> str:
        return self.duplicate.document_id

    @property
    def inserted(self) -> bool:
        return False


@dataclass(slots=True, kw_only=True)
class DocumentFailed:
    document_id: str
    failure: DocumentFailure
    detail: str | None = None
    status: Literal[DocumentStatus.FAILED] = DocumentStatus.FAILED

    @property
    def inserted(self) -> bool:
        return False


type DocumentOutcome = DocumentWritten | DocumentDeferred | DocumentDuplicate | DocumentFailed


class AttachmentStatus(StrEnum):
    IMPORTED = "imported"
    ORPHANED = "orphaned"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class AttachmentImported:
    attachment_id: str
    method: ReconcileMethod
    status: Literal[AttachmentStatus.IMPORTED] = AttachmentStatus.IMPORTED


@dataclass(slots=True, kw_only=True)
class AttachmentOrphaned:
    """None of the documents referencing the attachment were imported."""

    attachment_id: str
    status: Literal[AttachmentStatus.ORPHANED] = AttachmentStatus.ORPHANED


@dataclass(slots=True, kw_only=True)
class AttachmentFailed:
    attachment_id: str
    detail: str
    status: Literal[AttachmentStatus.FAILED] = AttachmentStatus.FAILED


type AttachmentOutcome = AttachmentImported | AttachmentOrphaned | AttachmentFailed


@dataclass(slots=True)
class ImportOutcome:
    """Aggregate result of one import pass."""

    duplicate_documents: list[DuplicateDocument] = field(
        default_factory=list["DuplicateDocument"]
    )
    imported_attachment_ids: list[str] = field(default_factory=list[str])
    failed_document_ids: list[str] = field(default_factory=list[str])
    succeeded: int = 0
    failed: int = 0

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_documents)

    @property
    def duplicate_document_ids(self) -> tuple[str, ...]:
        return tuple(duplicate.document_id for duplicate in self.duplicate_documents)


@dataclass(slots=True)
class OverrideOutcome:
    """Aggregate result of one override pass."""

    updated_document_ids: list[str] = field(default_factory=list[str])
    failed_document_ids: list[str] = field(default_factory=list[str])
    imported_attachment_ids: list[str] = field(default_factory=list[str])
    succeeded: int = 0
    failed: int = 0

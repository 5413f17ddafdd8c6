"""Public domain model surface."""

from __future__ import annotations

from contentport.domain.model.content_types import (
    ContentTypeDefinition,
    ContentTypeOptions,
    Schema,
    SchemaField,
)
from contentport.domain.model.documents import (
    DEFAULT_LOCALE,
    AttachmentDescriptor,
    AttachmentFile,
    DocumentRecord,
    DuplicateDocument,
    logical_document_id,
)
from contentport.domain.model.enums import (
    ContentKind,
    DocumentMode,
    FieldType,
    JobStatus,
    Severity,
)
from contentport.domain.model.jobs import Job
from contentport.domain.model.sessions import PendingImportSession

__all__ = [  # noqa: RUF022
    # archive records
    "DEFAULT_LOCALE",
    "AttachmentDescriptor",
    "AttachmentFile",
    "DocumentRecord",
    "DuplicateDocument",
    "logical_document_id",
    # content types
    "ContentTypeDefinition",
    "ContentTypeOptions",
    "Schema",
    "SchemaField",
    # enums
    "ContentKind",
    "DocumentMode",
    "FieldType",
    "JobStatus",
    "Severity",
    # workflow state
    "Job",
    "PendingImportSession",
]

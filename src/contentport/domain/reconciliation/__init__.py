"""Reconciliation core for importing archived documents and attachments.

Flow of one import pass:
1) reconcile every document in archive order (drafts gate their published variant)
2) derive which documents were not imported
3) reconcile every attachment, skipping those whose documents were not imported
4) aggregate typed outcomes for the application service
"""

from __future__ import annotations

from .attachments import AttachmentReconciler
from .contracts import (
    AttachmentFailed,
    AttachmentImported,
    AttachmentOrphaned,
    AttachmentOutcome,
    AttachmentStatus,
    DocumentDeferred,
    DocumentDuplicate,
    DocumentFailed,
    DocumentFailure,
    DocumentOutcome,
    DocumentStatus,
    DocumentWritten,
    ImportOutcome,
    OverrideOutcome,
    ReconcileMethod,
)
from .documents import DEFAULT_PAGE_ANCHOR, DEFAULT_PAGE_POSITION, DocumentReconciler
from .orchestrator import ImportOrchestrator
from .relationships import RelatedRef, RelationshipResolver
from .reporting import JobReporting

__all__ = [
    "DEFAULT_PAGE_ANCHOR",
    "DEFAULT_PAGE_POSITION",
    "AttachmentFailed",
    "AttachmentImported",
    "AttachmentOrphaned",
    "AttachmentOutcome",
    "AttachmentReconciler",
    "AttachmentStatus",
    "DocumentDeferred",
    "DocumentDuplicate",
    "DocumentFailed",
    "DocumentFailure",
    "DocumentOutcome",
    "DocumentReconciler",
    "DocumentStatus",
    "DocumentWritten",
    "ImportOrchestrator",
    "ImportOutcome",
    "JobReporting",
    "OverrideOutcome",
    "ReconcileMethod",
    "RelatedRef",
    "RelationshipResolver",
]

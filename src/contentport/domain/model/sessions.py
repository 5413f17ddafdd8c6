"""Pending import sessions bridging the import and override calls."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

if TYPE_CHECKING:
    from datetime import datetime

    from contentport.domain.model.documents import DuplicateDocument


def new_session_id() -> str:
    return uuid4().hex


@dataclass(eq=False, kw_only=True)
class PendingImportSession:
    """Everything the override pass needs after duplicates were reported.

    The staged archive at ``archive_path`` stays on disk for as long as the
    session exists.
    """

    id: str = field(default_factory=new_session_id)
    job_id: str
    archive_path: str
    duplicate_documents: list[DuplicateDocument] = field(
        default_factory=list["DuplicateDocument"]
    )
    imported_attachment_ids: list[str] = field(default_factory=list[str])
    notification_id: str | None = None
    content_type: str | None = None
    created_at: datetime | None = None

    @property
    def duplicate_document_ids(self) -> tuple[str, ...]:
        return tuple(duplicate.document_id for duplicate in self.duplicate_documents)

    def record_imported_attachments(self, attachment_ids: list[str]) -> None:
        merged = list(self.imported_attachment_ids)
        for attachment_id in attachment_ids:
            if attachment_id not in merged:
                merged.append(attachment_id)
        # reassign so the ORM notices the change
        self.imported_attachment_ids = merged

    def to_payload(self) -> dict[str, Any]:
        return {
            "session_id": self.id,
            "job_id": self.job_id,
            "archive_path": self.archive_path,
            "duplicate_documents": [
                duplicate.to_payload() for duplicate in self.duplicate_documents
            ],
            "imported_attachment_ids": list(self.imported_attachment_ids),
            "notification_id": self.notification_id,
            "content_type": self.content_type,
        }

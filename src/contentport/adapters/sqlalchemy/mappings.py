"""SQLAlchemy mapping metadata for the import workflow and the content store."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from functools import cache
from typing import Any, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from contentport.domain.model import (
    DocumentMode,
    DuplicateDocument,
    Job,
    JobStatus,
    PendingImportSession,
    Severity,
)

log = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JSONType(TypeDecorator[Any]):
    """Arbitrary JSON document stored as text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, default=str)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Any:
        _ = dialect
        if value is None:
            return None
        return json.loads(value)


class StringListType(TypeDecorator[list[str]]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        return [item for item in cast(list[Any], loaded) if isinstance(item, str)]


class DuplicateDocumentListType(TypeDecorator[list[DuplicateDocument]]):
    impl = Text
    cache_ok = True

    def process_bind_param(
        self,
        value: list[DuplicateDocument] | None,
        dialect: Dialect,
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps([duplicate.to_payload() for duplicate in value])

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[DuplicateDocument]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        duplicates: list[DuplicateDocument] = []
        for item in cast(list[Any], loaded):
            if not isinstance(item, dict):
                continue
            payload = cast(dict[str, Any], item)
            updated_at = payload.get("updated_at")
            duplicates.append(
                DuplicateDocument(
                    document_id=str(payload["document_id"]),
                    title=str(payload.get("title") or ""),
                    type=str(payload["type"]),
                    updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
                )
            )
        return duplicates


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Content store ---------------------------------------------------------------

document_table = Table(
    "document",
    mapper_registry.metadata,
    Column("store_id", String, primary_key=True),
    Column("document_id", String, nullable=False),
    Column("locale", String, nullable=False),
    Column("mode", Enum(DocumentMode, native_enum=False), nullable=False),
    Column("type", String, nullable=False),
    Column("title", String, nullable=False, default=""),
    Column("fields", JSONType, nullable=True),
    Column("parent_id", String, nullable=True),
    Column("rank", Integer, nullable=True),
    Column("updated_at", UTCDateTime, nullable=True),
    Column("modified_at", UTCDateTime, nullable=True),
)

Index("ix_document_type_mode", document_table.c.type, document_table.c.mode)
Index("ix_document_parent_id", document_table.c.parent_id)

attachment_table = Table(
    "attachment",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("extension", String, nullable=True),
    Column("path", String, nullable=False),
    Column("document_ids", StringListType, nullable=True),
    Column("created_at", UTCDateTime, nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime, nullable=True),
)

# Workflow state --------------------------------------------------------------

job_table = Table(
    "job",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("total", Integer, nullable=False, default=0),
    Column("good", Integer, nullable=False, default=0),
    Column("bad", Integer, nullable=False, default=0),
    Column("status", Enum(JobStatus, native_enum=False), nullable=False),
    Column("started_at", UTCDateTime, nullable=True),
    Column("ended_at", UTCDateTime, nullable=True),
)

notification_table = Table(
    "notification",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("recipient", String, nullable=False),
    Column("message_key", String, nullable=False),
    Column("severity", Enum(Severity, native_enum=False), nullable=False),
    Column("interpolate", JSONType, nullable=True),
    Column("event_name", String, nullable=True),
    Column("event_data", JSONType, nullable=True),
    Column("job_id", String, nullable=True),
    Column("dismissible", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime, nullable=False, default=utcnow),
    Column("dismissed_at", UTCDateTime, nullable=True),
)

Index("ix_notification_recipient", notification_table.c.recipient)

pending_import_session_table = Table(
    "pending_import_session",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("job_id", String, nullable=False),
    Column("archive_path", String, nullable=False),
    Column("duplicate_documents", DuplicateDocumentListType, nullable=False),
    Column("imported_attachment_ids", StringListType, nullable=False),
    Column("notification_id", String, nullable=True),
    Column("content_type", String, nullable=True),
    Column("created_at", UTCDateTime, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the workflow state entities."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Job, job_table)
    mapper_registry.map_imperatively(PendingImportSession, pending_import_session_table)

    configure_mappers()
    return mapper_registry

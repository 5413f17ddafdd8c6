"""Decoded archive records: documents and attachment descriptors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from contentport.domain.model.enums import DocumentMode

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from pathlib import Path

DEFAULT_LOCALE = "en"

_QUALIFIER = re.compile(r":.+$")


def logical_document_id(qualified_id: str) -> str:
    """Strip a ``:<locale>:<mode>`` qualifier from a related document id."""

    return _QUALIFIER.sub("", qualified_id)


@dataclass(slots=True, kw_only=True)
class DocumentRecord:
    """One serialized content entity in one lifecycle mode."""

    document_id: str
    mode: DocumentMode
    type: str
    title: str = ""
    updated_at: datetime | None = None
    locale: str = DEFAULT_LOCALE
    fields: Mapping[str, Any] = field(default_factory=dict[str, Any])

    @property
    def is_published(self) -> bool:
        return self.mode == DocumentMode.PUBLISHED

    @property
    def store_id(self) -> str:
        """Identity of this variant in the content store."""
        return f"{self.document_id}:{self.locale}:{self.mode}"


@dataclass(frozen=True, slots=True)
class AttachmentFile:
    """Binary payload reference handed to the binary store."""

    name: str
    path: Path


@dataclass(slots=True, kw_only=True)
class AttachmentDescriptor:
    attachment_id: str
    name: str
    extension: str
    related_document_ids: tuple[str, ...] = ()
    payload_path: Path

    @property
    def file(self) -> AttachmentFile:
        return AttachmentFile(name=f"{self.name}.{self.extension}", path=self.payload_path)

    def logical_document_ids(self) -> tuple[str, ...]:
        """Related document ids without qualifiers, first occurrence wins."""

        seen: dict[str, None] = {}
        for related in self.related_document_ids:
            seen.setdefault(logical_document_id(related), None)
        return tuple(seen)


@dataclass(frozen=True, slots=True, kw_only=True)
class DuplicateDocument:
    """Draft whose identity already exists in the store, awaiting review."""

    document_id: str
    title: str
    type: str
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, document: DocumentRecord) -> DuplicateDocument:
        return cls(
            document_id=document.document_id,
            title=document.title,
            type=document.type,
            updated_at=document.updated_at,
        )

    def to_payload(self) -> dict[str, str | None]:
        return {
            "document_id": self.document_id,
            "title": self.title,
            "type": self.type,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

"""Pydantic models describing the staged archive listings."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contentport.domain.model import DEFAULT_LOCALE, DocumentMode

DOCUMENTS_LISTING = "documents.json"
ATTACHMENTS_LISTING = "attachments.json"
ATTACHMENTS_DIRNAME = "attachments"


class ArchiveBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DocumentPayload(BaseModel):
    """One document entry; keys outside the identity fields are type-specific data."""

    model_config = ConfigDict(extra="allow")

    document_id: str = Field(min_length=1)
    mode: DocumentMode
    type: str = Field(min_length=1)
    title: str = ""
    updated_at: datetime | None = None
    locale: str = DEFAULT_LOCALE

    @field_validator("title", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def extra_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class AttachmentPayload(ArchiveBaseModel):
    id: str = Field(min_length=1)
    name: str
    extension: str
    document_ids: list[str] = Field(default_factory=list[str])

    @property
    def payload_filename(self) -> str:
        return f"{self.id}-{self.name}.{self.extension}"

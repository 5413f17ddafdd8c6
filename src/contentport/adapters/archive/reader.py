"""Decode a staged archive directory into domain records."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from contentport.domain.errors import ArchiveUnreadableError
from contentport.domain.model import AttachmentDescriptor, DocumentRecord
from contentport.domain.ports import DecodedArchive

from .schema import (
    ATTACHMENTS_DIRNAME,
    ATTACHMENTS_LISTING,
    DOCUMENTS_LISTING,
    AttachmentPayload,
    DocumentPayload,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path

log = logging.getLogger(__name__)


def load_archive(path: Path, *, document_ids: Collection[str] | None = None) -> DecodedArchive:
    """Read both listings of the archive staged at ``path``.

    ``document_ids`` keeps only the documents with those logical ids, in
    archive order. Attachment descriptors are always returned in full.
    """

    try:
        documents = [
            DocumentPayload.model_validate(item) for item in _read_listing(path / DOCUMENTS_LISTING)
        ]
        attachments = [
            AttachmentPayload.model_validate(item)
            for item in _read_listing(path / ATTACHMENTS_LISTING)
        ]
    except ValidationError as exc:
        raise ArchiveUnreadableError(f"Malformed archive listing in {path}: {exc}") from exc

    if document_ids is not None:
        wanted = set(document_ids)
        documents = [document for document in documents if document.document_id in wanted]

    log.debug(
        "Decoded archive %s: %s documents, %s attachments",
        path,
        len(documents),
        len(attachments),
    )
    return DecodedArchive(
        path=path,
        documents=[to_document_record(document) for document in documents],
        attachments=[
            to_attachment_descriptor(attachment, path / ATTACHMENTS_DIRNAME)
            for attachment in attachments
        ],
    )


def to_document_record(payload: DocumentPayload) -> DocumentRecord:
    return DocumentRecord(
        document_id=payload.document_id,
        mode=payload.mode,
        type=payload.type,
        title=payload.title,
        updated_at=payload.updated_at,
        locale=payload.locale,
        fields=payload.extra_fields,
    )


def to_attachment_descriptor(
    payload: AttachmentPayload,
    attachments_dir: Path,
) -> AttachmentDescriptor:
    return AttachmentDescriptor(
        attachment_id=payload.id,
        name=payload.name,
        extension=payload.extension,
        related_document_ids=tuple(payload.document_ids),
        payload_path=attachments_dir / payload.payload_filename,
    )


def _read_listing(listing: Path) -> list[Any]:
    try:
        payload = json.loads(listing.read_bytes())
    except OSError as exc:
        raise ArchiveUnreadableError(f"Cannot read archive listing {listing}: {exc}") from exc
    except ValueError as exc:
        raise ArchiveUnreadableError(f"Malformed archive listing {listing}: {exc}") from exc
    if not isinstance(payload, list):
        raise ArchiveUnreadableError(f"Malformed archive listing {listing}: expected a list")
    return payload  # pyright: ignore[reportUnknownVariableType]

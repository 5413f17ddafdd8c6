"""Public interface for the staged archive adapter."""

from __future__ import annotations

from .cleanup import remove_path
from .reader import load_archive, to_attachment_descriptor, to_document_record
from .schema import AttachmentPayload, DocumentPayload

__all__ = [
    "AttachmentPayload",
    "DocumentPayload",
    "load_archive",
    "remove_path",
    "to_attachment_descriptor",
    "to_document_record",
]

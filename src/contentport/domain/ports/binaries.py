"""Ports for the attachment binary store."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contentport.domain.model import AttachmentDescriptor, AttachmentFile


class BinaryStatus(StrEnum):
    WRITTEN = "written"
    DUPLICATE = "duplicate"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class BinaryWritten:
    attachment_id: str
    status: Literal[BinaryStatus.WRITTEN] = BinaryStatus.WRITTEN


@dataclass(slots=True, kw_only=True)
class BinaryDuplicate:
    """An attachment with this id is already stored."""

    attachment_id: str
    status: Literal[BinaryStatus.DUPLICATE] = BinaryStatus.DUPLICATE


@dataclass(slots=True, kw_only=True)
class BinaryFailed:
    attachment_id: str
    error: str
    status: Literal[BinaryStatus.FAILED] = BinaryStatus.FAILED


type BinaryResult = BinaryWritten | BinaryDuplicate | BinaryFailed


@runtime_checkable
class BinaryStore(Protocol):
    """Stores attachment payloads keyed by attachment id."""

    def insert(
        self,
        attachment_id: str,
        file: AttachmentFile,
        *,
        descriptor: AttachmentDescriptor | None = None,
    ) -> BinaryResult: ...

    def update(
        self,
        attachment_id: str,
        file: AttachmentFile,
        descriptor: AttachmentDescriptor,
    ) -> BinaryResult: ...

"""Ports for reading staged export archives."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from contentport.domain.model import AttachmentDescriptor, DocumentRecord

if TYPE_CHECKING:
    from collections.abc import Collection
    from pathlib import Path


@dataclass(slots=True)
class DecodedArchive:
    """Document and attachment listings decoded from one staged archive."""

    path: Path
    documents: list[DocumentRecord] = field(default_factory=list[DocumentRecord])
    attachments: list[AttachmentDescriptor] = field(default_factory=list[AttachmentDescriptor])

    @property
    def size(self) -> int:
        return len(self.documents) + len(self.attachments)


@runtime_checkable
class ArchiveReader(Protocol):
    """Callable port returning the decoded listings of a staged archive.

    ``document_ids`` restricts the returned documents to those logical ids;
    attachment descriptors are always returned in full. Implementations raise
    ``ArchiveUnreadableError`` when the listings are absent or malformed.
    """

    def __call__(
        self,
        path: Path,
        *,
        document_ids: Collection[str] | None = None,
    ) -> DecodedArchive: ...


@runtime_checkable
class StagingCleaner(Protocol):
    """Release a staged file or directory; must not raise on failure."""

    def __call__(self, path: Path) -> None: ...


__all__ = ["ArchiveReader", "DecodedArchive", "StagingCleaner"]

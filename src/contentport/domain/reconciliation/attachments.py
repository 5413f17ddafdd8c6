"""Per-attachment insert/update decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from contentport.domain.ports import BinaryDuplicate, BinaryFailed, BinaryWritten

from .contracts import (
    AttachmentFailed,
    AttachmentImported,
    AttachmentOrphaned,
    AttachmentOutcome,
    ReconcileMethod,
)

if TYPE_CHECKING:
    from collections.abc import Collection

    from contentport.domain.model import AttachmentDescriptor
    from contentport.domain.ports import BinaryStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class AttachmentReconciler:
    binaries: BinaryStore

    def __call__(
        self,
        descriptor: AttachmentDescriptor,
        *,
        not_imported_ids: Collection[str] | None = None,
        document_ids: Collection[str] | None = None,
    ) -> AttachmentOutcome:
        """Insert the attachment binary, falling back to update on an id collision.

        When both ``not_imported_ids`` and ``document_ids`` are given, the
        attachment is skipped as orphaned if every related document that is
        part of ``document_ids`` is in ``not_imported_ids``.
        """

        attachment_id = descriptor.attachment_id
        if not_imported_ids is not None and document_ids is not None:
            related_ids = [
                related
                for related in descriptor.logical_document_ids()
                if related in document_ids
            ]
            if all(related in not_imported_ids for related in related_ids):
                log.info(
                    "Related documents have not been imported for attachment %s, skipping",
                    attachment_id,
                )
                return AttachmentOrphaned(attachment_id=attachment_id)

        file = descriptor.file
        inserted = self.binaries.insert(attachment_id, file, descriptor=descriptor)
        if isinstance(inserted, BinaryWritten):
            return AttachmentImported(attachment_id=attachment_id, method=ReconcileMethod.INSERT)
        if isinstance(inserted, BinaryFailed):
            return AttachmentFailed(attachment_id=attachment_id, detail=inserted.error)

        log.debug("Attachment %s already stored, updating", attachment_id)
        updated = self.binaries.update(attachment_id, file, descriptor)
        if isinstance(updated, BinaryWritten):
            return AttachmentImported(attachment_id=attachment_id, method=ReconcileMethod.UPDATE)
        if isinstance(updated, BinaryDuplicate):
            return AttachmentFailed(
                attachment_id=attachment_id,
                detail="Binary store reported a duplicate on update",
            )
        return AttachmentFailed(attachment_id=attachment_id, detail=updated.error)

"""Attachment binary store: payloads on disk, metadata in the ``attachment`` table.

Payloads are copied next to their final location first and only moved into
place once the metadata row has been committed.
"""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from contentport.adapters.sqlalchemy.mappings import attachment_table, utcnow
from contentport.domain.ports import BinaryDuplicate, BinaryFailed, BinaryWritten

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.orm import Session, sessionmaker

    from contentport.domain.model import AttachmentDescriptor, AttachmentFile
    from contentport.domain.ports import BinaryResult

log = logging.getLogger(__name__)


class FilesystemBinaryStore:
    def __init__(self, session_factory: sessionmaker[Session], uploads_dir: Path) -> None:
        self.session_factory = session_factory
        self.uploads_dir = uploads_dir

    def insert(
        self,
        attachment_id: str,
        file: AttachmentFile,
        *,
        descriptor: AttachmentDescriptor | None = None,
    ) -> BinaryResult:
        try:
            with self._staged_copy(attachment_id, file) as (staged, destination):
                with self.session_factory.begin() as session:
                    if self._exists(session, attachment_id):
                        return BinaryDuplicate(attachment_id=attachment_id)
                    session.execute(
                        insert(attachment_table).values(
                            id=attachment_id,
                            created_at=utcnow(),
                            **_metadata(file, destination, descriptor),
                        )
                    )
                staged.replace(destination)
        except IntegrityError:
            return BinaryDuplicate(attachment_id=attachment_id)
        except (OSError, SQLAlchemyError) as exc:
            log.warning("Could not store attachment %s: %s", attachment_id, exc)
            return BinaryFailed(attachment_id=attachment_id, error=str(exc))
        return BinaryWritten(attachment_id=attachment_id)

    def update(
        self,
        attachment_id: str,
        file: AttachmentFile,
        descriptor: AttachmentDescriptor,
    ) -> BinaryResult:
        try:
            with self._staged_copy(attachment_id, file) as (staged, destination):
                values = _metadata(file, destination, descriptor)
                with self.session_factory.begin() as session:
                    if self._exists(session, attachment_id):
                        session.execute(
                            update(attachment_table)
                            .where(attachment_table.c.id == attachment_id)
                            .values(updated_at=utcnow(), **values)
                        )
                    else:
                        session.execute(
                            insert(attachment_table).values(
                                id=attachment_id,
                                created_at=utcnow(),
                                **values,
                            )
                        )
                staged.replace(destination)
        except (OSError, SQLAlchemyError) as exc:
            log.warning("Could not update attachment %s: %s", attachment_id, exc)
            return BinaryFailed(attachment_id=attachment_id, error=str(exc))
        return BinaryWritten(attachment_id=attachment_id)

    @contextmanager
    def _staged_copy(self, attachment_id: str, file: AttachmentFile) -> Iterator[tuple[Path, Path]]:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        destination = self.uploads_dir / f"{attachment_id}-{file.name}"
        staged = destination.with_name(f".{destination.name}.partial")
        try:
            shutil.copyfile(file.path, staged)
            yield staged, destination
        finally:
            staged.unlink(missing_ok=True)

    @staticmethod
    def _exists(session: Session, attachment_id: str) -> bool:
        found = session.execute(
            select(attachment_table.c.id).where(attachment_table.c.id == attachment_id)
        ).scalar_one_or_none()
        return found is not None


def _metadata(
    file: AttachmentFile,
    destination: Path,
    descriptor: AttachmentDescriptor | None,
) -> dict[str, Any]:
    if descriptor is None:
        _, dot, extension = file.name.rpartition(".")
        return {
            "name": file.name,
            "extension": extension if dot else None,
            "path": str(destination),
            "document_ids": [],
        }
    return {
        "name": file.name,
        "extension": descriptor.extension,
        "path": str(destination),
        "document_ids": list(descriptor.related_document_ids),
    }

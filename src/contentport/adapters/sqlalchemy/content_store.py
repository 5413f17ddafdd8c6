"""Live document store backed by the ``document`` table.

Every insert and update runs in its own transaction, so a failed write never
rolls back documents written earlier in the same pass. Driver exceptions are
converted into ``StoreResult`` values at this boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from contentport.adapters.sqlalchemy.mappings import document_table, utcnow
from contentport.domain.ports import StoreFailed, StoreUniqueViolation, StoreWritten
from contentport.domain.reconciliation.documents import PAGE_POSITIONS

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.orm import Session, sessionmaker

    from contentport.domain.model import ContentTypeDefinition, DocumentRecord
    from contentport.domain.ports import ContentManager, PageManager, StoreResult

log = logging.getLogger(__name__)

class SqlAlchemyContentManager:
    """Insert/update operations for one piece type."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        definition: ContentTypeDefinition,
    ) -> None:
        self.session_factory = session_factory
        self.definition = definition

    @property
    def is_singleton(self) -> bool:
        return self.definition.options.singleton

    def insert(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult:
        return self._execute(
            document,
            lambda session: self._insert(session, document, set_modified=set_modified),
        )

    def update(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult:
        return self._execute(
            document,
            lambda session: self._update(session, document, set_modified=set_modified),
        )

    def _execute(
        self,
        document: DocumentRecord,
        operation: Callable[[Session], StoreResult],
    ) -> StoreResult:
        try:
            with self.session_factory.begin() as session:
                return operation(session)
        except IntegrityError as exc:
            log.debug("Unique violation for %s: %s", document.store_id, exc.orig)
            return StoreUniqueViolation(store_id=document.store_id, reason=str(exc.orig))
        except SQLAlchemyError as exc:
            log.warning("Store write failed for %s: %s", document.store_id, exc)
            return StoreFailed(store_id=document.store_id, error=str(exc))

    def _insert(
        self,
        session: Session,
        document: DocumentRecord,
        *,
        set_modified: bool,
        placement: tuple[str, str] | None = None,
    ) -> StoreResult:
        if self.is_singleton:
            existing = self._singleton_store_id(session, document)
            if existing is not None:
                return StoreUniqueViolation(
                    store_id=document.store_id,
                    reason=f"Singleton {document.type} already stored as {existing}",
                )
        values = _row(document, set_modified=set_modified)
        if placement is not None:
            parent_id, position = placement
            values["parent_id"] = parent_id
            values["rank"] = _rank(session, parent_id, position)
        session.execute(insert(document_table).values(**values))
        return StoreWritten(store_id=document.store_id)

    def _update(
        self,
        session: Session,
        document: DocumentRecord,
        *,
        set_modified: bool,
        placement: tuple[str, str] | None = None,
    ) -> StoreResult:
        target_id = document.store_id
        if self.is_singleton:
            target_id = self._singleton_store_id(session, document) or document.store_id

        exists = session.execute(
            select(document_table.c.store_id).where(document_table.c.store_id == target_id)
        ).scalar_one_or_none()
        if exists is None:
            return self._insert(session, document, set_modified=set_modified, placement=placement)

        values = _row(document, set_modified=set_modified)
        for identity_column in ("store_id", "document_id", "locale", "mode"):
            values.pop(identity_column)
        if not set_modified:
            values.pop("modified_at")
        session.execute(
            update(document_table).where(document_table.c.store_id == target_id).values(**values)
        )
        return StoreWritten(store_id=target_id)

    def _singleton_store_id(self, session: Session, document: DocumentRecord) -> str | None:
        stmt = (
            select(document_table.c.store_id)
            .where(document_table.c.type == document.type)
            .where(document_table.c.mode == document.mode)
            .where(document_table.c.locale == document.locale)
            .limit(1)
        )
        return session.execute(stmt).scalar_one_or_none()

class SqlAlchemyPageManager(SqlAlchemyContentManager):
    """Page-tree manager: new pages become children of an anchor page."""

    def insert(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult:
        if position not in PAGE_POSITIONS:
            return _unsupported_position(document, position)
        return self._execute(
            document,
            lambda session: self._insert(
                session,
                document,
                set_modified=set_modified,
                placement=(target, position),
            ),
        )

    def update(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult:
        if position not in PAGE_POSITIONS:
            return _unsupported_position(document, position)
        return self._execute(
            document,
            lambda session: self._update(
                session,
                document,
                set_modified=set_modified,
                placement=(target, position),
            ),
        )

class SqlAlchemyContentStore:
    """Factory for per-type managers sharing one session factory."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def manager_for(self, definition: ContentTypeDefinition) -> ContentManager | PageManager:
        if definition.is_page:
            return SqlAlchemyPageManager(self.session_factory, definition)
        return SqlAlchemyContentManager(self.session_factory, definition)

def _row(document: DocumentRecord, *, set_modified: bool) -> dict[str, Any]:
    return {
        "store_id": document.store_id,
        "document_id": document.document_id,
        "locale": document.locale,
        "mode": document.mode,
        "type": document.type,
        "title": document.title,
        "fields": dict(document.fields),
        "updated_at": document.updated_at,
        "modified_at": utcnow() if set_modified else None,
    }

def _rank(session: Session, parent_id: str, position: str) -> int:
    aggregate = func.max if position == "last_child" else func.min
    current = session.execute(
        select(aggregate(document_table.c.rank)).where(document_table.c.parent_id == parent_id)
    ).scalar_one_or_none()
    if current is None:
        return 0
    return current + 1 if position == "last_child" else current - 1

def _unsupported_position(document: DocumentRecord, position: str) -> StoreFailed:
    return StoreFailed(store_id=document.store_id, error=f"Unsupported page position: {position}")

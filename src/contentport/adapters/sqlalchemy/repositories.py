"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from contentport.domain.model import PendingImportSession

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


class SqlAlchemyPendingImportSessionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PendingImportSession) -> None:
        self.session.add(entity)

    def get(self, session_id: str) -> PendingImportSession | None:
        return self.session.get(PendingImportSession, session_id)

    def remove(self, session: PendingImportSession) -> None:
        self.session.delete(session)


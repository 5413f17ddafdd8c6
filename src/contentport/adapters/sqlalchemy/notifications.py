"""Notifications persisted in the ``notification`` table for later delivery."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from sqlalchemy import insert, select, update

from contentport.adapters.sqlalchemy.mappings import notification_table, utcnow

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from sqlalchemy.orm import Session, sessionmaker

    from contentport.domain.model import Severity
    from contentport.domain.ports import NotificationEvent

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class StoredNotification:
    id: str
    recipient: str
    message_key: str
    severity: Severity
    interpolate: Mapping[str, Any] | None
    event_name: str | None
    event_data: Mapping[str, Any] | None
    job_id: str | None
    dismissible: bool
    created_at: datetime
    dismissed_at: datetime | None


class SqlAlchemyNotifier:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def notify(
        self,
        recipient: str,
        message_key: str,
        *,
        severity: Severity,
        interpolate: Mapping[str, Any] | None = None,
        event: NotificationEvent | None = None,
        job_id: str | None = None,
        dismissible: bool = False,
    ) -> str:
        notification_id = uuid4().hex
        with self.session_factory.begin() as session:
            session.execute(
                insert(notification_table).values(
                    id=notification_id,
                    recipient=recipient,
                    message_key=message_key,
                    severity=severity,
                    interpolate=dict(interpolate) if interpolate is not None else None,
                    event_name=event.name if event is not None else None,
                    event_data=dict(event.data) if event is not None else None,
                    job_id=job_id,
                    dismissible=dismissible,
                    created_at=utcnow(),
                )
            )
        log.debug("Notified %s: %s (%s)", recipient, message_key, severity)
        return notification_id

    def dismiss(self, recipient: str, notification_id: str) -> None:
        with self.session_factory.begin() as session:
            result = session.execute(
                update(notification_table)
                .where(notification_table.c.id == notification_id)
                .where(notification_table.c.recipient == recipient)
                .where(notification_table.c.dismissed_at.is_(None))
                .values(dismissed_at=utcnow())
            )
        if not result.rowcount:  # pyright: ignore[reportAttributeAccessIssue]
            log.warning("No active notification %s for %s", notification_id, recipient)

    def for_recipient(
        self,
        recipient: str,
        *,
        active_only: bool = False,
    ) -> list[StoredNotification]:
        stmt = (
            select(notification_table)
            .where(notification_table.c.recipient == recipient)
            .order_by(notification_table.c.created_at)
        )
        if active_only:
            stmt = stmt.where(notification_table.c.dismissed_at.is_(None))
        with self.session_factory() as session:
            rows = session.execute(stmt).mappings().all()
        return [StoredNotification(**dict(row)) for row in rows]

"""Ports for persisting import workflow state."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from contentport.domain.model import PendingImportSession


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class PendingImportSessionRepository(Repository[PendingImportSession], Protocol):
    """Persistence contract for sessions awaiting duplicate review."""

    def get(self, session_id: str) -> PendingImportSession | None: ...

    def remove(self, session: PendingImportSession) -> None: ...

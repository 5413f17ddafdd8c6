"""Ports for the live document store.

Store operations report their outcome as a typed ``StoreResult`` instead of
raising, so callers branch on uniqueness violations explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contentport.domain.model import DocumentRecord


class StoreStatus(StrEnum):
    WRITTEN = "written"
    UNIQUE_VIOLATION = "unique_violation"
    FAILED = "failed"


@dataclass(slots=True, kw_only=True)
class StoreWritten:
    """The store now holds the document variant."""

    store_id: str
    status: Literal[StoreStatus.WRITTEN] = StoreStatus.WRITTEN


@dataclass(slots=True, kw_only=True)
class StoreUniqueViolation:
    """The write collided with an existing record; nothing was changed."""

    store_id: str
    reason: str | None = None
    status: Literal[StoreStatus.UNIQUE_VIOLATION] = StoreStatus.UNIQUE_VIOLATION


@dataclass(slots=True, kw_only=True)
class StoreFailed:
    """The write failed for any other reason; nothing was changed."""

    store_id: str
    error: str
    status: Literal[StoreStatus.FAILED] = StoreStatus.FAILED


type StoreResult = StoreWritten | StoreUniqueViolation | StoreFailed


@runtime_checkable
class ContentManager(Protocol):
    """Insert/update operations for one content type.

    ``set_modified=False`` leaves the store's own "last modified" bookkeeping
    untouched. ``update`` writes the variant whether or not it already exists.
    """

    def insert(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult: ...

    def update(self, document: DocumentRecord, *, set_modified: bool = True) -> StoreResult: ...


@runtime_checkable
class PageManager(Protocol):
    """Page-tree manager: new pages are placed relative to an anchor page.

    ``update`` places a variant it has to create the same way ``insert`` does;
    an existing page keeps its place in the tree.
    """

    def insert(
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult: ...

    def update(
        self,
        document: DocumentRecord,
        *,
        target: str,
        position: str,
        set_modified: bool = True,
    ) -> StoreResult: ...

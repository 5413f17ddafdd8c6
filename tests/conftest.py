from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from contentport.adapters.sqlalchemy import start_mappers
from contentport.adapters.sqlalchemy.migrations import upgrade_head
from contentport.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportSessionUnitOfWork,
    shutdown,
    startup,
)
from contentport.domain.content_types import ContentTypeRegistry
from contentport.domain.reconciliation import (
    AttachmentReconciler,
    DocumentReconciler,
    ImportOrchestrator,
    RelationshipResolver,
)
from tests.helpers.documents import (
    IMAGE_WIDGET_SCHEMA,
    article_type,
    author_type,
    page_type,
    settings_type,
)
from tests.support.fakes import FakeBinaryStore, FakeContentStore, FakeJobService

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def content_store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def binary_store() -> FakeBinaryStore:
    return FakeBinaryStore()


@pytest.fixture
def job_service() -> FakeJobService:
    return FakeJobService()


@pytest.fixture
def registry(content_store: FakeContentStore) -> ContentTypeRegistry:
    return ContentTypeRegistry.build(
        (article_type(), author_type(), settings_type(), page_type()),
        manager_factory=content_store.manager_for,
        widget_schemas={"image": IMAGE_WIDGET_SCHEMA},
    )


@pytest.fixture
def orchestrator(
    registry: ContentTypeRegistry,
    binary_store: FakeBinaryStore,
) -> ImportOrchestrator:
    return ImportOrchestrator(
        documents=DocumentReconciler(registry),
        attachments=AttachmentReconciler(binary_store),
        relationships=RelationshipResolver(registry),
    )


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=sqlite_engine, expire_on_commit=False)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyImportSessionUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyImportSessionUnitOfWork
    finally:
        shutdown()

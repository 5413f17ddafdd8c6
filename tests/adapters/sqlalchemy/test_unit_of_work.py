from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from contentport.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportSessionUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from contentport.domain.model import DuplicateDocument, PendingImportSession

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyImportSessionUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_pending_session_round_trip(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportSessionUnitOfWork],
) -> None:
    updated_at = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    session = PendingImportSession(
        job_id="job-1",
        archive_path="/staged/export-1",
        duplicate_documents=[
            DuplicateDocument(
                document_id="doc-1",
                title="Existing",
                type="article",
                updated_at=updated_at,
            ),
            DuplicateDocument(document_id="doc-2", title="", type="article"),
        ],
        imported_attachment_ids=["att-1"],
        notification_id="note-1",
        content_type="article",
    )

    with sqlite_unit_of_work() as uow:
        uow.repositories.sessions.add(session)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.sessions.get(session.id)
        assert loaded is not None
        assert loaded.job_id == "job-1"
        assert loaded.duplicate_document_ids == ("doc-1", "doc-2")
        assert loaded.duplicate_documents[0].updated_at == updated_at
        assert loaded.duplicate_documents[1].updated_at is None
        assert loaded.imported_attachment_ids == ["att-1"]


def test_recorded_attachments_are_persisted(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportSessionUnitOfWork],
) -> None:
    session = PendingImportSession(job_id="job-1", archive_path="/staged/export-1")
    with sqlite_unit_of_work() as uow:
        uow.repositories.sessions.add(session)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.sessions.get(session.id)
        assert loaded is not None
        loaded.record_imported_attachments(["att-1", "att-2"])
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.sessions.get(session.id)
        assert loaded is not None
        assert loaded.imported_attachment_ids == ["att-1", "att-2"]


def test_removed_session_is_gone(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportSessionUnitOfWork],
) -> None:
    session = PendingImportSession(job_id="job-1", archive_path="/staged/export-1")
    with sqlite_unit_of_work() as uow:
        uow.repositories.sessions.add(session)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        loaded = uow.repositories.sessions.get(session.id)
        assert loaded is not None
        uow.repositories.sessions.remove(loaded)
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.sessions.get(session.id) is None


def test_uncommitted_changes_roll_back(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportSessionUnitOfWork],
) -> None:
    session = PendingImportSession(job_id="job-1", archive_path="/staged/export-1")

    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.sessions.add(session)
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.sessions.get(session.id) is None


def test_engine_state_is_shared(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    assert configured_engine() is sqlite_engine


def test_startup_can_skip_migrations() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine, force=True, migrate=False)

    assert "pending_import_session" not in inspect(engine).get_table_names()


def test_repositories_require_an_open_block(
    sqlite_unit_of_work: Callable[[], SqlAlchemyImportSessionUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.repositories

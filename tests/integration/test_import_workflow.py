from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from contentport import app
from contentport.adapters.sqlalchemy import (
    SqlAlchemyContentManager,
    SqlAlchemyJobService,
    SqlAlchemyPageManager,
    configured_session_factory,
    shutdown,
    startup,
)
from contentport.config import ContentTypesConfig, ImportConfig, StorageConfig
from contentport.domain.errors import ImportSessionNotFoundError
from contentport.domain.model import JobStatus
from tests.helpers.documents import (
    IMAGE_WIDGET_SCHEMA,
    article_type,
    author_type,
    make_attachment,
    make_document,
    make_pair,
    page_type,
    settings_type,
    write_archive,
)
from tests.helpers.rows import document_count, document_row

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from contentport.domain.import_export import ImportServices


@pytest.fixture
def services(sqlite_engine: Engine, tmp_path: Path) -> Iterator[ImportServices]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield app.build_import_services(
            content_types=ContentTypesConfig(
                definitions=(article_type(), author_type(), settings_type(), page_type()),
                widget_schemas={"image": IMAGE_WIDGET_SCHEMA},
            ),
            import_config=ImportConfig(),
            storage=StorageConfig(data_dir=tmp_path / "data"),
        )
    finally:
        shutdown()


def test_clean_import_writes_everything_and_releases_the_archive(
    services: ImportServices,
    tmp_path: Path,
) -> None:
    archive = write_archive(
        tmp_path / "staged" / "export-1",
        [*make_pair("doc-1", fields={"image": {"_id": "att-1"}})],
        [make_attachment("att-1", related=("doc-1:en:draft", "doc-1:en:published"))],
    )
    upload = tmp_path / "staged" / "export-1.tar.gz"
    upload.write_bytes(b"archive")

    result = app.import_archive(archive, requester="editor", upload_path=upload, services=services)

    assert not result.needs_review
    job = SqlAlchemyJobService(configured_session_factory()).find_by_id(result.job_id)
    assert job is not None
    assert job.status == JobStatus.COMPLETED
    assert (job.total, job.good, job.bad) == (3, 3, 0)
    assert document_count(configured_session_factory(), type_name="article") == 2
    assert (tmp_path / "data" / "attachments" / "att-1-photo.jpg").exists()
    assert not archive.exists()
    assert not upload.exists()

    active = app.active_notifications("editor")
    assert [notification.message_key for notification in active] == ["import_succeeded"]


def test_duplicates_override_and_close(services: ImportServices, tmp_path: Path) -> None:
    session_factory = configured_session_factory()
    existing = make_document("doc-1", title="Existing")
    SqlAlchemyContentManager(session_factory, article_type()).insert(existing)
    archive = write_archive(
        tmp_path / "staged" / "export-2",
        [
            *make_pair("doc-1", title="Imported", fields={"image": {"_id": "att-1"}}),
            *make_pair("doc-2", fields={"image": {"_id": "att-2"}}),
        ],
        [
            make_attachment("att-1", related=("doc-1:en:draft", "doc-1:en:published")),
            make_attachment("att-2", related=("doc-2:en:draft",)),
        ],
    )

    result = app.import_archive(archive, requester="editor", services=services)

    assert result.session is not None
    session_id = result.session.id
    jobs = SqlAlchemyJobService(configured_session_factory())
    job = jobs.find_by_id(result.job_id)
    assert job is not None
    assert job.status == JobStatus.RUNNING
    assert (job.total, job.good, job.bad) == (6, 3, 0)
    assert result.session.duplicate_document_ids == ("doc-1",)
    assert result.session.imported_attachment_ids == ["att-2"]
    assert document_row(session_factory, "doc-1:en:published") is None
    assert archive.exists()

    outcome = app.override_duplicates(session_id, ["doc-1"], requester="editor", services=services)

    assert outcome.updated_document_ids == ["doc-1"]
    assert outcome.imported_attachment_ids == ["att-1"]
    draft = document_row(session_factory, "doc-1:en:draft")
    assert draft is not None
    assert draft["title"] == "Imported"
    assert document_row(session_factory, "doc-1:en:published") is not None
    job = jobs.find_by_id(result.job_id)
    assert job is not None
    assert (job.good, job.bad) == (6, 0)

    again = app.override_duplicates(session_id, ["doc-1"], requester="editor", services=services)

    assert again.imported_attachment_ids == []
    assert document_count(session_factory, type_name="article") == 4

    app.close_import_session(session_id, requester="editor", services=services)

    job = jobs.find_by_id(result.job_id)
    assert job is not None
    assert job.status == JobStatus.COMPLETED
    assert not archive.exists()
    assert "importing" not in [
        notification.message_key for notification in app.active_notifications("editor")
    ]
    with pytest.raises(ImportSessionNotFoundError):
        app.close_import_session(session_id, requester="editor", services=services)


def test_overridden_page_is_placed_under_the_anchor(
    services: ImportServices,
    tmp_path: Path,
) -> None:
    session_factory = configured_session_factory()
    pages = SqlAlchemyPageManager(session_factory, page_type())
    pages.insert(
        make_document("page-0", type_name="default-page"),
        target="_home",
        position="last_child",
    )
    pages.insert(
        make_document("page-1", type_name="default-page", title="Existing"),
        target="_home",
        position="last_child",
    )
    archive = write_archive(
        tmp_path / "staged" / "export-3",
        [*make_pair("page-1", type_name="default-page", title="Imported")],
    )

    result = app.import_archive(archive, requester="editor", services=services)

    assert result.session is not None
    assert document_row(session_factory, "page-1:en:published") is None

    app.override_duplicates(result.session.id, ["page-1"], requester="editor", services=services)

    draft = document_row(session_factory, "page-1:en:draft")
    published = document_row(session_factory, "page-1:en:published")
    assert draft is not None
    assert published is not None
    assert draft["title"] == "Imported"
    assert (draft["parent_id"], draft["rank"]) == ("_home", 1)
    assert (published["parent_id"], published["rank"]) == ("_home", 2)

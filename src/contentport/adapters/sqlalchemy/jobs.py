"""Job progress service persisted in the ``job`` table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import update

from contentport.adapters.sqlalchemy.mappings import job_table, utcnow
from contentport.domain.model import Job, JobStatus

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

log = logging.getLogger(__name__)


class SqlAlchemyJobService:
    """Counters are incremented in the database and mirrored on the given job."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def start(self) -> Job:
        job = Job(started_at=utcnow())
        with self.session_factory.begin() as session:
            session.add(job)
        log.debug("Started job %s", job.id)
        return job

    def set_total(self, job: Job, total: int) -> None:
        self._update(job, total=total)
        job.total = total

    def success(self, job: Job, n: int = 1) -> None:
        self._update(job, good=job_table.c.good + n)
        job.good += n

    def failure(self, job: Job, n: int = 1) -> None:
        self._update(job, bad=job_table.c.bad + n)
        job.bad += n

    def end(self, job: Job, ok: bool = True) -> None:  # noqa: FBT001, FBT002
        status = JobStatus.COMPLETED if ok else JobStatus.FAILED
        ended_at = utcnow()
        self._update(job, status=status, ended_at=ended_at)
        job.status = status
        job.ended_at = ended_at
        log.debug("Ended job %s as %s", job.id, status)

    def find_by_id(self, job_id: str) -> Job | None:
        with self.session_factory() as session:
            return session.get(Job, job_id)

    def _update(self, job: Job, **values: object) -> None:
        with self.session_factory.begin() as session:
            session.execute(update(job_table).where(job_table.c.id == job.id).values(**values))

"""Counter adapter around the external job service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contentport.domain.model import Job
    from contentport.domain.ports import JobService


@dataclass(slots=True)
class JobReporting:
    """Forward progress to the job service while keeping local tallies."""

    jobs: JobService
    job: Job
    succeeded: int = 0
    failed: int = 0

    @property
    def job_id(self) -> str:
        return self.job.id

    def set_total(self, total: int) -> None:
        self.jobs.set_total(self.job, total)

    def success(self, n: int = 1) -> None:
        self.succeeded += n
        self.jobs.success(self.job, n)

    def failure(self, n: int = 1) -> None:
        self.failed += n
        self.jobs.failure(self.job, n)

    def end(self, ok: bool = True) -> None:  # noqa: FBT001, FBT002
        self.jobs.end(self.job, ok)

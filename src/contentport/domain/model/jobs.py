"""Progress-tracking job owned by the job service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from contentport.domain.model.enums import JobStatus

if TYPE_CHECKING:
    from datetime import datetime


def new_job_id() -> str:
    return uuid4().hex


@dataclass(eq=False, kw_only=True)
class Job:
    id: str = field(default_factory=new_job_id)
    total: int = 0
    good: int = 0
    bad: int = 0
    status: JobStatus = JobStatus.RUNNING
    started_at: datetime | None = None
    ended_at: datetime | None = None

    @property
    def processed(self) -> int:
        return self.good + self.bad

    @property
    def is_running(self) -> bool:
        return self.status == JobStatus.RUNNING

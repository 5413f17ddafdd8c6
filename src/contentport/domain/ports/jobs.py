"""Port for the job/progress service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from contentport.domain.model import Job


@runtime_checkable
class JobService(Protocol):
    def start(self) -> Job: ...

    def set_total(self, job: Job, total: int) -> None: ...

    def success(self, job: Job, n: int = 1) -> None: ...

    def failure(self, job: Job, n: int = 1) -> None: ...

    def end(self, job: Job, ok: bool = True) -> None: ...  # noqa: FBT001, FBT002

    def find_by_id(self, job_id: str) -> Job | None: ...

"""Repository protocol (port) for the Jobs bounded context."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol, runtime_checkable

from jobs.domain import Job, JobId, JobStatus


@runtime_checkable
class IJobRepository(Protocol):
    """Repository for Job persistence."""

    async def save(self, job: Job) -> None:
        """Insert a new job or replace an existing one."""
        ...

    async def get_by_id(self, job_id: JobId) -> Job | None:
        """Retrieve a job by ID, or None if it does not exist."""
        ...

    async def list_by_user(
        self, user_id: str, statuses: Iterable[JobStatus] | None = None
    ) -> list[Job]:
        """List a user's jobs, newest first.

        Args:
            user_id: Owner of the jobs
            statuses: Only include jobs in these statuses (all when None)
        """
        ...

    async def delete_by_id(self, job_id: JobId) -> bool:
        """Delete a job. Returns False if it did not exist."""
        ...

    async def delete_finished_before(self, cutoff: datetime) -> int:
        """Delete terminal jobs created before cutoff.

        Returns:
            Number of jobs deleted
        """
        ...

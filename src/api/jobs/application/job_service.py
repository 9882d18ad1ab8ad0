"""Application service for bulk member jobs."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from datetime import UTC, datetime, timedelta

from jobs.application.observability import DefaultJobServiceProbe, JobServiceProbe
from jobs.domain import (
    ACTIVE_STATUSES,
    Job,
    JobId,
    JobResultItem,
    JobStatus,
    JobType,
)
from jobs.ports import IJobRepository, MemberItemError, MemberOperations
from shared_kernel.authorization import Principal

DEFAULT_PROGRESS_INTERVAL = 5
DEFAULT_RETENTION = timedelta(days=7)

# Import row 1 is the header, so data rows are numbered from 2.
FIRST_DATA_ROW = 2

_ItemStep = tuple[str, str, Callable[[], Awaitable[str]]]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JobService:
    """Creates, runs and manages bulk jobs.

    Processing methods run item by item, re-reading the job before each item
    so a cancellation takes effect at the next item boundary. Per-item
    failures are recorded on the job; any other error fails the whole job.
    """

    def __init__(
        self,
        job_repository: IJobRepository,
        member_operations: MemberOperations | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], datetime] = _utc_now,
        probe: JobServiceProbe | None = None,
    ) -> None:
        if progress_interval < 1:
            raise ValueError("progress_interval must be at least 1")
        self._job_repository = job_repository
        self._member_operations = member_operations
        self._progress_interval = progress_interval
        self._retention = retention
        self._clock = clock
        self._probe = probe or DefaultJobServiceProbe()

    async def create_job(
        self, job_type: JobType, user_id: str, username: str, total_items: int
    ) -> Job:
        """Create and store a PENDING job."""
        job = Job.create(job_type, user_id, username, total_items, now=self._clock())
        await self._job_repository.save(job)
        self._probe.job_created(job.id.value, job_type.value, user_id, total_items)
        return job

    async def get_job(self, job_id: JobId) -> Job | None:
        return await self._job_repository.get_by_id(job_id)

    async def list_jobs(self, user_id: str) -> list[Job]:
        """All of a user's jobs, newest first."""
        return await self._job_repository.list_by_user(user_id)

    async def list_active_jobs(self, user_id: str) -> list[Job]:
        """A user's PENDING and IN_PROGRESS jobs, newest first."""
        return await self._job_repository.list_by_user(user_id, ACTIVE_STATUSES)

    async def cancel_job(self, job_id: JobId, user_id: str) -> bool:
        """Cancel a job the user owns.

        Returns:
            False if the job does not exist, belongs to someone else or has
            already finished; True once it is CANCELLED
        """
        job = await self._job_repository.get_by_id(job_id)
        if job is None or not job.is_owned_by(user_id) or job.is_terminal:
            return False

        job.cancel(self._clock())
        await self._job_repository.save(job)
        self._probe.job_cancelled(job_id.value, user_id)
        return True

    async def delete_job(self, job_id: JobId, user_id: str) -> bool:
        """Remove a finished job the user owns from history.

        Returns:
            False if the job does not exist, belongs to someone else or is
            still PENDING / IN_PROGRESS
        """
        job = await self._job_repository.get_by_id(job_id)
        if job is None or not job.is_owned_by(user_id) or not job.is_terminal:
            return False

        deleted = await self._job_repository.delete_by_id(job_id)
        if deleted:
            self._probe.job_deleted(job_id.value, user_id)
        return deleted

    async def process_bulk_delete(
        self, job_id: JobId, member_ids: Sequence[str], principal: Principal
    ) -> Job | None:
        """Delete each member in turn, recording one result per id."""

        def step(member_id: str) -> _ItemStep:
            async def run() -> str:
                await self._operations().delete_member(member_id, principal)
                return f"Member ID: {member_id}"

            return member_id, f"Member ID: {member_id}", run

        return await self._process(
            job_id, len(member_ids), (step(member_id) for member_id in member_ids)
        )

    async def process_member_import(
        self,
        job_id: JobId,
        rows: Sequence[Mapping[str, str | None]],
        principal: Principal,
    ) -> Job | None:
        """Register a member per parsed row, recording one result per row."""

        def step(row_number: int, row: Mapping[str, str | None]) -> _ItemStep:
            async def run() -> str:
                await self._operations().import_member(row, principal)
                return f"Row {row_number}: {row.get('email')}"

            return str(row_number), f"Row {row_number}", run

        return await self._process(
            job_id,
            len(rows),
            (step(number, row) for number, row in enumerate(rows, FIRST_DATA_ROW)),
        )

    def _operations(self) -> MemberOperations:
        if self._member_operations is None:
            raise RuntimeError("JobService was built without member operations")
        return self._member_operations

    async def cleanup_old_jobs(self, now: datetime | None = None) -> int:
        """Delete finished jobs older than the retention period."""
        cutoff = (now or self._clock()) - self._retention
        deleted = await self._job_repository.delete_finished_before(cutoff)
        self._probe.jobs_cleaned_up(deleted)
        return deleted

    async def _process(
        self, job_id: JobId, total: int, steps: Iterable[_ItemStep]
    ) -> Job | None:
        job = await self._job_repository.get_by_id(job_id)
        if job is None:
            self._probe.job_not_found(job_id.value)
            return None
        if job.status == JobStatus.CANCELLED:
            self._probe.job_stopped_after_cancel(job_id.value, 0)
            return job
        if job.is_terminal:
            self._probe.job_already_finished(job_id.value, job.status.value)
            return job

        job.total_items = total
        job.start(self._clock())
        await self._job_repository.save(job)
        self._probe.job_started(job_id.value, total)

        successful: list[JobResultItem] = []
        failed: list[JobResultItem] = []
        processed = 0
        try:
            for item_id, label, action in steps:
                current = await self._job_repository.get_by_id(job_id)
                if current is None or current.status == JobStatus.CANCELLED:
                    self._probe.job_stopped_after_cancel(job_id.value, processed)
                    return current
                job = current

                try:
                    description = await action()
                except MemberItemError as e:
                    failed.append(JobResultItem(item_id, label, str(e)))
                    self._probe.item_failed(job_id.value, item_id, str(e))
                else:
                    successful.append(JobResultItem(item_id, description))

                processed += 1
                if processed % self._progress_interval == 0 or processed == total:
                    job.record_progress(processed, successful, failed)
                    await self._job_repository.save(job)
                    self._probe.job_progress(job_id.value, processed, total)

            job.record_progress(processed, successful, failed)
            job.complete(self._clock())
            await self._job_repository.save(job)
        except Exception as e:
            self._probe.job_failed(job_id.value, str(e))
            job.fail(str(e), self._clock())
            await self._job_repository.save(job)
            return job

        self._probe.job_completed(job_id.value, len(successful), len(failed))
        return job

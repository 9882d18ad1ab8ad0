"""Job aggregate."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from jobs.domain.value_objects import JobId, JobStatus, JobType


class InvalidJobTransitionError(ValueError):
    """Raised when a job is moved to a status its current status does not allow."""

    def __init__(self, job_id: str, current: JobStatus, target: JobStatus) -> None:
        self.job_id = job_id
        self.current = current
        self.target = target
        super().__init__(f"Job {job_id} cannot move from {current} to {target}")


_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset(
        {JobStatus.IN_PROGRESS, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
    JobStatus.IN_PROGRESS: frozenset(
        {JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}
    ),
}


@dataclass(frozen=True)
class JobResultItem:
    """Outcome for one item of a bulk job.

    Attributes:
        item_id: Member id, or the spreadsheet row number for imports
        description: Human readable label (e.g. "Row 3: jane@example.com")
        error_message: None when the item succeeded
    """

    item_id: str
    description: str
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error_message is None


@dataclass
class Job:
    """A bulk operation and its progress.

    Progress is an integer percentage, processed * 100 // total, and is
    forced to 100 on completion.
    """

    id: JobId
    type: JobType
    user_id: str
    username: str
    total_items: int
    created_at: datetime
    status: JobStatus = JobStatus.PENDING
    processed_items: int = 0
    progress: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    successful_results: list[JobResultItem] = field(default_factory=list)
    failed_results: list[JobResultItem] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Job):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def create(
        cls,
        job_type: JobType,
        user_id: str,
        username: str,
        total_items: int,
        now: datetime,
    ) -> Job:
        """Create a new PENDING job."""
        return cls(
            id=JobId.generate(),
            type=job_type,
            user_id=user_id,
            username=username,
            total_items=total_items,
            created_at=now,
        )

    @property
    def successful_items(self) -> int:
        return len(self.successful_results)

    @property
    def failed_items(self) -> int:
        return len(self.failed_results)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def start(self, now: datetime) -> None:
        self._move_to(JobStatus.IN_PROGRESS)
        self.started_at = now

    def record_progress(
        self,
        processed: int,
        successful: Sequence[JobResultItem],
        failed: Sequence[JobResultItem],
    ) -> None:
        """Replace the running totals with the latest snapshot."""
        self.processed_items = processed
        self.successful_results = list(successful)
        self.failed_results = list(failed)
        self.progress = (processed * 100) // self.total_items if self.total_items else 0

    def complete(self, now: datetime) -> None:
        self._move_to(JobStatus.COMPLETED)
        self.progress = 100
        self.completed_at = now

    def fail(self, error_message: str, now: datetime) -> None:
        self._move_to(JobStatus.FAILED)
        self.error_message = error_message
        self.completed_at = now

    def cancel(self, now: datetime) -> None:
        self._move_to(JobStatus.CANCELLED)
        self.completed_at = now

    def _move_to(self, target: JobStatus) -> None:
        if target not in _TRANSITIONS.get(self.status, frozenset()):
            raise InvalidJobTransitionError(self.id.value, self.status, target)
        self.status = target

"""Domain layer for the Jobs bounded context."""

from jobs.domain.job import InvalidJobTransitionError, Job, JobResultItem
from jobs.domain.value_objects import ACTIVE_STATUSES, JobId, JobStatus, JobType

__all__ = [
    "ACTIVE_STATUSES",
    "InvalidJobTransitionError",
    "Job",
    "JobId",
    "JobResultItem",
    "JobStatus",
    "JobType",
]

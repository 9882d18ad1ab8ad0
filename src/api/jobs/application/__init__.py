"""Application layer for the Jobs bounded context."""

from jobs.application.job_service import FIRST_DATA_ROW, JobService

__all__ = ["FIRST_DATA_ROW", "JobService"]

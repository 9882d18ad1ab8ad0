"""Infrastructure layer for the Jobs bounded context."""

from jobs.infrastructure.member_operations import PipelineMemberOperations
from jobs.infrastructure.models import JobModel
from jobs.infrastructure.repository import JobRepository

__all__ = ["JobModel", "JobRepository", "PipelineMemberOperations"]

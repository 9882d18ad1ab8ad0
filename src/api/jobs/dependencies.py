"""Dependency wiring for the Jobs bounded context."""

from __future__ import annotations

from datetime import timedelta
from typing import Annotated

from fastapi import Depends

from infrastructure.database.dependencies import get_sessionmaker
from infrastructure.settings import get_job_settings
from jobs.application import JobService
from jobs.infrastructure import JobRepository, PipelineMemberOperations
from jobs.ports import IJobRepository, MemberOperations
from members.application import MemberRequestPipeline
from members.dependencies import get_member_pipeline


def get_job_repository() -> IJobRepository:
    """Get JobRepository bound to the shared session factory."""
    return JobRepository(session_factory=get_sessionmaker())


def build_job_service(
    job_repo: IJobRepository, member_operations: MemberOperations | None = None
) -> JobService:
    """Build a JobService configured from job settings.

    Without member operations the service can only manage job records
    (listing, cancelling, cleanup), not process them.
    """
    settings = get_job_settings()
    return JobService(
        job_repository=job_repo,
        member_operations=member_operations,
        progress_interval=settings.progress_interval,
        retention=timedelta(days=settings.retention_days),
    )


def get_job_service(
    job_repo: Annotated[IJobRepository, Depends(get_job_repository)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
) -> JobService:
    """Get a JobService whose items run through the member pipeline."""
    return build_job_service(job_repo, PipelineMemberOperations(pipeline))

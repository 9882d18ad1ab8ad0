"""PostgreSQL implementation of IJobRepository."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from jobs.domain import (
    ACTIVE_STATUSES,
    Job,
    JobId,
    JobResultItem,
    JobStatus,
    JobType,
)
from jobs.infrastructure.models import JobModel
from jobs.ports import IJobRepository


class JobRepository(IJobRepository):
    """PostgreSQL-backed repository for Job aggregates.

    Each call runs in its own session, so a job being processed in the
    background never shares a session with the request that started it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def save(self, job: Job) -> None:
        async with self._session_factory() as session, session.begin():
            model = await session.get(JobModel, job.id.value)
            if model is None:
                model = JobModel(id=job.id.value)
                session.add(model)
            self._copy_onto(job, model)

    async def get_by_id(self, job_id: JobId) -> Job | None:
        async with self._session_factory() as session:
            model = await session.get(JobModel, job_id.value)
            return self._to_domain(model) if model is not None else None

    async def list_by_user(
        self, user_id: str, statuses: Iterable[JobStatus] | None = None
    ) -> list[Job]:
        stmt = select(JobModel).where(JobModel.user_id == user_id)
        if statuses is not None:
            stmt = stmt.where(JobModel.status.in_([s.value for s in statuses]))
        stmt = stmt.order_by(JobModel.created_at.desc())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_domain(model) for model in result.scalars().all()]

    async def delete_by_id(self, job_id: JobId) -> bool:
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                delete(JobModel).where(JobModel.id == job_id.value)
            )
        return bool(result.rowcount)

    async def delete_finished_before(self, cutoff: datetime) -> int:
        active = [status.value for status in ACTIVE_STATUSES]
        async with self._session_factory() as session, session.begin():
            result = await session.execute(
                delete(JobModel).where(
                    JobModel.created_at < cutoff,
                    JobModel.status.not_in(active),
                )
            )
        return int(result.rowcount or 0)

    @staticmethod
    def _copy_onto(job: Job, model: JobModel) -> None:
        model.type = job.type.value
        model.status = job.status.value
        model.user_id = job.user_id
        model.username = job.username
        model.total_items = job.total_items
        model.processed_items = job.processed_items
        model.progress = job.progress
        model.created_at = job.created_at
        model.started_at = job.started_at
        model.completed_at = job.completed_at
        model.error_message = job.error_message
        model.successful_results = [_item_to_dict(i) for i in job.successful_results]
        model.failed_results = [_item_to_dict(i) for i in job.failed_results]

    @staticmethod
    def _to_domain(model: JobModel) -> Job:
        return Job(
            id=JobId(value=model.id),
            type=JobType(model.type),
            status=JobStatus(model.status),
            user_id=model.user_id,
            username=model.username,
            total_items=model.total_items,
            processed_items=model.processed_items,
            progress=model.progress,
            created_at=model.created_at,
            started_at=model.started_at,
            completed_at=model.completed_at,
            error_message=model.error_message,
            successful_results=[
                _item_from_dict(d) for d in model.successful_results or []
            ],
            failed_results=[_item_from_dict(d) for d in model.failed_results or []],
        )


def _item_to_dict(item: JobResultItem) -> dict[str, Any]:
    return {
        "item_id": item.item_id,
        "description": item.description,
        "error_message": item.error_message,
    }


def _item_from_dict(data: dict[str, Any]) -> JobResultItem:
    return JobResultItem(
        item_id=data["item_id"],
        description=data.get("description", ""),
        error_message=data.get("error_message"),
    )

"""HTTP routes for the Jobs bounded context.

Bulk operations return 202 with the PENDING job; processing continues in the
background and callers poll the job for progress.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from jobs.application import JobService
from jobs.dependencies import get_job_service
from jobs.domain import Job, JobId, JobType
from jobs.presentation.models import (
    BulkDeleteRequest,
    JobResponse,
    MemberImportRequest,
)
from members.dependencies import get_principal
from shared_kernel.authorization import Principal

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _owner_id(principal: Principal) -> str:
    return principal.user_id or principal.username


def _not_found(job_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND, detail=f"Job {job_id} not found"
    )


async def _load_owned(service: JobService, job_id: str, principal: Principal) -> Job:
    """Fetch a job the caller owns; other users' jobs are reported as missing."""
    try:
        parsed = JobId.from_string(job_id)
    except ValueError as e:
        raise _not_found(job_id) from e
    job = await service.get_job(parsed)
    if job is None or not job.is_owned_by(_owner_id(principal)):
        raise _not_found(job_id)
    return job


@router.get("")
async def list_jobs(
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
    active: bool = False,
) -> list[JobResponse]:
    """List the caller's jobs, newest first."""
    owner = _owner_id(principal)
    jobs = (
        await service.list_active_jobs(owner)
        if active
        else await service.list_jobs(owner)
    )
    return [JobResponse.from_domain(job) for job in jobs]


@router.get("/{job_id}")
async def get_job(
    job_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    """Fetch one of the caller's jobs."""
    return JobResponse.from_domain(await _load_owned(service, job_id, principal))


@router.post("/{job_id}/cancel")
async def cancel_job(
    job_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    """Cancel a PENDING or IN_PROGRESS job."""
    job = await _load_owned(service, job_id, principal)
    if not await service.cancel_job(job.id, _owner_id(principal)):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job {job_id} has already finished",
        )
    return JobResponse.from_domain(await _load_owned(service, job_id, principal))


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> None:
    """Remove a finished job from history."""
    job = await _load_owned(service, job_id, principal)
    if not await service.delete_job(job.id, _owner_id(principal)):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job {job_id} is still running",
        )


@router.post("/bulk-delete", status_code=status.HTTP_202_ACCEPTED)
async def start_bulk_delete(
    request: BulkDeleteRequest,
    background_tasks: BackgroundTasks,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    """Start deleting the given members in the background."""
    job = await service.create_job(
        JobType.BULK_DELETE,
        _owner_id(principal),
        principal.username,
        len(request.member_ids),
    )
    background_tasks.add_task(
        service.process_bulk_delete, job.id, list(request.member_ids), principal
    )
    return JobResponse.from_domain(job)


@router.post("/member-import", status_code=status.HTTP_202_ACCEPTED)
async def start_member_import(
    request: MemberImportRequest,
    background_tasks: BackgroundTasks,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[JobService, Depends(get_job_service)],
) -> JobResponse:
    """Start registering members from parsed rows in the background."""
    rows = [row.model_dump() for row in request.rows]
    job = await service.create_job(
        JobType.EXCEL_UPLOAD, _owner_id(principal), principal.username, len(rows)
    )
    background_tasks.add_task(service.process_member_import, job.id, rows, principal)
    return JobResponse.from_domain(job)

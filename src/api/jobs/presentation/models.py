"""Pydantic models for Jobs API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from jobs.domain import Job, JobResultItem


class BulkDeleteRequest(BaseModel):
    """Request body for deleting many members in one job."""

    member_ids: list[str] = Field(..., min_length=1, description="Members to delete")


class ImportRow(BaseModel):
    """One parsed spreadsheet row."""

    name: str | None = None
    email: str | None = None
    phone_number: str | None = None


class MemberImportRequest(BaseModel):
    """Request body for importing members; rows exclude the header."""

    rows: list[ImportRow] = Field(..., min_length=1)


class JobResultItemResponse(BaseModel):
    item_id: str
    description: str
    error_message: str | None = None

    @classmethod
    def from_domain(cls, item: JobResultItem) -> JobResultItemResponse:
        return cls(
            item_id=item.item_id,
            description=item.description,
            error_message=item.error_message,
        )


class JobResponse(BaseModel):
    """Response model for a job and its progress."""

    id: str = Field(..., description="Job ID (ULID format)")
    type: str
    status: str
    username: str
    total_items: int
    processed_items: int
    successful_items: int
    failed_items: int
    progress: int = Field(..., description="Percentage, 0-100")
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    error_message: str | None = None
    successful_results: list[JobResultItemResponse] = Field(default_factory=list)
    failed_results: list[JobResultItemResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, job: Job) -> JobResponse:
        """Convert domain Job aggregate to API response."""
        return cls(
            id=job.id.value,
            type=job.type.value,
            status=job.status.value,
            username=job.username,
            total_items=job.total_items,
            processed_items=job.processed_items,
            successful_items=job.successful_items,
            failed_items=job.failed_items,
            progress=job.progress,
            created_at=job.created_at,
            started_at=job.started_at,
            completed_at=job.completed_at,
            error_message=job.error_message,
            successful_results=[
                JobResultItemResponse.from_domain(i) for i in job.successful_results
            ],
            failed_results=[
                JobResultItemResponse.from_domain(i) for i in job.failed_results
            ],
        )

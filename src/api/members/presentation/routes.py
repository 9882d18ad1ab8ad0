"""HTTP routes for the Members bounded context."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from members.application import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    MemberRequestPipeline,
)
from members.dependencies import get_member_pipeline, get_principal
from members.domain import PipelineState
from members.ports import PipelineError, ValidationError
from members.presentation.models import (
    MemberPageResponse,
    MemberPayload,
    MemberResponse,
)
from shared_kernel.authorization import Principal

router = APIRouter(prefix="/members", tags=["members"])

_STATUS_BY_STATE = {
    PipelineState.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    PipelineState.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PipelineState.CONFLICT: status.HTTP_409_CONFLICT,
    PipelineState.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    PipelineState.PERSIST_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PipelineState.DEPENDENCY_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _http_error(error: PipelineError) -> HTTPException:
    """Translate a pipeline failure into an HTTP error."""
    code = _STATUS_BY_STATE.get(error.state, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(error, ValidationError):
        return HTTPException(status_code=code, detail={"errors": error.errors})
    if error.state == PipelineState.PERSIST_FAILED:
        return HTTPException(status_code=code, detail="Failed to persist member")
    if error.state == PipelineState.DEPENDENCY_UNAVAILABLE:
        return HTTPException(status_code=code, detail="Member store unavailable")
    return HTTPException(status_code=code, detail=str(error))


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


@router.get("")
async def list_members(
    principal: Annotated[Principal, Depends(get_principal)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
    page: Annotated[int, Query(description="Zero-based page number")] = 0,
    size: Annotated[int, Query(description="Page size (1-100)")] = DEFAULT_PAGE_SIZE,
    sort: Annotated[str, Query(description="field,direction")] = DEFAULT_SORT,
    search: Annotated[str | None, Query(description="Name, email or phone")] = None,
) -> MemberPageResponse:
    """List members a page at a time."""
    try:
        result = await pipeline.list_members(
            principal, page=page, size=size, sort=sort, search=search
        )
    except PipelineError as e:
        raise _http_error(e) from e
    return MemberPageResponse.from_page(result)


@router.get("/{member_id}")
async def get_member(
    member_id: str,
    principal: Annotated[Principal, Depends(get_principal)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
) -> MemberResponse:
    """Fetch one member."""
    try:
        member = await pipeline.get_member(member_id, principal)
    except PipelineError as e:
        raise _http_error(e) from e
    return MemberResponse.from_domain(member)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation failed"},
        403: {"description": "Missing member:create"},
        409: {"description": "Email already registered"},
        503: {"description": "Member store unavailable"},
    },
)
async def register_member(
    payload: MemberPayload,
    request: Request,
    principal: Annotated[Principal, Depends(get_principal)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
) -> MemberResponse:
    """Register a new member."""
    try:
        member = await pipeline.register_member(
            payload.to_request(), principal, ip_address=_client_ip(request)
        )
    except PipelineError as e:
        raise _http_error(e) from e
    return MemberResponse.from_domain(member)


@router.put("/{member_id}")
async def update_member(
    member_id: str,
    payload: MemberPayload,
    request: Request,
    principal: Annotated[Principal, Depends(get_principal)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
) -> MemberResponse:
    """Replace a member's fields."""
    try:
        member = await pipeline.update_member(
            member_id, payload.to_request(), principal, ip_address=_client_ip(request)
        )
    except PipelineError as e:
        raise _http_error(e) from e
    return MemberResponse.from_domain(member)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: str,
    request: Request,
    principal: Annotated[Principal, Depends(get_principal)],
    pipeline: Annotated[MemberRequestPipeline, Depends(get_member_pipeline)],
) -> None:
    """Delete a member."""
    try:
        await pipeline.delete_member(
            member_id, principal, ip_address=_client_ip(request)
        )
    except PipelineError as e:
        raise _http_error(e) from e

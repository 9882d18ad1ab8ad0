"""Adapter running bulk job items through the member request pipeline."""

from __future__ import annotations

from collections.abc import Mapping

from jobs.ports import MemberItemError, MemberOperations
from members.application import MemberRequest, MemberRequestPipeline
from members.ports import PipelineError
from shared_kernel.authorization import Principal


class PipelineMemberOperations(MemberOperations):
    """MemberOperations backed by MemberRequestPipeline.

    Every item is a full pipeline request, so each one is validated,
    authorized and audited exactly like an HTTP request. Pipeline failures
    become MemberItemError; anything else propagates and fails the job.
    """

    def __init__(self, pipeline: MemberRequestPipeline) -> None:
        self._pipeline = pipeline

    async def delete_member(self, member_id: str, principal: Principal) -> None:
        try:
            await self._pipeline.delete_member(member_id, principal)
        except PipelineError as e:
            raise MemberItemError(str(e)) from e

    async def import_member(
        self, row: Mapping[str, str | None], principal: Principal
    ) -> str:
        request = MemberRequest(
            name=row.get("name"),
            email=row.get("email"),
            phone_number=row.get("phone_number"),
        )
        try:
            member = await self._pipeline.register_member(request, principal)
        except PipelineError as e:
            raise MemberItemError(str(e)) from e
        return member.id.value

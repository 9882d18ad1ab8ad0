"""Dependency wiring for the Members bounded context."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from audit.dependencies import get_audit_sink
from audit.ports import AuditSink
from iam.dependencies.authentication import get_current_principal
from iam.dependencies.user import get_field_validator, get_permission_evaluator
from infrastructure.database.dependencies import get_sessionmaker
from members.application import (
    EntityAssembler,
    MemberRequestPipeline,
    UniquenessChecker,
)
from members.application.observability import (
    DefaultMemberPipelineProbe,
    MemberPipelineProbe,
)
from members.infrastructure import MemberRepository
from members.ports import IMemberRepository
from shared_kernel.authorization import PermissionEvaluator, Principal
from shared_kernel.observability_context import ObservationContext
from shared_kernel.validation import FieldValidator


def get_member_repository() -> IMemberRepository:
    """Get MemberRepository bound to the shared session factory."""
    return MemberRepository(session_factory=get_sessionmaker())


def get_principal(
    principal: Annotated[Principal, Depends(get_current_principal)],
) -> Principal:
    """The authenticated caller for member routes."""
    return principal


def get_member_pipeline_probe(request: Request) -> MemberPipelineProbe:
    """Get a pipeline probe bound to the current request."""
    context = ObservationContext(
        request_id=request.headers.get("X-Request-ID"),
        client_ip=request.client.host if request.client else None,
    )
    return DefaultMemberPipelineProbe().with_context(context)


def get_member_pipeline(
    repository: Annotated[IMemberRepository, Depends(get_member_repository)],
    validator: Annotated[FieldValidator, Depends(get_field_validator)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    audit_sink: Annotated[AuditSink, Depends(get_audit_sink)],
    probe: Annotated[MemberPipelineProbe, Depends(get_member_pipeline_probe)],
) -> MemberRequestPipeline:
    """Get MemberRequestPipeline instance.

    Args:
        repository: Member repository
        validator: Shared field validator
        evaluator: Shared permission evaluator
        audit_sink: Process-wide audit emitter
        probe: Request-scoped pipeline probe

    Returns:
        MemberRequestPipeline instance
    """
    return MemberRequestPipeline(
        repository=repository,
        validator=validator,
        uniqueness=UniquenessChecker(repository),
        evaluator=evaluator,
        assembler=EntityAssembler(),
        audit_sink=audit_sink,
        probe=probe,
    )

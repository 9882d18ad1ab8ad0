"""Protocol for member pipeline observability.

Defines the interface for domain probes that capture every state transition
of a member request and how the request ended.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class MemberPipelineProbe(Protocol):
    """Domain probe for member pipeline operations."""

    def state_changed(self, operation: str, previous: str, current: str) -> None:
        """Record a transition between pipeline states."""
        ...

    def request_completed(self, operation: str, member_id: str, principal: str) -> None:
        """Record that a mutating request reached COMPLETED."""
        ...

    def request_failed(
        self, operation: str, state: str, principal: str, error: str
    ) -> None:
        """Record that a request ended in a failure state."""
        ...

    def unexpected_failure_state(
        self, operation: str, previous: str, current: str
    ) -> None:
        """Record a failure state reached through an undeclared transition."""
        ...

    def audit_failed(self, operation: str, state: str, error: str) -> None:
        """Record that the audit entry for a finished request was lost."""
        ...

    def members_listed(self, principal: str, count: int, total: int) -> None:
        """Record that a page of members was read."""
        ...

    def with_context(self, context: ObservationContext) -> MemberPipelineProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultMemberPipelineProbe:
    """Default implementation of MemberPipelineProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultMemberPipelineProbe:
        """Create a new probe with observation context bound."""
        return DefaultMemberPipelineProbe(logger=self._logger, context=context)

    def state_changed(self, operation: str, previous: str, current: str) -> None:
        self._logger.debug(
            "member_pipeline_state_changed",
            operation=operation,
            previous=previous,
            current=current,
            **self._get_context_kwargs(),
        )

    def request_completed(self, operation: str, member_id: str, principal: str) -> None:
        """Record that a mutating request reached COMPLETED."""
        self._logger.info(
            "member_request_completed",
            operation=operation,
            member_id=member_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def request_failed(
        self, operation: str, state: str, principal: str, error: str
    ) -> None:
        """Record that a request ended in a failure state."""
        log = (
            self._logger.error
            if state in ("PERSIST_FAILED", "DEPENDENCY_UNAVAILABLE")
            else self._logger.warning
        )
        log(
            "member_request_failed",
            operation=operation,
            state=state,
            principal=principal,
            error=error,
            **self._get_context_kwargs(),
        )

    def unexpected_failure_state(
        self, operation: str, previous: str, current: str
    ) -> None:
        self._logger.error(
            "member_pipeline_unexpected_failure_state",
            operation=operation,
            previous=previous,
            current=current,
            **self._get_context_kwargs(),
        )

    def audit_failed(self, operation: str, state: str, error: str) -> None:
        """Record that the audit entry for a finished request was lost."""
        self._logger.error(
            "member_audit_failed",
            operation=operation,
            state=state,
            error=error,
            **self._get_context_kwargs(),
        )

    def members_listed(self, principal: str, count: int, total: int) -> None:
        self._logger.debug(
            "members_listed",
            principal=principal,
            count=count,
            total=total,
            **self._get_context_kwargs(),
        )

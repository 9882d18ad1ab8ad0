"""Protocol for role application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RoleServiceProbe(Protocol):
    """Domain probe for role administration."""

    def role_created(self, role_id: str, name: str, principal: str) -> None:
        """Record that a role was created."""
        ...

    def role_updated(self, role_id: str, name: str, principal: str) -> None:
        """Record that a role's name, description or permissions changed."""
        ...

    def role_deleted(self, role_id: str, name: str, principal: str) -> None:
        """Record that a role was deleted."""
        ...

    def role_rejected(self, name: str, reason: str) -> None:
        """Record that a role write was refused."""
        ...

    def with_context(self, context: ObservationContext) -> RoleServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRoleServiceProbe:
    """Default implementation of RoleServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultRoleServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultRoleServiceProbe(logger=self._logger, context=context)

    def role_created(self, role_id: str, name: str, principal: str) -> None:
        self._logger.info(
            "role_created",
            role_id=role_id,
            name=name,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_updated(self, role_id: str, name: str, principal: str) -> None:
        self._logger.info(
            "role_updated",
            role_id=role_id,
            name=name,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_deleted(self, role_id: str, name: str, principal: str) -> None:
        self._logger.info(
            "role_deleted",
            role_id=role_id,
            name=name,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def role_rejected(self, name: str, reason: str) -> None:
        self._logger.warning(
            "role_rejected", name=name, reason=reason, **self._get_context_kwargs()
        )

"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

from shared_kernel.validation import mask_email

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_registered(self, user_id: str, username: str, email: str) -> None:
        """Record that a new user account was created."""
        ...

    def user_registration_failed(self, username: str, error: str) -> None:
        """Record that registration was rejected or failed."""
        ...

    def role_assigned(self, user_id: str, role: str) -> None:
        """Record that a role was granted to a user."""
        ...

    def role_revoked(self, user_id: str, role: str) -> None:
        """Record that a role was revoked from a user."""
        ...

    def user_enabled_changed(self, user_id: str, enabled: bool) -> None:
        """Record that an account was enabled or disabled."""
        ...

    def user_unlocked(self, user_id: str) -> None:
        """Record that an administrator cleared a lockout."""
        ...

    def users_listed(self, principal: str, count: int, total: int) -> None:
        """Record that a page of users was read."""
        ...

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        """Record that account fields were changed."""
        ...

    def user_deleted(self, user_id: str, principal: str) -> None:
        """Record that an administrator deleted an account."""
        ...

    def password_changed(self, user_id: str) -> None:
        """Record that a user replaced their password."""
        ...

    def password_change_failed(self, user_id: str, reason: str) -> None:
        """Record that a password change was refused."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog.

    Emails are masked before they reach the log.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_registered(self, user_id: str, username: str, email: str) -> None:
        """Record that a new user account was created."""
        self._logger.info(
            "user_registered",
            user_id=user_id,
            username=username,
            email=mask_email(email),
            **self._get_context_kwargs(),
        )

    def user_registration_failed(self, username: str, error: str) -> None:
        """Record that registration was rejected or failed."""
        self._logger.warning(
            "user_registration_failed",
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

    def role_assigned(self, user_id: str, role: str) -> None:
        self._logger.info(
            "role_assigned", user_id=user_id, role=role, **self._get_context_kwargs()
        )

    def role_revoked(self, user_id: str, role: str) -> None:
        self._logger.info(
            "role_revoked", user_id=user_id, role=role, **self._get_context_kwargs()
        )

    def user_enabled_changed(self, user_id: str, enabled: bool) -> None:
        self._logger.info(
            "user_enabled_changed",
            user_id=user_id,
            enabled=enabled,
            **self._get_context_kwargs(),
        )

    def user_unlocked(self, user_id: str) -> None:
        self._logger.info(
            "user_unlocked", user_id=user_id, **self._get_context_kwargs()
        )

    def users_listed(self, principal: str, count: int, total: int) -> None:
        self._logger.debug(
            "users_listed",
            principal=principal,
            count=count,
            total=total,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: str, fields: list[str]) -> None:
        self._logger.info(
            "user_updated", user_id=user_id, fields=fields, **self._get_context_kwargs()
        )

    def user_deleted(self, user_id: str, principal: str) -> None:
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            principal=principal,
            **self._get_context_kwargs(),
        )

    def password_changed(self, user_id: str) -> None:
        self._logger.info(
            "password_changed", user_id=user_id, **self._get_context_kwargs()
        )

    def password_change_failed(self, user_id: str, reason: str) -> None:
        """Record that a password change was refused."""
        self._logger.warning(
            "password_change_failed",
            user_id=user_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

"""Protocol for authentication observability.

Defines the interface for domain probes that capture login and principal
resolution events.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AuthenticationProbe(Protocol):
    """Domain probe for authentication operations."""

    def user_authenticated(self, user_id: str, username: str) -> None:
        """Record successful login."""
        ...

    def authentication_failed(self, username: str, reason: str) -> None:
        """Record a rejected login.

        Args:
            username: Normalized username that was tried
            reason: invalid_credentials, locked or disabled
        """
        ...

    def account_locked(self, user_id: str, username: str, failed_attempts: int) -> None:
        """Record that repeated failures locked an account."""
        ...

    def expired_lock_released(self, user_id: str, username: str) -> None:
        """Record that an expired lock was cleared on access."""
        ...

    def principal_resolved(self, user_id: str, role_count: int) -> None:
        """Record that a user's roles were resolved into a principal."""
        ...

    def login_audit_failed(self, username: str, error: str) -> None:
        """Record that the audit entry for a login attempt was lost."""
        ...

    def with_context(self, context: ObservationContext) -> AuthenticationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAuthenticationProbe:
    """Default implementation of AuthenticationProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAuthenticationProbe:
        """Create a new probe with observation context bound."""
        return DefaultAuthenticationProbe(logger=self._logger, context=context)

    def user_authenticated(self, user_id: str, username: str) -> None:
        """Record successful login."""
        self._logger.info(
            "user_authenticated",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def authentication_failed(self, username: str, reason: str) -> None:
        """Record a rejected login."""
        self._logger.warning(
            "authentication_failed",
            username=username,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def account_locked(self, user_id: str, username: str, failed_attempts: int) -> None:
        """Record that repeated failures locked an account."""
        self._logger.warning(
            "account_locked",
            user_id=user_id,
            username=username,
            failed_attempts=failed_attempts,
            **self._get_context_kwargs(),
        )

    def expired_lock_released(self, user_id: str, username: str) -> None:
        """Record that an expired lock was cleared on access."""
        self._logger.info(
            "expired_lock_released",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def principal_resolved(self, user_id: str, role_count: int) -> None:
        self._logger.debug(
            "principal_resolved",
            user_id=user_id,
            role_count=role_count,
            **self._get_context_kwargs(),
        )

    def login_audit_failed(self, username: str, error: str) -> None:
        self._logger.error(
            "login_audit_failed",
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

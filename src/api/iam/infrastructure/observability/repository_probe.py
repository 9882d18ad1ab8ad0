"""Domain probe for IAM repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user and role repository operations.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations."""

    def user_saved(self, user_id: str, username: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was deleted."""
        ...

    def user_not_found(self, lookup: str) -> None:
        """Record that a user lookup found nothing."""
        ...

    def duplicate_user(self, field: str) -> None:
        """Record that the store rejected a duplicate username or email."""
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        """Record that the database could not be reached."""
        ...


class RoleRepositoryProbe(Protocol):
    """Domain probe for role repository operations."""

    def role_saved(self, role_id: str, name: str) -> None:
        """Record that a role was saved."""
        ...

    def roles_resolved(self, requested: int, found: int) -> None:
        """Record a batch role lookup, including dangling references."""
        ...

    def role_deleted(self, role_id: str) -> None:
        """Record that a role was deleted."""
        ...

    def duplicate_role(self, name: str) -> None:
        """Record that the store rejected a duplicate role name."""
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        """Record that the database could not be reached."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def user_saved(self, user_id: str, username: str) -> None:
        self._logger.info("user_saved", user_id=user_id, username=username)

    def user_deleted(self, user_id: str) -> None:
        self._logger.info("user_deleted", user_id=user_id)

    def user_not_found(self, lookup: str) -> None:
        self._logger.debug("user_not_found", lookup=lookup)

    def duplicate_user(self, field: str) -> None:
        self._logger.warning("duplicate_user", field=field)

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error("user_store_unavailable", operation=operation, error=error)


class DefaultRoleRepositoryProbe:
    """Default implementation of RoleRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def role_saved(self, role_id: str, name: str) -> None:
        self._logger.info("role_saved", role_id=role_id, name=name)

    def roles_resolved(self, requested: int, found: int) -> None:
        if found < requested:
            self._logger.warning(
                "dangling_role_references", requested=requested, found=found
            )
        else:
            self._logger.debug("roles_resolved", requested=requested, found=found)

    def role_deleted(self, role_id: str) -> None:
        self._logger.info("role_deleted", role_id=role_id)

    def duplicate_role(self, name: str) -> None:
        self._logger.warning("duplicate_role", name=name)

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error("role_store_unavailable", operation=operation, error=error)

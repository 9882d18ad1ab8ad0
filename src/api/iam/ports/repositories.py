"""Repository protocols (ports) for IAM bounded context.

Repository protocols define the interface for persisting and retrieving
aggregates. Users reference roles by id only; callers resolve roles through
IRoleRepository explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from iam.domain.aggregates import Role, User
from iam.domain.value_objects import RoleId, UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Usernames and emails are stored normalized (trimmed, lowercased), so the
    lookup methods expect normalized input.
    """

    async def save(self, user: User) -> None:
        """Persist a user aggregate.

        Creates a new user or updates an existing one.

        Args:
            user: The User aggregate to persist

        Raises:
            DuplicateUsernameError: If the username is taken by another user
            DuplicateUserEmailError: If the email is taken by another user
            UserStoreUnavailableError: If the database cannot be reached
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by normalized username.

        Args:
            username: The normalized username to search for

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_email(self, email: str) -> User | None:
        """Retrieve a user by normalized email."""
        ...

    async def list_users(self, offset: int, limit: int) -> list[User]:
        """List a page of users ordered by username."""
        ...

    async def count(self) -> int:
        """Total number of users."""
        ...

    async def count_with_role(self, role_id: RoleId) -> int:
        """Number of users holding a role."""
        ...

    async def delete_by_id(self, user_id: UserId) -> bool:
        """Delete a user.

        Returns:
            True if a user was deleted, False if none existed
        """
        ...


@runtime_checkable
class IRoleRepository(Protocol):
    """Repository for Role aggregate persistence."""

    async def save(self, role: Role) -> None:
        """Persist a role aggregate, replacing its permissions when it exists.

        Raises:
            DuplicateRoleNameError: If another role already has the name
            UserStoreUnavailableError: If the database cannot be reached
        """
        ...

    async def get_by_id(self, role_id: RoleId) -> Role | None:
        """Retrieve a role by its ID."""
        ...

    async def get_by_name(self, name: str) -> Role | None:
        """Retrieve a role by its unique name."""
        ...

    async def get_many(self, role_ids: Iterable[RoleId]) -> list[Role]:
        """Resolve several role references at once.

        Ids with no matching role are skipped rather than raising, so a user
        that references a deleted role keeps the rest of its grants.

        Args:
            role_ids: Role references as stored on a user

        Returns:
            The roles that exist, in no particular order
        """
        ...

    async def list_all(self) -> list[Role]:
        """List every role ordered by name."""
        ...

    async def delete_by_id(self, role_id: RoleId) -> bool:
        """Delete a role.

        Users that reference the role keep the dangling id; get_many skips it.

        Returns:
            True if a role was deleted, False if none existed
        """
        ...

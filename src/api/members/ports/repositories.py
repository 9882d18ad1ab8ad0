"""Repository protocol (port) for the Members bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from members.domain import Member, MemberField, MemberId, SortDirection


@dataclass(frozen=True)
class MemberQuery:
    """Page request for listing members.

    Attributes:
        search: Case-insensitive substring matched against name, email and
            phone number. None lists everything.
        sort_field: Field to order by
        direction: Sort direction
        offset: Rows to skip
        limit: Maximum rows to return
    """

    search: str | None = None
    sort_field: MemberField = MemberField.NAME
    direction: SortDirection = SortDirection.ASC
    offset: int = 0
    limit: int = 10


@runtime_checkable
class IMemberRepository(Protocol):
    """Repository for Member persistence.

    All methods raise DependencyUnavailableError when the store cannot be
    reached, never a driver exception.
    """

    async def find_by_field(self, field: MemberField, value: str) -> Member | None:
        """Exact-match lookup on a single field.

        Args:
            field: Field to match on (e.g. EMAIL)
            value: Already-normalized value

        Returns:
            The matching member, or None

        Raises:
            DependencyUnavailableError: If the store cannot be reached
        """
        ...

    async def get_by_id(self, member_id: MemberId) -> Member | None:
        """Retrieve a member by ID, or None if it does not exist."""
        ...

    async def save(self, member: Member) -> None:
        """Insert a new member or replace an existing one.

        Raises:
            DuplicateMemberEmailError: If the email unique constraint is violated
            DependencyUnavailableError: If the store cannot be reached
            PersistFailedError: For any other write failure
        """
        ...

    async def delete_by_id(self, member_id: MemberId) -> bool:
        """Delete a member.

        Returns:
            True if a row was deleted, False if the member did not exist
        """
        ...

    async def list(self, query: MemberQuery) -> list[Member]:
        """Return one page of members matching the query."""
        ...

    async def count(self, search: str | None = None) -> int:
        """Count members matching the search term (all members when None)."""
        ...

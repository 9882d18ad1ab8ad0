"""Port through which jobs act on members.

Jobs never touch the member store directly; every item goes through the
same request pipeline as a single HTTP request would, so validation,
authorization and auditing apply per item.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from shared_kernel.authorization import Principal


class MemberItemError(Exception):
    """Raised when one item of a bulk job fails.

    The job records the failure and moves on to the next item.
    """


class MemberOperations(Protocol):
    """Member operations available to bulk jobs."""

    async def delete_member(self, member_id: str, principal: Principal) -> None:
        """Delete one member.

        Raises:
            MemberItemError: If the member could not be deleted
        """
        ...

    async def import_member(
        self, row: Mapping[str, str | None], principal: Principal
    ) -> str:
        """Register one member from a parsed import row.

        Args:
            row: Mapping with "name", "email" and "phone_number"
            principal: Caller that started the job

        Returns:
            ID of the new member

        Raises:
            MemberItemError: If the row was rejected
        """
        ...

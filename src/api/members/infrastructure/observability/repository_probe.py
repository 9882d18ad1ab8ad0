"""Domain probe for member repository operations."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.validation import mask_email, mask_phone


class MemberRepositoryProbe(Protocol):
    """Domain probe for member repository operations."""

    def member_saved(self, member_id: str, email: str, phone_number: str) -> None:
        """Record that a member row was inserted or updated.

        Contact details are logged masked.
        """
        ...

    def member_deleted(self, member_id: str) -> None:
        """Record that a member row was deleted."""
        ...

    def duplicate_email(self, member_id: str) -> None:
        """Record that the email unique constraint rejected a write."""
        ...

    def store_unavailable(self, operation: str, error: str) -> None:
        """Record that the database could not be reached."""
        ...

    def write_failed(self, operation: str, error: str) -> None:
        """Record a non-transient write failure."""
        ...


class DefaultMemberRepositoryProbe:
    """Default implementation of MemberRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def member_saved(self, member_id: str, email: str, phone_number: str) -> None:
        self._logger.debug(
            "member_saved",
            member_id=member_id,
            email=mask_email(email),
            phone_number=mask_phone(phone_number),
        )

    def member_deleted(self, member_id: str) -> None:
        self._logger.debug("member_deleted", member_id=member_id)

    def duplicate_email(self, member_id: str) -> None:
        self._logger.warning("member_duplicate_email", member_id=member_id)

    def store_unavailable(self, operation: str, error: str) -> None:
        self._logger.error("member_store_unavailable", operation=operation, error=error)

    def write_failed(self, operation: str, error: str) -> None:
        self._logger.error("member_write_failed", operation=operation, error=error)

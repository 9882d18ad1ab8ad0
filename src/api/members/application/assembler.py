"""Builds Member entities from validated requests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime

from members.application.requests import MemberRequest
from members.domain import Member, MemberId
from shared_kernel.authorization import Principal, actor_name
from shared_kernel.validation import normalize_identity


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EntityAssembler:
    """Turns a validated MemberRequest into a Member.

    Only called after validation succeeded, so every field is present.
    Names and phone numbers are trimmed; emails are normalized. Audit stamps
    come from the injected clock and the principal's username, or "system"
    when there is no principal.
    """

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._clock = clock

    def assemble_new(
        self, request: MemberRequest, principal: Principal | None
    ) -> Member:
        """Build a brand new member with a fresh id."""
        now = self._clock()
        actor = actor_name(principal)
        return Member(
            id=MemberId.generate(),
            name=(request.name or "").strip(),
            email=normalize_identity(request.email or ""),
            phone_number=(request.phone_number or "").strip(),
            created_at=now,
            updated_at=now,
            created_by=actor,
            updated_by=actor,
        )

    def assemble_update(
        self,
        existing: Member,
        request: MemberRequest,
        principal: Principal | None,
    ) -> Member:
        """Apply a request to an existing member.

        id, created_at and created_by are carried over unchanged.
        """
        return replace(
            existing,
            name=(request.name or "").strip(),
            email=normalize_identity(request.email or ""),
            phone_number=(request.phone_number or "").strip(),
            updated_at=self._clock(),
            updated_by=actor_name(principal),
        )

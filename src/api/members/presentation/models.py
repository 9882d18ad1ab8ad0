"""Pydantic models for Members API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from members.application import MemberPage, MemberRequest
from members.domain import Member


class MemberPayload(BaseModel):
    """Request body for creating or replacing a member.

    Fields are optional at the schema level so that missing values reach the
    field validator and are reported together with every other violation.
    """

    name: str | None = Field(None, description="Letters only, 1-25 characters")
    email: str | None = Field(None, description="Contact email, unique per member")
    phone_number: str | None = Field(
        None, description="10 digits starting with 6, 7, 8 or 9"
    )

    def to_request(self) -> MemberRequest:
        return MemberRequest(
            name=self.name, email=self.email, phone_number=self.phone_number
        )


class MemberResponse(BaseModel):
    """Response model for a member."""

    id: str = Field(..., description="Member ID (ULID format)")
    name: str
    email: str
    phone_number: str
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str

    @classmethod
    def from_domain(cls, member: Member) -> MemberResponse:
        """Convert domain Member to API response."""
        return cls(
            id=member.id.value,
            name=member.name,
            email=member.email,
            phone_number=member.phone_number,
            created_at=member.created_at,
            updated_at=member.updated_at,
            created_by=member.created_by,
            updated_by=member.updated_by,
        )


class MemberPageResponse(BaseModel):
    """Response model for one page of members."""

    content: list[MemberResponse]
    total_elements: int
    total_pages: int
    page: int
    size: int
    first: bool
    last: bool

    @classmethod
    def from_page(cls, page: MemberPage) -> MemberPageResponse:
        return cls(
            content=[MemberResponse.from_domain(member) for member in page.items],
            total_elements=page.total,
            total_pages=page.total_pages,
            page=page.page,
            size=page.size,
            first=page.is_first,
            last=page.is_last,
        )

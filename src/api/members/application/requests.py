"""Request and result types for member operations."""

from __future__ import annotations

from dataclasses import dataclass

from members.domain import Member

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10
DEFAULT_SORT = "name,asc"


@dataclass(frozen=True)
class MemberRequest:
    """Raw member fields as received from a caller, not yet validated."""

    name: str | None
    email: str | None
    phone_number: str | None

    def field_values(self) -> dict[str, str | None]:
        """Field name to raw value, in validation order."""
        return {
            "name": self.name,
            "email": self.email,
            "phone_number": self.phone_number,
        }


@dataclass(frozen=True)
class MemberPage:
    """One page of members plus paging metadata."""

    items: list[Member]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.size) if self.size else 0

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page >= self.total_pages - 1

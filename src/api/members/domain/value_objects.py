"""Value objects for the Members domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class MemberId:
    """Identifier for a Member.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> MemberId:
        """Generate a new MemberId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> MemberId:
        """Create MemberId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid MemberId: {value}") from e

        return cls(value=value)


class MemberField(StrEnum):
    """Member attributes that can be looked up or sorted on."""

    NAME = "name"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


UNIQUE_FIELDS: frozenset[MemberField] = frozenset({MemberField.EMAIL})


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

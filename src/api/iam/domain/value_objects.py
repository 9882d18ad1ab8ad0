"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: ULID string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class RoleId:
    """Identifier for a Role aggregate.

    Users reference roles by this identifier only; roles are resolved
    through an explicit repository lookup.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> RoleId:
        """Generate a new RoleId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> RoleId:
        """Create RoleId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid RoleId: {value}") from e

        return cls(value=value)


class RoleName(StrEnum):
    """Names of the roles seeded at startup."""

    ADMIN = "ADMIN"
    USER = "USER"
    VIEWER = "VIEWER"

"""Member entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from members.domain.value_objects import MemberId


@dataclass(frozen=True)
class Member:
    """A directory entry.

    Instances are only produced by the entity assembler from validated,
    normalized input, or rehydrated from storage. The email is stored
    normalized (trimmed, lowercased) and is unique across all members.
    """

    id: MemberId
    name: str
    email: str
    phone_number: str
    created_at: datetime
    updated_at: datetime
    created_by: str
    updated_by: str

    def __str__(self) -> str:
        """Return string representation."""
        return f"Member({self.id}, {self.name})"

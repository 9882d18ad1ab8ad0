"""Value objects for the Audit bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class AuditLogId:
    """Identifier for an audit log entry (ULID, time-sortable)."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> AuditLogId:
        """Generate a new ULID-based audit log id."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> AuditLogId:
        """Create from string representation.

        Raises:
            ValueError: If the value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid AuditLogId: {value}") from e
        return cls(value=value)


class AuditStatus(StrEnum):
    """Outcome recorded on an audit entry."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class AuditAction(StrEnum):
    """Audited operations."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"

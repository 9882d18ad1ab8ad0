"""Value objects for the Jobs domain."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID


@dataclass(frozen=True)
class JobId:
    """Identifier for a Job aggregate."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> JobId:
        """Generate a new JobId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> JobId:
        """Create JobId from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid JobId: {value}") from e
        return cls(value=value)


class JobType(StrEnum):
    BULK_DELETE = "BULK_DELETE"
    EXCEL_UPLOAD = "EXCEL_UPLOAD"


class JobStatus(StrEnum):
    """Job lifecycle: PENDING -> IN_PROGRESS -> COMPLETED / FAILED / CANCELLED."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self not in ACTIVE_STATUSES


ACTIVE_STATUSES: frozenset[JobStatus] = frozenset(
    {JobStatus.PENDING, JobStatus.IN_PROGRESS}
)

"""Port through which other bounded contexts hand off audit entries."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from audit.domain import AuditLogEntry


@runtime_checkable
class AuditSink(Protocol):
    """Accepts audit entries without blocking the caller.

    Implementations must return promptly and must not raise: a failure to
    record an audit entry never fails the operation being audited.
    """

    def record(self, entry: AuditLogEntry) -> None:
        """Hand off an entry for asynchronous persistence."""
        ...

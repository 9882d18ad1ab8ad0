"""Repository protocol (port) for audit log persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from audit.domain import AuditAction, AuditLogEntry, AuditStatus


@runtime_checkable
class IAuditLogRepository(Protocol):
    """Append-only store of audit entries.

    Query methods return newest entries first and never more than ``limit``.
    """

    async def append(self, entry: AuditLogEntry) -> None:
        """Insert an entry. Entries are never updated or deleted."""
        ...

    async def find_by_principal(
        self, principal: str, limit: int = 100
    ) -> list[AuditLogEntry]:
        """Entries recorded for a caller."""
        ...

    async def find_by_entity(
        self, entity_type: str, entity_id: str, limit: int = 100
    ) -> list[AuditLogEntry]:
        """History of a single entity."""
        ...

    async def find_by_action(
        self, action: AuditAction, limit: int = 100
    ) -> list[AuditLogEntry]:
        """Entries for one kind of operation."""
        ...

    async def find_by_status(
        self, status: AuditStatus, limit: int = 100
    ) -> list[AuditLogEntry]:
        """Entries with the given outcome (e.g. every FAILURE)."""
        ...

    async def find_between(
        self, start: datetime, end: datetime, limit: int = 100
    ) -> list[AuditLogEntry]:
        """Entries whose timestamp falls in [start, end]."""
        ...

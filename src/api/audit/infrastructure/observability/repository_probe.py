"""Domain probe for audit log repository operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class AuditLogRepositoryProbe(Protocol):
    """Domain probe for audit log persistence."""

    def entry_appended(self, entry_id: str, action: str, status: str) -> None:
        """Record that an entry was inserted."""
        ...

    def entries_queried(self, query: str, count: int) -> None:
        """Record that a query returned entries."""
        ...


class DefaultAuditLogRepositoryProbe:
    """Default implementation of AuditLogRepositoryProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def entry_appended(self, entry_id: str, action: str, status: str) -> None:
        self._logger.debug(
            "audit_entry_appended",
            entry_id=entry_id,
            action=action,
            status=status,
        )

    def entries_queried(self, query: str, count: int) -> None:
        self._logger.debug("audit_entries_queried", query=query, count=count)

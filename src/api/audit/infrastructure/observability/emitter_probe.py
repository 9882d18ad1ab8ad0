"""Domain probe for the audit emitter.

Following Domain-Oriented Observability patterns, this probe captures the
emitter's lifecycle and every entry it drops or fails to store.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class AuditEmitterProbe(Protocol):
    """Domain probe for audit emitter operations."""

    def emitter_started(self, max_queue_size: int) -> None:
        """Record that the background worker started."""
        ...

    def emitter_stopped(self, dropped_total: int) -> None:
        """Record that the background worker stopped."""
        ...

    def entry_dropped(self, entry_id: str, action: str, dropped_total: int) -> None:
        """Record that the oldest pending entry was discarded on overflow."""
        ...

    def entry_stored(self, entry_id: str, action: str) -> None:
        """Record that an entry reached the store."""
        ...

    def store_failed(self, entry_id: str, action: str, error: str) -> None:
        """Record that the store rejected an entry."""
        ...

    def flush_timed_out(self, pending: int) -> None:
        """Record that shutdown gave up waiting for pending entries."""
        ...


class DefaultAuditEmitterProbe:
    """Default implementation of AuditEmitterProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def emitter_started(self, max_queue_size: int) -> None:
        self._logger.info("audit_emitter_started", max_queue_size=max_queue_size)

    def emitter_stopped(self, dropped_total: int) -> None:
        self._logger.info("audit_emitter_stopped", dropped_total=dropped_total)

    def entry_dropped(self, entry_id: str, action: str, dropped_total: int) -> None:
        self._logger.warning(
            "audit_entry_dropped",
            entry_id=entry_id,
            action=action,
            dropped_total=dropped_total,
        )

    def entry_stored(self, entry_id: str, action: str) -> None:
        self._logger.debug("audit_entry_stored", entry_id=entry_id, action=action)

    def store_failed(self, entry_id: str, action: str, error: str) -> None:
        self._logger.error(
            "audit_store_failed",
            entry_id=entry_id,
            action=action,
            error=error,
        )

    def flush_timed_out(self, pending: int) -> None:
        self._logger.warning("audit_flush_timed_out", pending=pending)

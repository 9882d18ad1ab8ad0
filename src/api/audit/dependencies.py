"""Dependency wiring for the Audit bounded context.

The emitter is process-wide: one queue and one worker task shared by every
request. The application lifespan starts and stops it.
"""

from __future__ import annotations

from audit.infrastructure import AuditEmitter, AuditLogRepository
from audit.ports import AuditSink, IAuditLogRepository
from infrastructure.database.dependencies import get_sessionmaker
from infrastructure.settings import get_audit_settings

# Module-level emitter instance (created on first use)
_emitter: AuditEmitter | None = None


def get_audit_log_repository() -> IAuditLogRepository:
    """Get an audit store bound to the shared session factory."""
    return AuditLogRepository(session_factory=get_sessionmaker())


def get_audit_emitter() -> AuditEmitter:
    """Get the process-wide audit emitter (singleton)."""
    global _emitter
    if _emitter is None:
        settings = get_audit_settings()
        _emitter = AuditEmitter(
            store=get_audit_log_repository(),
            max_queue_size=settings.queue_size,
            flush_timeout_seconds=settings.flush_timeout_seconds,
        )
    return _emitter


def get_audit_sink() -> AuditSink:
    """FastAPI dependency exposing the emitter through the AuditSink port."""
    return get_audit_emitter()


async def shutdown_audit_emitter() -> None:
    """Flush and stop the emitter, allowing it to be recreated."""
    global _emitter
    if _emitter is not None:
        await _emitter.stop()
        _emitter = None

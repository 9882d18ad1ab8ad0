"""Infrastructure layer for the Audit bounded context."""

from audit.infrastructure.emitter import AuditEmitter
from audit.infrastructure.models import AuditLogModel
from audit.infrastructure.repository import AuditLogRepository

__all__ = [
    "AuditEmitter",
    "AuditLogModel",
    "AuditLogRepository",
]

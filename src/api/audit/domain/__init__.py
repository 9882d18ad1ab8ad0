"""Domain layer for the Audit bounded context."""

from audit.domain.entry import AuditLogEntry
from audit.domain.value_objects import AuditAction, AuditLogId, AuditStatus

__all__ = [
    "AuditAction",
    "AuditLogEntry",
    "AuditLogId",
    "AuditStatus",
]

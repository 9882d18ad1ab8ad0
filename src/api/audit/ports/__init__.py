"""Ports for the Audit bounded context."""

from audit.ports.repositories import IAuditLogRepository
from audit.ports.sink import AuditSink

__all__ = [
    "AuditSink",
    "IAuditLogRepository",
]
